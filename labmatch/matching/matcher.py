"""Benchmark-shaped matching of readings against the taxonomy.

The output always holds exactly one AnalysisResult per active benchmark,
sorted by canonical name, whether or not a reading was supplied for it.
"""

from collections.abc import Iterable

from labmatch.extraction.models import ExtractedReading
from labmatch.logging.logger import Log
from labmatch.matching.models import NOT_MEASURED, AnalysisResult, AnalysisStatus
from labmatch.normalization.models import NormalizedReading
from labmatch.normalization.normalizer import ReadingNormalizer
from labmatch.ranges.evaluator import evaluate
from labmatch.ranges.parser import parse_numeric, parse_range, resolve_bounds
from labmatch.taxonomy.exceptions import TaxonomyError
from labmatch.taxonomy.models import BenchmarkDefinition, validate_sex
from labmatch.taxonomy.snapshot import TaxonomySnapshot


class ReadingMatcher:
    def __init__(
        self,
        snapshot: TaxonomySnapshot | None,
        normalizer: ReadingNormalizer | None = None,
    ) -> None:
        if snapshot is None:
            raise TaxonomyError("ReadingMatcher requires a taxonomy snapshot")
        self._snapshot = snapshot
        self._normalizer = normalizer or ReadingNormalizer(snapshot)

    def normalize_all(self, readings: Iterable[ExtractedReading]) -> list[NormalizedReading]:
        return [self._normalizer.normalize(reading) for reading in readings]

    def match(self, readings: Iterable[ExtractedReading], sex: str) -> list[AnalysisResult]:
        """One result per active benchmark for *sex* ("male" or "female").

        Raises:
            ValueError: if *sex* is not a supported range category.
        """
        validate_sex(sex)
        return self.match_normalized(self.normalize_all(readings), sex)

    def match_normalized(
        self,
        readings: Iterable[NormalizedReading],
        sex: str,
    ) -> list[AnalysisResult]:
        validate_sex(sex)
        chosen: dict[str, NormalizedReading] = {}
        for reading in readings:
            if not reading.matched:
                continue
            current = chosen.get(reading.name)
            if current is None or _rank(reading) > _rank(current):
                chosen[reading.name] = reading

        results = [
            self._result(benchmark, chosen.get(benchmark.name), sex)
            for benchmark in self._snapshot.active_benchmarks
        ]
        results.sort(key=lambda result: (result.biomarker_name.casefold(), result.biomarker_name))
        Log.info(f"Matched {len(chosen)} of {len(results)} benchmarks (sex={sex})")
        return results

    def _result(
        self,
        benchmark: BenchmarkDefinition,
        reading: NormalizedReading | None,
        sex: str,
    ) -> AnalysisResult:
        expression = benchmark.range_for(sex)
        if reading is None:
            return AnalysisResult(
                biomarker_name=benchmark.name,
                value=NOT_MEASURED,
                unit=benchmark.preferred_unit,
                optimal_range=expression,
                status=AnalysisStatus.NOT_MEASURED,
                category=benchmark.category,
            )
        return AnalysisResult(
            biomarker_name=benchmark.name,
            value=reading.value,
            unit=reading.unit,
            optimal_range=expression,
            status=self._status(benchmark, reading, expression),
            category=benchmark.category,
            collection_date=reading.collection_date,
            reading=reading,
        )

    @staticmethod
    def _status(
        benchmark: BenchmarkDefinition,
        reading: NormalizedReading,
        expression: str,
    ) -> AnalysisStatus:
        number = reading.numeric_value if reading.is_numeric else None
        if reading.is_numeric and number is None:
            number = parse_numeric(reading.value)
        if number is None:
            return AnalysisStatus.NOT_MEASURED
        bounds = resolve_bounds(parse_range(expression), reading.unit, benchmark.name)
        if bounds is None:
            return AnalysisStatus.UNKNOWN
        return AnalysisStatus(evaluate(number, bounds).value)


def _rank(reading: NormalizedReading) -> tuple[bool, str]:
    """Numeric beats placeholder, then the later collection date wins."""
    return reading.is_numeric, reading.collection_date or ""
