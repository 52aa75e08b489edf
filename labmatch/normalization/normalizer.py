from labmatch.extraction.models import ExtractedReading
from labmatch.logging.logger import Log
from labmatch.normalization.models import NormalizedReading
from labmatch.normalization.name_resolver import NameResolver
from labmatch.ranges.parser import parse_numeric
from labmatch.ranges.units import conversion_factor, format_number, normalize_unit, units_equivalent
from labmatch.taxonomy.snapshot import TaxonomySnapshot


class ReadingNormalizer:
    """Turns raw readings into NormalizedReadings.

    Matched numeric readings are expressed in their benchmark's preferred
    unit when the unit is equivalent or a conversion factor is known;
    otherwise value and unit are kept as reported (unit spelling normalized).
    Unmatched and non-numeric readings pass through unchanged.
    """

    def __init__(self, snapshot: TaxonomySnapshot, resolver: NameResolver | None = None) -> None:
        self._snapshot = snapshot
        self._resolver = resolver or NameResolver(snapshot)

    @property
    def resolver(self) -> NameResolver:
        return self._resolver

    def normalize(self, reading: ExtractedReading) -> NormalizedReading:
        resolution = self._resolver.resolve(reading.name)
        number = parse_numeric(reading.value)
        value = reading.value.strip()
        unit = normalize_unit(reading.unit)
        converted = False

        benchmark = self._snapshot.get(resolution.canonical_name) if resolution.matched else None
        target = normalize_unit(benchmark.preferred_unit) if benchmark else ""
        if number is not None and unit and target:
            if units_equivalent(unit, target):
                unit = target
            else:
                factor = conversion_factor(resolution.canonical_name, unit, target)
                if factor is not None:
                    number *= factor
                    value = format_number(number)
                    Log.debug(
                        f"Converted {resolution.canonical_name}: "
                        f"{reading.value} {reading.unit} -> {value} {target}"
                    )
                    unit = target
                    converted = True

        return NormalizedReading(
            name=resolution.canonical_name,
            value=value,
            unit=unit,
            original_name=reading.name,
            original_value=reading.value,
            original_unit=reading.unit,
            confidence=resolution.confidence,
            conversion_applied=converted,
            is_numeric=number is not None,
            numeric_value=number,
            collection_date=reading.collection_date,
        )
