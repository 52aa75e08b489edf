from collections import Counter
from collections.abc import Iterable

from labmatch.matching.models import AnalysisResult, AnalysisStatus, AnalysisSummary


def summarize(results: Iterable[AnalysisResult]) -> AnalysisSummary:
    counts = Counter(result.status for result in results)
    total = sum(counts.values())
    return AnalysisSummary(
        total=total,
        measured=total - counts[AnalysisStatus.NOT_MEASURED],
        not_measured=counts[AnalysisStatus.NOT_MEASURED],
        in_range=counts[AnalysisStatus.IN_RANGE],
        below_range=counts[AnalysisStatus.BELOW],
        above_range=counts[AnalysisStatus.ABOVE],
        unknown=counts[AnalysisStatus.UNKNOWN],
    )
