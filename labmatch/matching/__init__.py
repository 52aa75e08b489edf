from labmatch.matching.matcher import ReadingMatcher
from labmatch.matching.models import NOT_MEASURED, AnalysisResult, AnalysisStatus, AnalysisSummary
from labmatch.matching.summary import summarize

__all__ = [
    "NOT_MEASURED",
    "AnalysisResult",
    "AnalysisStatus",
    "AnalysisSummary",
    "ReadingMatcher",
    "summarize",
]
