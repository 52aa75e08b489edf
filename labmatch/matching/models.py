from dataclasses import dataclass
from enum import Enum

from labmatch.normalization.models import NormalizedReading

NOT_MEASURED = "N/A"


class AnalysisStatus(str, Enum):
    BELOW = "below-range"
    IN_RANGE = "in-range"
    ABOVE = "above-range"
    UNKNOWN = "unknown"
    NOT_MEASURED = "not-measured"


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome for one benchmark: the chosen reading compared to its range."""

    biomarker_name: str
    value: str
    unit: str
    optimal_range: str
    status: AnalysisStatus
    category: str
    collection_date: str | None = None
    reading: NormalizedReading | None = None

    @property
    def measured(self) -> bool:
        return self.status is not AnalysisStatus.NOT_MEASURED


@dataclass(frozen=True)
class AnalysisSummary:
    """Counts over one benchmark-shaped result set."""

    total: int = 0
    measured: int = 0
    not_measured: int = 0
    in_range: int = 0
    below_range: int = 0
    above_range: int = 0
    unknown: int = 0

    @property
    def out_of_range(self) -> int:
        return self.below_range + self.above_range
