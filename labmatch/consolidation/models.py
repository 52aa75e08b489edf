from dataclasses import dataclass, field
from enum import Enum

from labmatch.extraction.models import ExtractedReading

NO_DATE = "no-date"


class ConfidenceTier(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class ConsolidatedIdentity:
    name: str | None = None
    date_of_birth: str | None = None
    sex: str | None = None
    collection_date: str | None = None  # most recent visit


@dataclass(frozen=True)
class ConsolidationResult:
    """One patient identity and date-grouped readings for an upload batch.

    ``reading_groups`` maps each collection date (``YYYY-MM-DD``) to the
    deduplicated readings of that visit, in chronological order, with the
    ``NO_DATE`` bucket last.
    """

    identity: ConsolidatedIdentity
    reading_groups: dict[str, tuple[ExtractedReading, ...]] = field(default_factory=dict)
    discrepancies: tuple[str, ...] = ()
    confidence: ConfidenceTier = ConfidenceTier.HIGH

    @property
    def visit_dates(self) -> tuple[str, ...]:
        return tuple(key for key in self.reading_groups if key != NO_DATE)
