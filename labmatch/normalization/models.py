from dataclasses import dataclass

from labmatch.normalization.name_resolver import MATCH_THRESHOLD


@dataclass(frozen=True)
class NormalizedReading:
    """A reading mapped onto the taxonomy, with full provenance."""

    name: str
    value: str
    unit: str
    original_name: str
    original_value: str
    original_unit: str
    confidence: float
    conversion_applied: bool = False
    is_numeric: bool = False
    numeric_value: float | None = None  # unrounded, in `unit`
    collection_date: str | None = None

    @property
    def matched(self) -> bool:
        return self.confidence >= MATCH_THRESHOLD
