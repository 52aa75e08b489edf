from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from labmatch.clients.models import MatchDecision
from labmatch.consolidation.models import ConfidenceTier, ConsolidatedIdentity
from labmatch.matching.models import AnalysisResult, AnalysisSummary
from labmatch.normalization.models import NormalizedReading


@dataclass(frozen=True)
class ResultSet:
    """Benchmark-shaped results for one lab visit (None: undated readings)."""

    collection_date: str | None
    results: tuple[AnalysisResult, ...]
    summary: AnalysisSummary


@dataclass(frozen=True)
class AnalysisReport:
    """Everything the persistence collaborator needs from one run."""

    identity: ConsolidatedIdentity
    discrepancies: tuple[str, ...]
    confidence: ConfidenceTier
    sex: str
    result_sets: tuple[ResultSet, ...] = field(default_factory=tuple)
    unmatched_readings: tuple[NormalizedReading, ...] = field(default_factory=tuple)
    decision: MatchDecision | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready dict; enums are rendered as their string values."""
        return asdict(self, dict_factory=_json_dict)


def _json_dict(items: list[tuple[str, Any]]) -> dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in items}
