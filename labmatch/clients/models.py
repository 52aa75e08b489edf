from dataclasses import dataclass, field
from enum import Enum

from labmatch.consolidation.models import ConfidenceTier


class MatchAction(str, Enum):
    REUSE_EXISTING = "reuse-existing"
    CREATE_NEW = "create-new"
    MANUAL_SELECT = "manual-select"


@dataclass(frozen=True)
class ClientRecord:
    """An existing client as supplied by the caller's candidate search."""

    id: str
    full_name: str
    date_of_birth: str | None = None
    sex: str | None = None
    status: str = "active"  # active, past or archived
    notes: str | None = None


@dataclass(frozen=True)
class CandidateScore:
    client_id: str
    confidence: float
    earned_points: int
    possible_points: int
    name_similarity: float | None = None


@dataclass(frozen=True)
class MatchDecision:
    """Which client record the analysis belongs to.

    ``confidence`` describes the decision itself: a ``create-new`` decision
    with ``HIGH`` confidence means no candidate came close.
    """

    client: ClientRecord | None
    confidence: ConfidenceTier
    requires_confirmation: bool
    suggested_action: MatchAction
    match_score: float = 0.0
    scores: tuple[CandidateScore, ...] = field(default_factory=tuple)
