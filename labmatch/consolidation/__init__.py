from labmatch.consolidation.consolidator import Consolidator
from labmatch.consolidation.models import (
    NO_DATE,
    ConfidenceTier,
    ConsolidatedIdentity,
    ConsolidationResult,
)

__all__ = [
    "NO_DATE",
    "ConfidenceTier",
    "ConsolidatedIdentity",
    "ConsolidationResult",
    "Consolidator",
]
