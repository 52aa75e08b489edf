from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from labmatch.clients.models import ClientRecord, MatchDecision
from labmatch.consolidation.models import ConsolidationResult
from labmatch.extraction.models import SourceDocument
from labmatch.normalization.models import NormalizedReading
from labmatch.pipeline.models import ResultSet


@dataclass(slots=True)
class AnalysisContext:
    documents: tuple[SourceDocument, ...]
    candidates: tuple[ClientRecord, ...] = ()
    consolidation: ConsolidationResult | None = None
    sex: str = ""
    result_sets: list[ResultSet] = field(default_factory=list)
    unmatched_readings: list[NormalizedReading] = field(default_factory=list)
    decision: MatchDecision | None = None


class AnalysisStep(ABC):
    @abstractmethod
    def run(self, context: AnalysisContext) -> AnalysisContext:
        raise NotImplementedError
