from collections.abc import Iterable, Sequence
from typing import Any

from labmatch.clients.models import ClientRecord
from labmatch.clients.resolver import ClientIdentityResolver
from labmatch.config.settings import Settings
from labmatch.consolidation.consolidator import Consolidator
from labmatch.extraction.models import SourceDocument
from labmatch.extraction.validator import build_document
from labmatch.logging.logger import Log
from labmatch.matching.matcher import ReadingMatcher
from labmatch.normalization.name_resolver import NameResolver
from labmatch.normalization.normalizer import ReadingNormalizer
from labmatch.pipeline.models import AnalysisReport
from labmatch.pipeline.pipeline import AnalysisContext, AnalysisStep
from labmatch.pipeline.steps import ConsolidateStep, MatchReadingsStep, ResolveClientStep
from labmatch.taxonomy.loader import load_snapshot
from labmatch.taxonomy.snapshot import TaxonomySnapshot


class Analyzer:
    """Runs one analysis over an upload batch.

    Pipeline: consolidate -> match readings per visit -> resolve client.
    """

    def __init__(self, steps: Sequence[AnalysisStep]) -> None:
        self._steps = tuple(steps)

    def run(
        self,
        documents: Sequence[SourceDocument],
        candidates: Iterable[ClientRecord] = (),
    ) -> AnalysisReport:
        """Analyze *documents* in the given order against a candidate pool."""
        context = AnalysisContext(documents=tuple(documents), candidates=tuple(candidates))
        Log.info(f"Analyzing {len(context.documents)} documents")
        for step in self._steps:
            context = step.run(context)
        return _build_report(context)

    def run_payloads(
        self,
        payloads: Sequence[tuple[str, Any]],
        candidates: Iterable[ClientRecord] = (),
    ) -> AnalysisReport:
        """Validate raw ``(document_id, payload)`` pairs, then ``run`` them.

        Raises:
            ExtractionValidationError: if a payload has the wrong shape.
        """
        documents = [build_document(payload, document_id) for document_id, payload in payloads]
        return self.run(documents, candidates)


def _build_report(context: AnalysisContext) -> AnalysisReport:
    if context.consolidation is None:
        raise ValueError("Analysis finished without a consolidation result")
    return AnalysisReport(
        identity=context.consolidation.identity,
        discrepancies=context.consolidation.discrepancies,
        confidence=context.consolidation.confidence,
        sex=context.sex,
        result_sets=tuple(context.result_sets),
        unmatched_readings=tuple(context.unmatched_readings),
        decision=context.decision,
    )


def build_analyzer(
    settings: Settings,
    snapshot: TaxonomySnapshot | None = None,
) -> Analyzer:
    """Build an Analyzer over *snapshot*, or over the configured catalog."""
    Log.configure(settings.log_level)
    if snapshot is None:
        snapshot = load_snapshot(settings)
    resolver = NameResolver(snapshot)
    matcher = ReadingMatcher(snapshot, ReadingNormalizer(snapshot, resolver))
    return Analyzer(
        steps=[
            ConsolidateStep(Consolidator(resolver)),
            MatchReadingsStep(matcher, settings.default_sex),
            ResolveClientStep(ClientIdentityResolver()),
        ]
    )
