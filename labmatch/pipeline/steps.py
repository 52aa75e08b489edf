from labmatch.clients.resolver import ClientIdentityResolver
from labmatch.consolidation.consolidator import Consolidator
from labmatch.consolidation.models import NO_DATE
from labmatch.logging.logger import Log
from labmatch.matching.matcher import ReadingMatcher
from labmatch.matching.summary import summarize
from labmatch.pipeline.models import ResultSet
from labmatch.pipeline.pipeline import AnalysisContext, AnalysisStep
from labmatch.taxonomy.models import SEX_CATEGORIES, validate_sex


class ConsolidateStep(AnalysisStep):
    def __init__(self, consolidator: Consolidator) -> None:
        self._consolidator = consolidator

    def run(self, context: AnalysisContext) -> AnalysisContext:
        context.consolidation = self._consolidator.consolidate(context.documents)
        return context


class MatchReadingsStep(AnalysisStep):
    """Matches every date group separately; one ResultSet per lab visit."""

    def __init__(self, matcher: ReadingMatcher, default_sex: str) -> None:
        self._matcher = matcher
        self._default_sex = validate_sex(default_sex)

    def run(self, context: AnalysisContext) -> AnalysisContext:
        if context.consolidation is None:
            raise ValueError("AnalysisContext.consolidation must be set before matching")
        identity_sex = context.consolidation.identity.sex
        context.sex = identity_sex if identity_sex in SEX_CATEGORIES else self._default_sex

        for date_key, readings in context.consolidation.reading_groups.items():
            normalized = self._matcher.normalize_all(readings)
            results = tuple(self._matcher.match_normalized(normalized, context.sex))
            context.result_sets.append(
                ResultSet(
                    collection_date=None if date_key == NO_DATE else date_key,
                    results=results,
                    summary=summarize(results),
                )
            )
            context.unmatched_readings.extend(r for r in normalized if not r.matched)

        if context.unmatched_readings:
            Log.info(f"{len(context.unmatched_readings)} readings matched no benchmark")
        return context


class ResolveClientStep(AnalysisStep):
    def __init__(self, resolver: ClientIdentityResolver) -> None:
        self._resolver = resolver

    def run(self, context: AnalysisContext) -> AnalysisContext:
        if context.consolidation is None:
            raise ValueError("AnalysisContext.consolidation must be set before client resolution")
        context.decision = self._resolver.resolve(
            context.consolidation.identity,
            context.candidates,
        )
        return context
