"""Maps raw biomarker names in any language onto canonical taxonomy names.

Resolution order:
1. Exact lookup of the folded name in the alias index (confidence 1.0).
2. Lookup after stripping specimen/qualifier words such as ``serum`` or
   ``level`` from either end (confidence 0.8).
3. Passthrough of the raw name (confidence 0.3, treated as unmatched).

The alias index is a plain dict keyed by folded text, built once per
taxonomy snapshot. Canonical names are indexed before aliases, so a
canonical name always wins a key collision; between aliases the first one
indexed wins.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from labmatch.logging.logger import Log
from labmatch.normalization.text import TextFolder
from labmatch.taxonomy.exceptions import TaxonomyError
from labmatch.taxonomy.snapshot import TaxonomySnapshot

EXACT_CONFIDENCE = 1.0
STRIPPED_CONFIDENCE = 0.8
UNMATCHED_CONFIDENCE = 0.3
MATCH_THRESHOLD = 0.5

_PREFIXES = frozenset({"serum", "plasma", "blood", "total", "free"})
_SUFFIXES = frozenset({"serum", "plasma", "level", "count"})


@dataclass(frozen=True)
class NameResolution:
    """Outcome of resolving one raw name."""

    canonical_name: str
    original_name: str
    confidence: float
    method: str  # "exact", "stripped" or "unmatched"

    @property
    def matched(self) -> bool:
        return self.confidence >= MATCH_THRESHOLD


class NameResolver:
    """Resolves raw names against one taxonomy snapshot."""

    def __init__(self, snapshot: TaxonomySnapshot | None, folder: TextFolder | None = None) -> None:
        if snapshot is None:
            raise TaxonomyError("NameResolver requires a taxonomy snapshot")
        self._folder = folder or TextFolder()
        self._index = self._build_index(snapshot)

    @property
    def index_size(self) -> int:
        return len(self._index)

    def resolve(self, name: str) -> NameResolution:
        key = self._folder.fold(name)
        canonical = self._index.get(key)
        if canonical is not None:
            return NameResolution(canonical, name, EXACT_CONFIDENCE, "exact")
        for stripped in self._stripped_keys(key):
            canonical = self._index.get(stripped)
            if canonical is not None:
                return NameResolution(canonical, name, STRIPPED_CONFIDENCE, "stripped")
        Log.debug(f"Unmatched biomarker name: {name!r}")
        return NameResolution(name, name, UNMATCHED_CONFIDENCE, "unmatched")

    def _build_index(self, snapshot: TaxonomySnapshot) -> dict[str, str]:
        index: dict[str, str] = {}
        benchmarks = snapshot.active_benchmarks
        entries = [(b.name, b.name) for b in benchmarks]
        entries += [(alias, b.name) for b in benchmarks for alias in b.aliases]
        for text, canonical in entries:
            key = self._folder.fold(text)
            if not key:
                continue
            existing = index.setdefault(key, canonical)
            if existing != canonical:
                Log.debug(
                    f"Alias collision on {key!r}: keeping {existing!r}, ignoring {canonical!r}"
                )
        return index

    @staticmethod
    def _stripped_keys(key: str) -> Iterator[str]:
        """Keys with qualifier words removed from the front and/or back."""
        tokens = key.split()
        starts = [0]
        while starts[-1] < len(tokens) - 1 and tokens[starts[-1]] in _PREFIXES:
            starts.append(starts[-1] + 1)
        ends = [len(tokens)]
        while ends[-1] > 1 and tokens[ends[-1] - 1] in _SUFFIXES:
            ends.append(ends[-1] - 1)
        for start in starts:
            for end in ends:
                if start < end and (start, end) != (0, len(tokens)):
                    yield " ".join(tokens[start:end])
