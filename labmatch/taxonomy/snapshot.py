from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from functools import cached_property

from labmatch.taxonomy.models import BenchmarkDefinition


@dataclass(frozen=True)
class TaxonomySnapshot:
    """Immutable view of the benchmark catalog for one analysis run.

    Overrides are merged once, when the snapshot is built: an override
    replaces the default of the same name (exact match) in place, an
    override with a new name is appended after the defaults.
    """

    benchmarks: tuple[BenchmarkDefinition, ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        defaults: Iterable[BenchmarkDefinition],
        overrides: Iterable[BenchmarkDefinition] = (),
    ) -> "TaxonomySnapshot":
        merged: dict[str, BenchmarkDefinition] = {}
        for benchmark in defaults:
            merged[benchmark.name] = benchmark
        for override in overrides:
            merged[override.name] = replace(override, is_custom=True)
        return cls(benchmarks=tuple(merged.values()))

    @cached_property
    def active_benchmarks(self) -> tuple[BenchmarkDefinition, ...]:
        return tuple(benchmark for benchmark in self.benchmarks if benchmark.active)

    @cached_property
    def _by_name(self) -> dict[str, BenchmarkDefinition]:
        return {benchmark.name: benchmark for benchmark in self.active_benchmarks}

    def get(self, name: str) -> BenchmarkDefinition | None:
        """Look up an active benchmark by its exact canonical name."""
        return self._by_name.get(name)
