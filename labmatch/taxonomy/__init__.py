from labmatch.taxonomy.exceptions import TaxonomyError, TaxonomyValidationError
from labmatch.taxonomy.loader import load_benchmarks, load_snapshot
from labmatch.taxonomy.models import BenchmarkDefinition
from labmatch.taxonomy.snapshot import TaxonomySnapshot

__all__ = [
    "BenchmarkDefinition",
    "TaxonomyError",
    "TaxonomySnapshot",
    "TaxonomyValidationError",
    "load_benchmarks",
    "load_snapshot",
]
