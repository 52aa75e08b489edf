class TaxonomyError(Exception):
    """Raised when the benchmark taxonomy is missing or cannot be loaded."""


class TaxonomyValidationError(TaxonomyError):
    """Raised when a benchmark catalog entry violates the catalog format."""
