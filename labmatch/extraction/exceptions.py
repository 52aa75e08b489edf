class ExtractionError(Exception):
    """Raised when extraction output cannot be used."""


class ExtractionValidationError(ExtractionError):
    """Raised when an extraction payload does not have the expected shape."""
