from labmatch.extraction.exceptions import ExtractionError, ExtractionValidationError
from labmatch.extraction.models import ExtractedReading, PatientInfo, SourceDocument
from labmatch.extraction.validator import build_document

__all__ = [
    "ExtractedReading",
    "ExtractionError",
    "ExtractionValidationError",
    "PatientInfo",
    "SourceDocument",
    "build_document",
]
