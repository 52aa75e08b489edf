"""Validates raw extraction JSON and builds a SourceDocument.

Shape violations (wrong types, missing top-level keys) raise; bad *data*
inside a well-shaped payload does not: malformed dates and unknown sex
strings become None, and non-numeric values such as ``"N/A"`` are kept
verbatim for the matcher to report as not measured.
"""

import re
from datetime import date
from typing import Any

from labmatch.extraction.exceptions import ExtractionValidationError
from labmatch.extraction.models import ExtractedReading, PatientInfo, SourceDocument

_MAX_READINGS = 500
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_SEX_VALUES = frozenset({"male", "female", "other"})


def build_document(data: Any, document_id: str) -> SourceDocument:
    """Validate one extraction payload.

    Expected shape::

        {"patient": {"name", "dateOfBirth", "sex", "collectionDate"},
         "readings": [{"name", "value", "unit"}, ...]}

    Raises:
        ExtractionValidationError: when the payload has the wrong shape.
    """
    if not isinstance(data, dict):
        raise ExtractionValidationError(f"Document {document_id}: payload must be an object")
    for key in ("patient", "readings"):
        if key not in data:
            raise ExtractionValidationError(
                f"Document {document_id}: missing required field: {key}"
            )
    patient = _build_patient(data["patient"], document_id)
    readings = _build_readings(data["readings"], document_id)
    return SourceDocument(document_id=document_id, patient=patient, readings=readings)


def parse_date(raw: Any) -> str | None:
    """``YYYY-MM-DD`` strings naming a real calendar date; None otherwise."""
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if not _ISO_DATE_RE.match(text):
        return None
    try:
        date.fromisoformat(text)
    except ValueError:
        return None
    return text


def _build_patient(raw: Any, document_id: str) -> PatientInfo:
    if raw is None:
        return PatientInfo()
    if not isinstance(raw, dict):
        raise ExtractionValidationError(
            f"Document {document_id}: 'patient' must be an object or null"
        )
    name = _field(raw, "name")
    if name is not None and not isinstance(name, str):
        raise ExtractionValidationError(
            f"Document {document_id}: 'patient.name' must be a string or null"
        )
    return PatientInfo(
        name=(name.strip() or None) if name else None,
        date_of_birth=parse_date(_field(raw, "dateOfBirth", "date_of_birth")),
        sex=_build_sex(_field(raw, "sex")),
        collection_date=parse_date(_field(raw, "collectionDate", "collection_date")),
    )


def _build_sex(raw: Any) -> str | None:
    if not isinstance(raw, str):
        return None
    sex = raw.strip().lower()
    return sex if sex in _SEX_VALUES else None


def _build_readings(raw: Any, document_id: str) -> tuple[ExtractedReading, ...]:
    if not isinstance(raw, list):
        raise ExtractionValidationError(f"Document {document_id}: 'readings' must be a list")
    if len(raw) > _MAX_READINGS:
        raise ExtractionValidationError(
            f"Document {document_id}: too many readings: {len(raw)} (max {_MAX_READINGS})"
        )
    return tuple(_build_reading(item, i, document_id) for i, item in enumerate(raw))


def _build_reading(raw: Any, index: int, document_id: str) -> ExtractedReading:
    if not isinstance(raw, dict):
        raise ExtractionValidationError(
            f"Document {document_id}: reading at index {index} must be an object"
        )
    name = raw.get("name")
    if not name or not isinstance(name, str):
        raise ExtractionValidationError(
            f"Document {document_id}: reading at index {index}: "
            "'name' must be a non-empty string"
        )
    unit = raw.get("unit") or ""
    if not isinstance(unit, str):
        raise ExtractionValidationError(
            f"Document {document_id}: reading at index {index}: 'unit' must be a string"
        )
    return ExtractedReading(
        name=name.strip(),
        value=_build_value(raw.get("value"), index, document_id),
        unit=unit.strip(),
        collection_date=parse_date(_field(raw, "collectionDate", "collection_date")),
    )


def _build_value(raw: Any, index: int, document_id: str) -> str:
    if raw is None:
        return ""
    # bool is an int subclass; true/false is not a reading value
    if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
        raise ExtractionValidationError(
            f"Document {document_id}: reading at index {index}: "
            "'value' must be a string or a number"
        )
    return str(raw).strip()


def _field(raw: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None
