from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExtractedReading:
    """One raw name/value/unit triple as returned by the extraction service."""

    name: str
    value: str
    unit: str = ""
    collection_date: str | None = None  # YYYY-MM-DD


@dataclass(frozen=True)
class PatientInfo:
    """Raw patient identity reported by one document."""

    name: str | None = None
    date_of_birth: str | None = None  # YYYY-MM-DD
    sex: str | None = None  # "male", "female" or "other"
    collection_date: str | None = None  # YYYY-MM-DD


@dataclass(frozen=True)
class SourceDocument:
    """Extraction output for one uploaded document."""

    document_id: str
    patient: PatientInfo = field(default_factory=PatientInfo)
    readings: tuple[ExtractedReading, ...] = field(default_factory=tuple)
