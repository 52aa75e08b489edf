from collections.abc import Callable

import pytest

from labmatch.extraction.models import ExtractedReading, PatientInfo, SourceDocument
from labmatch.normalization.text import TextFolder
from labmatch.taxonomy.loader import load_benchmarks
from labmatch.taxonomy.models import BenchmarkDefinition
from labmatch.taxonomy.snapshot import TaxonomySnapshot


@pytest.fixture(scope="session")
def default_snapshot() -> TaxonomySnapshot:
    """The bundled 54-biomarker catalog without overrides."""
    return TaxonomySnapshot.build(load_benchmarks())


@pytest.fixture()
def small_snapshot() -> TaxonomySnapshot:
    """Three benchmarks covering dual-unit, sex-specific and free-text ranges."""
    return TaxonomySnapshot.build([
        BenchmarkDefinition(
            name="Fasting Glucose",
            category="Metabolic",
            male_range="4.44-5.0 mmol/L (80-90 mg/dL)",
            female_range="4.44-5.0 mmol/L (80-90 mg/dL)",
            aliases=("Glucose", "Glucosa", "Glycémie"),
            units=("mmol/L", "mg/dL"),
        ),
        BenchmarkDefinition(
            name="Hemoglobin",
            category="Red Blood Cells",
            male_range="145-155 g/L (14.5-15.5 g/dL)",
            female_range="135-145 g/L (13.5-14.5 g/dL)",
            aliases=("Hgb", "Hb"),
            units=("g/L", "g/dL"),
        ),
        BenchmarkDefinition(
            name="TPO Antibodies",
            category="Thyroid",
            male_range="Refer to lab specific range",
            aliases=("Anti-TPO",),
            units=("IU/mL", "U/mL"),
        ),
    ])


@pytest.fixture()
def folder() -> TextFolder:
    return TextFolder()


def _make_document(
    document_id: str = "doc-1",
    name: str | None = None,
    date_of_birth: str | None = None,
    sex: str | None = None,
    collection_date: str | None = None,
    readings: list[tuple[str, str, str]] | None = None,
) -> SourceDocument:
    """Build a SourceDocument from ``(name, value, unit)`` triples."""
    return SourceDocument(
        document_id=document_id,
        patient=PatientInfo(
            name=name,
            date_of_birth=date_of_birth,
            sex=sex,
            collection_date=collection_date,
        ),
        readings=tuple(
            ExtractedReading(name=n, value=v, unit=u) for n, v, u in (readings or [])
        ),
    )


@pytest.fixture()
def make_document() -> Callable[..., SourceDocument]:
    return _make_document
