"""Loads benchmark definitions from JSON catalog files.

A catalog is a JSON list of objects::

    {
      "name": "TSH",
      "category": "Thyroid",
      "units": ["mIU/L", "µIU/mL"],
      "male_range": "1.0-2.5 mIU/L",
      "female_range": "1.0-2.5 mIU/L",
      "aliases": ["Thyrotropin"],
      "full_name": "Thyroid Stimulating Hormone",
      "active": true
    }

``female_range``, ``aliases``, ``full_name`` and ``active`` are optional.
Range strings use the grammar of ``labmatch.ranges.parser``.
"""

import json
from pathlib import Path
from typing import Any

from labmatch.config.settings import Settings
from labmatch.logging.logger import Log
from labmatch.taxonomy.exceptions import TaxonomyError, TaxonomyValidationError
from labmatch.taxonomy.models import BenchmarkDefinition
from labmatch.taxonomy.snapshot import TaxonomySnapshot

_DEFAULT_CATALOG = Path(__file__).parent / "data" / "default_benchmarks.json"


def load_benchmarks(path: Path | None = None) -> list[BenchmarkDefinition]:
    """Load and validate a benchmark catalog.

    Args:
        path: Path to a JSON catalog.
              Defaults to the bundled default_benchmarks.json.

    Raises:
        TaxonomyError: if the file cannot be read.
        TaxonomyValidationError: if the file is not valid JSON or an entry
            is malformed.
    """
    if path is None:
        path = _DEFAULT_CATALOG
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TaxonomyError(f"Failed to load benchmark catalog: {exc}") from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise TaxonomyValidationError(f"Benchmark catalog is not valid JSON: {exc}") from exc
    return build_benchmarks(data)


def load_snapshot(settings: Settings) -> TaxonomySnapshot:
    """Default catalog merged with the configured override file, if any."""
    defaults = load_benchmarks()
    overrides: list[BenchmarkDefinition] = []
    if settings.taxonomy_overrides_path is not None:
        overrides = load_benchmarks(settings.taxonomy_overrides_path)
    snapshot = TaxonomySnapshot.build(defaults, overrides)
    Log.info(
        f"Loaded taxonomy: {len(snapshot.active_benchmarks)} active benchmarks, "
        f"{len(overrides)} overrides"
    )
    return snapshot


def build_benchmarks(data: Any) -> list[BenchmarkDefinition]:
    """Validate parsed catalog JSON and build benchmark definitions."""
    if not isinstance(data, list):
        raise TaxonomyValidationError("Benchmark catalog must be a list")
    seen: set[str] = set()
    benchmarks: list[BenchmarkDefinition] = []
    for i, item in enumerate(data):
        benchmark = _build_benchmark(item, i)
        if benchmark.name in seen:
            raise TaxonomyValidationError(f"Duplicate benchmark name: {benchmark.name}")
        seen.add(benchmark.name)
        benchmarks.append(benchmark)
    return benchmarks


def _build_benchmark(raw: Any, index: int) -> BenchmarkDefinition:
    if not isinstance(raw, dict):
        raise TaxonomyValidationError(f"Benchmark at index {index} must be an object")
    name = _required_string(raw, "name", index)
    female_range = raw.get("female_range")
    if female_range is not None and not isinstance(female_range, str):
        raise TaxonomyValidationError(
            f"Benchmark at index {index}: 'female_range' must be a string or null"
        )
    full_name = raw.get("full_name")
    if full_name is not None and not isinstance(full_name, str):
        raise TaxonomyValidationError(
            f"Benchmark at index {index}: 'full_name' must be a string or null"
        )
    active = raw.get("active", True)
    if not isinstance(active, bool):
        raise TaxonomyValidationError(
            f"Benchmark at index {index}: 'active' must be a boolean"
        )
    return BenchmarkDefinition(
        name=name,
        category=_required_string(raw, "category", index),
        male_range=_required_string(raw, "male_range", index),
        female_range=female_range or None,
        aliases=_string_list(raw.get("aliases", []), "aliases", index),
        units=_string_list(raw.get("units"), "units", index),
        full_name=full_name,
        active=active,
    )


def _required_string(raw: dict[str, Any], key: str, index: int) -> str:
    value = raw.get(key)
    if not value or not isinstance(value, str):
        raise TaxonomyValidationError(
            f"Benchmark at index {index}: '{key}' must be a non-empty string"
        )
    return value


def _string_list(raw: Any, key: str, index: int) -> tuple[str, ...]:
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        raise TaxonomyValidationError(
            f"Benchmark at index {index}: '{key}' must be a list of strings"
        )
    # Duplicates are dropped, first occurrence keeps its position.
    return tuple(dict.fromkeys(item for item in raw if item.strip()))
