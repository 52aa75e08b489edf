import json
from pathlib import Path

import pytest

from labmatch.config.settings import Settings
from labmatch.taxonomy.exceptions import TaxonomyError, TaxonomyValidationError
from labmatch.taxonomy.loader import build_benchmarks, load_benchmarks, load_snapshot
from labmatch.taxonomy.models import BenchmarkDefinition
from labmatch.taxonomy.snapshot import TaxonomySnapshot


def _entry(name: str = "Ferritin", **overrides: object) -> dict[str, object]:
    entry: dict[str, object] = {
        "name": name,
        "category": "Iron Studies",
        "units": ["µg/L", "ng/mL"],
        "male_range": "50-150 µg/L",
        "female_range": "50-150 µg/L",
        "aliases": ["Ferritina"],
    }
    entry.update(overrides)
    return entry


class TestBenchmarkDefinition:
    def test_female_range_falls_back_to_male(self) -> None:
        benchmark = BenchmarkDefinition(name="X", category="C", male_range="1-2 g/L")
        assert benchmark.range_for("female") == "1-2 g/L"
        assert benchmark.female_range is None

    def test_sex_specific_range(self) -> None:
        benchmark = BenchmarkDefinition(
            name="X", category="C", male_range="1-2 g/L", female_range="3-4 g/L"
        )
        assert benchmark.range_for("male") == "1-2 g/L"
        assert benchmark.range_for("female") == "3-4 g/L"

    @pytest.mark.parametrize("sex", ["other", "Male", "", "f"])
    def test_unknown_sex_raises(self, sex: str) -> None:
        benchmark = BenchmarkDefinition(name="X", category="C", male_range="1-2 g/L")
        with pytest.raises(ValueError, match="sex must be one of"):
            benchmark.range_for(sex)

    def test_preferred_unit_is_first_unit(self) -> None:
        benchmark = BenchmarkDefinition(
            name="X", category="C", male_range="", units=("g/L", "g/dL")
        )
        assert benchmark.preferred_unit == "g/L"

    def test_display_name(self) -> None:
        tsh = BenchmarkDefinition(
            name="TSH", category="Thyroid", male_range="", full_name="Thyroid Stimulating Hormone"
        )
        calcium = BenchmarkDefinition(name="Calcium", category="Minerals", male_range="")
        assert tsh.display_name == "TSH (Thyroid Stimulating Hormone)"
        assert calcium.display_name == "Calcium"


class TestLoadBenchmarks:
    def test_loads_default_catalog(self) -> None:
        benchmarks = load_benchmarks()
        assert len(benchmarks) == 54
        assert len({b.name for b in benchmarks}) == 54
        assert all(b.active for b in benchmarks)

    def test_default_catalog_sex_specific_ranges(self) -> None:
        by_name = {b.name: b for b in load_benchmarks()}
        assert by_name["ALT"].range_for("male") == "13-23 IU/L"
        assert by_name["ALT"].range_for("female") == "9-19 IU/L"
        assert by_name["WBC"].preferred_unit == "×10³/µL"

    def test_loads_custom_catalog(self, tmp_path: Path) -> None:
        custom = tmp_path / "catalog.json"
        custom.write_text(json.dumps([_entry()]), encoding="utf-8")
        (benchmark,) = load_benchmarks(custom)
        assert benchmark.name == "Ferritin"
        assert benchmark.aliases == ("Ferritina",)
        assert benchmark.units == ("µg/L", "ng/mL")
        assert not benchmark.is_custom

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(TaxonomyError, match="Failed to load benchmark catalog"):
            load_benchmarks(Path("/nonexistent/catalog.json"))

    def test_invalid_json_raises_validation_error(self, tmp_path: Path) -> None:
        broken = tmp_path / "broken.json"
        broken.write_text("[{", encoding="utf-8")
        with pytest.raises(TaxonomyValidationError, match="not valid JSON"):
            load_benchmarks(broken)


class TestBuildBenchmarks:
    def test_catalog_must_be_list(self) -> None:
        with pytest.raises(TaxonomyValidationError, match="must be a list"):
            build_benchmarks({"name": "Ferritin"})

    def test_missing_name(self) -> None:
        with pytest.raises(TaxonomyValidationError, match="'name' must be a non-empty string"):
            build_benchmarks([_entry(name="")])

    def test_missing_units(self) -> None:
        entry = _entry()
        del entry["units"]
        with pytest.raises(TaxonomyValidationError, match="'units' must be a list of strings"):
            build_benchmarks([entry])

    def test_duplicate_name(self) -> None:
        with pytest.raises(TaxonomyValidationError, match="Duplicate benchmark name"):
            build_benchmarks([_entry(), _entry()])

    def test_non_boolean_active(self) -> None:
        with pytest.raises(TaxonomyValidationError, match="'active' must be a boolean"):
            build_benchmarks([_entry(active="no")])

    def test_duplicate_aliases_collapsed_in_order(self) -> None:
        (benchmark,) = build_benchmarks([_entry(aliases=["Ferr", "FER", "Ferr", " "])])
        assert benchmark.aliases == ("Ferr", "FER")

    def test_optional_fields(self) -> None:
        entry = _entry(active=False)
        del entry["female_range"]
        del entry["aliases"]
        (benchmark,) = build_benchmarks([entry])
        assert benchmark.female_range is None
        assert benchmark.aliases == ()
        assert not benchmark.active


class TestTaxonomySnapshot:
    def _defaults(self) -> list[BenchmarkDefinition]:
        return [
            BenchmarkDefinition(name="Ferritin", category="Iron", male_range="50-150 µg/L"),
            BenchmarkDefinition(name="Sodium", category="Electrolytes", male_range="137-143 mmol/L"),
        ]

    def test_override_replaces_default_in_place(self) -> None:
        override = BenchmarkDefinition(name="Ferritin", category="Iron", male_range="30-100 µg/L")
        snapshot = TaxonomySnapshot.build(self._defaults(), [override])
        assert [b.name for b in snapshot.benchmarks] == ["Ferritin", "Sodium"]
        ferritin = snapshot.get("Ferritin")
        assert ferritin is not None
        assert ferritin.male_range == "30-100 µg/L"
        assert ferritin.is_custom

    def test_override_matches_exact_name_only(self) -> None:
        override = BenchmarkDefinition(name="ferritin", category="Iron", male_range="30-100 µg/L")
        snapshot = TaxonomySnapshot.build(self._defaults(), [override])
        assert [b.name for b in snapshot.benchmarks] == ["Ferritin", "Sodium", "ferritin"]

    def test_defaults_are_not_mutated(self) -> None:
        defaults = self._defaults()
        override = BenchmarkDefinition(name="Ferritin", category="Iron", male_range="30-100 µg/L")
        TaxonomySnapshot.build(defaults, [override])
        assert defaults[0].male_range == "50-150 µg/L"

    def test_deactivated_benchmark_is_hidden(self) -> None:
        override = BenchmarkDefinition(
            name="Sodium", category="Electrolytes", male_range="", active=False
        )
        snapshot = TaxonomySnapshot.build(self._defaults(), [override])
        assert [b.name for b in snapshot.active_benchmarks] == ["Ferritin"]
        assert snapshot.get("Sodium") is None
        assert len(snapshot.benchmarks) == 2


class TestLoadSnapshot:
    def test_without_overrides(self) -> None:
        snapshot = load_snapshot(Settings(taxonomy_overrides_path=None))
        assert len(snapshot.active_benchmarks) == 54

    def test_with_overrides(self, tmp_path: Path) -> None:
        overrides = tmp_path / "overrides.json"
        overrides.write_text(
            json.dumps([
                _entry(male_range="30-100 µg/L"),
                _entry(name="Omega-3 Index", category="Lipids", units=["%"], male_range="8-12 %"),
            ]),
            encoding="utf-8",
        )
        snapshot = load_snapshot(Settings(taxonomy_overrides_path=overrides))
        assert len(snapshot.active_benchmarks) == 55
        ferritin = snapshot.get("Ferritin")
        assert ferritin is not None
        assert ferritin.range_for("male") == "30-100 µg/L"
        assert snapshot.benchmarks[-1].name == "Omega-3 Index"
