"""Unit spelling normalization and deterministic value conversion.

Lab reports spell the same unit many ways (``umol/l``, ``μmol/L``,
``x10^3/uL``, ``K/µL``).  Two layers deal with that:

* ``normalize_unit`` rewrites a unit into its canonical display spelling.
* ``unit_key`` additionally folds numerically identical units together
  (``K/µL`` == ``×10³/µL``, ``ng/mL`` == ``µg/L``) and is only ever used
  for comparison.

Conversions between genuinely different units live in two fixed tables:
biomarker-specific factors keyed by canonical name (molar mass dependent),
and generic cell-count factors that hold for every biomarker.
"""

import re

MICRO = "µ"  # micro sign; the Greek mu (U+03BC) is folded into it

_WHITESPACE_RE = re.compile(r"\s+")

_SYMBOL_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile("μ"), MICRO),
    (re.compile(r"\bmcg\b", re.IGNORECASE), f"{MICRO}g"),
    (re.compile(r"\bug\b", re.IGNORECASE), f"{MICRO}g"),
    (re.compile(r"\bumol\b", re.IGNORECASE), f"{MICRO}mol"),
    (re.compile(r"\buiu\b", re.IGNORECASE), f"{MICRO}IU"),
    (re.compile(r"\bul\b", re.IGNORECASE), f"{MICRO}L"),
    (re.compile(r"\bmm3\b", re.IGNORECASE), "mm³"),
    (re.compile(r"m2$"), "m²"),
    (re.compile(r"[x×*]?10(?:\^|\*\*|e)?3(?=/|$)", re.IGNORECASE), "×10³"),
    (re.compile(r"[x×*]?10(?:\^|\*\*|e)?6(?=/|$)", re.IGNORECASE), "×10⁶"),
    (re.compile(r"[x×*]?10(?:\^|\*\*|e)?9(?=/|$)", re.IGNORECASE), "×10⁹"),
    (re.compile(r"[x×*]?10(?:\^|\*\*|e)?12(?=/|$)", re.IGNORECASE), "×10¹²"),
    (re.compile(r"(?<!×)10([³⁶⁹]|¹²)"), r"×10\1"),
    (re.compile(rf"^mio\.?/{MICRO}l$", re.IGNORECASE), "×10¹²/L"),
    (re.compile(rf"^tsd\.?/{MICRO}l$", re.IGNORECASE), "×10³/µL"),
]

# Canonical casing of the individual parts of a compound unit.
_PART_CASES: dict[str, str] = {
    "l": "L",
    "dl": "dL",
    "ml": "mL",
    "fl": "fL",
    f"{MICRO}l": f"{MICRO}L",
    "mmol": "mmol",
    f"{MICRO}mol": f"{MICRO}mol",
    "nmol": "nmol",
    "pmol": "pmol",
    "mol": "mol",
    "g": "g",
    "mg": "mg",
    f"{MICRO}g": f"{MICRO}g",
    "ng": "ng",
    "pg": "pg",
    "iu": "IU",
    "u": "U",
    "miu": "mIU",
    "mu": "mU",
    f"{MICRO}iu": f"{MICRO}IU",
    "meq": "mEq",
    "k": "K",
    "cells": "cells",
    "min": "min",
}

# Display units that are numerically identical to another unit.
_EQUIVALENT_UNITS: dict[str, str] = {
    f"K/{MICRO}L": f"×10³/{MICRO}L",
    "×10⁹/L": f"×10³/{MICRO}L",
    "×10³/mm³": f"×10³/{MICRO}L",
    f"M/{MICRO}L": "×10¹²/L",
    f"×10⁶/{MICRO}L": "×10¹²/L",
    "U/L": "IU/L",
    "U/mL": "IU/mL",
    "mU/L": "mIU/L",
    f"{MICRO}IU/mL": "mIU/L",
    f"{MICRO}U/mL": "mIU/L",
    "ng/mL": f"{MICRO}g/L",
    "mL/min/1.73m²": "mL/min/m²",
}

# newValue = oldValue * factor
BIOMARKER_CONVERSIONS: dict[str, dict[str, dict[str, float]]] = {
    "serum iron": {
        f"{MICRO}g/dL": {f"{MICRO}mol/L": 0.179},
        f"{MICRO}mol/L": {f"{MICRO}g/dL": 5.585},
        "mg/dL": {f"{MICRO}mol/L": 17.9},
    },
    "tibc": {
        f"{MICRO}g/dL": {f"{MICRO}mol/L": 0.179},
        f"{MICRO}mol/L": {f"{MICRO}g/dL": 5.585, "mg/dL": 0.05585},
        "mg/dL": {f"{MICRO}mol/L": 17.9},
    },
    "creatinine": {
        "mg/dL": {f"{MICRO}mol/L": 88.4},
        f"{MICRO}mol/L": {"mg/dL": 0.0113},
    },
    "fasting glucose": {
        "mg/dL": {"mmol/L": 0.0555},
        "mmol/L": {"mg/dL": 18.02},
    },
    "bun": {
        "mg/dL": {"mmol/L": 0.357},
        "mmol/L": {"mg/dL": 2.8},
    },
    "calcium": {
        "mg/dL": {"mmol/L": 0.25},
        "mmol/L": {"mg/dL": 4.0},
    },
    "serum magnesium": {
        "mg/dL": {"mmol/L": 0.411},
        "mmol/L": {"mg/dL": 2.43},
    },
    "phosphorus": {
        "mg/dL": {"mmol/L": 0.323},
        "mmol/L": {"mg/dL": 3.097},
    },
    "triglycerides": {
        "mg/dL": {"mmol/L": 0.0113},
        "mmol/L": {"mg/dL": 88.57},
    },
    "total cholesterol": {
        "mg/dL": {"mmol/L": 0.0259},
        "mmol/L": {"mg/dL": 38.67},
    },
    "hdl cholesterol": {
        "mg/dL": {"mmol/L": 0.0259},
        "mmol/L": {"mg/dL": 38.67},
    },
    "ldl cholesterol": {
        "mg/dL": {"mmol/L": 0.0259},
        "mmol/L": {"mg/dL": 38.67},
    },
    "total bilirubin": {
        "mg/dL": {f"{MICRO}mol/L": 17.1},
        f"{MICRO}mol/L": {"mg/dL": 0.0585},
    },
    "albumin": {"g/dL": {"g/L": 10.0}, "g/L": {"g/dL": 0.1}},
    "globulin": {"g/dL": {"g/L": 10.0}, "g/L": {"g/dL": 0.1}},
    "total protein": {"g/dL": {"g/L": 10.0}, "g/L": {"g/dL": 0.1}},
    "hemoglobin": {"g/dL": {"g/L": 10.0}, "g/L": {"g/dL": 0.1}},
    "mchc": {"g/L": {"g/dL": 0.1}, "g/dL": {"g/L": 10.0}},
    "hct": {"L/L": {"%": 100.0}, "%": {"L/L": 0.01}},
    "free t3": {
        "pg/mL": {"pmol/L": 1.536},
        "pmol/L": {"pg/mL": 0.651},
    },
    "free t4": {
        "ng/dL": {"pmol/L": 12.87},
        "pmol/L": {"ng/dL": 0.0777},
    },
    "fasting insulin": {
        "mIU/L": {"pmol/L": 6.945},
        "pmol/L": {"mIU/L": 0.144},
    },
    "vitamin b12": {
        "pg/mL": {"pmol/L": 0.738},
        "pmol/L": {"pg/mL": 1.355},
    },
    "vitamin d (25-hydroxy d)": {
        "ng/mL": {"nmol/L": 2.496},
        "nmol/L": {"ng/mL": 0.4},
    },
    "serum folate": {
        "ng/mL": {"nmol/L": 2.266},
        "nmol/L": {"ng/mL": 0.441},
    },
    "sodium": {"mEq/L": {"mmol/L": 1.0}},
    "potassium": {"mEq/L": {"mmol/L": 1.0}},
    "chloride": {"mEq/L": {"mmol/L": 1.0}},
    "bicarbonate": {"mEq/L": {"mmol/L": 1.0}},
}

# Cell counts: valid for any biomarker reported as a count.
COUNT_CONVERSIONS: dict[str, dict[str, float]] = {
    f"cells/{MICRO}L": {f"×10³/{MICRO}L": 0.001, "×10¹²/L": 0.000001},
    f"/{MICRO}L": {f"×10³/{MICRO}L": 0.001, "×10¹²/L": 0.000001},
    "cells/mm³": {f"×10³/{MICRO}L": 0.001},
    f"×10³/{MICRO}L": {f"cells/{MICRO}L": 1000.0},
}


def normalize_unit(unit: str | None) -> str:
    """Return the canonical display spelling of *unit* ("" for blank input)."""
    if not unit:
        return ""
    text = _WHITESPACE_RE.sub("", unit)
    for pattern, replacement in _SYMBOL_RULES:
        text = pattern.sub(replacement, text)
    parts = [_PART_CASES.get(part.lower(), part) for part in text.split("/")]
    return "/".join(parts)


def unit_key(unit: str | None) -> str:
    """Comparison key: normalized, equivalence-folded, case-folded."""
    normalized = normalize_unit(unit)
    return _EQUIVALENT_UNITS.get(normalized, normalized).casefold()


def units_equivalent(first: str | None, second: str | None) -> bool:
    """True when both units are non-blank and numerically identical."""
    first_key = unit_key(first)
    return bool(first_key) and first_key == unit_key(second)


def _index(table: dict[str, dict[str, float]]) -> dict[tuple[str, str], float]:
    return {
        (unit_key(from_unit), unit_key(to_unit)): factor
        for from_unit, targets in table.items()
        for to_unit, factor in targets.items()
    }


_BIOMARKER_INDEX: dict[str, dict[tuple[str, str], float]] = {
    name: _index(table) for name, table in BIOMARKER_CONVERSIONS.items()
}
_COUNT_INDEX: dict[tuple[str, str], float] = _index(COUNT_CONVERSIONS)


def conversion_factor(
    canonical_name: str,
    from_unit: str | None,
    to_unit: str | None,
) -> float | None:
    """Multiplier turning a value in *from_unit* into *to_unit*.

    Lookup order: equivalent units (1.0), the biomarker table for
    *canonical_name*, the generic count table, then the reciprocal of a
    reverse entry in either table. Returns None when nothing applies.
    """
    source, target = unit_key(from_unit), unit_key(to_unit)
    if not source or not target:
        return None
    if source == target:
        return 1.0
    tables = (_BIOMARKER_INDEX.get(canonical_name.casefold(), {}), _COUNT_INDEX)
    for table in tables:
        factor = table.get((source, target))
        if factor is not None:
            return factor
    for table in tables:
        factor = table.get((target, source))
        if factor:
            return 1.0 / factor
    return None


def format_number(number: float) -> str:
    """Two decimals with trailing zeros stripped: 3.50 -> "3.5", 100.00 -> "100"."""
    text = f"{number:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def convert_value(number: float, factor: float) -> str:
    """Apply *factor* to *number* and render the result for display."""
    return format_number(number * factor)
