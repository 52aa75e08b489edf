"""Reference-range expression parsing.

Grammar (one expression, one or more bands)::

    expression := band [ "(" band ")" ]...
    band       := number "-" number unit
                | comparator number unit
    comparator := "<" | "<=" | "≤" | ">" | ">=" | "≥"

The primary band is the text outside parentheses; each parenthesised group
is an alternative band, typically the same range in a second unit.  A unit
text listing several equivalent units (``mIU/L/µIU/mL/mU/L``) is split
into alternates.  Text that fits no band (``Refer to lab specific range``)
contributes nothing; an expression without bands resolves to no bounds.
"""

import math
import re

from labmatch.ranges.models import Bounds, ParsedRange, RangeBand
from labmatch.ranges.units import conversion_factor, normalize_unit, units_equivalent

_NUMBER = r"[+-]?\d+(?:[.,]\d+)?"

_PAREN_GROUP_RE = re.compile(r"\(([^()]*)\)")
_BETWEEN_RE = re.compile(
    rf"^(?P<low>{_NUMBER})\s*[-–—]\s*(?P<high>{_NUMBER})\s*(?P<unit>.*)$"
)
_COMPARISON_RE = re.compile(
    rf"^(?P<op><=|>=|=<|=>|≤|≥|<|>)\s*(?P<value>{_NUMBER})\s*(?P<unit>.*)$"
)

_DECIMAL_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")
_DECIMAL_COMMA_RE = re.compile(r"^[+-]?\d+,\d+$")
_THOUSANDS_RE = re.compile(r"^[+-]?\d{1,3}(?:,\d{3})+(?:\.\d+)?$")


def parse_numeric(value: str | None) -> float | None:
    """Parse a reading value; None for anything that is not a plain number.

    ``"N/A"``, ``"Pending"`` and censored values such as ``"<0.1"`` are
    non-numeric. ``"3,500"`` is read as thousands, ``"4,4"`` as a decimal
    comma.
    """
    if value is None:
        return None
    text = value.strip()
    if _THOUSANDS_RE.match(text):
        text = text.replace(",", "")
    elif _DECIMAL_COMMA_RE.match(text):
        text = text.replace(",", ".")
    if not _DECIMAL_RE.match(text):
        return None
    number = float(text)
    return number if math.isfinite(number) else None


def parse_range(expression: str | None) -> ParsedRange:
    """Split a range expression into bands, primary band first."""
    if not expression or not expression.strip():
        return ParsedRange(expression=expression or "")
    primary = _PAREN_GROUP_RE.sub(" ", expression)
    parts = [primary, *_PAREN_GROUP_RE.findall(expression)]
    bands = tuple(band for band in (_parse_band(part) for part in parts) if band)
    return ParsedRange(expression=expression, bands=bands)


def resolve_bounds(
    parsed: ParsedRange,
    unit: str | None,
    canonical_name: str,
) -> Bounds | None:
    """Bounds of *parsed* expressed in *unit*, or None when unresolvable.

    A band whose unit matches *unit* wins; otherwise the first band that the
    conversion table can translate into *unit* is scaled.
    """
    if not unit or not unit.strip():
        return None
    target = normalize_unit(unit)
    for band in parsed.bands:
        if any(units_equivalent(band_unit, target) for band_unit in band.units):
            return _bounds(band, target, factor=1.0, converted=False)
    for band in parsed.bands:
        for band_unit in band.units:
            factor = conversion_factor(canonical_name, band_unit, target)
            if factor is not None:
                return _bounds(band, target, factor=factor, converted=True)
    return None


def _bounds(band: RangeBand, unit: str, *, factor: float, converted: bool) -> Bounds:
    return Bounds(
        low=band.low * factor if band.low is not None else None,
        high=band.high * factor if band.high is not None else None,
        unit=unit,
        low_inclusive=band.low_inclusive,
        high_inclusive=band.high_inclusive,
        converted=converted,
    )


def _parse_band(text: str) -> RangeBand | None:
    text = text.strip()
    match = _BETWEEN_RE.match(text)
    if match:
        return RangeBand(
            low=_to_float(match["low"]),
            high=_to_float(match["high"]),
            units=_split_units(match["unit"]),
        )
    match = _COMPARISON_RE.match(text)
    if match:
        op = match["op"]
        value = _to_float(match["value"])
        units = _split_units(match["unit"])
        if op in ("<", "<=", "=<", "≤"):
            return RangeBand(high=value, high_inclusive=op != "<", units=units)
        return RangeBand(low=value, low_inclusive=op != ">", units=units)
    return None


def _split_units(unit_text: str) -> tuple[str, ...]:
    """``"mIU/L/µIU/mL/mU/L"`` -> ``("mIU/L", "µIU/mL", "mU/L")``."""
    normalized = normalize_unit(unit_text)
    if not normalized:
        return ()
    pieces = normalized.split("/")
    if len(pieces) >= 4 and len(pieces) % 2 == 0:
        return tuple(
            f"{pieces[i]}/{pieces[i + 1]}" for i in range(0, len(pieces), 2)
        )
    return (normalized,)


def _to_float(text: str) -> float:
    return float(text.replace(",", "."))
