from labmatch.ranges.evaluator import evaluate
from labmatch.ranges.models import Bounds, ParsedRange, RangeBand, RangeStatus
from labmatch.ranges.parser import parse_numeric, parse_range, resolve_bounds
from labmatch.ranges.units import conversion_factor, convert_value, normalize_unit

__all__ = [
    "Bounds",
    "ParsedRange",
    "RangeBand",
    "RangeStatus",
    "conversion_factor",
    "convert_value",
    "evaluate",
    "normalize_unit",
    "parse_numeric",
    "parse_range",
    "resolve_bounds",
]
