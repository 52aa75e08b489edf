from dataclasses import dataclass, field
from enum import Enum


class RangeStatus(str, Enum):
    """Outcome of comparing a numeric value with resolved bounds."""

    BELOW = "below-range"
    IN_RANGE = "in-range"
    ABOVE = "above-range"


@dataclass(frozen=True)
class RangeBand:
    """One parsed band of a range expression, e.g. ``4.44-5.0 mmol/L``."""

    low: float | None = None
    high: float | None = None
    low_inclusive: bool = True
    high_inclusive: bool = True
    units: tuple[str, ...] = ()


@dataclass(frozen=True)
class ParsedRange:
    """A range expression split into its bands (primary first)."""

    expression: str
    bands: tuple[RangeBand, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Bounds:
    """Numeric bounds expressed in a reading's unit."""

    low: float | None
    high: float | None
    unit: str
    low_inclusive: bool = True
    high_inclusive: bool = True
    converted: bool = False  # True when a conversion factor was applied
