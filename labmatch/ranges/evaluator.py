from labmatch.ranges.models import Bounds, RangeStatus


def evaluate(value: float, bounds: Bounds) -> RangeStatus:
    """Place *value* below, inside or above *bounds*."""
    if bounds.low is not None:
        if value < bounds.low or (not bounds.low_inclusive and value == bounds.low):
            return RangeStatus.BELOW
    if bounds.high is not None:
        if value > bounds.high or (not bounds.high_inclusive and value == bounds.high):
            return RangeStatus.ABOVE
    return RangeStatus.IN_RANGE
