"""Rounding helpers shared by the engines."""

import math
from typing import Optional, Union

Number = Union[int, float]


def round_half_up(value: Number, digits: int = 0) -> Number:
    """
    Round with ties going towards +infinity, e.g. 2.5 -> 3 and -2.5 -> -2.

    Python's round() uses banker's rounding; reports and meal targets are
    expected to round 0.5 up. Returns an int when digits is 0.
    """
    if digits == 0:
        return int(math.floor(value + 0.5))
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def round_kcal(value: Number) -> int:
    return round_half_up(value)


def round_grams(value: Number) -> float:
    return round_half_up(value, 1)


def as_number(value: Optional[Number]) -> float:
    """None counts as zero in sums"""
    return float(value) if value is not None else 0.0
