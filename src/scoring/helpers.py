"""
Scoring Helper Functions

Clamping, rounding and averaging shared by every score calculation.
"""

import math
from typing import Iterable, Union

Number = Union[int, float]


def clamp(value: Number, minimum: Number = 0, maximum: Number = 100) -> Number:
    """Bound a value to [minimum, maximum]."""
    return max(minimum, min(maximum, value))


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves rounding up.

    Python's round() uses banker's rounding (round(62.5) == 62); report
    scores always round .5 up.
    """
    return int(math.floor(value + 0.5))


def clamp_score(value: Number) -> int:
    """Round and clamp to a 0-100 integer score."""
    return int(clamp(round_half_up(value), 0, 100))


def average(values: Iterable[Number]) -> float:
    """Arithmetic mean; an empty input averages to 0."""
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)
