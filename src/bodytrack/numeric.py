"""Rounding helpers shared by the calculators."""

from __future__ import annotations

import math


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves going up, e.g. 2.5 -> 3 and -2.5 -> -2.

    Unlike the built-in round(), ties never go to the even neighbour.

    Args:
        value: Number to round
        digits: Decimal places to keep

    Returns:
        Rounded value
    """
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def round_int(value: float) -> int:
    """Round half up to an integer."""
    return int(math.floor(value + 0.5))
