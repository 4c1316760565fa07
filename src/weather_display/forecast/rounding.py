"""Numeric helpers shared by the display mappers."""

from __future__ import annotations

import math


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3).

    NaN and infinities map to 0 so display mapping never raises.
    """
    if not math.isfinite(value):
        return 0
    magnitude = abs(value)
    whole = math.floor(magnitude)
    # magnitude - whole is exact for floats; adding 0.5 first is not.
    if magnitude - whole >= 0.5:
        whole += 1
    return -whole if value < 0 else whole


def truncating_div(value: int, divisor: int) -> int:
    """Integer division that truncates toward zero (-1999 // 1000 -> -1)."""
    quotient = abs(value) // divisor
    return -quotient if value < 0 else quotient
