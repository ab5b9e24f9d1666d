"""Shared numeric helpers for the battle engine."""
from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity.

    Balance tables were tuned against this rounding (2.5 -> 3, -0.5 -> 0),
    so the engine never uses Python's banker's rounding for game values.
    """
    return int(math.floor(value + 0.5))


def sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def safe_number(value, default: float = 0):
    """Coerce a stat value to a number, or return default.

    Handles the common case of stats arriving as None, strings, or bools
    from loosely-typed content files.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
