"""Rounding helpers.

Percentages shown to users round halves up (12.5 -> 13), unlike the
built-in round(), which rounds halves to even.
"""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +infinity."""
    return math.floor(value + 0.5)


def percent(part: float, whole: float) -> int:
    """``part`` as a rounded percentage of ``whole``; 0 when whole <= 0."""
    if whole <= 0:
        return 0
    return round_half_up(part / whole * 100)


def round_to(value: float, places: int = 1) -> float:
    """Round half up to ``places`` decimal places."""
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def format_number(value: float) -> str:
    """Render without a trailing ".0" for whole values (2.0 -> "2", 2.5 -> "2.5")."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def minutes_to_hours(minutes: float) -> float:
    """Minutes as hours, rounded to one decimal place."""
    return round_to(minutes / 60, 1)


__all__ = ["round_half_up", "percent", "round_to", "format_number", "minutes_to_hours"]
