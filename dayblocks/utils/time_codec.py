"""
Tool: Time Codec
Purpose: Convert between "HH:MM" strings, minutes since midnight, and hour of day

This is the single place wall-clock strings get parsed. Everything else
(validation, energy lookup, conflict checks, reminders) goes through it.

Usage:
    from dayblocks.utils.time_codec import time_to_minutes, minutes_to_time

    time_to_minutes("9:05")   # 545
    minutes_to_time(545)      # "09:05"

Input accepts one or two hour digits; output is always zero-padded.
"""

from __future__ import annotations

import math
import re

from dayblocks.errors import FormatError, RangeError

MINUTES_PER_DAY = 24 * 60
MAX_MINUTES = MINUTES_PER_DAY - 1

_TIME_PATTERN = re.compile(r"([0-9]{1,2}):([0-9]{2})")


def _parse(time: str) -> tuple[int, int]:
    if not isinstance(time, str):
        raise FormatError(f"Invalid time format: {time!r}. Expected HH:MM")
    match = _TIME_PATTERN.fullmatch(time)
    if not match:
        raise FormatError(f"Invalid time format: {time}. Expected HH:MM")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        raise RangeError(
            f"Invalid time values: {time}. Hours must be 0-23, minutes 0-59"
        )
    return hours, minutes


def time_to_minutes(time: str) -> int:
    """Convert "HH:MM" to minutes since midnight (0-1439)."""
    hours, minutes = _parse(time)
    return hours * 60 + minutes


def time_to_hour(time: str) -> int:
    """Convert "HH:MM" to the hour of day (0-23)."""
    hours, _ = _parse(time)
    return hours


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to a zero-padded "HH:MM" string."""
    if isinstance(minutes, bool) or not isinstance(minutes, (int, float)):
        raise RangeError(f"Invalid minutes value: {minutes!r}. Expected a finite number")
    if isinstance(minutes, float):
        if not math.isfinite(minutes):
            raise RangeError(f"Invalid minutes value: {minutes}. Expected a finite number")
        if not minutes.is_integer():
            raise RangeError(f"Invalid minutes value: {minutes}. Expected whole minutes")
        minutes = int(minutes)
    if minutes < 0 or minutes > MAX_MINUTES:
        raise RangeError(
            f"Invalid minutes value: {minutes}. Must be between 0 and {MAX_MINUTES}"
        )

    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def duration_minutes(start_time: str, end_time: str) -> int:
    """Length of [start, end) in minutes. Negative if end is before start."""
    return time_to_minutes(end_time) - time_to_minutes(start_time)


def format_hour(hour: int) -> str:
    """Render an hour boundary as "HH:00"."""
    return f"{hour:02d}:00"


__all__ = [
    "MINUTES_PER_DAY",
    "MAX_MINUTES",
    "time_to_minutes",
    "time_to_hour",
    "minutes_to_time",
    "duration_minutes",
    "format_hour",
]
