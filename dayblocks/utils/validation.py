"""
Tool: Interval Validator
Purpose: Format checks for time/date/timezone strings and interval overlap

All ``validate_*`` functions answer True/False and never raise, so callers
can collect every problem with an input before reporting back.

Usage:
    from dayblocks.utils.validation import validate_time_format, times_overlap

    validate_time_format("7:30")              # True
    times_overlap(600, 660, 660, 720)         # False (adjacent)

Note on dates:
    validate_date_format is lenient about day overflow: a day up to 31 is
    accepted for any month ("2024-04-31" rolls over to May 1st), while month
    00/13 and day 00/32 are rejected. Stored blocks rely on this.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dayblocks.errors import FormatError

_TIME_FORMAT = re.compile(r"([01]?[0-9]|2[0-3]):[0-5][0-9]")
_DATE_FORMAT = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")


def validate_time_format(time: str) -> bool:
    """True if ``time`` is a 24-hour H:MM or HH:MM string (00:00-23:59)."""
    if not isinstance(time, str):
        return False
    return _TIME_FORMAT.fullmatch(time) is not None


def _split_date(value: str) -> tuple[int, int, int] | None:
    if not isinstance(value, str):
        return None
    match = _DATE_FORMAT.fullmatch(value)
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        return None
    if year < 1:
        return None
    return year, month, day


def validate_date_format(value: str) -> bool:
    """True if ``value`` is YYYY-MM-DD and parses as a (leniently) valid date."""
    return _split_date(value) is not None


def parse_date(value: str) -> date:
    """Parse YYYY-MM-DD with the same day-overflow rollover as validation.

    Raises:
        FormatError: if validate_date_format rejects the string
    """
    parts = _split_date(value)
    if parts is None:
        raise FormatError(f"Invalid date format: {value}. Expected YYYY-MM-DD")
    year, month, day = parts
    return date(year, month, 1) + timedelta(days=day - 1)


def validate_timezone(timezone: str) -> bool:
    """True if ``timezone`` names a zone in the IANA database."""
    if not isinstance(timezone, str) or not timezone:
        return False
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def times_overlap(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    """Half-open overlap test for [a_start, a_end) and [b_start, b_end).

    All values are minutes since midnight. Touching intervals do not overlap.
    """
    return a_start < b_end and a_end > b_start


__all__ = [
    "validate_time_format",
    "validate_date_format",
    "parse_date",
    "validate_timezone",
    "times_overlap",
]
