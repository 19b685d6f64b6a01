"""
Tool: Timezone Arithmetic
Purpose: Move between a user's local wall clock and absolute UTC instants

All DST-sensitive logic lives here. Offsets are resolved for the specific
date being converted (via the IANA database behind ``zoneinfo``), never
assumed fixed, so a 09:00 block in New York maps to 14:00 UTC in January and
13:00 UTC in July.

Usage:
    from dayblocks.utils.timezones import wall_clock_to_absolute, absolute_to_wall_clock

    instant = wall_clock_to_absolute("2024-01-15", "14:00", "America/New_York")
    # datetime(2024, 1, 15, 19, 0, tzinfo=UTC)
    absolute_to_wall_clock(instant, "America/New_York").minutes  # 840

Nonexistent local times (inside a spring-forward gap) resolve with the
offset in effect before the transition; ambiguous times (fall-back) resolve
to the first occurrence.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import NamedTuple
from zoneinfo import ZoneInfo

from dayblocks.clock import Clock, resolve_clock
from dayblocks.utils.time_codec import time_to_minutes
from dayblocks.utils.validation import parse_date, validate_timezone

UTC = timezone.utc

# Python weekday() is Monday=0; the scheduling rules count Sunday=0
_SUNDAY_FIRST = (1, 2, 3, 4, 5, 6, 0)


class WallClock(NamedTuple):
    """A local date and time of day in some timezone."""

    date: date
    hours: int
    minutes_past_hour: int

    @property
    def minutes(self) -> int:
        """Minutes since local midnight."""
        return self.hours * 60 + self.minutes_past_hour


def get_zone(tz_name: str) -> ZoneInfo:
    """Resolve an IANA identifier, raising ValueError for unknown names."""
    if not validate_timezone(tz_name):
        raise ValueError(f"Unknown timezone: {tz_name!r}")
    return ZoneInfo(tz_name)


def wall_clock_to_absolute(date_str: str, time_str: str, tz_name: str) -> datetime:
    """Convert a local (date, HH:MM) in ``tz_name`` to an aware UTC datetime."""
    day = parse_date(date_str)
    minutes = time_to_minutes(time_str)
    local = datetime.combine(
        day, time(minutes // 60, minutes % 60), tzinfo=get_zone(tz_name)
    )
    return local.astimezone(UTC)


def absolute_to_wall_clock(instant: datetime, tz_name: str) -> WallClock:
    """Convert an aware datetime to the wall clock reading in ``tz_name``."""
    if instant.tzinfo is None:
        raise ValueError("absolute_to_wall_clock requires a timezone-aware datetime")
    local = instant.astimezone(get_zone(tz_name))
    return WallClock(local.date(), local.hour, local.minute)


def now_in_timezone(tz_name: str, clock: Clock | None = None) -> datetime:
    return resolve_clock(clock).now().astimezone(get_zone(tz_name))


def local_today(tz_name: str, clock: Clock | None = None) -> date:
    return now_in_timezone(tz_name, clock).date()


def current_hour(tz_name: str, clock: Clock | None = None) -> int:
    return now_in_timezone(tz_name, clock).hour


def parse_instant(value) -> datetime | None:
    """Accept an aware datetime, an ISO-8601 string, or epoch milliseconds.

    Returns None for None or "". Naive values are rejected.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        instant = value
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        instant = datetime.fromtimestamp(value / 1000, tz=UTC)
    elif isinstance(value, str):
        instant = datetime.fromisoformat(value.replace("Z", "+00:00"))
    else:
        raise ValueError(f"Invalid timestamp: {value!r}")

    if instant.tzinfo is None:
        raise ValueError(f"Timestamp must include a timezone: {value!r}")
    return instant.astimezone(UTC)


def sunday_first_index(day: date) -> int:
    """Day of week with Sunday=0 ... Saturday=6."""
    return _SUNDAY_FIRST[day.weekday()]


def day_index_in_week(tz_name: str, clock: Clock | None = None) -> int:
    """Today's Sunday-first day index in the user's timezone."""
    return sunday_first_index(local_today(tz_name, clock))


__all__ = [
    "UTC",
    "WallClock",
    "get_zone",
    "wall_clock_to_absolute",
    "absolute_to_wall_clock",
    "now_in_timezone",
    "local_today",
    "current_hour",
    "parse_instant",
    "sunday_first_index",
    "day_index_in_week",
]
