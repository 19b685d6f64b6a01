"""Shared utilities - time codec, input validation, timezone arithmetic

Components:
    time_codec.py: "HH:MM" <-> minutes since midnight <-> hour of day
    validation.py: time/date/timezone format checks, interval overlap
    timezones.py: local wall clock <-> absolute UTC instants (DST-aware)
"""

from dayblocks.utils.time_codec import minutes_to_time, time_to_hour, time_to_minutes
from dayblocks.utils.validation import (
    times_overlap,
    validate_date_format,
    validate_time_format,
    validate_timezone,
)

__all__ = [
    "minutes_to_time",
    "time_to_hour",
    "time_to_minutes",
    "times_overlap",
    "validate_date_format",
    "validate_time_format",
    "validate_timezone",
]
