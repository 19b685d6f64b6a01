"""
Injectable clock.

Anything that compares against "now" (lazy-mode expiry, reminders in the
past, day of week for goal pacing) takes a ``clock`` argument so tests can
pin the current instant instead of patching global time.

Usage:
    from dayblocks.clock import FixedClock, resolve_clock

    clock = FixedClock(datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc))
    clock.advance(minutes=30)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Current instant as a timezone-aware UTC datetime."""
        ...


class SystemClock:
    """Reads the real wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass
class FixedClock:
    """Clock frozen at ``instant`` until explicitly advanced."""

    instant: datetime

    def __post_init__(self):
        if self.instant.tzinfo is None:
            raise ValueError("FixedClock requires a timezone-aware datetime")
        self.instant = self.instant.astimezone(timezone.utc)

    def now(self) -> datetime:
        return self.instant

    def advance(self, **kwargs) -> datetime:
        """Move the clock forward by ``timedelta(**kwargs)``."""
        self.instant = self.instant + timedelta(**kwargs)
        return self.instant


SYSTEM_CLOCK = SystemClock()


def resolve_clock(clock: Clock | None) -> Clock:
    return clock if clock is not None else SYSTEM_CLOCK


__all__ = ["Clock", "SystemClock", "FixedClock", "SYSTEM_CLOCK", "resolve_clock"]
