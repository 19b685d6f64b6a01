"""
Tool: Lazy Mode
Purpose: Time-bounded "go easy on me" toggle that discourages high-energy work

Lazy mode is just two fields on the user's preferences: an enabled flag and
an optional expiry instant. There is no background timer; expiry is checked
every time the state is read.

Usage:
    from dayblocks.energy.lazy_mode import is_lazy_mode_active, LazyModeState

    is_lazy_mode_active(True, None)                    # True (no expiry)
    state = LazyModeState().enable(duration_hours=3, clock=clock)
    state.is_active(clock)                             # True for 3 hours
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

from dayblocks.clock import Clock, resolve_clock
from dayblocks.energy.models import EnergyLevel

logger = logging.getLogger(__name__)


def is_lazy_mode_active(
    enabled: bool | None,
    until: datetime | None = None,
    clock: Clock | None = None,
) -> bool:
    """
    True if lazy mode is on and has not expired.

    Expiry is strict: at exactly ``until`` the mode is already off.
    """
    if not enabled:
        return False
    if until is None:
        return True

    active = resolve_clock(clock).now() < until
    if not active:
        logger.debug(f"Lazy mode expired at {until.isoformat()}")
    return active


@dataclass(frozen=True)
class LazyModeState:
    enabled: bool = False
    until: datetime | None = None

    def is_active(self, clock: Clock | None = None) -> bool:
        return is_lazy_mode_active(self.enabled, self.until, clock)

    def enable(
        self, duration_hours: float | None = None, clock: Clock | None = None
    ) -> "LazyModeState":
        """Turn on, optionally auto-expiring after ``duration_hours``."""
        until = None
        if duration_hours:
            until = resolve_clock(clock).now() + timedelta(hours=duration_hours)
        return LazyModeState(enabled=True, until=until)

    def disable(self) -> "LazyModeState":
        return LazyModeState(enabled=False, until=None)


# =============================================================================
# Lighter alternatives
# =============================================================================

HIGH_ENERGY_SUGGESTIONS = (
    "Consider breaking this into smaller, easier steps",
    "You could reschedule this to a higher-energy day",
    "Try a 15-minute version instead of the full session",
)

MEDIUM_ENERGY_SUGGESTIONS = ("Consider doing just the essential part",)


@dataclass
class LazyAlternative:
    title: str
    energy_level: EnergyLevel
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "energy_level": self.energy_level.value,
            "description": self.description,
        }


@dataclass
class LazyAlternatives:
    lazy_mode_active: bool
    alternatives: list[LazyAlternative] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "lazy_mode_active": self.lazy_mode_active,
            "alternatives": [alt.to_dict() for alt in self.alternatives],
            "suggestions": list(self.suggestions),
        }


def get_lazy_mode_alternatives(
    original_title: str,
    original_energy: EnergyLevel | str,
    lazy_mode_active: bool,
    goal: Any = None,
) -> LazyAlternatives:
    """
    Suggest lighter versions of a task while lazy mode is on.

    Args:
        original_title: Title of the task the user wanted to schedule
        original_energy: Energy the task demands
        lazy_mode_active: Current lazy mode state
        goal: Optional goal the task belongs to (needs ``title`` and
            ``preferred_session_length.min``)

    Returns:
        LazyAlternatives, empty when lazy mode is off
    """
    if not lazy_mode_active:
        return LazyAlternatives(lazy_mode_active=False)

    energy = EnergyLevel(original_energy)
    lowered = original_title.lower()
    result = LazyAlternatives(lazy_mode_active=True)

    if energy == EnergyLevel.HIGH:
        result.alternatives.append(LazyAlternative(
            title=f"Light {lowered}",
            energy_level=EnergyLevel.LOW,
            description="A gentler version of this task",
        ))
        result.alternatives.append(LazyAlternative(
            title=f"Plan for {lowered}",
            energy_level=EnergyLevel.LOW,
            description="Prepare and organize instead of doing the full task",
        ))
        result.suggestions.extend(HIGH_ENERGY_SUGGESTIONS)
    elif energy == EnergyLevel.MEDIUM:
        result.alternatives.append(LazyAlternative(
            title=f"Quick {lowered}",
            energy_level=EnergyLevel.LOW,
            description="A shorter, simpler version",
        ))
        result.suggestions.extend(MEDIUM_ENERGY_SUGGESTIONS)

    if goal is not None:
        result.alternatives.append(LazyAlternative(
            title=f"{goal.preferred_session_length.min}-min {goal.title} session",
            energy_level=EnergyLevel.MEDIUM,
            description="Minimum session length to maintain progress",
        ))

    return result


__all__ = [
    "is_lazy_mode_active",
    "LazyModeState",
    "LazyAlternative",
    "LazyAlternatives",
    "get_lazy_mode_alternatives",
]
