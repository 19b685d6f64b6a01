"""
Tool: User Preferences
Purpose: The per-user settings record every scheduling decision reads

Features:
- Wake/sleep times (define waking hours and quiet hours)
- Peak energy window and optional 24-hour energy profile
- IANA timezone for all wall-clock <-> absolute conversions
- Lazy mode flag with optional auto-expiry
- Rollover behavior for stale planned blocks

Records are immutable; every update returns a new record and never
partially overwrites the energy profile.

Usage:
    from dayblocks.preferences import UserPreferences, update_energy_profile

    prefs = UserPreferences.from_dict({"timezone": "America/New_York"})
    prefs = update_energy_profile(prefs, "night_owl")
    prefs = toggle_lazy_mode(prefs, True, duration_hours=4)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any

from dayblocks import NOTIFICATION_STYLES, ROLLOVER_BEHAVIORS
from dayblocks.clock import Clock
from dayblocks.energy.lazy_mode import LazyModeState, is_lazy_mode_active
from dayblocks.energy.models import EnergyLevel, EnergyPreset, EnergyProfile, PeakEnergyWindow
from dayblocks.energy.profile import build_energy_profile
from dayblocks.utils.timezones import parse_instant
from dayblocks.utils.validation import validate_time_format, validate_timezone

logger = logging.getLogger(__name__)

DEFAULT_PREFERENCES: dict[str, Any] = {
    "wake_time": "07:00",
    "sleep_time": "23:00",
    "peak_energy_window": "morning",
    "notification_style": "proactive",
    "timezone": "UTC",
    "energy_profile": None,
    "lazy_mode_enabled": False,
    "lazy_mode_until": None,
    "rollover_behavior": "rollover_once",
}


@dataclass(frozen=True)
class UserPreferences:
    wake_time: str = "07:00"
    sleep_time: str = "23:00"
    peak_energy_window: PeakEnergyWindow = PeakEnergyWindow.MORNING
    notification_style: str = "proactive"
    timezone: str = "UTC"
    energy_profile: EnergyProfile | None = None
    lazy_mode_enabled: bool = False
    lazy_mode_until: datetime | None = None
    rollover_behavior: str = "rollover_once"

    def __post_init__(self):
        object.__setattr__(self, "peak_energy_window", self._coerce_window(self.peak_energy_window))
        self.validate()

    @staticmethod
    def _coerce_window(value: Any) -> PeakEnergyWindow:
        try:
            return PeakEnergyWindow(value)
        except ValueError:
            raise ValueError(
                f"Invalid peak energy window: {value}. "
                f"Must be one of {[w.value for w in PeakEnergyWindow]}"
            ) from None

    def validate(self) -> None:
        """
        Check every field, raising ValueError on the first problem.

        Malformed timezone identifiers are rejected here, before any reminder
        is computed with them.
        """
        if not validate_time_format(self.wake_time):
            raise ValueError(f"Invalid wake time format: {self.wake_time}. Use HH:MM (24-hour)")
        if not validate_time_format(self.sleep_time):
            raise ValueError(f"Invalid sleep time format: {self.sleep_time}. Use HH:MM (24-hour)")
        if self.notification_style not in NOTIFICATION_STYLES:
            raise ValueError(
                f"Invalid notification style: {self.notification_style}. "
                f"Must be one of {list(NOTIFICATION_STYLES)}"
            )
        if self.rollover_behavior not in ROLLOVER_BEHAVIORS:
            raise ValueError(
                f"Invalid rollover behavior: {self.rollover_behavior}. "
                f"Must be one of {list(ROLLOVER_BEHAVIORS)}"
            )
        if not validate_timezone(self.timezone):
            raise ValueError(f"Invalid timezone: {self.timezone}")

    @property
    def lazy_mode(self) -> LazyModeState:
        return LazyModeState(enabled=self.lazy_mode_enabled, until=self.lazy_mode_until)

    @property
    def lazy_mode_active(self) -> bool:
        return is_lazy_mode_active(self.lazy_mode_enabled, self.lazy_mode_until)

    def is_lazy_mode_active(self, clock: Clock | None = None) -> bool:
        return is_lazy_mode_active(self.lazy_mode_enabled, self.lazy_mode_until, clock)

    def to_dict(self) -> dict[str, Any]:
        return {
            "wake_time": self.wake_time,
            "sleep_time": self.sleep_time,
            "peak_energy_window": self.peak_energy_window.value,
            "notification_style": self.notification_style,
            "timezone": self.timezone,
            "energy_profile": self.energy_profile.to_dict() if self.energy_profile else None,
            "lazy_mode_enabled": self.lazy_mode_enabled,
            "lazy_mode_until": self.lazy_mode_until.isoformat() if self.lazy_mode_until else None,
            "rollover_behavior": self.rollover_behavior,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserPreferences":
        """Build from a stored record, filling gaps from DEFAULT_PREFERENCES."""
        merged = {**DEFAULT_PREFERENCES, **{k: v for k, v in data.items() if v is not None}}

        profile = merged.get("energy_profile")
        if isinstance(profile, dict):
            profile = EnergyProfile.from_dict(profile)

        return cls(
            wake_time=merged["wake_time"],
            sleep_time=merged["sleep_time"],
            peak_energy_window=merged["peak_energy_window"],
            notification_style=merged["notification_style"],
            timezone=merged["timezone"],
            energy_profile=profile,
            lazy_mode_enabled=bool(merged["lazy_mode_enabled"]),
            lazy_mode_until=parse_instant(merged["lazy_mode_until"]),
            rollover_behavior=merged["rollover_behavior"],
        )


_UPDATABLE_FIELDS = frozenset(f.name for f in fields(UserPreferences)) - {
    "energy_profile",
    "lazy_mode_enabled",
    "lazy_mode_until",
}


def update_preferences(prefs: UserPreferences, **updates: Any) -> UserPreferences:
    """
    Return a copy of ``prefs`` with simple fields replaced.

    The energy profile and lazy mode have their own update functions.
    ``None`` values are ignored.

    Raises:
        ValueError: unknown field, or a value that fails validation
    """
    unknown = set(updates) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown preference fields: {sorted(unknown)}")

    changes = {k: v for k, v in updates.items() if v is not None}
    return replace(prefs, **changes)


def update_energy_profile(
    prefs: UserPreferences,
    preset: EnergyPreset | str,
    hourly_levels: list[EnergyLevel | str] | None = None,
) -> UserPreferences:
    """
    Replace the energy profile wholesale.

    Raises:
        ValueError: "custom" without exactly 24 hourly levels
    """
    profile = build_energy_profile(preset, hourly_levels)
    logger.info(f"Energy profile set to {profile.preset.value}")
    return replace(prefs, energy_profile=profile)


def toggle_lazy_mode(
    prefs: UserPreferences,
    enabled: bool,
    duration_hours: float | None = None,
    clock: Clock | None = None,
) -> UserPreferences:
    """Turn lazy mode on (optionally for ``duration_hours``) or off."""
    state = prefs.lazy_mode.enable(duration_hours, clock) if enabled else prefs.lazy_mode.disable()
    return replace(prefs, lazy_mode_enabled=state.enabled, lazy_mode_until=state.until)


__all__ = [
    "DEFAULT_PREFERENCES",
    "UserPreferences",
    "update_preferences",
    "update_energy_profile",
    "toggle_lazy_mode",
]
