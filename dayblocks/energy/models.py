"""
Tool: Energy Models
Purpose: Data structures for the hour-by-hour energy model

Usage:
    from dayblocks.energy.models import (
        EnergyLevel,
        EnergyPreset,
        EnergyProfile,
        PeakEnergyWindow,
    )
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

HOURS_PER_DAY = 24


class EnergyLevel(str, Enum):
    """Energy capacity for an hour, or required by a task."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class PeakEnergyWindow(str, Enum):
    """Coarse fallback used when no hourly profile exists."""

    MORNING = "morning"      # [6, 12)
    AFTERNOON = "afternoon"  # [12, 18)
    EVENING = "evening"      # [18, 22)


class EnergyPreset(str, Enum):
    MORNING_PERSON = "morning_person"
    NIGHT_OWL = "night_owl"
    STEADY = "steady"
    CUSTOM = "custom"


@dataclass(frozen=True)
class EnergyProfile:
    """
    A user's hourly energy levels.

    Only a profile with exactly 24 levels is usable. Anything else is kept
    as stored but treated as absent, and lookups fall back to the peak
    window heuristic.
    """

    hourly_levels: tuple[EnergyLevel, ...] = field(default_factory=tuple)
    preset: EnergyPreset = EnergyPreset.CUSTOM

    @property
    def is_valid(self) -> bool:
        return len(self.hourly_levels) == HOURS_PER_DAY

    def to_dict(self) -> dict[str, Any]:
        return {
            "hourly_levels": [level.value for level in self.hourly_levels],
            "preset": self.preset.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EnergyProfile":
        levels = data.get("hourly_levels") or data.get("hourlyLevels") or []
        return cls(
            hourly_levels=tuple(EnergyLevel(level) for level in levels),
            preset=EnergyPreset(data.get("preset", EnergyPreset.CUSTOM.value)),
        )


__all__ = [
    "HOURS_PER_DAY",
    "EnergyLevel",
    "PeakEnergyWindow",
    "EnergyPreset",
    "EnergyProfile",
]
