"""
Tool: Energy Profile
Purpose: Resolve hourly energy levels and score time slots against task demands

Energy comes from one of two sources:
1. A 24-entry hourly profile (preset or custom)
2. The coarse peak window heuristic when no usable profile exists

Lookups never raise: an out-of-range hour against a valid profile
resolves to "medium".

Usage:
    from dayblocks.energy.profile import (
        get_energy_level_for_hour,
        score_slot_for_energy,
        format_energy_schedule,
    )

    get_energy_level_for_hour(9, None, "morning")      # EnergyLevel.HIGH
    score_slot_for_energy("09:00", "10:00", "high", profile, "morning")
    format_energy_schedule(None, "morning", "07:00", "23:00")
    # "07:00-12:00: high energy, 12:00-22:00: medium energy, 22:00-23:00: low energy"
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Mapping

from dayblocks.clock import Clock
from dayblocks.energy.models import (
    HOURS_PER_DAY,
    EnergyLevel,
    EnergyPreset,
    EnergyProfile,
    PeakEnergyWindow,
)
from dayblocks.utils.time_codec import format_hour, time_to_hour, time_to_minutes
from dayblocks.utils.timezones import current_hour

logger = logging.getLogger(__name__)

H, M, L = EnergyLevel.HIGH, EnergyLevel.MEDIUM, EnergyLevel.LOW

# Read-only preset table, indexed by hour 0-23
ENERGY_PRESETS: Mapping[str, tuple[EnergyLevel, ...]] = MappingProxyType({
    EnergyPreset.MORNING_PERSON.value: (
        L, L, L, L, L, L,
        M, H, H, H, H, H,
        M, L, M, M, M, M,
        M, L, L, L, L, L,
    ),
    EnergyPreset.NIGHT_OWL.value: (
        L, L, L, L, L, L,
        L, L, M, M, M, M,
        M, M, H, H, H, H,
        H, H, H, M, M, L,
    ),
    EnergyPreset.STEADY.value: (
        L, L, L, L, L, L,
        M, M, M, M, M, M,
        M, M, M, M, M, M,
        M, M, L, L, L, L,
    ),
})

PRESET_DESCRIPTIONS = MappingProxyType({
    EnergyPreset.MORNING_PERSON.value: (
        "Morning Person",
        "Peak energy in the morning, dip after lunch",
    ),
    EnergyPreset.NIGHT_OWL.value: (
        "Night Owl",
        "Slow start, peak energy in the evening",
    ),
    EnergyPreset.STEADY.value: (
        "Steady",
        "Consistent medium energy throughout the day",
    ),
})

# [start, end) hours for each peak window
PEAK_WINDOW_RANGES = MappingProxyType({
    PeakEnergyWindow.MORNING: (6, 12),
    PeakEnergyWindow.AFTERNOON: (12, 18),
    PeakEnergyWindow.EVENING: (18, 22),
})

# Slot scoring weights
SCORE_EXACT_MATCH = 20
SCORE_HIGH_IN_HIGH = 15
SCORE_HIGH_IN_LOW = -15
SCORE_LOW_IN_HIGH = -5
SCORE_LOW_IN_LOW = 10
SCORE_MEDIUM_FLEX = 5


def get_energy_presets() -> dict[str, dict[str, Any]]:
    """Presets with display labels, for profile pickers."""
    return {
        name: {
            "label": PRESET_DESCRIPTIONS[name][0],
            "description": PRESET_DESCRIPTIONS[name][1],
            "hourly_levels": [level.value for level in levels],
        }
        for name, levels in ENERGY_PRESETS.items()
    }


def derive_energy_from_peak_window(
    hour: int, peak_energy_window: PeakEnergyWindow | str
) -> EnergyLevel:
    """Energy for ``hour`` under the coarse peak window heuristic."""
    # Night hours are always low
    if 0 <= hour < 6:
        return EnergyLevel.LOW
    if hour >= 22:
        return EnergyLevel.LOW

    start, end = PEAK_WINDOW_RANGES[PeakEnergyWindow(peak_energy_window)]
    if start <= hour < end:
        return EnergyLevel.HIGH

    return EnergyLevel.MEDIUM


def get_energy_level_for_hour(
    hour: int,
    energy_profile: EnergyProfile | None,
    peak_energy_window: PeakEnergyWindow | str,
) -> EnergyLevel:
    """
    Energy level for an hour of day.

    A valid 24-level profile wins; out-of-range hours against it give
    "medium". Without a usable profile the peak window decides.
    """
    if energy_profile is not None and energy_profile.is_valid:
        if 0 <= hour < HOURS_PER_DAY:
            return EnergyLevel(energy_profile.hourly_levels[hour])
        return EnergyLevel.MEDIUM

    return derive_energy_from_peak_window(hour, peak_energy_window)


def get_energy_level_for_time(
    time: str,
    energy_profile: EnergyProfile | None,
    peak_energy_window: PeakEnergyWindow | str,
) -> EnergyLevel:
    """Energy level at an "HH:MM" time."""
    return get_energy_level_for_hour(time_to_hour(time), energy_profile, peak_energy_window)


def score_slot_for_energy(
    slot_start_time: str,
    slot_end_time: str,
    task_energy_level: EnergyLevel | str,
    energy_profile: EnergyProfile | None,
    peak_energy_window: PeakEnergyWindow | str,
) -> int:
    """
    Score how well a slot suits a task's energy requirement. Higher is better.

    The slot's energy is read at its midpoint hour. All applicable
    adjustments stack; nothing short-circuits.
    """
    start_minutes = time_to_minutes(slot_start_time)
    end_minutes = time_to_minutes(slot_end_time)
    midpoint_hour = (start_minutes + end_minutes) // 120

    slot_energy = get_energy_level_for_hour(midpoint_hour, energy_profile, peak_energy_window)
    task_energy = EnergyLevel(task_energy_level)

    score = 0

    if task_energy == slot_energy:
        score += SCORE_EXACT_MATCH

    if task_energy == EnergyLevel.HIGH and slot_energy == EnergyLevel.HIGH:
        score += SCORE_HIGH_IN_HIGH

    if task_energy == EnergyLevel.HIGH and slot_energy == EnergyLevel.LOW:
        score += SCORE_HIGH_IN_LOW

    if task_energy == EnergyLevel.LOW and slot_energy == EnergyLevel.HIGH:
        score += SCORE_LOW_IN_HIGH

    if task_energy == EnergyLevel.LOW and slot_energy == EnergyLevel.LOW:
        score += SCORE_LOW_IN_LOW

    if task_energy == EnergyLevel.MEDIUM or slot_energy == EnergyLevel.MEDIUM:
        score += SCORE_MEDIUM_FLEX

    return score


def waking_hours(wake_hour: int, sleep_hour: int) -> list[int]:
    """Hours from wake up to (not including) sleep, wrapping past midnight."""
    if wake_hour < sleep_hour:
        return list(range(wake_hour, sleep_hour))
    if wake_hour > sleep_hour:
        return list(range(wake_hour, 24)) + list(range(0, sleep_hour))
    # Same hour: no waking window
    return []


def format_energy_schedule(
    energy_profile: EnergyProfile | None,
    peak_energy_window: PeakEnergyWindow | str,
    wake_time: str,
    sleep_time: str,
) -> str:
    """
    Summarise the waking day as contiguous energy segments.

    Example: "07:00-12:00: high energy, 12:00-22:00: medium energy"
    """
    wake_hour = time_to_hour(wake_time)
    sleep_hour = time_to_hour(sleep_time)

    segments: list[str] = []
    current_energy: EnergyLevel | None = None
    segment_start = wake_hour

    for hour in waking_hours(wake_hour, sleep_hour):
        energy = get_energy_level_for_hour(hour, energy_profile, peak_energy_window)
        if energy != current_energy:
            if current_energy is not None:
                segments.append(
                    f"{format_hour(segment_start)}-{format_hour(hour)}: "
                    f"{current_energy.value} energy"
                )
            current_energy = energy
            segment_start = hour

    if current_energy is not None:
        segments.append(
            f"{format_hour(segment_start)}-{format_hour(sleep_hour)}: "
            f"{current_energy.value} energy"
        )

    return ", ".join(segments)


def get_current_energy_level(
    energy_profile: EnergyProfile | None,
    peak_energy_window: PeakEnergyWindow | str,
    timezone: str,
    clock: Clock | None = None,
) -> EnergyLevel:
    """Energy level right now in the user's timezone."""
    hour = current_hour(timezone, clock)
    return get_energy_level_for_hour(hour, energy_profile, peak_energy_window)


def build_energy_profile(
    preset: EnergyPreset | str,
    hourly_levels: list[EnergyLevel | str] | None = None,
) -> EnergyProfile:
    """
    Build a complete profile for a preset.

    "custom" needs exactly 24 levels. Named presets use their table unless
    a full 24-level override is supplied.

    Raises:
        ValueError: custom preset without 24 levels, or unknown level names
    """
    preset = EnergyPreset(preset)
    levels = tuple(EnergyLevel(level) for level in hourly_levels) if hourly_levels else ()

    if preset == EnergyPreset.CUSTOM:
        if len(levels) != HOURS_PER_DAY:
            raise ValueError("Custom profile requires exactly 24 hourly energy levels")
        return EnergyProfile(hourly_levels=levels, preset=preset)

    if len(levels) != HOURS_PER_DAY:
        levels = ENERGY_PRESETS[preset.value]
    return EnergyProfile(hourly_levels=levels, preset=preset)


__all__ = [
    "ENERGY_PRESETS",
    "PEAK_WINDOW_RANGES",
    "get_energy_presets",
    "derive_energy_from_peak_window",
    "get_energy_level_for_hour",
    "get_energy_level_for_time",
    "score_slot_for_energy",
    "waking_hours",
    "format_energy_schedule",
    "get_current_energy_level",
    "build_energy_profile",
]
