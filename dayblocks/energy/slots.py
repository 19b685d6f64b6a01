"""
Tool: Slot Finder
Purpose: Find open time on a day and rank it by energy fit

Usage:
    from dayblocks.energy.slots import find_optimal_slots

    result = find_optimal_slots(
        "2024-01-15", "high", 60, blocks, prefs, clock=clock,
    )
    for slot in result.slots:
        print(slot.start_time, slot.end_time, slot.score)

Free time is the waking window (wake -> sleep on the same day) minus every
active block and every explicitly excluded range.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from dayblocks import INACTIVE_BLOCK_STATUSES
from dayblocks.clock import Clock
from dayblocks.config_models import get_config
from dayblocks.energy.models import EnergyLevel
from dayblocks.energy.profile import (
    format_energy_schedule,
    get_current_energy_level,
    get_energy_level_for_time,
    score_slot_for_energy,
)
from dayblocks.preferences import UserPreferences
from dayblocks.utils.time_codec import minutes_to_time, time_to_minutes

logger = logging.getLogger(__name__)


@dataclass
class ScoredSlot:
    start_time: str
    end_time: str
    slot_energy: EnergyLevel
    score: int
    is_optimal: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "start_time": self.start_time,
            "end_time": self.end_time,
            "slot_energy": self.slot_energy.value,
            "score": self.score,
            "is_optimal": self.is_optimal,
        }


@dataclass
class SlotSearchResult:
    slots: list[ScoredSlot] = field(default_factory=list)
    lazy_mode_active: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "slots": [slot.to_dict() for slot in self.slots],
            "lazy_mode_active": self.lazy_mode_active,
        }


def find_free_slots(
    busy_ranges: Iterable[tuple[int, int]],
    wake_minutes: int,
    sleep_minutes: int,
) -> list[tuple[int, int]]:
    """
    Gaps between busy ranges inside [wake, sleep), as minute pairs.

    No gap extends past sleep, even when a busy range starts after it.

    Busy ranges may overlap each other and need not be sorted.
    """
    free: list[tuple[int, int]] = []
    current_start = wake_minutes

    for busy_start, busy_end in sorted(busy_ranges):
        gap_end = min(busy_start, sleep_minutes)
        if gap_end > current_start:
            free.append((current_start, gap_end))
        current_start = max(current_start, busy_end)

    if current_start < sleep_minutes:
        free.append((current_start, sleep_minutes))

    return free


def find_optimal_slots(
    date: str,
    task_energy: EnergyLevel | str,
    duration_minutes: int,
    blocks: Iterable[Any],
    prefs: UserPreferences,
    exclude_ranges: Iterable[tuple[str, str]] | None = None,
    clock: Clock | None = None,
) -> SlotSearchResult:
    """
    Rank open slots on ``date`` for a task of ``duration_minutes``.

    Args:
        date: Day to search (YYYY-MM-DD)
        task_energy: Energy the task demands
        duration_minutes: Required length
        blocks: The user's blocks (other dates and inactive ones are ignored)
        prefs: User preferences (waking window, energy profile, lazy mode)
        exclude_ranges: Extra ("HH:MM", "HH:MM") ranges to treat as busy
        clock: Clock for the lazy-mode check

    Returns:
        SlotSearchResult with at most ``slots.max_results`` slots, best first
    """
    task_energy = EnergyLevel(task_energy)

    busy = [
        (time_to_minutes(b.start_time), time_to_minutes(b.end_time))
        for b in blocks
        if b.date == date and b.status not in INACTIVE_BLOCK_STATUSES
    ]
    for start_time, end_time in exclude_ranges or ():
        busy.append((time_to_minutes(start_time), time_to_minutes(end_time)))

    free = find_free_slots(
        busy,
        time_to_minutes(prefs.wake_time),
        time_to_minutes(prefs.sleep_time),
    )

    scored: list[ScoredSlot] = []
    for slot_start, slot_end in free:
        if slot_end - slot_start < duration_minutes:
            continue

        start_time = minutes_to_time(slot_start)
        end_time = minutes_to_time(min(slot_start + duration_minutes, slot_end))
        slot_energy = get_energy_level_for_time(
            start_time, prefs.energy_profile, prefs.peak_energy_window
        )

        scored.append(ScoredSlot(
            start_time=start_time,
            end_time=end_time,
            slot_energy=slot_energy,
            score=score_slot_for_energy(
                start_time, end_time, task_energy,
                prefs.energy_profile, prefs.peak_energy_window,
            ),
            is_optimal=slot_energy == task_energy,
        ))

    # Stable sort keeps earlier slots first among equal scores
    scored.sort(key=lambda s: s.score, reverse=True)

    return SlotSearchResult(
        slots=scored[:get_config().slots.max_results],
        lazy_mode_active=prefs.is_lazy_mode_active(clock),
    )


def build_energy_warning(
    task_energy: EnergyLevel | str,
    slot_energy: EnergyLevel | str,
    start_time: str,
    lazy_mode_active: bool,
) -> str | None:
    """Warning text for a poorly placed high-energy task, or None."""
    task_energy = EnergyLevel(task_energy)
    slot_energy = EnergyLevel(slot_energy)

    if task_energy == EnergyLevel.HIGH and slot_energy == EnergyLevel.LOW:
        return (
            f"This high-energy task is scheduled during a low-energy period ({start_time}). "
            "Consider scheduling earlier when you have more energy."
        )
    if task_energy == EnergyLevel.HIGH and lazy_mode_active:
        return "Lazy mode is active. Consider a lighter task or scheduling this for another day."
    return None


def validate_energy_match(
    start_time: str,
    end_time: str,
    task_energy: EnergyLevel | str,
    prefs: UserPreferences,
    clock: Clock | None = None,
) -> dict[str, Any]:
    """Check whether a chosen time suits a task's energy demand."""
    task_energy = EnergyLevel(task_energy)
    slot_energy = get_energy_level_for_time(
        start_time, prefs.energy_profile, prefs.peak_energy_window
    )
    lazy_active = prefs.is_lazy_mode_active(clock)

    return {
        "is_match": task_energy == slot_energy,
        "task_energy": task_energy.value,
        "slot_energy": slot_energy.value,
        "score": score_slot_for_energy(
            start_time, end_time, task_energy,
            prefs.energy_profile, prefs.peak_energy_window,
        ),
        "warning": build_energy_warning(task_energy, slot_energy, start_time, lazy_active),
        "lazy_mode_active": lazy_active,
    }


def get_energy_context(prefs: UserPreferences, clock: Clock | None = None) -> dict[str, Any]:
    """Snapshot of the user's energy situation right now."""
    return {
        "current_energy": get_current_energy_level(
            prefs.energy_profile, prefs.peak_energy_window, prefs.timezone, clock
        ).value,
        "energy_schedule": format_energy_schedule(
            prefs.energy_profile, prefs.peak_energy_window, prefs.wake_time, prefs.sleep_time
        ),
        "lazy_mode_active": prefs.is_lazy_mode_active(clock),
        "lazy_mode_until": prefs.lazy_mode_until.isoformat() if prefs.lazy_mode_until else None,
        "energy_profile": prefs.energy_profile.to_dict() if prefs.energy_profile else None,
        "peak_energy_window": prefs.peak_energy_window.value,
    }


__all__ = [
    "ScoredSlot",
    "SlotSearchResult",
    "find_free_slots",
    "find_optimal_slots",
    "build_energy_warning",
    "validate_energy_match",
    "get_energy_context",
]
