"""
Tool: Routine Blocks
Purpose: Turn weekly routines into today's planned blocks

A routine is a recurring slot on a day of the week ("Gym, Mon 07:00-08:00").
Each morning, routines for the user's local weekday become blocks unless a
block for that routine already exists today.

Usage:
    from dayblocks.blocks.routines import Routine, populate_routine_blocks

    new_blocks = populate_routine_blocks(routines, todays_blocks, prefs, clock=clock)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from dayblocks.blocks.models import Block, BlockSource, BlockStatus
from dayblocks.blocks.notify import calculate_notify_at
from dayblocks.blocks.rollover import DAY_NAMES
from dayblocks.blocks.travel import TravelTimeEntry, resolve_travel_buffer
from dayblocks.clock import Clock
from dayblocks.energy.models import EnergyLevel
from dayblocks.preferences import UserPreferences
from dayblocks.utils.timezones import local_today

logger = logging.getLogger(__name__)

FLEXIBILITY_LEVELS = ("fixed", "semi-flexible", "free")


@dataclass
class Routine:
    id: str
    day_of_week: str              # mon | tue | ... | sun
    start_time: str
    end_time: str
    label: str
    location_id: Optional[str] = None
    flexibility: str = "fixed"
    energy_level: Optional[EnergyLevel] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Routine":
        data = data.copy()
        if data.get("energy_level"):
            data["energy_level"] = EnergyLevel(data["energy_level"])
        return cls(**data)


def populate_routine_blocks(
    routines: Iterable[Routine],
    existing_blocks: Iterable[Block],
    prefs: UserPreferences,
    travel_lookup: Callable[[str], TravelTimeEntry | None] | None = None,
    clock: Clock | None = None,
) -> list[Block]:
    """
    New blocks for today's routines that have no block yet.

    Args:
        routines: All of the user's routines
        existing_blocks: The user's blocks (today's are used for de-duplication)
        prefs: User preferences (timezone decides what "today" is)
        travel_lookup: Returns the cached travel entry to a location id
        clock: Clock for "today" and reminder checks
    """
    today = local_today(prefs.timezone, clock)
    today_str = today.isoformat()
    weekday = DAY_NAMES[today.weekday()]

    already_there = {
        b.routine_id for b in existing_blocks
        if b.date == today_str and b.routine_id
    }

    created = []
    for routine in routines:
        if routine.day_of_week != weekday or routine.id in already_there:
            continue

        requires_travel = bool(routine.location_id)
        entry = travel_lookup(routine.location_id) if (requires_travel and travel_lookup) else None
        travel_minutes, prep_buffer = resolve_travel_buffer(requires_travel, entry, clock)

        block = Block(
            title=routine.label,
            date=today_str,
            start_time=routine.start_time,
            end_time=routine.end_time,
            source=BlockSource.ROUTINE,
            status=BlockStatus.PLANNED,
            requires_travel=requires_travel,
            location_id=routine.location_id,
            estimated_travel_time=travel_minutes,
            prep_buffer=prep_buffer,
            routine_id=routine.id,
            energy_level=routine.energy_level,
        )
        block.notify_at = calculate_notify_at(
            date=today_str,
            start_time=routine.start_time,
            prep_buffer=prep_buffer,
            estimated_travel_time=travel_minutes,
            sleep_time=prefs.sleep_time,
            wake_time=prefs.wake_time,
            timezone=prefs.timezone,
            clock=clock,
        )
        created.append(block)

    if created:
        logger.info(f"Created {len(created)} routine blocks for {today_str}")
    return created


__all__ = ["FLEXIBILITY_LEVELS", "Routine", "populate_routine_blocks"]
