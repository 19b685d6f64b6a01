"""
Tool: Block Planner
Purpose: Create, edit, reschedule, and complete blocks

Pipeline for a new block:
1. Validate date, times and title
2. Reject overlaps with active blocks on the same date (BlockConflictError)
3. Resolve travel time and prep buffer
4. Compute the reminder instant (or None when suppressed)
5. Check the slot's energy against the task's demand and warn on mismatch

Every function takes a snapshot of the user's blocks and returns a new
Block; persisting it is up to the caller.

Usage:
    from dayblocks.blocks.planner import BlockRequest, plan_block

    planned = plan_block(
        BlockRequest(title="Deep work", date="2024-01-15",
                     start_time="09:00", end_time="11:00", energy_level="high"),
        existing_blocks=day_blocks,
        prefs=prefs,
    )
    planned.block.notify_at
    planned.energy_warning
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Optional

from dayblocks.blocks.conflicts import find_conflicts
from dayblocks.blocks.models import Block, BlockSource, BlockStatus
from dayblocks.blocks.notify import calculate_notify_at
from dayblocks.blocks.travel import TravelTimeEntry, resolve_travel_buffer
from dayblocks.clock import Clock, resolve_clock
from dayblocks.config_models import get_config
from dayblocks.energy.models import EnergyLevel
from dayblocks.energy.profile import get_energy_level_for_time
from dayblocks.energy.slots import build_energy_warning
from dayblocks.errors import BlockConflictError
from dayblocks.preferences import UserPreferences
from dayblocks.utils.time_codec import time_to_minutes
from dayblocks.utils.validation import validate_date_format, validate_time_format

logger = logging.getLogger(__name__)


@dataclass
class BlockRequest:
    title: str
    date: str
    start_time: str
    end_time: str
    description: Optional[str] = None
    source: BlockSource = BlockSource.USER_REQUEST
    requires_travel: bool = False
    location_id: Optional[str] = None
    goal_id: Optional[str] = None
    routine_id: Optional[str] = None
    energy_level: Optional[EnergyLevel] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BlockRequest":
        data = data.copy()
        data["source"] = BlockSource(data.get("source", BlockSource.USER_REQUEST.value))
        if data.get("energy_level"):
            data["energy_level"] = EnergyLevel(data["energy_level"])
        return cls(**data)


@dataclass(frozen=True)
class EnergyWarning:
    message: str
    task_energy: EnergyLevel
    slot_energy: EnergyLevel

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "task_energy": self.task_energy.value,
            "slot_energy": self.slot_energy.value,
        }


@dataclass
class PlannedBlock:
    block: Block
    slot_energy: EnergyLevel
    lazy_mode_active: bool
    energy_warning: Optional[EnergyWarning] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "block": self.block.to_dict(),
            "slot_energy": self.slot_energy.value,
            "lazy_mode_active": self.lazy_mode_active,
            "energy_warning": self.energy_warning.to_dict() if self.energy_warning else None,
        }


# =============================================================================
# Validation
# =============================================================================

def validate_title(title: str) -> str:
    """Return the trimmed title, raising ValueError if empty or too long."""
    if not title or not title.strip():
        raise ValueError("Title cannot be empty")
    max_length = get_config().preview.max_title_length
    if len(title) > max_length:
        raise ValueError(f"Title must be {max_length} characters or less")
    return title.strip()


def validate_interval(date: str, start_time: str, end_time: str) -> None:
    """Raise ValueError unless date and times are well-formed and start < end."""
    if not validate_date_format(date):
        raise ValueError("Invalid date format. Use YYYY-MM-DD")
    if not validate_time_format(start_time) or not validate_time_format(end_time):
        raise ValueError("Invalid time format. Use HH:MM (24-hour)")
    if time_to_minutes(start_time) >= time_to_minutes(end_time):
        raise ValueError("End time must be after start time")


def ensure_no_conflicts(
    existing_blocks: Iterable[Block],
    date: str,
    start_time: str,
    end_time: str,
    exclude_block_id: str | None = None,
) -> None:
    conflicts = find_conflicts(existing_blocks, date, start_time, end_time, exclude_block_id)
    if conflicts:
        error = BlockConflictError(conflicts)
        logger.info(f"Rejected {date} {start_time}-{end_time}: {error}")
        raise error


def _notify_at(block: Block, prefs: UserPreferences, clock: Clock | None):
    return calculate_notify_at(
        date=block.date,
        start_time=block.start_time,
        prep_buffer=block.prep_buffer,
        estimated_travel_time=block.estimated_travel_time,
        sleep_time=prefs.sleep_time,
        wake_time=prefs.wake_time,
        timezone=prefs.timezone,
        clock=clock,
    )


# =============================================================================
# Operations
# =============================================================================

def plan_block(
    request: BlockRequest,
    existing_blocks: Iterable[Block],
    prefs: UserPreferences,
    travel_entry: TravelTimeEntry | None = None,
    clock: Clock | None = None,
) -> PlannedBlock:
    """
    Validate and build a new planned block.

    Args:
        request: What to schedule
        existing_blocks: Snapshot of the user's blocks (at least ``request.date``)
        prefs: User preferences
        travel_entry: Cached travel estimate to the block's location, if any
        clock: Clock for reminder and lazy-mode checks

    Returns:
        PlannedBlock with the new block, slot energy and any energy warning

    Raises:
        ValueError: invalid date, times, or title
        BlockConflictError: the interval overlaps an active block
    """
    validate_interval(request.date, request.start_time, request.end_time)
    title = validate_title(request.title)
    ensure_no_conflicts(existing_blocks, request.date, request.start_time, request.end_time)

    travel_minutes, prep_buffer = resolve_travel_buffer(request.requires_travel, travel_entry, clock)

    block = Block(
        title=title,
        date=request.date,
        start_time=request.start_time,
        end_time=request.end_time,
        description=request.description,
        source=request.source,
        status=BlockStatus.PLANNED,
        requires_travel=request.requires_travel,
        location_id=request.location_id,
        estimated_travel_time=travel_minutes,
        goal_id=request.goal_id,
        routine_id=request.routine_id,
        energy_level=request.energy_level,
        prep_buffer=prep_buffer,
        times_postponed=0,
    )
    block.notify_at = _notify_at(block, prefs, clock)

    slot_energy = get_energy_level_for_time(
        request.start_time, prefs.energy_profile, prefs.peak_energy_window
    )
    lazy_active = prefs.is_lazy_mode_active(clock)
    task_energy = block.task_energy

    warning = None
    message = build_energy_warning(task_energy, slot_energy, request.start_time, lazy_active)
    if message:
        warning = EnergyWarning(message=message, task_energy=task_energy, slot_energy=slot_energy)

    logger.info(f"Planned block {block.id} on {block.date} {block.start_time}-{block.end_time}")
    return PlannedBlock(
        block=block,
        slot_energy=slot_energy,
        lazy_mode_active=lazy_active,
        energy_warning=warning,
    )


def update_block(
    block: Block,
    existing_blocks: Iterable[Block],
    prefs: UserPreferences,
    title: str | None = None,
    description: str | None = None,
    start_time: str | None = None,
    end_time: str | None = None,
    energy_level: EnergyLevel | str | None = None,
    clock: Clock | None = None,
) -> Block:
    """
    Edit a block in place on its current date.

    Time changes are re-checked for conflicts (ignoring the block itself),
    and a new start time recomputes the reminder.

    Raises:
        ValueError: invalid title or times
        BlockConflictError: the new interval overlaps another active block
    """
    changes: dict[str, Any] = {}

    if title is not None:
        changes["title"] = validate_title(title)

    if start_time and not validate_time_format(start_time):
        raise ValueError("Invalid start time format. Use HH:MM (24-hour)")
    if end_time and not validate_time_format(end_time):
        raise ValueError("Invalid end time format. Use HH:MM (24-hour)")

    new_start = start_time or block.start_time
    new_end = end_time or block.end_time

    if start_time or end_time:
        if time_to_minutes(new_start) >= time_to_minutes(new_end):
            raise ValueError("End time must be after start time")
        ensure_no_conflicts(existing_blocks, block.date, new_start, new_end, exclude_block_id=block.id)
        changes["start_time"] = new_start
        changes["end_time"] = new_end

    if description is not None:
        changes["description"] = description
    if energy_level is not None:
        changes["energy_level"] = EnergyLevel(energy_level)

    updated = replace(block, **changes)

    if new_start != block.start_time:
        updated.notify_at = _notify_at(updated, prefs, clock)
        updated.notification_id = None

    return updated


def reschedule_block(
    block: Block,
    new_date: str,
    new_start_time: str,
    new_end_time: str,
    existing_blocks: Iterable[Block],
    prefs: UserPreferences,
    clock: Clock | None = None,
) -> Block:
    """
    Move a block to a new date and time.

    The old reminder is superseded: notification_id is cleared and
    notify_at recomputed. The block returns to planned, its postponement
    count goes up by one, and the first date it was planned for is kept in
    original_date.

    Raises:
        ValueError: invalid date or times
        BlockConflictError: the new interval overlaps another active block
    """
    validate_interval(new_date, new_start_time, new_end_time)
    ensure_no_conflicts(existing_blocks, new_date, new_start_time, new_end_time, exclude_block_id=block.id)

    moved = replace(
        block,
        date=new_date,
        start_time=new_start_time,
        end_time=new_end_time,
        original_date=block.original_date or block.date,
        times_postponed=block.times_postponed + 1,
        status=BlockStatus.PLANNED,
        notification_id=None,
    )
    moved.notify_at = _notify_at(moved, prefs, clock)

    logger.info(f"Rescheduled block {block.id} to {new_date} {new_start_time} (postponed {moved.times_postponed}x)")
    return moved


def update_block_status(
    block: Block, status: BlockStatus | str, clock: Clock | None = None
) -> Block:
    """Change status; completing a block stamps completed_at."""
    status = BlockStatus(status)
    changes: dict[str, Any] = {"status": status}
    if status == BlockStatus.COMPLETED:
        changes["completed_at"] = resolve_clock(clock).now()
    return replace(block, **changes)


__all__ = [
    "BlockRequest",
    "EnergyWarning",
    "PlannedBlock",
    "validate_title",
    "validate_interval",
    "ensure_no_conflicts",
    "plan_block",
    "update_block",
    "reschedule_block",
    "update_block_status",
]
