"""
Tool: Reminder Scheduler
Purpose: Decide when (and whether) to remind the user before a block starts

Lifecycle per block:
    no_notification -> scheduled -> fired | suppressed | superseded

- scheduled: a future reminder instant outside quiet hours was found
- suppressed: the instant falls in quiet hours or is already in the past
- superseded: the block was rescheduled; the old delivery receipt is
  cleared and the instant recomputed
- fired: delivery recorded a "push-<receipt>" notification_id

Lead time = prep buffer + default buffer (5 min) + travel time (if known).

Quiet hours are evaluated on the local wall clock of the reminder instant,
in the same timezone the block is scheduled in:
- sleep > wake (e.g. 23:00 / 07:00): quiet in [sleep, 24:00) and [00:00, wake)
- otherwise: quiet in [sleep, wake)

Suppression is a policy outcome, not an error: decide_notification never
raises for well-formed input.

Usage:
    from dayblocks.blocks.notify import calculate_notify_at

    notify_at = calculate_notify_at(
        date="2024-01-15",
        start_time="14:00",
        prep_buffer=10,
        sleep_time="23:00",
        wake_time="07:00",
        timezone="America/New_York",
        clock=clock,
    )
    # datetime(2024, 1, 15, 18, 45, tzinfo=UTC)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Iterable, Optional

from dayblocks.blocks.models import Block, BlockStatus
from dayblocks.clock import Clock, resolve_clock
from dayblocks.config_models import get_config
from dayblocks.utils.time_codec import time_to_minutes
from dayblocks.utils.timezones import (
    absolute_to_wall_clock,
    now_in_timezone,
    sunday_first_index,
    wall_clock_to_absolute,
)

logger = logging.getLogger(__name__)

PUSH_RECEIPT_PREFIX = "push-"

# Weekly review reminder: Sunday, 18:00 local
WEEKLY_REVIEW_DAY_INDEX = 0
WEEKLY_REVIEW_HOUR = 18


class NotificationState(str, Enum):
    NO_NOTIFICATION = "no_notification"
    SCHEDULED = "scheduled"
    FIRED = "fired"
    SUPPRESSED = "suppressed"
    SUPERSEDED = "superseded"


@dataclass(frozen=True)
class NotificationDecision:
    state: NotificationState
    notify_at: Optional[datetime] = None
    reason: Optional[str] = None        # 'quiet_hours' | 'in_past' when suppressed

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "notify_at": self.notify_at.isoformat() if self.notify_at else None,
            "reason": self.reason,
        }


def is_quiet_hours(minutes: int, sleep_time: str, wake_time: str) -> bool:
    """True if ``minutes`` past local midnight falls between sleep and wake."""
    sleep_minutes = time_to_minutes(sleep_time)
    wake_minutes = time_to_minutes(wake_time)

    if sleep_minutes > wake_minutes:
        return minutes >= sleep_minutes or minutes < wake_minutes
    return sleep_minutes <= minutes < wake_minutes


def notification_lead_minutes(prep_buffer: int, estimated_travel_time: int | None = None) -> int:
    lead = prep_buffer + get_config().notifications.default_buffer_minutes
    if estimated_travel_time:
        lead += estimated_travel_time
    return lead


def decide_notification(
    date: str,
    start_time: str,
    prep_buffer: int,
    sleep_time: str,
    wake_time: str,
    timezone: str,
    estimated_travel_time: int | None = None,
    clock: Clock | None = None,
) -> NotificationDecision:
    """
    Compute the reminder for a block starting at ``start_time`` on ``date``.

    Args:
        date: Local date of the block (YYYY-MM-DD)
        start_time: Local start time (HH:MM)
        prep_buffer: Minutes to get ready
        sleep_time: User's sleep time (HH:MM), start of quiet hours
        wake_time: User's wake time (HH:MM), end of quiet hours
        timezone: IANA timezone the date and times are expressed in
        estimated_travel_time: Minutes of travel, if known
        clock: Clock used for the "already in the past" check

    Returns:
        NotificationDecision, SCHEDULED with an absolute UTC instant or
        SUPPRESSED with a reason
    """
    block_start = wall_clock_to_absolute(date, start_time, timezone)
    lead = notification_lead_minutes(prep_buffer, estimated_travel_time)
    notify_at = block_start - timedelta(minutes=lead)

    local = absolute_to_wall_clock(notify_at, timezone)
    if is_quiet_hours(local.minutes, sleep_time, wake_time):
        logger.debug(
            f"Reminder for {date} {start_time} suppressed: "
            f"{local.hours:02d}:{local.minutes_past_hour:02d} is in quiet hours"
        )
        return NotificationDecision(NotificationState.SUPPRESSED, reason="quiet_hours")

    if notify_at <= resolve_clock(clock).now():
        logger.debug(f"Reminder for {date} {start_time} suppressed: already in the past")
        return NotificationDecision(NotificationState.SUPPRESSED, reason="in_past")

    return NotificationDecision(NotificationState.SCHEDULED, notify_at=notify_at)


def calculate_notify_at(
    date: str,
    start_time: str,
    prep_buffer: int,
    sleep_time: str,
    wake_time: str,
    timezone: str,
    estimated_travel_time: int | None = None,
    clock: Clock | None = None,
) -> datetime | None:
    """Reminder instant (aware UTC datetime), or None when suppressed."""
    return decide_notification(
        date=date,
        start_time=start_time,
        prep_buffer=prep_buffer,
        sleep_time=sleep_time,
        wake_time=wake_time,
        timezone=timezone,
        estimated_travel_time=estimated_travel_time,
        clock=clock,
    ).notify_at


def notification_state(block: Block) -> NotificationState:
    """Where a stored block sits in the reminder lifecycle."""
    if block.notification_id and block.notification_id.startswith(PUSH_RECEIPT_PREFIX):
        return NotificationState.FIRED
    if block.notify_at is not None:
        return NotificationState.SCHEDULED
    return NotificationState.NO_NOTIFICATION


def blocks_needing_notifications(
    blocks: Iterable[Block],
    interval_minutes: int | None = None,
    clock: Clock | None = None,
) -> list[Block]:
    """
    Planned blocks whose reminder is due in [now, now + interval).

    Blocks that already carry a push receipt are skipped so a reminder is
    never delivered twice. Results are ordered by reminder instant.
    """
    if interval_minutes is None:
        interval_minutes = get_config().notifications.lookahead_minutes

    now = resolve_clock(clock).now()
    window_end = now + timedelta(minutes=interval_minutes)

    due = [
        b for b in blocks
        if b.notify_at is not None
        and now <= b.notify_at < window_end
        and b.status == BlockStatus.PLANNED
        and not (b.notification_id or "").startswith(PUSH_RECEIPT_PREFIX)
    ]
    return sorted(due, key=lambda b: b.notify_at)


def mark_notification_sent(block: Block, receipt_id: str) -> Block:
    """Record delivery; the block moves to the fired state."""
    return replace(block, notification_id=f"{PUSH_RECEIPT_PREFIX}{receipt_id}")


def format_notification_body(block: Block) -> str:
    if block.requires_travel and block.estimated_travel_time:
        total = block.estimated_travel_time + block.prep_buffer
        return (
            f"Starts at {block.start_time}. Leave in {total} minutes "
            f"({block.estimated_travel_time} min travel + {block.prep_buffer} min prep)."
        )

    if block.prep_buffer > 0:
        return f"Starts at {block.start_time}. {block.prep_buffer} minutes to prepare."

    return f"Starts at {block.start_time}."


def build_reminder_message(block: Block) -> dict[str, Any]:
    """Transport-neutral reminder payload for a delivery service."""
    travel = block.requires_travel
    return {
        "title": block.title,
        "body": format_notification_body(block),
        "data": {"block_id": block.id},
        "category": "TRAVEL_REMINDER" if travel else "TASK_REMINDER",
        "channel": "travel" if travel else "default",
        "priority": "high",
    }


def is_weekly_review_reminder_due(timezone: str, clock: Clock | None = None) -> bool:
    """True during the Sunday 18:00 hour in the user's timezone."""
    local_now = now_in_timezone(timezone, clock)
    return (
        sunday_first_index(local_now.date()) == WEEKLY_REVIEW_DAY_INDEX
        and local_now.hour == WEEKLY_REVIEW_HOUR
    )


__all__ = [
    "PUSH_RECEIPT_PREFIX",
    "NotificationState",
    "NotificationDecision",
    "is_quiet_hours",
    "notification_lead_minutes",
    "decide_notification",
    "calculate_notify_at",
    "notification_state",
    "blocks_needing_notifications",
    "mark_notification_sent",
    "format_notification_body",
    "build_reminder_message",
    "is_weekly_review_reminder_due",
]
