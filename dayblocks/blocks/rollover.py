"""
Tool: Rollover
Purpose: Deal with planned blocks whose day has passed, and spot routines
that keep getting pushed back

Rollover behaviors (per user preference):
- auto_skip: stale blocks are marked skipped
- rollover_once: stale blocks move to today the first time, and are
  skipped if they were already postponed
- prompt_agent: stale blocks are tagged [NEEDS_REVIEW] for the assistant

Usage:
    from dayblocks.blocks.rollover import process_rollover, get_postponement_insights

    result = process_rollover(blocks, today, prefs, clock=clock)
    insights = get_postponement_insights(get_postponement_patterns(blocks, today))
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Any, Iterable

from dayblocks.blocks.models import Block, BlockStatus
from dayblocks.blocks.notify import calculate_notify_at
from dayblocks.clock import Clock
from dayblocks.config_models import get_config
from dayblocks.preferences import UserPreferences
from dayblocks.utils.rounding import percent
from dayblocks.utils.validation import parse_date

logger = logging.getLogger(__name__)

NEEDS_REVIEW_TAG = "[NEEDS_REVIEW]"

DAY_NAMES = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")


@dataclass
class RolloverResult:
    blocks: list[Block] = field(default_factory=list)    # Updated blocks only
    skipped: int = 0
    rolled_over: int = 0
    marked_for_agent: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "blocks": [b.to_dict() for b in self.blocks],
            "skipped": self.skipped,
            "rolled_over": self.rolled_over,
            "marked_for_agent": self.marked_for_agent,
        }


def stale_blocks(blocks: Iterable[Block], today: str) -> list[Block]:
    """Planned blocks dated before ``today`` (YYYY-MM-DD)."""
    return [b for b in blocks if b.status == BlockStatus.PLANNED and b.date < today]


def process_rollover(
    blocks: Iterable[Block],
    today: str,
    prefs: UserPreferences,
    clock: Clock | None = None,
) -> RolloverResult:
    """Apply the user's rollover behavior to every stale planned block."""
    behavior = prefs.rollover_behavior
    result = RolloverResult()

    for block in stale_blocks(blocks, today):
        if behavior == "auto_skip":
            result.blocks.append(replace(block, status=BlockStatus.SKIPPED))
            result.skipped += 1

        elif behavior == "rollover_once":
            if block.times_postponed < 1:
                moved = replace(
                    block,
                    date=today,
                    original_date=block.original_date or block.date,
                    times_postponed=block.times_postponed + 1,
                    notification_id=None,
                )
                moved.notify_at = calculate_notify_at(
                    date=today,
                    start_time=block.start_time,
                    prep_buffer=block.prep_buffer,
                    estimated_travel_time=block.estimated_travel_time,
                    sleep_time=prefs.sleep_time,
                    wake_time=prefs.wake_time,
                    timezone=prefs.timezone,
                    clock=clock,
                )
                result.blocks.append(moved)
                result.rolled_over += 1
            else:
                result.blocks.append(replace(block, status=BlockStatus.SKIPPED))
                result.skipped += 1

        elif behavior == "prompt_agent":
            if NEEDS_REVIEW_TAG not in (block.description or ""):
                description = f"{block.description or ''} {NEEDS_REVIEW_TAG}".strip()
                result.blocks.append(replace(block, description=description))
                result.marked_for_agent += 1

    logger.info(
        f"Rollover ({behavior}): {result.rolled_over} rolled over, "
        f"{result.skipped} skipped, {result.marked_for_agent} marked for review"
    )
    return result


# =============================================================================
# Postponement patterns
# =============================================================================

@dataclass
class PostponementPattern:
    routine_id: str
    title: str
    total_postponements: int
    occurrences: int

    @property
    def average_postponements_per_block(self) -> float:
        return self.total_postponements / self.occurrences

    def to_dict(self) -> dict[str, Any]:
        return {
            "routine_id": self.routine_id,
            "title": self.title,
            "total_postponements": self.total_postponements,
            "occurrences": self.occurrences,
            "average_postponements_per_block": self.average_postponements_per_block,
        }


def _cutoff(today: str | date, days: int) -> str:
    day = parse_date(today) if isinstance(today, str) else today
    return (day - timedelta(days=days)).isoformat()


def get_postponement_patterns(
    blocks: Iterable[Block], today: str | date, limit: int | None = None
) -> list[PostponementPattern]:
    """
    Routines that were postponed at least ``min_pattern_postponements``
    times over the recent window, most postponed first.
    """
    config = get_config().rollover
    if limit is None:
        limit = config.pattern_scan_limit
    cutoff = _cutoff(today, config.postponement_window_days)

    recent = [b for b in blocks if b.date >= cutoff and b.times_postponed > 0][:limit]

    patterns: dict[str, PostponementPattern] = {}
    for block in recent:
        if not block.routine_id:
            continue
        pattern = patterns.get(block.routine_id)
        if pattern:
            pattern.total_postponements += block.times_postponed
            pattern.occurrences += 1
        else:
            patterns[block.routine_id] = PostponementPattern(
                routine_id=block.routine_id,
                title=block.title,
                total_postponements=block.times_postponed,
                occurrences=1,
            )

    significant = [
        p for p in patterns.values()
        if p.total_postponements >= config.min_pattern_postponements
    ]
    return sorted(significant, key=lambda p: p.total_postponements, reverse=True)


def get_postponement_insights(patterns: Iterable[PostponementPattern]) -> list[str]:
    """One sentence per pattern for the assistant's context."""
    insights = []
    for p in patterns:
        if p.total_postponements >= 5:
            insights.append(
                f'"{p.title}" has been postponed {p.total_postponements} times across '
                f"{p.occurrences} scheduled sessions. Consider rescheduling to a more "
                "suitable time or breaking it into smaller tasks."
            )
        elif p.average_postponements_per_block >= 2:
            insights.append(
                f'"{p.title}" is frequently postponed multiple times per session '
                f"(avg {p.average_postponements_per_block:.1f}x). This routine might need adjustment."
            )
        else:
            insights.append(f'"{p.title}" was postponed {p.total_postponements} times recently.')
    return insights


def get_weekly_postponement_summary(blocks: Iterable[Block], today: str | date) -> dict[str, Any]:
    """Postponement and completion counts over the last seven days."""
    cutoff = _cutoff(today, 7)
    recent = [b for b in blocks if b.date >= cutoff]

    by_day: Counter[str] = Counter({day: 0 for day in DAY_NAMES})
    for block in recent:
        if block.times_postponed > 0:
            by_day[DAY_NAMES[parse_date(block.date).weekday()]] += block.times_postponed

    worst_day, worst_count = None, 0
    for day in DAY_NAMES:
        if by_day[day] > worst_count:
            worst_day, worst_count = day, by_day[day]

    total = len(recent)
    completed = sum(1 for b in recent if b.status == BlockStatus.COMPLETED)

    return {
        "total_blocks": total,
        "completed_blocks": completed,
        "skipped_blocks": sum(1 for b in recent if b.status == BlockStatus.SKIPPED),
        "postponed_blocks": sum(1 for b in recent if b.times_postponed > 0),
        "total_postponements": sum(b.times_postponed for b in recent),
        "completion_rate": percent(completed, total),
        "postponements_by_day": dict(by_day),
        "worst_day": worst_day,
        "worst_day_count": worst_count,
    }


__all__ = [
    "NEEDS_REVIEW_TAG",
    "RolloverResult",
    "stale_blocks",
    "process_rollover",
    "PostponementPattern",
    "get_postponement_patterns",
    "get_postponement_insights",
    "get_weekly_postponement_summary",
]
