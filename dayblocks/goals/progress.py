"""
Tool: Goal Progress
Purpose: Derive weekly goal progress from completed blocks

Progress is computed on read. For the week window [Monday, Monday + 7 days),
every completed block that references a goal counts toward it with its full
duration.

On-track rules (all in the user's timezone):
- expected progress is the linear pace through the week, with Sunday as
  day 0 (so Sunday expects 0%)
- a goal is on track when it is within the grace points of that pace
- the agent-facing status is "complete" at 100%, "behind" when under the
  threshold from Thursday on, and "on track" otherwise

Usage:
    from dayblocks.goals.progress import summarize_goal_progress, format_goals_summary

    summaries = summarize_goal_progress(goals, blocks, "Europe/London", clock=clock)
    context_line = format_goals_summary(goals, blocks, "Europe/London", clock=clock)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Iterable, Optional

from dayblocks.blocks.models import Block, BlockStatus
from dayblocks.clock import Clock
from dayblocks.config_models import get_config
from dayblocks.goals.models import Goal
from dayblocks.utils.rounding import format_number, minutes_to_hours, percent, round_half_up
from dayblocks.utils.timezones import day_index_in_week, local_today
from dayblocks.utils.validation import parse_date

logger = logging.getLogger(__name__)

STATUS_COMPLETE = "complete"
STATUS_BEHIND = "behind"
STATUS_ON_TRACK = "on track"


# =============================================================================
# Week windows
# =============================================================================

def week_start_for(day: date | str) -> date:
    """Monday of the ISO week containing ``day``."""
    if isinstance(day, str):
        day = parse_date(day)
    return day - timedelta(days=day.weekday())


def week_window(week_start: date | str) -> tuple[str, str]:
    """Half-open ``[start, end)`` window as YYYY-MM-DD strings."""
    start = parse_date(week_start) if isinstance(week_start, str) else week_start
    return start.isoformat(), (start + timedelta(days=7)).isoformat()


def current_week_start(tz_name: str, clock: Clock | None = None) -> date:
    """Monday of the current week in the user's timezone."""
    return week_start_for(local_today(tz_name, clock))


def in_window(block: Block, window: tuple[str, str]) -> bool:
    start, end = window
    return start <= block.date < end


# =============================================================================
# Aggregation
# =============================================================================

@dataclass
class WeeklyProgress:
    completed_minutes: int = 0
    sessions_completed: int = 0


def calculate_weekly_progress(
    blocks: Iterable[Block], week_start: date | str
) -> dict[str, WeeklyProgress]:
    """
    Completed minutes and sessions per goal id for one week.

    Only blocks with status ``completed`` and a goal id count.
    """
    window = week_window(week_start)
    progress: dict[str, WeeklyProgress] = {}
    for block in blocks:
        if block.status != BlockStatus.COMPLETED or not block.goal_id:
            continue
        if not in_window(block, window):
            continue
        entry = progress.setdefault(block.goal_id, WeeklyProgress())
        entry.completed_minutes += block.duration_minutes
        entry.sessions_completed += 1
    return progress


def percent_complete(completed_minutes: int, weekly_target_minutes: int) -> int:
    """Rounded percentage of the weekly target; 0 when the target is not positive."""
    return percent(completed_minutes, weekly_target_minutes)


def expected_progress(day_index: int) -> int:
    """Linear pace through the week for a Sunday-first day index."""
    return round_half_up(day_index / 7 * 100)


def is_on_track(pct: int, day_index: int) -> bool:
    grace = get_config().goals.on_track_grace_points
    return pct >= expected_progress(day_index) - grace


def goal_status(pct: int, day_index: int) -> str:
    """complete | behind | on track"""
    config = get_config().goals
    if pct >= 100:
        return STATUS_COMPLETE
    if pct < config.behind_threshold_percent and day_index >= config.behind_from_day_index:
        return STATUS_BEHIND
    return STATUS_ON_TRACK


@dataclass
class GoalProgressSummary:
    goal: Goal
    completed_minutes: int
    sessions_completed: int
    percent_complete: int
    is_on_track: bool
    status: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.goal.id,
            "title": self.goal.title,
            "category": self.goal.category,
            "weekly_target_minutes": self.goal.weekly_target_minutes,
            "completed_minutes": self.completed_minutes,
            "sessions_completed": self.sessions_completed,
            "percent_complete": self.percent_complete,
            "is_on_track": self.is_on_track,
            "status": self.status,
            "is_active": self.goal.is_active,
            "energy_level": self.goal.energy_level.value,
            "preferred_time": self.goal.preferred_time,
        }


def summarize_goal_progress(
    goals: Iterable[Goal],
    blocks: Iterable[Block],
    tz_name: str,
    clock: Clock | None = None,
) -> list[GoalProgressSummary]:
    """This week's progress for each goal, in the order given."""
    week_start = current_week_start(tz_name, clock)
    day_index = day_index_in_week(tz_name, clock)
    progress = calculate_weekly_progress(blocks, week_start)

    summaries = []
    for goal in goals:
        entry = progress.get(goal.id, WeeklyProgress())
        pct = percent_complete(entry.completed_minutes, goal.weekly_target_minutes)
        summaries.append(GoalProgressSummary(
            goal=goal,
            completed_minutes=entry.completed_minutes,
            sessions_completed=entry.sessions_completed,
            percent_complete=pct,
            is_on_track=is_on_track(pct, day_index),
            status=goal_status(pct, day_index),
        ))
    return summaries


def get_goals_progress_for_agent(
    goals: Iterable[Goal],
    blocks: Iterable[Block],
    tz_name: str,
    clock: Clock | None = None,
    goal_id: Optional[str] = None,
    category: Optional[str] = None,
) -> dict[str, Any]:
    """
    Goal progress in the shape the assistant's tools return.

    Args:
        goals: The user's goals
        blocks: Blocks covering at least the current week
        tz_name: User timezone
        clock: Clock for "this week" and the day index
        goal_id: Only this goal
        category: Only goals in this category (ignored with goal_id)

    Returns:
        dict with success, goals, count, and a message when nothing matched

    Raises:
        ValueError: goal_id does not match any goal
    """
    goals = list(goals)
    blocks = list(blocks)

    if goal_id:
        goal = next((g for g in goals if g.id == goal_id), None)
        if goal is None:
            raise ValueError("Goal not found")
        summary = summarize_goal_progress([goal], blocks, tz_name, clock)[0]
        return {"success": True, "goals": [summary.to_dict()], "count": 1}

    if category:
        goals = [g for g in goals if g.category == category]
    goals = goals[:get_config().goals.agent_goal_limit]

    if not goals:
        message = (
            f'No goals found in the "{category}" category.' if category
            else "No goals found. Create some goals to track your progress!"
        )
        return {"success": True, "goals": [], "count": 0, "message": message}

    summaries = summarize_goal_progress(goals, blocks, tz_name, clock)
    summaries.sort(key=lambda s: (not s.goal.is_active, s.is_on_track))

    return {
        "success": True,
        "goals": [s.to_dict() for s in summaries],
        "count": len(summaries),
    }


def format_goals_summary(
    goals: Iterable[Goal],
    blocks: Iterable[Block],
    tz_name: str,
    clock: Clock | None = None,
) -> str:
    """One line per active goal for the assistant's context."""
    active = [g for g in goals if g.is_active]
    if not active:
        return "No active goals"

    parts = []
    for s in summarize_goal_progress(active, blocks, tz_name, clock):
        completed_hours = format_number(minutes_to_hours(s.completed_minutes))
        target_hours = format_number(minutes_to_hours(s.goal.weekly_target_minutes))
        parts.append(
            f"{s.goal.title} ({s.goal.category}): {completed_hours}/{target_hours}h this week "
            f"({s.percent_complete}%, {s.status}), prefers {s.goal.preferred_time}, "
            f"{s.goal.energy_level.value} energy"
        )
    return "; ".join(parts)


# =============================================================================
# Goal listing and lifecycle
# =============================================================================

def sort_goals(goals: Iterable[Goal]) -> list[Goal]:
    """Active goals first, then by priority (1 first)."""
    return sorted(goals, key=lambda g: (not g.is_active, g.priority))


def get_goal_detail(
    goal: Goal, blocks: Iterable[Block], recent_limit: int = 10
) -> dict[str, Any]:
    """All-time totals for one goal plus its most recent completed sessions."""
    sessions = [
        b for b in blocks
        if b.goal_id == goal.id and b.status == BlockStatus.COMPLETED
    ]
    sessions.sort(key=lambda b: b.date, reverse=True)
    return {
        **goal.to_dict(),
        "total_minutes": sum(b.duration_minutes for b in sessions),
        "total_sessions": len(sessions),
        "recent_sessions": [
            {
                "id": b.id,
                "date": b.date,
                "start_time": b.start_time,
                "end_time": b.end_time,
                "duration": b.duration_minutes,
            }
            for b in sessions[:recent_limit]
        ],
    }


def toggle_goal_active(goal: Goal) -> Goal:
    goal.is_active = not goal.is_active
    logger.info(f"Goal {goal.id} is now {'active' if goal.is_active else 'inactive'}")
    return goal


def remove_goal(
    goal_id: str, blocks: Iterable[Block], delete_blocks: bool = False
) -> list[Block]:
    """
    Detach a deleted goal from its blocks.

    Args:
        goal_id: The goal being deleted
        blocks: The user's blocks
        delete_blocks: Drop the goal's blocks instead of clearing their goal id

    Returns:
        The blocks that remain
    """
    remaining = []
    affected = 0
    for block in blocks:
        if block.goal_id != goal_id:
            remaining.append(block)
            continue
        affected += 1
        if not delete_blocks:
            block.goal_id = None
            remaining.append(block)

    action = "deleted" if delete_blocks else "unlinked"
    logger.info(f"Removed goal {goal_id}: {affected} blocks {action}")
    return remaining


__all__ = [
    "STATUS_COMPLETE",
    "STATUS_BEHIND",
    "STATUS_ON_TRACK",
    "week_start_for",
    "week_window",
    "current_week_start",
    "day_index_in_week",
    "in_window",
    "WeeklyProgress",
    "calculate_weekly_progress",
    "percent_complete",
    "expected_progress",
    "is_on_track",
    "goal_status",
    "GoalProgressSummary",
    "summarize_goal_progress",
    "get_goals_progress_for_agent",
    "format_goals_summary",
    "sort_goals",
    "get_goal_detail",
    "toggle_goal_active",
    "remove_goal",
]
