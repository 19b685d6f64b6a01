"""
Tool: Weekly Review
Purpose: Summarize a week of blocks into stats, insights, and suggestions

The review covers one Monday-to-Sunday week. Every block in the week counts
toward the overall and per-day stats whatever its status; goal progress
counts completed blocks only.

Usage:
    from dayblocks.goals.review import calculate_weekly_review, get_weekly_insights

    review = calculate_weekly_review(blocks, goals, prefs, week_start="2024-01-15", clock=clock)
    for insight in get_weekly_insights(review):
        print(insight.severity, insight.title)
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Iterable, Optional

from dayblocks.blocks.models import Block, BlockStatus
from dayblocks.blocks.rollover import DAY_NAMES, PostponementPattern
from dayblocks.blocks.routines import Routine
from dayblocks.clock import Clock
from dayblocks.energy.models import EnergyLevel, EnergyProfile
from dayblocks.goals.models import Goal
from dayblocks.goals.progress import current_week_start, in_window, week_start_for, week_window
from dayblocks.preferences import UserPreferences
from dayblocks.utils.rounding import format_number, minutes_to_hours, percent, round_half_up
from dayblocks.utils.time_codec import time_to_hour
from dayblocks.utils.timezones import local_today, sunday_first_index
from dayblocks.utils.validation import parse_date

logger = logging.getLogger(__name__)

DAY_LABELS = {
    "mon": "Monday",
    "tue": "Tuesday",
    "wed": "Wednesday",
    "thu": "Thursday",
    "fri": "Friday",
    "sat": "Saturday",
    "sun": "Sunday",
}

SEVERITY_ORDER = {"error": 0, "warning": 1, "success": 2, "info": 3}

MAX_SUGGESTIONS = 5
AVAILABLE_WEEKS = 8


# =============================================================================
# Review data
# =============================================================================

@dataclass
class DayStats:
    day: str                     # mon | tue | ... | sun
    total_blocks: int = 0
    completed_blocks: int = 0
    total_minutes: int = 0
    completed_minutes: int = 0

    @property
    def label(self) -> str:
        return self.day.capitalize()

    @property
    def completion_rate(self) -> int:
        return percent(self.completed_blocks, self.total_blocks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "label": self.label,
            "total_blocks": self.total_blocks,
            "completed_blocks": self.completed_blocks,
            "completion_rate": self.completion_rate,
            "total_minutes": self.total_minutes,
            "completed_minutes": self.completed_minutes,
        }


@dataclass
class GoalWeekProgress:
    goal_id: str
    title: str
    category: str
    target_minutes: int
    completed_minutes: int
    sessions_completed: int
    percent_complete: int
    status: str                  # ahead | on_track | behind | complete
    average_session_length: int

    def to_dict(self) -> dict[str, Any]:
        return dict(self.__dict__)


@dataclass
class WeeklyReview:
    week_start: str
    week_end: str
    blocks: list[Block] = field(default_factory=list)
    day_stats: list[DayStats] = field(default_factory=list)
    goal_progress: list[GoalWeekProgress] = field(default_factory=list)
    energy_alignment_score: int = 100

    def _count(self, status: BlockStatus) -> int:
        return sum(1 for b in self.blocks if b.status == status)

    @property
    def total_blocks(self) -> int:
        return len(self.blocks)

    @property
    def completed_blocks(self) -> int:
        return self._count(BlockStatus.COMPLETED)

    @property
    def completion_rate(self) -> int:
        return percent(self.completed_blocks, self.total_blocks)

    @property
    def total_planned_minutes(self) -> int:
        return sum(b.duration_minutes for b in self.blocks)

    @property
    def total_completed_minutes(self) -> int:
        return sum(b.duration_minutes for b in self.blocks if b.status == BlockStatus.COMPLETED)

    @property
    def total_postponements(self) -> int:
        return sum(b.times_postponed for b in self.blocks)

    @property
    def best_day(self) -> Optional[DayStats]:
        best = None
        for day in self.day_stats:
            if day.total_blocks and (best is None or day.completion_rate > best.completion_rate):
                best = day
        return best

    @property
    def worst_day(self) -> Optional[DayStats]:
        worst = None
        for day in self.day_stats:
            if day.total_blocks and (worst is None or day.completion_rate < worst.completion_rate):
                worst = day
        return worst

    def stats(self) -> dict[str, Any]:
        return {
            "total_blocks": self.total_blocks,
            "completed_blocks": self.completed_blocks,
            "skipped_blocks": self._count(BlockStatus.SKIPPED),
            "in_progress_blocks": self._count(BlockStatus.IN_PROGRESS),
            "planned_blocks": self._count(BlockStatus.PLANNED),
            "completion_rate": self.completion_rate,
            "total_planned_minutes": self.total_planned_minutes,
            "total_completed_minutes": self.total_completed_minutes,
            "total_planned_hours": minutes_to_hours(self.total_planned_minutes),
            "total_completed_hours": minutes_to_hours(self.total_completed_minutes),
            "postponed_blocks": sum(1 for b in self.blocks if b.times_postponed > 0),
            "total_postponements": self.total_postponements,
        }

    def to_dict(self) -> dict[str, Any]:
        def _day_ref(day: Optional[DayStats]):
            if day is None:
                return None
            return {"day": day.day, "label": DAY_LABELS[day.day], "completion_rate": day.completion_rate}

        return {
            "week_start": self.week_start,
            "week_end": self.week_end,
            "stats": self.stats(),
            "day_stats": [d.to_dict() for d in self.day_stats],
            "best_day": _day_ref(self.best_day),
            "worst_day": _day_ref(self.worst_day),
            "goal_progress": [g.to_dict() for g in self.goal_progress],
            "energy_alignment_score": self.energy_alignment_score,
        }


def _week_fraction(week_start: date, today: date) -> float:
    """How much of the reviewed week has passed (Sunday counts as the whole week)."""
    if today >= week_start + timedelta(days=7):
        return 1.0
    index = sunday_first_index(today)
    return 1.0 if index == 0 else index / 7


def review_goal_status(pct: int, expected: float) -> str:
    if pct >= 100:
        return "complete"
    if pct >= expected + 10:
        return "ahead"
    if pct < expected - 20:
        return "behind"
    return "on_track"


def energy_alignment_score(blocks: Iterable[Block], profile: Optional[EnergyProfile]) -> int:
    """
    Share of high-energy blocks that start in a high-energy hour.

    Without a valid hourly profile nothing can be judged, and the score is 100.
    """
    if profile is None or not profile.is_valid:
        return 100
    high = [b for b in blocks if b.energy_level == EnergyLevel.HIGH]
    if not high:
        return 100
    aligned = sum(
        1 for b in high
        if profile.hourly_levels[time_to_hour(b.start_time)] == EnergyLevel.HIGH
    )
    return percent(aligned, len(high))


def calculate_weekly_review(
    blocks: Iterable[Block],
    goals: Iterable[Goal],
    prefs: UserPreferences,
    week_start: date | str | None = None,
    clock: Clock | None = None,
) -> WeeklyReview:
    """
    Build the review for one week.

    Args:
        blocks: The user's blocks (only the week's are used)
        goals: The user's goals (only active ones are reported)
        prefs: Preferences for timezone and energy profile
        week_start: Any day of the week to review; defaults to this week
        clock: Clock for "today"
    """
    if week_start is None:
        start = current_week_start(prefs.timezone, clock)
    else:
        start = week_start_for(week_start)
    window = week_window(start)
    week_blocks = [b for b in blocks if in_window(b, window)]

    by_day = {day: DayStats(day=day) for day in DAY_NAMES}
    for block in week_blocks:
        stats = by_day[DAY_NAMES[parse_date(block.date).weekday()]]
        stats.total_blocks += 1
        stats.total_minutes += block.duration_minutes
        if block.status == BlockStatus.COMPLETED:
            stats.completed_blocks += 1
            stats.completed_minutes += block.duration_minutes

    expected = _week_fraction(start, local_today(prefs.timezone, clock)) * 100
    goal_progress = []
    for goal in goals:
        if not goal.is_active:
            continue
        sessions = [
            b for b in week_blocks
            if b.goal_id == goal.id and b.status == BlockStatus.COMPLETED
        ]
        completed = sum(b.duration_minutes for b in sessions)
        pct = percent(completed, goal.weekly_target_minutes)
        goal_progress.append(GoalWeekProgress(
            goal_id=goal.id,
            title=goal.title,
            category=goal.category,
            target_minutes=goal.weekly_target_minutes,
            completed_minutes=completed,
            sessions_completed=len(sessions),
            percent_complete=pct,
            status=review_goal_status(pct, expected),
            average_session_length=round_half_up(completed / len(sessions)) if sessions else 0,
        ))

    review = WeeklyReview(
        week_start=start.isoformat(),
        week_end=(start + timedelta(days=6)).isoformat(),
        blocks=week_blocks,
        day_stats=[by_day[day] for day in DAY_NAMES],
        goal_progress=goal_progress,
        energy_alignment_score=energy_alignment_score(week_blocks, prefs.energy_profile),
    )
    logger.debug(
        f"Weekly review {review.week_start}: {review.total_blocks} blocks, "
        f"{review.completion_rate}% complete"
    )
    return review


# =============================================================================
# Insights
# =============================================================================

@dataclass
class WeeklyInsight:
    id: str
    type: str                    # postponement | goal | energy | pattern | achievement
    severity: str                # error | warning | success | info
    title: str
    description: str
    related_id: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "type": self.type,
            "severity": self.severity,
            "title": self.title,
            "description": self.description,
        }
        if self.related_id:
            data["related_id"] = self.related_id
        return data


def _hours(minutes: int) -> str:
    return format_number(minutes_to_hours(minutes))


def get_weekly_insights(review: WeeklyReview) -> list[WeeklyInsight]:
    """Observations about the week, most severe first."""
    if review.total_blocks == 0:
        return [WeeklyInsight(
            id="no-data",
            type="pattern",
            severity="info",
            title="No data yet",
            description="Start scheduling blocks to see insights about your week!",
        )]

    insights = []
    rate = review.completion_rate

    if rate >= 80:
        insights.append(WeeklyInsight(
            "high-completion", "achievement", "success", "Great week!",
            f"You completed {rate}% of your scheduled blocks. Keep it up!",
        ))
    if rate < 50 and review.total_blocks >= 5:
        insights.append(WeeklyInsight(
            "low-completion", "pattern", "warning", "Completion rate dropped",
            f"Only {rate}% of blocks were completed. "
            "Consider scheduling fewer blocks or shorter sessions.",
        ))

    worst, best = review.worst_day, review.best_day
    if worst and worst.completion_rate < 50 and review.total_blocks >= 7:
        label = DAY_LABELS[worst.day]
        insights.append(WeeklyInsight(
            "worst-day", "pattern", "warning", f"{label}s are tough",
            f"Your completion rate on {label}s is only {worst.completion_rate}%. "
            "Consider scheduling lighter tasks.",
        ))
    if best and best.completion_rate >= 90 and review.total_blocks >= 7:
        label = DAY_LABELS[best.day]
        insights.append(WeeklyInsight(
            "best-day", "achievement", "success", f"{label}s are your best",
            f"You have a {best.completion_rate}% completion rate on {label}s. "
            "Great for important tasks!",
        ))

    if review.total_postponements >= 5:
        insights.append(WeeklyInsight(
            "high-postponements", "postponement", "warning", "Frequent rescheduling",
            f"You postponed tasks {review.total_postponements} times this week. "
            "Consider more realistic scheduling.",
        ))

    for goal in review.goal_progress:
        if goal.status == "complete":
            insights.append(WeeklyInsight(
                f"goal-complete-{goal.goal_id}", "goal", "success",
                f"{goal.title} - Goal reached!",
                f"You hit your weekly target of {_hours(goal.target_minutes)}h "
                f"with {goal.sessions_completed} sessions.",
                related_id=goal.goal_id,
            ))
        elif goal.status == "behind" and goal.percent_complete < 30:
            insights.append(WeeklyInsight(
                f"goal-behind-{goal.goal_id}", "goal", "error",
                f"{goal.title} - Falling behind",
                f"Only {goal.percent_complete}% of your {_hours(goal.target_minutes)}h target "
                "completed. Try scheduling sessions now.",
                related_id=goal.goal_id,
            ))

        if goal.sessions_completed >= 3 and goal.average_session_length > 0:
            if goal.average_session_length < goal.target_minutes / 5 * 0.6:
                insights.append(WeeklyInsight(
                    f"goal-short-sessions-{goal.goal_id}", "goal", "info",
                    f"{goal.title} - Short sessions",
                    f"Your average session is {goal.average_session_length} min. "
                    "Consider longer focused sessions.",
                    related_id=goal.goal_id,
                ))

    score = review.energy_alignment_score
    if score < 50:
        insights.append(WeeklyInsight(
            "energy-misalignment", "energy", "warning", "Energy timing mismatch",
            f"Only {score}% of high-energy tasks were scheduled at your peak times.",
        ))
    elif score >= 80:
        insights.append(WeeklyInsight(
            "energy-aligned", "energy", "success", "Great energy alignment",
            f"{score}% of demanding tasks matched your peak energy times!",
        ))

    return sorted(insights, key=lambda i: SEVERITY_ORDER[i.severity])


# =============================================================================
# Suggestions
# =============================================================================

@dataclass
class WeeklySuggestion:
    id: str
    type: str                    # move_routine | change_time | adjust_target
    title: str
    description: str
    reasoning: str
    action: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "reasoning": self.reasoning,
            "action": dict(self.action),
        }


def _move_routine_suggestions(
    review: WeeklyReview,
    patterns: Iterable[PostponementPattern],
    routines: Iterable[Routine],
) -> list[WeeklySuggestion]:
    routine_map = {r.id: r for r in routines}
    day_map = {d.day: d for d in review.day_stats}
    suggestions = []

    for pattern in patterns:
        if pattern.total_postponements < 3:
            continue
        routine = routine_map.get(pattern.routine_id)
        if routine is None:
            continue

        current_day = routine.day_of_week
        current_rate = day_map[current_day].completion_rate if current_day in day_map else 0
        better = sorted(
            (d for d in review.day_stats
             if d.day != current_day and d.completion_rate > current_rate + 10),
            key=lambda d: d.completion_rate,
            reverse=True,
        )
        if not better:
            continue

        target = better[0]
        suggestions.append(WeeklySuggestion(
            id=f"move-{pattern.routine_id}",
            type="move_routine",
            title=f'Move "{pattern.title}" to {DAY_LABELS[target.day]}',
            description=(
                f"This routine has been postponed {pattern.total_postponements} times "
                f"from {DAY_LABELS[current_day]}s."
            ),
            reasoning=(
                f"Your {DAY_LABELS[target.day]} completion rate is {target.completion_rate}% "
                f"vs {current_rate}% on {DAY_LABELS[current_day]}s."
            ),
            action={"type": "move_routine", "routine_id": pattern.routine_id, "new_day_of_week": target.day},
        ))
    return suggestions


def _adjust_target_suggestions(review: WeeklyReview) -> list[WeeklySuggestion]:
    suggestions = []
    for goal in review.goal_progress:
        if goal.sessions_completed < 3 or goal.percent_complete >= 50:
            continue
        suggested = math.ceil(goal.completed_minutes * 1.2)
        if suggested >= goal.target_minutes * 0.8:
            continue
        suggestions.append(WeeklySuggestion(
            id=f"adjust-goal-{goal.goal_id}",
            type="adjust_target",
            title=f'Adjust "{goal.title}" weekly target',
            description=(
                f"You're completing about {_hours(goal.completed_minutes)}h "
                f"instead of {_hours(goal.target_minutes)}h weekly."
            ),
            reasoning="A more achievable target can build momentum and consistency.",
            action={"type": "adjust_target", "goal_id": goal.goal_id, "new_duration": suggested},
        ))
    return suggestions


def _change_time_suggestion(
    review: WeeklyReview, profile: Optional[EnergyProfile]
) -> Optional[WeeklySuggestion]:
    if review.energy_alignment_score >= 60 or profile is None or not profile.is_valid:
        return None
    peak_hours = [h for h, level in enumerate(profile.hourly_levels) if level == EnergyLevel.HIGH]
    if not peak_hours:
        return None

    peak_start, peak_end = min(peak_hours), max(peak_hours) + 1
    return WeeklySuggestion(
        id="energy-scheduling",
        type="change_time",
        title="Optimize task timing",
        description=f"Schedule demanding tasks between {peak_start}:00-{peak_end}:00.",
        reasoning="Your peak energy hours are underutilized.",
        action={"type": "change_time", "new_start_time": f"{peak_start:02d}:00"},
    )


def get_weekly_suggestions(
    review: WeeklyReview,
    prefs: UserPreferences,
    patterns: Iterable[PostponementPattern] = (),
    routines: Iterable[Routine] = (),
) -> list[WeeklySuggestion]:
    """Up to five concrete changes the user could make next week."""
    suggestions = _move_routine_suggestions(review, patterns, routines)
    suggestions.extend(_adjust_target_suggestions(review))
    energy = _change_time_suggestion(review, prefs.energy_profile)
    if energy:
        suggestions.append(energy)
    return suggestions[:MAX_SUGGESTIONS]


# =============================================================================
# Week picker and agent summary
# =============================================================================

def get_available_weeks(tz_name: str, clock: Clock | None = None) -> list[dict[str, str]]:
    """The current week and the seven before it, newest first."""
    this_week = current_week_start(tz_name, clock)
    weeks = []
    for i in range(AVAILABLE_WEEKS):
        start = this_week - timedelta(weeks=i)
        if i == 0:
            label = "This Week"
        elif i == 1:
            label = "Last Week"
        else:
            label = f"{i} Weeks Ago"
        weeks.append({
            "week_start": start.isoformat(),
            "week_end": (start + timedelta(days=6)).isoformat(),
            "label": label,
        })
    return weeks


def format_weekly_review_summary(review: WeeklyReview) -> str:
    """Compact review line for the assistant's context."""
    if review.total_blocks == 0:
        return "No weekly review data available yet."

    stats = review.stats()
    parts = [
        f"Week summary: {review.completion_rate}% completion rate "
        f"({review.completed_blocks}/{review.total_blocks} blocks)",
        f"Time: {format_number(stats['total_completed_hours'])}h completed of "
        f"{format_number(stats['total_planned_hours'])}h planned",
    ]

    best, worst = review.best_day, review.worst_day
    if best:
        parts.append(f"Best day: {DAY_LABELS[best.day]} ({best.completion_rate}%)")
    if worst and worst.completion_rate < 70:
        parts.append(f"Challenging day: {DAY_LABELS[worst.day]} ({worst.completion_rate}%)")

    if review.goal_progress:
        goals = ", ".join(
            f"{g.title}: {g.percent_complete}% ({g.status})" for g in review.goal_progress
        )
        parts.append(f"Goals: {goals}")

    if review.energy_alignment_score < 60:
        parts.append(f"Energy alignment: {review.energy_alignment_score}% (needs improvement)")
    if review.total_postponements > 3:
        parts.append(f"Postponed {review.total_postponements} times this week")

    return ". ".join(parts)


__all__ = [
    "DAY_LABELS",
    "DayStats",
    "GoalWeekProgress",
    "WeeklyReview",
    "review_goal_status",
    "energy_alignment_score",
    "calculate_weekly_review",
    "WeeklyInsight",
    "get_weekly_insights",
    "WeeklySuggestion",
    "get_weekly_suggestions",
    "get_available_weeks",
    "format_weekly_review_summary",
]
