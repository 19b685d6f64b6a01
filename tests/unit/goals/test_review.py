"""Tests for dayblocks/goals/review.py"""

from dataclasses import replace

import pytest

from dayblocks.blocks.models import BlockStatus
from dayblocks.blocks.rollover import PostponementPattern
from dayblocks.blocks.routines import Routine
from dayblocks.energy.models import EnergyLevel, EnergyPreset, EnergyProfile
from dayblocks.goals.models import Goal
from dayblocks.goals.review import (
    DayStats,
    GoalWeekProgress,
    WeeklyReview,
    calculate_weekly_review,
    energy_alignment_score,
    format_weekly_review_summary,
    get_available_weeks,
    get_weekly_insights,
    get_weekly_suggestions,
    review_goal_status,
)

LAST_WEEK = "2024-01-08"


@pytest.fixture
def run_goal():
    return Goal(id="goal2", title="Run", category="health", weekly_target_minutes=120)


@pytest.fixture
def last_week_blocks(make_block):
    """Mon: 2/2 done (Spanish), Tue: 1/2 done, Wed: 0/1 done."""
    return [
        make_block(date="2024-01-08", goal_id="goal1", status=BlockStatus.COMPLETED),
        make_block(date="2024-01-08", goal_id="goal1", start_time="10:00", end_time="11:00",
                   status=BlockStatus.COMPLETED),
        make_block(date="2024-01-09", status=BlockStatus.COMPLETED),
        make_block(date="2024-01-09", start_time="11:00", end_time="12:00", status=BlockStatus.SKIPPED),
        make_block(date="2024-01-10"),
        make_block(date="2024-01-15", goal_id="goal1", status=BlockStatus.COMPLETED),
    ]


@pytest.fixture
def last_week_review(last_week_blocks, sample_goal, run_goal, utc_prefs, fixed_clock):
    return calculate_weekly_review(
        last_week_blocks, [sample_goal, run_goal], utc_prefs, week_start=LAST_WEEK, clock=fixed_clock
    )


# ─────────────────────────────────────────────────────────────────────────────
# Review Stats
# ─────────────────────────────────────────────────────────────────────────────


class TestCalculateWeeklyReview:
    """Tests for one week's stats and goal progress."""

    def test_window(self, last_week_review):
        assert last_week_review.week_start == "2024-01-08"
        assert last_week_review.week_end == "2024-01-14"
        assert last_week_review.total_blocks == 5

    def test_any_day_selects_its_week(self, last_week_blocks, sample_goal, utc_prefs, fixed_clock):
        review = calculate_weekly_review(last_week_blocks, [sample_goal], utc_prefs, "2024-01-11", fixed_clock)
        assert review.week_start == "2024-01-08"

    def test_stats(self, last_week_review):
        stats = last_week_review.stats()
        assert stats["completed_blocks"] == 3
        assert stats["skipped_blocks"] == 1
        assert stats["planned_blocks"] == 1
        assert stats["completion_rate"] == 60
        assert stats["total_planned_minutes"] == 300
        assert stats["total_completed_minutes"] == 180
        assert stats["total_planned_hours"] == 5.0
        assert stats["total_completed_hours"] == 3.0

    def test_day_stats(self, last_week_review):
        days = {d.day: d for d in last_week_review.day_stats}
        assert [d.day for d in last_week_review.day_stats] == ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]
        assert days["mon"].completion_rate == 100
        assert days["tue"].completion_rate == 50
        assert days["thu"].total_blocks == 0
        assert days["mon"].label == "Mon"

    def test_best_and_worst_day(self, last_week_review):
        assert last_week_review.best_day.day == "mon"
        assert last_week_review.worst_day.day == "wed"
        data = last_week_review.to_dict()
        assert data["best_day"] == {"day": "mon", "label": "Monday", "completion_rate": 100}

    def test_past_week_goal_status_uses_full_week(self, last_week_review):
        progress = {g.goal_id: g for g in last_week_review.goal_progress}
        spanish = progress["goal1"]
        assert spanish.completed_minutes == 120
        assert spanish.sessions_completed == 2
        assert spanish.percent_complete == 40
        assert spanish.average_session_length == 60
        assert spanish.status == "behind"
        assert progress["goal2"].percent_complete == 0

    def test_inactive_goals_left_out(self, last_week_blocks, sample_goal, run_goal, utc_prefs, fixed_clock):
        run_goal.is_active = False
        review = calculate_weekly_review(last_week_blocks, [sample_goal, run_goal], utc_prefs, LAST_WEEK, fixed_clock)
        assert [g.goal_id for g in review.goal_progress] == ["goal1"]

    def test_current_week_by_default(self, last_week_blocks, sample_goal, utc_prefs, fixed_clock):
        review = calculate_weekly_review(last_week_blocks, [sample_goal], utc_prefs, clock=fixed_clock)
        assert review.week_start == "2024-01-15"
        assert review.total_blocks == 1
        # 20% on Monday is within ten points of a 1/7 pace
        assert review.goal_progress[0].percent_complete == 20
        assert review.goal_progress[0].status == "on_track"


class TestReviewGoalStatus:
    def test_statuses(self):
        assert review_goal_status(100, 50) == "complete"
        assert review_goal_status(60, 50) == "ahead"
        assert review_goal_status(50, 50) == "on_track"
        assert review_goal_status(30, 50) == "on_track"
        assert review_goal_status(29, 50) == "behind"


class TestEnergyAlignmentScore:
    def test_without_profile(self, make_block):
        assert energy_alignment_score([make_block(energy_level=EnergyLevel.HIGH)], None) == 100

    def test_without_high_blocks(self, make_block, all_low_profile):
        assert energy_alignment_score([make_block(energy_level=EnergyLevel.LOW)], all_low_profile) == 100

    def test_aligned_share(self, make_block):
        levels = (EnergyLevel.LOW,) * 9 + (EnergyLevel.HIGH,) * 3 + (EnergyLevel.LOW,) * 12
        profile = EnergyProfile(hourly_levels=levels, preset=EnergyPreset.CUSTOM)
        blocks = [
            make_block(energy_level=EnergyLevel.HIGH, start_time="09:00", end_time="10:00"),
            make_block(energy_level=EnergyLevel.HIGH, start_time="14:00", end_time="15:00"),
            make_block(energy_level=EnergyLevel.HIGH, start_time="15:00", end_time="16:00"),
        ]
        assert energy_alignment_score(blocks, profile) == 33


# ─────────────────────────────────────────────────────────────────────────────
# Insights
# ─────────────────────────────────────────────────────────────────────────────


class TestWeeklyInsights:
    def test_no_data(self):
        insights = get_weekly_insights(WeeklyReview(week_start="2024-01-15", week_end="2024-01-21"))
        assert [i.id for i in insights] == ["no-data"]

    def test_most_severe_first(self, last_week_review):
        insights = get_weekly_insights(last_week_review)
        assert [(i.id, i.severity) for i in insights] == [
            ("goal-behind-goal2", "error"),
            ("energy-aligned", "success"),
        ]
        assert insights[0].related_id == "goal2"
        assert insights[0].description == (
            "Only 0% of your 2h target completed. Try scheduling sessions now."
        )

    def test_great_week(self, make_block, utc_prefs, fixed_clock):
        blocks = [
            make_block(date="2024-01-08", start_time=f"{h:02d}:00", end_time=f"{h + 1:02d}:00",
                       status=BlockStatus.COMPLETED, times_postponed=1)
            for h in range(8, 15)
        ]
        review = calculate_weekly_review(blocks, [], utc_prefs, LAST_WEEK, fixed_clock)
        titles = [i.title for i in get_weekly_insights(review)]
        assert titles[0] == "Frequent rescheduling"
        assert "Great week!" in titles
        assert "Mondays are your best" in titles

    def test_energy_misalignment(self, make_block, all_low_profile, utc_prefs, fixed_clock):
        prefs = replace(utc_prefs, energy_profile=all_low_profile)
        blocks = [make_block(date="2024-01-08", energy_level=EnergyLevel.HIGH)]
        review = calculate_weekly_review(blocks, [], prefs, LAST_WEEK, fixed_clock)
        insight = next(i for i in get_weekly_insights(review) if i.type == "energy")
        assert insight.id == "energy-misalignment"
        assert insight.description == "Only 0% of high-energy tasks were scheduled at your peak times."

    def test_to_dict_omits_missing_related_id(self):
        insight = get_weekly_insights(WeeklyReview(week_start="2024-01-15", week_end="2024-01-21"))[0]
        assert "related_id" not in insight.to_dict()


# ─────────────────────────────────────────────────────────────────────────────
# Suggestions
# ─────────────────────────────────────────────────────────────────────────────


class TestWeeklySuggestions:
    """Tests for next-week suggestions."""

    def test_move_routine(self, utc_prefs):
        review = WeeklyReview(
            week_start="2024-01-08",
            week_end="2024-01-14",
            day_stats=[DayStats("mon", 5, 1), DayStats("tue", 2, 1), DayStats("thu", 2, 2)],
        )
        pattern = PostponementPattern("r1", "Gym", 4, 2)
        routine = Routine(id="r1", day_of_week="mon", start_time="07:00", end_time="08:00", label="Gym")

        suggestions = get_weekly_suggestions(review, utc_prefs, [pattern], [routine])

        assert len(suggestions) == 1
        assert suggestions[0].title == 'Move "Gym" to Thursday'
        assert suggestions[0].reasoning == "Your Thursday completion rate is 100% vs 20% on Mondays."
        assert suggestions[0].action == {"type": "move_routine", "routine_id": "r1", "new_day_of_week": "thu"}

    def test_adjust_target(self, utc_prefs):
        progress = GoalWeekProgress(
            goal_id="goal1", title="Spanish", category="learning", target_minutes=300,
            completed_minutes=90, sessions_completed=3, percent_complete=30,
            status="behind", average_session_length=30,
        )
        review = WeeklyReview(week_start="2024-01-08", week_end="2024-01-14", goal_progress=[progress])

        suggestion = get_weekly_suggestions(review, utc_prefs)[0]

        assert suggestion.type == "adjust_target"
        assert suggestion.description == "You're completing about 1.5h instead of 5h weekly."
        assert suggestion.action["new_duration"] == 108

    def test_change_time(self, utc_prefs):
        levels = (EnergyLevel.LOW,) * 9 + (EnergyLevel.HIGH,) * 3 + (EnergyLevel.LOW,) * 12
        prefs = replace(utc_prefs, energy_profile=EnergyProfile(hourly_levels=levels))
        review = WeeklyReview(week_start="2024-01-08", week_end="2024-01-14", energy_alignment_score=40)

        suggestion = get_weekly_suggestions(review, prefs)[0]

        assert suggestion.description == "Schedule demanding tasks between 9:00-12:00."
        assert suggestion.action == {"type": "change_time", "new_start_time": "09:00"}

    def test_no_change_time_without_profile(self, utc_prefs):
        review = WeeklyReview(week_start="2024-01-08", week_end="2024-01-14", energy_alignment_score=40)
        assert get_weekly_suggestions(review, utc_prefs) == []


# ─────────────────────────────────────────────────────────────────────────────
# Week Picker and Summary
# ─────────────────────────────────────────────────────────────────────────────


class TestAvailableWeeks:
    def test_eight_weeks_newest_first(self, fixed_clock):
        weeks = get_available_weeks("UTC", fixed_clock)
        assert len(weeks) == 8
        assert weeks[0] == {"week_start": "2024-01-15", "week_end": "2024-01-21", "label": "This Week"}
        assert weeks[1]["label"] == "Last Week"
        assert weeks[7] == {"week_start": "2023-11-27", "week_end": "2023-12-03", "label": "7 Weeks Ago"}


class TestFormatWeeklyReviewSummary:
    def test_summary(self, last_week_review):
        assert format_weekly_review_summary(last_week_review) == (
            "Week summary: 60% completion rate (3/5 blocks). "
            "Time: 3h completed of 5h planned. "
            "Best day: Monday (100%). "
            "Challenging day: Wednesday (0%). "
            "Goals: Spanish: 40% (behind), Run: 0% (behind)"
        )

    def test_empty(self):
        review = WeeklyReview(week_start="2024-01-15", week_end="2024-01-21")
        assert format_weekly_review_summary(review) == "No weekly review data available yet."
