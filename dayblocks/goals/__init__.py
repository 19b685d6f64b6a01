"""Goal Tools - Weekly time goals and how the week is going

Philosophy:
    Progress is counted, never typed in. A goal moves when a block tagged
    to it is completed, and the week's pace says whether that is enough.

Components:
    models.py: Goal, SessionLength, validation rules
    progress.py: Week windows, per-goal progress, agent summaries
    review.py: Weekly review stats, insights, and suggestions

Usage:
    from dayblocks.goals.progress import get_goals_progress_for_agent
    from dayblocks.goals.review import calculate_weekly_review
"""

from .models import CATEGORY_LABELS, GOAL_CATEGORIES, PREFERRED_TIMES, Goal, SessionLength

__all__ = [
    "CATEGORY_LABELS",
    "GOAL_CATEGORIES",
    "PREFERRED_TIMES",
    "Goal",
    "SessionLength",
]
