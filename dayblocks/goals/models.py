"""
Tool: Goal Models
Purpose: Weekly time goals and their validation rules

Usage:
    from dayblocks.goals.models import Goal, SessionLength, validate_goal_fields

    goal = Goal(id="g1", title="Spanish", category="learning",
                weekly_target_minutes=300,
                preferred_session_length=SessionLength(30, 60))
    validate_goal_fields(goal)

Progress is never stored on a goal. It is derived from completed blocks on
every read (see progress.py).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NamedTuple, Optional

from dayblocks.energy.models import EnergyLevel

GOAL_CATEGORIES = ("learning", "health", "career", "personal", "creative")
PREFERRED_TIMES = ("morning", "afternoon", "evening", "any")

CATEGORY_LABELS = {
    "learning": "Learning",
    "health": "Health",
    "career": "Career",
    "personal": "Personal",
    "creative": "Creative",
}

MAX_WEEKLY_TARGET_MINUTES = 7 * 24 * 60
MAX_SESSION_MINUTES = 8 * 60
MAX_TITLE_LENGTH = 100


class SessionLength(NamedTuple):
    min: int
    max: int


@dataclass
class Goal:
    """
    A weekly time commitment.

    Attributes:
        id: Goal ID
        title: Display name
        category: learning | health | career | personal | creative
        weekly_target_minutes: Minutes per week to aim for
        preferred_session_length: (min, max) minutes per session
        preferred_time: morning | afternoon | evening | any
        energy_level: Energy a session usually needs
        priority: 1 (highest) to 5 (lowest)
        is_active: Archived goals are inactive
    """
    id: str
    title: str
    category: str
    weekly_target_minutes: int
    preferred_session_length: SessionLength = SessionLength(30, 60)
    preferred_time: str = "any"
    energy_level: EnergyLevel = EnergyLevel.MEDIUM
    priority: int = 3
    is_active: bool = True
    description: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "weekly_target_minutes": self.weekly_target_minutes,
            "preferred_session_length": self.preferred_session_length._asdict(),
            "preferred_time": self.preferred_time,
            "energy_level": self.energy_level.value,
            "priority": self.priority,
            "is_active": self.is_active,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Goal":
        data = data.copy()
        session = data.get("preferred_session_length")
        if isinstance(session, dict):
            data["preferred_session_length"] = SessionLength(session["min"], session["max"])
        elif isinstance(session, (list, tuple)):
            data["preferred_session_length"] = SessionLength(*session)
        if "energy_level" in data:
            data["energy_level"] = EnergyLevel(data["energy_level"])
        return cls(**data)


def validate_goal_fields(goal: Goal) -> None:
    """
    Check a goal before it is stored.

    Raises:
        ValueError: first rule the goal breaks
    """
    if not goal.title or not goal.title.strip():
        raise ValueError("Title cannot be empty")
    if len(goal.title) > MAX_TITLE_LENGTH:
        raise ValueError(f"Title must be {MAX_TITLE_LENGTH} characters or less")

    if goal.category not in GOAL_CATEGORIES:
        raise ValueError(f"Invalid category: {goal.category}. Must be one of {list(GOAL_CATEGORIES)}")
    if goal.preferred_time not in PREFERRED_TIMES:
        raise ValueError(f"Invalid preferred time: {goal.preferred_time}. Must be one of {list(PREFERRED_TIMES)}")

    if goal.weekly_target_minutes <= 0:
        raise ValueError("Weekly target must be greater than 0")
    if goal.weekly_target_minutes > MAX_WEEKLY_TARGET_MINUTES:
        raise ValueError("Weekly target cannot exceed 168 hours")

    session = goal.preferred_session_length
    if session.min <= 0:
        raise ValueError("Minimum session length must be greater than 0")
    if session.max < session.min:
        raise ValueError("Maximum session length must be greater than or equal to minimum")
    if session.max > MAX_SESSION_MINUTES:
        raise ValueError("Session length cannot exceed 8 hours")

    if not 1 <= goal.priority <= 5:
        raise ValueError("Priority must be between 1 and 5")


__all__ = [
    "GOAL_CATEGORIES",
    "PREFERRED_TIMES",
    "CATEGORY_LABELS",
    "SessionLength",
    "Goal",
    "validate_goal_fields",
]
