"""
Tool: Block Models
Purpose: Data structures for scheduled blocks, batch previews, and conflicts

Usage:
    from dayblocks.blocks.models import Block, BlockStatus, ProposedBlock

A Block is one activity on one date occupying [start_time, end_time) in the
user's local wall clock. Blocks that were moved or skipped stay in storage
but no longer occupy their slot.
"""

from __future__ import annotations

import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from dayblocks import INACTIVE_BLOCK_STATUSES
from dayblocks.energy.models import EnergyLevel
from dayblocks.utils.time_codec import duration_minutes
from dayblocks.utils.timezones import parse_instant


class BlockStatus(str, Enum):
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    MOVED = "moved"


class BlockSource(str, Enum):
    ROUTINE = "routine"              # Generated from a routine
    USER_REQUEST = "user_request"    # User explicitly asked
    AI_SUGGESTION = "ai_suggestion"  # Assistant proactively suggested
    GOAL_SESSION = "goal_session"    # Scheduled for goal progress


@dataclass
class Block:
    """
    A scheduled activity.

    Attributes:
        id: Block ID
        title: What the user will be doing (1-100 chars)
        date: Local date, YYYY-MM-DD
        start_time: Local start, HH:MM
        end_time: Local end, HH:MM (strictly after start_time)
        status: Lifecycle state
        source: Where the block came from
        goal_id: Goal this block makes progress on
        routine_id: Routine that generated this block
        energy_level: Energy the task demands (None means medium)
        requires_travel: Whether the user has to go somewhere
        location_id: Destination, if any
        estimated_travel_time: Minutes of travel, if known
        prep_buffer: Minutes to get ready before leaving
        notify_at: Absolute UTC instant of the reminder, None if suppressed
        notification_id: Delivery receipt ("push-..." once sent)
        times_postponed: How often the block was rescheduled
        original_date: Date the block was first planned for
        completed_at: When the block was marked completed
    """
    title: str
    date: str
    start_time: str
    end_time: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: BlockStatus = BlockStatus.PLANNED
    source: BlockSource = BlockSource.USER_REQUEST
    description: Optional[str] = None
    goal_id: Optional[str] = None
    routine_id: Optional[str] = None
    energy_level: Optional[EnergyLevel] = None
    requires_travel: bool = False
    location_id: Optional[str] = None
    estimated_travel_time: Optional[int] = None   # minutes
    prep_buffer: int = 0                          # minutes
    notify_at: Optional[datetime] = None
    notification_id: Optional[str] = None
    times_postponed: int = 0
    original_date: Optional[str] = None
    completed_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        """Still occupies its slot (not moved or skipped)."""
        return self.status not in INACTIVE_BLOCK_STATUSES

    @property
    def duration_minutes(self) -> int:
        return duration_minutes(self.start_time, self.end_time)

    @property
    def task_energy(self) -> EnergyLevel:
        return self.energy_level or EnergyLevel.MEDIUM

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        d = asdict(self)
        d["status"] = self.status.value
        d["source"] = self.source.value
        d["energy_level"] = self.energy_level.value if self.energy_level else None
        d["notify_at"] = self.notify_at.isoformat() if self.notify_at else None
        d["completed_at"] = self.completed_at.isoformat() if self.completed_at else None
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Block":
        """Create from dict."""
        data = data.copy()
        data["status"] = BlockStatus(data.get("status", BlockStatus.PLANNED.value))
        data["source"] = BlockSource(data.get("source", BlockSource.USER_REQUEST.value))
        if data.get("energy_level"):
            data["energy_level"] = EnergyLevel(data["energy_level"])
        data["notify_at"] = parse_instant(data.get("notify_at"))
        data["completed_at"] = parse_instant(data.get("completed_at"))
        if "id" in data and data["id"] is None:
            del data["id"]
        return cls(**data)


@dataclass
class ProposedBlock:
    """A block the user or assistant wants to create, not yet validated."""
    title: str
    date: str
    start_time: str
    end_time: str
    description: Optional[str] = None
    requires_travel: bool = False
    energy_level: Optional[EnergyLevel] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProposedBlock":
        return cls(
            title=data.get("title") or "",
            date=data.get("date") or "",
            start_time=data.get("start_time") or "",
            end_time=data.get("end_time") or "",
            description=data.get("description"),
            requires_travel=bool(data.get("requires_travel", False)),
            energy_level=EnergyLevel(data["energy_level"]) if data.get("energy_level") else None,
        )


@dataclass(frozen=True)
class ConflictDescriptor:
    title: str
    start_time: str
    end_time: str
    type: str = "existing"    # 'existing' | 'proposed'

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class BlockValidationResult:
    index: int
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    conflicts_with: list[ConflictDescriptor] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = {
            "index": self.index,
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
        if self.conflicts_with:
            d["conflicts_with"] = [c.to_dict() for c in self.conflicts_with]
        return d


@dataclass
class PreviewSummary:
    total_blocks: int
    valid_blocks: int
    invalid_blocks: int
    has_conflicts: bool
    has_format_errors: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class PreviewResult:
    valid: bool
    block_results: list[BlockValidationResult]
    summary: PreviewSummary

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "block_results": [r.to_dict() for r in self.block_results],
            "summary": self.summary.to_dict(),
        }


__all__ = [
    "BlockStatus",
    "BlockSource",
    "Block",
    "ProposedBlock",
    "ConflictDescriptor",
    "BlockValidationResult",
    "PreviewSummary",
    "PreviewResult",
]
