"""Block Tools - Put activities on the calendar and remind people in time

Philosophy:
    A reminder that arrives after you should have left is worse than none.
    A reminder at 3am is worse still.

Components:
    models.py: Block, ProposedBlock, conflict and preview result types
    conflicts.py: Overlap detection and batch schedule preview
    notify.py: Reminder timing, quiet hours, delivery bookkeeping
    travel.py: Travel-time cache entries and prep buffers
    planner.py: Create, edit, reschedule, and complete blocks
    rollover.py: Stale block handling and postponement patterns
    routines.py: Daily blocks generated from weekly routines

Usage:
    from dayblocks.blocks.planner import BlockRequest, plan_block
    from dayblocks.blocks.conflicts import validate_schedule_preview
"""

from .models import (
    Block,
    BlockSource,
    BlockStatus,
    BlockValidationResult,
    ConflictDescriptor,
    PreviewResult,
    PreviewSummary,
    ProposedBlock,
)

__all__ = [
    "Block",
    "BlockSource",
    "BlockStatus",
    "BlockValidationResult",
    "ConflictDescriptor",
    "PreviewResult",
    "PreviewSummary",
    "ProposedBlock",
]
