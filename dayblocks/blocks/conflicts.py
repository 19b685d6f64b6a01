"""
Tool: Block Conflict Detector
Purpose: Find overlaps between proposed intervals and a day's blocks

Two entry points:
1. find_conflicts - one proposed interval against existing blocks
2. validate_schedule_preview - a batch of proposed blocks, validated
   individually, then checked against existing blocks and against the
   earlier blocks in the same batch

Both work on a single snapshot of existing blocks passed in by the caller.
Conflicts come back as data, never as exceptions, so a batch can report
partial success.

Usage:
    from dayblocks.blocks.conflicts import find_conflicts, validate_schedule_preview

    conflicts = find_conflicts(day_blocks, "2024-01-15", "09:00", "10:00")
    preview = validate_schedule_preview(proposed, existing_blocks)
    if not preview.valid:
        for result in preview.block_results:
            print(result.index, result.errors, result.conflicts_with)
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from dayblocks.blocks.models import (
    Block,
    BlockValidationResult,
    ConflictDescriptor,
    PreviewResult,
    PreviewSummary,
    ProposedBlock,
)
from dayblocks.config_models import get_config
from dayblocks.utils.time_codec import time_to_minutes
from dayblocks.utils.validation import (
    times_overlap,
    validate_date_format,
    validate_time_format,
)

logger = logging.getLogger(__name__)


def active_blocks(blocks: Iterable[Block], date: str | None = None) -> list[Block]:
    """Blocks that still occupy their slot, optionally limited to one date."""
    return [
        b for b in blocks
        if b.is_active and (date is None or b.date == date)
    ]


def find_conflicts(
    existing_blocks: Iterable[Block],
    date: str,
    start_time: str,
    end_time: str,
    exclude_block_id: str | None = None,
) -> list[ConflictDescriptor]:
    """
    Active blocks on ``date`` that overlap [start_time, end_time).

    Args:
        existing_blocks: Snapshot of the user's blocks
        date: Date of the proposed interval
        start_time: Proposed start (HH:MM)
        end_time: Proposed end (HH:MM)
        exclude_block_id: Block being edited, so it never conflicts with itself

    Returns:
        Conflict descriptors in snapshot order (empty when the slot is free)
    """
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)

    conflicts = []
    for block in active_blocks(existing_blocks, date):
        if exclude_block_id is not None and block.id == exclude_block_id:
            continue
        if times_overlap(start, end, time_to_minutes(block.start_time), time_to_minutes(block.end_time)):
            conflicts.append(ConflictDescriptor(
                title=block.title,
                start_time=block.start_time,
                end_time=block.end_time,
                type="existing",
            ))
    return conflicts


def _rejected_batch(message: str, total: int) -> PreviewResult:
    logger.debug(f"Schedule preview rejected: {message}")
    return PreviewResult(
        valid=False,
        block_results=[BlockValidationResult(index=0, valid=False, errors=[message])],
        summary=PreviewSummary(
            total_blocks=total,
            valid_blocks=0,
            invalid_blocks=1,
            has_conflicts=False,
            has_format_errors=True,
        ),
    )


def validate_schedule_preview(
    proposed: list[ProposedBlock | dict[str, Any]],
    existing_blocks: Iterable[Block],
) -> PreviewResult:
    """
    Validate a batch of proposed blocks before creating any of them.

    Each block is checked for a non-empty title of at most 100 characters,
    a valid date, valid start/end times and start < end. Blocks with valid
    times and date are then checked against active existing blocks on the
    same date, and against earlier proposed blocks (lower index) on the same
    date. A pair of proposed blocks is therefore reported once, on the later
    block.

    Batches larger than the preview cap, and empty batches, are rejected
    wholesale with a single error at index 0.
    """
    preview_config = get_config().preview
    blocks = [p if isinstance(p, ProposedBlock) else ProposedBlock.from_dict(p) for p in proposed]

    if len(blocks) > preview_config.max_blocks:
        return _rejected_batch(
            f"Maximum {preview_config.max_blocks} blocks allowed for preview. "
            f"You provided {len(blocks)}.",
            len(blocks),
        )
    if not blocks:
        return _rejected_batch("At least one block is required for preview.", 0)

    existing = active_blocks(existing_blocks)

    results: list[BlockValidationResult] = []
    # (index, block, start, end, has_time_format_error) for cross-checks
    parsed: list[tuple[int, ProposedBlock, int, int, bool]] = []
    has_conflicts = False
    has_format_errors = False

    for i, block in enumerate(blocks):
        errors: list[str] = []
        conflicts: list[ConflictDescriptor] = []

        if not block.title or not block.title.strip():
            errors.append("Title cannot be empty")
        elif len(block.title) > preview_config.max_title_length:
            errors.append(f"Title must be {preview_config.max_title_length} characters or less")

        date_ok = validate_date_format(block.date)
        if not date_ok:
            errors.append(f'Invalid date format "{block.date}". Use YYYY-MM-DD')
            has_format_errors = True

        start = end = 0
        time_error = False

        if validate_time_format(block.start_time):
            start = time_to_minutes(block.start_time)
        else:
            errors.append(f'Invalid start time format "{block.start_time}". Use HH:MM (24-hour)')
            has_format_errors = True
            time_error = True

        if validate_time_format(block.end_time):
            end = time_to_minutes(block.end_time)
        else:
            errors.append(f'Invalid end time format "{block.end_time}". Use HH:MM (24-hour)')
            has_format_errors = True
            time_error = True

        if not time_error and start >= end:
            errors.append(
                f"End time ({block.end_time}) must be after start time ({block.start_time})"
            )

        parsed.append((i, block, start, end, time_error))

        if not time_error and date_ok:
            for other in existing:
                if other.date != block.date:
                    continue
                if times_overlap(start, end, time_to_minutes(other.start_time), time_to_minutes(other.end_time)):
                    conflicts.append(ConflictDescriptor(
                        title=other.title,
                        start_time=other.start_time,
                        end_time=other.end_time,
                        type="existing",
                    ))
                    has_conflicts = True

        if not time_error:
            for j, earlier, earlier_start, earlier_end, earlier_error in parsed:
                if j >= i or earlier_error or earlier.date != block.date:
                    continue
                if times_overlap(start, end, earlier_start, earlier_end):
                    conflicts.append(ConflictDescriptor(
                        title=earlier.title,
                        start_time=earlier.start_time,
                        end_time=earlier.end_time,
                        type="proposed",
                    ))
                    has_conflicts = True

        results.append(BlockValidationResult(
            index=i,
            valid=not errors and not conflicts,
            errors=errors,
            conflicts_with=conflicts,
        ))

    valid_count = sum(1 for r in results if r.valid)

    return PreviewResult(
        valid=valid_count == len(results),
        block_results=results,
        summary=PreviewSummary(
            total_blocks=len(blocks),
            valid_blocks=valid_count,
            invalid_blocks=len(results) - valid_count,
            has_conflicts=has_conflicts,
            has_format_errors=has_format_errors,
        ),
    )


__all__ = ["active_blocks", "find_conflicts", "validate_schedule_preview"]
