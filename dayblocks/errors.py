"""Exception types raised for bad input.

Policy outcomes (a suppressed reminder, an inactive lazy mode, a poor slot
score) are ordinary return values and never show up here.
"""

from __future__ import annotations

from typing import Any


class FormatError(ValueError):
    """A string does not have the expected shape (e.g. "9am" for HH:MM)."""


class RangeError(ValueError):
    """A value is well-formed but outside its allowed range."""


class BlockConflictError(ValueError):
    """A proposed block overlaps an active block on the same date."""

    def __init__(self, conflicts: list[Any]):
        self.conflicts = conflicts
        first = conflicts[0]
        super().__init__(
            f'Conflicts with "{first.title}" ({first.start_time}-{first.end_time})'
        )


__all__ = ["FormatError", "RangeError", "BlockConflictError"]
