"""dayblocks Test Suite

This package contains all tests for the dayblocks scheduling engine.

Test organization:
- unit/: Unit tests for individual modules
  - utils/: Time codec, validation, timezone arithmetic, rounding
  - energy/: Energy profile, lazy mode, slot search
  - blocks/: Conflicts, preview, reminders, travel, planner, rollover, routines
  - goals/: Goal progress and weekly review

Running tests:
    # All tests
    pytest

    # Specific area
    pytest tests/unit/blocks/
"""
