"""Tests for dayblocks/energy/slots.py"""

from dataclasses import replace

from dayblocks.blocks.models import BlockStatus
from dayblocks.energy.models import EnergyLevel
from dayblocks.energy.slots import (
    build_energy_warning,
    find_free_slots,
    find_optimal_slots,
    get_energy_context,
    validate_energy_match,
)


class TestFindFreeSlots:
    def test_gaps_between_busy_ranges(self):
        assert find_free_slots([(120, 180)], 60, 300) == [(60, 120), (180, 300)]

    def test_overlapping_and_unsorted_busy_ranges(self):
        busy = [(90, 150), (0, 30), (60, 120)]
        assert find_free_slots(busy, 0, 300) == [(30, 60), (150, 300)]

    def test_busy_past_sleep(self):
        assert find_free_slots([(200, 400)], 0, 300) == [(0, 200)]

    def test_busy_after_sleep_does_not_extend_gap(self):
        assert find_free_slots([(1400, 1430)], 420, 1380) == [(420, 1380)]
        assert find_free_slots([(600, 660), (1400, 1430), (1440, 1450)], 420, 1380) == [
            (420, 600),
            (660, 1380),
        ]

    def test_nothing_busy(self):
        assert find_free_slots([], 420, 1320) == [(420, 1320)]


# ─────────────────────────────────────────────────────────────────────────────
# Optimal Slot Search
# ─────────────────────────────────────────────────────────────────────────────


class TestFindOptimalSlots:
    """Tests for ranked slot search on one day."""

    def test_ranks_free_time_around_blocks(self, utc_prefs, make_block, fixed_clock):
        blocks = [make_block(start_time="09:00", end_time="10:00")]
        result = find_optimal_slots("2024-01-15", "high", 60, blocks, utc_prefs, clock=fixed_clock)

        assert [(s.start_time, s.end_time) for s in result.slots[:2]] == [
            ("07:00", "08:00"),
            ("10:00", "11:00"),
        ]
        assert result.slots[0].score == 35
        assert result.slots[0].slot_energy == EnergyLevel.HIGH
        assert result.slots[0].is_optimal

    def test_skips_gaps_that_are_too_short(self, utc_prefs, make_block):
        blocks = [make_block(start_time="09:00", end_time="10:00")]
        result = find_optimal_slots("2024-01-15", "high", 150, blocks, utc_prefs)
        assert [(s.start_time, s.end_time) for s in result.slots] == [("10:00", "12:30")]

    def test_inactive_and_other_day_blocks_ignored(self, utc_prefs, make_block):
        blocks = [
            make_block(start_time="07:00", end_time="08:00", status=BlockStatus.SKIPPED),
            make_block(start_time="07:00", end_time="08:00", status=BlockStatus.MOVED),
            make_block(date="2024-01-16", start_time="07:00", end_time="08:00"),
        ]
        result = find_optimal_slots("2024-01-15", "high", 60, blocks, utc_prefs)
        assert result.slots[0].start_time == "07:00"

    def test_exclude_ranges(self, utc_prefs):
        result = find_optimal_slots(
            "2024-01-15", "high", 60, [], utc_prefs, exclude_ranges=[("07:00", "12:00")]
        )
        slot = result.slots[0]
        assert (slot.start_time, slot.end_time) == ("12:00", "13:00")
        assert slot.slot_energy == EnergyLevel.MEDIUM
        assert slot.score == 5
        assert not slot.is_optimal

    def test_low_task_prefers_medium_hours_and_caps_results(self, utc_prefs, make_block):
        blocks = [
            make_block(start_time=f"{h:02d}:00", end_time=f"{h + 1:02d}:00")
            for h in (8, 10, 12, 14, 16, 18)
        ]
        result = find_optimal_slots("2024-01-15", "low", 60, blocks, utc_prefs)

        assert len(result.slots) == 5
        assert [s.start_time for s in result.slots] == ["13:00", "15:00", "17:00", "19:00", "07:00"]

    def test_reports_lazy_mode(self, utc_prefs, fixed_clock):
        lazy = replace(utc_prefs, lazy_mode_enabled=True)
        assert find_optimal_slots("2024-01-15", "low", 30, [], lazy, clock=fixed_clock).lazy_mode_active
        assert not find_optimal_slots("2024-01-15", "low", 30, [], utc_prefs, clock=fixed_clock).lazy_mode_active

    def test_to_dict(self, utc_prefs):
        data = find_optimal_slots("2024-01-15", "medium", 30, [], utc_prefs).to_dict()
        assert data["slots"][0]["slot_energy"] == "high"
        assert data["lazy_mode_active"] is False


# ─────────────────────────────────────────────────────────────────────────────
# Energy Validation
# ─────────────────────────────────────────────────────────────────────────────


class TestEnergyWarning:
    def test_high_task_in_low_period(self):
        warning = build_energy_warning("high", "low", "23:00", lazy_mode_active=False)
        assert warning == (
            "This high-energy task is scheduled during a low-energy period (23:00). "
            "Consider scheduling earlier when you have more energy."
        )

    def test_high_task_in_lazy_mode(self):
        warning = build_energy_warning("high", "high", "09:00", lazy_mode_active=True)
        assert warning.startswith("Lazy mode is active")

    def test_no_warning_otherwise(self):
        assert build_energy_warning("high", "medium", "14:00", lazy_mode_active=False) is None
        assert build_energy_warning("low", "low", "23:00", lazy_mode_active=True) is None


class TestValidateEnergyMatch:
    def test_good_match(self, utc_prefs, fixed_clock):
        result = validate_energy_match("09:00", "10:00", "high", utc_prefs, fixed_clock)
        assert result["is_match"] is True
        assert result["slot_energy"] == "high"
        assert result["score"] == 35
        assert result["warning"] is None

    def test_poor_match_warns(self, utc_prefs, fixed_clock):
        result = validate_energy_match("23:00", "23:30", "high", utc_prefs, fixed_clock)
        assert result["is_match"] is False
        assert result["slot_energy"] == "low"
        assert "low-energy period (23:00)" in result["warning"]


class TestEnergyContext:
    def test_snapshot(self, utc_prefs, fixed_clock):
        context = get_energy_context(utc_prefs, fixed_clock)
        assert context == {
            "current_energy": "medium",
            "energy_schedule": "07:00-12:00: high energy, 12:00-22:00: medium energy",
            "lazy_mode_active": False,
            "lazy_mode_until": None,
            "energy_profile": None,
            "peak_energy_window": "morning",
        }
