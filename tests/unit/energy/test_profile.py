"""Tests for dayblocks/energy/profile.py

Key behaviors:
- a valid 24-hour profile wins over the peak window
- out-of-range hours never raise
- slot scores stack every matching adjustment
"""

import pytest

from dayblocks.energy.models import EnergyLevel, EnergyPreset, EnergyProfile, PeakEnergyWindow
from dayblocks.energy.profile import (
    ENERGY_PRESETS,
    build_energy_profile,
    derive_energy_from_peak_window,
    format_energy_schedule,
    get_current_energy_level,
    get_energy_level_for_hour,
    get_energy_level_for_time,
    get_energy_presets,
    score_slot_for_energy,
    waking_hours,
)


# ─────────────────────────────────────────────────────────────────────────────
# Presets
# ─────────────────────────────────────────────────────────────────────────────


class TestPresets:
    def test_every_preset_covers_the_day(self):
        for name, levels in ENERGY_PRESETS.items():
            assert len(levels) == 24, name

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            ENERGY_PRESETS["steady"] = ()

    def test_morning_person_peaks_early(self):
        levels = ENERGY_PRESETS["morning_person"]
        assert levels[9] == EnergyLevel.HIGH
        assert levels[13] == EnergyLevel.LOW
        assert levels[20] == EnergyLevel.LOW

    def test_night_owl_peaks_late(self):
        levels = ENERGY_PRESETS["night_owl"]
        assert levels[7] == EnergyLevel.LOW
        assert levels[14] == EnergyLevel.HIGH
        assert levels[23] == EnergyLevel.LOW

    def test_presets_for_display(self):
        presets = get_energy_presets()
        assert set(presets) == {"morning_person", "night_owl", "steady"}
        assert presets["night_owl"]["label"] == "Night Owl"
        assert presets["steady"]["hourly_levels"][10] == "medium"


class TestBuildEnergyProfile:
    def test_named_preset_uses_table(self):
        profile = build_energy_profile("night_owl")
        assert profile.preset == EnergyPreset.NIGHT_OWL
        assert profile.hourly_levels == ENERGY_PRESETS["night_owl"]
        assert profile.is_valid

    def test_custom_requires_24_levels(self):
        with pytest.raises(ValueError, match="exactly 24"):
            build_energy_profile("custom", ["high"] * 23)

    def test_custom_with_24_levels(self):
        profile = build_energy_profile("custom", ["low"] * 12 + ["high"] * 12)
        assert profile.preset == EnergyPreset.CUSTOM
        assert profile.hourly_levels[12] == EnergyLevel.HIGH

    def test_short_override_on_named_preset_ignored(self):
        profile = build_energy_profile("steady", ["high"] * 5)
        assert profile.hourly_levels == ENERGY_PRESETS["steady"]

    def test_unknown_preset(self):
        with pytest.raises(ValueError):
            build_energy_profile("early_bird")


# ─────────────────────────────────────────────────────────────────────────────
# Hourly Lookup
# ─────────────────────────────────────────────────────────────────────────────


class TestPeakWindowFallback:
    """Tests for the heuristic used when no profile exists."""

    def test_morning_window(self):
        for h in [0, 1, 2, 3, 4, 5, 22, 23]:
            assert get_energy_level_for_hour(h, None, "morning") == EnergyLevel.LOW, h
        for h in range(6, 12):
            assert get_energy_level_for_hour(h, None, "morning") == EnergyLevel.HIGH, h
        for h in range(12, 22):
            assert get_energy_level_for_hour(h, None, "morning") == EnergyLevel.MEDIUM, h

    def test_afternoon_window(self):
        assert derive_energy_from_peak_window(12, PeakEnergyWindow.AFTERNOON) == EnergyLevel.HIGH
        assert derive_energy_from_peak_window(17, "afternoon") == EnergyLevel.HIGH
        assert derive_energy_from_peak_window(18, "afternoon") == EnergyLevel.MEDIUM

    def test_evening_window(self):
        assert derive_energy_from_peak_window(18, "evening") == EnergyLevel.HIGH
        assert derive_energy_from_peak_window(21, "evening") == EnergyLevel.HIGH
        assert derive_energy_from_peak_window(22, "evening") == EnergyLevel.LOW

    def test_invalid_profile_falls_back(self):
        """A profile without 24 levels is treated as absent."""
        short = EnergyProfile(hourly_levels=(EnergyLevel.LOW,) * 10)
        assert get_energy_level_for_hour(9, short, "morning") == EnergyLevel.HIGH


class TestProfileLookup:
    def test_profile_wins(self, all_low_profile):
        assert get_energy_level_for_hour(9, all_low_profile, "morning") == EnergyLevel.LOW

    def test_out_of_range_hour_is_medium(self, all_low_profile):
        assert get_energy_level_for_hour(24, all_low_profile, "morning") == EnergyLevel.MEDIUM
        assert get_energy_level_for_hour(-1, all_low_profile, "morning") == EnergyLevel.MEDIUM

    def test_lookup_by_time(self):
        profile = build_energy_profile("night_owl")
        assert get_energy_level_for_time("14:30", profile, "morning") == EnergyLevel.HIGH

    def test_current_level_uses_user_zone(self, fixed_clock):
        """12:00 UTC is 07:00 in New York (morning peak) and 23:00 in Sydney."""
        level = get_current_energy_level(None, "morning", "America/New_York", fixed_clock)
        assert level == EnergyLevel.HIGH
        level = get_current_energy_level(None, "morning", "Australia/Sydney", fixed_clock)
        assert level == EnergyLevel.LOW


# ─────────────────────────────────────────────────────────────────────────────
# Slot Scoring
# ─────────────────────────────────────────────────────────────────────────────


class TestScoreSlotForEnergy:
    """Tests for stacked slot scores."""

    def test_high_task_in_high_slot(self, all_high_profile):
        assert score_slot_for_energy("09:00", "10:00", "high", all_high_profile, "morning") == 35

    def test_low_task_in_high_slot(self, all_high_profile):
        assert score_slot_for_energy("09:00", "10:00", "low", all_high_profile, "morning") == -5

    def test_medium_task_in_high_slot(self, all_high_profile):
        assert score_slot_for_energy("09:00", "10:00", "medium", all_high_profile, "morning") == 5

    def test_high_task_in_low_slot(self, all_low_profile):
        assert score_slot_for_energy("09:00", "10:00", "high", all_low_profile, "morning") == -15

    def test_low_task_in_low_slot(self, all_low_profile):
        assert score_slot_for_energy("09:00", "10:00", "low", all_low_profile, "morning") == 30

    def test_medium_task_in_medium_slot(self):
        """Exact match plus the medium flex bonus."""
        assert score_slot_for_energy("14:00", "15:00", "medium", None, "morning") == 25

    def test_uses_midpoint_hour(self):
        """11:00-13:00 has its midpoint at 12:00, outside the morning peak."""
        assert score_slot_for_energy("11:00", "13:00", "high", None, "morning") == 5
        assert score_slot_for_energy("10:00", "12:00", "high", None, "morning") == 35


# ─────────────────────────────────────────────────────────────────────────────
# Schedule Summary
# ─────────────────────────────────────────────────────────────────────────────


class TestFormatEnergySchedule:
    def test_peak_window_segments(self):
        schedule = format_energy_schedule(None, "morning", "07:00", "23:00")
        assert schedule == (
            "07:00-12:00: high energy, 12:00-22:00: medium energy, 22:00-23:00: low energy"
        )

    def test_uniform_profile_single_segment(self, all_high_profile):
        assert format_energy_schedule(all_high_profile, "morning", "08:00", "20:00") == (
            "08:00-20:00: high energy"
        )

    def test_overnight_waking_window(self, all_low_profile):
        assert format_energy_schedule(all_low_profile, "evening", "20:00", "02:00") == (
            "20:00-02:00: low energy"
        )

    def test_same_wake_and_sleep_hour_is_empty(self):
        assert format_energy_schedule(None, "morning", "07:00", "07:30") == ""


class TestWakingHours:
    def test_same_day(self):
        assert waking_hours(7, 10) == [7, 8, 9]

    def test_wraps_midnight(self):
        assert waking_hours(22, 2) == [22, 23, 0, 1]

    def test_equal(self):
        assert waking_hours(7, 7) == []
