"""Shared test fixtures for dayblocks tests.

This module provides common fixtures used across all test modules:
- A fixed clock so "now" never drifts
- Standard user preferences and energy profiles
- Block and goal factories

Usage:
    def test_something(fixed_clock, ny_prefs, make_block):
        block = make_block(start_time="09:00", end_time="10:00")
        ...
"""

from collections.abc import Callable, Generator
from datetime import datetime, timezone

import pytest

from dayblocks.blocks.models import Block, BlockStatus
from dayblocks.clock import FixedClock
from dayblocks.config_models import reset_config_cache
from dayblocks.energy.models import EnergyLevel, EnergyPreset, EnergyProfile
from dayblocks.goals.models import Goal, SessionLength
from dayblocks.preferences import UserPreferences


# ─────────────────────────────────────────────────────────────────────────────
# Config Isolation
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def fresh_config() -> Generator[None, None, None]:
    """Reload scheduling config for every test."""
    reset_config_cache()
    yield
    reset_config_cache()


# ─────────────────────────────────────────────────────────────────────────────
# Clock Fixtures
# ─────────────────────────────────────────────────────────────────────────────

# Monday 2024-01-15, 12:00 UTC (07:00 in New York, EST)
FIXED_NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock() -> FixedClock:
    """Clock pinned to Monday 2024-01-15 12:00 UTC."""
    return FixedClock(FIXED_NOW)


@pytest.fixture
def clock_at() -> Callable[..., FixedClock]:
    """Factory for clocks pinned to an arbitrary UTC instant."""

    def _clock_at(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> FixedClock:
        return FixedClock(datetime(year, month, day, hour, minute, tzinfo=timezone.utc))

    return _clock_at


# ─────────────────────────────────────────────────────────────────────────────
# Energy Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def all_high_profile() -> EnergyProfile:
    """Profile with high energy every hour."""
    return EnergyProfile(hourly_levels=(EnergyLevel.HIGH,) * 24, preset=EnergyPreset.CUSTOM)


@pytest.fixture
def all_low_profile() -> EnergyProfile:
    """Profile with low energy every hour."""
    return EnergyProfile(hourly_levels=(EnergyLevel.LOW,) * 24, preset=EnergyPreset.CUSTOM)


# ─────────────────────────────────────────────────────────────────────────────
# Preference Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def utc_prefs() -> UserPreferences:
    """UTC user awake 07:00-22:00 with a morning peak."""
    return UserPreferences(
        wake_time="07:00",
        sleep_time="22:00",
        peak_energy_window="morning",
        timezone="UTC",
    )


@pytest.fixture
def ny_prefs() -> UserPreferences:
    """New York user awake 07:00-22:00 with a morning peak."""
    return UserPreferences(
        wake_time="07:00",
        sleep_time="22:00",
        peak_energy_window="morning",
        timezone="America/New_York",
    )


# ─────────────────────────────────────────────────────────────────────────────
# Block Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_block() -> Callable[..., Block]:
    """Factory for blocks on 2024-01-15 with overridable fields."""

    def _make_block(**overrides) -> Block:
        fields = {
            "title": "Deep work",
            "date": "2024-01-15",
            "start_time": "09:00",
            "end_time": "10:00",
            "status": BlockStatus.PLANNED,
        }
        fields.update(overrides)
        return Block(**fields)

    return _make_block


# ─────────────────────────────────────────────────────────────────────────────
# Goal Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def sample_goal() -> Goal:
    """Five hours of Spanish a week, in 30-60 minute sessions."""
    return Goal(
        id="goal1",
        title="Spanish",
        category="learning",
        weekly_target_minutes=300,
        preferred_session_length=SessionLength(30, 60),
        preferred_time="morning",
        energy_level=EnergyLevel.MEDIUM,
        priority=2,
    )
