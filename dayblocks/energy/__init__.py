"""Energy Tools - Match work to the hours that can carry it

Philosophy:
    A hard task in a slump hour is a task that gets skipped.
    Know when the user has energy, and place demanding work there.

Components:
    models.py: EnergyLevel, PeakEnergyWindow, EnergyPreset, EnergyProfile
    profile.py: Preset tables, hourly lookup, slot scoring, schedule summary
    lazy_mode.py: Expiring lazy-mode toggle and lighter-task alternatives
    slots.py: Free slot search, energy match validation, energy context

Usage:
    from dayblocks.energy.profile import get_energy_level_for_hour
    level = get_energy_level_for_hour(14, None, "afternoon")  # EnergyLevel.HIGH
"""

from .models import (
    HOURS_PER_DAY,
    EnergyLevel,
    EnergyPreset,
    EnergyProfile,
    PeakEnergyWindow,
)

__all__ = [
    "HOURS_PER_DAY",
    "EnergyLevel",
    "EnergyPreset",
    "EnergyProfile",
    "PeakEnergyWindow",
]
