"""dayblocks - Energy-aware scheduling and notification engine

Philosophy:
    A day plan only works if it fits the person living it.
    Blocks go where the user's energy can carry them, reminders arrive
    early enough to actually get ready, and nobody gets pinged at 3am.

Components:
    utils/: Time codec, format validation, timezone arithmetic
    energy/: Hourly energy model, lazy mode, slot scoring and search
    blocks/: Conflict detection, batch preview, reminder timing,
             travel buffers, rollover
    goals/: Weekly goal progress and weekly review

Everything here is pure and synchronous. Callers load blocks, goals and
preferences from storage, hand a snapshot to these functions, and persist
whatever decision comes back.

Configuration: args/scheduling.yaml
"""

from pathlib import Path

__version__ = "0.1.0"

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent
ARGS_DIR = PROJECT_ROOT / "args"
CONFIG_PATH = ARGS_DIR / "scheduling.yaml"

# Energy levels (ordered low -> high)
ENERGY_LEVELS = ("low", "medium", "high")

# Coarse fallback windows when no hourly profile exists
PEAK_WINDOWS = ("morning", "afternoon", "evening")

# Block lifecycle
BLOCK_STATUSES = ("planned", "in_progress", "completed", "skipped", "moved")

# Blocks in these statuses no longer occupy their slot
INACTIVE_BLOCK_STATUSES = ("moved", "skipped")

ROLLOVER_BEHAVIORS = ("auto_skip", "rollover_once", "prompt_agent")

NOTIFICATION_STYLES = ("minimal", "proactive")

__all__ = [
    "__version__",
    "PROJECT_ROOT",
    "ARGS_DIR",
    "CONFIG_PATH",
    "ENERGY_LEVELS",
    "PEAK_WINDOWS",
    "BLOCK_STATUSES",
    "INACTIVE_BLOCK_STATUSES",
    "ROLLOVER_BEHAVIORS",
    "NOTIFICATION_STYLES",
]
