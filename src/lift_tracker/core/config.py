"""
Configuration constants for lift-tracker.

All adjustable parameters are centralized here.  User overrides for a subset
of them are read from ~/.lift-tracker/config.yaml (see config_loader.py).
"""

from pathlib import Path
from typing import Final

# =============================================================================
# WEEK LAYOUT
# =============================================================================

WEEK_DAYS: Final[tuple[str, ...]] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

# =============================================================================
# SET TRACKING
# =============================================================================

# "4×6-8", "3x10", "2-3×12-15": leading count (optionally a range) then × or x
SETS_REPS_PATTERN: Final[str] = r"(\d+)(?:-\d+)?[×x]"
DEFAULT_TOTAL_SETS: Final[int] = 1

# =============================================================================
# STATISTICS
# =============================================================================

TREND_WINDOW: Final[int] = 3  # weight-progression points used for the trend
TREND_THRESHOLD_PCT: Final[float] = 5.0  # % change separating stable from a trend

# =============================================================================
# TIMERS
# =============================================================================

DEFAULT_REST_SECONDS: Final[int] = 60

# =============================================================================
# IMPORT / STORAGE
# =============================================================================

VARIANT_A_KEY: Final[str] = "A_2x_gym_1x_home"
VARIANT_B_KEY: Final[str] = "B_3x_gym"
BUNDLED_PLAN_FILENAME: Final[str] = "training_plan.json"
STORE_FILENAME: Final[str] = "plan.json"
USER_DIR: Final[Path] = Path.home() / ".lift-tracker"
