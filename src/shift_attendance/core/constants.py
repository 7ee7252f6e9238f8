"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MINUTES_PER_DAY = 24 * 60

DEFAULT_TOLERANCE_MINUTES = 15
DEFAULT_EARLY_CHECK_IN_MARGIN_MINUTES = 30
DEFAULT_LATE_CHECK_OUT_MARGIN_MINUTES = 120
DEFAULT_EARLY_DEPARTURE_TOLERANCE_MINUTES = 10

JUSTIFICATION_WINDOW_DAYS = 7

MIN_SHIFT_MINUTES = 60
MAX_SHIFT_MINUTES = 12 * 60

# Position codes whose holders float between shifts.
SUPERNUMERARY_POSITION_CODES = ("SLS_CHS",)

AUTO_CLOSE_MARKER = "SYSTEM_AUTO_CLOSE"
AUTO_CLOSE_LOOKBACK_DAYS = 1
