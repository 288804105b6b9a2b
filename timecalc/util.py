"""Utility constants for timecalc.

Unit constants represent durations in milliseconds. Calendar units use fixed
lengths so that a duration always normalizes to the same millisecond count;
only date-time shifting is calendar-aware.
"""

# Time unit constants (all values in milliseconds)
MILLISECOND = 1
SECOND = 1000
MINUTE = 60_000
HOUR = 3_600_000
DAY = 86_400_000
WEEK = 604_800_000
MONTH = 2_592_000_000  # 30 days
YEAR = 31_536_000_000  # 365 days

# Duration fields from largest to smallest with their length in milliseconds
UNITS: dict[str, int] = {
    "years": YEAR,
    "months": MONTH,
    "weeks": WEEK,
    "days": DAY,
    "hours": HOUR,
    "minutes": MINUTE,
    "seconds": SECOND,
    "milliseconds": MILLISECOND,
}

DEFAULT_LOCALE = "en_US"
