"""Ready-made schedules.

Each preset is a parsed :class:`Schedule` exposed as a module constant and
registered in :data:`PRESETS` under its lowercase name. None of them use
``H``, so they are identical in every process.

Usage:
    >>> from cronbits.presets import DAILY, EVERY_15_MIN, get_preset
    >>>
    >>> next_run = DAILY.next()
    >>> get_preset("every-15-min") == EVERY_15_MIN
    True
"""

from __future__ import annotations

from cronbits.parser import parse
from cronbits.schedule import Schedule


# =============================================================================
# @name Equivalents
# =============================================================================

MONTHLY = parse("@monthly")
WEEKLY = parse("@weekly")
DAILY = parse("@daily")
HOURLY = parse("@hourly")

# There is no @yearly alias; spelled out instead.
YEARLY = parse("0 0 1 1 *")
ANNUALLY = YEARLY
MIDNIGHT = DAILY
EVERY_MINUTE = parse("* * * * *")


# =============================================================================
# Working Week
# =============================================================================

WEEKDAYS_9AM = parse("0 9 * * MON-FRI")
WEEKDAYS_6PM = parse("0 18 * * MON-FRI")
BUSINESS_START = parse("0 8 * * MON-FRI")
BUSINESS_END = parse("0 17 * * MON-FRI")

# 09:00 through 17:45 on weekdays
BUSINESS_HOURS_15MIN = parse("*/15 9-17 * * MON-FRI")
BUSINESS_HOURS_HOURLY = parse("0 9-17 * * MON-FRI")


# =============================================================================
# Fixed Intervals
# =============================================================================

EVERY_5_MIN = parse("*/5 * * * *")
EVERY_15_MIN = parse("*/15 * * * *")
EVERY_30_MIN = parse("*/30 * * * *")
EVERY_2_HOURS = parse("0 */2 * * *")
EVERY_4_HOURS = parse("0 */4 * * *")
EVERY_6_HOURS = parse("0 */6 * * *")
TWICE_DAILY = parse("0 0,12 * * *")
THREE_TIMES_DAILY = parse("0 8,12,18 * * *")


# =============================================================================
# Calendar
# =============================================================================

FIRST_OF_MONTH = parse("0 6 1 * *")

# Day and weekday fields are intersected, so only a Monday in 1-7 matches.
FIRST_MONDAY = parse("0 9 1-7 * MON")

# Jan, Apr, Jul and Oct
QUARTERLY = parse("0 0 1 */3 *")


# =============================================================================
# Nights and Weekends
# =============================================================================

NIGHTLY_2AM = parse("0 2 * * *")
NIGHTLY_3AM = parse("0 3 * * *")
SUNDAY_MAINTENANCE = parse("0 3 * * SUN")
WEEKENDS_NOON = parse("0 12 * * SAT,SUN")

# The hour range wraps: 22, 23, 0 .. 4
OVERNIGHT_30MIN = parse("*/30 22-4 * * *")


# =============================================================================
# Registry
# =============================================================================

PRESETS: dict[str, Schedule] = {
    "yearly": YEARLY,
    "annually": ANNUALLY,
    "monthly": MONTHLY,
    "weekly": WEEKLY,
    "daily": DAILY,
    "midnight": MIDNIGHT,
    "hourly": HOURLY,
    "every_minute": EVERY_MINUTE,
    "weekdays_9am": WEEKDAYS_9AM,
    "weekdays_6pm": WEEKDAYS_6PM,
    "business_start": BUSINESS_START,
    "business_end": BUSINESS_END,
    "business_hours_15min": BUSINESS_HOURS_15MIN,
    "business_hours_hourly": BUSINESS_HOURS_HOURLY,
    "every_5_min": EVERY_5_MIN,
    "every_15_min": EVERY_15_MIN,
    "every_30_min": EVERY_30_MIN,
    "every_2_hours": EVERY_2_HOURS,
    "every_4_hours": EVERY_4_HOURS,
    "every_6_hours": EVERY_6_HOURS,
    "twice_daily": TWICE_DAILY,
    "three_times_daily": THREE_TIMES_DAILY,
    "first_of_month": FIRST_OF_MONTH,
    "first_monday": FIRST_MONDAY,
    "quarterly": QUARTERLY,
    "nightly_2am": NIGHTLY_2AM,
    "nightly_3am": NIGHTLY_3AM,
    "sunday_maintenance": SUNDAY_MAINTENANCE,
    "weekends_noon": WEEKENDS_NOON,
    "overnight_30min": OVERNIGHT_30MIN,
}


def get_preset(name: str) -> Schedule | None:
    """Look up a preset; ``Every-15-Min`` and ``every_15_min`` are the same."""
    return PRESETS.get(name.lower().replace("-", "_"))


def list_presets() -> list[str]:
    return list(PRESETS)
