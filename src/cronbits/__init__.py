"""cronbits - cron expressions as compact bit-encoded schedules.

Features:
    - Standard 5-field cron (minute, hour, day of month, month, day of week)
    - Ranges, steps, lists and wrapping ranges (hour 21-3)
    - Month and weekday names by unique prefix (Jan, janua, MONDAY)
    - Named schedules (@monthly, @weekly, @daily, @hourly)
    - The hashed wildcard H, fixed per seed (parse_with_hash)
    - Next-run calculation, iteration and presets

Day of month and day of week are always intersected: "* * 9 * MON" fires
only on a Monday the 9th.

Usage:
    >>> from datetime import datetime
    >>> from cronbits import parse, parse_with_hash
    >>>
    >>> schedule = parse("*/15 9-17 * * MON-FRI")
    >>> schedule.valid()
    True
    >>> schedule.next(datetime(2024, 1, 13, 12, 0))
    datetime.datetime(2024, 1, 15, 9, 0)
    >>>
    >>> # Same seed, same schedule
    >>> parse_with_hash("H H * * *", "backup-job") == parse_with_hash("H H * * *", "backup-job")
    True
"""

from cronbits.errors import (
    CronParseError,
    FieldCountError,
    HashedScheduleError,
    HashListError,
    InvalidIncrementError,
    InvalidRangeError,
    InvalidScheduleError,
    InvalidValueError,
    ScheduleExhaustedError,
    UnknownAliasError,
)
from cronbits.fields import CronFieldType, FieldConstraints, FIELD_CONSTRAINTS
from cronbits.hashing import HashContext, RandomSource, ScriptedSource, SeededSource
from cronbits.schedule import Schedule, is_valid
from cronbits.search import ScheduleIterator, next_after
from cronbits.parser import (
    CronParser,
    FieldPart,
    PartKind,
    is_valid_expression,
    parse,
    parse_with_hash,
    validate_expression,
)
from cronbits.builder import CronBuilder

__version__ = "0.1.0"

__all__ = [
    # Core
    "Schedule",
    "CronFieldType",
    "FieldConstraints",
    "FIELD_CONSTRAINTS",
    "is_valid",
    # Parser
    "CronParser",
    "FieldPart",
    "PartKind",
    "parse",
    "parse_with_hash",
    # Randomization
    "HashContext",
    "RandomSource",
    "SeededSource",
    "ScriptedSource",
    # Search
    "next_after",
    "ScheduleIterator",
    # Builder
    "CronBuilder",
    # Validation
    "validate_expression",
    "is_valid_expression",
    # Errors
    "CronParseError",
    "FieldCountError",
    "InvalidValueError",
    "InvalidIncrementError",
    "InvalidRangeError",
    "HashedScheduleError",
    "HashListError",
    "UnknownAliasError",
    "InvalidScheduleError",
    "ScheduleExhaustedError",
]
