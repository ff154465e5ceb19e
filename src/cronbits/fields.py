"""Cron field definitions.

A schedule is five fields laid end to end in one bit vector, LSB first:

    Field         Values            Bits    Offset
    ──────────────────────────────────────────────
    Minute        0-59              60      0
    Hour          0-23              24      60
    Day of Month  1-31              31      84
    Month         1-12 or JAN-DEC   12      115
    Day of Week   0-6 or SUN-SAT    7       127

Every field is stored 0-indexed, so day of month 1 and month 1 both live at
local position 0.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


# =============================================================================
# Field Types
# =============================================================================


class CronFieldType(Enum):
    """The five fields of a cron expression, in expression order."""

    MINUTE = 0
    HOUR = 1
    DAY_OF_MONTH = 2
    MONTH = 3
    DAY_OF_WEEK = 4

    @property
    def index(self) -> int:
        return self.value

    @property
    def constraints(self) -> "FieldConstraints":
        return FIELD_CONSTRAINTS[self]

    @property
    def label(self) -> str:
        """Human readable name used in error messages."""
        return FIELD_CONSTRAINTS[self].label


MINUTES = 60
HOURS = 24
DOMS = 31
MONTHS = 12
DOWS = 7

MINUTE_OFFSET = 0
HOUR_OFFSET = MINUTE_OFFSET + MINUTES
DOM_OFFSET = HOUR_OFFSET + HOURS
MONTH_OFFSET = DOM_OFFSET + DOMS
DOW_OFFSET = MONTH_OFFSET + MONTHS
TOTAL_BITS = DOW_OFFSET + DOWS
SCHEDULE_BYTES = (TOTAL_BITS - 1) // 8 + 1

MONTH_NAMES: tuple[str, ...] = (
    "january",
    "february",
    "march",
    "april",
    "may",
    "june",
    "july",
    "august",
    "september",
    "october",
    "november",
    "december",
)

DOW_NAMES: tuple[str, ...] = (
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
)


@dataclass(frozen=True)
class FieldConstraints:
    """Constraints for a cron field.

    Attributes:
        label: Name used in messages ("day of month").
        size: Number of storage positions.
        offset: First bit of the field inside a schedule.
        min_value: Smallest value accepted in an expression (0 or 1).
        names: Full names matched by unique prefix, if the field has any.
        hash_domain: Number of storage positions a bare ``H`` draws from.
    """

    label: str
    size: int
    offset: int
    min_value: int = 0
    names: tuple[str, ...] = ()
    hash_domain: int | None = None

    @property
    def max_value(self) -> int:
        return self.min_value + self.size - 1

    @property
    def one_indexed(self) -> bool:
        return self.min_value == 1

    @property
    def random_domain(self) -> int:
        return self.hash_domain if self.hash_domain is not None else self.size

    @property
    def positions(self) -> range:
        """Absolute bit positions covered by the field."""
        return range(self.offset, self.offset + self.size)

    def to_storage(self, value: int) -> int:
        return value - self.min_value

    def from_storage(self, position: int) -> int:
        return position + self.min_value


FIELD_CONSTRAINTS: dict[CronFieldType, FieldConstraints] = {
    CronFieldType.MINUTE: FieldConstraints("minute", MINUTES, MINUTE_OFFSET),
    CronFieldType.HOUR: FieldConstraints("hour", HOURS, HOUR_OFFSET),
    # Random days stay within [1, 28] so every month has them.
    CronFieldType.DAY_OF_MONTH: FieldConstraints(
        "day of month", DOMS, DOM_OFFSET, min_value=1, hash_domain=28,
    ),
    CronFieldType.MONTH: FieldConstraints(
        "month", MONTHS, MONTH_OFFSET, min_value=1, names=MONTH_NAMES,
    ),
    CronFieldType.DAY_OF_WEEK: FieldConstraints(
        "day of week", DOWS, DOW_OFFSET, names=DOW_NAMES,
    ),
}

FIELD_ORDER: tuple[CronFieldType, ...] = tuple(CronFieldType)
