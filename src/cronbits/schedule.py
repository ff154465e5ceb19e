"""Bit-encoded cron schedules.

A :class:`Schedule` records, for each of the five cron fields, which values
are permitted. It is an immutable value: ``set`` and ``union`` return new
schedules, so instances can be shared freely between threads.

Example:
    >>> from datetime import datetime
    >>> from cronbits import CronFieldType, parse
    >>> schedule = parse("0 9 * * MON-FRI")
    >>> schedule.values(CronFieldType.HOUR)
    (9,)
    >>> schedule.next(datetime(2024, 1, 15, 8, 30))
    datetime.datetime(2024, 1, 15, 9, 0)
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterator

from cronbits.fields import (
    DOM_OFFSET,
    DOW_OFFSET,
    FIELD_CONSTRAINTS,
    FIELD_ORDER,
    HOUR_OFFSET,
    MINUTE_OFFSET,
    MONTH_OFFSET,
    SCHEDULE_BYTES,
    TOTAL_BITS,
    CronFieldType,
)
from cronbits.search import ScheduleIterator, next_after


class Schedule:
    """A parsed cron schedule stored as a 134-bit vector.

    The zero value ``Schedule()`` has no bits set and is therefore invalid.
    """

    __slots__ = ("_bits",)

    def __init__(self, bits: int = 0) -> None:
        if bits < 0 or bits >> TOTAL_BITS:
            raise ValueError(f"bits out of range for a {TOTAL_BITS}-bit schedule")
        self._bits = bits

    @classmethod
    def from_bytes(cls, data: bytes) -> "Schedule":
        if len(data) != SCHEDULE_BYTES:
            raise ValueError(f"expected {SCHEDULE_BYTES} bytes, got {len(data)}")
        return cls(int.from_bytes(data, "little"))

    def to_bytes(self) -> bytes:
        return self._bits.to_bytes(SCHEDULE_BYTES, "little")

    @property
    def bits(self) -> int:
        return self._bits

    # -------------------------------------------------------------------------
    # Bit operations
    # -------------------------------------------------------------------------

    def set(self, position: int) -> "Schedule":
        """Return a copy of this schedule with *position* set."""
        _check_position(position)
        return Schedule(self._bits | (1 << position))

    def is_set(self, position: int) -> bool:
        _check_position(position)
        return bool(self._bits >> position & 1)

    def union(self, other: "Schedule") -> "Schedule":
        return Schedule(self._bits | other._bits)

    def __or__(self, other: object) -> "Schedule":
        if not isinstance(other, Schedule):
            return NotImplemented
        return self.union(other)

    def valid(self) -> bool:
        """Report whether every field permits at least one value.

        A schedule with an empty field can never match any time.
        """
        for field_type in FIELD_ORDER:
            if not any(self.is_set(p) for p in field_type.constraints.positions):
                return False
        return True

    # -------------------------------------------------------------------------
    # Field views
    # -------------------------------------------------------------------------

    def values(self, field_type: CronFieldType) -> tuple[int, ...]:
        """Permitted values of a field, in expression numbering."""
        c = FIELD_CONSTRAINTS[field_type]
        return tuple(
            c.from_storage(i) for i in range(c.size) if self.is_set(c.offset + i)
        )

    def describe(self) -> dict[str, str]:
        """Render each field compactly, e.g. ``{"minute": "0-5,30", ...}``."""
        return {
            field_type.name.lower(): _render_field(self, field_type)
            for field_type in FIELD_ORDER
        }

    # -------------------------------------------------------------------------
    # Matching
    # -------------------------------------------------------------------------

    def matches_month(self, dt: datetime) -> bool:
        return self.is_set(MONTH_OFFSET + dt.month - 1)

    def matches_day(self, dt: datetime) -> bool:
        # Day of month and day of week are intersected, unlike classic cron.
        return self.is_set(DOM_OFFSET + dt.day - 1) and self.is_set(
            DOW_OFFSET + dt.isoweekday() % 7
        )

    def matches_hour(self, dt: datetime) -> bool:
        return self.is_set(HOUR_OFFSET + dt.hour)

    def matches_minute(self, dt: datetime) -> bool:
        return self.is_set(MINUTE_OFFSET + dt.minute)

    def matches(self, dt: datetime) -> bool:
        """Check whether the minute containing *dt* satisfies the schedule."""
        return (
            self.matches_month(dt)
            and self.matches_day(dt)
            and self.matches_hour(dt)
            and self.matches_minute(dt)
        )

    # -------------------------------------------------------------------------
    # Next-run calculation
    # -------------------------------------------------------------------------

    def next(self, after: datetime | None = None) -> datetime:
        """Get the smallest whole minute strictly after *after* (default: now).

        Raises:
            InvalidScheduleError: If the schedule is not valid.
            ScheduleExhaustedError: If the schedule never fires.
        """
        if after is None:
            after = datetime.now()
        return next_after(self, after)

    def next_n(self, n: int, after: datetime | None = None) -> list[datetime]:
        return list(self.iter(after, limit=n))

    def iter(
        self,
        after: datetime | None = None,
        limit: int | None = None,
    ) -> ScheduleIterator:
        """Iterate over matching times after *after*."""
        if after is None:
            after = datetime.now()
        return ScheduleIterator(self, after, limit)

    def __iter__(self) -> Iterator[int]:
        """Yield the absolute positions of set bits."""
        return (p for p in range(TOTAL_BITS) if self._bits >> p & 1)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Schedule):
            return self._bits == other._bits
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._bits)

    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.describe().items())
        return f"Schedule({fields})"

    def __str__(self) -> str:
        return " ".join(self.describe().values())


def is_valid(schedule: Schedule) -> bool:
    return schedule.valid()


def _check_position(position: int) -> None:
    if not 0 <= position < TOTAL_BITS:
        raise IndexError(f"bit position {position} out of range [0, {TOTAL_BITS})")


def _render_field(schedule: Schedule, field_type: CronFieldType) -> str:
    c = FIELD_CONSTRAINTS[field_type]
    values = schedule.values(field_type)
    if not values:
        return "-"
    if len(values) == c.size:
        return "*"

    runs: list[str] = []
    start = prev = values[0]
    for value in values[1:] + (None,):
        if value is not None and value == prev + 1:
            prev = value
            continue
        runs.append(str(start) if start == prev else f"{start}-{prev}")
        if value is not None:
            start = prev = value
    return ",".join(runs)
