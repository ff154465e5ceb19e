"""Next-run calculation.

The search moves a cursor from coarse to fine granularity. Whenever a field
fails to match, the cursor jumps to the first instant of the next month, day,
hour or minute and every check starts over, so a jump across a calendar
boundary always re-validates the finer fields.
"""

from __future__ import annotations

import logging
from datetime import MAXYEAR, datetime, timedelta
from typing import TYPE_CHECKING, Iterator

from cronbits.errors import InvalidScheduleError, ScheduleExhaustedError

if TYPE_CHECKING:
    from cronbits.schedule import Schedule

logger = logging.getLogger(__name__)

# The Gregorian calendar repeats every 400 years; a schedule that has not
# fired by then never will (e.g. "* * 30 2 *").
SEARCH_HORIZON_YEARS = 400


def next_after(schedule: "Schedule", t: datetime) -> datetime:
    """Get the smallest whole minute strictly after *t* that matches.

    The timezone of *t* is kept. Arithmetic is done on wall-clock time.

    Raises:
        InvalidScheduleError: If *schedule* has an empty field.
        ScheduleExhaustedError: If no match exists within the horizon.
    """
    if not schedule.valid():
        raise InvalidScheduleError(f"next_after() called on invalid schedule {schedule!r}")

    limit_year = t.year + SEARCH_HORIZON_YEARS
    steps = 0
    try:
        cursor = t.replace(second=0, microsecond=0) + timedelta(minutes=1)
        while cursor.year <= limit_year:
            steps += 1
            if not schedule.matches_month(cursor):
                cursor = advance_month(cursor)
                continue
            if not schedule.matches_day(cursor):
                cursor = advance_day(cursor)
                continue
            if not schedule.matches_hour(cursor):
                cursor = advance_hour(cursor)
                continue
            if not schedule.matches_minute(cursor):
                cursor = advance_minute(cursor)
                continue
            logger.debug("next after %s is %s (%d steps)", t, cursor, steps)
            return cursor
    except (OverflowError, ValueError) as exc:
        raise ScheduleExhaustedError(
            f"no match for {schedule!r} after {t.isoformat()} before year {MAXYEAR}"
        ) from exc

    raise ScheduleExhaustedError(
        f"no match for {schedule!r} within {SEARCH_HORIZON_YEARS} years "
        f"after {t.isoformat()}"
    )


def advance_month(t: datetime) -> datetime:
    if t.month == 12:
        return t.replace(year=t.year + 1, month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
    return t.replace(month=t.month + 1, day=1, hour=0, minute=0, second=0, microsecond=0)


def advance_day(t: datetime) -> datetime:
    return t.replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=1)


def advance_hour(t: datetime) -> datetime:
    return t.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)


def advance_minute(t: datetime) -> datetime:
    return t.replace(second=0, microsecond=0) + timedelta(minutes=1)


# =============================================================================
# Schedule Iterator
# =============================================================================


class ScheduleIterator(Iterator[datetime]):
    """Iterator over matching datetimes.

    Each step searches from the previous match, so nothing is precomputed.
    """

    def __init__(
        self,
        schedule: "Schedule",
        after: datetime,
        limit: int | None = None,
    ) -> None:
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")
        self._schedule = schedule
        self._current = after
        self._limit = limit
        self._count = 0

    def __iter__(self) -> "ScheduleIterator":
        return self

    def __next__(self) -> datetime:
        if self._limit is not None and self._count >= self._limit:
            raise StopIteration

        try:
            next_dt = next_after(self._schedule, self._current)
        except ScheduleExhaustedError:
            raise StopIteration from None

        self._current = next_dt
        self._count += 1
        return next_dt
