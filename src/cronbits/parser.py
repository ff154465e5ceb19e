"""Cron expression parser.

Five whitespace-separated fields are expected: minute, hour, day of month,
month and day of week. Valid symbols are

    *   any value
    ,   list separator (1,3,5)
    -   range (1-5); a range may wrap around (hour 21-3)
    /   step (*/15, 10-45/10)
    H   hashed value, only with :func:`parse_with_hash`

Month and weekday names, or any unique prefix of them, are accepted
case-insensitively. Weeks start on day 0, Sunday.

Instead of five fields, a named schedule starting with ``@`` may be used:

    @monthly    0 0 1 * *       H H H * *
    @weekly     0 0 * * 0       H H * * H
    @daily      0 0 * * *       H H * * *
    @hourly     0 * * * *       H * * * *

The right-hand column is what :func:`parse_with_hash` uses.

Each comma-separated part is first parsed into a :class:`FieldPart` holding
storage positions, then a single cyclic walk turns every part into bits.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from cronbits.errors import (
    CronParseError,
    FieldCountError,
    HashedScheduleError,
    HashListError,
    InvalidIncrementError,
    InvalidRangeError,
    UnknownAliasError,
)
from cronbits.fields import FIELD_CONSTRAINTS, FIELD_ORDER, CronFieldType
from cronbits.hashing import HashContext, RandomSource
from cronbits.resolver import parse_int, resolve_value
from cronbits.schedule import Schedule

logger = logging.getLogger(__name__)


NAMED_SCHEDULES: dict[str, str] = {
    "@monthly": "0 0 1 * *",
    "@weekly": "0 0 * * 0",
    "@daily": "0 0 * * *",
    "@hourly": "0 * * * *",
}

NAMED_HASHED_SCHEDULES: dict[str, str] = {
    "@monthly": "H H H * *",
    "@weekly": "H H * * H",
    "@daily": "H H * * *",
    "@hourly": "H * * * *",
}


# =============================================================================
# Field Parts
# =============================================================================


class PartKind(Enum):
    """What a comma-separated part of a field selects."""

    WILDCARD = auto()
    SINGLE = auto()
    RANGE = auto()
    HASHED = auto()
    HASHED_STEP = auto()


@dataclass(frozen=True)
class FieldPart:
    """One comma-separated part of a field, resolved to storage positions.

    ``start`` and ``end`` are inclusive local positions. When ``start`` is
    greater than ``end`` the part wraps through the end of the field.
    """

    kind: PartKind
    field_type: CronFieldType
    start: int
    end: int
    step: int = 1
    text: str = ""

    def positions(self) -> Iterator[int]:
        """Walk from start to end with wraparound, yielding every step-th."""
        size = FIELD_CONSTRAINTS[self.field_type].size
        pos = self.start
        distance = 0
        while True:
            if distance % self.step == 0:
                yield pos
            if pos == self.end:
                return
            pos = (pos + 1) % size
            distance += 1

    def to_schedule(self) -> Schedule:
        offset = FIELD_CONSTRAINTS[self.field_type].offset
        bits = 0
        for pos in self.positions():
            bits |= 1 << (offset + pos)
        return Schedule(bits)


def _is_hash(base: str) -> bool:
    return base.upper() == "H"


# =============================================================================
# Cron Parser
# =============================================================================


class CronParser:
    """Parser for five-field cron expressions.

    Without a hash context, ``H`` is still parsed so that ordinary syntax
    errors are reported first; the result is then rejected with
    :class:`HashedScheduleError`.

    Example:
        >>> parser = CronParser("0 9-17/4 * * MON-FRI")
        >>> schedule = parser.parse()
        >>> [p.kind for p in parser.parts[1]]
        [<PartKind.RANGE: 3>]
    """

    ALIASES: dict[str, str] = NAMED_SCHEDULES
    HASHED_ALIASES: dict[str, str] = NAMED_HASHED_SCHEDULES

    def __init__(self, expression: str, hash_context: HashContext | None = None) -> None:
        self._original = expression
        self._hash = hash_context if hash_context is not None else HashContext.disabled()
        self._parts: tuple[tuple[FieldPart, ...], ...] = ()

    @property
    def expression(self) -> str:
        return self._original

    @property
    def parts(self) -> tuple[tuple[FieldPart, ...], ...]:
        """Parsed parts per field, available after :meth:`parse`."""
        return self._parts

    def _resolve_alias(self, expression: str) -> str:
        if not expression.startswith("@"):
            return expression
        aliases = self.HASHED_ALIASES if self._hash.enabled else self.ALIASES
        try:
            return aliases[expression.lower()]
        except KeyError:
            raise UnknownAliasError(expression) from None

    def parse(self) -> Schedule:
        """Parse the expression into a :class:`Schedule`.

        Raises:
            CronParseError: If the expression is invalid.
        """
        try:
            schedule = self._parse()
        except CronParseError as exc:
            exc.with_expression(self._original)
            raise

        if self._hash.used and not self._hash.enabled:
            raise HashedScheduleError(self._original)

        logger.debug("parsed %r as %r", self._original, schedule)
        return schedule

    def _parse(self) -> Schedule:
        expression = self._resolve_alias(self._original.strip())
        fields = expression.split()
        if len(fields) != len(FIELD_ORDER):
            raise FieldCountError(
                f"wrong number of fields in schedule {expression!r} "
                f"(expected {len(FIELD_ORDER)}, got {len(fields)})"
            )

        schedule = Schedule()
        parsed: list[tuple[FieldPart, ...]] = []
        for field_type, text in zip(FIELD_ORDER, fields):
            parts = self._parse_field(text, field_type)
            for part in parts:
                schedule = schedule.union(part.to_schedule())
            parsed.append(parts)

        self._parts = tuple(parsed)
        return schedule

    def _parse_field(self, text: str, field_type: CronFieldType) -> tuple[FieldPart, ...]:
        segments = text.split(",")
        if (
            self._hash.enabled
            and len(segments) > 1
            and any(_is_hash(s.split("/", 1)[0]) for s in segments)
        ):
            raise HashListError(
                f"H symbol used with , in {text!r}",
                field=field_type.label,
                token=text,
            )
        return tuple(self._parse_part(s, field_type) for s in segments)

    def _parse_part(self, part: str, field_type: CronFieldType) -> FieldPart:
        c = FIELD_CONSTRAINTS[field_type]
        base, has_step, increment = part.partition("/")

        step = 1
        if has_step:
            parsed = parse_int(increment)
            if parsed is None:
                raise InvalidIncrementError(
                    f"invalid increment: {increment!r}",
                    field=c.label,
                    token=increment,
                )
            if parsed < 1:
                raise InvalidIncrementError(
                    f"invalid increment {parsed} (must be at least 1)",
                    field=c.label,
                    token=increment,
                )
            step = parsed

        if base == "*":
            return FieldPart(PartKind.WILDCARD, field_type, 0, c.size - 1, step, part)

        if "-" in base:
            low, high = base.split("-", 1)
            if low.upper().startswith("H"):
                raise InvalidRangeError(
                    f"bad range {base!r} -- H is not supported in ranges",
                    field=c.label,
                    token=base,
                )
            start = resolve_value(low, field_type)
            end = resolve_value(high, field_type)
            if start == end:
                raise InvalidRangeError(
                    f"bad range {base!r} -- start and end must be different",
                    field=c.label,
                    token=base,
                )
            return FieldPart(
                PartKind.RANGE,
                field_type,
                c.to_storage(start),
                c.to_storage(end),
                step,
                part,
            )

        # Hashed positions are drawn in storage numbering already.
        if _is_hash(base):
            if not has_step:
                value = self._hash.field_value(field_type)
                return FieldPart(PartKind.HASHED, field_type, value, value, 1, part)
            offset = self._hash.step_offset(field_type, step)
            return FieldPart(PartKind.HASHED_STEP, field_type, offset, c.size - 1, step, part)

        value = c.to_storage(resolve_value(base, field_type))
        return FieldPart(PartKind.SINGLE, field_type, value, value, step, part)


# =============================================================================
# Entry Points
# =============================================================================


def parse(expression: str) -> Schedule:
    """Parse a cron expression or ``@name``; ``H`` is rejected.

    Raises:
        CronParseError: If the expression is invalid.
        HashedScheduleError: If the otherwise valid expression uses ``H``.
    """
    return CronParser(expression).parse()


def parse_with_hash(
    expression: str,
    seed: int | str | bytes | None = None,
    *,
    source: RandomSource | None = None,
) -> Schedule:
    """Parse an expression in which ``H`` picks a value fixed by *seed*.

    For example ``H H * * *`` fires once a day at an hour and minute chosen
    when the expression is parsed; the same seed always gives the same
    schedule. Random days of month are limited to 1-28. ``H/n`` starts a
    step sequence at a random offset below *n*.

    Pass *source* instead of *seed* to control the draws directly.
    """
    if (seed is None) == (source is None):
        raise ValueError("parse_with_hash() needs exactly one of seed or source")
    context = HashContext(source) if source is not None else HashContext.from_seed(seed)
    return CronParser(expression, context).parse()


# =============================================================================
# Validation Functions
# =============================================================================


def validate_expression(expression: str, *, hashed: bool = False) -> list[str]:
    """Validate a cron expression.

    Returns:
        List of validation errors (empty if valid).
    """
    try:
        if hashed:
            parse_with_hash(expression, 0)
        else:
            parse(expression)
    except CronParseError as e:
        return [str(e)]
    return []


def is_valid_expression(expression: str, *, hashed: bool = False) -> bool:
    return not validate_expression(expression, hashed=hashed)
