"""Random sources for the ``H`` symbol.

``H`` asks for a value that looks random but stays fixed for a given seed,
so that many jobs declared as ``H H * * *`` spread over the day while each
one keeps firing at the same time across restarts.

Two sources implement :class:`RandomSource`:

    SeededSource    ``random.Random`` seeded by the caller
    ScriptedSource  replays a fixed sequence, for tests

A :class:`HashContext` wraps a source for the duration of one parse call.
"""

from __future__ import annotations

import random
from itertools import cycle
from typing import Iterable, Protocol, runtime_checkable

from cronbits.fields import FIELD_CONSTRAINTS, FIELD_ORDER, CronFieldType


@runtime_checkable
class RandomSource(Protocol):
    """Anything that can hand out a non-negative integer below ``n``."""

    def intn(self, n: int) -> int: ...


class SeededSource:
    """Pseudorandom source; the same seed always yields the same sequence."""

    def __init__(self, seed: int | str | bytes) -> None:
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int | str | bytes:
        return self._seed

    def intn(self, n: int) -> int:
        if n < 1:
            raise ValueError(f"intn() needs a positive bound, got {n}")
        return self._rng.randrange(n)

    def __repr__(self) -> str:
        return f"SeededSource({self._seed!r})"


class ScriptedSource:
    """Replays *values* in order, starting over when they run out.

    Each value is reduced modulo the requested bound so the result always
    honours the ``intn`` contract.
    """

    def __init__(self, values: Iterable[int]) -> None:
        self._values = tuple(values)
        if not self._values:
            raise ValueError("ScriptedSource needs at least one value")
        if any(v < 0 for v in self._values):
            raise ValueError("ScriptedSource values must be non-negative")
        self._it = cycle(self._values)
        self.calls: list[int] = []

    def intn(self, n: int) -> int:
        if n < 1:
            raise ValueError(f"intn() needs a positive bound, got {n}")
        self.calls.append(n)
        return next(self._it) % n

    def __repr__(self) -> str:
        return f"ScriptedSource({list(self._values)!r})"


class _NullSource:
    def intn(self, n: int) -> int:
        return 0


class HashContext:
    """Random state for a single parse call.

    One storage position per field is drawn up front, in field order, so a
    bare ``H`` in the minute field yields the same minute whatever the other
    fields contain. ``H/n`` steps draw their phase from the same source as
    they are met.
    """

    def __init__(self, source: RandomSource, *, enabled: bool = True) -> None:
        self._source = source
        self._enabled = enabled
        self._used = False
        self._fields = tuple(
            self._draw(FIELD_CONSTRAINTS[f].random_domain) for f in FIELD_ORDER
        )

    @classmethod
    def from_seed(cls, seed: int | str | bytes) -> "HashContext":
        return cls(SeededSource(seed))

    @classmethod
    def disabled(cls) -> "HashContext":
        """A context that records ``H`` usage but is not meant to be kept.

        Schedules parsed with it are rejected once parsing is done if any
        ``H`` was seen.
        """
        return cls(_NullSource(), enabled=False)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def used(self) -> bool:
        """Whether any ``H`` token was consumed."""
        return self._used

    def field_value(self, field_type: CronFieldType) -> int:
        """Storage position chosen for a bare ``H``."""
        self._used = True
        return self._fields[field_type.index]

    def step_offset(self, field_type: CronFieldType, step: int) -> int:
        """Storage position where an ``H/step`` sequence starts.

        The start stays inside the field's random domain, so ``H/30`` in the
        day-of-month field still begins on a day between 1 and 28.
        """
        self._used = True
        return self._draw(min(step, FIELD_CONSTRAINTS[field_type].random_domain))

    def _draw(self, n: int) -> int:
        value = self._source.intn(n)
        if not 0 <= value < n:
            raise ValueError(f"{self._source!r}.intn({n}) returned {value}, outside [0, {n})")
        return value
