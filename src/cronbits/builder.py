"""Fluent builder for cron expressions."""

from __future__ import annotations

from cronbits.parser import parse, parse_with_hash
from cronbits.schedule import Schedule


class CronBuilder:
    """Fluent builder for five-field cron expressions.

    Example:
        >>> schedule = (CronBuilder()
        ...     .at_minute(0, 30)
        ...     .at_hour(9, 17)
        ...     .on_weekdays()
        ...     .build())
        >>> CronBuilder().at_hashed_minute().daily_at_hashed_hour().expression()
        'H H * * *'
    """

    def __init__(self) -> None:
        """Initialize builder with defaults (every minute)."""
        self._minute: str = "*"
        self._hour: str = "*"
        self._day_of_month: str = "*"
        self._month: str = "*"
        self._day_of_week: str = "*"

    def at_minute(self, *minutes: int) -> "CronBuilder":
        self._minute = _join(minutes)
        return self

    def every_n_minutes(self, n: int) -> "CronBuilder":
        self._minute = f"*/{n}"
        return self

    def at_hashed_minute(self, every: int | None = None) -> "CronBuilder":
        """Use ``H`` (or ``H/every``) for the minute."""
        self._minute = "H" if every is None else f"H/{every}"
        return self

    def at_hour(self, *hours: int) -> "CronBuilder":
        self._hour = _join(hours)
        return self

    def every_n_hours(self, n: int) -> "CronBuilder":
        self._hour = f"*/{n}"
        return self

    def between_hours(self, start: int, end: int) -> "CronBuilder":
        """Restrict to an hour range; ``between_hours(22, 4)`` wraps midnight."""
        self._hour = f"{start}-{end}"
        return self

    def at_hashed_hour(self, every: int | None = None) -> "CronBuilder":
        self._hour = "H" if every is None else f"H/{every}"
        return self

    def daily_at_hashed_hour(self) -> "CronBuilder":
        return self.at_hashed_hour().every_day()

    def on_day(self, *days: int) -> "CronBuilder":
        """Set specific days of month."""
        self._day_of_month = _join(days)
        return self

    def in_month(self, *months: int | str) -> "CronBuilder":
        """Set specific months, by number or name."""
        self._month = ",".join(str(m).upper() for m in months)
        return self

    def on_weekday(self, *weekdays: int | str) -> "CronBuilder":
        """Set specific weekdays (0=SUN, 6=SAT)."""
        self._day_of_week = ",".join(str(w).upper() for w in weekdays)
        return self

    def on_weekdays(self) -> "CronBuilder":
        self._day_of_week = "MON-FRI"
        return self

    def on_weekends(self) -> "CronBuilder":
        self._day_of_week = "SAT,SUN"
        return self

    def every_day(self) -> "CronBuilder":
        self._day_of_month = "*"
        self._day_of_week = "*"
        return self

    def daily_at(self, hour: int, minute: int = 0) -> "CronBuilder":
        self._minute = str(minute)
        self._hour = str(hour)
        return self

    def hourly_at(self, minute: int) -> "CronBuilder":
        self._minute = str(minute)
        return self

    def expression(self) -> str:
        return (
            f"{self._minute} {self._hour} "
            f"{self._day_of_month} {self._month} {self._day_of_week}"
        )

    @property
    def uses_hash(self) -> bool:
        return any(
            part.split("/", 1)[0].upper() == "H"
            for part in self.expression().replace(",", " ").split()
        )

    def build(self, seed: int | str | bytes | None = None) -> Schedule:
        """Parse the built expression.

        Args:
            seed: Required when the expression uses ``H``.

        Raises:
            ValueError: If ``H`` is used without a seed.
        """
        expression = self.expression()
        if self.uses_hash:
            if seed is None:
                raise ValueError(f"a seed is required to build {expression!r}")
            return parse_with_hash(expression, seed)
        return parse(expression)


def _join(values: tuple[int, ...]) -> str:
    if not values:
        raise ValueError("at least one value is required")
    return ",".join(str(v) for v in values)
