"""Exceptions raised by cronbits.

Parse failures derive from :class:`CronParseError` (a ``ValueError``) and are
grouped the way they are detected:

    structural      FieldCountError
    lexical/value   InvalidValueError, InvalidIncrementError
    semantic        InvalidRangeError, HashedScheduleError, HashListError,
                    UnknownAliasError

Misusing a parsed schedule is a programming error and raises a
``RuntimeError`` subclass instead.
"""

from __future__ import annotations


# =============================================================================
# Parse Errors
# =============================================================================


class CronParseError(ValueError):
    """Raised when cron expression parsing fails."""

    def __init__(
        self,
        message: str,
        expression: str = "",
        field: str | None = None,
        token: str | None = None,
    ) -> None:
        self.message = message
        self.expression = expression
        self.field = field
        self.token = token
        super().__init__(message)

    def with_expression(self, expression: str) -> "CronParseError":
        """Attach the full expression once it is known."""
        if not self.expression:
            self.expression = expression
        return self

    def __str__(self) -> str:
        if self.expression:
            return f"invalid cron schedule {self.expression!r}: {self.message}"
        return self.message


class FieldCountError(CronParseError):
    """The expression does not have exactly five fields."""


class InvalidValueError(CronParseError):
    """A token is not a valid number or name for its field."""


class InvalidIncrementError(CronParseError):
    """The step after ``/`` is not an integer of at least 1."""


class InvalidRangeError(CronParseError):
    """A range ``A-B`` is degenerate or uses ``H`` as a bound."""


class HashedScheduleError(CronParseError):
    """``H`` was used with the entry point that forbids it."""

    def __init__(self, expression: str = "") -> None:
        super().__init__(
            'the "H" symbol cannot be used with parse(); use parse_with_hash() instead',
            expression,
            token="H",
        )

    def __str__(self) -> str:
        return self.message


class HashListError(CronParseError):
    """``H`` was combined with comma-separated alternatives in one field."""


class UnknownAliasError(CronParseError):
    """An ``@name`` expression is not a known schedule name."""

    def __init__(self, expression: str) -> None:
        super().__init__(
            f"unrecognized cron schedule name: {expression!r}",
            expression,
            token=expression,
        )

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Runtime Errors
# =============================================================================


class InvalidScheduleError(RuntimeError):
    """A search was started on a schedule that can never be satisfied."""


class ScheduleExhaustedError(RuntimeError):
    """No matching time exists within the search horizon."""
