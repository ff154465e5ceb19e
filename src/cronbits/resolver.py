"""Resolution of single cron tokens to field values."""

from __future__ import annotations

import re

from cronbits.errors import InvalidValueError
from cronbits.fields import FIELD_CONSTRAINTS, CronFieldType

_INT_RE = re.compile(r"[+-]?[0-9]+")


def parse_int(token: str) -> int | None:
    """Parse a plain decimal integer, or return ``None``.

    Unlike ``int()``, surrounding whitespace and digit separators are
    rejected.
    """
    if _INT_RE.fullmatch(token) is None:
        return None
    return int(token)


def match_unique_prefix(prefix: str, names: tuple[str, ...]) -> int:
    """Index of the only name starting with *prefix*, or -1.

    Matching is case-insensitive. A prefix shared by several names (``"T"``
    for Tuesday and Thursday) counts as no match.
    """
    lowered = prefix.lower()
    result = -1
    for i, name in enumerate(names):
        if name.startswith(lowered):
            if result >= 0:
                return -1
            result = i
    return result


def resolve_value(token: str, field_type: CronFieldType) -> int:
    """Resolve a number or name to a value in expression numbering.

    Day of month and month come back 1-indexed; callers subtract one to get
    the storage position.

    Raises:
        InvalidValueError: If the token is out of range, unknown or ambiguous.
    """
    c = FIELD_CONSTRAINTS[field_type]

    n = parse_int(token)
    if n is not None:
        if c.min_value <= n <= c.max_value:
            return n
        raise InvalidValueError(
            f"invalid value {n} for the {c.label} field",
            field=c.label,
            token=token,
        )

    if c.names:
        index = match_unique_prefix(token, c.names)
        if index >= 0:
            return c.from_storage(index)

    raise InvalidValueError(
        f"invalid value {token!r} for the {c.label} field",
        field=c.label,
        token=token,
    )
