"""Shared fixtures for cronbits tests."""

from __future__ import annotations

import pytest

from cronbits.config import reset_config
from cronbits.fields import FIELD_CONSTRAINTS, FIELD_ORDER
from cronbits.logging import reset_logging
from cronbits.schedule import Schedule


def make_schedule(*fields: list[int] | None) -> Schedule:
    """Build a schedule from storage positions per field; ``None`` means all."""
    assert len(fields) == 5
    bits = 0
    for field_type, positions in zip(FIELD_ORDER, fields):
        c = FIELD_CONSTRAINTS[field_type]
        for p in range(c.size) if positions is None else positions:
            bits |= 1 << (c.offset + p)
    return Schedule(bits)


@pytest.fixture
def schedule_of():
    """Factory building expected schedules from storage positions."""
    return make_schedule


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep CRONBITS_* settings and logging handlers out of every test."""
    for name in (
        "CRONBITS_SEED",
        "CRONBITS_TIMEZONE",
        "CRONBITS_COUNT",
        "CRONBITS_HASHED",
        "CRONBITS_LOG_LEVEL",
        "CRONBITS_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()
    reset_logging()
