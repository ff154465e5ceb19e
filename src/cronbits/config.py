"""Environment-driven configuration.

The parsing and search functions take explicit arguments; this configuration
only supplies defaults for the command-line interface.

Environment variables:
    CRONBITS_SEED       Seed for ``H`` when none is given (default: unset)
    CRONBITS_TIMEZONE   Zone used for "now" and for printed times (default: UTC)
    CRONBITS_COUNT      Number of upcoming runs to show (default: 5)
    CRONBITS_HASHED     Parse with ``H`` support by default (default: false)

Usage:
    >>> from cronbits.config import get_config
    >>> config = get_config()
    >>> config.tzinfo
    zoneinfo.ZoneInfo(key='UTC')
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from typing import Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

ENV_PREFIX = "CRONBITS_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


class ConfigError(Exception):
    """Raised when an environment variable holds an unusable value."""


@dataclass(frozen=True)
class CronConfig:
    """Defaults used by the command-line interface."""

    seed: str | None = None
    timezone: str = "UTC"
    count: int = 5
    hashed: bool = False

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ConfigError(f"count must be at least 1, got {self.count}")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(f"unknown timezone {self.timezone!r}") from e

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_environment(cls, environ: Mapping[str, str] | None = None) -> "CronConfig":
        """Load configuration from ``CRONBITS_*`` environment variables."""
        env = os.environ if environ is None else environ
        return cls(
            seed=env.get(f"{ENV_PREFIX}SEED") or None,
            timezone=env.get(f"{ENV_PREFIX}TIMEZONE", "UTC"),
            count=_get_int(env, "COUNT", 5),
            hashed=_get_bool(env, "HASHED", False),
        )


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


def _get_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(ENV_PREFIX + name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{ENV_PREFIX}{name} must be a boolean, got {raw!r}")


_config: CronConfig | None = None
_lock = threading.Lock()


def get_config() -> CronConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config

    with _lock:
        if _config is None:
            _config = CronConfig.from_environment()
        return _config


def reset_config() -> None:
    global _config

    with _lock:
        _config = None
