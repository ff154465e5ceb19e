"""Logging setup for cronbits.

Library modules only call ``logging.getLogger(__name__)``; nothing is
configured on import. Applications (and the CLI) call
:func:`configure_logging` to attach a handler to the ``cronbits`` logger.

Environment variables:
    CRONBITS_LOG_LEVEL   DEBUG, INFO, WARNING, ... (default: WARNING)
    CRONBITS_LOG_FORMAT  console or json (default: console)
"""

from __future__ import annotations

import json
import logging
import os
import sys
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, TextIO

ROOT_LOGGER = "cronbits"

_FORMATS = ("console", "json")


@dataclass(frozen=True)
class LogConfig:
    """Logging configuration."""

    level: str = "WARNING"
    format: str = "console"

    def __post_init__(self) -> None:
        if self.format not in _FORMATS:
            raise ValueError(f"log format must be one of {_FORMATS}, got {self.format!r}")
        if not isinstance(logging.getLevelName(self.level.upper()), int):
            raise ValueError(f"unknown log level {self.level!r}")

    @property
    def level_no(self) -> int:
        return logging.getLevelName(self.level.upper())

    @classmethod
    def development(cls) -> "LogConfig":
        return cls(level="DEBUG", format="console")

    @classmethod
    def from_environment(cls) -> "LogConfig":
        """Load configuration from environment variables."""
        return cls(
            level=os.getenv("CRONBITS_LOG_LEVEL", "WARNING"),
            format=os.getenv("CRONBITS_LOG_FORMAT", "console").lower(),
        )


class JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


_CONSOLE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_handler: logging.Handler | None = None
_lock = threading.Lock()


def configure_logging(
    config: LogConfig | None = None,
    *,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a single handler to the ``cronbits`` logger.

    Calling it again replaces the previous handler.

    Args:
        config: Logging configuration (default: from environment).
        stream: Output stream (default: stderr).

    Returns:
        The configured ``cronbits`` logger.
    """
    global _handler

    config = config or LogConfig.from_environment()
    handler = logging.StreamHandler(stream or sys.stderr)
    if config.format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))

    logger = logging.getLogger(ROOT_LOGGER)
    with _lock:
        if _handler is not None:
            logger.removeHandler(_handler)
        _handler = handler
        logger.addHandler(handler)
        logger.setLevel(config.level_no)
    return logger


def reset_logging() -> None:
    """Remove the handler installed by :func:`configure_logging`."""
    global _handler

    logger = logging.getLogger(ROOT_LOGGER)
    with _lock:
        if _handler is not None:
            logger.removeHandler(_handler)
            _handler = None
        logger.setLevel(logging.NOTSET)
