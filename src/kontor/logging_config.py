"""Logging setup for kontor."""

import logging
import sys
import threading
from typing import Any

_LOGGER_PREFIX = "kontor"
_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False
_lock = threading.Lock()


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the kontor namespace."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            return logging.WARNING
    return level


def configure_logging(
    *,
    level: int | str = logging.WARNING,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """Configure the kontor logger hierarchy (idempotent).

    Args:
        level: Level as int or name ("INFO"); unknown names fall back to WARNING
        stream: Stream for the default handler, sys.stderr at call time if omitted
        handler: Handler to install instead of the default stream handler
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

        root_logger = logging.getLogger(_LOGGER_PREFIX)
        root_logger.setLevel(_coerce_level(level))
        root_logger.propagate = False

        h = handler if handler is not None else logging.StreamHandler(stream or sys.stderr)
        h.setFormatter(logging.Formatter(_FORMAT))
        root_logger.addHandler(h)


def reset_logging() -> None:
    """Reset logging configuration. For tests only."""
    global _configured
    with _lock:
        _configured = False
        logger = logging.getLogger(_LOGGER_PREFIX)
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
