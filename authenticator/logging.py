"""Structured logging for the authenticator package.

Package loggers are structlog loggers wrapped around stdlib loggers, so they
obey the stdlib level of the embedding process: with nothing configured only
warnings and above reach the handlers, and debug events are dropped before
any rendering happens.  :func:`setup_logging` is for entry points (the CLI)
that own the process.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Any, Final

import structlog
from structlog.contextvars import bind_contextvars as _bind_contextvars
from structlog.contextvars import clear_contextvars as _clear_contextvars

ROOT_LOGGER: Final[str] = "authenticator"

_PROCESSORS: Final[list[Any]] = [
    structlog.stdlib.filter_by_level,
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.JSONRenderer(),
]


def _resolve_log_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if isinstance(resolved, int):
            return resolved
    return logging.INFO


def setup_logging(*, level: str | int | None = None) -> None:
    """Send JSON log lines to stderr at *level* (argument, ``LOG_LEVEL``, then INFO)."""

    resolved = _resolve_log_level(level or os.getenv("LOG_LEVEL"))
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=resolved, force=True)
    structlog.configure(
        processors=list(_PROCESSORS),
        context_class=dict,
        cache_logger_on_first_use=True,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def get_logger(name: str | None = None) -> Any:
    """Return a logger for *name* that renders through the stdlib logger of the same name.

    The processor chain is bound here rather than read from structlog's
    global configuration, so an unconfigured caller never gets structlog's
    default stdout printer.
    """

    return structlog.wrap_logger(
        logging.getLogger(name or ROOT_LOGGER),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )


def bind_contextvars(**kwargs: Any) -> None:
    _bind_contextvars(**kwargs)


def clear_contextvars() -> None:
    _clear_contextvars()


__all__ = ["ROOT_LOGGER", "bind_contextvars", "clear_contextvars", "get_logger", "setup_logging"]
