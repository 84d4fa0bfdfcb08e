"""Logging setup shared by every ``finance_analytics`` module.

Library modules obtain loggers through :func:`get_logger` and never attach
handlers of their own. Entry points (the CLI, or a host application) call
:func:`configure_logging` once at startup to route the package's records to a
stream. Until then the package logger carries only a ``NullHandler`` so that
skipped-record warnings stay silent in library use.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

from .errors import ConfigurationError

PACKAGE_LOGGER = "finance_analytics"
LEVEL_ENV_VAR = "FINANCE_ANALYTICS_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_handler: logging.Handler | None = None


def parse_level(level: int | str | None) -> int:
    """Resolve ``level`` (or the env override when ``None``) to a level number.

    Accepts numbers, numeric strings and standard level names in any case.
    Unknown names raise :class:`ConfigurationError`.
    """

    if level is None:
        level = os.getenv(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelName(name)
    if isinstance(numeric, int):
        return numeric
    raise ConfigurationError(f"unknown log level: {level!r}")


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
    force: bool = False,
) -> logging.Logger:
    """Attach a single ``StreamHandler`` to the package logger.

    Repeated calls are no-ops unless ``force`` is set, in which case the
    previously installed handler is replaced. Records do not propagate to the
    root logger once configured.
    """

    global _handler
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None and not force:
        return logger

    numeric = parse_level(level)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler) or h is _handler:
            logger.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    handler.setLevel(numeric)
    logger.addHandler(handler)
    logger.setLevel(numeric)
    logger.propagate = False

    _handler = handler
    return logger


def reset_logging() -> None:
    """Undo :func:`configure_logging` (used by tests and embedding hosts)."""

    global _handler
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = [
    "configure_logging",
    "get_logger",
    "parse_level",
    "reset_logging",
    "PACKAGE_LOGGER",
    "LEVEL_ENV_VAR",
]
