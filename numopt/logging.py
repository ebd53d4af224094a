"""Logging for numopt.

Every module logs through a child of the ``numopt`` package logger. Only the
package logger owns a handler (stderr, WARNING by default) and it does not
propagate to the root logger, so numopt output stays out of application
logging unless routed there explicitly. Children carry no level of their own
and inherit the package level.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Optional

PACKAGE = "numopt"

_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def _coerce_level(level: int | str) -> int:
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        if not isinstance(value, int):
            raise ValueError(f"unknown logging level {level!r}")
        return value
    return int(level)


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.WARNING)
        logger.propagate = False
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the numopt logger for ``name`` (usually ``__name__``).

    Names outside the package are placed under it, so ``"solver"`` becomes
    ``numopt.solver``. ``None`` returns the package logger.
    """
    package = _package_logger()
    if name is None or name == PACKAGE:
        return package
    if not name.startswith(PACKAGE + "."):
        name = f"{PACKAGE}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """Set the level of all numopt output, e.g. ``"DEBUG"`` or ``logging.INFO``."""
    _package_logger().setLevel(_coerce_level(level))


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """Send numopt output to ``stream`` (default stderr) at ``level``."""
    logger = _package_logger()
    for old in logger.handlers[:]:
        logger.removeHandler(old)
    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.setFormatter(logging.Formatter(format_string or _FORMAT))
    logger.addHandler(handler)
    logger.setLevel(_coerce_level(level))


__all__ = ["PACKAGE", "configure_logging", "get_logger", "set_log_level"]
