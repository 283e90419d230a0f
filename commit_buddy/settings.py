"""Project logging configuration utilities.

Every module logs through a child of the ``commit_buddy`` logger. Only that
parent carries a handler and a level, so changing the level once applies to
the whole package.
"""

from __future__ import annotations

import logging
import os
from typing import Final


LOG_LEVEL_ENV_VAR: Final[str] = "COMMIT_BUDDY_LOG_LEVEL"
PACKAGE_LOGGER_NAME: Final[str] = "commit_buddy"

_RESET: Final[str] = "\033[0m"
_LEVEL_COLORS: Final[dict[int, str]] = {
    logging.DEBUG: "\033[2;37m",
    logging.INFO: "\033[36m",
    logging.WARNING: "\033[1;33m",
    logging.ERROR: "\033[1;31m",
    logging.CRITICAL: "\033[1;35m",
}


class _ColorFormatter(logging.Formatter):
    """Render ``commit-buddy <level> <module>: message`` in the level's color."""

    def __init__(self, use_color: bool = True) -> None:
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        module = record.name.rsplit(".", 1)[-1]
        line = f"commit-buddy {record.levelname.lower()} {module}: {super().format(record)}"

        color = _LEVEL_COLORS.get(record.levelno)
        if not self.use_color or color is None:
            return line
        return f"{color}{line}{_RESET}"


def _parse_level(level_name: str | None) -> int | None:
    if not level_name:
        return None

    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else None


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)

    if not logger.handlers:
        handler = logging.StreamHandler()
        stream = getattr(handler.stream, "isatty", None)
        handler.setFormatter(_ColorFormatter(use_color=bool(stream and stream())))
        logger.addHandler(handler)

        level = _parse_level(os.getenv(LOG_LEVEL_ENV_VAR))
        if level is not None:
            logger.setLevel(level)

    return logger


def commit_buddy_logger(name: str) -> logging.Logger:
    """Return the logger for *name*, making sure the package handler exists."""

    _package_logger()
    return logging.getLogger(name)


def set_commit_buddy_log_level(level_name: str) -> None:
    """Set the log level for every Commit Buddy logger.

    Raises:
        ValueError: If *level_name* is not a logging level.
    """
    level = _parse_level(level_name)
    if level is None:
        raise ValueError(f"Unknown log level: {level_name}")

    os.environ[LOG_LEVEL_ENV_VAR] = level_name.upper()
    _package_logger().setLevel(level)
