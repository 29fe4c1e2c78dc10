"""Application logging: one ``sheetpulse`` logger shared by every module.

Records go to ``<state root>/logs/app.log`` (rotated) and to stderr, which
keeps stdout free for the table and JSON output of the CLI. Modules either call
``get_logger()`` or log through a ``sheetpulse.*`` child logger.
"""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from sheetpulse_persist.utils.paths import log_dir as default_log_dir

LOGGER_NAME = "sheetpulse"
LOG_FILENAME = "app.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
MAX_LOG_BYTES = 2 * 1024 * 1024
LOG_BACKUPS = 3

_LOGGER: logging.Logger | None = None


def get_logger(log_dir: Path | None = None) -> logging.Logger:
    """Return the application logger, attaching its handlers on first use."""

    global _LOGGER
    if _LOGGER is None:
        _LOGGER = _configure(Path(log_dir) if log_dir is not None else default_log_dir())
    return _LOGGER


def set_level(level: str) -> int:
    """Apply a level name such as ``"debug"``; unknown names raise ``ValueError``."""

    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    get_logger().setLevel(value)
    return value


def reset_logger() -> None:
    """Detach and close handlers so the next ``get_logger()`` starts fresh."""

    global _LOGGER
    logger, _LOGGER = _LOGGER, None
    if logger is None:
        return
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _configure(directory: Path) -> logging.Logger:
    directory.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    file_handler = RotatingFileHandler(
        directory / LOG_FILENAME,
        maxBytes=MAX_LOG_BYTES,
        backupCount=LOG_BACKUPS,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler(sys.stderr)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


__all__ = ["LOGGER_NAME", "get_logger", "reset_logger", "set_level"]
