"""Named loggers for the persistence layer.

Stores log under ``sheetpulse.persist.<name>`` so their records reach whatever
handlers ``sheetpulse.core.logger`` attached to the ``sheetpulse`` logger.
This module must not import ``sheetpulse.core``: the core logger imports the
persistence paths while it initializes.
"""

from __future__ import annotations

import logging

PERSIST_LOGGER_NAME = "sheetpulse.persist"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{PERSIST_LOGGER_NAME}.{name}")


__all__ = ["PERSIST_LOGGER_NAME", "get_logger"]
