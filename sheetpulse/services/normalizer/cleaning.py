"""Cleaning helpers for raw cell text."""

from __future__ import annotations

import re

from .models import PLACEHOLDER

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def is_missing(value: object) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and value.strip() == ""


def sanitize(value: object, fallback: str = PLACEHOLDER) -> str:
    """Trim ``value``; empty text becomes ``fallback``."""

    text = "" if value is None else str(value).strip()
    return text or fallback


def parse_progress(value: object) -> int | None:
    """Parse the leading base-10 integer of ``value``.

    ``"72"``, ``"72%"`` and ``"72.0"`` give 72. Non-numeric text and values
    outside [0, 100] give ``None``; nothing is clamped.
    """

    if is_missing(value):
        return None
    match = _LEADING_INT.match(str(value))
    if not match:
        return None
    number = int(match.group(1), 10)
    if not 0 <= number <= 100:
        return None
    return number
