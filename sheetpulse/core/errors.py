"""Custom exceptions used across SheetPulse."""

from __future__ import annotations


class SheetPulseError(Exception):
    """Base error for the application."""


class ConfigError(SheetPulseError):
    """Configuration related error."""


class InvalidLink(SheetPulseError):
    """Raised when user input is empty or not a parseable address."""


class UnsupportedHost(SheetPulseError):
    """Raised when the address is valid but its host is not allow-listed."""

    def __init__(self, host: str) -> None:
        super().__init__(f"Unsupported host: {host}")
        self.host = host


class MalformedPayload(SheetPulseError):
    """Raised when the feed body cannot be decoded into a table."""


class HttpError(SheetPulseError):
    """Raised when the feed endpoint answers with a failure status."""

    def __init__(self, status: int, *, url: str | None = None) -> None:
        super().__init__(f"Status API returned {status}")
        self.status = status
        self.url = url


class NetworkError(SheetPulseError):
    """Raised when the transport fails (timeout, DNS, refused connection)."""


class EmptyResult(SheetPulseError):
    """Raised when a decoded feed holds no usable project rows."""
