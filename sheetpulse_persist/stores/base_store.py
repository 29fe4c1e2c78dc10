"""
RESPONSIBILITIES
- Define shared interfaces and exceptions for file-backed stores.
- Outline the init/read/write/healthcheck workflow used by concrete stores.
PROCESS OVERVIEW
1. init_store -> resolve target path, ensure directories exist.
2. read -> return the stored value for a key, tolerating absent or corrupt files.
3. write -> replace the stored value atomically.
4. healthcheck -> verify directory write access.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path


class StoreError(RuntimeError):
    """Base exception type for persistence-layer failures."""


@dataclass(slots=True)
class PersistHealth:
    """Structured report produced by health checks."""

    writable_paths: dict[str, bool]
    issues: list[str] = field(default_factory=list)

    def is_healthy(self) -> bool:
        """Return True when no issues are observed."""

        return not self.issues and all(self.writable_paths.values())


class BaseStore(ABC):
    """Abstract class shared by concrete file-backed stores."""

    filename: str

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def init_store(self) -> Path:
        """Ensure the backing file's directory exists, returning the absolute path."""

    @abstractmethod
    def read(self, key: str) -> str | None:
        """Return the stored value or None when absent/unreadable."""

    @abstractmethod
    def write(self, key: str, value: str) -> None:
        """Persist a single value under ``key``."""

    @abstractmethod
    def healthcheck(self) -> PersistHealth:
        """Run diagnostics for the store and return a structured report."""
