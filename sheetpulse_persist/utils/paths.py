"""
RESPONSIBILITIES
- Decide where SheetPulse keeps its on-disk state: the saved source and the logs.
PROCESS OVERVIEW
1. resolve_root() picks the explicit root, then SHEETPULSE_STATE_ROOT, then ~/SheetPulse.
2. state_layout() returns the store/ and logs/ locations under that root, creating them on request.
3. store_file_path() and log_dir() are shortcuts for the two consumers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

STATE_ROOT_ENV = "SHEETPULSE_STATE_ROOT"
DEFAULT_ROOT_NAME = "SheetPulse"

StrPath = str | os.PathLike[str]


@dataclass(frozen=True, slots=True)
class StateLayout:
    root: Path

    @property
    def store(self) -> Path:
        return self.root / "store"

    @property
    def logs(self) -> Path:
        return self.root / "logs"

    def create(self) -> "StateLayout":
        for directory in (self.store, self.logs):
            directory.mkdir(parents=True, exist_ok=True)
        return self


def resolve_root(root: StrPath | None = None) -> Path:
    if root is None:
        env = os.getenv(STATE_ROOT_ENV, "").strip()
        root = env or Path.home() / DEFAULT_ROOT_NAME
    return Path(root).expanduser().resolve()


def state_layout(root: StrPath | None = None, *, create: bool = True) -> StateLayout:
    layout = StateLayout(resolve_root(root))
    return layout.create() if create else layout


def store_file_path(filename: str, root: StrPath | None = None) -> Path:
    """Location of a store document; the store directory is created if missing."""

    return state_layout(root).store / filename


def log_dir(root: StrPath | None = None) -> Path:
    return state_layout(root).logs


__all__ = ["STATE_ROOT_ENV", "StateLayout", "log_dir", "resolve_root", "state_layout", "store_file_path"]
