"""Canonical project-status record."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any

PLACEHOLDER = "—"

CANONICAL_FIELDS: tuple[str, ...] = (
    "project",
    "owner",
    "phase",
    "progress",
    "rag_status",
    "milestone",
    "target_date",
    "last_update",
)

_SLUG = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True, slots=True)
class ProjectRecord:
    """One normalized project row.

    Every string field holds either real text or ``PLACEHOLDER``; ``progress``
    is ``None`` when the source had no usable percentage.
    """

    project: str = PLACEHOLDER
    owner: str = PLACEHOLDER
    phase: str = PLACEHOLDER
    progress: int | None = None
    rag_status: str = PLACEHOLDER
    milestone: str = PLACEHOLDER
    target_date: str = PLACEHOLDER
    last_update: str = PLACEHOLDER

    @property
    def is_valid(self) -> bool:
        return self.project != PLACEHOLDER

    @property
    def progress_display(self) -> str:
        return f"{self.progress}%" if self.progress is not None else PLACEHOLDER

    @property
    def status_class(self) -> str:
        """Slug of the status text, e.g. ``"At Risk"`` -> ``"at-risk"``."""

        return _SLUG.sub("-", self.rag_status.strip().lower()).strip("-")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


__all__ = ["CANONICAL_FIELDS", "PLACEHOLDER", "ProjectRecord"]
