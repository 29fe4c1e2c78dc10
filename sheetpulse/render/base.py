"""Rendering contract between the controller and any presentation layer."""

from __future__ import annotations

from typing import Mapping, Protocol, Sequence

from sheetpulse.services.filtering.engine import FilterOptions
from sheetpulse.services.normalizer.models import ProjectRecord
from sheetpulse.services.status.aggregate import KpiSnapshot


class Renderer(Protocol):
    """The four render operations the controller calls with plain data."""

    def render_kpis(self, kpis: KpiSnapshot) -> None:  # pragma: no cover - interface definition
        ...

    def render_table(self, records: Sequence[ProjectRecord] | None) -> None:  # pragma: no cover - interface definition
        """``None`` is the explicit "no rows" signal."""

    def render_filter_options(self, options: Mapping[str, FilterOptions]) -> None:  # pragma: no cover - interface definition
        ...

    def render_feedback(self, message: str) -> None:  # pragma: no cover - interface definition
        ...


class NullRenderer:
    """Renderer that drops everything; used when no presentation is attached."""

    def render_kpis(self, kpis: KpiSnapshot) -> None:
        return None

    def render_table(self, records: Sequence[ProjectRecord] | None) -> None:
        return None

    def render_filter_options(self, options: Mapping[str, FilterOptions]) -> None:
        return None

    def render_feedback(self, message: str) -> None:
        return None


__all__ = ["NullRenderer", "Renderer"]
