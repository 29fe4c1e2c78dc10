"""Console renderer used by the CLI."""

from __future__ import annotations

from typing import Mapping, Sequence

import pandas as pd
import typer

from sheetpulse.services.filtering.engine import FilterOptions
from sheetpulse.services.normalizer.models import ProjectRecord
from sheetpulse.services.report.exporter import records_to_frame
from sheetpulse.services.status.aggregate import KpiSnapshot

NO_ROWS_MESSAGE = "No project rows to display."

_KPI_LABELS = (
    ("total", "Active projects"),
    ("on_track", "On track"),
    ("at_risk", "At risk"),
    ("delayed", "Delayed"),
)


class ConsoleRenderer:
    """Write dashboard sections to the terminal with typer."""

    def __init__(self, *, show_options: bool = False, max_width: int = 160) -> None:
        self._show_options = show_options
        self._max_width = max_width

    def render_kpis(self, kpis: KpiSnapshot) -> None:
        tiles = kpis.formatted()
        line = "  ".join(f"{label}: {tiles[key]}" for key, label in _KPI_LABELS)
        typer.secho(line, bold=True)

    def render_table(self, records: Sequence[ProjectRecord] | None) -> None:
        if not records:
            typer.echo(NO_ROWS_MESSAGE)
            return
        frame = records_to_frame(records, display=True)
        with pd.option_context("display.width", self._max_width, "display.max_columns", None):
            typer.echo(frame.to_string(index=False))

    def render_filter_options(self, options: Mapping[str, FilterOptions]) -> None:
        if not self._show_options:
            return
        for name, item in options.items():
            marker = f" [selected: {item.selected}]" if item.selected else ""
            values = ", ".join(item.options) or "-"
            typer.echo(f"{name}{marker}: {values}")

    def render_feedback(self, message: str) -> None:
        if message:
            typer.secho(message, err=True, fg=typer.colors.CYAN)


__all__ = ["ConsoleRenderer", "NO_ROWS_MESSAGE"]
