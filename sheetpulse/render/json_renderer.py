"""Renderer that collects every section and emits one JSON document."""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

import typer

from sheetpulse.services.filtering.engine import FilterOptions
from sheetpulse.services.normalizer.models import ProjectRecord
from sheetpulse.services.status.aggregate import KpiSnapshot


class JsonRenderer:
    """Buffer render calls; ``flush()`` prints the combined document."""

    def __init__(self) -> None:
        self.document: dict[str, Any] = {"kpis": None, "rows": None, "filters": {}, "feedback": ""}

    def render_kpis(self, kpis: KpiSnapshot) -> None:
        self.document["kpis"] = kpis.to_dict()

    def render_table(self, records: Sequence[ProjectRecord] | None) -> None:
        if records is None:
            self.document["rows"] = None
            return
        self.document["rows"] = [{**record.to_dict(), "status_class": record.status_class} for record in records]

    def render_filter_options(self, options: Mapping[str, FilterOptions]) -> None:
        self.document["filters"] = {
            name: {"options": list(item.options), "selected": item.selected} for name, item in options.items()
        }

    def render_feedback(self, message: str) -> None:
        self.document["feedback"] = message

    def flush(self) -> None:
        typer.echo(json.dumps(self.document, ensure_ascii=False, indent=2))


__all__ = ["JsonRenderer"]
