"""Tabular export and Markdown summary for loaded project records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Sequence

import pandas as pd

from sheetpulse.services.normalizer.models import CANONICAL_FIELDS, ProjectRecord
from sheetpulse.services.status.aggregate import KpiSnapshot

DISPLAY_HEADERS = {
    "project": "Project",
    "owner": "Owner",
    "phase": "Phase",
    "progress": "Progress",
    "rag_status": "RAG",
    "milestone": "Next Milestone",
    "target_date": "Target Date",
    "last_update": "Last Update",
}

SUPPORTED_SUFFIXES = {".csv", ".xlsx"}


@dataclass(slots=True)
class ExportResult:
    table_path: Path
    summary_path: Path
    rows: int


def records_to_frame(records: Sequence[ProjectRecord], *, display: bool = False) -> pd.DataFrame:
    """Build a DataFrame in canonical column order.

    With ``display=True`` progress is rendered as ``"72%"``/placeholder and
    headers use their dashboard titles.
    """

    rows = []
    for record in records:
        row = record.to_dict()
        if display:
            row["progress"] = record.progress_display
        rows.append(row)
    frame = pd.DataFrame(rows, columns=list(CANONICAL_FIELDS))
    if not display:
        frame["progress"] = frame["progress"].astype("Int64")
        return frame
    return frame.rename(columns=DISPLAY_HEADERS)


def export_records(
    records: Sequence[ProjectRecord],
    kpis: KpiSnapshot,
    output_path: Path,
    *,
    source_url: str | None = None,
) -> ExportResult:
    """Write visible records to CSV/XLSX plus a Markdown KPI summary beside it."""

    suffix = output_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"unsupported export format: {output_path.suffix or '<none>'}")
    output_path.parent.mkdir(parents=True, exist_ok=True)

    frame = records_to_frame(records)
    if suffix == ".csv":
        frame.to_csv(output_path, index=False)
    else:
        frame.to_excel(output_path, index=False, sheet_name="Portfolio Status", engine="openpyxl")

    summary_path = output_path.with_suffix(".md")
    lines = ["# Portfolio Status Summary", ""]
    lines.append(f"- Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    if source_url:
        lines.append(f"- Source: {source_url}")
    lines.append(f"- Active projects: {kpis.total}")
    lines.append(f"- On track: {kpis.on_track}")
    lines.append(f"- At risk: {kpis.at_risk}")
    lines.append(f"- Delayed: {kpis.delayed}")
    lines.append(f"- Unclassified: {kpis.unknown}")
    lines.append("")
    lines.append(f"Rows exported to `{output_path.name}`.")
    summary_path.write_text("\n".join(lines), encoding="utf-8")

    return ExportResult(table_path=output_path, summary_path=summary_path, rows=len(frame))


__all__ = ["DISPLAY_HEADERS", "ExportResult", "export_records", "records_to_frame"]
