from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from sheetpulse.services.normalizer.models import PLACEHOLDER, ProjectRecord
from sheetpulse.services.report import export_records, records_to_frame
from sheetpulse.services.status import compute_kpis

RECORDS = [
    ProjectRecord(project="Alpha", owner="Ana", progress=72, rag_status="Green"),
    ProjectRecord(project="Beta", rag_status="Red"),
]


def test_records_to_frame_keeps_canonical_order() -> None:
    frame = records_to_frame(RECORDS)

    assert list(frame.columns) == [
        "project",
        "owner",
        "phase",
        "progress",
        "rag_status",
        "milestone",
        "target_date",
        "last_update",
    ]
    assert frame.loc[0, "progress"] == 72
    assert pd.isna(frame.loc[1, "progress"])


def test_display_frame_formats_progress() -> None:
    frame = records_to_frame(RECORDS, display=True)

    assert list(frame["Progress"]) == ["72%", PLACEHOLDER]
    assert "Next Milestone" in frame.columns


def test_export_csv_with_summary(tmp_path: Path) -> None:
    output = tmp_path / "out" / "status.csv"

    result = export_records(RECORDS, compute_kpis(RECORDS), output, source_url="https://docs.google.com/x")

    assert result.rows == 2
    frame = pd.read_csv(output)
    assert list(frame["project"]) == ["Alpha", "Beta"]
    summary = result.summary_path.read_text(encoding="utf-8")
    assert "- On track: 1" in summary
    assert "- Delayed: 1" in summary
    assert "https://docs.google.com/x" in summary


def test_export_xlsx(tmp_path: Path) -> None:
    output = tmp_path / "status.xlsx"

    export_records(RECORDS, compute_kpis(RECORDS), output)

    frame = pd.read_excel(output, sheet_name="Portfolio Status", engine="openpyxl")
    assert list(frame["owner"]) == ["Ana", PLACEHOLDER]


def test_export_rejects_unknown_suffix(tmp_path: Path) -> None:
    with pytest.raises(ValueError):
        export_records(RECORDS, compute_kpis(RECORDS), tmp_path / "status.json")
