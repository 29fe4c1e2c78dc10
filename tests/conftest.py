from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Sequence

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sheetpulse.core import logger as core_logger

GVIZ_PREFIX = "/*O_o*/\ngoogle.visualization.Query.setResponse("
GVIZ_SUFFIX = ");"

PORTFOLIO_LABELS = [
    "Project",
    "Owner",
    "Phase",
    "Progress %",
    "RAG",
    "Next Milestone",
    "Target Date",
    "Last Update",
]


def _cell(value: Any) -> dict[str, Any] | None:
    if value is None:
        return None
    if isinstance(value, tuple):
        raw, formatted = value
        return {"v": raw, "f": formatted}
    return {"v": value}


def build_gviz_text(
    labels: Sequence[str],
    rows: Sequence[Sequence[Any]],
    *,
    types: Sequence[str] | None = None,
) -> str:
    """Wrap a table in the same JS envelope the gviz endpoint returns.

    Cells given as ``(raw, formatted)`` tuples carry both values.
    """

    types = list(types or ["string"] * len(labels))
    payload = {
        "version": "0.6",
        "reqId": "0",
        "status": "ok",
        "sig": "1948392845",
        "table": {
            "cols": [
                {"id": chr(ord("A") + idx), "label": label, "type": types[idx]}
                for idx, label in enumerate(labels)
            ],
            "rows": [{"c": [_cell(value) for value in row]} for row in rows],
            "parsedNumHeaders": 1,
        },
    }
    return f"{GVIZ_PREFIX}{json.dumps(payload)}{GVIZ_SUFFIX}"


@pytest.fixture()
def gviz_text() -> Callable[..., str]:
    return build_gviz_text


@pytest.fixture()
def portfolio_text() -> str:
    return build_gviz_text(
        PORTFOLIO_LABELS,
        [
            ["Township Expansion - North", "PMO Team A", "Execution", (72.0, "72%"), "On Track", "Site utility handover", "Feb 20, 2026", "Feb 08, 2026"],
            ["Digital Sales Portal", "PMO Team B", "UAT", (58.0, "58%"), "At Risk", "UAT signoff", "Mar 03, 2026", "Feb 09, 2026"],
            ["CRM Data Cleansing", "PMO Team C", "Planning", 32.0, "Delayed", "Baseline approval", "Feb 27, 2026", "Feb 07, 2026"],
            ["Client Self-Service Enhancements", "PMO Team D", "Deployment", 94.0, "Completed", "Post-launch report", "Feb 14, 2026", "Feb 10, 2026"],
            [None, "PMO Team E", "Idea", None, "", None, None, None],
        ],
        types=["string", "string", "string", "number", "string", "string", "string", "string"],
    )


@pytest.fixture(autouse=True)
def _isolated_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Keep logs and saved sources out of the user's home directory."""

    monkeypatch.setenv("SHEETPULSE_STATE_ROOT", str(tmp_path / "state"))
    core_logger.reset_logger()
    yield
    core_logger.reset_logger()
