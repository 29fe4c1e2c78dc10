"""Every entry module must import on its own, in a clean interpreter."""

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]


@pytest.mark.parametrize(
    "module",
    [
        "sheetpulse.cli",
        "sheetpulse.core.logger",
        "sheetpulse.core.pipeline",
        "sheetpulse.services.feed",
        "sheetpulse_persist",
    ],
)
def test_module_imports_in_fresh_interpreter(module: str, tmp_path: Path) -> None:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(ROOT), env.get("PYTHONPATH")]))
    env["SHEETPULSE_STATE_ROOT"] = str(tmp_path / "state")

    completed = subprocess.run(
        [sys.executable, "-c", f"import {module}"],
        cwd=tmp_path,
        env=env,
        capture_output=True,
        text=True,
        timeout=60,
    )

    assert completed.returncode == 0, completed.stderr


def test_persist_logger_is_child_of_app_logger() -> None:
    from sheetpulse.core.logger import LOGGER_NAME
    from sheetpulse_persist.utils.log import get_logger

    assert get_logger("source_store").name.startswith(f"{LOGGER_NAME}.")
