from __future__ import annotations

import json
from pathlib import Path

import pytest

from sheetpulse_persist import LAST_SOURCE_KEY, SourceStore, StoreError


def test_round_trip_last_source(tmp_path: Path) -> None:
    store = SourceStore(tmp_path)

    store.save_last_source("https://docs.google.com/spreadsheets/d/abc/edit")

    assert SourceStore(tmp_path).read_last_source() == "https://docs.google.com/spreadsheets/d/abc/edit"
    saved = json.loads((tmp_path / "store" / "state.json").read_text(encoding="utf-8"))
    assert saved == {LAST_SOURCE_KEY: "https://docs.google.com/spreadsheets/d/abc/edit"}


def test_missing_state_means_no_source(tmp_path: Path) -> None:
    assert SourceStore(tmp_path).read_last_source() is None


def test_corrupt_state_is_ignored(tmp_path: Path) -> None:
    store = SourceStore(tmp_path)
    store.init_store().write_text("{not json", encoding="utf-8")

    assert store.read_last_source() is None

    store.save_last_source("https://docs.google.com/spreadsheets/d/new/edit")
    assert store.read_last_source() == "https://docs.google.com/spreadsheets/d/new/edit"


def test_non_string_value_is_ignored(tmp_path: Path) -> None:
    store = SourceStore(tmp_path)
    store.init_store().write_text(json.dumps({LAST_SOURCE_KEY: 42}), encoding="utf-8")

    assert store.read_last_source() is None


def test_other_keys_are_preserved(tmp_path: Path) -> None:
    store = SourceStore(tmp_path)
    store.init_store().write_text(json.dumps({"theme": "dark"}), encoding="utf-8")

    store.save_last_source("https://docs.google.com/spreadsheets/d/abc/edit")

    assert store.read("theme") == "dark"


def test_write_failure_raises_store_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    store = SourceStore(tmp_path)

    def _boom(src, dst):
        raise OSError("read-only")

    monkeypatch.setattr("sheetpulse_persist.stores.source_store.os.replace", _boom)

    with pytest.raises(StoreError):
        store.save_last_source("https://docs.google.com/spreadsheets/d/abc/edit")


def test_env_root_is_used_by_default(tmp_path: Path) -> None:
    store = SourceStore()

    assert store.path == (tmp_path / "state" / "store" / "state.json").resolve()


def test_healthcheck_reports_writable(tmp_path: Path) -> None:
    health = SourceStore(tmp_path).healthcheck()

    assert health.is_healthy()
    assert str((tmp_path / "store").resolve()) in health.writable_paths


def test_state_layout_only_creates_store_and_logs(tmp_path: Path) -> None:
    from sheetpulse_persist.utils.paths import state_layout

    layout = state_layout(tmp_path / "root")

    assert sorted(child.name for child in layout.root.iterdir()) == ["logs", "store"]
