"""
RESPONSIBILITIES
- Keep the last successfully parsed sheet address between sessions.
- Treat absent or corrupt state as "no prior source" instead of failing.
PROCESS OVERVIEW
1. init_store() ensures <state root>/store/ exists and returns state.json's path.
2. read() loads the JSON object and returns the string under the requested key.
3. write() merges the key into the JSON object and replaces the file atomically.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from sheetpulse_persist.stores.base_store import BaseStore, PersistHealth, StoreError
from sheetpulse_persist.utils.log import get_logger
from sheetpulse_persist.utils.paths import state_layout, store_file_path

STATE_FILENAME = "state.json"
LAST_SOURCE_KEY = "projectStatusSheetSource"


class SourceStore(BaseStore):
    """Opaque key-value store backed by a single JSON document."""

    filename = STATE_FILENAME

    def __init__(self, root: str | os.PathLike[str] | None = None, *, logger: logging.Logger | None = None) -> None:
        super().__init__(logger=logger or get_logger("source_store"))
        self._root = root

    @property
    def path(self) -> Path:
        return store_file_path(self.filename, self._root)

    def init_store(self) -> Path:
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def _load(self) -> dict[str, object]:
        path = self.path
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            self.logger.warning("source_store.corrupt path=%s error=%s", path, type(exc).__name__)
            return {}
        if not isinstance(data, dict):
            self.logger.warning("source_store.corrupt path=%s error=not_an_object", path)
            return {}
        return data

    def read(self, key: str) -> str | None:
        value = self._load().get(key)
        if value is None:
            return None
        if not isinstance(value, str) or not value.strip():
            self.logger.warning("source_store.invalid_value key=%s", key)
            return None
        return value.strip()

    def write(self, key: str, value: str) -> None:
        path = self.init_store()
        data = self._load()
        data[key] = value
        tmp_path = path.with_suffix(".tmp")
        try:
            tmp_path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as exc:
            raise StoreError(f"Unable to write {path}: {exc}") from exc
        self.logger.debug("source_store.write key=%s", key)

    def read_last_source(self) -> str | None:
        """Return the last saved sheet address, if any."""

        return self.read(LAST_SOURCE_KEY)

    def save_last_source(self, address: str) -> None:
        """Remember ``address`` as the most recent successfully parsed link."""

        self.write(LAST_SOURCE_KEY, address)

    def healthcheck(self) -> PersistHealth:
        issues: list[str] = []
        store_dir = state_layout(self._root).store
        writable = os.access(store_dir, os.W_OK)
        if not writable:
            issues.append(f"store directory not writable: {store_dir}")
        return PersistHealth(writable_paths={str(store_dir): writable}, issues=issues)


__all__ = ["SourceStore", "LAST_SOURCE_KEY", "STATE_FILENAME"]
