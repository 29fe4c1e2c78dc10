"""Decode the script-wrapped JSON body returned by the gviz endpoint."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Mapping

from sheetpulse.core.errors import MalformedPayload

from .models import ColumnDescriptor, DecodedTable, RawRow, ValueType

LOGGER = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def normalize_header(label: object) -> str:
    """Case-fold and collapse whitespace in a header label."""

    return _WHITESPACE.sub(" ", str(label if label is not None else "").strip()).casefold()


def extract_payload(text: str) -> dict[str, Any]:
    """Parse the JSON object between the first ``{`` and the last ``}``."""

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise MalformedPayload("Invalid Google Visualization response body")
    try:
        payload = json.loads(text[start : end + 1])
    except ValueError as exc:
        raise MalformedPayload(f"Response body is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise MalformedPayload("Response body is not a JSON object")
    if str(payload.get("status", "")).lower() == "error":
        raise MalformedPayload(f"Spreadsheet service reported an error: {_error_reason(payload)}")
    return payload


def decode_table(payload: Mapping[str, Any]) -> DecodedTable:
    """Turn a parsed gviz payload into ordered columns and header-keyed rows."""

    table = payload.get("table") or {}
    if not isinstance(table, Mapping):
        raise MalformedPayload("Payload 'table' is not an object")
    raw_cols = table.get("cols") or []
    raw_rows = table.get("rows") or []
    if not isinstance(raw_cols, list) or not isinstance(raw_rows, list):
        raise MalformedPayload("Payload table columns/rows must be arrays")

    positions: list[tuple[int, ColumnDescriptor]] = []
    for index, col in enumerate(raw_cols):
        col = col if isinstance(col, Mapping) else {}
        label = str(col.get("label") or "").strip()
        key = normalize_header(label) or f"column {index + 1}"
        positions.append((index, ColumnDescriptor(key=key, label=label, value_type=ValueType.from_feed(col.get("type")))))

    columns = _unique_columns(positions)

    rows: list[RawRow] = []
    for raw in raw_rows:
        cells = raw.get("c") if isinstance(raw, Mapping) else None
        cells = cells if isinstance(cells, list) else []
        row: RawRow = {}
        for index, column in positions:
            cell = cells[index] if index < len(cells) else None
            row[column.key] = cell_text(cell)
        rows.append(row)

    return DecodedTable(columns=columns, rows=rows)


def decode_text(text: str) -> DecodedTable:
    """``extract_payload`` followed by ``decode_table``."""

    return decode_table(extract_payload(text))


def cell_text(cell: object) -> str:
    """Prefer the non-empty formatted value, then the raw value, then ``""``."""

    if not isinstance(cell, Mapping):
        return ""
    formatted = cell.get("f")
    if formatted is not None and str(formatted).strip():
        return str(formatted)
    return _raw_text(cell.get("v"))


def _raw_text(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _unique_columns(positions: list[tuple[int, ColumnDescriptor]]) -> list[ColumnDescriptor]:
    last_index: dict[str, int] = {}
    for index, column in positions:
        if column.key in last_index:
            LOGGER.warning("feed.decode duplicate_header key=%s position=%d", column.key, index + 1)
        last_index[column.key] = index
    return [column for index, column in positions if last_index[column.key] == index]


def _error_reason(payload: Mapping[str, Any]) -> str:
    errors = payload.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], Mapping):
        first = errors[0]
        return str(first.get("detailed_message") or first.get("message") or first.get("reason") or "unknown")
    return "unknown"


__all__ = ["cell_text", "decode_table", "decode_text", "extract_payload", "normalize_header"]
