"""Decoded table structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict


class ValueType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    UNKNOWN = "unknown"

    @classmethod
    def from_feed(cls, raw: object) -> "ValueType":
        """Map a gviz column type onto the reduced value-type set."""

        text = str(raw or "").strip().lower()
        if text in {"date", "datetime"}:
            return cls.DATE
        try:
            return cls(text)
        except ValueError:
            return cls.UNKNOWN


RawRow = Dict[str, str]


@dataclass(frozen=True, slots=True)
class ColumnDescriptor:
    key: str
    label: str
    value_type: ValueType = ValueType.UNKNOWN


@dataclass(slots=True)
class DecodedTable:
    """Ordered columns and header-keyed rows from one decode."""

    columns: list[ColumnDescriptor] = field(default_factory=list)
    rows: list[RawRow] = field(default_factory=list)

    @property
    def keys(self) -> list[str]:
        return [column.key for column in self.columns]


__all__ = ["ColumnDescriptor", "DecodedTable", "RawRow", "ValueType"]
