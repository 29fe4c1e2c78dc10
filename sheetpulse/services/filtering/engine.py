"""Categorical filters and free-text search over project records."""

from __future__ import annotations

import locale
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from sheetpulse.services.normalizer.models import PLACEHOLDER, ProjectRecord

CATEGORICAL_FIELDS: tuple[str, ...] = ("project", "owner", "phase", "milestone")
SEARCHABLE_FIELDS: tuple[str, ...] = ("project", "owner", "phase", "rag_status", "milestone", "target_date")


@dataclass(frozen=True, slots=True)
class FilterState:
    """Current categorical selections plus the free-text query."""

    selections: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    query: str = ""

    def __post_init__(self) -> None:
        cleaned = {}
        for name, value in dict(self.selections).items():
            _check_field(name)
            text = (value or "").strip()
            if text:
                cleaned[name] = text
        object.__setattr__(self, "selections", MappingProxyType(cleaned))
        object.__setattr__(self, "query", (self.query or "").strip())

    @property
    def is_empty(self) -> bool:
        return not self.selections and not self.query

    def selection(self, name: str) -> str:
        _check_field(name)
        return self.selections.get(name, "")

    def with_selection(self, name: str, value: str | None) -> "FilterState":
        """Return a new state with ``name`` set (or cleared when ``value`` is empty)."""

        _check_field(name)
        updated = dict(self.selections)
        updated[name] = value or ""
        return replace(self, selections=updated)

    def with_query(self, query: str | None) -> "FilterState":
        return replace(self, query=query or "")

    def cleared(self) -> "FilterState":
        return FilterState()


@dataclass(frozen=True, slots=True)
class FilterOptions:
    """Distinct values offered for one categorical filter."""

    field: str
    options: tuple[str, ...]
    selected: str = ""


def apply_filters(records: Sequence[ProjectRecord], state: FilterState) -> list[ProjectRecord]:
    """Return the ordered subsequence of ``records`` matching every active filter."""

    needle = state.query.casefold()
    visible: list[ProjectRecord] = []
    for record in records:
        if any(getattr(record, name) != value for name, value in state.selections.items()):
            continue
        if needle and not any(needle in getattr(record, name).casefold() for name in SEARCHABLE_FIELDS):
            continue
        visible.append(record)
    return visible


def filter_options(
    records: Iterable[ProjectRecord],
    state: FilterState | None = None,
    fields: Sequence[str] = CATEGORICAL_FIELDS,
) -> dict[str, FilterOptions]:
    """Option lists per categorical field, always derived from the unfiltered records."""

    state = state or FilterState()
    records = list(records)
    result: dict[str, FilterOptions] = {}
    for name in fields:
        _check_field(name)
        values = {getattr(record, name) for record in records}
        values.discard(PLACEHOLDER)
        result[name] = FilterOptions(field=name, options=tuple(sort_options(values)), selected=state.selection(name))
    return result


def sort_options(values: Iterable[str]) -> list[str]:
    """Sort with the active locale's collation; ties fall back to code-point order."""

    return sorted(values, key=lambda value: (locale.strxfrm(value), value))


def _check_field(name: str) -> None:
    if name not in CATEGORICAL_FIELDS:
        raise ValueError(f"Unknown filter field: {name}")


__all__ = [
    "CATEGORICAL_FIELDS",
    "SEARCHABLE_FIELDS",
    "FilterOptions",
    "FilterState",
    "apply_filters",
    "filter_options",
    "sort_options",
]
