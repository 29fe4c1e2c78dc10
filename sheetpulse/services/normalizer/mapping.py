"""Header alias table and row normalization."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from sheetpulse.core.errors import ConfigError
from sheetpulse.services.feed.decoder import normalize_header
from sheetpulse.services.feed.models import RawRow

from .cleaning import is_missing, parse_progress, sanitize
from .models import CANONICAL_FIELDS, PLACEHOLDER, ProjectRecord

# Canonical field -> accepted header keys, first non-empty match wins.
# "column N" keys are the positional names given to unlabeled columns.
DEFAULT_ALIASES: Dict[str, tuple[str, ...]] = {
    "project": ("project", "project name", "name", "column 1"),
    "owner": ("owner", "project owner", "pm", "column 2"),
    "phase": ("phase", "stage", "column 3"),
    "progress": ("progress", "progress %", "% complete", "completion", "column 4"),
    "rag_status": ("rag", "status", "rag status", "health", "column 5"),
    "milestone": ("next milestone", "milestone", "column 6"),
    "target_date": ("target date", "targetdate", "due date", "column 7"),
    "last_update": ("last update", "lastupdate", "last updated", "updated", "column 8"),
}


class MappingConfig(BaseModel):
    """Alias extensions parsed from a mapping YAML file."""

    model_config = ConfigDict(extra="forbid")

    input_columns: Dict[str, List[str]] = Field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AliasTable:
    """Ordered static lookup from canonical field to header aliases."""

    aliases: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: dict(DEFAULT_ALIASES))

    def candidates(self, canonical: str) -> tuple[str, ...]:
        return self.aliases.get(canonical, ())

    def lookup(self, row: RawRow, canonical: str) -> str | None:
        for key in self.candidates(canonical):
            value = row.get(key)
            if not is_missing(value):
                return value
        return None

    def extended(self, extra: Mapping[str, Iterable[str]]) -> "AliasTable":
        """Return a copy with ``extra`` aliases appended after the built-in ones."""

        merged = {name: tuple(keys) for name, keys in self.aliases.items()}
        for canonical, keys in extra.items():
            if canonical not in CANONICAL_FIELDS:
                raise ConfigError(f"Unknown canonical field in mapping: {canonical}")
            current = list(merged.get(canonical, ()))
            for key in keys:
                normalized = normalize_header(key)
                if normalized and normalized not in current:
                    current.append(normalized)
            merged[canonical] = tuple(current)
        return AliasTable(aliases=merged)


DEFAULT_ALIAS_TABLE = AliasTable()


@dataclass(slots=True)
class MappingReport:
    """Which canonical fields a header set can satisfy."""

    matched_columns: Dict[str, str]
    missing_columns: List[str]
    unmatched_columns: List[str]


def load_mapping_config(mapping_path: str | Path) -> MappingConfig:
    """Load alias extensions from YAML."""

    path = Path(mapping_path)
    if not path.exists():
        raise ConfigError(f"mapping file not found: {path}")
    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.load(fh) or {}
        return MappingConfig.model_validate(data)
    except (YAMLError, ValidationError) as exc:
        raise ConfigError(f"invalid mapping file {path}: {exc}") from exc


def build_alias_table(mapping_path: str | Path | None = None) -> AliasTable:
    if mapping_path is None:
        return DEFAULT_ALIAS_TABLE
    return DEFAULT_ALIAS_TABLE.extended(load_mapping_config(mapping_path).input_columns)


def normalize_row(row: RawRow, table: AliasTable = DEFAULT_ALIAS_TABLE) -> ProjectRecord:
    """Map one header-keyed row onto the canonical record."""

    return ProjectRecord(
        project=sanitize(table.lookup(row, "project")),
        owner=sanitize(table.lookup(row, "owner")),
        phase=sanitize(table.lookup(row, "phase")),
        progress=parse_progress(table.lookup(row, "progress")),
        rag_status=sanitize(table.lookup(row, "rag_status")),
        milestone=sanitize(table.lookup(row, "milestone")),
        target_date=sanitize(table.lookup(row, "target_date")),
        last_update=sanitize(table.lookup(row, "last_update")),
    )


def normalize_rows(rows: Iterable[RawRow], table: AliasTable = DEFAULT_ALIAS_TABLE) -> list[ProjectRecord]:
    """Normalize ``rows`` and drop records without a project identity."""

    records = (normalize_row(row, table) for row in rows)
    return [record for record in records if record.project != PLACEHOLDER]


def describe_mapping(keys: Iterable[str], table: AliasTable = DEFAULT_ALIAS_TABLE) -> MappingReport:
    available = list(keys)
    matched: Dict[str, str] = {}
    missing: List[str] = []
    for canonical in CANONICAL_FIELDS:
        found = next((key for key in table.candidates(canonical) if key in available), None)
        if found is None:
            missing.append(canonical)
        else:
            matched[canonical] = found
    used = set(matched.values())
    unmatched = [key for key in available if key not in used]
    return MappingReport(matched_columns=matched, missing_columns=missing, unmatched_columns=unmatched)


__all__ = [
    "AliasTable",
    "DEFAULT_ALIASES",
    "DEFAULT_ALIAS_TABLE",
    "MappingConfig",
    "MappingReport",
    "build_alias_table",
    "describe_mapping",
    "load_mapping_config",
    "normalize_row",
    "normalize_rows",
]
