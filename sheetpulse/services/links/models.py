"""Descriptors produced by the link parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Union

PreviewKind = Literal[
    "file",
    "document",
    "presentation",
    "form",
    "report",
    "script",
    "drive",
    "published_sheet",
    "other",
]


@dataclass(frozen=True, slots=True)
class SourceDescriptor:
    """A data-capable spreadsheet link.

    ``sub_sheet_id`` (the ``gid``) wins over ``tab_name`` when both are set;
    when neither is set the export endpoint serves its default tab.
    """

    document_id: str
    sub_sheet_id: str | None = None
    tab_name: str | None = None
    source_url: str = ""
    kind: Literal["sheet"] = "sheet"

    def __post_init__(self) -> None:
        if not self.document_id:
            raise ValueError("document_id must not be empty")


@dataclass(frozen=True, slots=True)
class PreviewDescriptor:
    """A non-tabular link that can only be previewed."""

    kind: PreviewKind
    preview_url: str
    source_url: str


ParsedLink = Union[SourceDescriptor, PreviewDescriptor]


__all__ = ["SourceDescriptor", "PreviewDescriptor", "ParsedLink", "PreviewKind"]
