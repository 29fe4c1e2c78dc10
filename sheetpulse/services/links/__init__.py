"""Link parsing service package."""

from .models import ParsedLink, PreviewDescriptor, SourceDescriptor
from .parser import build_sheet_view_url, parse_link

__all__ = [
    "ParsedLink",
    "PreviewDescriptor",
    "SourceDescriptor",
    "build_sheet_view_url",
    "parse_link",
]
