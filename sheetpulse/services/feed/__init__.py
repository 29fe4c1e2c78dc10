"""Feed fetching and decoding service package."""

from .decoder import decode_table, decode_text, extract_payload
from .http import FeedFetcher, build_export_url
from .models import ColumnDescriptor, DecodedTable, RawRow, ValueType

__all__ = [
    "ColumnDescriptor",
    "DecodedTable",
    "FeedFetcher",
    "RawRow",
    "ValueType",
    "build_export_url",
    "decode_table",
    "decode_text",
    "extract_payload",
]
