"""Row normalization service package."""

from .mapping import AliasTable, build_alias_table, describe_mapping, normalize_row, normalize_rows
from .models import PLACEHOLDER, ProjectRecord

__all__ = [
    "AliasTable",
    "PLACEHOLDER",
    "ProjectRecord",
    "build_alias_table",
    "describe_mapping",
    "normalize_row",
    "normalize_rows",
]
