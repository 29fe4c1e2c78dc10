"""Filter/search service package."""

from .engine import CATEGORICAL_FIELDS, FilterOptions, FilterState, apply_filters, filter_options

__all__ = [
    "CATEGORICAL_FIELDS",
    "FilterOptions",
    "FilterState",
    "apply_filters",
    "filter_options",
]
