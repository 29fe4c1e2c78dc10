"""
Persistence facade exposing the file-backed stores.
"""

from .stores.base_store import PersistHealth, StoreError
from .stores.source_store import LAST_SOURCE_KEY, SourceStore

__all__ = [
    "SourceStore",
    "LAST_SOURCE_KEY",
    "PersistHealth",
    "StoreError",
]
