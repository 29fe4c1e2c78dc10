"""Status classification and KPI aggregation."""

from .aggregate import EMPTY_KPIS, KpiSnapshot, compute_kpis
from .classifier import StatusBucket, StatusClassifier, classify_status

__all__ = [
    "EMPTY_KPIS",
    "KpiSnapshot",
    "StatusBucket",
    "StatusClassifier",
    "classify_status",
    "compute_kpis",
]
