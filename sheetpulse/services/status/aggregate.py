"""Portfolio KPI aggregation."""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass
from typing import Iterable

from sheetpulse.services.normalizer.models import ProjectRecord

from .classifier import StatusBucket, StatusClassifier, classify_status


@dataclass(frozen=True, slots=True)
class KpiSnapshot:
    """Counts per status bucket; unclassified rows only count toward ``total``."""

    total: int = 0
    on_track: int = 0
    at_risk: int = 0
    delayed: int = 0

    @property
    def unknown(self) -> int:
        return self.total - self.on_track - self.at_risk - self.delayed

    def formatted(self) -> dict[str, str]:
        """Two-digit zero-padded counts for dashboard tiles."""

        return {name: str(value).zfill(2) for name, value in asdict(self).items()}

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


EMPTY_KPIS = KpiSnapshot()


def compute_kpis(records: Iterable[ProjectRecord], classifier: StatusClassifier | None = None) -> KpiSnapshot:
    """Classify every record once and count the buckets."""

    counts: Counter[StatusBucket] = Counter()
    total = 0
    for record in records:
        total += 1
        counts[classify_status(record.rag_status, classifier)] += 1
    return KpiSnapshot(
        total=total,
        on_track=counts[StatusBucket.ON_TRACK],
        at_risk=counts[StatusBucket.AT_RISK],
        delayed=counts[StatusBucket.DELAYED],
    )


__all__ = ["EMPTY_KPIS", "KpiSnapshot", "compute_kpis"]
