"""Keyword-based RAG status bucketing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from sheetpulse.config import StatusKeywords
from sheetpulse.services.normalizer.models import PLACEHOLDER


class StatusBucket(str, Enum):
    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    DELAYED = "delayed"
    UNKNOWN = "unknown"


SHORTHAND: dict[str, StatusBucket] = {
    "g": StatusBucket.ON_TRACK,
    "a": StatusBucket.AT_RISK,
    "r": StatusBucket.DELAYED,
}


@dataclass(frozen=True, slots=True)
class StatusClassifier:
    """Classify free-text status values; pure and total."""

    keywords: StatusKeywords = field(default_factory=StatusKeywords)

    def classify(self, status: object) -> StatusBucket:
        text = "" if status is None else str(status).strip().casefold()
        if not text or text == PLACEHOLDER:
            return StatusBucket.UNKNOWN
        # priority: on-track, then at-risk, then delayed
        ordered = (
            (StatusBucket.ON_TRACK, self.keywords.on_track),
            (StatusBucket.AT_RISK, self.keywords.at_risk),
            (StatusBucket.DELAYED, self.keywords.delayed),
        )
        for bucket, terms in ordered:
            if any(term in text for term in terms):
                return bucket
        return SHORTHAND.get(text, StatusBucket.UNKNOWN)


DEFAULT_CLASSIFIER = StatusClassifier()


def classify_status(status: object, classifier: StatusClassifier | None = None) -> StatusBucket:
    return (classifier or DEFAULT_CLASSIFIER).classify(status)


__all__ = ["DEFAULT_CLASSIFIER", "SHORTHAND", "StatusBucket", "StatusClassifier", "classify_status"]
