from __future__ import annotations

from typing import Dict, Optional

from jobmate.matching.scoring import clamp01
from jobmate.models import ReputationRecord

NEUTRAL_REPUTATION = 0.5

CRITERIA_WEIGHTS: Dict[str, float] = {
    "overall": 0.30,
    "reliability": 0.25,
    "communication": 0.20,
    "fairness": 0.15,
    "respectfulness": 0.10,
}

# Number of ratings at which a record is fully trusted.
FULL_CONFIDENCE_RATINGS = 10


def confidence_factor(total_ratings: int) -> float:
    return min(1.0, max(0, total_ratings) / FULL_CONFIDENCE_RATINGS)


def weighted_average(record: ReputationRecord) -> Optional[float]:
    """
    Weighted mean of the present criteria on a 0-1 scale (1 star -> 0, 5 stars -> 1).
    Weights are renormalized over present criteria; None when nothing is rated.
    """
    present = record.criteria()
    if not present:
        return None
    total_weight = sum(CRITERIA_WEIGHTS[name] for name in present)
    weighted = sum(CRITERIA_WEIGHTS[name] * (rating - 1.0) / 4.0 for name, rating in present.items())
    return weighted / total_weight


def reputation_score(record: Optional[ReputationRecord]) -> float:
    """
    Confidence-weighted reputation in [0, 1].

    Sparse records are pulled toward neutral: the distance from 0.5 is scaled by
    min(1, total_ratings / 10). A missing record is exactly neutral.
    """
    if record is None:
        return NEUTRAL_REPUTATION
    avg = weighted_average(record)
    if avg is None:
        return NEUTRAL_REPUTATION
    score = NEUTRAL_REPUTATION + (avg - NEUTRAL_REPUTATION) * confidence_factor(record.total_ratings)
    return clamp01(score)
