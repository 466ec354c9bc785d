from __future__ import annotations

import math
from datetime import datetime
from typing import AbstractSet, Dict, Optional, Tuple

from jobmate.core.geo import haversine_km
from jobmate.core.text_processing import normalize_skills
from jobmate.models import BudgetRange, Coordinate, ResponseTime, UrgencyLevel

NEUTRAL_SCORE = 50.0
MAX_SCORE = 100.0

# Score for zero overlap against a non-empty requirement.
SKILL_MATCH_FLOOR = 10.0


def clamp01(x: float) -> float:
    return 0.0 if x < 0.0 else (1.0 if x > 1.0 else x)


def clamp100(x: float) -> float:
    return 0.0 if x < 0.0 else (MAX_SCORE if x > MAX_SCORE else x)


def skill_match_score(required: AbstractSet[str], possessed: AbstractSet[str]) -> Tuple[float, Dict[str, list]]:
    """
    Fraction of required skills the actor has, scaled onto [SKILL_MATCH_FLOOR, 100].
    Exact match after case/whitespace normalization; nothing required => full match.
    Returns score and a details dict for explanations.
    """
    req = normalize_skills(required)
    have = normalize_skills(possessed)
    if not req:
        return MAX_SCORE, {"matched": [], "missing": []}

    matched = req & have
    fraction = len(matched) / len(req)
    score = SKILL_MATCH_FLOOR + (MAX_SCORE - SKILL_MATCH_FLOOR) * fraction
    return clamp100(score), {"matched": sorted(matched), "missing": sorted(req - have)}


def location_proximity_score(
        candidate_loc: Optional[Coordinate],
        actor_loc: Optional[Coordinate],
        decay_km: float,
) -> Tuple[float, Optional[float]]:
    """
    Exponential decay with distance: 100 at 0 km, strictly decreasing after.
    Missing coordinates on either side => neutral (50), distance None.
    """
    if candidate_loc is None or actor_loc is None:
        return NEUTRAL_SCORE, None
    distance = haversine_km(candidate_loc, actor_loc)
    return clamp100(MAX_SCORE * math.exp(-distance / decay_km)), distance


def price_match_score(budget: Optional[BudgetRange], rate: Optional[float]) -> float:
    """
    Rules:
    - Missing budget or rate => neutral (50)
    - Rate at or below the budget ceiling => 100 (cheaper is never penalized)
    - Above the ceiling: linear decay, reaching 0 at twice the ceiling
    - A zero budget scores 0 for any positive rate
    """
    if budget is None or budget.is_empty:
        return NEUTRAL_SCORE
    if rate is None or rate <= 0:
        return NEUTRAL_SCORE

    ceiling = budget.ceiling
    if ceiling is None:
        return NEUTRAL_SCORE
    if ceiling <= 0:
        return 0.0

    if rate <= ceiling:
        return MAX_SCORE

    over_ratio = (rate - ceiling) / ceiling
    return clamp100(MAX_SCORE * (1.0 - over_ratio))


# Rows: job urgency. Columns: specialist response class.
_URGENCY_TABLE: Dict[UrgencyLevel, Dict[ResponseTime, float]] = {
    UrgencyLevel.EMERGENCY: {ResponseTime.FAST: 100.0, ResponseTime.NORMAL: 60.0, ResponseTime.SLOW: 20.0},
    UrgencyLevel.HIGH: {ResponseTime.FAST: 95.0, ResponseTime.NORMAL: 70.0, ResponseTime.SLOW: 35.0},
    UrgencyLevel.NORMAL: {ResponseTime.FAST: 80.0, ResponseTime.NORMAL: 80.0, ResponseTime.SLOW: 65.0},
    UrgencyLevel.LOW: {ResponseTime.FAST: 70.0, ResponseTime.NORMAL: 75.0, ResponseTime.SLOW: 80.0},
}


def urgency_compatibility_score(
        urgency: Optional[UrgencyLevel],
        response_time: Optional[ResponseTime],
) -> float:
    if urgency is None or response_time is None:
        return NEUTRAL_SCORE
    return _URGENCY_TABLE[UrgencyLevel(urgency)][ResponseTime(response_time)]


def availability_match_score(
        available_weekdays: Optional[AbstractSet[int]],
        scheduled_for: Optional[datetime],
) -> float:
    """
    - No availability on the profile => neutral (50)
    - Availability but the job has no date => 80 (likely workable)
    - Job date on an available weekday => 100, otherwise 20
    """
    if not available_weekdays:
        return NEUTRAL_SCORE
    if scheduled_for is None:
        return 80.0
    return MAX_SCORE if scheduled_for.weekday() in available_weekdays else 20.0
