"""
Weighted aggregation of dimension scores into a single 0-100 match score.

Weights need not sum to 1; the mean is normalized by their total. When every
weight is zero the unweighted mean is used instead.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from jobmate.exceptions import ConfigurationError
from jobmate.matching.scoring import clamp100
from jobmate.matching.types import CompatibilityDimension, DimensionScore, MatchResult


def round_half_up(value: float) -> int:
    """Round .5 away from zero (not banker's rounding). Float noise below 1e-9 is ignored."""
    return int(Decimal(str(round(value, 9))).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def aggregate(dimension_scores: Sequence[DimensionScore], explanations: Iterable[str] = ()) -> MatchResult:
    dims = list(dimension_scores)
    if not dims:
        return MatchResult(score=0, dimensions=(), explanations=tuple(explanations))

    negative = [d.name for d in dims if d.weight < 0]
    if negative:
        raise ConfigurationError(f"Dimension weights cannot be negative: {', '.join(negative)}")

    total_weight = sum(d.weight for d in dims)
    if total_weight > 0:
        mean = sum(clamp100(d.score) * d.weight for d in dims) / total_weight
    else:
        mean = sum(clamp100(d.score) for d in dims) / len(dims)

    score = int(clamp100(round_half_up(mean)))
    return MatchResult(
        score=score,
        dimensions=tuple(
            CompatibilityDimension(name=d.name, score=clamp100(d.score), weight=d.weight, description=d.description)
            for d in dims
        ),
        explanations=tuple(explanations),
    )
