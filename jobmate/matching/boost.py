"""
Premium boost policy and access gating.

Boosts scale only the aggregate score. Dimension scores are copied untouched
and base_score keeps the unboosted value.
"""
from __future__ import annotations

from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Mapping, Optional

from jobmate.config import DEFAULT_BOOST_TABLE
from jobmate.matching.types import MatchResult
from jobmate.models import Candidate, PremiumTier, TierLevel

FEATURED_EXPLANATION = "Your profile is featured in search results and match listings."


def boost_multiplier(tier: PremiumTier, table: Mapping[TierLevel, float] = DEFAULT_BOOST_TABLE) -> float:
    """Multiplier for a tier; an explicit boost_factor wins. Never below 1."""
    if tier.boost_factor is not None:
        return max(1.0, float(tier.boost_factor))
    level = TierLevel(tier.level) if tier.level is not None else TierLevel.BASIC
    return max(1.0, float(table[level]))


def _boosted_score(score: int, multiplier: float) -> int:
    # Decimal: 50 * 1.15 -> 57.5 -> 58
    raw = (Decimal(score) * Decimal(str(multiplier))).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return min(100, max(score, int(raw)))


def apply_boost(
        result: MatchResult,
        tier: Optional[PremiumTier],
        table: Mapping[TierLevel, float] = DEFAULT_BOOST_TABLE,
) -> MatchResult:
    """
    Return a new MatchResult with the tier multiplier applied to the overall score.
    Without an active tier the result comes back unchanged.
    """
    if tier is None or not tier.active:
        return result

    multiplier = boost_multiplier(tier, table)
    percent = int(((Decimal(str(multiplier)) - 1) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    label = f"Premium {tier.level.value} status" if tier.level is not None else "Premium status"

    explanations = list(result.explanations)
    explanations.append(f"{label} applied a {percent}% boost to your match score.")
    if tier.featured:
        explanations.append(FEATURED_EXPLANATION)

    return replace(
        result,
        score=_boosted_score(result.score, multiplier),
        dimensions=tuple(result.dimensions),
        explanations=tuple(explanations),
        base_score=result.base_score,
    )


def can_access_candidate(candidate: Candidate, tier: Optional[PremiumTier]) -> bool:
    """Verified-only actors never see candidates without verified payment."""
    if tier is not None and tier.verified_only and not candidate.verified_payment:
        return False
    return True


def premium_badges(tier: Optional[PremiumTier]) -> List[str]:
    if tier is None or not tier.active:
        return []
    badges = ["premium"]
    if tier.level == TierLevel.PRO:
        badges.append("verified")
    elif tier.level == TierLevel.ELITE:
        badges.extend(["verified", "top-rated"])
    return badges
