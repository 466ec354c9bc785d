from __future__ import annotations

from typing import Dict, List, Optional

from loguru import logger

from jobmate.config import (
    AVAILABILITY,
    LOCATION,
    PRICE,
    REPUTATION,
    SKILLS,
    URGENCY,
    EngineConfig,
    validate_weights,
)
from jobmate.exceptions import CandidateValidationError
from jobmate.matching.aggregate import aggregate
from jobmate.matching.boost import apply_boost, can_access_candidate
from jobmate.matching.explain import describe_location, describe_skills, explain_match
from jobmate.matching.reputation import reputation_score
from jobmate.matching.scoring import (
    availability_match_score,
    location_proximity_score,
    price_match_score,
    skill_match_score,
    urgency_compatibility_score,
)
from jobmate.matching.types import DimensionScore, MatchResult
from jobmate.models import ActorProfile, Candidate
from jobmate.preferences import MatchPreferences


class MatchEngine:
    """
    Scores one (candidate, actor) pair at a time.

    Construct once with an EngineConfig and share it: the engine holds no
    mutable state, so score() is safe to call from any thread.
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()
        logger.debug(
            "Match engine ready: weights={} boost_table={}",
            self.config.weights,
            {t.value: m for t, m in self.config.boost_table.items()},
        )

    def effective_weights(self, actor: ActorProfile, preferences: MatchPreferences) -> Dict[str, float]:
        weights = dict(self.config.weights)
        if actor.weights:
            weights.update(validate_weights({k.strip().lower(): float(v) for k, v in actor.weights.items()}))
        return preferences.adjust_weights(weights)

    def decay_km(self, preferences: MatchPreferences) -> float:
        if preferences.max_distance_km:
            return preferences.max_distance_km / 2.0
        return self.config.location_decay_km

    def score_base(
            self,
            candidate: Candidate,
            actor: ActorProfile,
            preferences: Optional[MatchPreferences] = None,
    ) -> MatchResult:
        """Unboosted result: every dimension scored, aggregated and explained."""
        if not candidate.candidate_id:
            raise CandidateValidationError("", "candidate has no identifier")

        prefs = preferences or MatchPreferences()
        w = self.effective_weights(actor, prefs)

        s_score, s_details = skill_match_score(candidate.required_skills, actor.skills)
        l_score, distance = location_proximity_score(candidate.location, actor.location, self.decay_km(prefs))
        rep = reputation_score(candidate.client_reputation)
        p_score = price_match_score(candidate.budget, actor.hourly_rate)
        a_score = availability_match_score(actor.available_weekdays, candidate.scheduled_for)
        u_score = urgency_compatibility_score(candidate.urgency, actor.response_time)

        dims: List[DimensionScore] = [
            DimensionScore(SKILLS, s_score, w[SKILLS], describe_skills(s_details["matched"], s_details["missing"])),
            DimensionScore(LOCATION, l_score, w[LOCATION], describe_location(distance)),
            DimensionScore(
                REPUTATION,
                rep * 100.0,
                w[REPUTATION],
                "No client reputation yet" if candidate.client_reputation is None
                else f"Client reputation from {candidate.client_reputation.total_ratings} ratings",
            ),
            DimensionScore(PRICE, p_score, w[PRICE], _describe_price(candidate, actor)),
            DimensionScore(AVAILABILITY, a_score, w[AVAILABILITY], _describe_availability(actor, candidate)),
            DimensionScore(URGENCY, u_score, w[URGENCY], _describe_urgency(candidate, actor)),
        ]

        explanations = explain_match(
            candidate,
            skills=s_score,
            location=l_score,
            distance_km=distance,
            price=p_score,
            urgency=u_score,
            reputation=rep,
        )
        return aggregate(dims, explanations)

    def score(
            self,
            candidate: Candidate,
            actor: ActorProfile,
            preferences: Optional[MatchPreferences] = None,
    ) -> MatchResult:
        """Base result with the actor's premium boost applied."""
        base = self.score_base(candidate, actor, preferences)
        return apply_boost(base, actor.premium, self.config.boost_table)

    def can_access(self, candidate: Candidate, actor: ActorProfile) -> bool:
        return can_access_candidate(candidate, actor.premium)


def _describe_price(candidate: Candidate, actor: ActorProfile) -> str:
    budget = candidate.budget
    if budget is None or budget.is_empty:
        return "No budget published"
    if actor.hourly_rate is None:
        return "No rate on profile"
    return f"Rate {actor.hourly_rate:g} vs budget up to {budget.ceiling:g}"


def _describe_availability(actor: ActorProfile, candidate: Candidate) -> str:
    if not actor.available_weekdays:
        return "No availability on profile"
    if candidate.scheduled_for is None:
        return "Job has no scheduled date"
    return candidate.scheduled_for.strftime("Scheduled for %A")


def _describe_urgency(candidate: Candidate, actor: ActorProfile) -> str:
    if candidate.urgency is None or actor.response_time is None:
        return "Urgency or response time unknown"
    return f"{candidate.urgency.value} urgency, {actor.response_time.value} response"
