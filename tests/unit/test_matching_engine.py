from decimal import ROUND_HALF_UP, Decimal

import pytest

from jobmate.config import LOCATION, PRICE, SKILLS, URGENCY, EngineConfig
from jobmate.exceptions import CandidateValidationError, ConfigurationError
from jobmate.matching.engine import MatchEngine
from jobmate.models import ActorProfile, BudgetRange, Candidate, Coordinate, PremiumTier, ReputationRecord, TierLevel
from jobmate.preferences import MatchPreferences

NYC = Coordinate(lat=40.7128, lng=-74.0060)
CHICAGO = Coordinate(lat=41.8781, lng=-87.6298)


def test_cleaning_specialist_next_door_scores_high(engine, make_candidate, make_actor):
    result = engine.score(make_candidate(urgency="normal"), make_actor())
    assert result.score >= 80
    assert result.dimension(SKILLS).score == 100.0
    assert result.dimension(LOCATION).score == 100.0
    assert result.dimension(PRICE).score == 100.0
    assert result.dimension(URGENCY).score == 80.0
    assert len(result.dimensions) == 6


def test_incomplete_candidate_scores_without_raising(engine):
    candidate = Candidate(candidate_id="sparse", location=NYC, budget=BudgetRange.fixed(100))
    result = engine.score(candidate, ActorProfile(actor_id="nobody"))
    assert 0 <= result.score <= 100
    assert result.explanations


def test_elite_boost_adds_fifteen_percent(engine, make_candidate, make_actor):
    candidate = make_candidate(budget=BudgetRange.fixed(30), urgency="emergency")
    actor = make_actor(premium=PremiumTier(level=TierLevel.ELITE))

    base = engine.score_base(candidate, actor)
    boosted = engine.score(candidate, actor)

    expected = int((Decimal(base.score) * Decimal("1.15")).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    assert boosted.score == min(100, expected)
    assert boosted.base_score == base.score
    assert any("elite" in e and "15%" in e for e in boosted.explanations)


def test_scoring_is_deterministic(engine, make_candidate, make_actor):
    c, a = make_candidate(), make_actor()
    assert engine.score(c, a) == engine.score(c, a)


def test_closer_candidate_scores_higher(engine, make_candidate, make_actor):
    actor = make_actor()
    near = engine.score(make_candidate("near", location=NYC), actor)
    far = engine.score(make_candidate("far", location=CHICAGO), actor)
    assert near.score > far.score


def test_more_skill_overlap_scores_higher(engine, make_candidate, make_actor):
    actor = make_actor(skills=frozenset({"plumbing", "tiling"}))
    both = engine.score(make_candidate("both", required_skills=frozenset({"plumbing", "tiling"})), actor)
    one = engine.score(make_candidate("one", required_skills=frozenset({"plumbing", "painting"})), actor)
    none = engine.score(make_candidate("none", required_skills=frozenset({"roofing"})), actor)
    assert both.score > one.score > none.score


def test_price_ordering(engine, make_candidate, make_actor):
    candidate = make_candidate(budget=BudgetRange.fixed(100))
    matching = engine.score(candidate, make_actor(hourly_rate=100)).score
    low = engine.score(candidate, make_actor(hourly_rate=50)).score
    high = engine.score(candidate, make_actor(hourly_rate=200)).score
    assert matching >= low > high


def test_urgent_job_prefers_fast_responder(engine, make_candidate, make_actor):
    candidate = make_candidate(urgency="emergency")
    fast = engine.score(candidate, make_actor(response_time="fast")).score
    slow = engine.score(candidate, make_actor(response_time="slow")).score
    assert fast > slow


def test_good_client_reputation_raises_score(engine, make_candidate, make_actor):
    actor = make_actor()
    good = ReputationRecord(overall=5, reliability=5, communication=5, total_ratings=30)
    bad = ReputationRecord(overall=1, reliability=1, communication=1, total_ratings=30)
    assert engine.score(make_candidate(client_reputation=good), actor).score > \
        engine.score(make_candidate(client_reputation=bad), actor).score


def test_candidate_without_identifier_is_rejected(engine, make_actor):
    with pytest.raises(CandidateValidationError):
        engine.score(Candidate(candidate_id="  "), make_actor())


def test_effective_weights_apply_actor_overrides_and_preferences(engine, make_actor):
    actor = make_actor(weights={"Skills": 0.5})
    w = engine.effective_weights(actor, MatchPreferences(prioritize_location=True))
    assert w[SKILLS] == pytest.approx(0.45)
    assert w[LOCATION] == pytest.approx(0.30)
    assert w[PRICE] == pytest.approx(0.10)


def test_bad_actor_weights_are_configuration_errors(engine, make_candidate, make_actor):
    with pytest.raises(ConfigurationError):
        engine.score(make_candidate(), make_actor(weights={"charisma": 1.0}))
    with pytest.raises(ConfigurationError):
        engine.score(make_candidate(), make_actor(weights={"skills": -1.0}))


def test_max_distance_preference_tightens_decay(make_candidate, make_actor):
    engine = MatchEngine(EngineConfig(location_decay_km=25.0))
    assert engine.decay_km(MatchPreferences()) == 25.0
    assert engine.decay_km(MatchPreferences(max_distance_km=10)) == 5.0

    candidate = make_candidate(location=Coordinate(40.80, -74.0060))
    loose = engine.score(candidate, make_actor()).dimension(LOCATION).score
    tight = engine.score(candidate, make_actor(), MatchPreferences(max_distance_km=10)).dimension(LOCATION).score
    assert tight < loose


def test_explanations_mention_distance(engine, make_candidate, make_actor):
    result = engine.score(make_candidate(), make_actor())
    assert "This job is very close to your location (0.0 km)." in result.explanations
    assert "The job budget aligns with your rate." in result.explanations


def test_access_gate_delegates_to_tier(engine, make_candidate, make_actor):
    actor = make_actor(premium=PremiumTier(level=TierLevel.PRO, verified_only=True))
    assert engine.can_access(make_candidate(verified_payment=True), actor) is True
    assert engine.can_access(make_candidate(verified_payment=False), actor) is False


def test_urgent_cleaning_job_for_fast_specialist_scores_high(engine, make_candidate, make_actor):
    result = engine.score(make_candidate(urgency="high"), make_actor(response_time="fast"))
    assert result.score >= 80
    assert result.dimension(URGENCY).score == 95.0
