import pytest

from jobmate.config import AVAILABILITY, DEFAULT_WEIGHTS, LOCATION, PRICE, REPUTATION, SKILLS, URGENCY
from jobmate.exceptions import PreferenceValidationError
from jobmate.models import BudgetRange, Candidate, UrgencyLevel
from jobmate.preferences import MatchFilters, MatchPreferences, load_preferences


def test_no_preferences_means_defaults():
    prefs = load_preferences(None)
    assert prefs == MatchPreferences()
    assert prefs.adjust_weights(DEFAULT_WEIGHTS) == DEFAULT_WEIGHTS


def test_camel_case_keys_are_accepted(load_json):
    prefs = load_preferences(load_json("preferences.json"))
    assert prefs.prioritize_location is True
    assert prefs.max_distance_km == 30
    assert prefs.filters.categories == ["cleaning", "plumbing"]


def test_unknown_keys_are_rejected():
    with pytest.raises(PreferenceValidationError):
        load_preferences({"prioritizeVibes": True})
    with pytest.raises(PreferenceValidationError):
        load_preferences({"filters": {"color": "blue"}})


def test_weight_overrides_are_validated():
    with pytest.raises(PreferenceValidationError):
        load_preferences({"weights": {"charisma": 0.5}})
    with pytest.raises(PreferenceValidationError):
        load_preferences({"weights": {"skills": -0.5}})
    with pytest.raises(PreferenceValidationError):
        load_preferences({"maxDistance": 0})


def test_prioritize_shifts():
    loc = MatchPreferences(prioritize_location=True).adjust_weights(DEFAULT_WEIGHTS)
    assert loc[LOCATION] == pytest.approx(0.30)
    assert loc[SKILLS] == pytest.approx(0.25)
    assert loc[PRICE] == pytest.approx(0.10)

    rate = MatchPreferences(prioritize_rate=True).adjust_weights(DEFAULT_WEIGHTS)
    assert rate[PRICE] == pytest.approx(0.25)
    assert rate[REPUTATION] == pytest.approx(0.10)

    urgent = MatchPreferences(prioritize_urgent=True).adjust_weights(DEFAULT_WEIGHTS)
    assert urgent[URGENCY] == pytest.approx(0.20)
    assert urgent[AVAILABILITY] == pytest.approx(0.15)


def test_shifted_weights_never_go_negative():
    prefs = MatchPreferences(prioritize_rate=True, weights={"Reputation": 0.0})
    w = prefs.adjust_weights(DEFAULT_WEIGHTS)
    assert w[REPUTATION] == 0.0
    assert all(v >= 0 for v in w.values())


def test_adjust_weights_does_not_mutate_input():
    weights = dict(DEFAULT_WEIGHTS)
    MatchPreferences(prioritize_location=True, weights={"skills": 0.9}).adjust_weights(weights)
    assert weights == DEFAULT_WEIGHTS


def test_filters():
    cand = Candidate(
        candidate_id="c1",
        category="Cleaning",
        budget=BudgetRange(min=40, max=60),
        urgency=UrgencyLevel.HIGH,
        verified_payment=True,
    )
    assert MatchFilters().accepts(cand)
    assert MatchFilters(categories=["cleaning"]).accepts(cand)
    assert not MatchFilters(categories=["plumbing"]).accepts(cand)
    assert MatchFilters(min_budget=50, max_budget=45).accepts(cand)
    assert not MatchFilters(min_budget=70).accepts(cand)
    assert not MatchFilters(max_budget=30).accepts(cand)
    assert MatchFilters.model_validate({"urgencyLevel": ["high", "emergency"]}).accepts(cand)
    assert not MatchFilters(urgency_levels=[UrgencyLevel.LOW]).accepts(cand)
    assert MatchFilters(verified_only=True).accepts(cand)
    assert not MatchFilters(neighbors_only=True).accepts(cand)


def test_budget_filters_ignore_candidates_without_budget():
    assert MatchFilters(min_budget=100).accepts(Candidate(candidate_id="c1"))


def test_min_budget_filter_drops_zero_budget():
    free = Candidate(candidate_id="c1", budget=BudgetRange.fixed(0))
    assert not MatchFilters(min_budget=10).accepts(free)
    assert MatchFilters(max_budget=10).accepts(free)
