import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from jobmate.matching.engine import MatchEngine
from jobmate.models import ActorProfile, BudgetRange, Candidate, Coordinate

# Path to tests/fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"

NYC = Coordinate(lat=40.7128, lng=-74.0060)
CHICAGO = Coordinate(lat=41.8781, lng=-87.6298)

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR


@pytest.fixture
def load_json(fixtures_dir):
    """
    Fixture that returns a function: load_json("file.json") -> parsed JSON
    """
    def _load(name: str):
        return json.loads((fixtures_dir / name).read_text(encoding="utf-8"))
    return _load


@pytest.fixture
def engine() -> MatchEngine:
    return MatchEngine()


@pytest.fixture
def make_candidate():
    """
    Factory with sensible defaults: make_candidate("c1", budget=BudgetRange.fixed(80))
    """
    def _make(candidate_id: str = "c1", **overrides) -> Candidate:
        fields = dict(
            candidate_id=candidate_id,
            title="Apartment cleaning",
            required_skills=frozenset({"cleaning"}),
            category="cleaning",
            location=NYC,
            budget=BudgetRange.fixed(50),
            created_at=BASE_TIME,
        )
        fields.update(overrides)
        return Candidate(**fields)
    return _make


@pytest.fixture
def make_actor():
    def _make(actor_id: str = "a1", **overrides) -> ActorProfile:
        fields = dict(
            actor_id=actor_id,
            skills=frozenset({"cleaning", "deep cleaning"}),
            location=NYC,
            hourly_rate=40.0,
            response_time="fast",
        )
        fields.update(overrides)
        return ActorProfile(**fields)
    return _make
