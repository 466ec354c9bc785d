"""
tests/unit/test_config.py

EngineConfig validation and environment overrides.
"""
import pytest

from jobmate.config import (
    DEFAULT_BOOST_TABLE,
    DEFAULT_MAX_WORKERS,
    DEFAULT_WEIGHTS,
    EngineConfig,
    load_engine_config,
)
from jobmate.exceptions import ConfigurationError
from jobmate.models import TierLevel

ENV_VARS = (
    "JOBMATE_WEIGHTS",
    "JOBMATE_BOOST_TABLE",
    "JOBMATE_LOCATION_DECAY_KM",
    "JOBMATE_MAX_WORKERS",
    "JOBMATE_RANK_DEADLINE_SECONDS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# ------------------------------------------------------------------
# EngineConfig
# ------------------------------------------------------------------

def test_defaults():
    cfg = EngineConfig()
    assert cfg.weights == DEFAULT_WEIGHTS
    assert cfg.boost_table == DEFAULT_BOOST_TABLE
    assert cfg.deadline_seconds is None


def test_partial_weights_merge_with_defaults():
    cfg = EngineConfig(weights={"skills": 0.6})
    assert cfg.weights["skills"] == 0.6
    assert cfg.weights["location"] == DEFAULT_WEIGHTS["location"]


@pytest.mark.parametrize("weights", [{"skills": -0.1}, {"vibes": 0.2}])
def test_invalid_weights_fail_fast(weights):
    with pytest.raises(ConfigurationError):
        EngineConfig(weights=weights)


def test_boost_table_must_cover_every_tier():
    with pytest.raises(ConfigurationError):
        EngineConfig(boost_table={TierLevel.BASIC: 1.05})


def test_boost_table_rejects_unknown_tier_and_non_positive_multiplier():
    with pytest.raises(ConfigurationError):
        EngineConfig(boost_table={**DEFAULT_BOOST_TABLE, "platinum": 1.3})
    with pytest.raises(ConfigurationError):
        EngineConfig(boost_table={**DEFAULT_BOOST_TABLE, TierLevel.PRO: 0})


def test_boost_table_accepts_string_keys():
    cfg = EngineConfig(boost_table={"basic": 1.0, "pro": 1.2, "elite": 1.4})
    assert cfg.boost_table[TierLevel.ELITE] == 1.4


@pytest.mark.parametrize("kwargs", [
    {"location_decay_km": 0},
    {"max_workers": 0},
    {"deadline_seconds": -1},
])
def test_limits_are_validated(kwargs):
    with pytest.raises(ConfigurationError):
        EngineConfig(**kwargs)


# ------------------------------------------------------------------
# Environment
# ------------------------------------------------------------------

def test_load_engine_config_defaults():
    cfg = load_engine_config()
    assert cfg == EngineConfig()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("JOBMATE_WEIGHTS", "Skills=0.5, urgency=0.0")
    monkeypatch.setenv("JOBMATE_BOOST_TABLE", "elite=1.25")
    monkeypatch.setenv("JOBMATE_LOCATION_DECAY_KM", "40")
    monkeypatch.setenv("JOBMATE_RANK_DEADLINE_SECONDS", "2.5")
    cfg = load_engine_config()
    assert cfg.weights["skills"] == 0.5
    assert cfg.weights["urgency"] == 0.0
    assert cfg.boost_table[TierLevel.ELITE] == 1.25
    assert cfg.boost_table[TierLevel.PRO] == DEFAULT_BOOST_TABLE[TierLevel.PRO]
    assert cfg.location_decay_km == 40.0
    assert cfg.deadline_seconds == 2.5


def test_unparseable_numbers_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("JOBMATE_MAX_WORKERS", "lots")
    assert load_engine_config().max_workers == DEFAULT_MAX_WORKERS


@pytest.mark.parametrize("name, value", [
    ("JOBMATE_WEIGHTS", "skills"),
    ("JOBMATE_WEIGHTS", "skills=high"),
    ("JOBMATE_WEIGHTS", "charm=0.2"),
    ("JOBMATE_BOOST_TABLE", "diamond=2"),
])
def test_malformed_tables_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        load_engine_config()
