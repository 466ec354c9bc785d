# jobmate/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from jobmate.exceptions import ConfigurationError
from jobmate.models import TierLevel

# --- Dimensions ---

SKILLS = "skills"
LOCATION = "location"
REPUTATION = "reputation"
PRICE = "price"
AVAILABILITY = "availability"
URGENCY = "urgency"

DIMENSIONS = (SKILLS, LOCATION, REPUTATION, PRICE, AVAILABILITY, URGENCY)

DEFAULT_WEIGHTS: Dict[str, float] = {
    SKILLS: 0.30,
    LOCATION: 0.20,
    REPUTATION: 0.15,
    PRICE: 0.15,
    AVAILABILITY: 0.10,
    URGENCY: 0.10,
}

# --- Premium boosts ---

DEFAULT_BOOST_TABLE: Dict[TierLevel, float] = {
    TierLevel.BASIC: 1.05,
    TierLevel.PRO: 1.10,
    TierLevel.ELITE: 1.15,
}

# --- Scoring constants ---

# Proximity score is 100 * exp(-km / decay): ~67 at 10 km, ~14 at 50 km.
DEFAULT_LOCATION_DECAY_KM = 25.0

# --- Ranking ---

DEFAULT_MAX_WORKERS = 8
DEFAULT_PAGE_SIZE = 10


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: Optional[float]) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _parse_pairs(raw: Optional[str]) -> Dict[str, float]:
    """
    Parses: "skills=0.4,location=0.1" -> {"skills": 0.4, "location": 0.1}

    Malformed entries raise ConfigurationError.
    """
    if not raw:
        return {}
    out: Dict[str, float] = {}
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        if "=" not in part:
            raise ConfigurationError(f"Expected name=value, got '{part}'")
        name, value = part.split("=", 1)
        name = name.strip().lower()
        try:
            out[name] = float(value.strip())
        except ValueError:
            raise ConfigurationError(f"Invalid number for '{name}': '{value.strip()}'") from None
    return out


def validate_weights(weights: Dict[str, float]) -> Dict[str, float]:
    unknown = sorted(set(weights) - set(DIMENSIONS))
    if unknown:
        raise ConfigurationError(f"Unknown dimension(s): {', '.join(unknown)}")
    negative = sorted(name for name, w in weights.items() if w < 0)
    if negative:
        raise ConfigurationError(f"Dimension weights cannot be negative: {', '.join(negative)}")
    return dict(weights)


@dataclass(frozen=True)
class EngineConfig:
    """
    Read-only configuration shared by every scoring call.
    Validated at construction; invalid tables raise ConfigurationError.
    """
    weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    boost_table: Dict[TierLevel, float] = field(default_factory=lambda: dict(DEFAULT_BOOST_TABLE))
    location_decay_km: float = DEFAULT_LOCATION_DECAY_KM
    max_workers: int = DEFAULT_MAX_WORKERS
    deadline_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        merged = dict(DEFAULT_WEIGHTS)
        merged.update(validate_weights(self.weights))
        object.__setattr__(self, "weights", merged)

        table: Dict[TierLevel, float] = {}
        for level, multiplier in self.boost_table.items():
            try:
                table[TierLevel(level)] = float(multiplier)
            except ValueError:
                raise ConfigurationError(f"Unknown premium tier '{level}'") from None
        missing = [t.value for t in TierLevel if t not in table]
        if missing:
            raise ConfigurationError(f"Boost table missing tier(s): {', '.join(missing)}")
        bad = sorted(t.value for t, m in table.items() if m <= 0)
        if bad:
            raise ConfigurationError(f"Boost multipliers must be positive: {', '.join(bad)}")
        object.__setattr__(self, "boost_table", table)

        if self.location_decay_km <= 0:
            raise ConfigurationError("location_decay_km must be positive")
        if self.max_workers < 1:
            raise ConfigurationError("max_workers must be at least 1")
        if self.deadline_seconds is not None and self.deadline_seconds <= 0:
            raise ConfigurationError("deadline_seconds must be positive when set")


def load_engine_config() -> EngineConfig:
    boost_overrides = _parse_pairs(os.getenv("JOBMATE_BOOST_TABLE"))
    boost_table: Dict[TierLevel, float] = dict(DEFAULT_BOOST_TABLE)
    for name, multiplier in boost_overrides.items():
        try:
            boost_table[TierLevel(name)] = multiplier
        except ValueError:
            raise ConfigurationError(f"Unknown premium tier '{name}'") from None

    return EngineConfig(
        weights=_parse_pairs(os.getenv("JOBMATE_WEIGHTS")),
        boost_table=boost_table,
        location_decay_km=_env_float("JOBMATE_LOCATION_DECAY_KM", DEFAULT_LOCATION_DECAY_KM),
        max_workers=_env_int("JOBMATE_MAX_WORKERS", DEFAULT_MAX_WORKERS),
        deadline_seconds=_env_float("JOBMATE_RANK_DEADLINE_SECONDS", None),
    )


# --- Logging ---

JOBMATE_LOG_LEVEL: str = os.environ.get("JOBMATE_LOG_LEVEL", "INFO").strip().upper() or "INFO"
JOBMATE_LOG_JSON: bool = _env_bool("JOBMATE_LOG_JSON", False)
