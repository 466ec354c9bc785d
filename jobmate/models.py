from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, FrozenSet, Optional

from jobmate.core.text_processing import normalize_skills, normalize_whitespace


class UrgencyLevel(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    EMERGENCY = "emergency"


class ResponseTime(str, Enum):
    FAST = "fast"
    NORMAL = "normal"
    SLOW = "slow"


class TierLevel(str, Enum):
    BASIC = "basic"
    PRO = "pro"
    ELITE = "elite"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class Coordinate:
    """Decimal degrees. Ranges are not validated."""
    lat: float
    lng: float


@dataclass(frozen=True)
class BudgetRange:
    """
    Candidate budget. A fixed price is a range with min == max.
    Either bound may be missing; see floor/ceiling for how gaps are filled.
    """
    min: Optional[float] = None
    max: Optional[float] = None

    def __post_init__(self) -> None:
        # Guard: swapped ranges
        if self.min is not None and self.max is not None and self.max < self.min:
            lo, hi = self.max, self.min
            object.__setattr__(self, "min", lo)
            object.__setattr__(self, "max", hi)

    @classmethod
    def fixed(cls, price: float) -> "BudgetRange":
        return cls(min=price, max=price)

    @property
    def is_empty(self) -> bool:
        return self.min is None and self.max is None

    @property
    def floor(self) -> float:
        return self.min if self.min is not None else 0.0

    @property
    def ceiling(self) -> Optional[float]:
        if self.max is not None:
            return self.max
        if self.min is not None:
            # Estimate max when only a minimum is published
            return self.min * 1.5
        return None


@dataclass(frozen=True)
class ReputationRecord:
    """
    Multi-criterion client reputation. Each rating is 1-5 when present.
    Missing criteria are excluded from the weighted average.
    """
    overall: Optional[float] = None
    reliability: Optional[float] = None
    communication: Optional[float] = None
    fairness: Optional[float] = None
    respectfulness: Optional[float] = None
    total_ratings: int = 0

    def __post_init__(self) -> None:
        for name in ("overall", "reliability", "communication", "fairness", "respectfulness"):
            value = getattr(self, name)
            if value is not None and not 1.0 <= value <= 5.0:
                raise ValueError(f"{name} rating must be between 1 and 5, got {value}")
        if self.total_ratings < 0:
            raise ValueError("total_ratings cannot be negative")

    def criteria(self) -> Dict[str, float]:
        """Present criteria only, keyed by criterion name."""
        return {
            name: getattr(self, name)
            for name in ("overall", "reliability", "communication", "fairness", "respectfulness")
            if getattr(self, name) is not None
        }


@dataclass(frozen=True)
class PremiumTier:
    level: Optional[TierLevel] = None
    boost_factor: Optional[float] = None  # explicit multiplier, overrides the tier table
    featured: bool = False
    verified_only: bool = False
    # False when the premium flag is off: no boost or badges
    active: bool = True

    def __post_init__(self) -> None:
        if self.level is not None:
            object.__setattr__(self, "level", TierLevel(self.level))
        if self.boost_factor is not None and self.boost_factor <= 0:
            raise ValueError("boost_factor must be positive")


@dataclass(frozen=True)
class Candidate:
    """
    The canonical job/listing record scored by the engine.
    Optional fields stay None when the supplier has no data.
    """
    candidate_id: str
    title: str = ""
    required_skills: FrozenSet[str] = frozenset()
    category: Optional[str] = None
    location: Optional[Coordinate] = None
    budget: Optional[BudgetRange] = None
    urgency: Optional[UrgencyLevel] = None
    created_at: datetime = field(default_factory=utc_now)
    scheduled_for: Optional[datetime] = None
    verified_payment: bool = False
    neighbor_posted: bool = False
    client_reputation: Optional[ReputationRecord] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "candidate_id", (self.candidate_id or "").strip())
        object.__setattr__(self, "title", normalize_whitespace(self.title))
        object.__setattr__(self, "required_skills", normalize_skills(self.required_skills))
        if self.category is not None:
            object.__setattr__(self, "category", normalize_whitespace(self.category).lower() or None)
        if self.urgency is not None:
            object.__setattr__(self, "urgency", UrgencyLevel(self.urgency))
        object.__setattr__(self, "created_at", _as_utc(self.created_at))
        object.__setattr__(self, "scheduled_for", _as_utc(self.scheduled_for))


@dataclass(frozen=True)
class ActorProfile:
    """
    The specialist being matched against candidates.
    """
    actor_id: str
    skills: FrozenSet[str] = frozenset()
    location: Optional[Coordinate] = None
    hourly_rate: Optional[float] = None
    response_time: Optional[ResponseTime] = None
    premium: Optional[PremiumTier] = None
    available_weekdays: Optional[FrozenSet[int]] = None  # 0 = Monday
    weights: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "skills", normalize_skills(self.skills))
        if self.response_time is not None:
            object.__setattr__(self, "response_time", ResponseTime(self.response_time))
        if self.available_weekdays is not None:
            days = frozenset(int(d) for d in self.available_weekdays)
            if any(d < 0 or d > 6 for d in days):
                raise ValueError("available_weekdays must be in 0..6")
            object.__setattr__(self, "available_weekdays", days)


@dataclass(frozen=True)
class SkippedCandidate:
    """A record left out of a ranking, with a human-readable reason."""
    candidate_id: str
    reason: str
