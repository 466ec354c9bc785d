"""
Raw record ingestion.

Maps listing and profile dicts (camelCase API payloads or snake_case) onto the
frozen domain models. Unknown keys on records are ignored; values that are
present but malformed are rejected.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Tuple, Union

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from jobmate.exceptions import CandidateValidationError, ProfileValidationError
from jobmate.models import (
    ActorProfile,
    BudgetRange,
    Candidate,
    Coordinate,
    PremiumTier,
    ReputationRecord,
    ResponseTime,
    SkippedCandidate,
    TierLevel,
    UrgencyLevel,
    utc_now,
)

# Response time in minutes -> class
FAST_RESPONSE_MINUTES = 60
NORMAL_RESPONSE_MINUTES = 240

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def _name_of(value: Any) -> Any:
    # {"name": "Plumbing"} -> "Plumbing"
    if isinstance(value, Mapping):
        return value.get("name")
    return value


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class CoordinateIn(_Record):
    lat: float = Field(validation_alias=AliasChoices("lat", "latitude"))
    lng: float = Field(validation_alias=AliasChoices("lng", "lon", "longitude"))


class ReputationIn(_Record):
    overall: Optional[float] = Field(default=None, ge=1, le=5, validation_alias=AliasChoices("overall", "overallRating"))
    reliability: Optional[float] = Field(default=None, ge=1, le=5)
    communication: Optional[float] = Field(default=None, ge=1, le=5)
    fairness: Optional[float] = Field(
        default=None, ge=1, le=5, validation_alias=AliasChoices("fairness", "fairPayment", "fair_payment")
    )
    respectfulness: Optional[float] = Field(default=None, ge=1, le=5)
    total_ratings: int = Field(default=0, ge=0, validation_alias=AliasChoices("total_ratings", "totalRatings"))

    def to_model(self) -> ReputationRecord:
        return ReputationRecord(**self.model_dump())


class PremiumIn(_Record):
    level: Optional[TierLevel] = Field(default=None, validation_alias=AliasChoices("level", "premiumLevel", "premium_level"))
    boost_factor: Optional[float] = Field(default=None, gt=0, validation_alias=AliasChoices("boost_factor", "boostFactor"))
    featured: bool = Field(default=False, validation_alias=AliasChoices("featured", "featuredProfile", "featured_profile"))
    verified_only: bool = Field(default=False, validation_alias=AliasChoices("verified_only", "verifiedOnly"))
    is_premium: Optional[bool] = Field(default=None, validation_alias=AliasChoices("is_premium", "isPremium"))

    @field_validator("level", mode="before")
    @classmethod
    def _lower_level(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    def to_model(self) -> PremiumTier:
        return PremiumTier(
            level=self.level,
            boost_factor=self.boost_factor,
            featured=self.featured,
            verified_only=self.verified_only,
            active=self.is_premium is not False,
        )


class RatePreferencesIn(_Record):
    min: Optional[float] = Field(default=None, ge=0)
    max: Optional[float] = Field(default=None, ge=0)
    preferred: Optional[float] = Field(default=None, ge=0)


class ScheduleSlotIn(_Record):
    # JavaScript weekday numbering: 0 = Sunday
    day: int = Field(ge=0, le=6)
    start_hour: Optional[int] = Field(default=None, validation_alias=AliasChoices("start_hour", "startHour"))
    end_hour: Optional[int] = Field(default=None, validation_alias=AliasChoices("end_hour", "endHour"))

    @property
    def weekday(self) -> int:
        """Python weekday, 0 = Monday."""
        return (self.day - 1) % 7


class AvailabilityIn(_Record):
    schedule: List[ScheduleSlotIn] = Field(default_factory=list)

    def weekdays(self) -> Optional[FrozenSet[int]]:
        days = frozenset(slot.weekday for slot in self.schedule)
        return days or None


def _coordinate(
        lat: Optional[float],
        lng: Optional[float],
        location: Optional[CoordinateIn],
) -> Optional[Coordinate]:
    if location is not None:
        return Coordinate(lat=location.lat, lng=location.lng)
    if lat is not None and lng is not None:
        return Coordinate(lat=lat, lng=lng)
    return None


class CandidateRecord(_Record):
    candidate_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("candidate_id", "candidateId", "id"))
    title: Optional[str] = ""
    required_skills: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("required_skills", "requiredSkills", "skills"),
    )
    category: Optional[str] = Field(default=None, validation_alias=AliasChoices("category", "serviceCategory"))
    lat: Optional[float] = Field(default=None, validation_alias=AliasChoices("lat", "latitude"))
    lng: Optional[float] = Field(default=None, validation_alias=AliasChoices("lng", "longitude"))
    location: Optional[CoordinateIn] = None
    budget: Optional[float] = Field(default=None, ge=0)
    budget_min: Optional[float] = Field(default=None, ge=0, validation_alias=AliasChoices("budget_min", "budgetMin"))
    budget_max: Optional[float] = Field(default=None, ge=0, validation_alias=AliasChoices("budget_max", "budgetMax"))
    urgency: Optional[UrgencyLevel] = Field(
        default=None, validation_alias=AliasChoices("urgency", "urgencyLevel", "urgency_level")
    )
    created_at: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("created_at", "createdAt"))
    scheduled_for: Optional[datetime] = Field(
        default=None, validation_alias=AliasChoices("scheduled_for", "scheduledFor", "scheduledDate")
    )
    verified_payment: bool = Field(
        default=False, validation_alias=AliasChoices("verified_payment", "isVerifiedPayment")
    )
    neighbor_posted: bool = Field(default=False, validation_alias=AliasChoices("neighbor_posted", "isNeighborPosted"))
    client_reputation: Optional[ReputationIn] = Field(
        default=None, validation_alias=AliasChoices("client_reputation", "clientReputation")
    )
    customer: Optional[Dict[str, Any]] = None
    client: Optional[Dict[str, Any]] = None

    @field_validator("candidate_id", mode="before")
    @classmethod
    def _id_as_string(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("required_skills", mode="before")
    @classmethod
    def _skill_names(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.split(",")
        if isinstance(v, list):
            return [_name_of(s) for s in v if _name_of(s)]
        return v

    @field_validator("category", mode="before")
    @classmethod
    def _category_name(cls, v: Any) -> Any:
        return _name_of(v)

    @field_validator("urgency", mode="before")
    @classmethod
    def _urgency_alias(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip().lower()
            return UrgencyLevel.NORMAL.value if v == "medium" else v
        return v

    def reputation(self) -> Optional[ReputationRecord]:
        if self.client_reputation is not None:
            return self.client_reputation.to_model()
        for owner in (self.customer, self.client):
            raw = (owner or {}).get("reputation")
            if raw:
                return ReputationIn.model_validate(raw).to_model()
        return None

    def budget_range(self) -> Optional[BudgetRange]:
        if self.budget_min is not None or self.budget_max is not None:
            return BudgetRange(min=self.budget_min, max=self.budget_max)
        if self.budget is not None:
            return BudgetRange.fixed(self.budget)
        return None

    def skill_requirements(self) -> List[str]:
        if "required_skills" in self.model_fields_set or not self.category:
            return self.required_skills
        # Listings without a skills list are matched on their category
        return [self.category]

    def to_model(self) -> Candidate:
        cid = (self.candidate_id or "").strip()
        if not cid:
            raise CandidateValidationError("", "candidate has no identifier")
        return Candidate(
            candidate_id=cid,
            title=self.title or "",
            required_skills=frozenset(self.skill_requirements()),
            category=self.category,
            location=_coordinate(self.lat, self.lng, self.location),
            budget=self.budget_range(),
            urgency=self.urgency,
            created_at=self.created_at or utc_now(),
            scheduled_for=self.scheduled_for,
            verified_payment=self.verified_payment,
            neighbor_posted=self.neighbor_posted,
            client_reputation=self.reputation(),
        )


class ActorRecord(_Record):
    actor_id: str = Field(default="", validation_alias=AliasChoices("actor_id", "actorId", "userId", "id"))
    skills: List[str] = Field(default_factory=list)
    lat: Optional[float] = Field(default=None, validation_alias=AliasChoices("lat", "latitude"))
    lng: Optional[float] = Field(default=None, validation_alias=AliasChoices("lng", "longitude"))
    location: Optional[CoordinateIn] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0, validation_alias=AliasChoices("hourly_rate", "hourlyRate"))
    rate_preferences: Optional[RatePreferencesIn] = Field(
        default=None, validation_alias=AliasChoices("rate_preferences", "ratePreferences")
    )
    response_time: Optional[ResponseTime] = Field(
        default=None, validation_alias=AliasChoices("response_time", "responseTime")
    )
    premium: Optional[PremiumIn] = None
    available_weekdays: Optional[List[int]] = Field(
        default=None, validation_alias=AliasChoices("available_weekdays", "availableWeekdays")
    )
    availability: Optional[AvailabilityIn] = None
    weights: Dict[str, float] = Field(default_factory=dict)

    @field_validator("actor_id", mode="before")
    @classmethod
    def _id_as_string(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("skills", mode="before")
    @classmethod
    def _skill_names(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_name_of(s) for s in v if _name_of(s)]
        return v

    @field_validator("response_time", mode="before")
    @classmethod
    def _response_class(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return v
        if isinstance(v, (int, float)):
            if v < 0:
                raise ValueError("response time cannot be negative")
            if v <= FAST_RESPONSE_MINUTES:
                return ResponseTime.FAST
            if v <= NORMAL_RESPONSE_MINUTES:
                return ResponseTime.NORMAL
            return ResponseTime.SLOW
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("available_weekdays", mode="before")
    @classmethod
    def _weekday_numbers(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return v
        out: List[Any] = []
        for day in v:
            if isinstance(day, str) and day.strip().lower() in WEEKDAYS:
                out.append(WEEKDAYS.index(day.strip().lower()))
            else:
                out.append(day)
        return out

    @field_validator("available_weekdays")
    @classmethod
    def _weekday_range(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        if v is not None and any(d < 0 or d > 6 for d in v):
            raise ValueError("weekdays must be in 0..6 (0 = Monday)")
        return v

    def rate(self) -> Optional[float]:
        if self.rate_preferences is not None and self.rate_preferences.preferred is not None:
            return self.rate_preferences.preferred
        return self.hourly_rate

    def weekdays(self) -> Optional[FrozenSet[int]]:
        if self.available_weekdays is not None:
            return frozenset(self.available_weekdays)
        if self.availability is not None:
            return self.availability.weekdays()
        return None

    def to_model(self) -> ActorProfile:
        return ActorProfile(
            actor_id=self.actor_id.strip(),
            skills=frozenset(self.skills),
            location=_coordinate(self.lat, self.lng, self.location),
            hourly_rate=self.rate(),
            response_time=self.response_time,
            premium=self.premium.to_model() if self.premium is not None else None,
            available_weekdays=self.weekdays(),
            weights={k.strip().lower(): float(w) for k, w in self.weights.items()},
        )


def _record_id(raw: Any) -> str:
    if not isinstance(raw, Mapping):
        return ""
    for key in ("candidate_id", "candidateId", "id"):
        if raw.get(key) not in (None, ""):
            return str(raw[key])
    return ""


def load_candidate(raw: Mapping[str, Any]) -> Candidate:
    """
    Build one Candidate. Malformed input raises CandidateValidationError
    carrying whatever identifier the record had.
    """
    try:
        return CandidateRecord.model_validate(dict(raw)).to_model()
    except ValidationError as exc:
        raise CandidateValidationError(_record_id(raw), _short_errors(exc)) from exc
    except (TypeError, ValueError) as exc:
        raise CandidateValidationError(_record_id(raw), str(exc)) from exc


def load_candidates(records: Iterable[Any]) -> Tuple[List[Candidate], List[SkippedCandidate]]:
    """Load a batch. Bad records are skipped and reported, never raised."""
    candidates: List[Candidate] = []
    skipped: List[SkippedCandidate] = []
    for idx, raw in enumerate(records or []):
        if not isinstance(raw, Mapping):
            skipped.append(SkippedCandidate("", f"record {idx} is not an object"))
            logger.warning("Skipping record {}: expected an object, got {}", idx, type(raw).__name__)
            continue
        try:
            candidates.append(load_candidate(raw))
        except CandidateValidationError as exc:
            skipped.append(SkippedCandidate(exc.candidate_id, exc.message))
            logger.warning("Skipping record {}: {}", idx, exc)
    logger.debug("Loaded {} candidates, skipped {}", len(candidates), len(skipped))
    return candidates, skipped


def load_actor(raw: Union[Mapping[str, Any], ActorProfile]) -> ActorProfile:
    if isinstance(raw, ActorProfile):
        return raw
    try:
        return ActorRecord.model_validate(dict(raw)).to_model()
    except ValidationError as exc:
        raise ProfileValidationError(_short_errors(exc)) from exc
    except (TypeError, ValueError) as exc:
        raise ProfileValidationError(str(exc)) from exc


def _short_errors(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts)
