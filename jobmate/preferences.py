"""
Match preferences and filters.

Closed schemas: every supported key is declared here; unknown keys are rejected.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from jobmate.config import AVAILABILITY, DIMENSIONS, LOCATION, PRICE, REPUTATION, SKILLS, URGENCY
from jobmate.exceptions import PreferenceValidationError
from jobmate.models import Candidate, UrgencyLevel


class MatchFilters(BaseModel):
    """Hard filters applied before scoring. Mirrors the matches endpoint query options."""
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    categories: List[str] = Field(default_factory=list)
    min_budget: Optional[float] = Field(default=None, ge=0, alias="minBudget")
    max_budget: Optional[float] = Field(default=None, ge=0, alias="maxBudget")
    urgency_levels: List[UrgencyLevel] = Field(default_factory=list, alias="urgencyLevel")
    verified_only: bool = Field(default=False, alias="showVerifiedOnly")
    neighbors_only: bool = Field(default=False, alias="showNeighborsOnly")

    @field_validator("categories")
    @classmethod
    def _lower_categories(cls, v: List[str]) -> List[str]:
        return [c.strip().lower() for c in v if c and c.strip()]

    @field_validator("urgency_levels", mode="before")
    @classmethod
    def _lower_urgency(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = [v]
        if isinstance(v, list):
            return [u.strip().lower() if isinstance(u, str) else u for u in v]
        return v

    def accepts(self, candidate: Candidate) -> bool:
        if self.categories and (candidate.category or "") not in self.categories:
            return False
        if self.urgency_levels and candidate.urgency not in self.urgency_levels:
            return False
        if self.verified_only and not candidate.verified_payment:
            return False
        if self.neighbors_only and not candidate.neighbor_posted:
            return False

        budget = candidate.budget
        if budget is not None and not budget.is_empty:
            # keep when ceiling >= min_budget and floor <= max_budget
            if self.min_budget is not None and budget.ceiling < self.min_budget:
                return False
            if self.max_budget is not None and budget.floor > self.max_budget:
                return False
        return True


class MatchPreferences(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    prioritize_location: bool = Field(default=False, alias="prioritizeLocation")
    prioritize_rate: bool = Field(default=False, alias="prioritizeRate")
    prioritize_urgent: bool = Field(default=False, alias="prioritizeUrgent")
    max_distance_km: Optional[float] = Field(default=None, gt=0, alias="maxDistance")
    weights: Dict[str, float] = Field(default_factory=dict)
    filters: MatchFilters = Field(default_factory=MatchFilters)

    @field_validator("weights")
    @classmethod
    def _known_dimensions(cls, v: Dict[str, float]) -> Dict[str, float]:
        out = {}
        for name, weight in v.items():
            key = name.strip().lower()
            if key not in DIMENSIONS:
                raise ValueError(f"unknown dimension '{name}'")
            if weight < 0:
                raise ValueError(f"weight for '{name}' cannot be negative")
            out[key] = float(weight)
        return out

    def adjust_weights(self, weights: Mapping[str, float]) -> Dict[str, float]:
        """
        Apply explicit overrides, then the prioritize_* shifts. Results are floored at 0.
        """
        w = dict(weights)
        w.update(self.weights)

        if self.prioritize_location:
            w[LOCATION] += 0.10
            w[SKILLS] -= 0.05
            w[PRICE] -= 0.05

        if self.prioritize_rate:
            w[PRICE] += 0.10
            w[LOCATION] -= 0.05
            w[REPUTATION] -= 0.05

        if self.prioritize_urgent:
            w[URGENCY] += 0.10
            w[AVAILABILITY] += 0.05
            w[REPUTATION] -= 0.05
            w[LOCATION] -= 0.05
            w[SKILLS] -= 0.05

        return {name: max(0.0, value) for name, value in w.items()}


def load_preferences(raw: Optional[Mapping[str, Any]]) -> MatchPreferences:
    """Validate a raw preferences mapping. Unknown or invalid keys raise PreferenceValidationError."""
    if raw is None:
        return MatchPreferences()
    try:
        return MatchPreferences.model_validate(dict(raw))
    except ValidationError as exc:
        raise PreferenceValidationError(str(exc)) from exc
