from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class DimensionScore:
    """Aggregator input: one named factor before it is attached to a result."""
    name: str
    score: float
    weight: float
    description: str = ""


@dataclass(frozen=True)
class CompatibilityDimension:
    name: str
    score: float  # 0-100
    weight: float
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "score": round(self.score, 2),
            "weight": self.weight,
            "description": self.description,
        }


@dataclass(frozen=True)
class MatchResult:
    score: int  # 0-100
    dimensions: Tuple[CompatibilityDimension, ...] = ()
    # Causal order: base factors first, then boosts
    explanations: Tuple[str, ...] = ()
    base_score: Optional[int] = field(default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "dimensions", tuple(self.dimensions))
        object.__setattr__(self, "explanations", tuple(self.explanations))
        if self.base_score is None:
            object.__setattr__(self, "base_score", self.score)

    @property
    def boosted(self) -> bool:
        return self.score != self.base_score

    def dimension(self, name: str) -> Optional[CompatibilityDimension]:
        for d in self.dimensions:
            if d.name == name:
                return d
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "base_score": self.base_score,
            "dimensions": [d.to_dict() for d in self.dimensions],
            "explanations": list(self.explanations),
        }
