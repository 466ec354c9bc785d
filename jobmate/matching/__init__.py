from .engine import MatchEngine
from .types import CompatibilityDimension, DimensionScore, MatchResult

__all__ = ["MatchEngine", "CompatibilityDimension", "DimensionScore", "MatchResult"]
