"""
Exception hierarchy for the matching engine.

Configuration errors are fatal and raised when an engine is built.
Record-level errors are caught by the ranking service and reported as skips.
"""


class MatchingError(Exception):
    """Base exception for all matching errors"""
    pass


class ConfigurationError(MatchingError):
    """Engine configuration is invalid (weights, boost table, limits)"""
    pass


class CandidateValidationError(MatchingError):
    """A single candidate record is malformed"""

    def __init__(self, candidate_id: str, message: str):
        self.candidate_id = candidate_id
        self.message = message
        super().__init__(f"{candidate_id or '<missing id>'}: {message}")


class PreferenceValidationError(MatchingError):
    """Match preferences contain unknown keys or invalid values"""
    pass


class ProfileValidationError(MatchingError):
    """The actor profile record is malformed"""
    pass
