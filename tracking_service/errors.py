"""Exceptions raised by the tracking core."""

from typing import Optional


class TrackingError(Exception):
    """Base class for all tracker errors."""


class ParseError(TrackingError):
    """Malformed element set."""


class PropagationError(TrackingError):
    """The SGP4 model diverged or reported an error at an instant."""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class PredictionError(TrackingError):
    """Pass prediction could not be carried out for an object."""


class StaleElementsError(PredictionError):
    """Element set epoch is too far from the prediction start."""

    def __init__(self, age_days: int, limit_days: int):
        super().__init__(
            f"TLE data is too old ({age_days} days, limit {limit_days}). "
            f"Obtain fresh elements from https://celestrak.org"
        )
        self.age_days = age_days
        self.limit_days = limit_days


class ConfigurationError(TrackingError):
    """Invalid or unreadable tracker configuration."""
