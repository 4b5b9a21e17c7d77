"""Exception hierarchy shared by the pricing engine."""

from __future__ import annotations


class FairGoalsError(Exception):
    """Base class for every error raised by :mod:`fairgoals`."""


class InvalidInputError(FairGoalsError, ValueError):
    """Raised when model or market inputs fall outside their valid domain."""


class UnsolvableInverseError(FairGoalsError):
    """Raised when market prices cannot be reconciled into goal rates."""


class ModelNotReadyError(FairGoalsError):
    """Raised when a market is priced before any model has been calculated."""


class QueryParseError(FairGoalsError, ValueError):
    """Raised when free-text market queries cannot be interpreted."""

    def __init__(self, message: str, fragment: str) -> None:
        super().__init__(message)
        self.fragment = fragment


__all__ = [
    "FairGoalsError",
    "InvalidInputError",
    "ModelNotReadyError",
    "QueryParseError",
    "UnsolvableInverseError",
]
