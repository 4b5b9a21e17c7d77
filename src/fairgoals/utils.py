"""Reusable betting math helpers for odds and probabilities."""

from __future__ import annotations

import dataclasses
import math
from typing import Sequence

from .errors import InvalidInputError

PROBABILITY_FLOOR = 1e-9
ODDS_SENTINEL = 1e9

__all__ = [
    "FormattedResult",
    "ODDS_SENTINEL",
    "PROBABILITY_FLOOR",
    "clamp_probability",
    "fair_odds",
    "format_goal_line",
    "format_result",
    "implied_probability_from_decimal",
    "normalise_probabilities",
    "odds_to_probability",
]


@dataclasses.dataclass(frozen=True, slots=True)
class FormattedResult:
    """Probability rendered as a percentage string and fair decimal odds."""

    probability: float
    percent: str
    fair_odds: float

    def odds_text(self, precision: int = 2) -> str:
        return f"{self.fair_odds:.{precision}f}"


def clamp_probability(probability: float) -> float:
    """Clamp ``probability`` into ``[0, 1]``; non-finite values become zero."""

    if not math.isfinite(probability):
        return 0.0
    return min(1.0, max(0.0, probability))


def fair_odds(probability: float) -> float:
    """Return 100%-payout decimal odds, substituting the sentinel for zero."""

    if probability <= PROBABILITY_FLOOR:
        return ODDS_SENTINEL
    return 1.0 / probability


def odds_to_probability(decimal_odds: float) -> float:
    """Invert :func:`fair_odds`, mapping the sentinel back to zero."""

    if decimal_odds >= ODDS_SENTINEL:
        return 0.0
    return 1.0 / decimal_odds


def format_result(probability: float, precision: int = 2) -> FormattedResult:
    """Format a probability for display with floored fair odds.

    Probabilities at or below ``1e-9`` are floored so that the resulting odds
    never exceed ``1e9`` and never divide by zero.
    """

    safe = probability if probability > PROBABILITY_FLOOR else PROBABILITY_FLOOR
    return FormattedResult(
        probability=safe,
        percent=f"{safe * 100.0:.{precision}f}",
        fair_odds=1.0 / safe,
    )


def format_goal_line(value: float, signed: bool = False) -> str:
    """Render a goal line as typed, e.g. ``2.5``, ``3`` or ``1234567``."""

    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    if signed and value > 0:
        text = "+" + text
    return text


def implied_probability_from_decimal(decimal_odds: float) -> float:
    """Return the bookmaker's implied win probability from decimal odds."""

    if not math.isfinite(decimal_odds) or decimal_odds <= 1.0:
        raise InvalidInputError("Decimal odds must exceed 1.0")
    return 1.0 / decimal_odds


def normalise_probabilities(values: Sequence[float]) -> list[float]:
    """Scale non-negative weights so they sum to one."""

    total = float(sum(values))
    if total <= 0.0 or not math.isfinite(total):
        raise InvalidInputError("Probabilities must have a positive finite sum")
    if any(value < 0.0 for value in values):
        raise InvalidInputError("Probabilities must be non-negative")
    return [float(value) / total for value in values]
