"""Asian handicap pricing, including quarter lines.

Each full-time scoreline is classified by the handicapped margin
``home + line - away``.  Whole and half lines are priced directly with the
push refunded.  Quarter lines split the stake across the two adjacent
half-lines; the two prices are averaged *as decimal odds* and only then
converted back to a probability, which is how quarter-line prices are quoted.
"""

from __future__ import annotations

import dataclasses
import logging
import math

from .errors import InvalidInputError
from .model import ModelHandle, require_model
from .poisson import ScorelineMatrix
from .utils import fair_odds, format_goal_line, odds_to_probability

HANDICAP_EPSILON = 0.01
DEGENERATE_PUSH = 0.99999

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class HandicapOutcome:
    """Raw home-win/push/away-win buckets for a single line."""

    home_win: float
    push: float
    away_win: float

    @property
    def total(self) -> float:
        return self.home_win + self.push + self.away_win

    @property
    def is_all_push(self) -> bool:
        return self.push > DEGENERATE_PUSH

    def refunded(self) -> tuple[float, float]:
        """Home and away probabilities with the push stake refunded."""

        if self.is_all_push:
            return 0.0, 0.0
        remaining = 1.0 - self.push
        return self.home_win / remaining, self.away_win / remaining


@dataclasses.dataclass(frozen=True, slots=True)
class HandicapPrice:
    """Fair probabilities for both sides of an Asian handicap line.

    ``degenerate`` marks a line on which every outcome pushes; no price can be
    quoted and both probabilities are reported as zero.
    """

    line: float
    home: float
    away: float
    degenerate: bool = False

    @property
    def home_label(self) -> str:
        return _format_line(self.line)

    @property
    def away_label(self) -> str:
        return _format_line(-self.line)


def _format_line(line: float) -> str:
    if line == 0:
        return "0"
    return format_goal_line(line, signed=True)


def _quarter_steps(line: float) -> int:
    if not math.isfinite(line):
        raise InvalidInputError("Handicap line must be finite")
    quarters = round(line * 4)
    if abs(line * 4 - quarters) > 1e-9:
        raise InvalidInputError(f"Handicap line {line} is not a multiple of 0.25")
    return int(quarters)


def is_quarter_line(line: float) -> bool:
    """Return whether ``line`` sits between two half-goal lines."""

    return _quarter_steps(line) % 2 != 0


def evaluate_handicap(
    line: float, matrix_h1: ScorelineMatrix, matrix_h2: ScorelineMatrix
) -> HandicapOutcome:
    """Classify every joint half x half path against the home ``line``."""

    rows_h1 = matrix_h1.rows()
    rows_h2 = matrix_h2.rows()
    home_win = push = away_win = 0.0
    for h1, row_h1 in enumerate(rows_h1):
        for a1, prob_h1 in enumerate(row_h1):
            if prob_h1 == 0.0:
                continue
            for h2, row_h2 in enumerate(rows_h2):
                for a2, prob_h2 in enumerate(row_h2):
                    if prob_h2 == 0.0:
                        continue
                    probability = prob_h1 * prob_h2
                    margin = (h1 + h2) + line - (a1 + a2)
                    if margin > HANDICAP_EPSILON:
                        home_win += probability
                    elif margin < -HANDICAP_EPSILON:
                        away_win += probability
                    else:
                        push += probability
    return HandicapOutcome(home_win=home_win, push=push, away_win=away_win)


def blend_quarter_line(p_low: float, p_high: float) -> float:
    """Combine two half-line probabilities by averaging their decimal odds."""

    averaged = (fair_odds(p_low) + fair_odds(p_high)) / 2
    return odds_to_probability(averaged)


def price_handicap(
    line: float, matrix_h1: ScorelineMatrix, matrix_h2: ScorelineMatrix
) -> HandicapPrice:
    """Price both sides of ``line`` from a pair of half matrices."""

    if not is_quarter_line(line):
        outcome = evaluate_handicap(line, matrix_h1, matrix_h2)
        if outcome.is_all_push:
            logger.debug("Handicap %s pushes on every scoreline", line)
            return HandicapPrice(line=line, home=0.0, away=0.0, degenerate=True)
        home, away = outcome.refunded()
        return HandicapPrice(line=line, home=home, away=away)

    low_home, low_away = evaluate_handicap(line - 0.25, matrix_h1, matrix_h2).refunded()
    high_home, high_away = evaluate_handicap(line + 0.25, matrix_h1, matrix_h2).refunded()
    return HandicapPrice(
        line=line,
        home=blend_quarter_line(low_home, high_home),
        away=blend_quarter_line(low_away, high_away),
    )


def asian_handicap_price(model: ModelHandle, line: float) -> HandicapPrice:
    """Price an Asian handicap line against a calculated model."""

    state = require_model(model)
    return price_handicap(line, state.matrix_h1, state.matrix_h2)


__all__ = [
    "DEGENERATE_PUSH",
    "HANDICAP_EPSILON",
    "HandicapOutcome",
    "HandicapPrice",
    "asian_handicap_price",
    "blend_quarter_line",
    "evaluate_handicap",
    "is_quarter_line",
    "price_handicap",
]
