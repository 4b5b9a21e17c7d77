"""Recover goal rates from market-implied probabilities.

Two inverse problems are solved here:

* :func:`derive_lambdas` splits a known total goal expectancy between the
  home and away teams so that the resulting 1X2 probabilities match a target
  triple.  The error surface over the split is neither smooth nor guaranteed
  to be monotone, so the search is an exhaustive uniform scan.  The step count
  and tolerance are calibrated constants.
* :func:`solve_total_goals` recovers the expected match total from the fair
  probability of the over side of a total goals line, using bisection on the
  Poisson total.
"""

from __future__ import annotations

import dataclasses
import logging
import math

import numpy as np

from .errors import InvalidInputError
from .poisson import MAX_GOALS_SOLVER, build_scoreline_matrix, poisson

SOLVER_STEPS = 400
SOLVER_TOLERANCE = 0.0015

TOTAL_SOLVER_TOLERANCE = 0.0005
TOTAL_SOLVER_ITERATIONS = 60

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class OutcomeProbabilities:
    """Home/draw/away probabilities of a match."""

    home: float
    draw: float
    away: float

    @property
    def total(self) -> float:
        return self.home + self.draw + self.away

    def squared_error(self, other: "OutcomeProbabilities") -> float:
        return (
            (self.home - other.home) ** 2
            + (self.draw - other.draw) ** 2
            + (self.away - other.away) ** 2
        )


@dataclasses.dataclass(frozen=True, slots=True)
class LambdaSplit:
    """Full-time goal rates recovered by :func:`derive_lambdas`."""

    home: float
    away: float
    error: float


def outcome_probabilities(
    lambda_home: float, lambda_away: float, max_goals: int = MAX_GOALS_SOLVER
) -> tuple[OutcomeProbabilities, float]:
    """Return renormalised 1X2 probabilities and the raw truncated mass.

    Unlike the market evaluators, the three outcomes are divided by the mass
    captured inside the truncated grid so that they sum to one.
    """

    grid = build_scoreline_matrix(lambda_home, lambda_away, max_goals).grid
    home = float(np.tril(grid, -1).sum())
    away = float(np.triu(grid, 1).sum())
    draw = float(np.trace(grid))
    mass = home + draw + away
    if mass > 0.0:
        home /= mass
        draw /= mass
        away /= mass
    return OutcomeProbabilities(home=home, draw=draw, away=away), mass


def derive_lambdas(
    total_goals: float, target: OutcomeProbabilities
) -> LambdaSplit | None:
    """Find the home/away split of ``total_goals`` matching ``target``.

    ``steps + 1`` evenly spaced splits are scored by the squared error of
    their 1X2 probabilities.  ``None`` is returned when no split produced any
    probability mass or when the best error exceeds the tolerance.
    """

    if not math.isfinite(total_goals) or total_goals <= 0:
        raise InvalidInputError("Total goals must be a positive number")
    if not math.isclose(target.total, 1.0, abs_tol=1e-6):
        raise InvalidInputError("Target probabilities must sum to one")

    best: LambdaSplit | None = None
    for step in range(SOLVER_STEPS + 1):
        lambda_home = total_goals * step / SOLVER_STEPS
        lambda_away = max(0.0, total_goals - lambda_home)
        probabilities, mass = outcome_probabilities(lambda_home, lambda_away)
        if mass <= 0.0:
            continue
        error = probabilities.squared_error(target)
        if best is None or error < best.error:
            best = LambdaSplit(home=lambda_home, away=lambda_away, error=error)

    if best is None:
        logger.warning("No split of %.4f goals produced probability mass", total_goals)
        return None
    if best.error > SOLVER_TOLERANCE:
        logger.info(
            "Best split %.4f/%.4f misses target by %.6f (tolerance %.4f)",
            best.home,
            best.away,
            best.error,
            SOLVER_TOLERANCE,
        )
        return None
    logger.debug("Derived rates %.4f/%.4f (error %.6g)", best.home, best.away, best.error)
    return best


# ---------------------------------------------------------------------------
# Total goals from an over/under price
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True, slots=True)
class LineSettlement:
    """Win/loss/push probabilities for the over side of a total line."""

    win: float
    loss: float
    push: float


def _poisson_cdf(lam: float, k: int) -> float:
    if k < 0:
        return 0.0
    return sum(poisson(lam, i) for i in range(k + 1))


def settle_total_line(lambda_total: float, line: float) -> LineSettlement:
    """Settle the over side of a half or whole goal line."""

    floor_value = math.floor(line + 1e-9)
    win = 1.0 - _poisson_cdf(lambda_total, floor_value)
    push = 0.0
    if abs(line - floor_value) < 1e-6:
        push = poisson(lambda_total, floor_value)
    loss = max(0.0, 1.0 - win - push)
    return LineSettlement(win=win, loss=loss, push=push)


def _settled_over(settlement: LineSettlement) -> float:
    decided = settlement.win + settlement.loss
    return 0.0 if decided <= 0.0 else settlement.win / decided


def probability_total_over(lambda_total: float, line: float) -> float:
    """Push-free probability of the over on ``line`` for a Poisson total.

    Quarter lines are settled as a split stake on the two adjacent lines.
    """

    if line < 0:
        return 1.0
    normalised = round(line * 4) / 4
    if abs(normalised - line) > 1e-6:
        return _settled_over(settle_total_line(lambda_total, line))
    if round(normalised * 4) % 4 in (1, 3):
        low = settle_total_line(lambda_total, normalised - 0.25)
        high = settle_total_line(lambda_total, normalised + 0.25)
        win = low.win + high.win
        loss = low.loss + high.loss
        decided = win + loss
        return 0.0 if decided <= 0.0 else win / decided
    return _settled_over(settle_total_line(lambda_total, normalised))


def solve_total_goals(line: float, target_over: float) -> float | None:
    """Return the expected total whose over probability on ``line`` matches."""

    tolerance = TOTAL_SOLVER_TOLERANCE
    if target_over <= 0 or target_over >= 1:
        return None

    low = 0.01
    high = 10.0
    low_prob = probability_total_over(low, line)
    high_prob = probability_total_over(high, line)

    guard = 0
    while high_prob < target_over - tolerance and high < 25 and guard < 20:
        high *= 1.5
        high_prob = probability_total_over(high, line)
        guard += 1

    guard = 0
    while low_prob > target_over + tolerance and low > 1e-6 and guard < 20:
        low *= 0.5
        low_prob = probability_total_over(low, line)
        guard += 1

    if low_prob > target_over or high_prob < target_over:
        logger.info(
            "Over probability %.4f on line %s is not bracketed by [%.4f, %.4f]",
            target_over,
            line,
            low,
            high,
        )
        return None

    for _ in range(TOTAL_SOLVER_ITERATIONS):
        mid = (low + high) / 2
        mid_prob = probability_total_over(mid, line)
        if abs(mid_prob - target_over) < tolerance:
            return mid
        if mid_prob < target_over:
            low = mid
        else:
            high = mid
    return (low + high) / 2


__all__ = [
    "LambdaSplit",
    "LineSettlement",
    "OutcomeProbabilities",
    "SOLVER_STEPS",
    "SOLVER_TOLERANCE",
    "derive_lambdas",
    "outcome_probabilities",
    "probability_total_over",
    "settle_total_line",
    "solve_total_goals",
]
