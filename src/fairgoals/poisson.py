"""Poisson density and scoreline probability matrices.

Scorelines are modelled as two independent Poisson processes, one per team.
Matrices are truncated at a fixed goal count: mass beyond the bound is dropped
rather than re-normalised, so the cells of a matrix sum to slightly less than
one.  Three bounds are used across the package:

``MAX_GOALS_DISPLAY``
    the sub-grid printed for humans,
``MAX_GOALS_CALC``
    the per-half grid aggregated by the market evaluators,
``MAX_GOALS_SOLVER``
    the full-time grid used when reconciling market prices.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import List, Sequence, Tuple

import numpy as np

MAX_GOALS_DISPLAY = 5
MAX_GOALS_CALC = 8
MAX_GOALS_SOLVER = 12
FACTORIAL_CACHE_SIZE = MAX_GOALS_SOLVER + 8 + 1

logger = logging.getLogger(__name__)


def _python_factorial(n: int) -> float:
    result = 1.0
    for value in range(2, n + 1):
        result *= value
    return result


FACTORIALS: Tuple[float, ...] = tuple(
    _python_factorial(n) for n in range(FACTORIAL_CACHE_SIZE)
)


def poisson(lam: float, k: int) -> float:
    """Return ``P(k goals)`` for a Poisson rate ``lam``.

    Goal counts beyond the factorial table are treated as impossible, as are
    negative rates and negative counts.
    """

    if lam < 0 or k < 0:
        return 0.0
    if k >= len(FACTORIALS):
        return 0.0
    return (lam**k) * math.exp(-lam) / FACTORIALS[k]


def poisson_vector(lam: float, max_goals: int) -> List[float]:
    """Return ``[poisson(lam, 0), ..., poisson(lam, max_goals)]``."""

    return [poisson(lam, k) for k in range(max_goals + 1)]


@dataclasses.dataclass(frozen=True, slots=True, eq=False)
class ScorelineMatrix:
    """Joint probability grid indexed by ``(home_goals, away_goals)``."""

    lambda_home: float
    lambda_away: float
    grid: np.ndarray

    @property
    def max_goals(self) -> int:
        return int(self.grid.shape[0]) - 1

    def probability(self, home_goals: int, away_goals: int) -> float:
        if not (0 <= home_goals <= self.max_goals and 0 <= away_goals <= self.max_goals):
            return 0.0
        return float(self.grid[home_goals, away_goals])

    def total_mass(self) -> float:
        """Sum of all cells; short of one by the truncated tail."""

        return float(self.grid.sum())

    def rows(self) -> List[List[float]]:
        """Plain nested lists for tight pure-Python loops."""

        return self.grid.tolist()

    def display(self, max_goals: int = MAX_GOALS_DISPLAY) -> List[List[float]]:
        """Top-left sub-grid as percentages."""

        limit = min(max_goals, self.max_goals)
        return (self.grid[: limit + 1, : limit + 1] * 100.0).tolist()


def build_scoreline_matrix(
    lambda_home: float, lambda_away: float, max_goals: int = MAX_GOALS_CALC
) -> ScorelineMatrix:
    """Build the outer product of the two teams' Poisson vectors."""

    if max_goals < 0:
        raise ValueError("max_goals must be non-negative")
    home = np.asarray(poisson_vector(lambda_home, max_goals), dtype=np.float64)
    away = np.asarray(poisson_vector(lambda_away, max_goals), dtype=np.float64)
    grid = np.outer(home, away)
    grid.setflags(write=False)
    logger.debug(
        "Built %dx%d scoreline matrix for rates %.4f/%.4f (mass %.6f)",
        max_goals + 1,
        max_goals + 1,
        lambda_home,
        lambda_away,
        float(grid.sum()),
    )
    return ScorelineMatrix(lambda_home=lambda_home, lambda_away=lambda_away, grid=grid)


def matrix_from_rows(rows: Sequence[Sequence[float]]) -> ScorelineMatrix:
    """Wrap an explicit grid, mainly for tests and external collaborators."""

    grid = np.array(rows, dtype=np.float64)
    if grid.ndim != 2 or grid.shape[0] != grid.shape[1]:
        raise ValueError("Scoreline matrices must be square")
    if (grid < 0).any():
        raise ValueError("Scoreline probabilities must be non-negative")
    grid.setflags(write=False)
    return ScorelineMatrix(lambda_home=float("nan"), lambda_away=float("nan"), grid=grid)


__all__ = [
    "FACTORIALS",
    "FACTORIAL_CACHE_SIZE",
    "MAX_GOALS_CALC",
    "MAX_GOALS_DISPLAY",
    "MAX_GOALS_SOLVER",
    "ScorelineMatrix",
    "build_scoreline_matrix",
    "matrix_from_rows",
    "poisson",
    "poisson_vector",
]
