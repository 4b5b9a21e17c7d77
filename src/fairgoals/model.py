"""Goal-rate model state shared by every market evaluator.

A model run produces an immutable :class:`ModelState`: the full-time goal
rates, their first/second half split and one scoreline matrix per half.
Re-running the model builds a new state; existing states are never mutated,
so a query holding a reference keeps a consistent snapshot.  Code that may be
called before any model exists receives :data:`NO_MODEL` and should go
through :func:`require_model`.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import SupportsFloat, Union

from .errors import InvalidInputError, ModelNotReadyError, UnsolvableInverseError
from .poisson import MAX_GOALS_CALC, ScorelineMatrix, build_scoreline_matrix
from .solver import OutcomeProbabilities, derive_lambdas, solve_total_goals
from .utils import implied_probability_from_decimal, normalise_probabilities

FIRST_HALF_RATIO = 0.45
SECOND_HALF_RATIO = 0.55
PERCENT_SUM_TOLERANCE = 1.0

logger = logging.getLogger(__name__)


def _coerce_float(value: object, field: str) -> float:
    if isinstance(value, bool):
        raise InvalidInputError(f"{field} must be a number")
    if isinstance(value, (int, float, str)) or isinstance(value, SupportsFloat):
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise InvalidInputError(f"{field} must be a number, got {value!r}") from exc
        if not math.isfinite(number):
            raise InvalidInputError(f"{field} must be finite")
        return number
    raise InvalidInputError(
        f"{field} expected a float-compatible value, got {type(value).__name__}"
    )


@dataclasses.dataclass(frozen=True, slots=True)
class GoalRateSet:
    """Expected goals per team for the full match and each half."""

    home_ft: float
    away_ft: float
    home_h1: float
    away_h1: float
    home_h2: float
    away_h2: float

    @classmethod
    def from_full_time(cls, home_ft: float, away_ft: float) -> "GoalRateSet":
        if home_ft < 0 or away_ft < 0:
            raise InvalidInputError("Goal rates must be non-negative")
        return cls(
            home_ft=home_ft,
            away_ft=away_ft,
            home_h1=home_ft * FIRST_HALF_RATIO,
            away_h1=away_ft * FIRST_HALF_RATIO,
            home_h2=home_ft * SECOND_HALF_RATIO,
            away_h2=away_ft * SECOND_HALF_RATIO,
        )

    @property
    def supremacy(self) -> float:
        """Away minus home expected goals; negative favours the home team."""

        return self.away_ft - self.home_ft

    @property
    def expectancy(self) -> float:
        return self.home_ft + self.away_ft


@dataclasses.dataclass(frozen=True, slots=True)
class ModelState:
    """Immutable snapshot of one model run."""

    rates: GoalRateSet
    matrix_h1: ScorelineMatrix
    matrix_h2: ScorelineMatrix
    source: str = "rates"
    solver_error: float | None = None

    @classmethod
    def from_rates(
        cls,
        home_ft: float,
        away_ft: float,
        *,
        source: str = "rates",
        solver_error: float | None = None,
        max_goals: int = MAX_GOALS_CALC,
    ) -> "ModelState":
        """Split full-time rates into halves and build both half matrices."""

        rates = GoalRateSet.from_full_time(home_ft, away_ft)
        state = cls(
            rates=rates,
            matrix_h1=build_scoreline_matrix(rates.home_h1, rates.away_h1, max_goals),
            matrix_h2=build_scoreline_matrix(rates.home_h2, rates.away_h2, max_goals),
            source=source,
            solver_error=solver_error,
        )
        logger.info(
            "Model built from %s: home %.3f, away %.3f", source, home_ft, away_ft
        )
        return state

    @classmethod
    def from_supremacy(cls, supremacy: object, expectancy: object) -> "ModelState":
        """Forward model from goal supremacy and total goal expectancy.

        Negative supremacy favours the home team:
        ``home = (expectancy - supremacy) / 2``.
        """

        sup = _coerce_float(supremacy, "supremacy")
        exp = _coerce_float(expectancy, "expectancy")
        if exp <= 0:
            raise InvalidInputError("Expectancy must be a positive number")
        if abs(sup) > exp:
            raise InvalidInputError(
                "Absolute value of supremacy cannot be greater than expectancy"
            )
        return cls.from_rates((exp - sup) / 2, (exp + sup) / 2, source="supremacy")

    @classmethod
    def from_market(
        cls,
        prob_home: object,
        prob_draw: object,
        prob_away: object,
        total_goals: object,
    ) -> "ModelState":
        """Inverse model from 1X2 percentages and expected total goals."""

        percents = [
            _coerce_float(prob_home, "home probability"),
            _coerce_float(prob_draw, "draw probability"),
            _coerce_float(prob_away, "away probability"),
        ]
        total = _coerce_float(total_goals, "total goals")
        if any(value < 0 for value in percents):
            raise InvalidInputError("Probabilities must be non-negative")
        if abs(sum(percents) - 100.0) > PERCENT_SUM_TOLERANCE:
            raise InvalidInputError(
                f"Probabilities must sum to 100% (got {sum(percents):.2f}%)"
            )
        if total <= 0:
            raise InvalidInputError("Total goals must be a positive number")
        home, draw, away = normalise_probabilities(percents)
        target = OutcomeProbabilities(home=home, draw=draw, away=away)
        return cls._solve(total, target, source="market")

    @classmethod
    def from_odds(
        cls,
        home_odds: object,
        draw_odds: object,
        away_odds: object,
        total_line: object,
        over_odds: object,
        under_odds: object,
    ) -> "ModelState":
        """Inverse model from 1X2 prices and a priced total goals line.

        Bookmaker margin is removed proportionally from both markets before
        the expected total and the home/away split are solved.
        """

        prices = {
            "home odds": _coerce_float(home_odds, "home odds"),
            "draw odds": _coerce_float(draw_odds, "draw odds"),
            "away odds": _coerce_float(away_odds, "away odds"),
            "over odds": _coerce_float(over_odds, "over odds"),
            "under odds": _coerce_float(under_odds, "under odds"),
        }
        line = _coerce_float(total_line, "total line")
        if any(price <= 1.0 for price in prices.values()):
            raise InvalidInputError("All odds must be greater than 1.00")
        if line < 0:
            raise InvalidInputError("Total goals line must be zero or higher")

        home, draw, away = normalise_probabilities(
            [
                implied_probability_from_decimal(prices["home odds"]),
                implied_probability_from_decimal(prices["draw odds"]),
                implied_probability_from_decimal(prices["away odds"]),
            ]
        )
        over, _under = normalise_probabilities(
            [
                implied_probability_from_decimal(prices["over odds"]),
                implied_probability_from_decimal(prices["under odds"]),
            ]
        )
        total = solve_total_goals(line, over)
        if total is None or total <= 0:
            raise UnsolvableInverseError(
                "Unable to reconcile the total goals odds with the selected line"
            )
        target = OutcomeProbabilities(home=home, draw=draw, away=away)
        return cls._solve(total, target, source="odds")

    @classmethod
    def _solve(
        cls, total: float, target: OutcomeProbabilities, *, source: str
    ) -> "ModelState":
        split = derive_lambdas(total, target)
        if split is None:
            raise UnsolvableInverseError(
                "Unable to reconcile the 1X2 probabilities with the total goals market"
            )
        return cls.from_rates(
            split.home, split.away, source=source, solver_error=split.error
        )


class NoModel:
    """Placeholder for "no model calculated yet"."""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_MODEL"


NO_MODEL = NoModel()

ModelHandle = Union[ModelState, NoModel]


def require_model(model: ModelHandle) -> ModelState:
    """Return ``model`` or fail fast when nothing has been calculated."""

    if isinstance(model, ModelState):
        return model
    raise ModelNotReadyError("Please calculate the model before pricing markets")


__all__ = [
    "FIRST_HALF_RATIO",
    "GoalRateSet",
    "ModelHandle",
    "ModelState",
    "NO_MODEL",
    "NoModel",
    "SECOND_HALF_RATIO",
    "require_model",
]
