"""Generic market evaluation over the joint half-time x second-half space.

Every market except the Asian handicap is expressed as a
:class:`~fairgoals.conditions.ConditionSet` and priced by summing
``P(h1, a1) * P(h2, a2)`` over all first-half and second-half scorelines that
satisfy it.  Full-time scores are always ``h1 + h2`` and ``a1 + a2``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from .conditions import ConditionSet, Window
from .errors import InvalidInputError
from .model import ModelHandle, require_model
from .poisson import ScorelineMatrix
from .utils import FormattedResult, format_result

logger = logging.getLogger(__name__)

ConditionsLike = ConditionSet | Mapping[str, Any]


def as_condition_set(conditions: ConditionsLike) -> ConditionSet:
    """Accept a :class:`ConditionSet` or a plain mapping of its fields."""

    if isinstance(conditions, ConditionSet):
        return conditions
    try:
        return ConditionSet.model_validate(dict(conditions))
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid market conditions: {exc}") from exc


def evaluate_market(
    conditions: ConditionsLike,
    matrix_h1: ScorelineMatrix,
    matrix_h2: ScorelineMatrix,
) -> float:
    """Return the probability mass of all score paths satisfying ``conditions``.

    Half cells with exactly zero probability are skipped.  Because conditions
    combine with AND semantics, a failing first-half constraint prunes the
    whole second-half sweep for that cell.  The result is not re-normalised
    and falls short of the true probability by the truncated tail.
    """

    condition_set = as_condition_set(conditions)
    first_half = condition_set.predicate(Window.FIRST_HALF)
    second_half = condition_set.predicate(Window.SECOND_HALF)
    full_time = condition_set.predicate(Window.FULL_TIME)

    rows_h1 = matrix_h1.rows()
    rows_h2 = matrix_h2.rows()

    total = 0.0
    for h1, row_h1 in enumerate(rows_h1):
        for a1, prob_h1 in enumerate(row_h1):
            if prob_h1 == 0.0:
                continue
            if first_half is not None and not first_half(h1, a1):
                continue
            for h2, row_h2 in enumerate(rows_h2):
                for a2, prob_h2 in enumerate(row_h2):
                    if prob_h2 == 0.0:
                        continue
                    if second_half is not None and not second_half(h2, a2):
                        continue
                    if full_time is not None and not full_time(h1 + h2, a1 + a2):
                        continue
                    total += prob_h1 * prob_h2
    return total


def price_market(model: ModelHandle, conditions: ConditionsLike) -> float:
    """Evaluate ``conditions`` against a calculated model."""

    state = require_model(model)
    return evaluate_market(conditions, state.matrix_h1, state.matrix_h2)


def quote_market(
    model: ModelHandle, conditions: ConditionsLike, precision: int = 2
) -> FormattedResult:
    """Evaluate and format ``conditions`` as percentage and fair odds."""

    return format_result(price_market(model, conditions), precision)


def joint_mass(matrix_h1: ScorelineMatrix, matrix_h2: ScorelineMatrix) -> float:
    """Total truncated mass of the joint half x half space."""

    return matrix_h1.total_mass() * matrix_h2.total_mass()


__all__ = [
    "ConditionsLike",
    "as_condition_set",
    "evaluate_market",
    "joint_mass",
    "price_market",
    "quote_market",
]
