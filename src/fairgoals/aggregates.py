"""Goal-count distributions and single-half markets."""

from __future__ import annotations

import dataclasses
from typing import List

from .handicap import (
    HANDICAP_EPSILON,
    HandicapOutcome,
    HandicapPrice,
    blend_quarter_line,
    is_quarter_line,
)
from .model import ModelHandle, require_model
from .poisson import ScorelineMatrix
from .utils import clamp_probability


@dataclasses.dataclass(frozen=True, slots=True)
class HalfAggregates:
    """Marginal goal distributions of a single half."""

    home_goals: List[float]
    away_goals: List[float]
    total_goals: List[float]
    btts: float


@dataclasses.dataclass(frozen=True, slots=True)
class GoalAggregates:
    """Full-time distributions and cross-half markets of a model."""

    home_goals: List[float]
    away_goals: List[float]
    total_goals: List[float]
    home_scores_both_halves: float
    away_scores_both_halves: float
    both_halves_over_1_5: float
    both_halves_under_1_5: float
    first_half_higher: float
    second_half_higher: float
    halves_equal: float

    def total_at_least(self, goals: int) -> float:
        return clamp_probability(sum(self.total_goals[goals:]))

    def total_between(self, low: int, high: int) -> float:
        """Probability of ``low`` to ``high`` match goals, both inclusive."""

        start = max(0, low)
        end = min(len(self.total_goals) - 1, high)
        if start > end:
            return 0.0
        return clamp_probability(sum(self.total_goals[start : end + 1]))


def half_aggregates(matrix: ScorelineMatrix) -> HalfAggregates:
    size = matrix.max_goals + 1
    home_goals = [0.0] * size
    away_goals = [0.0] * size
    total_goals = [0.0] * (2 * size - 1)
    btts = 0.0
    for h, row in enumerate(matrix.rows()):
        for a, probability in enumerate(row):
            if probability == 0.0:
                continue
            home_goals[h] += probability
            away_goals[a] += probability
            total_goals[h + a] += probability
            if h > 0 and a > 0:
                btts += probability
    return HalfAggregates(
        home_goals=home_goals,
        away_goals=away_goals,
        total_goals=total_goals,
        btts=clamp_probability(btts),
    )


def goal_aggregates(model: ModelHandle) -> GoalAggregates:
    """Sweep the joint half x half space once for every aggregate market."""

    state = require_model(model)
    rows_h1 = state.matrix_h1.rows()
    rows_h2 = state.matrix_h2.rows()
    per_team = state.matrix_h1.max_goals + state.matrix_h2.max_goals + 1
    home_goals = [0.0] * per_team
    away_goals = [0.0] * per_team
    total_goals = [0.0] * (2 * per_team - 1)

    home_both = away_both = 0.0
    both_over = both_under = 0.0
    first_higher = second_higher = equal = 0.0

    for h1, row_h1 in enumerate(rows_h1):
        for a1, prob_h1 in enumerate(row_h1):
            if prob_h1 == 0.0:
                continue
            first_total = h1 + a1
            for h2, row_h2 in enumerate(rows_h2):
                for a2, prob_h2 in enumerate(row_h2):
                    if prob_h2 == 0.0:
                        continue
                    probability = prob_h1 * prob_h2
                    second_total = h2 + a2
                    home_goals[h1 + h2] += probability
                    away_goals[a1 + a2] += probability
                    total_goals[first_total + second_total] += probability

                    if h1 > 0 and h2 > 0:
                        home_both += probability
                    if a1 > 0 and a2 > 0:
                        away_both += probability
                    if first_total >= 2 and second_total >= 2:
                        both_over += probability
                    if first_total <= 1 and second_total <= 1:
                        both_under += probability

                    if first_total > second_total:
                        first_higher += probability
                    elif second_total > first_total:
                        second_higher += probability
                    else:
                        equal += probability

    return GoalAggregates(
        home_goals=home_goals,
        away_goals=away_goals,
        total_goals=total_goals,
        home_scores_both_halves=clamp_probability(home_both),
        away_scores_both_halves=clamp_probability(away_both),
        both_halves_over_1_5=clamp_probability(both_over),
        both_halves_under_1_5=clamp_probability(both_under),
        first_half_higher=clamp_probability(first_higher),
        second_half_higher=clamp_probability(second_higher),
        halves_equal=clamp_probability(equal),
    )


def half_handicap(line: float, matrix: ScorelineMatrix) -> HandicapOutcome:
    """Three-way handicap buckets within a single half."""

    home_win = push = away_win = 0.0
    for h, row in enumerate(matrix.rows()):
        for a, probability in enumerate(row):
            if probability == 0.0:
                continue
            margin = h + line - a
            if margin > HANDICAP_EPSILON:
                home_win += probability
            elif margin < -HANDICAP_EPSILON:
                away_win += probability
            else:
                push += probability
    return HandicapOutcome(home_win=home_win, push=push, away_win=away_win)


def half_handicap_price(line: float, matrix: ScorelineMatrix) -> HandicapPrice:
    """Asian handicap on a single half, quarter lines blended as for full time."""

    if not is_quarter_line(line):
        outcome = half_handicap(line, matrix)
        if outcome.is_all_push:
            return HandicapPrice(line=line, home=0.0, away=0.0, degenerate=True)
        home, away = outcome.refunded()
        return HandicapPrice(line=line, home=home, away=away)

    low_home, low_away = half_handicap(line - 0.25, matrix).refunded()
    high_home, high_away = half_handicap(line + 0.25, matrix).refunded()
    return HandicapPrice(
        line=line,
        home=blend_quarter_line(low_home, high_home),
        away=blend_quarter_line(low_away, high_away),
    )


__all__ = [
    "GoalAggregates",
    "HalfAggregates",
    "goal_aggregates",
    "half_aggregates",
    "half_handicap",
    "half_handicap_price",
]
