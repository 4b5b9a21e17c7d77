"""Property-based regression tests for the pricing primitives."""

from __future__ import annotations

import math

from hypothesis import given, settings, strategies as st

from fairgoals.handicap import evaluate_handicap, price_handicap
from fairgoals.markets import evaluate_market, joint_mass
from fairgoals.model import ModelState
from fairgoals.poisson import build_scoreline_matrix
from fairgoals.utils import fair_odds, format_result, odds_to_probability


def _rates() -> st.SearchStrategy[float]:
    return st.floats(min_value=0.0, max_value=4.0, allow_nan=False, allow_infinity=False)


@st.composite
def _models(draw: st.DrawFn) -> ModelState:
    return ModelState.from_rates(draw(_rates()), draw(_rates()))


@given(home=_rates(), away=_rates())
def test_matrix_mass_grows_with_bound(home: float, away: float) -> None:
    previous = 0.0
    for bound in range(0, 13):
        matrix = build_scoreline_matrix(home, away, bound)
        assert (matrix.grid >= 0.0).all()
        mass = matrix.total_mass()
        assert mass >= previous - 1e-15
        assert mass <= 1.0 + 1e-12
        previous = mass


@settings(max_examples=30, deadline=None)
@given(model=_models(), result=st.sampled_from(["1X", "12", "X2"]))
def test_double_chance_equals_sum_of_parts(model: ModelState, result: str) -> None:
    m1, m2 = model.matrix_h1, model.matrix_h2
    union = evaluate_market({"ft_result": result}, m1, m2)
    parts = sum(evaluate_market({"ft_result": part}, m1, m2) for part in result)
    assert math.isclose(union, parts, rel_tol=1e-12, abs_tol=1e-15)


@settings(max_examples=30, deadline=None)
@given(model=_models(), quarter=st.integers(min_value=-8, max_value=8))
def test_handicap_buckets_cover_mass(model: ModelState, quarter: int) -> None:
    m1, m2 = model.matrix_h1, model.matrix_h2
    outcome = evaluate_handicap(quarter * 0.25, m1, m2)
    assert math.isclose(outcome.total, joint_mass(m1, m2), rel_tol=1e-9, abs_tol=1e-12)


@settings(max_examples=30, deadline=None)
@given(model=_models(), quarter=st.sampled_from([-7, -5, -3, -1, 1, 3, 5, 7]))
def test_quarter_lines_never_exceed_one(model: ModelState, quarter: int) -> None:
    price = price_handicap(quarter * 0.25, model.matrix_h1, model.matrix_h2)
    assert 0.0 <= price.home <= 1.0 + 1e-12
    assert 0.0 <= price.away <= 1.0 + 1e-12


@given(probability=st.floats(min_value=0.0, max_value=1.0, allow_nan=False))
def test_formatted_odds_are_bounded(probability: float) -> None:
    result = format_result(probability)
    assert math.isfinite(result.fair_odds)
    assert result.fair_odds <= 1e9 * (1 + 1e-9)
    assert result.probability >= 1e-9


@given(probability=st.floats(min_value=1e-6, max_value=1.0, allow_nan=False))
def test_fair_odds_round_trip(probability: float) -> None:
    assert math.isclose(odds_to_probability(fair_odds(probability)), probability, rel_tol=1e-12)
