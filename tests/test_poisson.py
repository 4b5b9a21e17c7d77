"""Tests for the Poisson kernel and scoreline matrices."""

from __future__ import annotations

import math

import pytest

from fairgoals.poisson import (
    FACTORIAL_CACHE_SIZE,
    MAX_GOALS_CALC,
    MAX_GOALS_DISPLAY,
    build_scoreline_matrix,
    matrix_from_rows,
    poisson,
    poisson_vector,
)


def test_poisson_matches_closed_form() -> None:
    expected = 1.5**2 * math.exp(-1.5) / 2
    assert poisson(1.5, 2) == pytest.approx(expected)


def test_poisson_zero_rate_puts_all_mass_on_zero() -> None:
    assert poisson(0.0, 0) == 1.0
    assert poisson(0.0, 3) == 0.0


def test_poisson_rejects_out_of_domain_inputs() -> None:
    assert poisson(-0.1, 1) == 0.0
    assert poisson(1.0, -1) == 0.0
    assert poisson(1.0, FACTORIAL_CACHE_SIZE) == 0.0


def test_poisson_vector_length() -> None:
    assert len(poisson_vector(1.2, MAX_GOALS_CALC)) == MAX_GOALS_CALC + 1


def test_matrix_is_outer_product() -> None:
    matrix = build_scoreline_matrix(1.3, 0.9)
    assert matrix.max_goals == MAX_GOALS_CALC
    assert matrix.probability(2, 1) == pytest.approx(poisson(1.3, 2) * poisson(0.9, 1))
    assert matrix.probability(MAX_GOALS_CALC + 1, 0) == 0.0
    assert matrix.probability(-1, 0) == 0.0


def test_matrix_mass_is_short_of_one() -> None:
    matrix = build_scoreline_matrix(2.0, 2.0, max_goals=3)
    assert 0.0 < matrix.total_mass() < 1.0


def test_matrix_grid_is_read_only() -> None:
    matrix = build_scoreline_matrix(1.0, 1.0)
    with pytest.raises(ValueError):
        matrix.grid[0, 0] = 0.5


def test_display_returns_percentages() -> None:
    matrix = build_scoreline_matrix(1.0, 1.0)
    display = matrix.display()
    assert len(display) == MAX_GOALS_DISPLAY + 1
    assert all(len(row) == MAX_GOALS_DISPLAY + 1 for row in display)
    assert display[0][0] == pytest.approx(100.0 * math.exp(-2.0))


def test_negative_bound_rejected() -> None:
    with pytest.raises(ValueError):
        build_scoreline_matrix(1.0, 1.0, max_goals=-1)


def test_matrix_from_rows_validates_shape_and_sign() -> None:
    matrix = matrix_from_rows([[0.5, 0.1], [0.2, 0.2]])
    assert matrix.max_goals == 1
    assert matrix.total_mass() == pytest.approx(1.0)
    with pytest.raises(ValueError, match="square"):
        matrix_from_rows([[0.5, 0.5]])
    with pytest.raises(ValueError, match="non-negative"):
        matrix_from_rows([[1.5, -0.5], [0.0, 0.0]])
