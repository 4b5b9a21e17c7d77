"""Tests for the standard market board."""

from __future__ import annotations

import polars as pl
import pytest

from fairgoals.board import (
    FRAME_SCHEMA,
    MarketPrice,
    asian_handicaps,
    both_teams_to_score,
    double_chance,
    draw_no_bet,
    half_time_full_time,
    markets_frame,
    match_result,
    price_all_markets,
    total_goals,
)
from fairgoals.errors import ModelNotReadyError
from fairgoals.markets import joint_mass
from fairgoals.model import NO_MODEL, ModelState


def test_match_result_rows(forward_model: ModelState) -> None:
    rows = match_result(forward_model)
    assert [row.selection for row in rows] == ["Home (1)", "Draw (X)", "Away (2)"]
    assert rows[0].probability > rows[2].probability


def test_double_chance_rows(forward_model: ModelState) -> None:
    result = {row.selection: row.probability for row in match_result(forward_model)}
    chances = {row.selection: row.probability for row in double_chance(forward_model)}
    assert chances["1X"] == pytest.approx(result["Home (1)"] + result["Draw (X)"])


def test_draw_no_bet_sums_to_one(forward_model: ModelState) -> None:
    home, away = draw_no_bet(forward_model)
    assert home.probability + away.probability == pytest.approx(1.0)
    assert home.probability > away.probability
    assert not home.degenerate


def test_draw_no_bet_degenerate_for_goalless_model(goalless_model: ModelState) -> None:
    rows = draw_no_bet(goalless_model)
    assert all(row.degenerate for row in rows)


def test_btts_rows(forward_model: ModelState) -> None:
    yes, no = both_teams_to_score(forward_model)
    assert yes.selection == "Yes"
    assert yes.probability + no.probability == pytest.approx(
        joint_mass(forward_model.matrix_h1, forward_model.matrix_h2)
    )


def test_total_goals_rows(forward_model: ModelState) -> None:
    rows = total_goals(forward_model, [1.5, 2.5])
    assert [row.selection for row in rows] == ["Over 1.5", "Under 1.5", "Over 2.5", "Under 2.5"]
    assert rows[0].probability > rows[2].probability


def test_half_time_full_time_covers_nine_outcomes(forward_model: ModelState) -> None:
    rows = half_time_full_time(forward_model)
    assert len(rows) == 9
    assert rows[0].selection == "1 / 1"
    assert sum(row.probability for row in rows) == pytest.approx(
        joint_mass(forward_model.matrix_h1, forward_model.matrix_h2)
    )


def test_asian_handicap_rows(forward_model: ModelState) -> None:
    rows = asian_handicaps(forward_model, [-0.75, 0.0])
    assert [row.selection for row in rows] == [
        "Home -0.75",
        "Away +0.75",
        "Home 0",
        "Away 0",
    ]


CORE_MARKETS = {
    "1X2",
    "Double Chance",
    "Draw No Bet",
    "Both Teams To Score",
    "Total Goals",
    "Half Time / Full Time",
    "Asian Handicap",
}


def test_price_all_markets_uses_default_lines(forward_model: ModelState) -> None:
    rows = price_all_markets(forward_model, extended=False)
    assert len(rows) == 3 + 3 + 2 + 2 + 14 + 9 + 34
    assert {row.market for row in rows} == CORE_MARKETS


def test_price_all_markets_extended_tables(forward_model: ModelState) -> None:
    rows = price_all_markets(forward_model)
    assert len(rows) == 67 + 18 + 2 * 26 + 2 * 19 + 15 + 15 + 2 * 14
    assert {row.market for row in rows} == CORE_MARKETS | {
        "1H Asian Handicap",
        "Home Team Goals",
        "Away Team Goals",
        "Home Win Combos",
        "Away Win Combos",
        "Draw Combos",
        "BTTS Combos",
        "Home Team Goal Combos",
        "Away Team Goal Combos",
    }
    assert all(0.0 <= row.probability <= 1.0 for row in rows)


def test_price_all_markets_requires_model() -> None:
    with pytest.raises(ModelNotReadyError):
        price_all_markets(NO_MODEL)


def test_markets_frame_columns(forward_model: ModelState) -> None:
    frame = markets_frame(match_result(forward_model), precision=3)
    assert frame.columns == list(FRAME_SCHEMA)
    assert frame.height == 3
    first = frame.row(0, named=True)
    assert first["fair_odds"] == pytest.approx(1 / first["probability"], abs=1e-3)
    assert first["percent"] == f"{first['probability'] * 100:.3f}"


def test_markets_frame_marks_degenerate_rows() -> None:
    frame = markets_frame(
        [
            MarketPrice("Draw No Bet", "Home (1)", 0.0, degenerate=True),
            MarketPrice("Draw No Bet", "Away (2)", 0.0, degenerate=True),
        ]
    )
    assert frame["percent"].to_list() == ["N/A", "N/A"]
    assert frame["fair_odds"].null_count() == 2


def test_markets_frame_empty() -> None:
    frame = markets_frame([])
    assert frame.height == 0
    assert frame.columns == list(FRAME_SCHEMA)
    assert frame.dtypes == [pl.String, pl.String, pl.Float64, pl.String, pl.Float64]


def test_zero_probability_is_bounded() -> None:
    row = MarketPrice("Correct Score", "9-9", 0.0)
    assert row.formatted.fair_odds == pytest.approx(1e9)
