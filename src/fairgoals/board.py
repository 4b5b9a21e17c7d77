"""Standard market board built on the generic evaluators.

Each builder returns a list of :class:`MarketPrice` rows; :func:`markets_frame`
materialises any collection of rows as a Polars dataframe for display or
export.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Iterable, List, Sequence

import polars as pl

from .aggregates import goal_aggregates, half_aggregates, half_handicap_price
from .combos import (
    BTTS_COMBOS,
    DRAW_COMBOS,
    TEAM_GOAL_COMBOS,
    WIN_COMBOS,
    Combo,
    sweep_combos,
    team_combos,
)
from .conditions import ConditionSet, MatchResult, TotalCondition, TotalKind
from .config import DEFAULT_HANDICAP_LINES, DEFAULT_TOTAL_LINES
from .handicap import DEGENERATE_PUSH, HandicapPrice, asian_handicap_price
from .markets import price_market
from .model import ModelHandle, require_model
from .utils import FormattedResult, clamp_probability, format_goal_line, format_result

logger = logging.getLogger(__name__)

FRAME_SCHEMA = {
    "market": pl.String,
    "selection": pl.String,
    "probability": pl.Float64,
    "percent": pl.String,
    "fair_odds": pl.Float64,
}

FIRST_HALF_HANDICAP_LINES = (-1.0, -0.75, -0.5, -0.25, 0.0, 0.25, 0.5, 0.75, 1.0)
TEAM_GOAL_LINES = (0.5, 1.5, 2.5)
TEAM_EXACT_GOALS = 4
TEAM_GOAL_RANGES = ((1, 2), (1, 3), (2, 3))


@dataclasses.dataclass(frozen=True, slots=True)
class MarketPrice:
    """Fair price of one selection on the market board."""

    market: str
    selection: str
    probability: float
    degenerate: bool = False

    @property
    def formatted(self) -> FormattedResult:
        return format_result(self.probability)

    def to_record(self, precision: int = 2) -> dict[str, object]:
        """Flatten into a row; degenerate selections carry no price."""

        if self.degenerate:
            return {
                "market": self.market,
                "selection": self.selection,
                "probability": None,
                "percent": "N/A",
                "fair_odds": None,
            }
        result = format_result(self.probability, precision)
        return {
            "market": self.market,
            "selection": self.selection,
            "probability": result.probability,
            "percent": result.percent,
            "fair_odds": round(result.fair_odds, precision),
        }


def _ft_result(model: ModelHandle, result: MatchResult) -> float:
    return price_market(model, ConditionSet(ft_result=result))


def match_result(model: ModelHandle) -> List[MarketPrice]:
    return [
        MarketPrice("1X2", "Home (1)", _ft_result(model, MatchResult.HOME)),
        MarketPrice("1X2", "Draw (X)", _ft_result(model, MatchResult.DRAW)),
        MarketPrice("1X2", "Away (2)", _ft_result(model, MatchResult.AWAY)),
    ]


def double_chance(model: ModelHandle) -> List[MarketPrice]:
    return [
        MarketPrice("Double Chance", "1X", _ft_result(model, MatchResult.HOME_OR_DRAW)),
        MarketPrice("Double Chance", "12", _ft_result(model, MatchResult.HOME_OR_AWAY)),
        MarketPrice("Double Chance", "X2", _ft_result(model, MatchResult.DRAW_OR_AWAY)),
    ]


def draw_no_bet(model: ModelHandle) -> List[MarketPrice]:
    """Home and away with the draw refunded.

    The draw is taken as the complement of the two wins so that the truncated
    tail counts towards the refunded stake.
    """

    home = _ft_result(model, MatchResult.HOME)
    away = _ft_result(model, MatchResult.AWAY)
    draw = 1.0 - home - away
    if draw > DEGENERATE_PUSH:
        logger.debug("Draw no bet is a certain push (draw %.6f)", draw)
        return [
            MarketPrice("Draw No Bet", "Home (1)", 0.0, degenerate=True),
            MarketPrice("Draw No Bet", "Away (2)", 0.0, degenerate=True),
        ]
    remaining = 1.0 - draw
    return [
        MarketPrice("Draw No Bet", "Home (1)", home / remaining),
        MarketPrice("Draw No Bet", "Away (2)", away / remaining),
    ]


def both_teams_to_score(model: ModelHandle) -> List[MarketPrice]:
    return [
        MarketPrice("Both Teams To Score", "Yes", price_market(model, ConditionSet(ft_btts=True))),
        MarketPrice("Both Teams To Score", "No", price_market(model, ConditionSet(ft_btts=False))),
    ]


def total_goals(
    model: ModelHandle, lines: Sequence[float] = DEFAULT_TOTAL_LINES
) -> List[MarketPrice]:
    rows: List[MarketPrice] = []
    for line in lines:
        over = ConditionSet(ft_total=TotalCondition(kind=TotalKind.OVER, value=line))
        under = ConditionSet(ft_total=TotalCondition(kind=TotalKind.UNDER, value=line))
        text = format_goal_line(line)
        rows.append(MarketPrice("Total Goals", f"Over {text}", price_market(model, over)))
        rows.append(MarketPrice("Total Goals", f"Under {text}", price_market(model, under)))
    return rows


_HTFT_RESULTS = (MatchResult.HOME, MatchResult.DRAW, MatchResult.AWAY)


def half_time_full_time(model: ModelHandle) -> List[MarketPrice]:
    rows: List[MarketPrice] = []
    for half_time in _HTFT_RESULTS:
        for full_time in _HTFT_RESULTS:
            conditions = ConditionSet(h1_result=half_time, ft_result=full_time)
            rows.append(
                MarketPrice(
                    "Half Time / Full Time",
                    f"{half_time.value} / {full_time.value}",
                    price_market(model, conditions),
                )
            )
    return rows


def _handicap_rows(market: str, price: HandicapPrice) -> List[MarketPrice]:
    return [
        MarketPrice(
            market, f"Home {price.home_label}", price.home, degenerate=price.degenerate
        ),
        MarketPrice(
            market, f"Away {price.away_label}", price.away, degenerate=price.degenerate
        ),
    ]


def asian_handicaps(
    model: ModelHandle, lines: Sequence[float] = DEFAULT_HANDICAP_LINES
) -> List[MarketPrice]:
    rows: List[MarketPrice] = []
    for line in lines:
        rows.extend(_handicap_rows("Asian Handicap", asian_handicap_price(model, line)))
    return rows


def first_half_handicaps(
    model: ModelHandle, lines: Sequence[float] = FIRST_HALF_HANDICAP_LINES
) -> List[MarketPrice]:
    state = require_model(model)
    rows: List[MarketPrice] = []
    for line in lines:
        price = half_handicap_price(line, state.matrix_h1)
        rows.extend(_handicap_rows("1H Asian Handicap", price))
    return rows


def _side(home: bool) -> str:
    return "Home" if home else "Away"


def _over_under_rows(
    market: str, prefix: str, goals: Sequence[float], lines: Iterable[float]
) -> List[MarketPrice]:
    rows: List[MarketPrice] = []
    for line in lines:
        cut = math.floor(line) + 1
        text = format_goal_line(line)
        over = clamp_probability(sum(goals[cut:]))
        under = clamp_probability(sum(goals[:cut]))
        rows.append(MarketPrice(market, f"{prefix}Over {text}", over))
        rows.append(MarketPrice(market, f"{prefix}Under {text}", under))
    return rows


def team_goals(model: ModelHandle, home: bool) -> List[MarketPrice]:
    """Goal lines, exact counts and ranges for one team's own goals."""

    state = require_model(model)
    full_time = goal_aggregates(state)
    first = half_aggregates(state.matrix_h1)
    second = half_aggregates(state.matrix_h2)
    if home:
        goals, goals_h1, goals_h2 = full_time.home_goals, first.home_goals, second.home_goals
    else:
        goals, goals_h1, goals_h2 = full_time.away_goals, first.away_goals, second.away_goals

    market = f"{_side(home)} Team Goals"
    rows = _over_under_rows(market, "", goals, TEAM_GOAL_LINES)
    rows.extend(_over_under_rows(market, "1H ", goals_h1, TEAM_GOAL_LINES))
    rows.extend(_over_under_rows(market, "2H ", goals_h2, TEAM_GOAL_LINES))
    for count in range(TEAM_EXACT_GOALS):
        rows.append(MarketPrice(market, f"Exactly {count}", goals[count]))
    rows.append(
        MarketPrice(
            market,
            f"{TEAM_EXACT_GOALS}+",
            clamp_probability(sum(goals[TEAM_EXACT_GOALS:])),
        )
    )
    for low, high in TEAM_GOAL_RANGES:
        rows.append(
            MarketPrice(market, f"{low}-{high}", clamp_probability(sum(goals[low : high + 1])))
        )
    return rows


def _combo_rows(model: ModelHandle, market: str, combos: Sequence[Combo]) -> List[MarketPrice]:
    state = require_model(model)
    probabilities = sweep_combos(combos, state.matrix_h1, state.matrix_h2)
    return [
        MarketPrice(market, combo.label, probability)
        for combo, probability in zip(combos, probabilities)
    ]


def win_combos(model: ModelHandle, home: bool) -> List[MarketPrice]:
    return _combo_rows(model, f"{_side(home)} Win Combos", team_combos(WIN_COMBOS, home))


def team_goal_combos(model: ModelHandle, home: bool) -> List[MarketPrice]:
    return _combo_rows(
        model, f"{_side(home)} Team Goal Combos", team_combos(TEAM_GOAL_COMBOS, home)
    )


def draw_combos(model: ModelHandle) -> List[MarketPrice]:
    return _combo_rows(model, "Draw Combos", DRAW_COMBOS)


def btts_combos(model: ModelHandle) -> List[MarketPrice]:
    """Both-teams-to-score combinations, including the per-half splits.

    The half splits multiply the two independent halves directly; a half
    without both teams scoring is the rest of that half's truncated mass.
    """

    state = require_model(model)
    rows = _combo_rows(state, "BTTS Combos", BTTS_COMBOS)
    first = half_aggregates(state.matrix_h1)
    second = half_aggregates(state.matrix_h2)
    yes_h1, yes_h2 = first.btts, second.btts
    no_h1 = clamp_probability(sum(first.total_goals) - yes_h1)
    no_h2 = clamp_probability(sum(second.total_goals) - yes_h2)
    rows.extend(
        [
            MarketPrice("BTTS Combos", "IGG & IIGG", yes_h1 * yes_h2),
            MarketPrice("BTTS Combos", "IGG & IING", yes_h1 * no_h2),
            MarketPrice("BTTS Combos", "ING & IIGG", no_h1 * yes_h2),
            MarketPrice("BTTS Combos", "ING & IING", no_h1 * no_h2),
            MarketPrice(
                "BTTS Combos",
                "IGG or IIGG",
                clamp_probability(yes_h1 + yes_h2 - yes_h1 * yes_h2),
            ),
        ]
    )
    return rows


def price_all_markets(
    model: ModelHandle,
    *,
    total_lines: Sequence[float] = DEFAULT_TOTAL_LINES,
    handicap_lines: Sequence[float] = DEFAULT_HANDICAP_LINES,
    extended: bool = True,
) -> List[MarketPrice]:
    """Price every board market for ``model``.

    ``extended`` adds the first-half handicap, team goal markets and the
    combination tables after the core markets.
    """

    state = require_model(model)
    rows: List[MarketPrice] = []
    rows.extend(match_result(state))
    rows.extend(double_chance(state))
    rows.extend(draw_no_bet(state))
    rows.extend(both_teams_to_score(state))
    rows.extend(total_goals(state, total_lines))
    rows.extend(half_time_full_time(state))
    rows.extend(asian_handicaps(state, handicap_lines))
    if extended:
        rows.extend(first_half_handicaps(state))
        for home in (True, False):
            rows.extend(team_goals(state, home))
        for home in (True, False):
            rows.extend(win_combos(state, home))
        rows.extend(draw_combos(state))
        rows.extend(btts_combos(state))
        for home in (True, False):
            rows.extend(team_goal_combos(state, home))
    logger.info("Priced %d board selections", len(rows))
    return rows


def markets_frame(rows: Iterable[MarketPrice], precision: int = 2) -> pl.DataFrame:
    """Materialise ``rows`` as a dataframe with one selection per row."""

    records = [row.to_record(precision) for row in rows]
    if not records:
        return pl.DataFrame(schema=FRAME_SCHEMA)
    return pl.DataFrame(records, schema=FRAME_SCHEMA)


__all__ = [
    "FIRST_HALF_HANDICAP_LINES",
    "FRAME_SCHEMA",
    "MarketPrice",
    "TEAM_GOAL_LINES",
    "asian_handicaps",
    "both_teams_to_score",
    "btts_combos",
    "double_chance",
    "draw_combos",
    "draw_no_bet",
    "first_half_handicaps",
    "half_time_full_time",
    "markets_frame",
    "match_result",
    "price_all_markets",
    "team_goal_combos",
    "team_goals",
    "total_goals",
    "win_combos",
]
