"""Combination markets priced in one sweep of the joint half x half space.

A combination is a selection label plus a predicate over one score path
``(h1, a1, h2, a2)``.  :func:`sweep_combos` prices any number of them in a
single pass over the two half matrices, so a whole table of related
selections costs no more than one :func:`~fairgoals.markets.evaluate_market`
call per path.

Team tables are written from the team's own point of view as
``(own_h1, opp_h1, own_h2, opp_h2)`` and mirrored for the away side by
:func:`team_view`.
"""

from __future__ import annotations

import dataclasses
from typing import Callable, List, Sequence, Tuple

from .poisson import ScorelineMatrix
from .utils import clamp_probability

PathPredicate = Callable[[int, int, int, int], bool]


@dataclasses.dataclass(frozen=True, slots=True)
class Combo:
    """One selection of a combination table."""

    label: str
    holds: PathPredicate


def team_view(check: PathPredicate, home: bool) -> PathPredicate:
    """Adapt a team-perspective predicate to home/away score paths."""

    if home:
        return check

    def mirrored(h1: int, a1: int, h2: int, a2: int) -> bool:
        return check(a1, h1, a2, h2)

    return mirrored


def sweep_combos(
    combos: Sequence[Combo], matrix_h1: ScorelineMatrix, matrix_h2: ScorelineMatrix
) -> List[float]:
    """Return the probability of every combo, in order, from one joint sweep."""

    rows_h1 = matrix_h1.rows()
    rows_h2 = matrix_h2.rows()
    totals = [0.0] * len(combos)
    for h1, row_h1 in enumerate(rows_h1):
        for a1, prob_h1 in enumerate(row_h1):
            if prob_h1 == 0.0:
                continue
            for h2, row_h2 in enumerate(rows_h2):
                for a2, prob_h2 in enumerate(row_h2):
                    if prob_h2 == 0.0:
                        continue
                    probability = prob_h1 * prob_h2
                    for index, combo in enumerate(combos):
                        if combo.holds(h1, a1, h2, a2):
                            totals[index] += probability
    return [clamp_probability(total) for total in totals]


def _between(value: int, low: int, high: int) -> bool:
    return low <= value <= high


def _wins(s1: int, o1: int, s2: int, o2: int) -> bool:
    return s1 + s2 > o1 + o2


def _wins_both_halves(s1: int, o1: int, s2: int, o2: int) -> bool:
    return s1 > o1 and s2 > o2


def _both_score(s1: int, o1: int, s2: int, o2: int) -> bool:
    return s1 + s2 >= 1 and o1 + o2 >= 1


TeamTable = Tuple[Tuple[str, PathPredicate], ...]

WIN_COMBOS: TeamTable = (
    ("Win & 1+I", lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and s1 + o1 >= 1),
    ("Win & 2+I", lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and s1 + o1 >= 2),
    ("Win & 2-3I", lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and _between(s1 + o1, 2, 3)),
    ("Win & 1+II", lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and s2 + o2 >= 1),
    ("Win & 2+II", lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and s2 + o2 >= 2),
    (
        "Win & 1+I & 1+II",
        lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and s1 + o1 >= 1 and s2 + o2 >= 1,
    ),
    ("Win & GG", lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and _both_score(s1, o1, s2, o2)),
    ("Win & GGI", lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and s1 >= 1 and o1 >= 1),
    ("Win & GGII", lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and s2 >= 1 and o2 >= 1),
    (
        "Win & 1+I & 2+",
        lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and s1 + o1 >= 1 and s1 + o1 + s2 + o2 >= 2,
    ),
    (
        "Win & 1+I & 3+",
        lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and s1 + o1 >= 1 and s1 + o1 + s2 + o2 >= 3,
    ),
    (
        "Win & 1-3I & 1-3II",
        lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2)
        and _between(s1 + o1, 1, 3)
        and _between(s2 + o2, 1, 3),
    ),
    (
        "Win & 1-2I & 1-2II",
        lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2)
        and _between(s1 + o1, 1, 2)
        and _between(s2 + o2, 1, 2),
    ),
    (
        "Win & 2+I & 4+",
        lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and s1 + o1 >= 2 and s1 + o1 + s2 + o2 >= 4,
    ),
    ("Win To Nil", lambda s1, o1, s2, o2: _wins(s1, o1, s2, o2) and o1 + o2 == 0),
    ("Win Both Halves", _wins_both_halves),
    (
        "Win Both Halves To Nil",
        lambda s1, o1, s2, o2: _wins_both_halves(s1, o1, s2, o2) and o1 + o2 == 0,
    ),
    (
        "Win Both Halves & 4+",
        lambda s1, o1, s2, o2: _wins_both_halves(s1, o1, s2, o2) and s1 + o1 + s2 + o2 >= 4,
    ),
    ("Lead At HT & Not Win", lambda s1, o1, s2, o2: s1 > o1 and s1 + s2 <= o1 + o2),
)

TEAM_GOAL_COMBOS: TeamTable = (
    ("1+I & 2+II", lambda s1, o1, s2, o2: s1 >= 1 and s2 >= 2),
    ("2+I & 1+II", lambda s1, o1, s2, o2: s1 >= 2 and s2 >= 1),
    ("2+I & 2+II", lambda s1, o1, s2, o2: s1 >= 2 and s2 >= 2),
    ("1+I & 1+II", lambda s1, o1, s2, o2: s1 >= 1 and s2 >= 1),
    ("Not 1+I & 1+II", lambda s1, o1, s2, o2: not (s1 >= 1 and s2 >= 1)),
    ("1-2I & 1-2II", lambda s1, o1, s2, o2: _between(s1, 1, 2) and _between(s2, 1, 2)),
    ("0-1I & 0-1II", lambda s1, o1, s2, o2: s1 <= 1 and s2 <= 1),
    ("0-1I & 0-2II", lambda s1, o1, s2, o2: s1 <= 1 and s2 <= 2),
    ("0-2I & 0-1II", lambda s1, o1, s2, o2: s1 <= 2 and s2 <= 1),
    ("0-2I & 0-2II", lambda s1, o1, s2, o2: s1 <= 2 and s2 <= 2),
    ("1+I & Team 2+", lambda s1, o1, s2, o2: s1 >= 1 and s1 + s2 >= 2),
    ("1+I & Team 3+", lambda s1, o1, s2, o2: s1 >= 1 and s1 + s2 >= 3),
    ("2+ & GG", lambda s1, o1, s2, o2: s1 + s2 >= 2 and _both_score(s1, o1, s2, o2)),
    ("3+ & GG", lambda s1, o1, s2, o2: s1 + s2 >= 3 and _both_score(s1, o1, s2, o2)),
)


def _draw(h1: int, a1: int, h2: int, a2: int) -> bool:
    return h1 + h2 == a1 + a2


DRAW_COMBOS: Tuple[Combo, ...] = (
    Combo("X & 0-2", lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2) and h1 + a1 + h2 + a2 <= 2),
    Combo("X & 2+", lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2) and h1 + a1 + h2 + a2 >= 2),
    Combo("X & 3+", lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2) and h1 + a1 + h2 + a2 >= 3),
    Combo("X & 4+", lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2) and h1 + a1 + h2 + a2 >= 4),
    Combo("X & GG", lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2) and h1 + h2 >= 1),
    Combo("X & 2+I", lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2) and h1 + a1 >= 2),
    Combo("X & GGI", lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2) and h1 >= 1 and a1 >= 1),
    Combo("X & NGI", lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2) and (h1 == 0 or a1 == 0)),
    Combo("X & GGII", lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2) and h2 >= 1 and a2 >= 1),
    Combo("X & NGII", lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2) and (h2 == 0 or a2 == 0)),
    Combo(
        "X & 1-3I & 1-3II",
        lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2)
        and _between(h1 + a1, 1, 3)
        and _between(h2 + a2, 1, 3),
    ),
    Combo(
        "X & 1-2I & 1-2II",
        lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2)
        and _between(h1 + a1, 1, 2)
        and _between(h2 + a2, 1, 2),
    ),
    Combo(
        "X & 0-2I & 0-2II",
        lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2) and h1 + a1 <= 2 and h2 + a2 <= 2,
    ),
    Combo(
        "X & 0-2I & 1-3II",
        lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2)
        and h1 + a1 <= 2
        and _between(h2 + a2, 1, 3),
    ),
    Combo(
        "X & 2+I & 4+",
        lambda h1, a1, h2, a2: _draw(h1, a1, h2, a2) and h1 + a1 >= 2 and h1 + a1 + h2 + a2 >= 4,
    ),
)


def _btts(h1: int, a1: int, h2: int, a2: int) -> bool:
    return h1 + h2 >= 1 and a1 + a2 >= 1


BTTS_COMBOS: Tuple[Combo, ...] = (
    Combo("GG & 2-3", lambda h1, a1, h2, a2: _btts(h1, a1, h2, a2) and h1 + a1 + h2 + a2 <= 3),
    Combo("GG & 3+", lambda h1, a1, h2, a2: _btts(h1, a1, h2, a2) and h1 + a1 + h2 + a2 >= 3),
    Combo("GG & 4+", lambda h1, a1, h2, a2: _btts(h1, a1, h2, a2) and h1 + a1 + h2 + a2 >= 4),
    Combo("GG & I 1+", lambda h1, a1, h2, a2: _btts(h1, a1, h2, a2) and h1 + a1 >= 1),
    Combo("GG & I 2+", lambda h1, a1, h2, a2: _btts(h1, a1, h2, a2) and h1 + a1 >= 2),
    Combo("GG & II 1+", lambda h1, a1, h2, a2: _btts(h1, a1, h2, a2) and h2 + a2 >= 1),
    Combo("GG & II 2+", lambda h1, a1, h2, a2: _btts(h1, a1, h2, a2) and h2 + a2 >= 2),
    Combo(
        "GG & I 1+ & II 1+",
        lambda h1, a1, h2, a2: _btts(h1, a1, h2, a2) and h1 + a1 >= 1 and h2 + a2 >= 1,
    ),
    Combo("IGG & 3+", lambda h1, a1, h2, a2: h1 >= 1 and a1 >= 1 and h1 + a1 + h2 + a2 >= 3),
    Combo("IGG & 4+", lambda h1, a1, h2, a2: h1 >= 1 and a1 >= 1 and h1 + a1 + h2 + a2 >= 4),
)


def team_combos(table: TeamTable, home: bool) -> List[Combo]:
    """Bind a team-perspective table to the home or away side."""

    return [Combo(label, team_view(check, home)) for label, check in table]


__all__ = [
    "BTTS_COMBOS",
    "Combo",
    "DRAW_COMBOS",
    "PathPredicate",
    "TEAM_GOAL_COMBOS",
    "WIN_COMBOS",
    "sweep_combos",
    "team_combos",
    "team_view",
]
