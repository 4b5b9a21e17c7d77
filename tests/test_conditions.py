"""Tests for condition sets and their score predicates."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from fairgoals.conditions import (
    ConditionSet,
    CorrectScore,
    MatchResult,
    TotalCondition,
    TotalKind,
    Window,
    result_holds,
    total_holds,
)


@pytest.mark.parametrize(
    ("result", "home", "away", "expected"),
    [
        (MatchResult.HOME, 2, 1, True),
        (MatchResult.HOME, 1, 1, False),
        (MatchResult.DRAW, 0, 0, True),
        (MatchResult.AWAY, 0, 3, True),
        (MatchResult.HOME_OR_DRAW, 1, 1, True),
        (MatchResult.HOME_OR_DRAW, 0, 1, False),
        (MatchResult.HOME_OR_AWAY, 2, 2, False),
        (MatchResult.HOME_OR_AWAY, 0, 2, True),
        (MatchResult.DRAW_OR_AWAY, 1, 0, False),
        (MatchResult.DRAW_OR_AWAY, 1, 1, True),
    ],
)
def test_result_holds(result: MatchResult, home: int, away: int, expected: bool) -> None:
    assert result_holds(result, home, away) is expected


def test_totals_are_strict() -> None:
    over = TotalCondition(kind=TotalKind.OVER, value=2)
    under = TotalCondition(kind=TotalKind.UNDER, value=2)
    exact = TotalCondition(kind=TotalKind.EXACT, value=2)
    assert not total_holds(over, 1, 1)
    assert not total_holds(under, 1, 1)
    assert total_holds(exact, 1, 1)
    assert total_holds(over, 2, 1)
    assert total_holds(under, 1, 0)


def test_total_kind_aliases() -> None:
    assert TotalCondition(kind="over", value=2.5).kind is TotalKind.OVER
    assert TotalCondition(kind="U", value=2.5).kind is TotalKind.UNDER
    assert TotalCondition(kind="exactly", value=3).kind is TotalKind.EXACT


def test_total_kind_accepts_type_key() -> None:
    total = TotalCondition.model_validate({"type": "o", "value": 2.5})
    assert total == TotalCondition(kind=TotalKind.OVER, value=2.5)
    conditions = ConditionSet.model_validate({"ft_total": {"type": "under", "value": 1.5}})
    assert conditions.ft_total == TotalCondition(kind=TotalKind.UNDER, value=1.5)


def test_result_strings_are_upper_cased() -> None:
    conditions = ConditionSet(ft_result="1x", h1_result="x")
    assert conditions.ft_result is MatchResult.HOME_OR_DRAW
    assert conditions.h1_result is MatchResult.DRAW


def test_unknown_result_rejected() -> None:
    with pytest.raises(ValidationError):
        ConditionSet(ft_result="3")


def test_negative_correct_score_rejected() -> None:
    with pytest.raises(ValidationError):
        CorrectScore(home=-1, away=0)


def test_condition_set_is_frozen() -> None:
    conditions = ConditionSet(ft_btts=True)
    with pytest.raises(ValidationError):
        conditions.ft_btts = False  # type: ignore[misc]


def test_active_fields_and_updates() -> None:
    conditions = ConditionSet()
    assert conditions.is_empty
    updated = conditions.with_updates(h2_result="2", ft_btts=False)
    assert updated.active_fields() == {"h2_result": MatchResult.AWAY, "ft_btts": False}
    assert conditions.is_empty


def test_predicate_combines_window_constraints() -> None:
    conditions = ConditionSet(
        h1_result=MatchResult.HOME,
        h1_total=TotalCondition(kind=TotalKind.OVER, value=1.5),
    )
    first_half = conditions.predicate(Window.FIRST_HALF)
    assert first_half is not None
    assert first_half(2, 0)
    assert not first_half(1, 0)
    assert not first_half(1, 1)
    assert conditions.predicate(Window.SECOND_HALF) is None
    assert conditions.predicate(Window.FULL_TIME) is None


def test_correct_score_and_btts_predicates() -> None:
    conditions = ConditionSet(ft_btts=True, ft_correct_score=CorrectScore(home=2, away=1))
    full_time = conditions.predicate(Window.FULL_TIME)
    assert full_time is not None
    assert full_time(2, 1)
    assert not full_time(1, 2)
    assert not ConditionSet(ft_btts=True, ft_correct_score=CorrectScore(home=2, away=0)).predicate(
        Window.FULL_TIME
    )(2, 0)
