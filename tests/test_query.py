"""Tests for the free-text market query parser."""

from __future__ import annotations

import pytest

from fairgoals.conditions import CorrectScore, MatchResult, TotalCondition, TotalKind
from fairgoals.errors import QueryParseError
from fairgoals.query import MARGIN_MESSAGE, match_clause, parse_query, split_clauses


def test_btts_clause_sets_only_that_field() -> None:
    parsed = parse_query("ft btts yes")
    assert parsed.conditions.active_fields() == {"ft_btts": True}
    assert parsed.market_label == "FT BTTS Yes"
    assert parsed.warnings == ()


def test_margin_requests_are_rejected() -> None:
    with pytest.raises(QueryParseError, match="cannot apply margins") as excinfo:
        parse_query("ft margin 5%")
    assert excinfo.value.fragment == "margin"
    assert str(excinfo.value) == MARGIN_MESSAGE


@pytest.mark.parametrize(
    ("text", "field", "value", "label"),
    [
        ("1", "ft_result", MatchResult.HOME, "FT 1"),
        ("FT x2", "ft_result", MatchResult.DRAW_OR_AWAY, "FT X2"),
        ("over 2.5", "ft_total", TotalCondition(kind=TotalKind.OVER, value=2.5), "FT O2.5"),
        ("ft u 3", "ft_total", TotalCondition(kind=TotalKind.UNDER, value=3), "FT U3"),
        ("o2.5", "ft_total", TotalCondition(kind=TotalKind.OVER, value=2.5), "FT O2.5"),
        ("under1.5", "ft_total", TotalCondition(kind=TotalKind.UNDER, value=1.5), "FT U1.5"),
        ("btts no", "ft_btts", False, "FT BTTS No"),
        ("cs 2-1", "ft_correct_score", CorrectScore(home=2, away=1), "FT CS 2-1"),
        ("cs1-0", "ft_correct_score", CorrectScore(home=1, away=0), "FT CS 1-0"),
        ("1h 1x", "h1_result", MatchResult.HOME_OR_DRAW, "1H 1X"),
        ("1 half x", "h1_result", MatchResult.DRAW, "1H X"),
        ("i half o 0.5", "h1_total", TotalCondition(kind=TotalKind.OVER, value=0.5), "1H O0.5"),
        ("1h u1.5", "h1_total", TotalCondition(kind=TotalKind.UNDER, value=1.5), "1H U1.5"),
        ("1h btts yes", "h1_btts", True, "1H BTTS Yes"),
        ("1h cs0-0", "h1_correct_score", CorrectScore(home=0, away=0), "1H CS 0-0"),
        ("2h 2", "h2_result", MatchResult.AWAY, "2H 2"),
        ("ii half 12", "h2_result", MatchResult.HOME_OR_AWAY, "2H 12"),
        ("2 half over 1.5", "h2_total", TotalCondition(kind=TotalKind.OVER, value=1.5), "2H O1.5"),
        ("2h o0.5", "h2_total", TotalCondition(kind=TotalKind.OVER, value=0.5), "2H O0.5"),
    ],
)
def test_single_clauses(text: str, field: str, value: object, label: str) -> None:
    parsed = parse_query(text)
    assert parsed.conditions.active_fields() == {field: value}
    assert parsed.market_label == label


def test_clauses_combine_with_and() -> None:
    parsed = parse_query("1h o1.5  AND ft 1 & btts yes")
    assert parsed.conditions.h1_total == TotalCondition(kind=TotalKind.OVER, value=1.5)
    assert parsed.conditions.ft_result is MatchResult.HOME
    assert parsed.conditions.ft_btts is True
    assert parsed.market_label == "1H O1.5 & FT 1 & FT BTTS Yes"


def test_repeated_field_keeps_last_value() -> None:
    parsed = parse_query("ft 1 and ft 2")
    assert parsed.conditions.ft_result is MatchResult.AWAY
    assert parsed.market_label == "FT 1 & FT 2"


@pytest.mark.parametrize("text", ["2h btts yes", "2h cs 1-0", "ft 3", "win", "o", "cs 1:0"])
def test_unknown_clauses_are_rejected(text: str) -> None:
    with pytest.raises(QueryParseError, match="Could not parse") as excinfo:
        parse_query(text)
    assert excinfo.value.fragment == text


def test_failing_clause_is_named() -> None:
    with pytest.raises(QueryParseError) as excinfo:
        parse_query("ft 1 and 2h btts no")
    assert excinfo.value.fragment == "2h btts no"


def test_empty_query_rejected() -> None:
    with pytest.raises(QueryParseError):
        parse_query("   ")


def test_split_clauses_expands_shorthand() -> None:
    assert split_clauses("o2.5 and 1h cs1-1") == ["o 2.5", "1h cs 1-1"]


def test_match_clause_returns_contribution() -> None:
    field, value, label = match_clause("1h btts no")
    assert (field, value, label) == ("h1_btts", False, "1H BTTS No")


@pytest.mark.parametrize(
    ("text", "label"),
    [
        ("o 1234567", "FT O1234567"),
        ("1h u 1000000.5", "1H U1000000.5"),
        ("over 2.50", "FT O2.5"),
        ("u 3", "FT U3"),
    ],
)
def test_total_labels_keep_plain_notation(text: str, label: str) -> None:
    assert parse_query(text).market_label == label
