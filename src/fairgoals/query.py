"""Free-text market queries.

Queries are short phrases such as ``"1h o1.5 and ft btts yes"``.  The text is
lower-cased, split into clauses on ``and`` / ``&`` and every clause is matched
against :data:`QUERY_RULES` in order; the first rule that matches contributes
one :class:`~fairgoals.conditions.ConditionSet` field and a fragment of the
human readable market label.

Supported clauses, with an optional ``ft`` prefix for full time and ``1h``,
``1 half`` or ``i half`` for the first half:

* results: ``1``, ``x``, ``2``, ``1x``, ``12``, ``x2``
* totals: ``o 2.5``, ``u 3``, ``over 1.5``, ``under 0.5``
* both teams to score: ``btts yes``, ``btts no``
* correct score: ``cs 2-1``

The second half (``2h``, ``2 half``, ``ii half``) accepts results and totals
only.
"""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import Any, Callable, Dict, List, Tuple

from .conditions import ConditionSet, CorrectScore, MatchResult, TotalCondition, TotalKind
from .errors import QueryParseError
from .utils import format_goal_line

logger = logging.getLogger(__name__)

MARGIN_MESSAGE = "I only calculate fair odds (100% payout). I cannot apply margins."

_FULL_TIME = r"(?:ft )?"
_FIRST_HALF = r"(?:1h|1 half|i half) "
_SECOND_HALF = r"(?:2h|2 half|ii half) "

_RESULT = r"(?P<result>1x|x2|12|1|x|2)"
_TOTAL = r"(?P<kind>o|u|over|under) (?P<value>\d+(?:\.\d+)?)"
_BTTS = r"btts (?P<answer>yes|no)"
_CORRECT_SCORE = r"cs (?P<home>\d+)-(?P<away>\d+)"

_CLAUSE_SPLIT = re.compile(r" (?:and|&) ")
_SPACELESS_TOTAL = re.compile(
    r"^((?:ft|1h|1 half|i half|2h|2 half|ii half) )?(o|u|over|under)(\d+(?:\.\d+)?)$"
)
_SPACELESS_SCORE = re.compile(r"^((?:ft|1h|1 half|i half) )?(cs)(\d+-\d+)$")

ClauseContribution = Tuple[str, Any, str]
ClauseBuilder = Callable[["re.Match[str]"], ClauseContribution]


@dataclasses.dataclass(frozen=True, slots=True)
class QueryRule:
    """One grammar rule: a full-clause pattern and its field builder."""

    pattern: "re.Pattern[str]"
    builder: ClauseBuilder

    def apply(self, clause: str) -> ClauseContribution | None:
        match = self.pattern.fullmatch(clause)
        if match is None:
            return None
        return self.builder(match)


@dataclasses.dataclass(frozen=True, slots=True)
class ParsedQuery:
    """Outcome of :func:`parse_query`."""

    conditions: ConditionSet
    market_label: str
    warnings: Tuple[str, ...] = ()


def _result_builder(window: str, label: str) -> ClauseBuilder:
    def build(match: "re.Match[str]") -> ClauseContribution:
        result = MatchResult(match["result"].upper())
        return f"{window}_result", result, f"{label} {result.value}"

    return build


def _total_builder(window: str, label: str) -> ClauseBuilder:
    def build(match: "re.Match[str]") -> ClauseContribution:
        kind = TotalKind.UNDER if match["kind"].startswith("u") else TotalKind.OVER
        value = float(match["value"])
        total = TotalCondition(kind=kind, value=value)
        text = format_goal_line(value)
        return f"{window}_total", total, f"{label} {kind.value.upper()}{text}"

    return build


def _btts_builder(window: str, label: str) -> ClauseBuilder:
    def build(match: "re.Match[str]") -> ClauseContribution:
        expected = match["answer"] == "yes"
        answer = "Yes" if expected else "No"
        return f"{window}_btts", expected, f"{label} BTTS {answer}"

    return build


def _correct_score_builder(window: str, label: str) -> ClauseBuilder:
    def build(match: "re.Match[str]") -> ClauseContribution:
        score = CorrectScore(home=int(match["home"]), away=int(match["away"]))
        return (
            f"{window}_correct_score",
            score,
            f"{label} CS {score.home}-{score.away}",
        )

    return build


def _rule(prefix: str, body: str, builder: ClauseBuilder) -> QueryRule:
    return QueryRule(pattern=re.compile(prefix + body), builder=builder)


QUERY_RULES: Tuple[QueryRule, ...] = (
    _rule(_FULL_TIME, _RESULT, _result_builder("ft", "FT")),
    _rule(_FULL_TIME, _TOTAL, _total_builder("ft", "FT")),
    _rule(_FULL_TIME, _BTTS, _btts_builder("ft", "FT")),
    _rule(_FULL_TIME, _CORRECT_SCORE, _correct_score_builder("ft", "FT")),
    _rule(_FIRST_HALF, _RESULT, _result_builder("h1", "1H")),
    _rule(_FIRST_HALF, _TOTAL, _total_builder("h1", "1H")),
    _rule(_FIRST_HALF, _BTTS, _btts_builder("h1", "1H")),
    _rule(_FIRST_HALF, _CORRECT_SCORE, _correct_score_builder("h1", "1H")),
    _rule(_SECOND_HALF, _RESULT, _result_builder("h2", "2H")),
    _rule(_SECOND_HALF, _TOTAL, _total_builder("h2", "2H")),
)


def normalise_query(text: str) -> str:
    """Lower-case ``text`` and collapse runs of whitespace."""

    return " ".join(text.lower().split())


def _expand_shorthand(clause: str) -> str:
    clause = _SPACELESS_TOTAL.sub(r"\1\2 \3", clause)
    return _SPACELESS_SCORE.sub(r"\1\2 \3", clause)


def split_clauses(query: str) -> List[str]:
    """Split a normalised query into its ``and`` / ``&`` separated clauses."""

    return [_expand_shorthand(part.strip()) for part in _CLAUSE_SPLIT.split(query)]


def match_clause(clause: str) -> ClauseContribution:
    """Return the contribution of the first rule matching ``clause``."""

    for rule in QUERY_RULES:
        contribution = rule.apply(clause)
        if contribution is not None:
            return contribution
    raise QueryParseError(f'Could not parse: "{clause}"', fragment=clause)


def parse_query(text: str) -> ParsedQuery:
    """Parse free text into a condition set and a market label.

    Raises:
        QueryParseError: if the text asks for a margin, is empty or contains a
            clause no rule understands.
    """

    query = normalise_query(text)
    if "margin" in query:
        raise QueryParseError(MARGIN_MESSAGE, fragment="margin")
    if not query:
        raise QueryParseError("Query is empty", fragment="")

    fields: Dict[str, Any] = {}
    labels: List[str] = []
    for clause in split_clauses(query):
        try:
            field, value, label = match_clause(clause)
        except QueryParseError:
            logger.debug("Rejected clause %r of query %r", clause, text)
            raise
        fields[field] = value
        labels.append(label)

    conditions = ConditionSet.model_validate(fields)
    market_label = " & ".join(labels)
    logger.debug("Parsed %r as %s", text, market_label)
    return ParsedQuery(conditions=conditions, market_label=market_label)


__all__ = [
    "MARGIN_MESSAGE",
    "ParsedQuery",
    "QUERY_RULES",
    "QueryRule",
    "match_clause",
    "normalise_query",
    "parse_query",
    "split_clauses",
]
