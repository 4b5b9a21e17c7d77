"""Market conditions over first-half, second-half and full-time scores.

A :class:`ConditionSet` holds up to twelve optional constraints, four per time
window.  Unset fields impose nothing; set fields are combined with AND
semantics.  Full-time scores are never supplied directly: evaluators always
derive them as the sum of the two halves.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

ScorePredicate = Callable[[int, int], bool]


class MatchResult(str, Enum):
    """Win/draw/loss outcomes and their double-chance unions."""

    HOME = "1"
    DRAW = "X"
    AWAY = "2"
    HOME_OR_DRAW = "1X"
    HOME_OR_AWAY = "12"
    DRAW_OR_AWAY = "X2"


class TotalKind(str, Enum):
    """Comparison applied by a total-goals condition."""

    OVER = "o"
    UNDER = "u"
    EXACT = "="


class Window(str, Enum):
    """Time windows a condition can refer to."""

    FIRST_HALF = "h1"
    SECOND_HALF = "h2"
    FULL_TIME = "ft"


_TOTAL_KIND_ALIASES = {
    "o": TotalKind.OVER,
    "over": TotalKind.OVER,
    "u": TotalKind.UNDER,
    "under": TotalKind.UNDER,
    "=": TotalKind.EXACT,
    "exact": TotalKind.EXACT,
    "exactly": TotalKind.EXACT,
}


class TotalCondition(BaseModel):
    """Over/under/exact constraint on the goals scored in a window."""

    model_config = ConfigDict(frozen=True)

    kind: TotalKind = Field(validation_alias=AliasChoices("kind", "type"))
    value: float

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, value: Any) -> Any:
        if isinstance(value, str) and not isinstance(value, TotalKind):
            token = value.strip().lower()
            if token in _TOTAL_KIND_ALIASES:
                return _TOTAL_KIND_ALIASES[token]
        return value


class CorrectScore(BaseModel):
    """Exact scoreline constraint."""

    model_config = ConfigDict(frozen=True)

    home: int = Field(ge=0)
    away: int = Field(ge=0)


def _coerce_result(value: Any) -> Any:
    if isinstance(value, str) and not isinstance(value, MatchResult):
        return value.strip().upper()
    return value


class ConditionSet(BaseModel):
    """Conjunction of optional constraints across the three time windows."""

    model_config = ConfigDict(frozen=True)

    ft_result: Optional[MatchResult] = None
    ft_total: Optional[TotalCondition] = None
    ft_btts: Optional[bool] = None
    ft_correct_score: Optional[CorrectScore] = None
    h1_result: Optional[MatchResult] = None
    h1_total: Optional[TotalCondition] = None
    h1_btts: Optional[bool] = None
    h1_correct_score: Optional[CorrectScore] = None
    h2_result: Optional[MatchResult] = None
    h2_total: Optional[TotalCondition] = None
    h2_btts: Optional[bool] = None
    h2_correct_score: Optional[CorrectScore] = None

    @field_validator("ft_result", "h1_result", "h2_result", mode="before")
    @classmethod
    def _normalise_results(cls, value: Any) -> Any:
        return _coerce_result(value)

    @property
    def is_empty(self) -> bool:
        return not self.active_fields()

    def active_fields(self) -> Dict[str, Any]:
        """Mapping of the fields that constrain the market."""

        return {name: value for name, value in self if value is not None}

    def with_updates(self, **updates: Any) -> "ConditionSet":
        """Return a validated copy with ``updates`` applied."""

        data = {name: value for name, value in self}
        data.update(updates)
        return ConditionSet.model_validate(data)

    def predicate(self, window: Window) -> ScorePredicate | None:
        """Compile the constraints of ``window`` into a score predicate."""

        prefix = window.value
        return window_predicate(
            getattr(self, f"{prefix}_result"),
            getattr(self, f"{prefix}_total"),
            getattr(self, f"{prefix}_btts"),
            getattr(self, f"{prefix}_correct_score"),
        )


def result_holds(result: MatchResult, home: int, away: int) -> bool:
    """Return whether the score ``home``-``away`` satisfies ``result``."""

    if result is MatchResult.HOME:
        return home > away
    if result is MatchResult.DRAW:
        return home == away
    if result is MatchResult.AWAY:
        return home < away
    if result is MatchResult.HOME_OR_DRAW:
        return home >= away
    if result is MatchResult.HOME_OR_AWAY:
        return home != away
    if result is MatchResult.DRAW_OR_AWAY:
        return home <= away
    raise ValueError(f"Unsupported result: {result!r}")


def total_holds(total: TotalCondition, home: int, away: int) -> bool:
    """Strict over/under comparison, or equality for exact totals."""

    goals = home + away
    if total.kind is TotalKind.OVER:
        return goals > total.value
    if total.kind is TotalKind.UNDER:
        return goals < total.value
    if total.kind is TotalKind.EXACT:
        return goals == total.value
    raise ValueError(f"Unsupported total kind: {total.kind!r}")


def btts_holds(expected: bool, home: int, away: int) -> bool:
    return (home > 0 and away > 0) is expected


def correct_score_holds(score: CorrectScore, home: int, away: int) -> bool:
    return score.home == home and score.away == away


def window_predicate(
    result: MatchResult | None,
    total: TotalCondition | None,
    btts: bool | None,
    correct_score: CorrectScore | None,
) -> ScorePredicate | None:
    """Combine one window's constraints; ``None`` when nothing is set."""

    checks: list[ScorePredicate] = []
    if result is not None:
        checks.append(lambda h, a: result_holds(result, h, a))
    if total is not None:
        checks.append(lambda h, a: total_holds(total, h, a))
    if btts is not None:
        checks.append(lambda h, a: btts_holds(btts, h, a))
    if correct_score is not None:
        checks.append(lambda h, a: correct_score_holds(correct_score, h, a))
    if not checks:
        return None
    if len(checks) == 1:
        return checks[0]
    return lambda h, a: all(check(h, a) for check in checks)


__all__ = [
    "ConditionSet",
    "CorrectScore",
    "MatchResult",
    "ScorePredicate",
    "TotalCondition",
    "TotalKind",
    "Window",
    "btts_holds",
    "correct_score_holds",
    "result_holds",
    "total_holds",
    "window_predicate",
]
