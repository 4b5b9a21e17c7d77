"""Stateful front end holding the current model between queries."""

from __future__ import annotations

import dataclasses
import logging
from typing import List, Sequence, Tuple

from .board import MarketPrice, price_all_markets
from .config import get_config
from .markets import ConditionsLike, price_market
from .model import NO_MODEL, ModelHandle, ModelState, require_model
from .query import parse_query
from .utils import FormattedResult, format_result

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class QueryAnswer:
    """Priced answer to a free-text market query."""

    market_label: str
    result: FormattedResult
    warnings: Tuple[str, ...] = ()

    def render(self, precision: int = 2) -> str:
        lines = [
            f"Market: {self.market_label}",
            f"Probability: {self.result.percent}%",
            f"Fair Odds: {self.result.odds_text(precision)}",
        ]
        if self.warnings:
            lines.append("")
            lines.append(f"Note: {', '.join(self.warnings)}")
        return "\n".join(lines)


class PricingSession:
    """Keep the latest calculated model and price markets against it.

    A session starts without a model; every calculation replaces the held
    :class:`~fairgoals.model.ModelState` wholesale, so states handed out earlier
    stay unchanged.  A failed calculation leaves the previous model in place.
    """

    def __init__(self, precision: int | None = None) -> None:
        self._model: ModelHandle = NO_MODEL
        self._precision = precision

    @property
    def model(self) -> ModelHandle:
        return self._model

    @property
    def is_ready(self) -> bool:
        return isinstance(self._model, ModelState)

    @property
    def precision(self) -> int:
        if self._precision is not None:
            return self._precision
        return get_config().precision

    def _replace(self, state: ModelState) -> ModelState:
        self._model = state
        return state

    def calculate_from_supremacy(self, supremacy: object, expectancy: object) -> ModelState:
        return self._replace(ModelState.from_supremacy(supremacy, expectancy))

    def calculate_from_market(
        self,
        prob_home: object,
        prob_draw: object,
        prob_away: object,
        total_goals: object,
    ) -> ModelState:
        return self._replace(
            ModelState.from_market(prob_home, prob_draw, prob_away, total_goals)
        )

    def calculate_from_odds(
        self,
        home_odds: object,
        draw_odds: object,
        away_odds: object,
        total_line: object,
        over_odds: object,
        under_odds: object,
    ) -> ModelState:
        return self._replace(
            ModelState.from_odds(
                home_odds, draw_odds, away_odds, total_line, over_odds, under_odds
            )
        )

    def reset(self) -> None:
        self._model = NO_MODEL

    def price(self, conditions: ConditionsLike) -> FormattedResult:
        return format_result(price_market(self._model, conditions), self.precision)

    def ask(self, text: str) -> QueryAnswer:
        """Parse ``text`` and price the resulting market."""

        state = require_model(self._model)
        parsed = parse_query(text)
        probability = price_market(state, parsed.conditions)
        logger.info("Query %r priced at %.6f", parsed.market_label, probability)
        return QueryAnswer(
            market_label=parsed.market_label,
            result=format_result(probability, self.precision),
            warnings=parsed.warnings,
        )

    def markets(
        self,
        *,
        total_lines: Sequence[float] | None = None,
        handicap_lines: Sequence[float] | None = None,
        extended: bool = True,
    ) -> List[MarketPrice]:
        settings = get_config()
        return price_all_markets(
            require_model(self._model),
            total_lines=settings.total_lines if total_lines is None else total_lines,
            handicap_lines=(
                settings.handicap_lines if handicap_lines is None else handicap_lines
            ),
            extended=extended,
        )


__all__ = ["PricingSession", "QueryAnswer"]
