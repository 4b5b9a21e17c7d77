"""Command line interface for the fair odds engine."""

from __future__ import annotations

import argparse
import dataclasses
import json
from typing import Callable, Dict, List, Sequence

import polars as pl

from .board import markets_frame
from .config import FairGoalsConfig, OutputFormat, get_config
from .errors import FairGoalsError, InvalidInputError
from .logging import configure_logging
from .model import ModelState
from .poisson import MAX_GOALS_DISPLAY, ScorelineMatrix
from .session import PricingSession


@dataclasses.dataclass(slots=True)
class CommandContext:
    """Runtime objects shared across command handlers."""

    session: PricingSession
    config: FairGoalsConfig
    output_format: OutputFormat
    precision: int


CommandHandler = Callable[[CommandContext, argparse.Namespace], None]


@dataclasses.dataclass(slots=True)
class Subcommand:
    """Container describing a CLI sub-command."""

    name: str
    help: str
    configure: Callable[[argparse.ArgumentParser], None]
    handler: CommandHandler

    def add_to_parser(
        self,
        subparsers,
        parent: argparse.ArgumentParser,
    ) -> argparse.ArgumentParser:
        """Create the parser for this subcommand."""

        parser = subparsers.add_parser(self.name, parents=[parent], help=self.help)
        self.configure(parser)
        parser.set_defaults(handler=self.handler, command=self.name)
        return parser


class SubcommandApp:
    """Registry that wires handlers into an :class:`argparse` parser."""

    def __init__(self, description: str | None = None) -> None:
        self._commands: list[Subcommand] = []
        self._description = description

    def command(
        self,
        name: str,
        *,
        help: str,
        configure: Callable[[argparse.ArgumentParser], None] | None = None,
    ) -> Callable[[CommandHandler], CommandHandler]:
        """Register ``handler`` as a sub-command with configuration callback."""

        def _decorator(handler: CommandHandler) -> CommandHandler:
            if not callable(handler):
                raise TypeError("Command handlers must be callable")
            self._commands.append(
                Subcommand(
                    name=name,
                    help=help,
                    configure=configure or (lambda parser: None),
                    handler=handler,
                )
            )
            return handler

        return _decorator

    @property
    def commands(self) -> Sequence[Subcommand]:
        return tuple(self._commands)

    def build_parser(self) -> argparse.ArgumentParser:
        parent = argparse.ArgumentParser(add_help=False)
        _add_model_arguments(parent)
        parent.add_argument(
            "--output",
            choices=[fmt.value for fmt in OutputFormat],
            help="Output format (defaults to FAIRGOALS_OUTPUT)",
        )
        parent.add_argument(
            "--precision",
            type=int,
            help="Decimal places for odds and percentages",
        )
        parent.add_argument("--log-level", help="Logging level, e.g. DEBUG")

        parser = argparse.ArgumentParser(prog="fairgoals", description=self._description)
        subparsers = parser.add_subparsers(dest="command", required=True)
        for command in self._commands:
            command.add_to_parser(subparsers, parent)
        return parser


APP = SubcommandApp(description=__doc__)

_SUPREMACY_OPTIONS = ("supremacy", "expectancy")
_MARKET_OPTIONS = ("home", "draw", "away", "total")
_ODDS_OPTIONS = ("odds_home", "odds_draw", "odds_away", "line", "odds_over", "odds_under")


def _add_model_arguments(parser: argparse.ArgumentParser) -> None:
    forward = parser.add_argument_group("forward model")
    forward.add_argument("--supremacy", type=float, help="Away minus home expected goals")
    forward.add_argument("--expectancy", type=float, help="Expected total goals")

    market = parser.add_argument_group("market probabilities (percent)")
    market.add_argument("--home", type=float, help="Home win probability in percent")
    market.add_argument("--draw", type=float, help="Draw probability in percent")
    market.add_argument("--away", type=float, help="Away win probability in percent")
    market.add_argument("--total", type=float, help="Expected total goals")

    odds = parser.add_argument_group("market odds (decimal)")
    odds.add_argument("--odds-home", type=float)
    odds.add_argument("--odds-draw", type=float)
    odds.add_argument("--odds-away", type=float)
    odds.add_argument("--line", type=float, help="Total goals line, e.g. 2.5")
    odds.add_argument("--odds-over", type=float)
    odds.add_argument("--odds-under", type=float)


def _collect(args: argparse.Namespace, names: Sequence[str]) -> Dict[str, float | None]:
    return {name: getattr(args, name, None) for name in names}


def _require_all(values: Dict[str, float | None]) -> List[float]:
    missing = [name for name, value in values.items() if value is None]
    if missing:
        flags = ", ".join("--" + name.replace("_", "-") for name in missing)
        raise InvalidInputError(f"Missing model options: {flags}")
    return [float(value) for value in values.values() if value is not None]


def _calculate(session: PricingSession, args: argparse.Namespace) -> ModelState:
    odds = _collect(args, _ODDS_OPTIONS)
    market = _collect(args, _MARKET_OPTIONS)
    forward = _collect(args, _SUPREMACY_OPTIONS)
    if any(value is not None for value in odds.values()):
        return session.calculate_from_odds(*_require_all(odds))
    if any(value is not None for value in market.values()):
        return session.calculate_from_market(*_require_all(market))
    if any(value is not None for value in forward.values()):
        return session.calculate_from_supremacy(*_require_all(forward))
    raise InvalidInputError(
        "Provide --supremacy/--expectancy, --home/--draw/--away/--total "
        "or the six --odds-* and --line options"
    )


def _matrix_frame(matrix: ScorelineMatrix, precision: int) -> pl.DataFrame:
    grid = matrix.display(MAX_GOALS_DISPLAY)
    data: Dict[str, list] = {"home": list(range(len(grid)))}
    for away in range(len(grid)):
        data[str(away)] = [round(row[away], precision) for row in grid]
    return pl.DataFrame(data)


def _print_frame(frame: pl.DataFrame) -> None:
    with pl.Config(tbl_rows=-1, tbl_hide_dataframe_shape=True, fmt_str_lengths=40):
        print(frame)


def _model_payload(state: ModelState, precision: int) -> Dict[str, object]:
    rates = state.rates
    return {
        "source": state.source,
        "solver_error": state.solver_error,
        "rates": {
            "home_ft": round(rates.home_ft, precision + 2),
            "away_ft": round(rates.away_ft, precision + 2),
            "home_h1": round(rates.home_h1, precision + 2),
            "away_h1": round(rates.away_h1, precision + 2),
            "home_h2": round(rates.home_h2, precision + 2),
            "away_h2": round(rates.away_h2, precision + 2),
        },
        "matrix_h1": state.matrix_h1.display(),
        "matrix_h2": state.matrix_h2.display(),
    }


@APP.command("model", help="Calculate the model and print goal rates and half matrices")
def _cmd_model(context: CommandContext, args: argparse.Namespace) -> None:
    state = _calculate(context.session, args)
    if context.output_format is OutputFormat.JSON:
        print(json.dumps(_model_payload(state, context.precision), indent=2))
        return
    rates = state.rates
    digits = context.precision + 2
    print(f"Model source: {state.source}")
    print(f"Full time   home {rates.home_ft:.{digits}f}  away {rates.away_ft:.{digits}f}")
    print(f"First half  home {rates.home_h1:.{digits}f}  away {rates.away_h1:.{digits}f}")
    print(f"Second half home {rates.home_h2:.{digits}f}  away {rates.away_h2:.{digits}f}")
    print("\nFirst half correct score (%):")
    _print_frame(_matrix_frame(state.matrix_h1, context.precision))
    print("\nSecond half correct score (%):")
    _print_frame(_matrix_frame(state.matrix_h2, context.precision))


def _configure_query(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("text", nargs="+", help='Market query, e.g. "1h o1.5 and ft 1"')


@APP.command("query", help="Price a free-text market query", configure=_configure_query)
def _cmd_query(context: CommandContext, args: argparse.Namespace) -> None:
    _calculate(context.session, args)
    answer = context.session.ask(" ".join(args.text))
    if context.output_format is OutputFormat.JSON:
        payload = {
            "market": answer.market_label,
            "probability": answer.result.probability,
            "percent": answer.result.percent,
            "fair_odds": round(answer.result.fair_odds, context.precision),
            "warnings": list(answer.warnings),
        }
        print(json.dumps(payload, indent=2))
        return
    print(answer.render(context.precision))


def _configure_markets(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--core-only",
        action="store_true",
        help="Skip team goal markets, first half handicaps and combinations",
    )


@APP.command("markets", help="Price the full market board", configure=_configure_markets)
def _cmd_markets(context: CommandContext, args: argparse.Namespace) -> None:
    _calculate(context.session, args)
    rows = context.session.markets(extended=not args.core_only)
    frame = markets_frame(rows, context.precision)
    if context.output_format is OutputFormat.JSON:
        print(json.dumps(frame.to_dicts(), indent=2))
        return
    _print_frame(frame)


def _build_parser() -> argparse.ArgumentParser:
    return APP.build_parser()


def _dispatch(args: argparse.Namespace) -> None:
    config = get_config()
    output_format = OutputFormat(args.output) if args.output else config.output_format
    precision = config.precision if args.precision is None else args.precision
    if precision < 0:
        raise InvalidInputError("--precision must be zero or higher")
    context = CommandContext(
        session=PricingSession(precision=precision),
        config=config,
        output_format=output_format,
        precision=precision,
    )
    handler: CommandHandler = args.handler
    handler(context, args)


def main(argv: Sequence[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level or get_config().log_level)
    try:
        _dispatch(args)
    except FairGoalsError as exc:
        raise SystemExit(str(exc)) from exc


__all__ = ["APP", "SubcommandApp", "main"]


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
