"""
fairgoals: fair odds for football markets from a Poisson goal model.

The package turns goal supremacy and expectancy, or bookmaker 1X2 and total
goals prices, into per-half scoreline matrices and prices arbitrary
combinations of result, total, both-teams-to-score and correct score
conditions, plus Asian handicaps, team goal markets and combination tables,
at 100% payout.
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover - exercised in packaging workflows
    __version__ = version("fairgoals")
except PackageNotFoundError:  # pragma: no cover - local editable installs
    __version__ = "0.0.0"

_EXPORTS = {
    # Model construction
    "ModelState": ".model",
    "GoalRateSet": ".model",
    "NO_MODEL": ".model",
    "require_model": ".model",
    "build_scoreline_matrix": ".poisson",
    "poisson": ".poisson",
    "derive_lambdas": ".solver",
    "solve_total_goals": ".solver",
    # Market pricing
    "ConditionSet": ".conditions",
    "MatchResult": ".conditions",
    "TotalCondition": ".conditions",
    "TotalKind": ".conditions",
    "CorrectScore": ".conditions",
    "evaluate_market": ".markets",
    "price_market": ".markets",
    "quote_market": ".markets",
    "asian_handicap_price": ".handicap",
    "evaluate_handicap": ".handicap",
    "goal_aggregates": ".aggregates",
    "sweep_combos": ".combos",
    "price_all_markets": ".board",
    "markets_frame": ".board",
    # Queries and sessions
    "parse_query": ".query",
    "PricingSession": ".session",
    # Utility functions
    "format_result": ".utils",
    "get_config": ".config",
    "configure_logging": ".logging",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> object:  # pragma: no cover - thin lazy importer
    from importlib import import_module

    target_module = _EXPORTS.get(name)
    if not target_module:
        raise AttributeError(f"module {__name__} has no attribute {name}")
    module = import_module(target_module, __name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr
