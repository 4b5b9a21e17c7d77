"""Logging helpers for the pricing engine."""

from __future__ import annotations

import logging
from typing import Iterable

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    level: int | str = logging.INFO,
    handlers: Iterable[logging.Handler] | None = None,
) -> None:
    """Configure root logging for command line and notebook sessions.

    Model builds and solver outcomes are reported through module loggers; this
    helper gives applications embedding the engine a consistent format.
    String levels such as ``"DEBUG"`` are accepted so the value can come
    straight from :class:`fairgoals.config.FairGoalsConfig`.
    """

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=list(handlers) if handlers else None,
    )


__all__ = ["LOG_FORMAT", "configure_logging"]
