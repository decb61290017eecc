"""Logging setup for the prediction engine."""

from __future__ import annotations

import logging
from typing import Iterable

from ..config import LogLevel, get_config

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(
    level: int | str | LogLevel | None = None,
    handlers: Iterable[logging.Handler] | None = None,
) -> None:
    """Send ``soccer_predictor`` diagnostics to the root logger.

    ``level`` defaults to the ``SOCCER_PREDICTOR_LOG_LEVEL`` setting and
    level names are case-insensitive.  At DEBUG the estimator reports raw
    rates and the scale factor and the simulator reports outcome tallies;
    at INFO the predictor logs one line per fixture.
    """

    if level is None:
        level = get_config().log_level
    if isinstance(level, LogLevel):
        level = level.value
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(
        level=level,
        format=_FORMAT,
        handlers=list(handlers) if handlers else None,
    )


__all__ = ["configure_logging"]
