"""Expected-goals estimation from team season statistics."""

from __future__ import annotations

import dataclasses
import logging
import math

from .configuration import ExpectedGoalsParameters
from .normalization import TeamSeasonStats, first_nonzero, safe_number

logger = logging.getLogger(__name__)


def _clamp(value: float, lower: float, upper: float, default: float) -> float:
    # Infinities clamp to a bound; only NaN needs a substitute.
    if math.isnan(value):
        value = default
    return max(lower, min(upper, value))


def parse_target_total(value: object) -> float | None:
    """Return a usable total-goals line, or ``None`` to use the baseline.

    Strings must parse in full (``"2.5abc"`` is rejected).  Zero, NaN and
    infinite values are rejected; negative totals are kept and end up at
    the lower scale bound.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        number = safe_number(value, math.nan)
    if not math.isfinite(number) or number == 0:
        return None
    return number


@dataclasses.dataclass(frozen=True, slots=True)
class ExpectedGoalsModel:
    """Calibrated Poisson rates for one match, with intermediate values.

    ``lambda_a`` and ``lambda_b`` are ``raw_lambda_* * scale_factor``.
    ``base_total`` is the raw rate sum used as the scale-factor
    denominator; ``historical_total`` is the statistics-derived baseline
    that ``target_total`` falls back to when no override is given.
    """

    lambda_a: float
    lambda_b: float
    raw_lambda_a: float
    raw_lambda_b: float
    base_total: float
    historical_total: float
    target_total: float
    scale_factor: float
    formula_version: str


class ExpectedGoalsEstimator:
    """Derive ``(lambda_a, lambda_b)`` for team A at home against team B."""

    def __init__(self, params: ExpectedGoalsParameters | None = None) -> None:
        self.params = params or ExpectedGoalsParameters()

    def raw_rates(self, stats_a: TeamSeasonStats, stats_b: TeamSeasonStats) -> tuple[float, float]:
        """Attack/defence blend for each side, clamped to the raw bounds."""

        p = self.params
        attack_a = first_nonzero(stats_a.goals_for.average.home, stats_a.goals_for.average.total)
        conceded_b = first_nonzero(
            stats_b.goals_against.average.away, stats_b.goals_against.average.total
        )
        attack_b = first_nonzero(stats_b.goals_for.average.away, stats_b.goals_for.average.total)
        conceded_a = first_nonzero(
            stats_a.goals_against.average.home, stats_a.goals_against.average.total
        )

        raw_a = p.home_advantage * (p.attack_weight * attack_a + p.conceded_weight * conceded_b)
        raw_b = p.away_factor * (p.attack_weight * attack_b + p.conceded_weight * conceded_a)
        return (
            _clamp(raw_a, p.min_raw_lambda, p.max_raw_lambda, 0.0),
            _clamp(raw_b, p.min_raw_lambda, p.max_raw_lambda, 0.0),
        )

    @staticmethod
    def historical_total(
        stats_a: TeamSeasonStats, stats_b: TeamSeasonStats, raw_a: float, raw_b: float
    ) -> float:
        """Average per-match goal total across both teams' fixtures."""

        total_a = stats_a.goals_for.average.total + stats_a.goals_against.average.total
        total_b = stats_b.goals_for.average.total + stats_b.goals_against.average.total
        historical = (total_a + total_b) / 2
        if not math.isfinite(historical) or historical <= 0:
            return raw_a + raw_b
        return historical

    def estimate(
        self,
        stats_a: TeamSeasonStats,
        stats_b: TeamSeasonStats,
        target_total_override: object = None,
    ) -> ExpectedGoalsModel:
        """Build the calibrated rate pair.

        ``target_total_override`` is typically a market total line.  Any
        value accepted by :func:`parse_target_total` replaces the
        historical baseline; anything else is ignored.
        """

        p = self.params
        raw_a, raw_b = self.raw_rates(stats_a, stats_b)
        historical = self.historical_total(stats_a, stats_b, raw_a, raw_b)

        base_total = raw_a + raw_b or p.zero_total_fallback
        override = parse_target_total(target_total_override)
        target_total = historical if override is None else override

        scale_factor = _clamp(
            target_total / base_total,
            p.min_scale_factor,
            p.max_scale_factor,
            1.0,
        )
        model = ExpectedGoalsModel(
            lambda_a=raw_a * scale_factor,
            lambda_b=raw_b * scale_factor,
            raw_lambda_a=raw_a,
            raw_lambda_b=raw_b,
            base_total=base_total,
            historical_total=historical,
            target_total=target_total,
            scale_factor=scale_factor,
            formula_version=p.formula_version,
        )
        logger.debug(
            "Expected goals raw %.3f/%.3f target %.3f scale %.3f -> %.3f/%.3f",
            raw_a,
            raw_b,
            target_total,
            scale_factor,
            model.lambda_a,
            model.lambda_b,
        )
        return model


def build_expected_goals(
    stats_a: TeamSeasonStats,
    stats_b: TeamSeasonStats,
    target_total_override: object = None,
    params: ExpectedGoalsParameters | None = None,
) -> ExpectedGoalsModel:
    """Functional wrapper around :class:`ExpectedGoalsEstimator`."""

    return ExpectedGoalsEstimator(params).estimate(stats_a, stats_b, target_total_override)


__all__ = [
    "ExpectedGoalsEstimator",
    "ExpectedGoalsModel",
    "build_expected_goals",
    "parse_target_total",
]
