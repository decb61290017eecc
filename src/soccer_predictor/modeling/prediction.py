"""End-to-end match prediction: normalise, estimate rates, simulate, rank scorers."""

from __future__ import annotations

import dataclasses
import logging
import random
from typing import Any, Iterable, List, Mapping

from .configuration import ModelConfig
from .expected_goals import ExpectedGoalsEstimator, ExpectedGoalsModel
from .normalization import PlayerSeasonLine, TeamSeasonStats, build_roster
from .scorers import PlayerScoringEstimate, ScorerProbabilityEstimator
from .simulation import MatchSimulator, SimulationResult

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class MatchPrediction:
    """Everything produced for one fixture, team A hosting team B."""

    expected_goals: ExpectedGoalsModel
    simulation: SimulationResult
    top_scorers_a: List[PlayerScoringEstimate]
    top_scorers_b: List[PlayerScoringEstimate]


def _as_stats(stats: TeamSeasonStats | Mapping[str, Any] | None) -> TeamSeasonStats:
    if isinstance(stats, TeamSeasonStats):
        return stats
    return TeamSeasonStats.from_payload(stats)


def _as_roster(roster: Any) -> List[PlayerSeasonLine]:
    if isinstance(roster, list) and all(isinstance(p, PlayerSeasonLine) for p in roster):
        return roster
    return build_roster(roster)


class MatchPredictor:
    """Wire the estimator, simulator and scorer model from one :class:`ModelConfig`.

    The predictor holds configuration only; every call builds its results
    from scratch, so one instance can serve concurrent requests as long as
    callers do not share an explicit ``rng`` between threads.
    """

    def __init__(self, config: ModelConfig | None = None) -> None:
        self.config = config or ModelConfig()
        self.expected_goals = ExpectedGoalsEstimator(self.config.expected_goals)
        self.simulator = MatchSimulator(self.config.simulation)
        self.scorers = ScorerProbabilityEstimator(self.config.scorers)

    def predict(
        self,
        stats_a: TeamSeasonStats | Mapping[str, Any] | None,
        stats_b: TeamSeasonStats | Mapping[str, Any] | None,
        roster_a: Iterable[Any] | Mapping[str, Any] | None = None,
        roster_b: Iterable[Any] | Mapping[str, Any] | None = None,
        target_total_override: object = None,
        rng: random.Random | None = None,
    ) -> MatchPrediction:
        team_a = _as_stats(stats_a)
        team_b = _as_stats(stats_b)
        model = self.expected_goals.estimate(team_a, team_b, target_total_override)
        simulation = self.simulator.simulate(model.lambda_a, model.lambda_b, rng=rng)
        scorers_a = self.scorers.estimate(
            model.lambda_a, team_a.total_goals_scored, _as_roster(roster_a)
        )
        scorers_b = self.scorers.estimate(
            model.lambda_b, team_b.total_goals_scored, _as_roster(roster_b)
        )
        logger.info(
            "Prediction lambda %.2f/%.2f -> A %.1f%% draw %.1f%% B %.1f%%",
            model.lambda_a,
            model.lambda_b,
            simulation.win_probability_a,
            simulation.draw_probability,
            simulation.win_probability_b,
        )
        return MatchPrediction(
            expected_goals=model,
            simulation=simulation,
            top_scorers_a=scorers_a,
            top_scorers_b=scorers_b,
        )


def predict_match(
    stats_a: TeamSeasonStats | Mapping[str, Any] | None,
    stats_b: TeamSeasonStats | Mapping[str, Any] | None,
    roster_a: Iterable[Any] | Mapping[str, Any] | None = None,
    roster_b: Iterable[Any] | Mapping[str, Any] | None = None,
    target_total_override: object = None,
    rng: random.Random | None = None,
    config: ModelConfig | None = None,
) -> MatchPrediction:
    """Functional wrapper around :class:`MatchPredictor`."""

    return MatchPredictor(config).predict(
        stats_a,
        stats_b,
        roster_a=roster_a,
        roster_b=roster_b,
        target_total_override=target_total_override,
        rng=rng,
    )


__all__ = ["MatchPrediction", "MatchPredictor", "predict_match"]
