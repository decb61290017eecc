"""Anytime-goalscorer probabilities derived from a team's expected goals."""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Iterable, List

from .configuration import ScorerParameters
from .normalization import PlayerSeasonLine, safe_number

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class PlayerScoringEstimate:
    name: str
    position: str
    season_goals: float
    appearances: float
    scoring_probability: float


def anytime_scorer_probability(lam: float, share: float) -> float:
    """Percentage chance that a player with ``share`` of the goals scores at least once."""

    player_lambda = lam * share
    return (1.0 - math.exp(-player_lambda)) * 100


class ScorerProbabilityEstimator:
    """Attribute a team's expected goals to its season scorers."""

    def __init__(self, params: ScorerParameters | None = None) -> None:
        self.params = params or ScorerParameters()

    def estimate(
        self,
        lam: float,
        team_total_goals: float,
        roster: Iterable[PlayerSeasonLine],
        top_k: int | None = None,
    ) -> List[PlayerScoringEstimate]:
        """Rank players by their chance of scoring at least once.

        Each player's rate is ``lam`` times their share of the team's
        season goals.  Players without goals or appearances are left out.
        Returns an empty list when the team total or ``lam`` is not
        positive.  Ties keep roster order.
        """

        limit = self.params.top_k if top_k is None else top_k
        if limit < 0:
            raise ValueError(f"top_k must be non-negative, got {limit}")
        lam = safe_number(lam)
        team_total_goals = safe_number(team_total_goals)
        if team_total_goals <= 0 or lam <= 0:
            logger.debug(
                "Insufficient signal for scorer estimates (lambda=%.3f, team goals=%.1f)",
                lam,
                team_total_goals,
            )
            return []

        estimates: List[PlayerScoringEstimate] = []
        for player in roster:
            if player.goals <= 0 or player.appearances <= 0:
                continue
            share = player.goals / team_total_goals
            estimates.append(
                PlayerScoringEstimate(
                    name=player.name,
                    position=player.position,
                    season_goals=player.goals,
                    appearances=player.appearances,
                    scoring_probability=anytime_scorer_probability(lam, share),
                )
            )
        estimates.sort(key=lambda estimate: estimate.scoring_probability, reverse=True)
        return estimates[:limit]


def estimate_top_scorers(
    lam: float,
    team_total_goals: float,
    roster: Iterable[PlayerSeasonLine],
    top_k: int | None = None,
    params: ScorerParameters | None = None,
) -> List[PlayerScoringEstimate]:
    """Functional wrapper around :class:`ScorerProbabilityEstimator`."""

    return ScorerProbabilityEstimator(params).estimate(lam, team_total_goals, roster, top_k)


__all__ = [
    "PlayerScoringEstimate",
    "ScorerProbabilityEstimator",
    "anytime_scorer_probability",
    "estimate_top_scorers",
]
