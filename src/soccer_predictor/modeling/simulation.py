"""Monte Carlo match simulation with independent Poisson goal counts."""

from __future__ import annotations

import collections
import dataclasses
import logging
import math
import random
from typing import Tuple

from ..config import get_config
from .configuration import SimulationParameters

logger = logging.getLogger(__name__)


def poisson_sample(lam: float, rng: random.Random) -> int:
    """Draw a Poisson(``lam``) count using Knuth's multiplication method.

    Uniform draws are multiplied into a running product until it falls to
    ``exp(-lam)`` or below; the count is the number of draws minus one.
    Non-positive (or NaN) rates return ``0`` without consuming randomness.
    """

    if not lam > 0:
        return 0
    limit = math.exp(-lam)
    k = 0
    p = 1.0
    while p > limit:
        k += 1
        p *= rng.random()
    return k - 1


@dataclasses.dataclass(frozen=True, slots=True)
class ScorelineProbability:
    """Frequency of one exact scoreline across the simulated trials."""

    goals_a: int
    goals_b: int
    count: int
    probability: float

    @property
    def score(self) -> str:
        return f"{self.goals_a}-{self.goals_b}"


@dataclasses.dataclass(frozen=True, slots=True)
class SimulationResult:
    """Aggregated outcome of ``trials`` independent simulated matches.

    Probabilities are percentages.  ``wins_a + wins_b + draws == trials``
    always holds, which makes the three outcome percentages a partition
    of 100.
    """

    trials: int
    wins_a: int
    wins_b: int
    draws: int
    win_probability_a: float
    win_probability_b: float
    draw_probability: float
    average_goals_a: float
    average_goals_b: float
    top_scorelines: Tuple[ScorelineProbability, ...]


def scoreline_sort_key(item: tuple[tuple[int, int], int]) -> tuple[int, int, int, int]:
    """Ordering for the scoreline histogram.

    Most frequent first.  Equal frequencies are ordered by fewer total
    goals, then by team A's goals, then by team B's goals, so the cutoff
    never depends on the order in which scorelines were first seen.
    """

    (goals_a, goals_b), count = item
    return (-count, goals_a + goals_b, goals_a, goals_b)


def rank_scorelines(
    counts: collections.Counter[tuple[int, int]], trials: int, limit: int
) -> Tuple[ScorelineProbability, ...]:
    if limit <= 0:
        return ()
    ranked = sorted(counts.items(), key=scoreline_sort_key)[:limit]
    return tuple(
        ScorelineProbability(
            goals_a=goals_a,
            goals_b=goals_b,
            count=count,
            probability=count / trials * 100,
        )
        for (goals_a, goals_b), count in ranked
    )


class MatchSimulator:
    """Repeated-sampling simulator for a single match."""

    def __init__(self, params: SimulationParameters | None = None) -> None:
        self.params = params or SimulationParameters()

    def _resolve_rng(self, rng: random.Random | None) -> random.Random:
        if rng is not None:
            return rng
        seed = self.params.seed
        if seed is None:
            seed = get_config().seed
        return random.Random(seed)

    def simulate(
        self,
        lambda_a: float,
        lambda_b: float,
        trials: int | None = None,
        rng: random.Random | None = None,
    ) -> SimulationResult:
        """Simulate ``trials`` matches and aggregate the outcomes.

        Each call without an explicit ``rng`` builds a private
        :class:`random.Random` seeded from :attr:`SimulationParameters.seed`,
        or from the ``SOCCER_PREDICTOR_SEED`` setting when that is unset,
        so concurrent calls never share generator state.
        """

        n = self.params.trials if trials is None else trials
        if n <= 0:
            raise ValueError(f"trials must be positive, got {n}")
        generator = self._resolve_rng(rng)

        wins_a = wins_b = draws = 0
        sum_a = sum_b = 0
        counts: collections.Counter[tuple[int, int]] = collections.Counter()
        for _ in range(n):
            goals_a = poisson_sample(lambda_a, generator)
            goals_b = poisson_sample(lambda_b, generator)
            sum_a += goals_a
            sum_b += goals_b
            if goals_a > goals_b:
                wins_a += 1
            elif goals_b > goals_a:
                wins_b += 1
            else:
                draws += 1
            counts[(goals_a, goals_b)] += 1

        result = SimulationResult(
            trials=n,
            wins_a=wins_a,
            wins_b=wins_b,
            draws=draws,
            win_probability_a=wins_a / n * 100,
            win_probability_b=wins_b / n * 100,
            draw_probability=draws / n * 100,
            average_goals_a=sum_a / n,
            average_goals_b=sum_b / n,
            top_scorelines=rank_scorelines(counts, n, self.params.top_scorelines),
        )
        logger.debug(
            "Simulated %d trials at %.3f/%.3f -> A %.2f%% draw %.2f%% B %.2f%%",
            n,
            lambda_a,
            lambda_b,
            result.win_probability_a,
            result.draw_probability,
            result.win_probability_b,
        )
        return result


def simulate_match(
    lambda_a: float,
    lambda_b: float,
    trials: int | None = None,
    rng: random.Random | None = None,
    params: SimulationParameters | None = None,
) -> SimulationResult:
    """Functional wrapper around :class:`MatchSimulator`."""

    return MatchSimulator(params).simulate(lambda_a, lambda_b, trials=trials, rng=rng)


__all__ = [
    "MatchSimulator",
    "ScorelineProbability",
    "SimulationResult",
    "poisson_sample",
    "rank_scorelines",
    "scoreline_sort_key",
    "simulate_match",
]
