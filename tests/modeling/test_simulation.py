"""Regression tests for the Monte Carlo match simulator."""

from __future__ import annotations

import collections
import math
import random
import statistics

import pytest

from soccer_predictor import config as settings
from soccer_predictor.modeling.configuration import SimulationParameters
from soccer_predictor.modeling.simulation import (
    MatchSimulator,
    ScorelineProbability,
    poisson_sample,
    rank_scorelines,
    simulate_match,
)


class _ExplodingRandom(random.Random):
    def random(self) -> float:  # pragma: no cover - must never be called
        raise AssertionError("zero-rate samples must not consume randomness")


def _poisson_pmf(lam: float, k: int) -> float:
    return math.exp(-lam) * lam**k / math.factorial(k)


def _analytic_outcomes(lambda_a: float, lambda_b: float, max_goals: int = 15) -> tuple[float, float, float]:
    win_a = win_b = draw = 0.0
    for a in range(max_goals + 1):
        for b in range(max_goals + 1):
            p = _poisson_pmf(lambda_a, a) * _poisson_pmf(lambda_b, b)
            if a > b:
                win_a += p
            elif b > a:
                win_b += p
            else:
                draw += p
    return win_a * 100, win_b * 100, draw * 100


@pytest.mark.parametrize("lam", [0.0, -1.0, float("nan")])
def test_poisson_sample_non_positive_rate_is_zero(lam: float) -> None:
    assert poisson_sample(lam, _ExplodingRandom()) == 0


def test_poisson_sample_mean_and_variance_match_rate(rng: random.Random) -> None:
    draws = [poisson_sample(1.5, rng) for _ in range(20_000)]

    assert min(draws) >= 0
    assert statistics.fmean(draws) == pytest.approx(1.5, abs=0.05)
    assert statistics.pvariance(draws) == pytest.approx(1.5, abs=0.1)


def test_zero_rates_always_draw_nil_nil() -> None:
    result = simulate_match(0, 0, trials=500, rng=_ExplodingRandom())

    assert result.win_probability_a == 0
    assert result.win_probability_b == 0
    assert result.draw_probability == 100
    assert result.average_goals_a == 0
    assert result.average_goals_b == 0
    assert result.top_scorelines == (
        ScorelineProbability(goals_a=0, goals_b=0, count=500, probability=100.0),
    )
    assert result.top_scorelines[0].score == "0-0"


def test_outcomes_partition_trials(rng: random.Random) -> None:
    result = MatchSimulator().simulate(1.7, 0.9, trials=1_234, rng=rng)

    assert result.trials == 1_234
    assert result.wins_a + result.wins_b + result.draws == 1_234
    total = result.win_probability_a + result.win_probability_b + result.draw_probability
    assert total == pytest.approx(100.0, abs=1e-9)


def test_top_scorelines_sorted_and_truncated(rng: random.Random) -> None:
    result = MatchSimulator().simulate(2.2, 1.9, trials=4_000, rng=rng)

    assert 0 < len(result.top_scorelines) <= 7
    probabilities = [entry.probability for entry in result.top_scorelines]
    assert probabilities == sorted(probabilities, reverse=True)
    for entry in result.top_scorelines:
        assert entry.probability == pytest.approx(entry.count / 4_000 * 100)


def test_top_scorelines_limit_is_configurable(rng: random.Random) -> None:
    simulator = MatchSimulator(SimulationParameters(top_scorelines=3))

    result = simulator.simulate(1.5, 1.5, trials=2_000, rng=rng)

    assert len(result.top_scorelines) == 3


def test_equal_frequencies_break_ties_by_total_goals_then_score() -> None:
    counts = collections.Counter({(1, 0): 5, (0, 1): 5, (0, 0): 5, (2, 2): 9, (3, 0): 5})

    ranked = rank_scorelines(counts, trials=29, limit=4)

    assert [entry.score for entry in ranked] == ["2-2", "0-0", "0-1", "1-0"]


def test_tie_break_does_not_depend_on_insertion_order() -> None:
    forward = collections.Counter()
    for key in [(2, 1), (1, 2), (0, 3), (1, 1)]:
        forward[key] = 4
    backward = collections.Counter()
    for key in reversed([(2, 1), (1, 2), (0, 3), (1, 1)]):
        backward[key] = 4

    assert rank_scorelines(forward, 16, 3) == rank_scorelines(backward, 16, 3)
    assert [entry.score for entry in rank_scorelines(forward, 16, 3)] == ["1-1", "0-3", "1-2"]


def test_stronger_side_wins_more_often_within_tolerance() -> None:
    lambda_a, lambda_b = 1.7445, 0.7305

    result = MatchSimulator().simulate(lambda_a, lambda_b, trials=8_000, rng=random.Random(7))
    win_a, win_b, draw = _analytic_outcomes(lambda_a, lambda_b)

    assert result.win_probability_a > result.win_probability_b
    assert result.win_probability_a == pytest.approx(win_a, abs=3.0)
    assert result.win_probability_b == pytest.approx(win_b, abs=3.0)
    assert result.draw_probability == pytest.approx(draw, abs=3.0)
    assert result.average_goals_a == pytest.approx(lambda_a, abs=0.1)
    assert result.average_goals_b == pytest.approx(lambda_b, abs=0.1)


def test_seeded_runs_are_reproducible() -> None:
    simulator = MatchSimulator(SimulationParameters(trials=1_000, seed=11))

    first = simulator.simulate(1.4, 1.1)
    second = simulator.simulate(1.4, 1.1)
    third = simulator.simulate(1.4, 1.1, rng=random.Random(11))

    assert first == second == third


def test_settings_seed_applies_without_explicit_rng(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "config", settings.SoccerPredictorConfig(seed=23))
    simulator = MatchSimulator(SimulationParameters(trials=500))

    first = simulator.simulate(1.3, 0.9)
    second = simulate_match(1.3, 0.9, params=SimulationParameters(trials=500))
    expected = simulator.simulate(1.3, 0.9, rng=random.Random(23))

    assert first == second == expected


def test_parameter_seed_takes_precedence_over_settings_seed(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setattr(settings, "config", settings.SoccerPredictorConfig(seed=23))
    simulator = MatchSimulator(SimulationParameters(trials=500, seed=5))

    assert simulator.simulate(1.3, 0.9) == simulator.simulate(1.3, 0.9, rng=random.Random(5))


def test_default_trial_count_comes_from_parameters(rng: random.Random) -> None:
    result = MatchSimulator().simulate(1.0, 1.0, rng=rng)

    assert result.trials == 8_000


@pytest.mark.parametrize("trials", [0, -5])
def test_non_positive_trials_are_rejected(trials: int) -> None:
    with pytest.raises(ValueError, match="trials must be positive"):
        MatchSimulator().simulate(1.0, 1.0, trials=trials)
