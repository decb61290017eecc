"""Match-outcome modelling built on aggregated team season statistics.

The pipeline runs leaf-first: :mod:`.normalization` coerces the provider's
loosely typed statistics, :mod:`.expected_goals` turns two teams' numbers
into a calibrated Poisson rate pair, :mod:`.simulation` samples the match
repeatedly, and :mod:`.scorers` attributes each side's rate to its season
goalscorers.  :class:`MatchPredictor` wires the four together from a single
:class:`ModelConfig`.
"""

from .configuration import (
    ConfigurationError,
    ExpectedGoalsParameters,
    ModelConfig,
    ScorerParameters,
    SimulationParameters,
    load_model_config,
    validate_model_config,
)
from .expected_goals import ExpectedGoalsEstimator, ExpectedGoalsModel, build_expected_goals
from .normalization import (
    PlayerSeasonLine,
    TeamSeasonStats,
    build_roster,
    resolve_team_id,
    safe_number,
)
from .prediction import MatchPrediction, MatchPredictor, predict_match
from .scorers import PlayerScoringEstimate, ScorerProbabilityEstimator, estimate_top_scorers
from .simulation import (
    MatchSimulator,
    ScorelineProbability,
    SimulationResult,
    poisson_sample,
    simulate_match,
)

__all__ = [
    "ConfigurationError",
    "ExpectedGoalsEstimator",
    "ExpectedGoalsModel",
    "ExpectedGoalsParameters",
    "MatchPrediction",
    "MatchPredictor",
    "MatchSimulator",
    "ModelConfig",
    "PlayerScoringEstimate",
    "PlayerSeasonLine",
    "ScorelineProbability",
    "ScorerParameters",
    "ScorerProbabilityEstimator",
    "SimulationParameters",
    "SimulationResult",
    "TeamSeasonStats",
    "build_expected_goals",
    "build_roster",
    "estimate_top_scorers",
    "load_model_config",
    "poisson_sample",
    "predict_match",
    "resolve_team_id",
    "safe_number",
    "simulate_match",
    "validate_model_config",
]
