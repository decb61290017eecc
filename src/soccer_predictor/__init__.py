"""
soccer_predictor: match-outcome modelling from aggregated team season statistics.

This package turns a pair of team season statistic trees into calibrated
expected-goals rates, a Monte Carlo outcome distribution and ranked
goalscorer probabilities.
"""

from importlib.metadata import PackageNotFoundError, version

try:  # pragma: no cover - exercised in packaging workflows
    __version__ = version("soccer-predictor")
except PackageNotFoundError:  # pragma: no cover - local editable installs
    __version__ = "0.0.0"

_EXPORTS = {
    # Statistics normalisation
    "safe_number": ".modeling.normalization",
    "TeamSeasonStats": ".modeling.normalization",
    "PlayerSeasonLine": ".modeling.normalization",
    "build_roster": ".modeling.normalization",
    # Models
    "ExpectedGoalsEstimator": ".modeling.expected_goals",
    "ExpectedGoalsModel": ".modeling.expected_goals",
    "MatchSimulator": ".modeling.simulation",
    "SimulationResult": ".modeling.simulation",
    "ScorerProbabilityEstimator": ".modeling.scorers",
    "PlayerScoringEstimate": ".modeling.scorers",
    "MatchPredictor": ".modeling.prediction",
    "MatchPrediction": ".modeling.prediction",
    # Configuration
    "get_config": ".config",
    "load_model_config": ".modeling.configuration",
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


def __dir__() -> list[str]:  # pragma: no cover - trivial
    return sorted(list(globals().keys()) + __all__)
