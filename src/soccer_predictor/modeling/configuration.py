from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, MutableMapping, Sequence

import yaml
from pydantic import BaseModel, Field

EXTRA_CONFIG_VARIABLE = "SOCCER_PREDICTOR_EXTRA_CONFIG"
ENV_OVERRIDE_PREFIX = "SOCCER_PREDICTOR__"

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when model configuration validation fails."""


# Attack weight, conceded weight, home multiplier, away multiplier.
FORMULA_PRESETS: Dict[str, tuple[float, float, float, float]] = {
    "v1": (0.7, 0.3, 1.1, 0.9),
    "neutral-v0": (0.7, 0.3, 1.0, 1.1),
}
DEFAULT_FORMULA = "v1"


class ExpectedGoalsParameters(BaseModel):
    """Weights and bounds used to derive the expected-goals rate pair."""

    formula_version: str = DEFAULT_FORMULA
    attack_weight: float = 0.7
    conceded_weight: float = 0.3
    home_advantage: float = 1.1
    away_factor: float = 0.9
    min_raw_lambda: float = 0.05
    max_raw_lambda: float = 4.5
    min_scale_factor: float = 0.4
    max_scale_factor: float = 2.5
    zero_total_fallback: float = 0.1

    @classmethod
    def from_preset(cls, name: str, **overrides: Any) -> "ExpectedGoalsParameters":
        """Build parameters from a named formula version."""

        try:
            attack, conceded, home, away = FORMULA_PRESETS[name]
        except KeyError as exc:
            known = ", ".join(sorted(FORMULA_PRESETS))
            raise ConfigurationError(
                f"Unknown expected-goals formula {name!r}; expected one of: {known}"
            ) from exc
        values: Dict[str, Any] = {
            "formula_version": name,
            "attack_weight": attack,
            "conceded_weight": conceded,
            "home_advantage": home,
            "away_factor": away,
        }
        values.update(overrides)
        return cls(**values)


class SimulationParameters(BaseModel):
    """Monte Carlo settings for the match simulator."""

    trials: int = 8_000
    top_scorelines: int = 7
    seed: int | None = None


class ScorerParameters(BaseModel):
    """Controls for goalscorer ranking."""

    top_k: int = 3


class ModelConfig(BaseModel):
    """Aggregate configuration for the prediction pipeline."""

    expected_goals: ExpectedGoalsParameters = Field(
        default_factory=ExpectedGoalsParameters
    )
    simulation: SimulationParameters = Field(default_factory=SimulationParameters)
    scorers: ScorerParameters = Field(default_factory=ScorerParameters)


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise TypeError(f"Configuration at {path} must be a mapping")
    return dict(data)


def _merge_layers(base: Dict[str, Any], layer: Mapping[str, Any]) -> Dict[str, Any]:
    merged: Dict[str, Any] = dict(base)
    for key, value in layer.items():
        if (
            key in merged
            and isinstance(merged[key], Mapping)
            and isinstance(value, Mapping)
        ):
            merged[key] = _merge_layers(dict(merged[key]), value)
        else:
            merged[key] = value
    return merged


def _coerce_env_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        lowered = raw.lower()
        if lowered in {"true", "false"}:
            return lowered == "true"
        return raw


def _set_nested(mapping: MutableMapping[str, Any], path: Iterable[str], value: Any) -> None:
    segments = list(path)
    if not segments:
        return
    head, *tail = segments
    key = head.lower().replace("-", "_")
    if not tail:
        mapping[key] = value
        return
    child = mapping.get(key)
    if not isinstance(child, MutableMapping):
        child = {}
    else:
        child = dict(child)
    mapping[key] = child
    _set_nested(child, tail, value)


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    updated = dict(data)
    for key, raw_value in os.environ.items():
        if not key.startswith(ENV_OVERRIDE_PREFIX):
            continue
        suffix = key[len(ENV_OVERRIDE_PREFIX) :]
        path = [segment for segment in suffix.split("__") if segment]
        if not path:
            continue
        _set_nested(updated, path, _coerce_env_value(raw_value))
    return updated


def _apply_formula_preset(data: Dict[str, Any]) -> Dict[str, Any]:
    section = data.get("expected_goals")
    if not isinstance(section, Mapping) or "formula_version" not in section:
        return data
    overrides = {k: v for k, v in section.items() if k != "formula_version"}
    preset = ExpectedGoalsParameters.from_preset(
        str(section["formula_version"]), **overrides
    )
    updated = dict(data)
    updated["expected_goals"] = preset.model_dump()
    return updated


def load_model_config(
    *,
    base_path: str | os.PathLike[str] | None = None,
    extra_paths: Sequence[str | os.PathLike[str]] | None = None,
) -> ModelConfig:
    """Load layered model parameters.

    The loader reads ``base_path`` (by default the file named by
    :attr:`SoccerPredictorConfig.parameters_path`), merges any additional
    override files, including those listed in ``SOCCER_PREDICTOR_EXTRA_CONFIG``,
    and finally applies environment variables of the form
    ``SOCCER_PREDICTOR__simulation__trials=2000``.  A missing base file
    yields the built-in defaults.  Naming ``expected_goals.formula_version``
    selects a preset from :data:`FORMULA_PRESETS`; explicit weights in the
    same section still win over the preset.
    """

    if base_path is None:
        from ..config import get_config

        config_path = Path(get_config().parameters_path)
    else:
        config_path = Path(base_path)

    if config_path.exists():
        data = _load_yaml(config_path)
    else:
        logger.debug("Model configuration %s not found; using defaults", config_path)
        data = {}

    override_sources: list[Path] = []
    if extra_paths:
        override_sources.extend(Path(path) for path in extra_paths)
    env_overrides = os.getenv(EXTRA_CONFIG_VARIABLE)
    if env_overrides:
        override_sources.extend(
            Path(token) for token in env_overrides.split(os.pathsep) if token
        )

    merged = dict(data)
    for override in override_sources:
        if override.exists():
            merged = _merge_layers(merged, _load_yaml(override))

    merged = _apply_env_overrides(merged)
    merged = _apply_formula_preset(merged)

    return ModelConfig.model_validate(merged)


def validate_model_config(config: ModelConfig) -> list[str]:
    """Validate a :class:`ModelConfig` instance.

    Args:
        config: Parsed configuration object to validate.

    Returns:
        A list of warning messages. The function raises
        :class:`ConfigurationError` if any fatal issues are detected.
    """

    errors: list[str] = []
    warnings: list[str] = []

    xg = config.expected_goals
    if xg.formula_version not in FORMULA_PRESETS:
        errors.append(
            f"expected_goals.formula_version {xg.formula_version!r} is not a known preset"
        )
    if xg.min_raw_lambda <= 0:
        errors.append("expected_goals.min_raw_lambda must be greater than zero")
    if xg.min_raw_lambda > xg.max_raw_lambda:
        errors.append("expected_goals.min_raw_lambda cannot exceed max_raw_lambda")
    if xg.min_scale_factor <= 0:
        errors.append("expected_goals.min_scale_factor must be greater than zero")
    if xg.min_scale_factor > xg.max_scale_factor:
        errors.append("expected_goals.min_scale_factor cannot exceed max_scale_factor")
    if xg.zero_total_fallback <= 0:
        errors.append("expected_goals.zero_total_fallback must be greater than zero")
    for field_name in ("attack_weight", "conceded_weight", "home_advantage", "away_factor"):
        if getattr(xg, field_name) < 0:
            errors.append(f"expected_goals.{field_name} must be non-negative")
    if abs(xg.attack_weight + xg.conceded_weight - 1.0) > 1e-9:
        warnings.append(
            "expected_goals attack and conceded weights do not sum to 1; "
            "raw rates will be biased before calibration"
        )
    if xg.formula_version in FORMULA_PRESETS:
        preset = FORMULA_PRESETS[xg.formula_version]
        actual = (xg.attack_weight, xg.conceded_weight, xg.home_advantage, xg.away_factor)
        if actual != preset:
            warnings.append(
                f"expected_goals weights differ from formula {xg.formula_version!r}"
            )

    simulation = config.simulation
    if simulation.trials <= 0:
        errors.append("simulation.trials must be greater than zero")
    elif simulation.trials < 1_000:
        warnings.append(
            "simulation.trials is below 1000; outcome percentages will be noisy"
        )
    if simulation.top_scorelines < 0:
        errors.append("simulation.top_scorelines must be non-negative")

    if config.scorers.top_k < 0:
        errors.append("scorers.top_k must be non-negative")

    if errors:
        bullet_list = "\n".join(f"- {message}" for message in errors)
        raise ConfigurationError(f"Configuration validation failed:\n{bullet_list}")

    return warnings


__all__ = [
    "ConfigurationError",
    "DEFAULT_FORMULA",
    "ExpectedGoalsParameters",
    "FORMULA_PRESETS",
    "ModelConfig",
    "ScorerParameters",
    "SimulationParameters",
    "load_model_config",
    "validate_model_config",
]
