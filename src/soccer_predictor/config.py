"""Process-wide settings for soccer_predictor."""

from enum import Enum
from pathlib import Path

from platformdirs import user_config_dir
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    """Log levels accepted by :func:`configure_logging`."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class SoccerPredictorConfig(BaseSettings):
    """Configuration settings for soccer_predictor."""

    # Model parameter file
    parameters_path: Path = Field(
        default_factory=lambda: Path(user_config_dir("soccer_predictor")) / "model.yaml",
        description="YAML file holding expected-goals, simulation and scorer parameters",
        alias="SOCCER_PREDICTOR_CONFIG",
    )

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.WARNING,
        description="Log level: 'DEBUG', 'INFO', 'WARNING' or 'ERROR'",
        alias="SOCCER_PREDICTOR_LOG_LEVEL",
    )

    # Reproducibility
    seed: int | None = Field(
        default=None,
        description="Seed for simulations that are not handed a random source",
        alias="SOCCER_PREDICTOR_SEED",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global configuration instance
config = SoccerPredictorConfig()


def get_config() -> SoccerPredictorConfig:
    """Get the current configuration."""
    return config


def update_config(**kwargs) -> None:
    """Update configuration settings."""
    global config
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)
        else:
            raise ValueError(f"Unknown configuration option: {key}")


def reset_config() -> None:
    """Reset configuration to defaults."""
    global config
    config = SoccerPredictorConfig()
