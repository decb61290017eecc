"""Command line interface for offline match predictions."""

from __future__ import annotations

import argparse
import dataclasses
import json
import random
from pathlib import Path
from typing import Any, Callable, List, Sequence

import polars as pl

from .configuration import (
    ConfigurationError,
    ModelConfig,
    load_model_config,
    validate_model_config,
)
from .logging import configure_logging
from .normalization import PlayerSeasonLine, TeamSeasonStats, build_roster
from .prediction import MatchPrediction, MatchPredictor
from .scorers import PlayerScoringEstimate

CommandHandler = Callable[[ModelConfig, argparse.Namespace], int]


@dataclasses.dataclass(slots=True)
class Subcommand:
    """Container describing a CLI sub-command."""

    name: str
    help: str
    configure: Callable[[argparse.ArgumentParser], None]
    handler: CommandHandler

    def add_to_parser(
        self,
        subparsers,
        parent: argparse.ArgumentParser,
    ) -> argparse.ArgumentParser:
        """Create the parser for this subcommand."""

        parser = subparsers.add_parser(self.name, parents=[parent], help=self.help)
        self.configure(parser)
        parser.set_defaults(handler=self.handler, command=self.name)
        return parser


class SubcommandApp:
    """Registry that wires handlers into an :class:`argparse` parser."""

    def __init__(self, description: str | None = None) -> None:
        self._commands: list[Subcommand] = []
        self._description = description

    def command(
        self,
        name: str,
        *,
        help: str,
        configure: Callable[[argparse.ArgumentParser], None],
    ) -> Callable[[CommandHandler], CommandHandler]:
        """Register ``handler`` as a sub-command with configuration callback."""

        def _decorator(handler: CommandHandler) -> CommandHandler:
            self._commands.append(
                Subcommand(name=name, help=help, configure=configure, handler=handler)
            )
            return handler

        return _decorator

    def build_parser(self) -> argparse.ArgumentParser:
        parent = argparse.ArgumentParser(add_help=False)
        parent.add_argument(
            "--config-file",
            type=Path,
            default=None,
            help="Model parameter YAML (defaults to SOCCER_PREDICTOR_CONFIG)",
        )
        parent.add_argument(
            "--log-level",
            default=None,
            help="Logging level (defaults to SOCCER_PREDICTOR_LOG_LEVEL)",
        )
        parser = argparse.ArgumentParser(description=self._description)
        subparsers = parser.add_subparsers(dest="command", required=True)
        for command in self._commands:
            command.add_to_parser(subparsers, parent)
        return parser


APP = SubcommandApp(description="Match outcome predictions from team season statistics")


def _read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def _load_roster(path: Path | None) -> List[PlayerSeasonLine]:
    if path is None:
        return []
    if path.suffix.lower() == ".csv":
        return build_roster(pl.read_csv(path))
    return build_roster(_read_json(path))


def _format_scorers(label: str, scorers: Sequence[PlayerScoringEstimate]) -> List[str]:
    lines = [f"Top scorers {label}:"]
    if not scorers:
        lines.append("  (insufficient data)")
        return lines
    for estimate in scorers:
        lines.append(
            f"  {estimate.name:<24} {estimate.position:<12} "
            f"{estimate.season_goals:>4.0f} in {estimate.appearances:>3.0f}  "
            f"{estimate.scoring_probability:6.2f}%"
        )
    return lines


def format_prediction(prediction: MatchPrediction) -> str:
    """Render a prediction as a plain-text report."""

    model = prediction.expected_goals
    simulation = prediction.simulation
    lines = [
        f"Expected goals ({model.formula_version}): "
        f"A {model.lambda_a:.2f}  B {model.lambda_b:.2f}",
        f"  raw {model.raw_lambda_a:.2f}/{model.raw_lambda_b:.2f}  "
        f"target total {model.target_total:.2f}  scale {model.scale_factor:.3f}",
        f"Simulation ({simulation.trials} trials):",
        f"  A win {simulation.win_probability_a:6.2f}%  "
        f"draw {simulation.draw_probability:6.2f}%  "
        f"B win {simulation.win_probability_b:6.2f}%",
        f"  average goals {simulation.average_goals_a:.2f} - {simulation.average_goals_b:.2f}",
        "Most likely scorelines:",
    ]
    for scoreline in simulation.top_scorelines:
        lines.append(f"  {scoreline.score:<6} {scoreline.probability:6.2f}%")
    lines.extend(_format_scorers("A", prediction.top_scorers_a))
    lines.extend(_format_scorers("B", prediction.top_scorers_b))
    return "\n".join(lines)


def _configure_predict_parser(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--stats-a", type=Path, required=True, help="Home team statistics JSON")
    parser.add_argument("--stats-b", type=Path, required=True, help="Away team statistics JSON")
    parser.add_argument("--roster-a", type=Path, default=None, help="Home roster JSON or CSV")
    parser.add_argument("--roster-b", type=Path, default=None, help="Away roster JSON or CSV")
    parser.add_argument(
        "--target-total", type=float, default=None, help="Market total line to calibrate against"
    )
    parser.add_argument("--trials", type=int, default=None, help="Monte Carlo trials")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")


def _configure_validate_parser(parser: argparse.ArgumentParser) -> None:
    del parser


@APP.command(
    "predict",
    help="Predict a match from local statistics files",
    configure=_configure_predict_parser,
)
def _cmd_predict(config: ModelConfig, args: argparse.Namespace) -> int:
    if args.trials is not None:
        config = config.model_copy(
            update={"simulation": config.simulation.model_copy(update={"trials": args.trials})}
        )
    validate_model_config(config)
    rng = random.Random(args.seed) if args.seed is not None else None
    prediction = MatchPredictor(config).predict(
        TeamSeasonStats.from_payload(_read_json(args.stats_a)),
        TeamSeasonStats.from_payload(_read_json(args.stats_b)),
        roster_a=_load_roster(args.roster_a),
        roster_b=_load_roster(args.roster_b),
        target_total_override=args.target_total,
        rng=rng,
    )
    print(format_prediction(prediction))
    return 0


@APP.command(
    "validate-config",
    help="Validate the model parameter configuration",
    configure=_configure_validate_parser,
)
def _cmd_validate_config(config: ModelConfig, args: argparse.Namespace) -> int:
    del args
    warnings = validate_model_config(config)
    for message in warnings:
        print(f"[config-warning] {message}")
    print("Configuration OK")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    return APP.build_parser()


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        config = load_model_config(base_path=args.config_file)
        return args.handler(config, args)
    except ConfigurationError as exc:
        raise SystemExit(str(exc)) from exc


__all__ = ["format_prediction", "main"]


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(main())
