"""Normalisation of loosely structured provider statistics.

Upstream statistics arrive as JSON-shaped trees where any branch may be
missing, ``null`` or a numeric string.  This module is the single boundary
where such values are coerced: :func:`safe_number` turns any leaf into a
finite float and :meth:`TeamSeasonStats.from_payload` / :func:`build_roster`
convert the trees into explicit records.  Everything downstream works with
plain floats and never re-checks for presence.
"""

from __future__ import annotations

import dataclasses
import logging
import math
import re
from typing import Any, Iterable, List, Mapping, Sequence, SupportsFloat

import polars as pl

logger = logging.getLogger(__name__)

_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

UNKNOWN_PLAYER = "Unknown"
UNKNOWN_POSITION = "N/A"


def safe_number(value: object, fallback: float = 0.0) -> float:
    """Coerce ``value`` into a finite float, returning ``fallback`` otherwise.

    Strings are parsed from their leading numeric prefix, so ``"1.45"`` and
    ``"62%"`` both parse while ``"n/a"`` does not.  Booleans are not treated
    as numbers.  The function never raises.
    """

    if value is None or isinstance(value, bool):
        return fallback
    if isinstance(value, str):
        match = _NUMERIC_PREFIX.match(value)
        if match is None:
            return fallback
        number = float(match.group(0))
    elif isinstance(value, (int, float, SupportsFloat)):
        try:
            number = float(value)
        except (TypeError, ValueError, OverflowError):
            return fallback
    else:
        return fallback
    return number if math.isfinite(number) else fallback


def first_nonzero(*values: float) -> float:
    """Return the first value that is not zero, or ``0.0``."""

    for value in values:
        if value != 0:
            return value
    return 0.0


def _dig(tree: object, *path: str) -> object:
    node = tree
    for key in path:
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node


def _unwrap(payload: object) -> Mapping[str, Any]:
    if isinstance(payload, Mapping):
        inner = payload.get("response")
        if isinstance(inner, Mapping):
            return inner
        return payload
    return {}


# ---------------------------------------------------------------------------
# Team statistics
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True, slots=True)
class VenueSplit:
    """A statistic split by venue."""

    home: float = 0.0
    away: float = 0.0
    total: float = 0.0

    @classmethod
    def from_payload(cls, node: object) -> "VenueSplit":
        return cls(
            home=safe_number(_dig(node, "home")),
            away=safe_number(_dig(node, "away")),
            total=safe_number(_dig(node, "total")),
        )


@dataclasses.dataclass(frozen=True, slots=True)
class OverUnderCount:
    """Number of matches that finished over/under a goal threshold."""

    over: float = 0.0
    under: float = 0.0


@dataclasses.dataclass(frozen=True, slots=True)
class GoalsSplit:
    """Goals scored or conceded: per-match averages, totals and threshold counts."""

    average: VenueSplit = dataclasses.field(default_factory=VenueSplit)
    total: VenueSplit = dataclasses.field(default_factory=VenueSplit)
    under_over: Mapping[str, OverUnderCount] = dataclasses.field(default_factory=dict)

    @classmethod
    def from_payload(cls, node: object) -> "GoalsSplit":
        thresholds = _dig(node, "under_over")
        under_over = {}
        if isinstance(thresholds, Mapping):
            for threshold, counts in thresholds.items():
                under_over[str(threshold)] = OverUnderCount(
                    over=safe_number(_dig(counts, "over")),
                    under=safe_number(_dig(counts, "under")),
                )
        return cls(
            average=VenueSplit.from_payload(_dig(node, "average")),
            total=VenueSplit.from_payload(_dig(node, "total")),
            under_over=under_over,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class TeamSeasonStats:
    """Season aggregates for one team.

    Missing branches of the provider payload are represented by zeros, so
    a default-constructed instance is a valid "no information" team.
    """

    goals_for: GoalsSplit = dataclasses.field(default_factory=GoalsSplit)
    goals_against: GoalsSplit = dataclasses.field(default_factory=GoalsSplit)
    played: VenueSplit = dataclasses.field(default_factory=VenueSplit)
    form: str = ""

    @classmethod
    def from_payload(cls, payload: object) -> "TeamSeasonStats":
        """Build statistics from a provider tree, with or without its envelope."""

        tree = _unwrap(payload)
        form = tree.get("form")
        stats = cls(
            goals_for=GoalsSplit.from_payload(_dig(tree, "goals", "for")),
            goals_against=GoalsSplit.from_payload(_dig(tree, "goals", "against")),
            played=VenueSplit.from_payload(_dig(tree, "fixtures", "played")),
            form=form if isinstance(form, str) else "",
        )
        if not tree:
            logger.debug("Empty team statistics payload; using zeroed statistics")
        return stats

    @property
    def total_goals_scored(self) -> float:
        return self.goals_for.total.total


# ---------------------------------------------------------------------------
# Player statistics
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True, slots=True)
class PlayerSeasonLine:
    """A player's season goal tally."""

    name: str
    position: str
    goals: float
    appearances: float


def _text(value: object, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _player_from_provider_item(item: Mapping[str, Any]) -> PlayerSeasonLine | None:
    statistics = item.get("statistics")
    if not isinstance(statistics, Sequence) or isinstance(statistics, str) or not statistics:
        return None
    stats = statistics[0]
    if not isinstance(stats, Mapping):
        return None
    return PlayerSeasonLine(
        name=_text(_dig(item, "player", "name"), UNKNOWN_PLAYER),
        position=_text(_dig(stats, "games", "position"), UNKNOWN_POSITION),
        goals=safe_number(_dig(stats, "goals", "total")),
        appearances=safe_number(_dig(stats, "games", "appearences")),
    )


def _player_from_flat_row(row: Mapping[str, Any]) -> PlayerSeasonLine:
    return PlayerSeasonLine(
        name=_text(row.get("name"), UNKNOWN_PLAYER),
        position=_text(row.get("position"), UNKNOWN_POSITION),
        goals=safe_number(row.get("goals")),
        appearances=safe_number(row.get("appearances")),
    )


def build_roster(
    source: Mapping[str, Any] | Iterable[Mapping[str, Any] | PlayerSeasonLine] | pl.DataFrame | None,
) -> List[PlayerSeasonLine]:
    """Normalise roster data into :class:`PlayerSeasonLine` records.

    ``source`` may be the provider's players payload (``{"response": [...]}``
    where each item has ``player`` and ``statistics`` blocks), an iterable of
    such items or of flat ``name/position/goals/appearances`` mappings, or a
    :class:`polars.DataFrame` with those flat columns.  Provider items
    without a statistics block are skipped.
    """

    if source is None:
        return []
    if isinstance(source, pl.DataFrame):
        rows: Iterable[Any] = source.iter_rows(named=True)
    elif isinstance(source, Mapping):
        response = source.get("response")
        rows = response if isinstance(response, Sequence) and not isinstance(response, str) else []
    else:
        rows = source

    roster: List[PlayerSeasonLine] = []
    skipped = 0
    for row in rows:
        if isinstance(row, PlayerSeasonLine):
            roster.append(row)
            continue
        if not isinstance(row, Mapping):
            skipped += 1
            continue
        if "player" in row or "statistics" in row:
            player = _player_from_provider_item(row)
            if player is None:
                skipped += 1
                continue
            roster.append(player)
        else:
            roster.append(_player_from_flat_row(row))
    if skipped:
        logger.debug("Skipped %d roster entries without statistics", skipped)
    return roster


def resolve_team_id(name: str, teams_payload: object) -> int | None:
    """Look up a team identifier by case-insensitive name in a teams payload."""

    response = _dig(teams_payload, "response")
    if not isinstance(response, Sequence) or isinstance(response, str):
        return None
    wanted = name.strip().casefold()
    for item in response:
        team = _dig(item, "team")
        team_name = _dig(team, "name")
        if isinstance(team_name, str) and team_name.strip().casefold() == wanted:
            team_id = _dig(team, "id")
            if isinstance(team_id, bool):
                return None
            if isinstance(team_id, int):
                return team_id
            number = safe_number(team_id, math.nan)
            return int(number) if math.isfinite(number) else None
    return None


__all__ = [
    "GoalsSplit",
    "OverUnderCount",
    "PlayerSeasonLine",
    "TeamSeasonStats",
    "VenueSplit",
    "build_roster",
    "first_nonzero",
    "resolve_team_id",
    "safe_number",
]
