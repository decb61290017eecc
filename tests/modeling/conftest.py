from __future__ import annotations

import copy
import random
from typing import Any, Dict, List

import pytest

from soccer_predictor.modeling.normalization import (
    PlayerSeasonLine,
    TeamSeasonStats,
    build_roster,
)


HOME_STATS_PAYLOAD: Dict[str, Any] = {
    "get": "teams/statistics",
    "response": {
        "team": {"id": 50, "name": "Manchester City"},
        "form": "WWDWLWWW",
        "fixtures": {"played": {"home": 19, "away": 19, "total": 38}},
        "goals": {
            "for": {
                "total": {"home": 38, "away": 23, "total": 61},
                "average": {"home": "2.0", "away": "1.2", "total": "1.6"},
                "under_over": {
                    "1.5": {"over": 27, "under": 11},
                    "2.5": {"over": 16, "under": 22},
                },
            },
            "against": {
                "total": {"home": 15, "away": 27, "total": 42},
                "average": {"home": "0.8", "away": "1.4", "total": "1.1"},
            },
        },
    },
}

AWAY_STATS_PAYLOAD: Dict[str, Any] = {
    "response": {
        "team": {"id": 42, "name": "Arsenal"},
        "form": "LDWDL",
        "fixtures": {"played": {"home": 19, "away": 19, "total": 38}},
        "goals": {
            "for": {
                "total": {"home": 28, "away": 17, "total": 45},
                "average": {"home": "1.5", "away": "0.9", "total": "1.2"},
            },
            "against": {
                "total": {"home": 21, "away": 19, "total": 40},
                "average": {"home": "1.1", "away": "1.0", "total": "1.05"},
            },
        },
    },
}

PLAYERS_PAYLOAD: Dict[str, Any] = {
    "response": [
        {
            "player": {"id": 1, "name": "E. Haaland"},
            "statistics": [
                {"games": {"appearences": 35, "position": "Attacker"}, "goals": {"total": 27}}
            ],
        },
        {
            "player": {"id": 2, "name": "P. Foden"},
            "statistics": [
                {"games": {"appearences": 33, "position": "Midfielder"}, "goals": {"total": 11}}
            ],
        },
        {
            "player": {"id": 3, "name": "J. Alvarez"},
            "statistics": [
                {"games": {"appearences": 31, "position": "Attacker"}, "goals": {"total": 9}}
            ],
        },
        {
            "player": {"id": 4, "name": "R. Dias"},
            "statistics": [
                {"games": {"appearences": 30, "position": "Defender"}, "goals": {"total": None}}
            ],
        },
        {
            "player": {"id": 5, "name": "Reserve Keeper"},
            "statistics": [],
        },
        {
            "player": {"id": 6, "name": "K. De Bruyne"},
            "statistics": [
                {"games": {"appearences": 18, "position": "Midfielder"}, "goals": {"total": "4"}}
            ],
        },
    ]
}


@pytest.fixture()
def home_payload() -> Dict[str, Any]:
    return copy.deepcopy(HOME_STATS_PAYLOAD)


@pytest.fixture()
def away_payload() -> Dict[str, Any]:
    return copy.deepcopy(AWAY_STATS_PAYLOAD)


@pytest.fixture()
def players_payload() -> Dict[str, Any]:
    return copy.deepcopy(PLAYERS_PAYLOAD)


@pytest.fixture()
def home_stats(home_payload: Dict[str, Any]) -> TeamSeasonStats:
    return TeamSeasonStats.from_payload(home_payload)


@pytest.fixture()
def away_stats(away_payload: Dict[str, Any]) -> TeamSeasonStats:
    return TeamSeasonStats.from_payload(away_payload)


@pytest.fixture()
def home_roster(players_payload: Dict[str, Any]) -> List[PlayerSeasonLine]:
    return build_roster(players_payload)


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(20240901)
