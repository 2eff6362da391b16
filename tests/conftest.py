from __future__ import annotations

import random
from typing import Any, Dict, List

import pytest

from player_model import POSITIONS, Player, Team
from tables.attributes import ATTRIBUTE_GROUPS
from tables.badges import reset_catalog


def player_dict(player_id: str, *, level: float = 70.0, team_id: str = "", position: str = "", **overrides: Any) -> Dict[str, Any]:
    attrs = {name: level for names in ATTRIBUTE_GROUPS.values() for name in names}
    attrs.update(overrides.pop("attributes", {}))
    data: Dict[str, Any] = {
        "player_id": player_id,
        "name": f"Player {player_id}",
        "position": position or POSITIONS[sum(map(ord, player_id)) % len(POSITIONS)],
        "age": 26,
        "attributes": attrs,
        "potential": level + 5,
        "team_id": team_id,
    }
    data.update(overrides)
    return data


def make_player(player_id: str, **kw: Any) -> Player:
    return Player.from_dict(player_dict(player_id, **kw))


def roster_dicts(team_id: str, size: int = 10, *, level: float = 70.0) -> List[Dict[str, Any]]:
    return [
        player_dict(f"{team_id}-{i}", level=level - i, team_id=team_id, position=POSITIONS[i % len(POSITIONS)])
        for i in range(size)
    ]


def team_dict(team_id: str, *, size: int = 10, level: float = 70.0, **extra: Any) -> Dict[str, Any]:
    data = {"team_id": team_id, "name": f"Team {team_id}", "roster": roster_dicts(team_id, size, level=level)}
    data.update(extra)
    return data


def make_team(team_id: str, **kw: Any) -> Team:
    return Team.from_dict(team_dict(team_id, **kw))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def home_team() -> Team:
    return make_team("HOM", level=72)


@pytest.fixture
def away_team() -> Team:
    return make_team("AWY", level=68)


@pytest.fixture(autouse=True)
def _default_badges():
    yield
    reset_catalog()
