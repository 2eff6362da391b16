from __future__ import annotations

import pytest

from conftest import player_dict
from errors import ConfigurationError
from player_model import Player, Team


def test_from_dict_accepts_camel_case_and_clamps_state():
    p = Player.from_dict(
        player_dict(
            "p1",
            workEthic=90,
            fatigue=140,
            morale=-5,
            contractYearsRemaining=3,
            injury={"type": "moderate", "name": "Sprained Ankle", "gamesRemaining": 7},
        )
    )
    assert p.work_ethic == 90
    assert p.fatigue == 100.0
    assert p.morale == 0.0
    assert p.contract_years_remaining == 3
    assert p.is_injured
    assert p.injury.games_remaining == 7


def test_missing_attributes_default_and_grouped_form_is_accepted():
    p = Player.from_dict({"id": "x", "position": "C", "attributes": {"shooting": {"threePoint": 90}}})
    assert p.attribute("three_point") == 90
    assert p.attribute("block") == 50


@pytest.mark.parametrize(
    "bad",
    [
        {"position": "SF", "attributes": {}},
        {"id": "x", "position": "QB", "attributes": {}},
        {"id": "x", "position": "SF", "attributes": {"speed": "fast"}},
        {"id": "x", "position": "SF", "attributes": {}, "injury": {"type": "broken", "games_remaining": 3}},
    ],
)
def test_malformed_records_raise_configuration_error(bad):
    with pytest.raises(ConfigurationError):
        Player.from_dict(bad)


def test_round_trip_keeps_every_field():
    p = Player.from_dict(player_dict("p1", traits=["Team Player"], badges={"deadeye": "gold"}, morale=55))
    again = Player.from_dict(p.to_dict())
    assert again == p


def test_team_players_override_embedded_roster():
    team = Team.from_dict({"id": "T", "name": "T", "roster": [player_dict("a")]}, players=[player_dict("b")])
    assert [p.player_id for p in team.roster] == ["b"]
    assert team.find_player("b") is not None
