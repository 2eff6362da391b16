from __future__ import annotations

import random

import pytest

from conftest import player_dict
from evolution import (
    REPORT_CATEGORIES,
    process_post_game,
    process_rest_day,
    process_season_end,
    process_weekly_evolution,
)
from retirement import RetirementConfig


def _line(minutes, **stats):
    base = {"minutes": minutes, "points": 0, "rebounds": 0, "assists": 0, "steals": 0, "blocks": 0, "turnovers": 0, "fg3m": 0}
    base.update(stats)
    return base


def _game(home_lines, away_lines, home_score=101, away_score=95):
    return {
        "home_team_id": "HOM",
        "away_team_id": "AWY",
        "home_score": home_score,
        "away_score": away_score,
        "box_score": {"home": home_lines, "away": away_lines},
    }


def test_post_game_adds_fatigue_only_for_players_who_played():
    home = [player_dict("h1", team_id="HOM"), player_dict("h2", team_id="HOM", fatigue=12)]
    away = [player_dict("a1", team_id="AWY")]
    game = _game({"h1": _line(40, points=22, rebounds=5, assists=6, steals=2, turnovers=2)}, {"a1": _line(30)})

    out = process_post_game(home, away, game, {"seed": 7})

    h1, h2 = out.home_players
    assert h1.fatigue == pytest.approx(20.0)
    assert h2.fatigue == pytest.approx(12.0)
    assert h1.games_played_this_season == 1
    assert h2.games_played_this_season == 0
    assert h1.recent_performances[-1].rating == pytest.approx((22 + 5 + 9 + 4 - 2) / 40 * 10, abs=0.01)
    # caller's records are untouched
    assert home[0].get("fatigue") is None


def test_post_game_report_omits_empty_categories():
    home = [player_dict("h1", team_id="HOM", fatigue=60)]
    game = _game({"h1": _line(36)}, {})
    out = process_post_game(home, [], game, {"seed": 3})
    evo = out.evolution()
    assert set(evo) == {"home", "away"}
    assert evo["away"] == {}
    assert "fatigue_warnings" in evo["home"]
    for category, rows in evo["home"].items():
        assert category in REPORT_CATEGORIES
        assert rows


def test_every_stage_keeps_fatigue_and_morale_in_range():
    rng = random.Random(42)
    players = [
        player_dict(f"p{i}", team_id="HOM", fatigue=rng.uniform(0, 100), morale=rng.uniform(0, 100), age=rng.randint(19, 39))
        for i in range(12)
    ]
    game = _game({p["player_id"]: _line(48, turnovers=9) for p in players}, {}, home_score=70, away_score=120)
    stages = [
        lambda ps: process_post_game(ps, [], game, {"seed": 1}).home_players,
        lambda ps: process_weekly_evolution(ps, [game], "pro", 1, {"seed": 2}).players,
        lambda ps: process_rest_day(ps, [], {"seed": 3}).players,
        lambda ps: process_season_end(ps, {}, "pro", {"seed": 4}).players,
    ]
    current = players
    for stage in stages:
        current = stage(current)
        for p in current:
            assert 0.0 <= p.fatigue <= 100.0
            assert 0.0 <= p.morale <= 100.0


def test_weekly_processing_heals_after_enough_weeks():
    players = [player_dict("p1", team_id="HOM", injury={"tier": "moderate", "name": "Sprain", "games_remaining": 4})]
    for week in range(4):
        assert players[0]["injury"] is not None
        result = process_weekly_evolution(players, [], "pro", week, {"seed": week})
        players = [p.to_dict() for p in result.players]
    assert players[0]["injury"] is None
    assert "recoveries" in result.report.by_category()


def test_weekly_counts_down_by_games_played():
    players = [player_dict("p1", team_id="HOM", injury={"tier": "severe", "name": "Fracture", "games_remaining": 30})]
    games = [_game({}, {}), _game({}, {}, home_score=80, away_score=90), _game({}, {})]
    out = process_weekly_evolution(players, games, "pro", 1, {"seed": 1})
    assert out.players[0].injury.games_remaining == 27


def test_rest_day_skips_teams_that_play():
    players = [player_dict("h1", team_id="HOM", fatigue=50), player_dict("a1", team_id="AWY", fatigue=50)]
    out = process_rest_day(players, ["HOM"], {"seed": 1})
    by_id = {p.player_id: p for p in out.players}
    assert by_id["h1"].fatigue == 50
    assert by_id["a1"].fatigue < 50


def test_season_end_rolls_over_and_retires():
    young = player_dict(
        "y1",
        age=24,
        fatigue=40,
        contractYearsRemaining=2,
        gamesPlayedThisSeason=70,
        injury={"tier": "severe", "name": "ACL", "games_remaining": 20},
        recentPerformances=[30, 30, 30],
        streak={"kind": "hot", "games": 3, "bonus_applied": 2.0},
    )
    old = player_dict("o1", age=38)
    out = process_season_end([young, old], {}, "pro", {"seed": 1}, retirement_config=RetirementConfig(base_prob=1.0))
    y, o = out.players
    assert y.age == 25
    assert y.injury is None and y.fatigue == 0
    assert y.contract_years_remaining == 1
    assert y.games_played_this_season == 0 and y.recent_performances == [] and y.streak is None
    assert y.career_seasons == 1
    assert o.is_retired and o.age == 38
    assert [r["player_id"] for r in out.report.by_category()["retirements"]] == ["o1"]


def test_rest_days_count_each_day_without_a_game():
    players = [
        player_dict("h1", team_id="HOM", fatigue=90),
        player_dict("a1", team_id="AWY", fatigue=90),
        player_dict("n1", team_id="NOP", fatigue=90),
    ]
    days = [["HOM", "AWY"], ["HOM"], ["HOM"], []]
    by_id = {p.player_id: p for p in process_rest_day(players, options={"seed": 2}, days=days).players}
    assert by_id["h1"].fatigue < 90
    assert by_id["a1"].fatigue < by_id["h1"].fatigue
    assert by_id["n1"].fatigue <= by_id["a1"].fatigue

    untouched = process_rest_day(players, options={"seed": 2}, days=[]).players
    assert [p.fatigue for p in untouched] == [90, 90, 90]


def test_weekly_turns_growth_into_upgrade_points():
    players = [player_dict("p1", team_id="HOM", potential=75, growthSinceWeekly=1.0, upgradePoints=2)]
    out = process_weekly_evolution(players, [], "pro", 1, {"seed": 4})
    p = out.players[0]
    assert p.upgrade_points == 3
    assert p.growth_since_weekly == 0.0
    [row] = out.report.by_category()["upgrade_points"]
    assert row["points_earned"] == 1 and row["total_points"] == 3


def test_computer_teams_spend_their_upgrade_points():
    players = [player_dict("p1", team_id="HOM", potential=80, growthSinceWeekly=2.0)]
    out = process_weekly_evolution(players, [], "pro", 1, {"seed": 4, "isAI": True})
    p = out.players[0]
    assert p.upgrade_points == 0
    gained = sum(value - 70.0 for _group, _name, value in p.iter_attributes())
    assert gained == pytest.approx(3.0)
    rows = out.report.by_category()["development"]
    assert [r["reason"] for r in rows] == ["upgrade"]
    assert not any(name in rows[0]["changes"] for name in ("basketball_iq", "clutch", "consistency", "intangibles"))


def test_post_game_growth_feeds_the_weekly_tally():
    big = _line(36, points=40, rebounds=12, assists=10, steals=3, blocks=2, turnovers=1, fg3m=6)
    out = process_post_game([player_dict("p1", team_id="HOM")], [], _game({"p1": big}, {}), {"seed": 8})
    p = out.home_players[0]
    assert "development" in out.home.by_category()
    assert p.growth_since_weekly > 0
