from __future__ import annotations

import random
from collections import Counter

import pytest

from conftest import make_team, team_dict
from errors import ConfigurationError, GameStateError
from matchengine import (
    GameOptions,
    PLAYS,
    canonical_defense_scheme,
    canonical_offense_scheme,
    continue_game,
    period_label,
    select_play,
    sim_to_end,
    simulate_game,
    start_game,
)
from matchengine.modifiers import is_clutch_time


def _points_by_side(result):
    return {side: sum(line["points"] for line in lines.values()) for side, lines in result.box_score.items()}


def test_full_game_box_score_is_consistent(home_team, away_team):
    result = simulate_game(home_team, away_team, {"seed": 11})

    assert result.home_score != result.away_score
    assert _points_by_side(result) == {"home": result.home_score, "away": result.away_score}
    assert sum(q["home"] for q in result.quarter_scores) == result.home_score
    assert sum(q["away"] for q in result.quarter_scores) == result.away_score
    assert len(result.quarter_scores) == 4 + result.overtime_periods

    regulation_minutes = 40 + 5 * result.overtime_periods
    for side in ("home", "away"):
        total = sum(line["minutes"] for line in result.box_score[side].values())
        assert total == pytest.approx(5 * regulation_minutes, abs=1.0)
        stats = result.team_stats[side]
        assert stats["fgm"] <= stats["fga"]


def test_same_seed_same_game(home_team, away_team):
    a = simulate_game(home_team, away_team, {"seed": 5}).to_dict()
    b = simulate_game(home_team, away_team, {"seed": 5}).to_dict()
    assert a == b


def test_live_game_matches_full_simulation(home_team, away_team):
    full = simulate_game(home_team, away_team, {"seed": 21})

    step = start_game(home_team, away_team, {"seed": 21})
    assert step["quarter_result"]["label"] == "Q1"
    state = step["game_state"]
    step = continue_game(state)
    assert step["quarter_result"]["period"] == 2
    live = sim_to_end(step["game_state"])

    assert (live.home_score, live.away_score) == (full.home_score, full.away_score)
    assert live.box_score == full.box_score


def test_continue_game_reports_completion(home_team, away_team):
    step = start_game(home_team, away_team, {"seed": 3})
    while not step.get("is_complete"):
        step = continue_game(step["game_state"])
    final = step["final_result"]
    assert final["home_score"] != final["away_score"]
    assert "game_state" not in step


def test_simulation_does_not_touch_caller_rosters(home_team, away_team):
    before = home_team.to_dict()
    simulate_game(home_team, away_team, {"seed": 1})
    assert home_team.to_dict() == before


def test_sim_to_end_without_state_is_a_state_error():
    with pytest.raises(GameStateError):
        sim_to_end(None)


def test_malformed_snapshot_is_a_state_error(home_team, away_team):
    state = start_game(home_team, away_team, {"seed": 2})["game_state"]
    state["version"] = 99
    with pytest.raises(GameStateError):
        continue_game(state)
    with pytest.raises(GameStateError):
        continue_game({"status": "in_progress"})


def test_empty_roster_and_bad_options_are_configuration_errors(home_team):
    with pytest.raises(ConfigurationError):
        simulate_game(home_team, team_dict("EMP", size=0))
    with pytest.raises(ConfigurationError):
        simulate_game(home_team, home_team)
    with pytest.raises(ConfigurationError):
        GameOptions.coerce({"quarterMinutes": 0})
    with pytest.raises(ConfigurationError):
        GameOptions.coerce("fast")


def test_injured_players_sit_out(away_team):
    data = team_dict("INJ")
    data["roster"][0]["injury"] = {"tier": "severe", "name": "ACL", "games_remaining": 20}
    result = simulate_game(data, away_team, {"seed": 9})
    assert "INJ-0" not in result.box_score["home"]


def test_short_roster_plays_every_minute(away_team):
    result = simulate_game(team_dict("FIV", size=5), away_team, {"seed": 4, "quarterMinutes": 2})
    expected = 4 * 2 + 5 * result.overtime_periods
    for line in result.box_score["home"].values():
        assert line["minutes"] == pytest.approx(expected, abs=0.1)


def test_adjustments_change_lineup_and_reject_unknown_schemes(home_team, away_team):
    state = start_game(home_team, away_team, {"seed": 8})["game_state"]
    bench = [f"HOM-{i}" for i in range(5, 10)]
    step = continue_game(state, {"homeLineup": bench, "home_scheme": "Run and Gun"})
    assert not step["is_complete"]
    assert step["game_state"]["home"]["scheme"] == "run_and_gun"
    assert set(step["game_state"]["home"]["starter_ids"]) == {f"HOM-{i}" for i in range(5)}
    with pytest.raises(ConfigurationError):
        continue_game(state, {"home_scheme": "moonball"})
    with pytest.raises(ConfigurationError):
        continue_game(state, {"away_lineup": ["HOM-0"]})


def test_scheme_names_are_canonicalized():
    assert canonical_offense_scheme("Isolation Heavy") == "iso_heavy"
    assert canonical_offense_scheme("") == "balanced"
    assert canonical_offense_scheme("moonball") is None
    assert canonical_defense_scheme("2-3 zone") == "zone_2_3"
    assert canonical_defense_scheme("") == "man"


def test_select_play_follows_scheme_weights():
    lineup = make_team("T").roster[:5]
    rng = random.Random(42)
    iso = Counter(select_play(lineup, "iso_heavy", 20, 0, rng, tempo="halfcourt").category for _ in range(2000))
    post = Counter(select_play(lineup, "post_centric", 20, 0, rng, tempo="halfcourt").category for _ in range(2000))
    assert iso["isolation"] > post["isolation"]
    assert post["post_up"] > iso["post_up"]


def test_select_play_respects_tempo():
    lineup = make_team("T").roster[:5]
    rng = random.Random(1)
    assert all(select_play(lineup, "run_and_gun", 20, 0, rng, tempo="transition").tempo == "transition" for _ in range(50))
    assert {p.tempo for p in PLAYS} == {"halfcourt", "transition"}


def test_period_labels_and_clutch_window():
    assert [period_label(p, 4) for p in (1, 4, 5, 6)] == ["Q1", "Q4", "OT1", "OT2"]
    assert is_clutch_time(4, 4, 90, -3)
    assert not is_clutch_time(3, 4, 90, 0)
    assert not is_clutch_time(4, 4, 90, 12)
    assert is_clutch_time(5, 4, 60, 0)


def _possession_outcomes(fatigue, morale, trips=2000):
    from matchengine.possession import PossessionContext, simulate_possession
    from matchengine.sim_game import new_game_state

    home = team_dict("HOM")
    for p in home["roster"]:
        p.update(fatigue=fatigue, morale=morale)
    state = new_game_state(home, team_dict("AWY"), {"seed": 3, "play_by_play": False})
    ctx = PossessionContext(period=1, clock_sec=600.0, shot_clock=24.0, score_diff=0, record_play_by_play=False)
    counts = Counter()
    for i in range(trips):
        res = simulate_possession(random.Random(i), state.home, state.away, ctx)
        counts[res.outcome] += 1
    return counts


def test_worn_down_lineup_turns_the_ball_over_more():
    fresh = _possession_outcomes(fatigue=0.0, morale=90.0)
    tired = _possession_outcomes(fatigue=100.0, morale=10.0)
    assert tired["turnover"] > fresh["turnover"]


def test_defender_condition_scales_steals_and_blocks(home_team):
    from matchengine.possession import block_chance, steal_chance, turnover_chance
    from matchengine.tactics import DefenseModifiers

    mods = DefenseModifiers()
    handler = home_team.roster[0]
    assert turnover_chance(handler, 0.8, mods) > turnover_chance(handler, 1.0, mods)
    assert steal_chance(0.8, 0.0, mods) < steal_chance(1.0, 0.0, mods)
    assert block_chance("paint", 0.8, mods) < block_chance("paint", 1.0, mods)
