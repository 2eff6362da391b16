from __future__ import annotations

import pytest

from conftest import roster_dicts, team_dict
from errors import ConfigurationError
from sim.bulk_runner import simulate_bulk


def _games():
    teams = {tid: team_dict(tid) for tid in ("AAA", "BBB", "CCC", "DDD")}
    return [
        {"game_id": "g1", "home_team": teams["AAA"], "away_team": teams["BBB"], "date": "2025-11-01"},
        {"game_id": "g2", "home_team": teams["BBB"], "away_team": teams["CCC"], "date": "2025-11-02"},
        {"game_id": "g3", "home_team": teams["CCC"], "away_team": teams["AAA"], "date": "2025-11-03"},
    ]


def test_three_games_three_progress_messages_in_order():
    progress = []
    out = simulate_bulk(_games(), process_evolution=True, seed=10, on_progress=progress.append)

    assert [p["completed"] for p in progress] == [1, 2, 3]
    assert {p["total"] for p in progress} == {3}
    assert [p["currentItemId"] for p in progress] == ["g1", "g2", "g3"]
    assert [r["game_id"] for r in out.results] == ["g1", "g2", "g3"]
    assert all("evolution" in r for r in out.results)

    appeared = {pid for r in out.results for side in ("home", "away") for pid in r["result"]["box_score"][side]}
    assert set(out.evolved_players) <= {p["player_id"] for t in ("AAA", "BBB", "CCC") for p in roster_dicts(t)}
    assert appeared <= set(out.evolved_players)
    assert not any(pid.startswith("DDD") for pid in out.evolved_players)


def test_evolution_carries_between_games():
    out = simulate_bulk(_games(), process_evolution=True, seed=3)
    # AAA plays in g1 and g3; season counters must reflect both box scores
    played = {}
    for r in out.results:
        for side in ("home", "away"):
            for pid, line in r["result"]["box_score"][side].items():
                if line["minutes"] > 0:
                    played[pid] = played.get(pid, 0) + 1
    for pid, player in out.evolved_players.items():
        assert player.games_played_this_season == played.get(pid, 0)
    assert max(played.get(f"AAA-{i}", 0) for i in range(10)) == 2


def test_without_evolution_no_player_map():
    out = simulate_bulk(_games()[:1], seed=1)
    assert out.evolved_players is None
    assert out.to_dict()["evolved_players"] is None
    assert "evolution" not in out.results[0]


def test_empty_batch():
    progress = []
    out = simulate_bulk([], process_evolution=True, on_progress=progress.append)
    assert out.total == 0
    assert progress == []
    assert out.to_dict()["evolved_players"] == []


def test_yield_hook_runs_every_n_games():
    calls = []
    games = _games() * 2
    simulate_bulk(games, seed=2, yield_every=2, on_yield=lambda: calls.append(1))
    assert len(calls) == 3


def test_failing_game_aborts_the_batch():
    games = _games()
    games[1] = {"game_id": "bad", "home_team": team_dict("EEE", size=0), "away_team": team_dict("FFF")}
    progress = []
    with pytest.raises(ConfigurationError):
        simulate_bulk(games, on_progress=progress.append)
    assert [p["currentItemId"] for p in progress] == ["g1"]
