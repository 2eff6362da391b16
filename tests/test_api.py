from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.sim_facade import get_sessions
from conftest import player_dict, team_dict


@pytest.fixture
def api():
    get_sessions().reset()
    with TestClient(app) as c:
        yield c
    get_sessions().reset()


def _game(seed=5):
    return {"homeTeam": team_dict("HOM"), "awayTeam": team_dict("AWY"), "options": {"seed": seed}}


def test_health(api):
    r = api.get("/")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_simulate_game(api):
    r = api.post("/api/simulate-game", json=_game())
    assert r.status_code == 200
    body = r.json()
    assert body["winner"] in ("home", "away")
    assert set(body["box_score"]) == {"home", "away"}


def test_bad_roster_is_400(api):
    payload = _game()
    payload["awayTeam"] = team_dict("AWY", size=0)
    r = api.post("/api/simulate-game", json=payload)
    assert r.status_code == 400
    assert "empty roster" in r.json()["detail"]


def test_live_game_flow(api):
    r = api.post("/api/live-games", json=_game(seed=9))
    assert r.status_code == 200
    first = r.json()
    sid = first["session_id"]
    assert first["period"] == 1

    r = api.post(f"/api/live-games/{sid}/next-quarter", json={"adjustments": {"homeScheme": "motion"}})
    assert r.status_code == 200
    assert r.json()["period"] == 2

    assert api.get(f"/api/live-games/{sid}").json()["quarters_played"] == 2

    r = api.post(f"/api/live-games/{sid}/sim-to-end", json={})
    assert r.status_code == 200
    assert r.json()["is_game_complete"] is True

    # session is gone once the game is over
    assert api.post(f"/api/live-games/{sid}/sim-to-end", json={}).status_code == 404
    assert api.get(f"/api/live-games/{sid}").status_code == 404


def test_unknown_scheme_adjustment_is_400(api):
    sid = api.post("/api/live-games", json=_game()).json()["session_id"]
    r = api.post(f"/api/live-games/{sid}/next-quarter", json={"adjustments": {"home_scheme": "moonball"}})
    assert r.status_code == 400


def test_busy_session_is_409(api):
    sid = api.post("/api/live-games", json=_game()).json()["session_id"]
    with get_sessions().checkout(sid):
        r = api.post(f"/api/live-games/{sid}/next-quarter", json={})
    assert r.status_code == 409


def test_simulate_bulk_reports_progress(api):
    games = [{"gameId": f"g{i}", "homeTeam": team_dict("HOM"), "awayTeam": team_dict("AWY")} for i in range(3)]
    r = api.post("/api/simulate-bulk", json={"games": games, "processEvolution": True, "seed": 3})
    assert r.status_code == 200
    body = r.json()
    assert [p["completed"] for p in body["progress"]] == [1, 2, 3]
    assert len(body["results"]) == 3


def test_evolution_routes(api):
    players = [player_dict("p1", team_id="HOM", fatigue=50), player_dict("p2", team_id="AWY", fatigue=50)]

    r = api.post("/api/evolution/rest-day", json={"players": players, "teamsWithGames": ["HOM"]})
    assert r.status_code == 200
    fatigue = {p["player_id"]: p["fatigue"] for p in r.json()["players"]}
    assert fatigue["p1"] == 50 and fatigue["p2"] < 50

    r = api.post("/api/evolution/weekly", json={"players": players, "week": 3})
    assert r.status_code == 200

    r = api.post("/api/evolution/monthly", json={"players": players, "difficulty": "all-star"})
    assert r.status_code == 200

    r = api.post("/api/evolution/season-end", json={"players": players})
    assert r.status_code == 200
    assert all(p["fatigue"] == 0 for p in r.json()["players"])

    r = api.post("/api/evolution/recalculate-overall", json={"player": players[0]})
    assert r.status_code == 200
    assert 40 <= r.json()["overall"] <= 99

    game = {
        "home_team_id": "HOM",
        "away_team_id": "AWY",
        "home_score": 100,
        "away_score": 90,
        "box_score": {"home": {"p1": {"minutes": 30, "points": 20}}, "away": {}},
    }
    r = api.post("/api/evolution/post-game", json={"homePlayers": players[:1], "gameResult": game})
    assert r.status_code == 200
    assert r.json()["home_players"][0]["fatigue"] == pytest.approx(65.0)


def test_unknown_difficulty_is_400(api):
    r = api.post("/api/evolution/monthly", json={"players": [player_dict("p1")], "difficulty": "nightmare"})
    assert r.status_code == 400


def test_configure_badges_defaults(api):
    r = api.post("/api/badges/configure", json={})
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["badges"] > 0
    assert body["synergies"] > 0
