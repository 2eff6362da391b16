from __future__ import annotations

import threading

import pytest

from conftest import player_dict, team_dict
from errors import ConfigurationError, GameStateError, WorkerRequestError, WorkerTerminatedError
from worker import HANDLERS, HandlerContext, RequestKind, SessionRegistry, WorkerClient, dispatch, parse_request


def _game_payload(seed=7, **extra):
    payload = {"homeTeam": team_dict("HOM"), "awayTeam": team_dict("AWY"), "options": {"seed": seed}}
    payload.update(extra)
    return payload


@pytest.fixture
def client():
    c = WorkerClient()
    yield c
    c.terminate()


def test_every_request_kind_has_a_handler():
    assert set(HANDLERS) == set(RequestKind)


def test_unknown_request_kind_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        parse_request({"type": "SIMULATE_SEASON", "correlationId": "1", "payload": {}})
    with pytest.raises(ConfigurationError):
        parse_request({"type": "INIT", "payload": {}})


def test_simulate_game_round_trip(client):
    result = client.request(RequestKind.SIMULATE_GAME, _game_payload(), timeout=30)
    assert result["home_team_id"] == "HOM"
    assert result["home_score"] != result["away_score"]


def test_failures_come_back_as_structured_errors(client):
    future = client.submit("SIMULATE_GAME", {"homeTeam": team_dict("HOM"), "awayTeam": team_dict("AWY", size=0)})
    with pytest.raises(WorkerRequestError, match="empty roster"):
        future.result(timeout=30)
    # the worker keeps serving after a failed request
    assert client.request("RECALCULATE_OVERALL", {"player": player_dict("p1")}, timeout=10)["overall"] > 0


def test_sim_to_end_without_a_game_fails_cleanly(client):
    with pytest.raises(WorkerRequestError, match="No game in progress to sim to end"):
        client.request("SIM_TO_END", {}, timeout=10)


def test_bulk_progress_arrives_before_result(client):
    seen = []
    games = [
        {"gameId": f"g{i}", "homeTeam": team_dict("HOM"), "awayTeam": team_dict("AWY")}
        for i in range(1, 4)
    ]
    future = client.submit(
        RequestKind.SIMULATE_BULK,
        {"games": games, "processEvolution": True, "seed": 1},
        on_progress=lambda p: seen.append((p["completed"], p["total"], p["currentItemId"])),
    )
    result = future.result(timeout=60)
    assert seen == [(1, 3, "g1"), (2, 3, "g2"), (3, 3, "g3")]
    assert result["total"] == 3
    assert len(result["evolved_players"]) == 20


def test_quarter_by_quarter_session_is_cleared_on_completion():
    sessions = SessionRegistry()
    ctx = HandlerContext(sessions)
    first = dispatch(RequestKind.SIMULATE_QUARTER, _game_payload(seed=4), ctx)
    assert first["period"] == 1 and not first["is_game_complete"]
    assert "default" in sessions

    step = first
    while not step["is_game_complete"]:
        step = dispatch(RequestKind.SIMULATE_QUARTER, {}, ctx)
    assert "result" in step
    assert "default" not in sessions


def test_sim_to_end_resumes_from_saved_state():
    ctx = HandlerContext(SessionRegistry())
    first = dispatch(RequestKind.SIMULATE_QUARTER, _game_payload(seed=6, sessionId="s1"), ctx)
    saved = first["game_state"]

    fresh = HandlerContext(SessionRegistry())
    done = dispatch(RequestKind.SIM_TO_END, {"sessionId": "s1", "resumeState": saved}, fresh)
    assert done["is_game_complete"]
    assert "s1" not in fresh.sessions


def test_failed_sim_to_end_leaves_no_session_behind():
    sessions = SessionRegistry()
    ctx = HandlerContext(sessions)
    with pytest.raises(GameStateError):
        dispatch(RequestKind.SIM_TO_END, {"sessionId": "broken", "resumeState": {"version": 1}}, ctx)
    assert "broken" not in sessions
    assert len(sessions) == 0


def test_sessions_are_independent_and_single_flight():
    sessions = SessionRegistry()
    ctx = HandlerContext(sessions)
    dispatch(RequestKind.SIMULATE_QUARTER, _game_payload(seed=1, sessionId="a"), ctx)
    dispatch(RequestKind.SIMULATE_QUARTER, _game_payload(seed=2, sessionId="b"), ctx)
    assert set(sessions.session_ids()) == {"a", "b"}

    with sessions.checkout("a"):
        with pytest.raises(GameStateError):
            dispatch(RequestKind.SIMULATE_QUARTER, {"sessionId": "a"}, ctx)
        # the other session is unaffected
        assert dispatch(RequestKind.SIMULATE_QUARTER, {"sessionId": "b"}, ctx)["period"] == 2


def test_init_resets_sessions_and_badges():
    sessions = SessionRegistry()
    ctx = HandlerContext(sessions)
    dispatch(RequestKind.SIMULATE_QUARTER, _game_payload(), ctx)
    out = dispatch(RequestKind.INIT, {}, ctx)
    assert out["success"] is True
    assert len(sessions) == 0


def test_terminate_fails_every_pending_request():
    client = WorkerClient()
    gate = threading.Event()
    entered = threading.Event()

    def block(progress):
        entered.set()
        gate.wait(5)

    games = [{"gameId": "g1", "homeTeam": team_dict("HOM"), "awayTeam": team_dict("AWY")}] * 2
    busy = client.submit(RequestKind.SIMULATE_BULK, {"games": games}, on_progress=block)
    queued = client.submit(RequestKind.SIMULATE_GAME, _game_payload())
    assert entered.wait(30)

    client.terminate()
    gate.set()
    for future in (busy, queued):
        with pytest.raises(WorkerTerminatedError, match="Worker terminated"):
            future.result(timeout=10)
    assert client.pending_count == 0
    with pytest.raises(WorkerTerminatedError):
        client.submit(RequestKind.INIT).result(timeout=1)
