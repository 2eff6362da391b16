from __future__ import annotations

import uuid

from fastapi import APIRouter

from app.schemas.sim import LiveGameStartRequest, LiveGameStepRequest
from app.services.sim_facade import get_sessions, http_error, run_request
from errors import SessionNotFoundError
from worker import RequestKind

router = APIRouter()


@router.post("/api/live-games")
async def api_start_live_game(req: LiveGameStartRequest):
    """Start a quarter-by-quarter game; plays the first quarter."""
    session_id = uuid.uuid4().hex
    payload = req.model_dump(by_alias=True)
    payload["sessionId"] = session_id
    return run_request(RequestKind.SIMULATE_QUARTER, payload)


@router.get("/api/live-games/{session_id}")
async def api_get_live_game(session_id: str):
    try:
        session = get_sessions().get(session_id)
    except SessionNotFoundError as e:
        raise http_error(e) from e
    return {
        "session_id": session.session_id,
        "quarters_played": session.quarters_played,
        "busy": session.busy,
        "game_state": session.game_state,
    }


@router.post("/api/live-games/{session_id}/next-quarter")
async def api_next_quarter(session_id: str, req: LiveGameStepRequest):
    """Apply adjustments (lineups, schemes) and play the next quarter.

    An unknown session is 404 unless ``resumeState`` is given, in which case
    the game is restored from it.
    """
    if session_id not in get_sessions() and req.resume_state is None:
        raise http_error(SessionNotFoundError(f"No live game for session {session_id}"))
    payload = req.model_dump(by_alias=True)
    payload["sessionId"] = session_id
    return run_request(RequestKind.SIMULATE_QUARTER, payload)


@router.post("/api/live-games/{session_id}/sim-to-end")
async def api_sim_to_end(session_id: str, req: LiveGameStepRequest):
    if session_id not in get_sessions() and req.resume_state is None:
        raise http_error(SessionNotFoundError(f"No live game for session {session_id}"))
    payload = req.model_dump(by_alias=True)
    payload["sessionId"] = session_id
    return run_request(RequestKind.SIM_TO_END, payload)


@router.delete("/api/live-games/{session_id}")
async def api_abandon_live_game(session_id: str):
    if not get_sessions().clear(session_id):
        raise http_error(SessionNotFoundError(f"No live game for session {session_id}"))
    return {"session_id": session_id, "cleared": True}
