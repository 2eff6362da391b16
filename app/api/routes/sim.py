from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter

from app.schemas.sim import SimBulkRequest, SimGameRequest
from app.services.sim_facade import run_request
from worker import RequestKind

router = APIRouter()


@router.post("/api/simulate-game")
async def api_simulate_game(req: SimGameRequest):
    """Simulate one full game and return the result (box score, quarter scores, play-by-play)."""
    return run_request(RequestKind.SIMULATE_GAME, req.model_dump(by_alias=True))


@router.post("/api/simulate-bulk")
async def api_simulate_bulk(req: SimBulkRequest):
    """Simulate games in order, optionally carrying post-game evolution between them.

    Progress notifications are collected and returned next to the result since
    the HTTP call only answers once the batch is done.
    """
    progress: List[Dict[str, Any]] = []
    result = run_request(
        RequestKind.SIMULATE_BULK,
        {
            "games": [g.model_dump() for g in req.games],
            "processEvolution": req.process_evolution,
            "difficulty": req.difficulty,
            "seed": req.seed,
        },
        on_progress=progress.append,
    )
    return {**result, "progress": progress}
