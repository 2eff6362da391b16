from __future__ import annotations

from fastapi import APIRouter

from app.schemas.sim import BadgeConfigRequest
from app.services.sim_facade import get_sessions, run_request
from matchengine.sim_game import ENGINE_VERSION
from worker import RequestKind

router = APIRouter()


@router.get("/")
async def root():
    """Health check."""
    return {"status": "ok", "engine_version": ENGINE_VERSION, "live_games": len(get_sessions())}


@router.post("/api/badges/configure")
async def api_configure_badges(req: BadgeConfigRequest):
    """Replace the badge / synergy catalog. Omitted lists keep the defaults; live games are cleared."""
    return run_request(RequestKind.INIT, req.model_dump(by_alias=True))
