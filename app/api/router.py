from fastapi import APIRouter

from app.api.routes import core, evolution, live_games, sim

api_router = APIRouter()
api_router.include_router(core.router)
api_router.include_router(sim.router)
api_router.include_router(live_games.router)
api_router.include_router(evolution.router)
