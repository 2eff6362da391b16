from __future__ import annotations

from fastapi import APIRouter

from app.schemas.evolution import (
    MonthlyRequest,
    PostGameRequest,
    RecalculateOverallRequest,
    RestDayRequest,
    SeasonEndRequest,
    WeeklyRequest,
)
from app.services.sim_facade import run_request
from worker import RequestKind

router = APIRouter()


@router.post("/api/evolution/post-game")
async def api_post_game(req: PostGameRequest):
    """Fatigue, injuries, morale, micro-development and streaks after one game."""
    return run_request(RequestKind.PROCESS_POST_GAME, req.model_dump(by_alias=True))


@router.post("/api/evolution/weekly")
async def api_weekly(req: WeeklyRequest):
    return run_request(RequestKind.PROCESS_WEEKLY, req.model_dump(by_alias=True))


@router.post("/api/evolution/monthly")
async def api_monthly(req: MonthlyRequest):
    return run_request(RequestKind.PROCESS_MONTHLY, req.model_dump(by_alias=True))


@router.post("/api/evolution/rest-day")
async def api_rest_day(req: RestDayRequest):
    return run_request(RequestKind.PROCESS_REST_DAY, req.model_dump(by_alias=True))


@router.post("/api/evolution/season-end")
async def api_season_end(req: SeasonEndRequest):
    """Heal, age, roll retirements and reset season counters."""
    return run_request(RequestKind.PROCESS_SEASON_END, req.model_dump(by_alias=True))


@router.post("/api/evolution/recalculate-overall")
async def api_recalculate_overall(req: RecalculateOverallRequest):
    return run_request(RequestKind.RECALCULATE_OVERALL, req.model_dump(by_alias=True))
