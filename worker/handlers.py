from __future__ import annotations

"""Request handlers, one per ``RequestKind``.

Every handler takes ``(payload, ctx)`` and returns a JSON-safe result. Errors
are raised; the worker loop turns them into ERROR messages. ``HANDLERS`` must
cover every request kind (checked when this module is imported).
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from errors import ConfigurationError, GameStateError
from evolution import (
    process_monthly_development,
    process_post_game,
    process_rest_day,
    process_season_end,
    process_weekly_evolution,
    recalculate_overall,
)
from matchengine import continue_game, sim_to_end, simulate_game, start_game
from player_model import Team
from sim.bulk_runner import simulate_bulk
from tables.badges import configure_badges

from .protocol import RequestKind
from .sessions import SessionRegistry

logger = logging.getLogger(__name__)

# Session used when a request does not name one; matches a caller that only
# ever drives a single live game.
DEFAULT_SESSION_ID = "default"


@dataclass
class HandlerContext:
    sessions: SessionRegistry
    on_progress: Optional[Callable[[Dict[str, Any]], None]] = None
    on_yield: Optional[Callable[[], None]] = None


Handler = Callable[[Mapping[str, Any], HandlerContext], Any]


def _get(payload: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if payload.get(k) is not None:
            return payload[k]
    return default


def _require(payload: Mapping[str, Any], *keys: str) -> Any:
    value = _get(payload, *keys)
    if value is None:
        raise ConfigurationError(f"payload is missing {keys[0]}")
    return value


def _teams(payload: Mapping[str, Any]):
    home = Team.from_dict(
        _require(payload, "homeTeam", "home_team"),
        players=_get(payload, "homePlayers", "home_players"),
    )
    away = Team.from_dict(
        _require(payload, "awayTeam", "away_team"),
        players=_get(payload, "awayPlayers", "away_players"),
    )
    return home, away


def _session_id(payload: Mapping[str, Any]) -> str:
    return str(_get(payload, "sessionId", "session_id", default=DEFAULT_SESSION_ID))


# -------------------------
# Handlers
# -------------------------


def handle_init(payload: Mapping[str, Any], ctx: HandlerContext) -> Dict[str, Any]:
    catalog = configure_badges(
        _get(payload, "badgeDefinitions", "badge_definitions"),
        _get(payload, "badgeSynergies", "badge_synergies"),
    )
    ctx.sessions.reset()
    return {"success": True, "badges": len(catalog.definitions), "synergies": len(catalog.synergies)}


def handle_simulate_game(payload: Mapping[str, Any], ctx: HandlerContext) -> Dict[str, Any]:
    home, away = _teams(payload)
    return simulate_game(home, away, _get(payload, "options")).to_dict()


def handle_simulate_quarter(payload: Mapping[str, Any], ctx: HandlerContext) -> Dict[str, Any]:
    """Start a live game (first quarter) or play the next quarter of one.

    A session with no state falls back to ``resumeState``; with neither, a new
    game starts from the team payload.
    """
    sid = _session_id(payload)
    fresh = sid not in ctx.sessions
    if fresh:
        ctx.sessions.create(sid)

    try:
        with ctx.sessions.checkout(sid) as session:
            state = session.game_state or _get(payload, "resumeState", "resume_state")
            if session.game_state is None and state is not None:
                logger.info("LIVE_GAME_RESUMED session_id=%s", sid)
            if state is None:
                home, away = _teams(payload)
                started = start_game(home, away, _get(payload, "options"))
                session.game_state = started["game_state"]
                session.quarters_played = 1
                return {
                    **started["quarter_result"],
                    "session_id": sid,
                    "is_game_complete": False,
                    "game_state": started["game_state"],
                }

            step = continue_game(state, _get(payload, "adjustments"))
            session.quarters_played += 1
            if not step["is_complete"]:
                session.game_state = step["game_state"]
                return {
                    **step["quarter_result"],
                    "session_id": sid,
                    "is_game_complete": False,
                    "game_state": step["game_state"],
                }
    except Exception:
        if fresh:
            ctx.sessions.clear(sid)
        raise

    ctx.sessions.clear(sid)
    return {
        **step["quarter_result"],
        "session_id": sid,
        "is_game_complete": True,
        "result": step["final_result"],
    }


def handle_sim_to_end(payload: Mapping[str, Any], ctx: HandlerContext) -> Dict[str, Any]:
    sid = _session_id(payload)
    resume = _get(payload, "resumeState", "resume_state")
    session = ctx.sessions.find(sid)
    if (session is None or session.game_state is None) and resume is None:
        raise GameStateError("No game in progress to sim to end")
    fresh = session is None
    if fresh:
        ctx.sessions.create(sid)

    try:
        with ctx.sessions.checkout(sid) as held:
            result = sim_to_end(held.game_state or resume, _get(payload, "adjustments"))
    except Exception:
        if fresh:
            ctx.sessions.clear(sid)
        raise

    ctx.sessions.clear(sid)
    return {"session_id": sid, "is_game_complete": True, "result": result.to_dict()}


def handle_simulate_bulk(payload: Mapping[str, Any], ctx: HandlerContext) -> Dict[str, Any]:
    games = _get(payload, "games", default=[])
    if not isinstance(games, list):
        raise ConfigurationError("games must be a list")
    out = simulate_bulk(
        games,
        process_evolution=bool(_get(payload, "processEvolution", "process_evolution", default=False)),
        difficulty=_get(payload, "difficulty", default="pro"),
        seed=_get(payload, "seed"),
        on_progress=ctx.on_progress,
        on_yield=ctx.on_yield,
    )
    return out.to_dict()


def handle_process_post_game(payload: Mapping[str, Any], ctx: HandlerContext) -> Dict[str, Any]:
    game_result = _require(payload, "gameResult", "game_result")
    return process_post_game(
        _get(payload, "homePlayers", "home_players", default=[]),
        _get(payload, "awayPlayers", "away_players", default=[]),
        game_result,
        _get(payload, "options", default={}),
    ).to_dict()


def handle_process_weekly(payload: Mapping[str, Any], ctx: HandlerContext) -> Dict[str, Any]:
    return process_weekly_evolution(
        _get(payload, "players", default=[]),
        _get(payload, "gameResults", "game_results", default=[]),
        _get(payload, "difficulty", default="pro"),
        int(_get(payload, "week", default=0)),
        _get(payload, "options", default={}),
    ).to_dict()


def handle_process_monthly(payload: Mapping[str, Any], ctx: HandlerContext) -> Dict[str, Any]:
    return process_monthly_development(
        _get(payload, "players", default=[]),
        _get(payload, "difficulty", default="pro"),
        _get(payload, "options", default={}),
    ).to_dict()


def handle_process_rest_day(payload: Mapping[str, Any], ctx: HandlerContext) -> Dict[str, Any]:
    return process_rest_day(
        _get(payload, "players", default=[]),
        _get(payload, "teamsWithGames", "teams_with_games", default=[]),
        _get(payload, "options", default={}),
        days=_get(payload, "teamsPerDay", "teams_per_day"),
    ).to_dict()


def handle_process_season_end(payload: Mapping[str, Any], ctx: HandlerContext) -> Dict[str, Any]:
    return process_season_end(
        _get(payload, "players", default=[]),
        _get(payload, "seasonStats", "season_stats", default={}),
        _get(payload, "difficulty", default="pro"),
        _get(payload, "options", default={}),
    ).to_dict()


def handle_recalculate_overall(payload: Mapping[str, Any], ctx: HandlerContext) -> Dict[str, Any]:
    player = recalculate_overall(_require(payload, "player"))
    return {"overall": player.overall, "player": player.to_dict()}


HANDLERS: Dict[RequestKind, Handler] = {
    RequestKind.INIT: handle_init,
    RequestKind.SIMULATE_GAME: handle_simulate_game,
    RequestKind.SIMULATE_QUARTER: handle_simulate_quarter,
    RequestKind.SIM_TO_END: handle_sim_to_end,
    RequestKind.SIMULATE_BULK: handle_simulate_bulk,
    RequestKind.PROCESS_POST_GAME: handle_process_post_game,
    RequestKind.PROCESS_WEEKLY: handle_process_weekly,
    RequestKind.PROCESS_MONTHLY: handle_process_monthly,
    RequestKind.PROCESS_REST_DAY: handle_process_rest_day,
    RequestKind.PROCESS_SEASON_END: handle_process_season_end,
    RequestKind.RECALCULATE_OVERALL: handle_recalculate_overall,
}

_missing = set(RequestKind) - set(HANDLERS)
if _missing:
    raise RuntimeError(f"no handler for request kinds: {sorted(k.value for k in _missing)}")


def dispatch(kind: Any, payload: Optional[Mapping[str, Any]], ctx: HandlerContext) -> Any:
    handler = HANDLERS[RequestKind.parse(kind)]
    if payload is not None and not isinstance(payload, Mapping):
        raise ConfigurationError("payload must be an object")
    return handler(payload or {}, ctx)


__all__ = ["DEFAULT_SESSION_ID", "HANDLERS", "Handler", "HandlerContext", "dispatch"]
