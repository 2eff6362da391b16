from __future__ import annotations

"""Sequential simulation of many games with evolution carried between them.

Each game runs against the freshest copy of every player: when evolution is
requested, post-game output is written into an explicit ``latest`` map and the
next game's rosters are rebuilt from it, so fatigue, form and injuries carry
forward through the batch.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from errors import ConfigurationError
from evolution import process_post_game
from matchengine import simulate_game
from player_model import Player, Team
from tables.difficulty import normalize_difficulty

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[Dict[str, Any]], None]
YieldHook = Callable[[], None]

DEFAULT_YIELD_EVERY = 5


@dataclass
class BulkResult:
    results: List[Dict[str, Any]] = field(default_factory=list)
    # None when the batch ran without evolution
    evolved_players: Optional[Dict[str, Player]] = None

    @property
    def total(self) -> int:
        return len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [dict(r) for r in self.results],
            "total": self.total,
            "evolved_players": (
                [p.to_dict() for p in self.evolved_players.values()] if self.evolved_players is not None else None
            ),
        }


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if data.get(k) is not None:
            return data[k]
    return None


def _descriptor_team(game: Mapping[str, Any], side: str) -> Team:
    team_raw = _pick(game, f"{side}_team", f"{side}Team")
    if team_raw is None:
        raise ConfigurationError(f"game descriptor is missing {side}_team")
    players = _pick(game, f"{side}_players", f"{side}Players")
    return Team.from_dict(team_raw, players=players)


def _refresh(team: Team, latest: Mapping[str, Player]) -> Team:
    roster = [latest.get(p.player_id, p).copy() for p in team.roster]
    return Team(team.team_id, team.name, roster, team.scheme, team.defensive_style)


def _game_options(game: Mapping[str, Any], index: int, seed: Optional[int]) -> Dict[str, Any]:
    opts = dict(game.get("options") or {})
    if seed is not None and opts.get("seed") is None:
        opts["seed"] = int(seed) + index
    return opts


def simulate_bulk(
    games: Sequence[Mapping[str, Any]],
    *,
    process_evolution: bool = False,
    difficulty: Any = "pro",
    on_progress: Optional[ProgressCallback] = None,
    seed: Optional[int] = None,
    yield_every: int = DEFAULT_YIELD_EVERY,
    on_yield: Optional[YieldHook] = None,
) -> BulkResult:
    """Simulate ``games`` in order.

    ``games`` items: ``{game_id, home_team, away_team, options, date}`` (rosters
    may also come as ``home_players`` / ``away_players``). ``on_progress`` gets
    ``{completed, total, currentItemId}`` after every game; ``on_yield`` runs
    every ``yield_every`` games. A failing game aborts the batch.
    """
    diff = normalize_difficulty(difficulty)
    total = len(games)
    latest: Optional[Dict[str, Player]] = {} if process_evolution else None
    out = BulkResult(evolved_players=latest)

    for i, game in enumerate(games):
        if not isinstance(game, Mapping):
            raise ConfigurationError(f"game descriptor {i} must be an object")
        game_id = str(_pick(game, "game_id", "gameId", "id") or f"game-{i + 1}")
        game_date = _pick(game, "date", "game_date", "gameDate")

        try:
            home = _descriptor_team(game, "home")
            away = _descriptor_team(game, "away")
            if latest is not None:
                home = _refresh(home, latest)
                away = _refresh(away, latest)

            opts = _game_options(game, i, seed)
            result = simulate_game(home, away, opts)
            row: Dict[str, Any] = {"game_id": game_id, "date": game_date, "result": result.to_dict()}

            if latest is not None:
                post = process_post_game(
                    home.roster,
                    away.roster,
                    result,
                    {"difficulty": diff, "seed": opts.get("seed"), "date": game_date, "is_playoff": opts.get("is_playoff")},
                )
                for p in post.all_players():
                    latest[p.player_id] = p
                row["evolution"] = post.evolution()
        except Exception:
            logger.warning("BULK_GAME_FAILED game_id=%s index=%s", game_id, i, exc_info=True)
            raise

        out.results.append(row)
        if on_progress is not None:
            on_progress({"completed": i + 1, "total": total, "currentItemId": game_id})
        if on_yield is not None and yield_every > 0 and (i + 1) % yield_every == 0:
            on_yield()

    logger.info("BULK_DONE games=%s evolution=%s", total, bool(process_evolution))
    return out


__all__ = ["BulkResult", "simulate_bulk", "DEFAULT_YIELD_EVERY"]
