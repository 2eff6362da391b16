from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from player_model import RECENT_PERFORMANCE_LIMIT, GamePerformance, Player, Streak

from . import config as dev_cfg
from .types import StreakEvent


def record_performance(player: Player, perf: GamePerformance) -> None:
    """Append to the rolling game log, keeping the newest entries."""
    player.recent_performances.append(perf)
    if len(player.recent_performances) > RECENT_PERFORMANCE_LIMIT:
        del player.recent_performances[: len(player.recent_performances) - RECENT_PERFORMANCE_LIMIT]


def current_run(ratings: Iterable[float]) -> tuple[Optional[str], int]:
    """(kind, length) of the qualifying run ending at the newest rating."""
    kind: Optional[str] = None
    length = 0
    for r in reversed(list(ratings)):
        if r >= dev_cfg.HOT_STREAK_RATING:
            k = "hot"
        elif r <= dev_cfg.COLD_STREAK_RATING:
            k = "cold"
        else:
            break
        if kind is None:
            kind = k
        elif k != kind:
            break
        length += 1
    return kind, length


def _shift(player: Player, amount: float) -> Dict[str, float]:
    """Move every streak attribute by ``amount``; returns the clamped move per attribute."""
    moves: Dict[str, float] = {}
    for attr in dev_cfg.STREAK_ATTRIBUTES:
        before = player.attribute(attr)
        moves[attr] = player.adjust_attribute(attr, amount) - before
    return moves


def _undo(player: Player, streak: Streak) -> float:
    moves = streak.applied or {attr: streak.bonus_applied for attr in dev_cfg.STREAK_ATTRIBUTES}
    for attr, moved in moves.items():
        player.adjust_attribute(attr, -moved)
    return -sum(moves.values()) / len(moves) if moves else 0.0


def _end(player: Player) -> Optional[StreakEvent]:
    streak = player.streak
    if streak is None:
        return None
    reversed_by = _undo(player, streak)
    player.streak = None
    return StreakEvent(player.player_id, player.name, streak.kind, "ended", streak.games, reversed_by)


def refresh_streak(player: Player) -> List[StreakEvent]:
    """Start, extend or end the player's streak from the game log.

    Idempotent for an unchanged log. A new streak applies +/- STREAK_BONUS to
    the streak attributes; ending a streak reverses what was applied.
    """
    events: List[StreakEvent] = []
    kind, length = current_run(p.rating for p in player.recent_performances)
    qualifies = kind is not None and length >= dev_cfg.STREAK_MIN_GAMES

    if player.streak is not None and (not qualifies or player.streak.kind != kind):
        ended = _end(player)
        if ended is not None:
            events.append(ended)

    if not qualifies:
        return events

    games = min(length, dev_cfg.STREAK_MAX_GAMES)
    if player.streak is not None:
        player.streak.games = games
        return events

    sign = 1.0 if kind == "hot" else -1.0
    moves = _shift(player, sign * dev_cfg.STREAK_BONUS)
    applied = sum(moves.values()) / len(moves)
    player.streak = Streak(kind=kind, games=games, bonus_applied=applied, applied=moves)  # type: ignore[arg-type]
    events.append(StreakEvent(player.player_id, player.name, kind, "started", games, applied))  # type: ignore[arg-type]
    return events


def clear_streak(player: Player) -> Optional[StreakEvent]:
    return _end(player)
