from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Sequence

from errors import ConfigurationError
from num_utils import clamp
from player_model import Player

from . import config as me_cfg
from .live_state import SideState

logger = logging.getLogger(__name__)


def available_players(roster: Sequence[Player]) -> List[Player]:
    """Players who can dress: not injured, not retired."""
    return [p for p in roster if not p.is_injured and not p.is_retired]


def default_targets(players: Sequence[Player], regulation_minutes: float) -> Dict[str, float]:
    """Target minutes by overall rank: starters share STARTER_SHARE of the game
    each; the bench splits what is left evenly across BENCH_SLOTS players."""
    ranked = sorted(players, key=lambda p: p.overall, reverse=True)
    starters = ranked[: me_cfg.LINEUP_SIZE]
    bench = ranked[me_cfg.LINEUP_SIZE : me_cfg.LINEUP_SIZE + me_cfg.BENCH_SLOTS]
    out: Dict[str, float] = {p.player_id: 0.0 for p in ranked}
    if not bench:
        for p in starters:
            out[p.player_id] = regulation_minutes
        return out
    starter_min = regulation_minutes * me_cfg.STARTER_SHARE
    left = regulation_minutes * me_cfg.LINEUP_SIZE - starter_min * len(starters)
    for p in starters:
        out[p.player_id] = starter_min
    for p in bench:
        out[p.player_id] = max(0.0, left / len(bench))
    return out


def target_seconds(
    players: Sequence[Player],
    regulation_minutes: float,
    overrides: Optional[Mapping[str, float]] = None,
) -> Dict[str, float]:
    mins = default_targets(players, regulation_minutes)
    for pid, m in (overrides or {}).items():
        if pid in mins:
            mins[pid] = clamp(m, 0.0, regulation_minutes)
    return {pid: m * 60.0 for pid, m in mins.items()}


def starting_lineup(players: Sequence[Player], targets: Mapping[str, float]) -> List[str]:
    ranked = sorted(players, key=lambda p: (targets.get(p.player_id, 0.0), p.overall), reverse=True)
    return [p.player_id for p in ranked[: me_cfg.LINEUP_SIZE]]


def validate_lineup(side: SideState, lineup: Sequence[str]) -> List[str]:
    """Check a requested lineup against the side's roster and fouls."""
    ids = [str(pid) for pid in lineup]
    want = min(me_cfg.LINEUP_SIZE, sum(1 for pid in side.players if side.can_play(pid)))
    if len(ids) != len(set(ids)):
        raise ConfigurationError(f"duplicate player in lineup for {side.team_id}")
    if len(ids) != want:
        raise ConfigurationError(f"lineup for {side.team_id} needs {want} players, got {len(ids)}")
    for pid in ids:
        if pid not in side.players:
            raise ConfigurationError(f"player {pid} is not on {side.team_id}")
        if not side.can_play(pid):
            raise ConfigurationError(f"player {pid} has fouled out")
    return ids


# -------------------------
# In-game fatigue / minutes
# -------------------------


def fatigue_gain_per_minute(player: Player) -> float:
    return max(0.1, me_cfg.IN_GAME_FATIGUE_BASE - player.attribute("stamina") / 100.0 * me_cfg.IN_GAME_STAMINA_RELIEF)


def update_minutes(side: SideState, elapsed_sec: float) -> None:
    """Credit on-court seconds, grow on-court fatigue and rest the bench."""
    if elapsed_sec <= 0:
        return
    minutes = elapsed_sec / 60.0
    on = set(side.lineup)
    for pid, p in side.players.items():
        f = side.game_fatigue.get(pid, p.fatigue)
        if pid in on:
            side.box[pid].seconds += elapsed_sec
            f += fatigue_gain_per_minute(p) * minutes
        else:
            f -= me_cfg.BENCH_RECOVERY_PER_MIN * minutes
        side.game_fatigue[pid] = clamp(f, 0.0, 100.0)


# -------------------------
# Substitutions
# -------------------------


def _expected(side: SideState, pid: str, frac: float) -> float:
    return side.target_seconds.get(pid, 0.0) * frac


def _out_score(side: SideState, pid: str, frac: float) -> float:
    surplus = side.box[pid].seconds - _expected(side, pid, frac)
    tired = max(0.0, side.game_fatigue.get(pid, 0.0) - me_cfg.SUB_FATIGUE_THRESHOLD)
    return surplus + tired * me_cfg.SUB_FATIGUE_WEIGHT


def _in_score(side: SideState, pid: str, frac: float) -> float:
    deficit = _expected(side, pid, frac) - side.box[pid].seconds
    tired = max(0.0, side.game_fatigue.get(pid, 0.0) - me_cfg.SUB_FATIGUE_THRESHOLD)
    return deficit - tired * me_cfg.SUB_FATIGUE_WEIGHT


def replace_fouled_out(side: SideState) -> List[tuple]:
    """Swap out players who reached the foul limit when a bench player can go."""
    swaps = []
    for i, pid in enumerate(list(side.lineup)):
        if side.can_play(pid):
            continue
        bench = [p.player_id for p in side.bench() if side.can_play(p.player_id)]
        if not bench:
            continue
        incoming = min(bench, key=lambda b: side.box[b].seconds)
        side.lineup[i] = incoming
        swaps.append((pid, incoming))
    return swaps


def perform_rotation(side: SideState, elapsed_game_sec: float, regulation_sec: float) -> List[tuple]:
    """Move the lineup toward target minutes. Returns (out, in) pairs."""
    swaps = replace_fouled_out(side)
    frac = min(1.0, elapsed_game_sec / regulation_sec) if regulation_sec > 0 else 1.0
    for _ in range(me_cfg.LINEUP_SIZE):
        bench = [p.player_id for p in side.bench() if side.can_play(p.player_id)]
        if not bench or not side.lineup:
            break
        out_pid = max(side.lineup, key=lambda pid: _out_score(side, pid, frac))
        in_pid = max(bench, key=lambda pid: _in_score(side, pid, frac))
        if _in_score(side, in_pid, frac) + _out_score(side, out_pid, frac) < me_cfg.ROTATION_MARGIN_SEC:
            break
        side.lineup[side.lineup.index(out_pid)] = in_pid
        swaps.append((out_pid, in_pid))
    if swaps:
        logger.debug("ROTATION team_id=%s swaps=%s", side.team_id, swaps)
    return swaps


__all__ = [
    "available_players",
    "default_targets",
    "target_seconds",
    "starting_lineup",
    "validate_lineup",
    "fatigue_gain_per_minute",
    "update_minutes",
    "replace_fouled_out",
    "perform_rotation",
]
