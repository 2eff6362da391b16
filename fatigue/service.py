from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional

from num_utils import clamp, uniform
from player_model import Player
from tables.attributes import ATHLETIC_ATTRIBUTES

from . import config as fat_cfg

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FatigueWarning:
    """Emitted when a game pushes a player across the warning threshold."""

    player_id: str
    name: str
    fatigue_before: float
    fatigue_after: float

    def to_row(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "fatigue_before": round(self.fatigue_before, 1),
            "fatigue": round(self.fatigue_after, 1),
        }


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------


def _clamp_fatigue(x: float) -> float:
    return clamp(x, fat_cfg.FATIGUE_MIN, fat_cfg.FATIGUE_MAX)


def in_rookie_wall(player: Player) -> bool:
    """Rookie who already played ROOKIE_WALL_GAMES games, for the next ROOKIE_WALL_DURATION games."""
    if not player.is_rookie:
        return False
    gp = int(player.games_played_this_season)
    start = fat_cfg.ROOKIE_WALL_GAMES
    return start <= gp < start + fat_cfg.ROOKIE_WALL_DURATION


def athletic_average(player: Player) -> float:
    vals = [player.attribute(a, fat_cfg.ATHLETIC_DEFAULT) for a in ATHLETIC_ATTRIBUTES]
    return sum(vals) / len(vals)


def weighted_recovery(player: Player, base: float, rng: random.Random) -> float:
    """Recovery amount for ``base`` points, weighted by stamina/durability with variance."""
    athletic = athletic_average(player) / 100.0
    mult = fat_cfg.ATHLETIC_BASE + athletic * fat_cfg.ATHLETIC_SCALE
    variance = uniform(rng, fat_cfg.RECOVERY_VARIANCE_MIN, fat_cfg.RECOVERY_VARIANCE_MAX)
    return float(base) * mult * variance


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def game_fatigue_gain(player: Player, minutes: float) -> float:
    gain = fat_cfg.GAIN_PER_MINUTE * max(0.0, float(minutes))
    if in_rookie_wall(player):
        gain *= fat_cfg.ROOKIE_WALL_MULT
    return gain


def apply_game_fatigue(player: Player, minutes: float) -> Optional[FatigueWarning]:
    """Add post-game fatigue in place; returns a warning when the threshold is crossed."""
    before = float(player.fatigue)
    player.fatigue = _clamp_fatigue(before + game_fatigue_gain(player, minutes))
    if before < fat_cfg.WARNING_THRESHOLD <= player.fatigue:
        return FatigueWarning(player.player_id, player.name, before, player.fatigue)
    return None


def recover_fatigue(player: Player, base: float, rng: random.Random) -> float:
    """Recover fatigue in place; returns the amount actually removed."""
    before = float(player.fatigue)
    if before <= 0.0:
        player.fatigue = 0.0
        return 0.0
    player.fatigue = _clamp_fatigue(before - weighted_recovery(player, base, rng))
    return before - player.fatigue


def fatigue_penalty(fatigue: float) -> float:
    """Performance penalty in [0, MAX_PENALTY]; zero at or below PENALTY_START."""
    f = _clamp_fatigue(fatigue)
    if f <= fat_cfg.PENALTY_START:
        return 0.0
    span = fat_cfg.FATIGUE_MAX - fat_cfg.PENALTY_START
    return fat_cfg.MAX_PENALTY * (f - fat_cfg.PENALTY_START) / span


def fatigue_multiplier(fatigue: float) -> float:
    return 1.0 - fatigue_penalty(fatigue)
