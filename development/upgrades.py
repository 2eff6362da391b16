from __future__ import annotations

"""Upgrade points: earned from a week's attribute growth, spent one point per +1.

Growth is whatever positive attribute movement micro and monthly development
produced since the last weekly checkpoint (``Player.growth_since_weekly``).
"""

import logging
import math
import random
from typing import Dict, List, Mapping, Optional, Tuple

from player_model import Player
from tables.attributes import ATTRIBUTE_GROUPS, MAX_ATTR
from tables.positions import position_relevance

from . import config as dev_cfg
from .types import UpgradeAward

logger = logging.getLogger(__name__)


def note_growth(player: Player, changes: Mapping[str, float]) -> float:
    """Add the positive part of ``changes`` to the weekly growth tally."""
    gained = sum(v for v in changes.values() if v > 0)
    player.growth_since_weekly = float(player.growth_since_weekly) + gained
    return gained


def upgrade_points_from_growth(player: Player) -> int:
    if not dev_cfg.UPGRADE_POINTS_ENABLED:
        return 0
    growth = float(player.growth_since_weekly)
    if growth < dev_cfg.UPGRADE_MIN_GROWTH:
        return 0
    potential = float(player.potential)
    per_growth = dev_cfg.UPGRADE_POINTS_PER_GROWTH * potential / dev_cfg.UPGRADE_BASELINE_POTENTIAL
    cap = dev_cfg.UPGRADE_MAX_WEEKLY
    if potential >= dev_cfg.UPGRADE_ELITE_POTENTIAL:
        cap += dev_cfg.UPGRADE_ELITE_WEEKLY_BONUS
    return min(int(math.floor(growth * per_growth)), cap)


def award_upgrade_points(player: Player) -> Optional[UpgradeAward]:
    """Weekly checkpoint: convert the growth tally into stored points and reset it."""
    growth = float(player.growth_since_weekly)
    earned = upgrade_points_from_growth(player)
    player.growth_since_weekly = 0.0
    if earned <= 0:
        return None
    player.upgrade_points = min(dev_cfg.UPGRADE_MAX_STORED, int(player.upgrade_points) + earned)
    return UpgradeAward(player.player_id, player.name, earned, player.upgrade_points, growth)


def _candidates(player: Player, rng: random.Random) -> List[Tuple[float, str]]:
    ceiling = min(float(player.potential), MAX_ATTR)
    out: List[Tuple[float, str]] = []
    for group in dev_cfg.UPGRADE_GROUPS:
        names = ATTRIBUTE_GROUPS[group]
        values = {n: player.attribute(n) for n in names}
        avg = sum(values.values()) / len(values)
        for name, value in values.items():
            if value >= ceiling:
                continue
            weak = value < avg - dev_cfg.UPGRADE_GAP_BAND
            strong = value > avg + dev_cfg.UPGRADE_GAP_BAND
            score = position_relevance(player.position, name)
            if rng.random() < dev_cfg.UPGRADE_WEAKNESS_FIRST_CHANCE:
                if weak:
                    score += dev_cfg.UPGRADE_WEAKNESS_BASE_BONUS + (avg - value) / dev_cfg.UPGRADE_WEAKNESS_GAP_SCALE
            elif strong:
                score += dev_cfg.UPGRADE_STRENGTH_BONUS
            elif weak:
                score += dev_cfg.UPGRADE_OFF_FOCUS_WEAKNESS_BONUS
            score += rng.random() * dev_cfg.UPGRADE_JITTER_MAX
            out.append((score, name))
    return out


def pick_upgrade(player: Player, rng: random.Random) -> Optional[str]:
    """Best attribute to raise next; None once everything sits at potential."""
    candidates = _candidates(player, rng)
    if not candidates:
        return None
    return max(candidates)[1]


def spend_upgrade_points(player: Player, rng: random.Random) -> Dict[str, float]:
    """Spend every stored point; returns the applied change per attribute."""
    changes: Dict[str, float] = {}
    while player.upgrade_points > 0:
        name = pick_upgrade(player, rng)
        if name is None:
            break
        before = player.attribute(name)
        after = player.set_attribute(name, min(float(player.potential), before + dev_cfg.UPGRADE_STEP))
        changes[name] = changes.get(name, 0.0) + (after - before)
        player.upgrade_points = int(player.upgrade_points) - 1
    if changes:
        logger.debug("UPGRADES_SPENT player_id=%s attributes=%d left=%d", player.player_id, len(changes), player.upgrade_points)
    return changes


__all__ = [
    "award_upgrade_points",
    "note_growth",
    "pick_upgrade",
    "spend_upgrade_points",
    "upgrade_points_from_growth",
]
