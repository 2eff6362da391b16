from __future__ import annotations

"""Injury rolls, permanent damage and the games-out countdown.

All functions mutate the ``Player`` they are given; callers pass copies.
"""

import logging
import random
from typing import Dict, Optional

from num_utils import clamp, uniform, weighted_choice
from player_model import Injury, Player
from tables.attributes import INJURY_SENSITIVE_ATTRIBUTES

from . import config as inj_cfg
from .catalog import INJURY_TIERS, TIER_ORDER, InjuryTierSpec
from .types import InjuryEvent, InjuryRecovery

logger = logging.getLogger(__name__)


def injury_chance(player: Player, minutes: float, *, is_playoff: bool = False) -> float:
    """Per-game injury probability in [0, MAX_CHANCE]."""
    durability = player.attribute("durability", inj_cfg.DEFAULT_DURABILITY)
    age = int(player.age)
    fatigue = clamp(player.fatigue, 0.0, 100.0)
    risk_mult = inj_cfg.RISK_MULTIPLIER.get(str(player.injury_risk or "M").upper(), 1.0)

    chance = (
        inj_cfg.BASE_CHANCE
        + (100.0 - durability) / 100.0 * inj_cfg.DURABILITY_WEIGHT
        + max(0, age - inj_cfg.AGE_PIVOT) * inj_cfg.AGE_WEIGHT
        + fatigue / 100.0 * inj_cfg.FATIGUE_WEIGHT
        + max(0.0, float(minutes)) / 36.0 * inj_cfg.MINUTES_WEIGHT
    ) * risk_mult
    if is_playoff:
        chance *= inj_cfg.PLAYOFF_MULT
    return clamp(chance, 0.0, inj_cfg.MAX_CHANCE)


def recovery_estimate(games_remaining: int) -> str:
    g = int(games_remaining)
    for max_games, label in inj_cfg.RECOVERY_ESTIMATES:
        if g <= max_games:
            return label
    return inj_cfg.RECOVERY_ESTIMATE_LONG


def roll_tier(rng: random.Random) -> InjuryTierSpec:
    tier = weighted_choice(rng, [(t, INJURY_TIERS[t].weight) for t in TIER_ORDER])
    return INJURY_TIERS[tier]


def apply_permanent_damage(player: Player, impact: float, rng: random.Random) -> Dict[str, float]:
    """Lower physical attributes by 80-120% of ``impact`` each (floor 25); returns drops."""
    drops: Dict[str, float] = {}
    if impact <= 0:
        return drops
    for attr in INJURY_SENSITIVE_ATTRIBUTES:
        before = player.attribute(attr)
        reduction = float(impact) * uniform(rng, inj_cfg.PERM_VARIANCE_MIN, inj_cfg.PERM_VARIANCE_MAX)
        after = max(inj_cfg.PERM_FLOOR, before - reduction)
        player.set_attribute(attr, after)
        drops[attr] = before - after
    return drops


def roll_game_injury(
    player: Player,
    minutes: float,
    rng: random.Random,
    *,
    is_playoff: bool = False,
) -> Optional[InjuryEvent]:
    """Roll for an in-game injury. On success the player record is updated in place.

    Already injured players and DNPs are never rolled.
    """
    if player.is_injured or float(minutes) <= 0:
        return None

    chance = injury_chance(player, minutes, is_playoff=is_playoff)
    if rng.random() >= chance:
        return None

    spec = roll_tier(rng)
    games_out = rng.randint(spec.min_games, spec.max_games)
    name = rng.choice(spec.injuries)
    drops = apply_permanent_damage(player, spec.permanent_impact, rng)

    player.injury = Injury(
        tier=spec.tier,  # type: ignore[arg-type]
        name=name,
        games_remaining=games_out,
        permanent_penalty=float(spec.permanent_impact),
        recovery_estimate=recovery_estimate(games_out),
    )
    player.career_injury_count += 1
    if spec.major:
        player.major_injury_count += 1

    logger.info(
        "INJURY_ROLLED player_id=%s tier=%s games_out=%d chance=%.4f",
        player.player_id,
        spec.tier,
        games_out,
        chance,
    )
    return InjuryEvent(
        player_id=player.player_id,
        name=player.name,
        tier=spec.tier,
        injury_name=name,
        games_out=games_out,
        recovery_estimate=player.injury.recovery_estimate,
        chance=chance,
        is_playoff=bool(is_playoff),
        perm_drop=drops,
    )


def advance_recovery(player: Player, games: int = 1) -> Optional[InjuryRecovery]:
    """Count down ``games`` missed games; clears the injury at zero.

    Returns a recovery record when the player is healed by this call.
    """
    if player.injury is None:
        return None
    injury = player.injury
    injury.games_remaining = max(0, int(injury.games_remaining) - max(1, int(games)))
    if injury.games_remaining > 0:
        injury.recovery_estimate = recovery_estimate(injury.games_remaining)
        return None
    player.injury = None
    return InjuryRecovery(player.player_id, player.name, injury.name)


def heal(player: Player) -> Optional[InjuryRecovery]:
    if player.injury is None:
        return None
    injury = player.injury
    player.injury = None
    return InjuryRecovery(player.player_id, player.name, injury.name)
