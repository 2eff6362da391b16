from __future__ import annotations

"""Per-player and per-lineup performance modifiers used during a possession.

performance multiplier = fatigue factor * morale factor * trait factor * synergy factor
"""

from itertools import combinations
from typing import Iterable, List, Sequence

from fatigue import fatigue_multiplier
from morale import morale_performance_modifier
from num_utils import clamp
from player_model import Player
from tables.badges import SYNERGY_IN_GAME_BOOST, SYNERGY_IN_GAME_BOOST_MAX, SynergyMatch, get_catalog
from tables.personality import trait_effect

from . import config as me_cfg


def chemistry_modifier(players: Iterable[Player]) -> float:
    """clamp((avg_morale - 80)/80 * 0.03, -0.03, 0.03) over the lineup."""
    morale = [p.morale for p in players]
    if not morale:
        return 0.0
    avg = sum(morale) / len(morale)
    raw = (avg - me_cfg.CHEMISTRY_MORALE_BASE) / me_cfg.CHEMISTRY_MORALE_BASE * me_cfg.CHEMISTRY_MAX
    return clamp(raw, -me_cfg.CHEMISTRY_MAX, me_cfg.CHEMISTRY_MAX)


def lineup_synergies(players: Sequence[Player]) -> List[SynergyMatch]:
    """Badge synergies active between every pair of players on the floor."""
    catalog = get_catalog()
    found: List[SynergyMatch] = []
    for a, b in combinations(players, 2):
        found.extend(catalog.find_synergies(a.badges, b.badges))
    return found


def synergy_factor(active: int) -> float:
    return 1.0 + min(SYNERGY_IN_GAME_BOOST * max(0, active), SYNERGY_IN_GAME_BOOST_MAX)


def is_clutch_time(period: int, regulation_periods: int, clock_sec: float, margin: int) -> bool:
    """``period`` is 1-based; overtime periods always qualify once late enough."""
    return (
        period >= regulation_periods
        and clock_sec <= me_cfg.CLUTCH_SECONDS
        and abs(margin) <= me_cfg.CLUTCH_MARGIN
    )


def clutch_bonus(player: Player) -> float:
    points = player.attribute("clutch") + sum(trait_effect(t).clutch_boost for t in player.traits)
    return (points - me_cfg.CLUTCH_PIVOT) / 100.0 * me_cfg.CLUTCH_SCALE


def trait_factor(player: Player, *, is_playoff: bool = False, clutch: bool = False) -> float:
    f = 1.0
    if is_playoff:
        for t in player.traits:
            eff = trait_effect(t)
            f += eff.playoff_performance + eff.pressure_penalty
    if clutch:
        f += clutch_bonus(player)
    return max(0.5, f)


def performance_multiplier(
    player: Player,
    game_fatigue: float,
    *,
    active_synergies: int = 0,
    is_playoff: bool = False,
    clutch: bool = False,
) -> float:
    return (
        fatigue_multiplier(game_fatigue)
        * (1.0 + morale_performance_modifier(player.morale))
        * trait_factor(player, is_playoff=is_playoff, clutch=clutch)
        * synergy_factor(active_synergies)
    )


__all__ = [
    "chemistry_modifier",
    "lineup_synergies",
    "synergy_factor",
    "is_clutch_time",
    "clutch_bonus",
    "trait_factor",
    "performance_multiplier",
]
