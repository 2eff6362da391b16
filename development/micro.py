from __future__ import annotations

"""Per-game performance rating and micro-development.

A strong game nudges the attributes behind the stats the player actually
produced; a poor game with real minutes shaves at most two under-performing
areas. Thresholds are per-36 baselines from the difficulty settings, scaled
down by the minutes played.
"""

import random
from typing import Any, Dict, Mapping, Optional

from num_utils import safe_float, uniform
from player_model import GamePerformance, Player
from tables.difficulty import get_difficulty

from . import config as dev_cfg
from .types import AttributeChange


def _stat(line: Mapping[str, Any], *keys: str) -> float:
    for k in keys:
        if k in line and line[k] is not None:
            return safe_float(line[k], 0.0)
    return 0.0


def performance_rating(line: Mapping[str, Any]) -> float:
    """(pts + reb + 1.5*ast + 2*stl + 2*blk - tov) / min * 10; 0 for a DNP."""
    minutes = _stat(line, "minutes", "min")
    if minutes <= 0:
        return 0.0
    raw = (
        _stat(line, "points", "pts")
        + _stat(line, "rebounds", "reb")
        + dev_cfg.RATING_ASSIST_WEIGHT * _stat(line, "assists", "ast")
        + dev_cfg.RATING_STEAL_WEIGHT * _stat(line, "steals", "stl")
        + dev_cfg.RATING_BLOCK_WEIGHT * _stat(line, "blocks", "blk")
        - _stat(line, "turnovers", "tov", "to")
    )
    return raw / minutes * 10.0


def performance_from_line(line: Mapping[str, Any], *, won: bool, date: str = "", opponent: str = "") -> GamePerformance:
    return GamePerformance(
        rating=round(performance_rating(line), 2),
        minutes=_stat(line, "minutes", "min"),
        points=int(_stat(line, "points", "pts")),
        rebounds=int(_stat(line, "rebounds", "reb")),
        assists=int(_stat(line, "assists", "ast")),
        steals=int(_stat(line, "steals", "stl")),
        blocks=int(_stat(line, "blocks", "blk")),
        turnovers=int(_stat(line, "turnovers", "tov", "to")),
        three_pointers_made=int(_stat(line, "fg3m", "three_pointers_made", "tpm")),
        won=bool(won),
        date=str(date or ""),
        opponent=str(opponent or ""),
    )


def _scaled_thresholds(difficulty: Any, minutes: float) -> Dict[str, float]:
    scale = min(max(0.0, float(minutes)) / 36.0, 1.0)
    return {k: float(v) * scale for k, v in get_difficulty(difficulty).stat_thresholds.items()}


def _gain_targets(line: Mapping[str, Any], thresholds: Mapping[str, float], gain: float) -> Dict[str, float]:
    out: Dict[str, float] = {}
    points = _stat(line, "points", "pts")
    threes = _stat(line, "fg3m", "three_pointers_made", "tpm")
    if points >= thresholds["points"]:
        if threes >= thresholds["threes"]:
            out["three_point"] = gain
        else:
            out["mid_range"] = gain * 0.5
            out["layup"] = gain * 0.5

    if _stat(line, "assists", "ast") >= thresholds["assists"]:
        out["pass_accuracy"] = gain
        out["pass_vision"] = gain * dev_cfg.PASS_VISION_SHARE

    if _stat(line, "rebounds", "reb") >= thresholds["rebounds"]:
        out["defensive_rebound"] = gain * dev_cfg.DEFENSIVE_REBOUND_SHARE
        out["offensive_rebound"] = gain * dev_cfg.OFFENSIVE_REBOUND_SHARE

    if _stat(line, "steals", "stl") >= max(1.0, thresholds["steals"]):
        out["steal"] = gain
        out["perimeter_defense"] = gain * dev_cfg.SECONDARY_DEFENSE_SHARE
    if _stat(line, "blocks", "blk") >= max(1.0, thresholds["blocks"]):
        out["block"] = gain
        out["interior_defense"] = gain * dev_cfg.SECONDARY_DEFENSE_SHARE
    return out


def _penalty_targets(line: Mapping[str, Any], thresholds: Mapping[str, float], loss: float) -> Dict[str, float]:
    out: Dict[str, float] = {}
    poor = dev_cfg.POOR_STAT_FRACTION
    areas = 0

    if _stat(line, "points", "pts") < thresholds["points"] * poor:
        out["mid_range"] = -loss * 0.5
        out["close_shot"] = -loss * 0.5
        areas += 1
    if areas < dev_cfg.MAX_PENALIZED_AREAS and _stat(line, "assists", "ast") < thresholds["assists"] * poor:
        out["pass_accuracy"] = -loss * 0.5
        areas += 1
    if areas < dev_cfg.MAX_PENALIZED_AREAS and _stat(line, "rebounds", "reb") < thresholds["rebounds"] * poor:
        out["defensive_rebound"] = -loss * 0.5
        areas += 1
    if (
        areas < dev_cfg.MAX_PENALIZED_AREAS
        and _stat(line, "steals", "stl") == 0
        and _stat(line, "blocks", "blk") == 0
    ):
        out["perimeter_defense"] = -loss * dev_cfg.SECONDARY_DEFENSE_SHARE
    return out


def _apply(player: Player, changes: Mapping[str, float]) -> Dict[str, float]:
    applied: Dict[str, float] = {}
    for attr, delta in changes.items():
        before = player.attribute(attr)
        after = player.adjust_attribute(attr, delta)
        if after != before:
            applied[attr] = after - before
    return applied


def apply_micro_development(
    player: Player,
    line: Mapping[str, Any],
    rng: random.Random,
    *,
    difficulty: Any = "pro",
    rating: Optional[float] = None,
) -> Optional[AttributeChange]:
    """Mutates ``player``; returns the applied change or None when the game was unremarkable.

    Injured players are skipped. The record's ``reason`` is ``development`` or
    ``regression`` so the caller can file it.
    """
    if player.is_injured:
        return None
    minutes = _stat(line, "minutes", "min")
    if minutes <= 0:
        return None
    r = performance_rating(line) if rating is None else float(rating)
    thresholds = _scaled_thresholds(difficulty, minutes)

    if r >= dev_cfg.HIGH_PERFORMANCE_RATING:
        gain = uniform(rng, dev_cfg.MICRO_GAIN_MIN, dev_cfg.MICRO_GAIN_MAX)
        applied = _apply(player, _gain_targets(line, thresholds, gain))
        reason = "development"
    elif r <= dev_cfg.LOW_PERFORMANCE_RATING and minutes >= dev_cfg.LOW_PERFORMANCE_MIN_MINUTES:
        loss = uniform(rng, dev_cfg.MICRO_PENALTY_MIN, dev_cfg.MICRO_PENALTY_MAX)
        applied = _apply(player, _penalty_targets(line, thresholds, loss))
        reason = "regression"
    else:
        return None

    if not applied:
        return None
    return AttributeChange(player.player_id, player.name, reason, applied, rating=r)
