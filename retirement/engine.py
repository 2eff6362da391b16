from __future__ import annotations

import logging
import random
from typing import Any, Dict, Optional

from num_utils import clamp

from .config import DEFAULT_RETIREMENT_CONFIG, RetirementConfig
from .types import RetirementDecision, RetirementInputs

logger = logging.getLogger(__name__)


def _components(inp: RetirementInputs, cfg: RetirementConfig) -> Dict[str, float]:
    return {
        "base": float(cfg.base_prob),
        "age": float(cfg.per_year) * float(int(inp.age) - int(cfg.min_age)),
        "low_overall": float(cfg.low_overall_bonus) if int(inp.ovr) < int(cfg.low_overall_threshold) else 0.0,
        "injuries": float(cfg.per_major_injury) * float(max(0, int(inp.major_injury_count))),
    }


def retirement_probability(inp: RetirementInputs, cfg: Optional[RetirementConfig] = None) -> float:
    """0 below ``min_age``; otherwise the clipped sum of the components."""
    c = cfg or DEFAULT_RETIREMENT_CONFIG
    if int(inp.age) < int(c.min_age):
        return 0.0
    return clamp(sum(_components(inp, c).values()), c.floor_prob, c.ceiling_prob)


def inputs_for(player: Any) -> RetirementInputs:
    return RetirementInputs(
        player_id=str(player.player_id),
        age=int(player.age),
        ovr=int(player.overall),
        major_injury_count=int(player.major_injury_count),
        career_seasons=int(player.career_seasons),
    )


def evaluate_retirement(
    player: Any,
    rng: random.Random,
    cfg: Optional[RetirementConfig] = None,
) -> RetirementDecision:
    c = cfg or DEFAULT_RETIREMENT_CONFIG
    inp = inputs_for(player)
    prob = retirement_probability(inp, c)
    # Skip the draw when retirement is impossible so the rng stream only moves for candidates.
    roll = rng.random() if prob > 0 else 1.0
    retired = roll < prob
    decision = RetirementDecision(
        player_id=inp.player_id,
        name=str(getattr(player, "name", inp.player_id)),
        decision="RETIRED" if retired else "STAY",
        retirement_prob=float(prob),
        random_roll=float(roll),
        age=inp.age,
        ovr=inp.ovr,
        career_seasons=inp.career_seasons,
        explanation=_components(inp, c) if prob > 0 else {},
    )
    if retired:
        logger.info(
            "PLAYER_RETIRED player_id=%s age=%s ovr=%s prob=%.3f",
            inp.player_id,
            inp.age,
            inp.ovr,
            prob,
        )
    return decision
