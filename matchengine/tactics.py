from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from num_utils import weighted_choice
from player_model import Player

from . import config as me_cfg

# -------------------------
# Plays
# -------------------------

PLAY_CATEGORIES: Tuple[str, ...] = (
    "motion",
    "cut",
    "pick_and_roll",
    "isolation",
    "post_up",
    "spot_up",
    "transition",
)


@dataclass(frozen=True, slots=True)
class Play:
    play_id: str
    name: str
    category: str
    tempo: str  # halfcourt | transition
    primary_positions: Tuple[str, ...]
    difficulty: int
    tags: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.play_id,
            "name": self.name,
            "category": self.category,
            "tempo": self.tempo,
            "primary_positions": list(self.primary_positions),
            "difficulty": self.difficulty,
            "tags": list(self.tags),
        }


PLAYS: Tuple[Play, ...] = (
    Play("flex_motion", "Flex Motion", "motion", "halfcourt", ("SF", "PF"), 60),
    Play("horns_motion", "Horns", "motion", "halfcourt", ("PG", "PF"), 65, ("three_point",)),
    Play("backdoor_cut", "Backdoor Cut", "cut", "halfcourt", ("SG", "SF"), 55),
    Play("ucla_cut", "UCLA Cut", "cut", "halfcourt", ("PG", "C"), 60),
    Play("high_pnr", "High Pick and Roll", "pick_and_roll", "halfcourt", ("PG", "C"), 50),
    Play("side_pnr", "Side Pick and Roll", "pick_and_roll", "halfcourt", ("PG", "PF"), 55),
    Play("spain_pnr", "Spain Pick and Roll", "pick_and_roll", "halfcourt", ("PG", "C"), 75, ("three_point",)),
    Play("wing_iso", "Wing Isolation", "isolation", "halfcourt", ("SG", "SF"), 40),
    Play("top_iso", "Top Isolation", "isolation", "halfcourt", ("PG", "SG"), 45),
    Play("low_post", "Low Post", "post_up", "halfcourt", ("PF", "C"), 45),
    Play("elbow_post", "Elbow Post", "post_up", "halfcourt", ("SF", "PF", "C"), 55),
    Play("corner_spot", "Corner Spot-Up", "spot_up", "halfcourt", ("SG", "SF"), 40, ("three_point",)),
    Play("drive_kick", "Drive and Kick", "spot_up", "halfcourt", ("PG", "SG"), 50, ("three_point",)),
    Play("fast_break", "Fast Break", "transition", "transition", ("PG", "SG", "SF"), 30),
    Play("secondary_break", "Secondary Break", "transition", "transition", ("PG", "SF"), 45, ("three_point",)),
    Play("drag_screen", "Early Drag Screen", "transition", "transition", ("PG", "C"), 50),
)

PLAYS_BY_ID: Mapping[str, Play] = {p.play_id: p for p in PLAYS}


def plays_by_category(category: str) -> List[Play]:
    return [p for p in PLAYS if p.category == category]


# -------------------------
# Offensive schemes
# -------------------------

SCHEME_WEIGHTS: Mapping[str, Mapping[str, float]] = {
    "motion": {
        "motion": 2.0, "cut": 1.5, "pick_and_roll": 1.2, "isolation": 0.5,
        "post_up": 0.8, "spot_up": 1.0, "transition": 1.0,
    },
    "iso_heavy": {
        "isolation": 2.5, "pick_and_roll": 1.2, "post_up": 1.0, "motion": 0.5,
        "cut": 0.6, "spot_up": 0.8, "transition": 1.0,
    },
    "post_centric": {
        "post_up": 2.5, "pick_and_roll": 1.0, "cut": 1.2, "isolation": 0.7,
        "motion": 0.8, "spot_up": 0.8, "transition": 0.8,
    },
    "three_point": {
        "spot_up": 2.0, "pick_and_roll": 1.5, "motion": 1.3, "isolation": 0.8,
        "post_up": 0.5, "cut": 1.0, "transition": 1.2,
    },
    "run_and_gun": {
        "transition": 2.5, "pick_and_roll": 1.3, "spot_up": 1.2, "isolation": 1.0,
        "motion": 0.7, "post_up": 0.5, "cut": 0.8,
    },
    "balanced": {
        "pick_and_roll": 1.2, "isolation": 1.0, "post_up": 1.0, "motion": 1.0,
        "cut": 1.0, "spot_up": 1.0, "transition": 1.0,
    },
}

DEFAULT_SCHEME = "balanced"

# Normalization: strip + lower + remove spaces/underscores/hyphens.
_OFFENSE_SCHEME_ALIAS_NORM = {
    "balanced": "balanced",
    "default": "balanced",
    "motion": "motion",
    "motionoffense": "motion",
    "isoheavy": "iso_heavy",
    "iso": "iso_heavy",
    "isolation": "iso_heavy",
    "isolationheavy": "iso_heavy",
    "postcentric": "post_centric",
    "post": "post_centric",
    "postup": "post_centric",
    "threepoint": "three_point",
    "threepointoriented": "three_point",
    "threes": "three_point",
    "perimeter": "three_point",
    "runandgun": "run_and_gun",
    "run": "run_and_gun",
    "pace": "run_and_gun",
    "sevensecondsorless": "run_and_gun",
}

_NORM_RE = re.compile(r"[\s_\-–]+")


def _norm(value: Any) -> str:
    return _NORM_RE.sub("", str(value or "").strip().lower())


def canonical_offense_scheme(value: Any) -> Optional[str]:
    """Canonical offensive scheme key, ``balanced`` for blank input, None when unknown."""
    s = str(value or "").strip()
    if not s:
        return DEFAULT_SCHEME
    if s in SCHEME_WEIGHTS:
        return s
    return _OFFENSE_SCHEME_ALIAS_NORM.get(_norm(s))


def scheme_weights(scheme: Any) -> Mapping[str, float]:
    """Category weights for a scheme; unknown schemes play balanced."""
    return SCHEME_WEIGHTS[canonical_offense_scheme(scheme) or DEFAULT_SCHEME]


# -------------------------
# Defensive schemes
# -------------------------


@dataclass(frozen=True, slots=True)
class DefensiveScheme:
    name: str
    weaknesses: Tuple[str, ...] = ()
    strengths: Tuple[str, ...] = ()
    steal_boost: float = 0.0
    block_boost: float = 0.0
    turnover_boost: float = 0.0
    contest_boost: float = 0.0
    # category -> shot modifier (positive hurts the offense)
    category_shot: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class DefenseModifiers:
    """Additive probability adjustments for one play against one defense."""

    shot: float = 0.0
    turnover: float = 0.0
    steal: float = 0.0
    block: float = 0.0


DEFENSIVE_SCHEMES: Mapping[str, DefensiveScheme] = {
    "man": DefensiveScheme(
        "Man-to-Man",
        weaknesses=("pick_and_roll", "motion"),
        strengths=("isolation", "post_up"),
        steal_boost=0.025,
        contest_boost=0.04,
        category_shot={"isolation": 0.10, "pick_and_roll": -0.08, "motion": -0.08},
    ),
    "zone_2_3": DefensiveScheme(
        "2-3 Zone",
        weaknesses=("spot_up",),
        strengths=("post_up",),
        block_boost=0.06,
        category_shot={"post_up": 0.12, "spot_up": -0.10},
    ),
    "zone_3_2": DefensiveScheme(
        "3-2 Zone",
        weaknesses=("cut",),
        strengths=("spot_up",),
        category_shot={"spot_up": 0.08, "cut": -0.08},
    ),
    "zone_1_3_1": DefensiveScheme(
        "1-3-1 Zone",
        strengths=("isolation",),
        steal_boost=0.08,
        turnover_boost=0.06,
        category_shot={"spot_up": -0.12},
    ),
    "press": DefensiveScheme(
        "Full Court Press",
        weaknesses=("transition",),
        steal_boost=0.06,
        turnover_boost=0.10,
        category_shot={"transition": -0.17},
    ),
    "trap": DefensiveScheme(
        "Trapping Defense",
        weaknesses=("spot_up",),
        strengths=("isolation",),
        steal_boost=0.10,
        turnover_boost=0.05,
        category_shot={"spot_up": -0.12},
    ),
}

DEFAULT_DEFENSE = "man"

# Play exploits a weakness / runs into a strength.
WEAKNESS_SHOT: float = 0.10
WEAKNESS_TURNOVER: float = -0.06
STRENGTH_SHOT: float = -0.07
STRENGTH_TURNOVER: float = 0.04
PAINT_PROTECTION_BLOCK: float = 0.05

_DEFENSE_SCHEME_ALIAS_NORM = {
    "man": "man",
    "mantoman": "man",
    "m2m": "man",
    "zone": "zone_2_3",
    "23": "zone_2_3",
    "23zone": "zone_2_3",
    "zone23": "zone_2_3",
    "32": "zone_3_2",
    "32zone": "zone_3_2",
    "zone32": "zone_3_2",
    "131": "zone_1_3_1",
    "131zone": "zone_1_3_1",
    "zone131": "zone_1_3_1",
    "press": "press",
    "fullcourtpress": "press",
    "trap": "trap",
    "trapping": "trap",
    "blitz": "trap",
}


def canonical_defense_scheme(value: Any) -> Optional[str]:
    """Canonical defensive scheme key, ``man`` for blank input, None when unknown."""
    s = str(value or "").strip()
    if not s:
        return DEFAULT_DEFENSE
    if s in DEFENSIVE_SCHEMES:
        return s
    return _DEFENSE_SCHEME_ALIAS_NORM.get(_norm(s))


def defense_modifiers(scheme: Any, play: Play) -> DefenseModifiers:
    """Shot/turnover/steal/block adjustments for ``play`` against ``scheme``."""
    d = DEFENSIVE_SCHEMES[canonical_defense_scheme(scheme) or DEFAULT_DEFENSE]
    cat = play.category
    shot = 0.0
    turnover = d.turnover_boost
    block = d.block_boost

    if cat in d.weaknesses:
        shot += WEAKNESS_SHOT
        turnover += WEAKNESS_TURNOVER
    if cat in d.strengths:
        shot += STRENGTH_SHOT
        turnover += STRENGTH_TURNOVER

    # category_shot is stated from the defense's side
    shot -= d.category_shot.get(cat, 0.0)
    if cat == "post_up" and d.category_shot.get("post_up", 0.0) > 0:
        block += PAINT_PROTECTION_BLOCK
    shot -= d.contest_boost

    return DefenseModifiers(shot=shot, turnover=turnover, steal=d.steal_boost, block=block)


# -------------------------
# Play selection
# -------------------------


def position_fit(play: Play, lineup: Sequence[Player]) -> float:
    for p in lineup:
        if p.position in play.primary_positions:
            return 1.0
    return me_cfg.POSITION_MISS_FIT


def average_iq(lineup: Sequence[Player]) -> float:
    if not lineup:
        return 50.0
    return sum(p.attribute("basketball_iq") for p in lineup) / len(lineup)


def play_weight(
    play: Play,
    lineup: Sequence[Player],
    weights: Mapping[str, float],
    shot_clock: float,
    score_diff: float,
    avg_iq: Optional[float] = None,
) -> float:
    w = float(weights.get(play.category, 1.0))
    w *= position_fit(play, lineup)

    iq = average_iq(lineup) if avg_iq is None else avg_iq
    w *= max(me_cfg.MIN_IQ_PENALTY, min(1.0, 1.0 - (play.difficulty - iq) / 100.0))

    if shot_clock < me_cfg.LATE_CLOCK_SEC and play.category in ("isolation", "spot_up"):
        w *= me_cfg.LATE_CLOCK_BOOST
    if score_diff < -me_cfg.TRAILING_MARGIN and (play.category == "isolation" or "three_point" in play.tags):
        w *= me_cfg.TRAILING_BOOST
    return w


def select_play(
    offense_on_court: Sequence[Player],
    scheme: Any,
    shot_clock: float,
    score_diff: float,
    rng: random.Random,
    *,
    tempo: Optional[str] = None,
) -> Play:
    """Weighted draw over the play catalog.

    ``score_diff`` is from the offense's point of view. ``tempo`` restricts
    the catalog to ``halfcourt`` or ``transition`` plays; None uses all plays.
    """
    pool = [p for p in PLAYS if tempo is None or p.tempo == tempo] or list(PLAYS)
    weights = scheme_weights(scheme)
    iq = average_iq(offense_on_court)
    items = [(p, play_weight(p, offense_on_court, weights, shot_clock, score_diff, iq)) for p in pool]
    return weighted_choice(rng, items)


__all__ = [
    "PLAY_CATEGORIES",
    "Play",
    "PLAYS",
    "PLAYS_BY_ID",
    "plays_by_category",
    "SCHEME_WEIGHTS",
    "DEFAULT_SCHEME",
    "canonical_offense_scheme",
    "scheme_weights",
    "DefensiveScheme",
    "DefenseModifiers",
    "DEFENSIVE_SCHEMES",
    "DEFAULT_DEFENSE",
    "canonical_defense_scheme",
    "defense_modifiers",
    "position_fit",
    "average_iq",
    "play_weight",
    "select_play",
]
