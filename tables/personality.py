from __future__ import annotations

"""Personality trait effect table.

Traits are not mutually exclusive; effects from several traits add up.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Literal, Mapping

TraitName = Literal[
    "competitor",
    "leader",
    "mentor",
    "hot_head",
    "ball_hog",
    "team_player",
    "joker",
    "quiet",
    "media_darling",
]


@dataclass(frozen=True, slots=True)
class TraitEffect:
    development_bonus: float = 0.0
    clutch_boost: float = 0.0  # attribute points in clutch time
    playoff_performance: float = 0.0
    chemistry: float = 0.0  # team chemistry points
    team_development: float = 0.0
    morale_stability: float = 0.0  # 0..1, damps morale swings
    morale_volatility: float = 1.0  # multiplies morale swings
    morale_boost: float = 0.0
    usage: float = 0.0
    assist: float = 0.0
    pressure_penalty: float = 0.0
    contract_bonus: float = 0.0
    tech_foul_chance: float = 0.0
    ejection_chance: float = 0.0


TRAITS: Mapping[str, TraitEffect] = MappingProxyType(
    {
        "competitor": TraitEffect(development_bonus=0.10, clutch_boost=5.0, playoff_performance=0.05),
        "leader": TraitEffect(chemistry=5.0, team_development=0.05, morale_stability=0.3),
        # Mentor's own development suffers while helping mentees.
        "mentor": TraitEffect(development_bonus=-0.05),
        "hot_head": TraitEffect(morale_volatility=2.0, tech_foul_chance=0.02, ejection_chance=0.005),
        "ball_hog": TraitEffect(usage=0.10, chemistry=-3.0, assist=-0.10),
        "team_player": TraitEffect(chemistry=3.0, assist=0.10, usage=-0.05, morale_stability=0.5),
        "joker": TraitEffect(chemistry=2.0, morale_boost=0.05),
        "quiet": TraitEffect(morale_stability=0.7),
        "media_darling": TraitEffect(contract_bonus=0.05, pressure_penalty=-0.02),
    }
)

# Mentoring
MENTOR_YOUNG_PLAYER_BOOST: float = 0.15
MENTOR_MAX_MENTEE_AGE: int = 24
MENTOR_MAX_MENTEES: int = 2

_NEUTRAL = TraitEffect()


def normalize_trait(value: object) -> str:
    """'Hot Head' / 'hotHead' / 'HOT_HEAD' -> 'hot_head'."""
    s = str(value or "").strip()
    out = []
    for i, ch in enumerate(s):
        if ch.isupper() and i > 0 and s[i - 1].islower():
            out.append("_")
        out.append(ch.lower())
    key = "".join(out).replace(" ", "_").replace("-", "_")
    return key


def trait_effect(name: str) -> TraitEffect:
    return TRAITS.get(normalize_trait(name), _NEUTRAL)


def combined_morale_stability(traits: Iterable[str]) -> float:
    """Strongest stability trait wins; stability never fully freezes morale."""
    best = 0.0
    for t in traits:
        best = max(best, trait_effect(t).morale_stability)
    return min(best, 0.9)


def combined_volatility(traits: Iterable[str]) -> float:
    vol = 1.0
    for t in traits:
        vol = max(vol, trait_effect(t).morale_volatility)
    return vol
