from __future__ import annotations

"""Injury catalog: severity tiers and the named injuries inside each tier.

A roll first draws a tier by weight, then a uniform games-out value inside
the tier range, then a name from the tier's list.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple


@dataclass(frozen=True, slots=True)
class InjuryTierSpec:
    tier: str
    min_games: int
    max_games: int
    weight: float
    permanent_impact: float
    major: bool
    injuries: Tuple[str, ...]


INJURY_TIERS: Mapping[str, InjuryTierSpec] = MappingProxyType(
    {
        "minor": InjuryTierSpec(
            tier="minor",
            min_games=1,
            max_games=5,
            weight=60,
            permanent_impact=0,
            major=False,
            injuries=(
                "Sprained Ankle",
                "Bruised Knee",
                "Sore Back",
                "Finger Sprain",
                "Hip Soreness",
                "Wrist Soreness",
            ),
        ),
        "moderate": InjuryTierSpec(
            tier="moderate",
            min_games=6,
            max_games=20,
            weight=30,
            permanent_impact=0,
            major=False,
            injuries=(
                "Hamstring Strain",
                "Groin Injury",
                "Calf Strain",
                "Shoulder Sprain",
                "Quad Strain",
                "Grade 2 Ankle Sprain",
            ),
        ),
        "severe": InjuryTierSpec(
            tier="severe",
            min_games=21,
            max_games=60,
            weight=8,
            permanent_impact=1,
            major=True,
            injuries=(
                "Torn Meniscus",
                "Broken Hand",
                "Stress Fracture",
                "Concussion",
                "Torn Ligament",
            ),
        ),
        "season_ending": InjuryTierSpec(
            tier="season_ending",
            min_games=61,
            max_games=82,
            weight=2,
            permanent_impact=3,
            major=True,
            injuries=(
                "ACL Tear",
                "Achilles Rupture",
                "Broken Leg",
                "Major Back Injury",
                "Patellar Tendon Tear",
            ),
        ),
    }
)

TIER_ORDER: Tuple[str, ...] = ("minor", "moderate", "severe", "season_ending")
