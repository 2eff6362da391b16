from __future__ import annotations

"""Attribute layout, aging category profiles and age brackets.

Read-only reference data. Nothing in this module holds state, so the tables
are safe to share across concurrent simulations.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

# ---------------------------------------------------------------------------
# Rating bounds
# ---------------------------------------------------------------------------

MIN_ATTR: float = 25.0
MAX_ATTR: float = 99.0

# ---------------------------------------------------------------------------
# Rating groups (used by the overall formula)
# ---------------------------------------------------------------------------

ATTRIBUTE_GROUPS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        "offense": (
            "three_point",
            "mid_range",
            "close_shot",
            "free_throw",
            "layup",
            "standing_dunk",
            "driving_dunk",
            "draw_foul",
            "post_control",
            "ball_handling",
            "pass_accuracy",
            "pass_vision",
            "pass_iq",
        ),
        "defense": (
            "perimeter_defense",
            "interior_defense",
            "steal",
            "block",
            "help_defense_iq",
            "pass_perception",
            "offensive_rebound",
            "defensive_rebound",
        ),
        "physical": ("speed", "acceleration", "strength", "vertical", "stamina", "durability"),
        "mental": ("basketball_iq", "clutch", "consistency", "intangibles"),
    }
)

GROUP_BY_ATTRIBUTE: Mapping[str, str] = MappingProxyType(
    {attr: group for group, attrs in ATTRIBUTE_GROUPS.items() for attr in attrs}
)

# Athletic attributes drive fatigue recovery speed.
ATHLETIC_ATTRIBUTES: Tuple[str, ...] = ("stamina", "durability")

# Physical attributes that take permanent injury damage.
INJURY_SENSITIVE_ATTRIBUTES: Tuple[str, ...] = ("speed", "acceleration", "vertical", "stamina")


# ---------------------------------------------------------------------------
# Aging category profiles
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CategoryProfile:
    name: str
    peak_age: int
    decline_start: int
    decline_rate: float  # rating points per year after decline_start
    can_improve_past_peak: bool
    attributes: Tuple[str, ...]


CATEGORY_PROFILES: Mapping[str, CategoryProfile] = MappingProxyType(
    {
        p.name: p
        for p in (
            CategoryProfile("physical", 26, 29, 0.8, False, ("speed", "acceleration", "vertical", "stamina")),
            CategoryProfile("strength", 30, 33, 0.4, False, ("strength",)),
            CategoryProfile(
                "shooting", 29, 34, 0.3, True, ("three_point", "mid_range", "free_throw", "close_shot")
            ),
            CategoryProfile(
                "mental", 32, 37, 0.2, True, ("basketball_iq", "clutch", "consistency", "intangibles")
            ),
            CategoryProfile(
                "skill",
                28,
                33,
                0.4,
                True,
                ("ball_handling", "pass_accuracy", "pass_vision", "pass_iq", "post_control", "layup"),
            ),
            CategoryProfile("finishing", 27, 31, 0.5, False, ("standing_dunk", "driving_dunk", "draw_foul")),
            CategoryProfile(
                "defense",
                28,
                32,
                0.4,
                True,
                (
                    "perimeter_defense",
                    "interior_defense",
                    "steal",
                    "block",
                    "help_defense_iq",
                    "pass_perception",
                ),
            ),
            CategoryProfile("rebounding", 29, 33, 0.3, True, ("offensive_rebound", "defensive_rebound")),
        )
    }
)

_PROFILE_BY_ATTRIBUTE: Dict[str, CategoryProfile] = {
    attr: profile for profile in CATEGORY_PROFILES.values() for attr in profile.attributes
}


def profile_for_attribute(name: str) -> Optional[CategoryProfile]:
    """Aging profile for an attribute, or None (durability has no profile)."""
    return _PROFILE_BY_ATTRIBUTE.get(str(name))


# ---------------------------------------------------------------------------
# Age brackets
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AgeBracket:
    name: str
    min_age: int
    max_age: int
    development: float
    regression: float


AGE_BRACKETS: Tuple[AgeBracket, ...] = (
    AgeBracket("youth", 19, 23, 1.5, 0.0),
    AgeBracket("rising", 24, 26, 1.0, 0.0),
    AgeBracket("prime", 27, 31, 0.3, 0.1),
    AgeBracket("decline", 32, 35, 0.0, 0.5),
    AgeBracket("veteran", 36, 45, 0.0, 1.0),
)


def age_bracket(age: int) -> AgeBracket:
    a = int(age)
    if a < AGE_BRACKETS[0].min_age:
        return AGE_BRACKETS[0]
    for bracket in AGE_BRACKETS:
        if bracket.min_age <= a <= bracket.max_age:
            return bracket
    return AGE_BRACKETS[-1]
