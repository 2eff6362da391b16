"""Static reference tables.

Public API
----------
- ATTRIBUTE_GROUPS / CATEGORY_PROFILES / AGE_BRACKETS
- age_bracket / profile_for_attribute
- TRAITS / trait_effect
- get_catalog / configure_badges / reset_catalog
- DIFFICULTY_SETTINGS / get_difficulty / expected_minutes
- POSITION_RELEVANCE / position_relevance

Everything here is read-only except the badge catalog, which INIT may replace.
"""

from .attributes import (
    AGE_BRACKETS,
    ATTRIBUTE_GROUPS,
    CATEGORY_PROFILES,
    GROUP_BY_ATTRIBUTE,
    MAX_ATTR,
    MIN_ATTR,
    AgeBracket,
    CategoryProfile,
    age_bracket,
    profile_for_attribute,
)
from .badges import BadgeCatalog, configure_badges, get_catalog, reset_catalog
from .difficulty import DIFFICULTY_SETTINGS, DifficultySettings, expected_minutes, get_difficulty
from .personality import TRAITS, TraitEffect, normalize_trait, trait_effect
from .positions import POSITION_RELEVANCE, position_relevance

__all__ = [
    "AGE_BRACKETS",
    "ATTRIBUTE_GROUPS",
    "CATEGORY_PROFILES",
    "GROUP_BY_ATTRIBUTE",
    "MAX_ATTR",
    "MIN_ATTR",
    "AgeBracket",
    "CategoryProfile",
    "age_bracket",
    "profile_for_attribute",
    "BadgeCatalog",
    "configure_badges",
    "get_catalog",
    "reset_catalog",
    "DIFFICULTY_SETTINGS",
    "DifficultySettings",
    "expected_minutes",
    "get_difficulty",
    "TRAITS",
    "TraitEffect",
    "normalize_trait",
    "trait_effect",
    "POSITION_RELEVANCE",
    "position_relevance",
]
