from __future__ import annotations

"""Badge definitions and teammate badge synergies.

The catalog starts from the built-in defaults and can be replaced wholesale
by the worker's INIT request. Readers always take a snapshot via
``get_catalog()``; a replacement swaps the whole object so in-flight readers
keep a consistent view.
"""

import logging
from dataclasses import dataclass, field
from threading import RLock
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from errors import ConfigurationError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Levels and boosts
# ---------------------------------------------------------------------------

BADGE_LEVELS: Mapping[str, int] = MappingProxyType({"bronze": 1, "silver": 2, "gold": 3, "hof": 4})

# Monthly development: +5% per active teammate synergy, +8% when either badge is HOF.
SYNERGY_DEV_BOOST: float = 0.05
SYNERGY_DEV_BOOST_HOF: float = 0.08
SYNERGY_DEV_BOOST_MAX: float = 0.15

# In-game: each on-court synergy adds a small performance boost.
SYNERGY_IN_GAME_BOOST: float = 0.03
SYNERGY_IN_GAME_BOOST_MAX: float = 0.12

SYNERGY_CHEMISTRY: float = 2.0

# Dynamic duo: two teammates sharing 2+ synergies where both badges are gold or better.
DYNAMIC_DUO_BOOST: float = 0.02
DYNAMIC_DUO_MIN_SYNERGIES: int = 2
DYNAMIC_DUO_MIN_LEVEL: int = 3


def level_value(level: Any) -> int:
    if isinstance(level, int):
        return max(1, min(4, level))
    return BADGE_LEVELS.get(str(level or "bronze").strip().lower(), 1)


# ---------------------------------------------------------------------------
# Definitions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BadgeDefinition:
    badge_id: str
    name: str
    category: str
    # Attribute the badge nudges in-game (per level point).
    attribute: Optional[str] = None


@dataclass(frozen=True, slots=True)
class BadgeSynergy:
    badge1_id: str
    badge2_id: str
    effect: str
    magnitude: float = 0.0


@dataclass(frozen=True, slots=True)
class SynergyMatch:
    """One synergy found between two players (levels are the holders' levels)."""

    synergy: BadgeSynergy
    level1: int
    level2: int

    @property
    def min_level(self) -> int:
        return min(self.level1, self.level2)

    @property
    def has_hof(self) -> bool:
        return max(self.level1, self.level2) >= BADGE_LEVELS["hof"]


DEFAULT_BADGE_DEFINITIONS: Tuple[BadgeDefinition, ...] = (
    BadgeDefinition("deadeye", "Deadeye", "shooting", "three_point"),
    BadgeDefinition("catch_and_shoot", "Catch and Shoot", "shooting", "three_point"),
    BadgeDefinition("corner_specialist", "Corner Specialist", "shooting", "three_point"),
    BadgeDefinition("mid_range_maestro", "Mid-Range Maestro", "shooting", "mid_range"),
    BadgeDefinition("dimer", "Dimer", "playmaking", "pass_accuracy"),
    BadgeDefinition("floor_general", "Floor General", "playmaking", "pass_vision"),
    BadgeDefinition("lob_city_passer", "Lob City Passer", "playmaking", "pass_accuracy"),
    BadgeDefinition("ankle_breaker", "Ankle Breaker", "playmaking", "ball_handling"),
    BadgeDefinition("lob_city_finisher", "Lob City Finisher", "finishing", "driving_dunk"),
    BadgeDefinition("pick_and_roller", "Pick and Roller", "finishing", "layup"),
    BadgeDefinition("posterizer", "Posterizer", "finishing", "driving_dunk"),
    BadgeDefinition("post_scorer", "Post Scorer", "finishing", "post_control"),
    BadgeDefinition("brick_wall", "Brick Wall", "defense", "strength"),
    BadgeDefinition("anchor", "Anchor", "defense", "interior_defense"),
    BadgeDefinition("intimidator", "Intimidator", "defense", "block"),
    BadgeDefinition("clamps", "Clamps", "defense", "perimeter_defense"),
    BadgeDefinition("interceptor", "Interceptor", "defense", "steal"),
    BadgeDefinition("rebound_chaser", "Rebound Chaser", "rebounding", "defensive_rebound"),
)

DEFAULT_SYNERGIES: Tuple[BadgeSynergy, ...] = (
    BadgeSynergy("dimer", "catch_and_shoot", "shooting_boost", 5),
    BadgeSynergy("lob_city_passer", "lob_city_finisher", "alley_oop_boost", 10),
    BadgeSynergy("brick_wall", "pick_and_roller", "screen_boost", 5),
    BadgeSynergy("anchor", "intimidator", "interior_defense_boost", 8),
    BadgeSynergy("floor_general", "deadeye", "team_shooting_boost", 3),
    BadgeSynergy("floor_general", "catch_and_shoot", "team_shooting_boost", 3),
    BadgeSynergy("floor_general", "corner_specialist", "team_shooting_boost", 3),
)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BadgeCatalog:
    definitions: Mapping[str, BadgeDefinition]
    synergies: Tuple[BadgeSynergy, ...]
    _by_badge: Mapping[str, Tuple[BadgeSynergy, ...]] = field(default_factory=dict, repr=False)

    @classmethod
    def build(cls, definitions: Iterable[BadgeDefinition], synergies: Iterable[BadgeSynergy]) -> "BadgeCatalog":
        defs = {d.badge_id: d for d in definitions}
        syns = tuple(synergies)
        by_badge: Dict[str, List[BadgeSynergy]] = {}
        for s in syns:
            by_badge.setdefault(s.badge1_id, []).append(s)
            if s.badge2_id != s.badge1_id:
                by_badge.setdefault(s.badge2_id, []).append(s)
        return cls(
            definitions=MappingProxyType(defs),
            synergies=syns,
            _by_badge=MappingProxyType({k: tuple(v) for k, v in by_badge.items()}),
        )

    def find_synergies(self, badges_a: Mapping[str, Any], badges_b: Mapping[str, Any]) -> List[SynergyMatch]:
        """All synergies between two players' badge maps ({badge_id: level}), both directions."""
        if not badges_a or not badges_b:
            return []
        found: List[SynergyMatch] = []
        seen = set()
        for badge_id in badges_a:
            for syn in self._by_badge.get(badge_id, ()):
                if id(syn) in seen:
                    continue
                if syn.badge1_id in badges_a and syn.badge2_id in badges_b:
                    seen.add(id(syn))
                    found.append(
                        SynergyMatch(syn, level_value(badges_a[syn.badge1_id]), level_value(badges_b[syn.badge2_id]))
                    )
                elif syn.badge2_id in badges_a and syn.badge1_id in badges_b:
                    seen.add(id(syn))
                    found.append(
                        SynergyMatch(syn, level_value(badges_a[syn.badge2_id]), level_value(badges_b[syn.badge1_id]))
                    )
        return found

    def attribute_for(self, badge_id: str) -> Optional[str]:
        d = self.definitions.get(badge_id)
        return d.attribute if d is not None else None


def _parse_definition(raw: Any) -> BadgeDefinition:
    if isinstance(raw, BadgeDefinition):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"badge definition must be an object, got {type(raw).__name__}")
    badge_id = str(raw.get("id") or raw.get("badge_id") or "").strip()
    if not badge_id:
        raise ConfigurationError("badge definition is missing an id")
    return BadgeDefinition(
        badge_id=badge_id,
        name=str(raw.get("name") or badge_id),
        category=str(raw.get("category") or ""),
        attribute=(str(raw["attribute"]) if raw.get("attribute") else None),
    )


def _parse_synergy(raw: Any) -> BadgeSynergy:
    if isinstance(raw, BadgeSynergy):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"badge synergy must be an object, got {type(raw).__name__}")
    b1 = str(raw.get("badge1_id") or raw.get("badge1Id") or "").strip()
    b2 = str(raw.get("badge2_id") or raw.get("badge2Id") or "").strip()
    if not b1 or not b2:
        raise ConfigurationError("badge synergy needs badge1_id and badge2_id")
    try:
        magnitude = float(raw.get("magnitude") or 0.0)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"badge synergy magnitude is not numeric: {raw.get('magnitude')!r}") from exc
    return BadgeSynergy(b1, b2, str(raw.get("effect") or ""), magnitude)


_DEFAULT_CATALOG = BadgeCatalog.build(DEFAULT_BADGE_DEFINITIONS, DEFAULT_SYNERGIES)
_CATALOG_LOCK = RLock()
_catalog: BadgeCatalog = _DEFAULT_CATALOG


def get_catalog() -> BadgeCatalog:
    return _catalog


def configure_badges(
    definitions: Optional[Sequence[Any]] = None,
    synergies: Optional[Sequence[Any]] = None,
) -> BadgeCatalog:
    """Replace the active catalog. Omitted parts keep their defaults."""
    global _catalog
    defs = [_parse_definition(d) for d in definitions] if definitions else list(DEFAULT_BADGE_DEFINITIONS)
    syns = [_parse_synergy(s) for s in synergies] if synergies else list(DEFAULT_SYNERGIES)
    catalog = BadgeCatalog.build(defs, syns)
    with _CATALOG_LOCK:
        _catalog = catalog
    logger.info("BADGE_CATALOG_CONFIGURED badges=%d synergies=%d", len(defs), len(syns))
    return catalog


def reset_catalog() -> None:
    global _catalog
    with _CATALOG_LOCK:
        _catalog = _DEFAULT_CATALOG
