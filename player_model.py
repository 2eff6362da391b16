from __future__ import annotations

"""Player / team records shared by the engine and the evolution pipeline.

Records arrive as loosely shaped JSON from callers. ``from_dict`` is the one
place where they are validated and defaulted; past that boundary every field
is present and typed. Callers own their records: the engine and the pipeline
only ever work on ``copy()``s.
"""

import copy
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Literal, Mapping, Optional, Tuple

from errors import ConfigurationError
from ratings import overall_from_attributes
from tables.attributes import ATTRIBUTE_GROUPS, GROUP_BY_ATTRIBUTE, MAX_ATTR, MIN_ATTR
from tables.personality import normalize_trait

Position = Literal["PG", "SG", "SF", "PF", "C"]
InjuryTier = Literal["minor", "moderate", "severe", "season_ending"]
StreakKind = Literal["hot", "cold"]

POSITIONS: Tuple[str, ...] = ("PG", "SG", "SF", "PF", "C")

DEFAULT_ATTRIBUTE: float = 50.0
DEFAULT_MORALE: float = 80.0
RECENT_PERFORMANCE_LIMIT: int = 10

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _snake(name: str) -> str:
    """threePoint -> three_point, basketballIQ -> basketball_iq, passIQ -> pass_iq."""
    s = str(name).strip()
    s = s.replace("IQ", "Iq")
    return _CAMEL_RE.sub("_", s).replace("-", "_").replace(" ", "_").lower()


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in data and data[k] is not None:
            return data[k]
    return default


def _num(value: Any, *, what: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{what} must be numeric, got {value!r}") from exc


def _clamp_attr(value: float) -> float:
    return max(MIN_ATTR, min(MAX_ATTR, float(value)))


def _clamp100(value: float) -> float:
    return max(0.0, min(100.0, float(value)))


# ---------------------------------------------------------------------------
# Small records
# ---------------------------------------------------------------------------


@dataclass
class Injury:
    tier: InjuryTier
    name: str
    games_remaining: int
    permanent_penalty: float = 0.0
    recovery_estimate: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tier": self.tier,
            "name": self.name,
            "games_remaining": int(self.games_remaining),
            "permanent_penalty": float(self.permanent_penalty),
            "recovery_estimate": self.recovery_estimate,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Injury":
        tier = str(_pick(data, "tier", "type", "severity", default="minor")).lower()
        if tier not in ("minor", "moderate", "severe", "season_ending"):
            raise ConfigurationError(f"unknown injury tier: {tier!r}")
        return cls(
            tier=tier,  # type: ignore[arg-type]
            name=str(_pick(data, "name", "injury_type", default="")),
            games_remaining=max(0, int(_num(_pick(data, "games_remaining", "gamesRemaining", default=0), what="games_remaining"))),
            permanent_penalty=_num(_pick(data, "permanent_penalty", "permanentPenalty", default=0.0), what="permanent_penalty"),
            recovery_estimate=str(_pick(data, "recovery_estimate", "recoveryEstimate", default="")),
        )


@dataclass
class Streak:
    kind: StreakKind
    games: int
    # Mean attribute move when the streak started (reporting only).
    bonus_applied: float = 0.0
    # Exact per-attribute moves, after clamping; ending the streak undoes these.
    applied: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "games": int(self.games),
            "bonus_applied": float(self.bonus_applied),
            "applied": {k: float(v) for k, v in self.applied.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Streak":
        kind = str(_pick(data, "kind", "type", default="")).lower()
        if kind not in ("hot", "cold"):
            raise ConfigurationError(f"unknown streak kind: {kind!r}")
        return cls(
            kind=kind,  # type: ignore[arg-type]
            games=int(_num(_pick(data, "games", "length", default=0), what="streak games")),
            bonus_applied=_num(data.get("bonus_applied", 0.0), what="streak bonus"),
            applied={
                str(k): _num(v, what="streak move")
                for k, v in (data.get("applied") or {}).items()
            },
        )


@dataclass
class GamePerformance:
    """One entry of a player's rolling game log (used for streak detection)."""

    rating: float
    minutes: float = 0.0
    points: int = 0
    rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    turnovers: int = 0
    three_pointers_made: int = 0
    won: bool = False
    date: str = ""
    opponent: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rating": float(self.rating),
            "minutes": float(self.minutes),
            "points": int(self.points),
            "rebounds": int(self.rebounds),
            "assists": int(self.assists),
            "steals": int(self.steals),
            "blocks": int(self.blocks),
            "turnovers": int(self.turnovers),
            "three_pointers_made": int(self.three_pointers_made),
            "won": bool(self.won),
            "date": self.date,
            "opponent": self.opponent,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "GamePerformance":
        if isinstance(data, (int, float)):
            return cls(rating=float(data))
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"performance entry must be an object, got {type(data).__name__}")
        return cls(
            rating=_num(data.get("rating", 0.0), what="performance rating"),
            minutes=_num(_pick(data, "minutes", "min", default=0.0), what="minutes"),
            points=int(_pick(data, "points", "pts", default=0)),
            rebounds=int(_pick(data, "rebounds", "reb", default=0)),
            assists=int(_pick(data, "assists", "ast", default=0)),
            steals=int(_pick(data, "steals", "stl", default=0)),
            blocks=int(_pick(data, "blocks", "blk", default=0)),
            turnovers=int(_pick(data, "turnovers", "to", default=0)),
            three_pointers_made=int(_pick(data, "three_pointers_made", "tpm", default=0)),
            won=bool(data.get("won", False)),
            date=str(data.get("date") or ""),
            opponent=str(data.get("opponent") or ""),
        )


# ---------------------------------------------------------------------------
# Player
# ---------------------------------------------------------------------------


@dataclass
class Player:
    player_id: str
    name: str
    position: str
    age: int
    attributes: Dict[str, Dict[str, float]]
    potential: float
    overall: int
    work_ethic: float = 70.0
    traits: List[str] = field(default_factory=list)
    badges: Dict[str, str] = field(default_factory=dict)
    fatigue: float = 0.0
    morale: float = DEFAULT_MORALE
    injury: Optional[Injury] = None
    recent_performances: List[GamePerformance] = field(default_factory=list)
    streak: Optional[Streak] = None
    contract_years_remaining: int = 1
    games_played_this_season: int = 0
    minutes_played_this_season: float = 0.0
    career_seasons: int = 0
    career_injury_count: int = 0
    major_injury_count: int = 0
    season_overall_change: int = 0
    # unspent attribute upgrades; earned weekly from recent growth
    upgrade_points: int = 0
    growth_since_weekly: float = 0.0
    is_rookie: bool = False
    is_retired: bool = False
    injury_risk: str = "M"
    team_id: str = ""

    # -- attribute access ---------------------------------------------------

    def attribute(self, name: str, default: float = DEFAULT_ATTRIBUTE) -> float:
        group = GROUP_BY_ATTRIBUTE.get(name)
        if group is None:
            return float(default)
        return float(self.attributes.get(group, {}).get(name, default))

    def set_attribute(self, name: str, value: float) -> float:
        """Write an attribute (clamped to the rating range); returns the stored value."""
        group = GROUP_BY_ATTRIBUTE.get(name)
        if group is None:
            raise KeyError(name)
        v = _clamp_attr(value)
        self.attributes.setdefault(group, {})[name] = v
        return v

    def adjust_attribute(self, name: str, delta: float) -> float:
        return self.set_attribute(name, self.attribute(name) + float(delta))

    def iter_attributes(self) -> Iterator[Tuple[str, str, float]]:
        for group, attrs in self.attributes.items():
            for name, value in attrs.items():
                yield group, name, float(value)

    # -- traits / state -----------------------------------------------------

    def has_trait(self, trait: str) -> bool:
        return normalize_trait(trait) in self.traits

    @property
    def is_injured(self) -> bool:
        return self.injury is not None and self.injury.games_remaining > 0

    def clamp_state(self) -> None:
        self.fatigue = _clamp100(self.fatigue)
        self.morale = _clamp100(self.morale)

    def copy(self) -> "Player":
        return copy.deepcopy(self)

    # -- serialization ------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "position": self.position,
            "age": int(self.age),
            "attributes": {g: dict(a) for g, a in self.attributes.items()},
            "potential": float(self.potential),
            "overall": int(self.overall),
            "work_ethic": float(self.work_ethic),
            "traits": list(self.traits),
            "badges": dict(self.badges),
            "fatigue": float(self.fatigue),
            "morale": float(self.morale),
            "injury": self.injury.to_dict() if self.injury else None,
            "recent_performances": [p.to_dict() for p in self.recent_performances],
            "streak": self.streak.to_dict() if self.streak else None,
            "contract_years_remaining": int(self.contract_years_remaining),
            "games_played_this_season": int(self.games_played_this_season),
            "minutes_played_this_season": float(self.minutes_played_this_season),
            "career_seasons": int(self.career_seasons),
            "career_injury_count": int(self.career_injury_count),
            "major_injury_count": int(self.major_injury_count),
            "season_overall_change": int(self.season_overall_change),
            "upgrade_points": int(self.upgrade_points),
            "growth_since_weekly": float(self.growth_since_weekly),
            "is_rookie": bool(self.is_rookie),
            "is_retired": bool(self.is_retired),
            "injury_risk": self.injury_risk,
            "team_id": self.team_id,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Player":
        if isinstance(data, Player):
            return data.copy()
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"player record must be an object, got {type(data).__name__}")

        player_id = str(_pick(data, "player_id", "id", "playerId", default="")).strip()
        if not player_id:
            raise ConfigurationError("player record is missing an id")

        position = str(_pick(data, "position", default="SF")).strip().upper()
        if position not in POSITIONS:
            raise ConfigurationError(f"player {player_id}: unknown position {position!r}")

        attributes = _parse_attributes(_pick(data, "attributes", default={}), player_id=player_id)
        overall_raw = _pick(data, "overall", "overall_rating", "overallRating")
        overall = int(_num(overall_raw, what="overall")) if overall_raw is not None else overall_from_attributes(attributes)

        injury_raw = data.get("injury")
        streak_raw = _pick(data, "streak", "streak_data", "streakData")
        traits_raw = data.get("traits") or []
        badges_raw = data.get("badges") or {}
        if isinstance(badges_raw, list):
            # [{"id": ..., "level": ...}] form
            badges_raw = {str(b.get("id")): str(b.get("level") or "bronze") for b in badges_raw if isinstance(b, Mapping)}

        perf_raw = _pick(data, "recent_performances", "recentPerformances", default=[]) or []

        player = cls(
            player_id=player_id,
            name=str(_pick(data, "name", default=player_id)),
            position=position,
            age=int(_num(_pick(data, "age", default=25), what="age")),
            attributes=attributes,
            potential=_num(_pick(data, "potential", "potential_rating", "potentialRating", default=overall), what="potential"),
            overall=overall,
            work_ethic=_num(_pick(data, "work_ethic", "workEthic", default=70.0), what="work_ethic"),
            traits=[normalize_trait(t) for t in traits_raw],
            badges={str(k): str(v) for k, v in dict(badges_raw).items()},
            fatigue=_num(data.get("fatigue", 0.0), what="fatigue"),
            morale=_num(data.get("morale", DEFAULT_MORALE), what="morale"),
            injury=Injury.from_dict(injury_raw) if isinstance(injury_raw, Mapping) else None,
            recent_performances=[GamePerformance.from_dict(p) for p in perf_raw][-RECENT_PERFORMANCE_LIMIT:],
            streak=Streak.from_dict(streak_raw) if isinstance(streak_raw, Mapping) else None,
            contract_years_remaining=int(_pick(data, "contract_years_remaining", "contractYearsRemaining", default=1)),
            games_played_this_season=int(_pick(data, "games_played_this_season", "gamesPlayedThisSeason", default=0)),
            minutes_played_this_season=_num(
                _pick(data, "minutes_played_this_season", "minutesPlayedThisSeason", default=0.0), what="season minutes"
            ),
            career_seasons=int(_pick(data, "career_seasons", "careerSeasons", default=0)),
            career_injury_count=int(_pick(data, "career_injury_count", "careerInjuryCount", default=0)),
            major_injury_count=int(_pick(data, "major_injury_count", "majorInjuryCount", default=0)),
            season_overall_change=int(_pick(data, "season_overall_change", default=0)),
            upgrade_points=int(_num(_pick(data, "upgrade_points", "upgradePoints", default=0), what="upgrade_points")),
            growth_since_weekly=_num(
                _pick(data, "growth_since_weekly", "growthSinceWeekly", default=0.0), what="weekly growth"
            ),
            is_rookie=bool(_pick(data, "is_rookie", "isRookie", default=False)),
            is_retired=bool(_pick(data, "is_retired", "isRetired", default=False)),
            injury_risk=str(_pick(data, "injury_risk", "injuryRisk", default="M")).strip().upper()[:1] or "M",
            team_id=str(_pick(data, "team_id", "teamId", default="")),
        )
        if player.injury is not None and player.injury.games_remaining <= 0:
            player.injury = None
        player.clamp_state()
        return player


def _parse_attributes(raw: Any, *, player_id: str) -> Dict[str, Dict[str, float]]:
    """Accept grouped ({group: {attr: v}}) or flat ({attr: v}) attributes.

    Every known attribute ends up present; missing ones default to 50.
    """
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"player {player_id}: attributes must be an object")

    flat: Dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, Mapping):
            for k, v in value.items():
                flat[_snake(k)] = v
        else:
            flat[_snake(key)] = value

    out: Dict[str, Dict[str, float]] = {}
    for group, names in ATTRIBUTE_GROUPS.items():
        g: Dict[str, float] = {}
        for name in names:
            if name in flat:
                g[name] = _clamp_attr(_num(flat[name], what=f"player {player_id}: attribute {name}"))
            else:
                g[name] = DEFAULT_ATTRIBUTE
        out[group] = g
    return out


# ---------------------------------------------------------------------------
# Team
# ---------------------------------------------------------------------------


@dataclass
class Team:
    team_id: str
    name: str
    roster: List[Player]
    scheme: str = "balanced"
    defensive_style: str = "man"

    def copy(self) -> "Team":
        return copy.deepcopy(self)

    def find_player(self, player_id: str) -> Optional[Player]:
        for p in self.roster:
            if p.player_id == player_id:
                return p
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_id": self.team_id,
            "name": self.name,
            "scheme": self.scheme,
            "defensive_style": self.defensive_style,
            "roster": [p.to_dict() for p in self.roster],
        }

    @classmethod
    def from_dict(cls, data: Any, players: Optional[List[Any]] = None) -> "Team":
        """Build a team; ``players`` overrides any roster embedded in ``data``."""
        if isinstance(data, Team):
            team = data.copy()
            if players is not None:
                team.roster = [Player.from_dict(p) for p in players]
            return team
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"team record must be an object, got {type(data).__name__}")
        team_id = str(_pick(data, "team_id", "id", "teamId", default="")).strip()
        if not team_id:
            raise ConfigurationError("team record is missing an id")
        roster_raw = players if players is not None else (data.get("roster") or data.get("players") or [])
        roster = [Player.from_dict(p) for p in roster_raw]
        seen = set()
        for p in roster:
            if p.player_id in seen:
                raise ConfigurationError(f"duplicate player_id within team {team_id}: {p.player_id}")
            seen.add(p.player_id)
        return cls(
            team_id=team_id,
            name=str(_pick(data, "name", default=team_id)),
            roster=roster,
            scheme=str(_pick(data, "scheme", "coaching_scheme", "offensive_scheme", default="balanced")),
            defensive_style=str(_pick(data, "defensive_style", "defensiveStyle", default="man")),
        )


__all__ = [
    "POSITIONS",
    "Injury",
    "Streak",
    "GamePerformance",
    "Player",
    "Team",
]
