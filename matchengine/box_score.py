from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Iterable, Mapping

from errors import GameStateError
from player_model import Player


@dataclass(slots=True)
class StatLine:
    """Per-player box score line. Time is kept in seconds, reported in minutes."""

    player_id: str
    name: str
    position: str
    is_starter: bool = False
    seconds: float = 0.0
    points: int = 0
    offensive_rebounds: int = 0
    defensive_rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    turnovers: int = 0
    fouls: int = 0
    fgm: int = 0
    fga: int = 0
    fg3m: int = 0
    fg3a: int = 0
    ftm: int = 0
    fta: int = 0
    plus_minus: int = 0

    @classmethod
    def for_player(cls, player: Player, *, is_starter: bool = False) -> "StatLine":
        return cls(player.player_id, player.name, player.position, is_starter=is_starter)

    @property
    def minutes(self) -> float:
        return self.seconds / 60.0

    @property
    def rebounds(self) -> int:
        return self.offensive_rebounds + self.defensive_rebounds

    def record_shot(self, shot_type: str, made: bool) -> int:
        """Count a field goal attempt; returns points scored."""
        self.fga += 1
        is_three = shot_type == "three"
        if is_three:
            self.fg3a += 1
        if not made:
            return 0
        pts = 3 if is_three else 2
        self.fgm += 1
        if is_three:
            self.fg3m += 1
        self.points += pts
        return pts

    def record_free_throw(self, made: bool) -> int:
        self.fta += 1
        if made:
            self.ftm += 1
            self.points += 1
            return 1
        return 0

    def to_dict(self) -> Dict[str, Any]:
        """Wire form; ``minutes`` and ``rebounds`` are derived."""
        return {
            "player_id": self.player_id,
            "name": self.name,
            "position": self.position,
            "is_starter": self.is_starter,
            "minutes": round(self.minutes, 1),
            "points": self.points,
            "rebounds": self.rebounds,
            "offensive_rebounds": self.offensive_rebounds,
            "defensive_rebounds": self.defensive_rebounds,
            "assists": self.assists,
            "steals": self.steals,
            "blocks": self.blocks,
            "turnovers": self.turnovers,
            "fouls": self.fouls,
            "fgm": self.fgm,
            "fga": self.fga,
            "fg3m": self.fg3m,
            "fg3a": self.fg3a,
            "ftm": self.ftm,
            "fta": self.fta,
            "plus_minus": self.plus_minus,
        }

    def to_state(self) -> Dict[str, Any]:
        """Exact form for live-game snapshots (keeps seconds unrounded)."""
        return asdict(self)

    @classmethod
    def from_state(cls, data: Mapping[str, Any]) -> "StatLine":
        if not isinstance(data, Mapping):
            raise GameStateError("box score line must be an object")
        known = {f.name for f in fields(cls)}
        try:
            return cls(**{k: v for k, v in data.items() if k in known})
        except TypeError as exc:
            raise GameStateError(f"malformed box score line: {exc}") from exc


def build_side_box(lines: Iterable[StatLine]) -> Dict[str, Dict[str, Any]]:
    """Box score side keyed by player id."""
    return {line.player_id: line.to_dict() for line in lines}


def team_totals(lines: Iterable[StatLine]) -> Dict[str, Any]:
    lines = list(lines)
    keys = (
        "points", "offensive_rebounds", "defensive_rebounds", "assists", "steals", "blocks",
        "turnovers", "fouls", "fgm", "fga", "fg3m", "fg3a", "ftm", "fta",
    )
    out: Dict[str, Any] = {k: sum(getattr(line, k) for line in lines) for k in keys}
    out["rebounds"] = out["offensive_rebounds"] + out["defensive_rebounds"]
    out["fg_pct"] = _safe_pct(out["fgm"], out["fga"])
    out["fg3_pct"] = _safe_pct(out["fg3m"], out["fg3a"])
    out["ft_pct"] = _safe_pct(out["ftm"], out["fta"])
    return out


def _safe_pct(made: int, att: int) -> float:
    return round((float(made) / float(att)) * 100.0, 2) if att else 0.0


__all__ = ["StatLine", "build_side_box", "team_totals"]
