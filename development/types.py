from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Mapping

StreakEventKind = Literal["started", "ended"]
NewsKind = Literal["breakout", "decline"]


@dataclass(frozen=True, slots=True)
class AttributeChange:
    """Attribute deltas applied to one player by one development step."""

    player_id: str
    name: str
    reason: str
    changes: Mapping[str, float] = field(default_factory=dict)
    old_overall: int = 0
    new_overall: int = 0
    rating: float = 0.0

    @property
    def total(self) -> float:
        return sum(self.changes.values())

    def to_row(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "player_id": self.player_id,
            "name": self.name,
            "reason": self.reason,
            "changes": {k: round(v, 2) for k, v in self.changes.items()},
        }
        if self.old_overall or self.new_overall:
            row["old_overall"] = int(self.old_overall)
            row["new_overall"] = int(self.new_overall)
        if self.rating:
            row["rating"] = round(self.rating, 2)
        return row


@dataclass(frozen=True, slots=True)
class StreakEvent:
    player_id: str
    name: str
    kind: str  # hot | cold
    event: StreakEventKind
    games: int
    bonus: float

    def to_row(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "type": self.kind,
            "event": self.event,
            "games": int(self.games),
            "bonus": round(self.bonus, 2),
        }


@dataclass(frozen=True, slots=True)
class NewsEvent:
    player_id: str
    name: str
    kind: NewsKind
    overall_change: int
    new_overall: int

    def to_row(self) -> Dict[str, Any]:
        verb = "breaks out" if self.kind == "breakout" else "is slipping"
        return {
            "player_id": self.player_id,
            "name": self.name,
            "type": self.kind,
            "change": int(self.overall_change),
            "new_overall": int(self.new_overall),
            "headline": f"{self.name} {verb} ({self.overall_change:+d} OVR this month)",
        }


@dataclass(frozen=True, slots=True)
class UpgradeAward:
    player_id: str
    name: str
    points_earned: int
    total_points: int
    growth: float

    def to_row(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "points_earned": int(self.points_earned),
            "total_points": int(self.total_points),
            "growth": round(self.growth, 2),
        }
