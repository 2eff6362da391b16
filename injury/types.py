from __future__ import annotations

"""Public data types for the injury subsystem."""

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True, slots=True)
class InjuryEvent:
    """A single injury occurrence from a game."""

    player_id: str
    name: str
    tier: str
    injury_name: str
    games_out: int
    recovery_estimate: str
    chance: float
    is_playoff: bool = False
    perm_drop: Dict[str, float] = field(default_factory=dict)

    def to_row(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "tier": self.tier,
            "injury": self.injury_name,
            "games_out": int(self.games_out),
            "recovery_estimate": self.recovery_estimate,
            "chance": round(float(self.chance), 5),
            "is_playoff": bool(self.is_playoff),
            "perm_drop": {k: round(float(v), 2) for k, v in (self.perm_drop or {}).items()},
        }


@dataclass(frozen=True, slots=True)
class InjuryRecovery:
    """A player returning from injury during the weekly countdown."""

    player_id: str
    name: str
    injury_name: str

    def to_row(self) -> Dict[str, Any]:
        return {"player_id": self.player_id, "name": self.name, "injury": self.injury_name}
