from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True, slots=True)
class RetirementInputs:
    player_id: str
    age: int
    ovr: int
    major_injury_count: int
    career_seasons: int = 0


@dataclass(frozen=True, slots=True)
class RetirementDecision:
    player_id: str
    name: str
    decision: str  # RETIRED | STAY
    retirement_prob: float
    random_roll: float
    age: int
    ovr: int
    career_seasons: int
    explanation: Dict[str, Any]

    @property
    def retired(self) -> bool:
        return self.decision == "RETIRED"

    def to_row(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "age": int(self.age),
            "overall": int(self.ovr),
            "career_seasons": int(self.career_seasons),
            "probability": round(self.retirement_prob, 4),
        }
