from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Tuple

from player_model import Player

REPORT_CATEGORIES: Tuple[str, ...] = (
    "injuries",
    "development",
    "regression",
    "fatigue_warnings",
    "morale_changes",
    "hot_streaks",
    "cold_streaks",
    "recoveries",
    "news",
    "retirements",
    "trade_requests",
    "upgrade_points",
)


@dataclass
class EvolutionReport:
    """Change records keyed by player id, then by category.

    Categories only exist once something was recorded in them, so the
    serialized forms never carry empty placeholders.
    """

    entries: Dict[str, Dict[str, List[Dict[str, Any]]]] = field(default_factory=dict)

    def add(self, category: str, player_id: str, row: Mapping[str, Any]) -> None:
        if category not in REPORT_CATEGORIES:
            raise KeyError(category)
        self.entries.setdefault(str(player_id), {}).setdefault(category, []).append(dict(row))

    def merge(self, other: "EvolutionReport") -> "EvolutionReport":
        for pid, cats in other.entries.items():
            for cat, rows in cats.items():
                for row in rows:
                    self.add(cat, pid, row)
        return self

    def is_empty(self) -> bool:
        return not self.entries

    def player_ids(self) -> List[str]:
        return list(self.entries)

    def for_player(self, player_id: str) -> Dict[str, List[Dict[str, Any]]]:
        return {k: list(v) for k, v in self.entries.get(str(player_id), {}).items()}

    def to_dict(self) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
        return {
            pid: {cat: list(rows) for cat, rows in cats.items() if rows}
            for pid, cats in self.entries.items()
            if any(cats.values())
        }

    def by_category(self) -> Dict[str, List[Dict[str, Any]]]:
        out: Dict[str, List[Dict[str, Any]]] = {}
        for cat in REPORT_CATEGORIES:
            rows = [row for cats in self.entries.values() for row in cats.get(cat, ())]
            if rows:
                out[cat] = rows
        return out

    def count(self, category: str) -> int:
        return sum(len(cats.get(category, ())) for cats in self.entries.values())


class StageResult(NamedTuple):
    players: List[Player]
    report: EvolutionReport

    def to_dict(self) -> Dict[str, Any]:
        return {"players": [p.to_dict() for p in self.players], "report": self.report.by_category()}


class PostGameResult(NamedTuple):
    home_players: List[Player]
    away_players: List[Player]
    home: EvolutionReport
    away: EvolutionReport

    def evolution(self) -> Dict[str, Dict[str, List[Dict[str, Any]]]]:
        return {"home": self.home.by_category(), "away": self.away.by_category()}

    def all_players(self) -> Iterable[Player]:
        yield from self.home_players
        yield from self.away_players

    def to_dict(self) -> Dict[str, Any]:
        return {
            "home_players": [p.to_dict() for p in self.home_players],
            "away_players": [p.to_dict() for p in self.away_players],
            "evolution": self.evolution(),
        }
