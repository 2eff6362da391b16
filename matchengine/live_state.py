from __future__ import annotations

"""Serializable state of a game in progress.

A live game is fully described by ``LiveGameState``: resuming from
``LiveGameState.from_dict(state.to_dict())`` continues exactly where the
snapshot left off, including the random stream (derived from ``seed`` and
``possession_count`` at the start of every period).
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from errors import ConfigurationError, GameStateError
from player_model import Player

from . import config as me_cfg
from .box_score import StatLine

STATE_VERSION = 1

NOT_STARTED = "not_started"
IN_PROGRESS = "in_progress"
COMPLETE = "complete"
STATUSES = (NOT_STARTED, IN_PROGRESS, COMPLETE)

HOME = "home"
AWAY = "away"


def period_label(period: int, regulation_periods: int = me_cfg.REGULATION_PERIODS) -> str:
    """1-based period number -> Q1..Q4, OT1..."""
    if period <= regulation_periods:
        return f"Q{period}"
    return f"OT{period - regulation_periods}"


@dataclass
class SideState:
    team_id: str
    name: str
    scheme: str
    defense: str
    players: Dict[str, Player]
    lineup: List[str]
    starter_ids: List[str]
    target_seconds: Dict[str, float]
    box: Dict[str, StatLine]
    game_fatigue: Dict[str, float]
    score: int = 0
    team_fouls: int = 0
    synergies_activated: int = 0

    def on_court(self) -> List[Player]:
        return [self.players[pid] for pid in self.lineup]

    def bench(self) -> List[Player]:
        on = set(self.lineup)
        return [p for pid, p in self.players.items() if pid not in on]

    def can_play(self, player_id: str) -> bool:
        line = self.box.get(player_id)
        return line is not None and line.fouls < me_cfg.FOUL_OUT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "team_id": self.team_id,
            "name": self.name,
            "scheme": self.scheme,
            "defense": self.defense,
            "players": [p.to_dict() for p in self.players.values()],
            "lineup": list(self.lineup),
            "starter_ids": list(self.starter_ids),
            "target_seconds": dict(self.target_seconds),
            "box": [line.to_state() for line in self.box.values()],
            "game_fatigue": dict(self.game_fatigue),
            "score": self.score,
            "team_fouls": self.team_fouls,
            "synergies_activated": self.synergies_activated,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SideState":
        players = [Player.from_dict(p) for p in data["players"]]
        by_id = {p.player_id: p for p in players}
        lineup = [str(pid) for pid in data["lineup"]]
        for pid in lineup:
            if pid not in by_id:
                raise GameStateError(f"lineup player {pid} is not on the roster")
        box = {}
        for raw in data["box"]:
            line = StatLine.from_state(raw)
            box[line.player_id] = line
        for pid in by_id:
            if pid not in box:
                raise GameStateError(f"missing box score line for {pid}")
        return cls(
            team_id=str(data["team_id"]),
            name=str(data["name"]),
            scheme=str(data["scheme"]),
            defense=str(data["defense"]),
            players=by_id,
            lineup=lineup,
            starter_ids=[str(pid) for pid in data.get("starter_ids", [])],
            target_seconds={str(k): float(v) for k, v in data["target_seconds"].items()},
            box=box,
            game_fatigue={str(k): float(v) for k, v in data["game_fatigue"].items()},
            score=int(data["score"]),
            team_fouls=int(data.get("team_fouls", 0)),
            synergies_activated=int(data.get("synergies_activated", 0)),
        )


@dataclass
class LiveGameState:
    home: SideState
    away: SideState
    seed: int
    status: str = NOT_STARTED
    # number of periods already played; the next one is periods_completed + 1
    periods_completed: int = 0
    regulation_periods: int = me_cfg.REGULATION_PERIODS
    quarter_minutes: float = me_cfg.QUARTER_MINUTES
    overtime_minutes: float = me_cfg.OVERTIME_MINUTES
    is_playoff: bool = False
    record_play_by_play: bool = True
    quarter_scores: List[Dict[str, int]] = field(default_factory=list)
    possession_count: int = 0
    possession: str = HOME
    # how the last possession ended; live-ball ends open up transition plays
    last_end: str = "period_start"
    play_by_play: List[Dict[str, Any]] = field(default_factory=list)
    clutch_plays: List[Dict[str, Any]] = field(default_factory=list)
    version: int = STATE_VERSION

    def side(self, key: str) -> SideState:
        return self.home if key == HOME else self.away

    @property
    def current_period(self) -> int:
        return self.periods_completed + 1

    @property
    def is_complete(self) -> bool:
        return self.status == COMPLETE

    @property
    def overtime_periods(self) -> int:
        return max(0, self.periods_completed - self.regulation_periods)

    def period_seconds(self, period: int) -> float:
        minutes = self.quarter_minutes if period <= self.regulation_periods else self.overtime_minutes
        return minutes * 60.0

    def regulation_seconds(self) -> float:
        return self.quarter_minutes * 60.0 * self.regulation_periods

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "status": self.status,
            "seed": self.seed,
            "current_period": self.current_period,
            "periods_completed": self.periods_completed,
            "regulation_periods": self.regulation_periods,
            "quarter_minutes": self.quarter_minutes,
            "overtime_minutes": self.overtime_minutes,
            "is_playoff": self.is_playoff,
            "record_play_by_play": self.record_play_by_play,
            "scores": {HOME: self.home.score, AWAY: self.away.score},
            "quarter_scores": [dict(q) for q in self.quarter_scores],
            "possession_count": self.possession_count,
            "possession": self.possession,
            "last_end": self.last_end,
            "play_by_play": [dict(e) for e in self.play_by_play],
            "clutch_plays": [dict(c) for c in self.clutch_plays],
            HOME: self.home.to_dict(),
            AWAY: self.away.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "LiveGameState":
        if isinstance(data, LiveGameState):
            return cls.from_dict(data.to_dict())
        if not isinstance(data, Mapping):
            raise GameStateError("game state must be an object")
        version = data.get("version")
        if version != STATE_VERSION:
            raise GameStateError(f"unsupported game state version: {version!r}")
        status = data.get("status")
        if status not in STATUSES:
            raise GameStateError(f"unknown game status: {status!r}")
        try:
            state = cls(
                home=SideState.from_dict(data[HOME]),
                away=SideState.from_dict(data[AWAY]),
                seed=int(data["seed"]),
                status=str(status),
                periods_completed=int(data["periods_completed"]),
                regulation_periods=int(data.get("regulation_periods", me_cfg.REGULATION_PERIODS)),
                quarter_minutes=float(data.get("quarter_minutes", me_cfg.QUARTER_MINUTES)),
                overtime_minutes=float(data.get("overtime_minutes", me_cfg.OVERTIME_MINUTES)),
                is_playoff=bool(data.get("is_playoff", False)),
                record_play_by_play=bool(data.get("record_play_by_play", True)),
                quarter_scores=[{HOME: int(q[HOME]), AWAY: int(q[AWAY])} for q in data.get("quarter_scores", [])],
                possession_count=int(data["possession_count"]),
                possession=str(data.get("possession", HOME)),
                last_end=str(data.get("last_end", "period_start")),
                play_by_play=[dict(e) for e in data.get("play_by_play", [])],
                clutch_plays=[dict(c) for c in data.get("clutch_plays", [])],
            )
        except GameStateError:
            raise
        except (KeyError, TypeError, ValueError, ConfigurationError) as exc:
            raise GameStateError(f"malformed game state: {exc!r}") from exc
        if state.possession not in (HOME, AWAY):
            raise GameStateError(f"unknown possession owner: {state.possession!r}")
        if state.periods_completed < 0 or len(state.quarter_scores) != state.periods_completed:
            raise GameStateError("quarter scores do not match periods completed")
        return state


__all__ = [
    "STATE_VERSION",
    "NOT_STARTED",
    "IN_PROGRESS",
    "COMPLETE",
    "HOME",
    "AWAY",
    "period_label",
    "SideState",
    "LiveGameState",
]
