from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class SimGameRequest(CamelModel):
    home_team: Dict[str, Any] = Field(..., alias="homeTeam")
    away_team: Dict[str, Any] = Field(..., alias="awayTeam")
    home_players: Optional[List[Dict[str, Any]]] = Field(None, alias="homePlayers")
    away_players: Optional[List[Dict[str, Any]]] = Field(None, alias="awayPlayers")
    options: Optional[Dict[str, Any]] = None


class LiveGameStartRequest(SimGameRequest):
    pass


class LiveGameStepRequest(CamelModel):
    adjustments: Optional[Dict[str, Any]] = None
    resume_state: Optional[Dict[str, Any]] = Field(None, alias="resumeState")


class BulkGame(CamelModel):
    game_id: Optional[str] = Field(None, alias="gameId")
    home_team: Dict[str, Any] = Field(..., alias="homeTeam")
    away_team: Dict[str, Any] = Field(..., alias="awayTeam")
    home_players: Optional[List[Dict[str, Any]]] = Field(None, alias="homePlayers")
    away_players: Optional[List[Dict[str, Any]]] = Field(None, alias="awayPlayers")
    options: Optional[Dict[str, Any]] = None
    date: Optional[str] = Field(None, alias="gameDate")


class SimBulkRequest(CamelModel):
    games: List[BulkGame] = Field(default_factory=list)
    process_evolution: bool = Field(False, alias="processEvolution")
    difficulty: str = "pro"
    seed: Optional[int] = None


class BadgeConfigRequest(CamelModel):
    badge_definitions: Optional[List[Dict[str, Any]]] = Field(None, alias="badgeDefinitions")
    badge_synergies: Optional[List[Dict[str, Any]]] = Field(None, alias="badgeSynergies")
