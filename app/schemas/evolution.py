from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from app.schemas.common import CamelModel


class PostGameRequest(CamelModel):
    home_players: List[Dict[str, Any]] = Field(default_factory=list, alias="homePlayers")
    away_players: List[Dict[str, Any]] = Field(default_factory=list, alias="awayPlayers")
    game_result: Dict[str, Any] = Field(..., alias="gameResult")
    options: Dict[str, Any] = Field(default_factory=dict)


class WeeklyRequest(CamelModel):
    players: List[Dict[str, Any]]
    game_results: List[Dict[str, Any]] = Field(default_factory=list, alias="gameResults")
    difficulty: str = "pro"
    week: int = 0
    options: Dict[str, Any] = Field(default_factory=dict)


class MonthlyRequest(CamelModel):
    players: List[Dict[str, Any]]
    difficulty: str = "pro"
    options: Dict[str, Any] = Field(default_factory=dict)


class RestDayRequest(CamelModel):
    players: List[Dict[str, Any]]
    teams_with_games: List[str] = Field(default_factory=list, alias="teamsWithGames")
    # several days at once: the teams that played on each day
    teams_per_day: Optional[List[List[str]]] = Field(None, alias="teamsPerDay")


class SeasonEndRequest(CamelModel):
    players: List[Dict[str, Any]]
    season_stats: Optional[Dict[str, Any]] = Field(None, alias="seasonStats")
    difficulty: str = "pro"
    options: Dict[str, Any] = Field(default_factory=dict)


class RecalculateOverallRequest(CamelModel):
    player: Dict[str, Any]
