"""Player evolution pipeline.

Public API
----------
- process_post_game(home_players, away_players, game_result, options)
- process_weekly_evolution(players, game_results, difficulty, week, options)
- process_monthly_development(players, difficulty, options)
- process_rest_day(players, teams_with_games)
- process_season_end(players, season_stats, difficulty) / process_offseason
- recalculate_overall(player)

Stages never mutate their inputs; they return copies plus an EvolutionReport.
"""

from .pipeline import (
    process_monthly_development,
    process_offseason,
    process_post_game,
    process_rest_day,
    process_season_end,
    process_weekly_evolution,
    recalculate_overall,
    team_records,
)
from .types import REPORT_CATEGORIES, EvolutionReport, PostGameResult, StageResult

__all__ = [
    "REPORT_CATEGORIES",
    "EvolutionReport",
    "PostGameResult",
    "StageResult",
    "process_monthly_development",
    "process_offseason",
    "process_post_game",
    "process_rest_day",
    "process_season_end",
    "process_weekly_evolution",
    "recalculate_overall",
    "team_records",
]
