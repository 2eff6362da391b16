"""Player development subsystem.

This package implements:
  - Per-game performance rating and micro-development
  - Hot / cold streak tracking on the rolling game log
  - Monthly development and age regression (season-capped)
  - Seasonal aging by attribute category
  - Upgrade points earned from weekly growth and spent automatically

Everything operates on ``player_model.Player`` in place; pipeline stages pass
copies.
"""

from .growth_engine import (
    MonthlyOutcome,
    apply_monthly_development,
    apply_seasonal_aging,
    development_points,
    group_by_team,
    regression_points,
)
from .micro import apply_micro_development, performance_from_line, performance_rating
from .streaks import clear_streak, record_performance, refresh_streak
from .types import AttributeChange, NewsEvent, StreakEvent, UpgradeAward
from .upgrades import award_upgrade_points, note_growth, spend_upgrade_points, upgrade_points_from_growth

__all__ = [
    "AttributeChange",
    "MonthlyOutcome",
    "NewsEvent",
    "StreakEvent",
    "UpgradeAward",
    "apply_micro_development",
    "apply_monthly_development",
    "apply_seasonal_aging",
    "award_upgrade_points",
    "clear_streak",
    "development_points",
    "group_by_team",
    "note_growth",
    "performance_from_line",
    "performance_rating",
    "record_performance",
    "refresh_streak",
    "regression_points",
    "spend_upgrade_points",
    "upgrade_points_from_growth",
]
