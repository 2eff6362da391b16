from __future__ import annotations

"""Tuning parameters for the development subsystem.

Performance rating
------------------
    rating = (pts + reb + 1.5*ast + 2*stl + 2*blk - tov) / minutes * 10

Monthly development (per attribute)
-----------------------------------
    base = (potential - overall) * BASE_RATE * age_dev_mult * difficulty_dev / 12
    dev  = (base + work_ethic + playing_time + mentor + synergy) * (1 + morale_mod)
    dev *= 1 + personality_mod

    regression = age_reg_mult * difficulty_reg * REGRESSION_RATE / 12   (age >= 32)

Season-cumulative monthly overall change stays in [SEASON_CAP_MIN, SEASON_CAP_MAX].
"""

from typing import Tuple

# ---------------------------------------------------------------------------
# Performance rating / micro-development
# ---------------------------------------------------------------------------

RATING_ASSIST_WEIGHT: float = 1.5
RATING_STEAL_WEIGHT: float = 2.0
RATING_BLOCK_WEIGHT: float = 2.0

HIGH_PERFORMANCE_RATING: float = 20.0
LOW_PERFORMANCE_RATING: float = 8.0
LOW_PERFORMANCE_MIN_MINUTES: float = 15.0

MICRO_GAIN_MIN: float = 0.1
MICRO_GAIN_MAX: float = 0.3
MICRO_PENALTY_MIN: float = 0.1
MICRO_PENALTY_MAX: float = 0.2

# Stat bars below this fraction of the minutes-scaled threshold count as poor.
POOR_STAT_FRACTION: float = 0.4
MAX_PENALIZED_AREAS: int = 2

# Secondary attributes move by a fraction of the primary gain.
PASS_VISION_SHARE: float = 0.5
DEFENSIVE_REBOUND_SHARE: float = 0.7
OFFENSIVE_REBOUND_SHARE: float = 0.3
SECONDARY_DEFENSE_SHARE: float = 0.3

# ---------------------------------------------------------------------------
# Streaks
# ---------------------------------------------------------------------------

HOT_STREAK_RATING: float = 25.0
COLD_STREAK_RATING: float = 10.0
STREAK_MIN_GAMES: int = 3
STREAK_MAX_GAMES: int = 10
STREAK_BONUS: float = 2.0

STREAK_ATTRIBUTES: Tuple[str, ...] = ("three_point", "mid_range", "close_shot", "layup", "free_throw")

# ---------------------------------------------------------------------------
# Monthly development
# ---------------------------------------------------------------------------

BASE_RATE: float = 0.10
MONTHS_PER_SEASON: float = 12.0

WORK_ETHIC_SHARE: float = 0.5
PLAYING_TIME_SHARE: float = 0.3
FULL_GAME_MINUTES: float = 36.0

WORK_ETHIC_HIGH: float = 85.0
WORK_ETHIC_HIGH_BONUS: float = 0.15
WORK_ETHIC_LOW: float = 50.0
WORK_ETHIC_LOW_PENALTY: float = -0.10

# Plateau (peak..decline start) and post-decline shares of dev for improvable categories.
PLATEAU_SHARE: float = 0.5
DECLINE_SHARE: float = 0.3

# ---------------------------------------------------------------------------
# Regression
# ---------------------------------------------------------------------------

REGRESSION_RATE: float = 0.5
REGRESSION_START_AGE: int = 32
# Category decline rates are scaled relative to this one.
REFERENCE_DECLINE_RATE: float = 0.4

# ---------------------------------------------------------------------------
# Season cap / news
# ---------------------------------------------------------------------------

SEASON_CAP_MIN: int = -4
SEASON_CAP_MAX: int = 5
CAP_SEARCH_STEPS: int = 16

BREAKOUT_CHANGE: int = 3
DECLINE_CHANGE: int = -2

# ---------------------------------------------------------------------------
# Upgrade points
# ---------------------------------------------------------------------------
#     points = floor(growth * POINTS_PER_GROWTH * potential / BASELINE_POTENTIAL)
# capped per week (one extra for elite potential) and in storage.

UPGRADE_POINTS_ENABLED: bool = True
UPGRADE_POINTS_PER_GROWTH: float = 1.5
UPGRADE_MIN_GROWTH: float = 0.3
UPGRADE_BASELINE_POTENTIAL: float = 75.0
UPGRADE_MAX_WEEKLY: int = 3
UPGRADE_ELITE_POTENTIAL: float = 90.0
UPGRADE_ELITE_WEEKLY_BONUS: int = 1
UPGRADE_MAX_STORED: int = 99

# Automatic spending (computer-controlled teams). Mental attributes cannot be bought.
UPGRADE_GROUPS: Tuple[str, ...] = ("offense", "defense", "physical")
UPGRADE_STEP: float = 1.0
UPGRADE_GAP_BAND: float = 3.0
UPGRADE_WEAKNESS_FIRST_CHANCE: float = 0.60
UPGRADE_WEAKNESS_BASE_BONUS: float = 0.3
UPGRADE_WEAKNESS_GAP_SCALE: float = 30.0
UPGRADE_STRENGTH_BONUS: float = 0.25
UPGRADE_OFF_FOCUS_WEAKNESS_BONUS: float = 0.1
UPGRADE_JITTER_MAX: float = 0.20
