from __future__ import annotations

"""Tuning parameters for player morale and team chemistry.

Post-game morale update
-----------------------
    delta = result + streak + playing_time + contract_year + extension
    delta *= (1 - stability) * volatility
    morale = clamp(morale + delta, 0, 100)

``stability`` comes from the steadiest trait (leader/team_player/quiet),
``volatility`` from hot_head (2x).
"""

# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------

MORALE_START: float = 80.0
MORALE_MIN: float = 0.0
MORALE_MAX: float = 100.0

TRADE_REQUEST_THRESHOLD: float = 25.0

# Changes smaller than this are not reported.
REPORT_THRESHOLD: float = 3.0

# ---------------------------------------------------------------------------
# Post-game factors
# ---------------------------------------------------------------------------

WIN: float = 1.0
LOSS: float = -1.0

STREAK_GAMES: int = 3
WINNING_STREAK_BONUS: float = 2.0
LOSING_STREAK_PENALTY: float = -2.0

PLAYING_TIME_EXCEEDED: float = 2.0
PLAYING_TIME_MET: float = 1.0
PLAYING_TIME_UNMET: float = -3.0

# minutes >= expected * EXCEEDED_RATIO -> exceeded; >= expected * MET_RATIO -> met
EXCEEDED_RATIO: float = 1.2
MET_RATIO: float = 0.8

FINAL_CONTRACT_YEAR: float = -5.0
EXTENSION_OFFERED: float = 10.0
UNDERPAID: float = -3.0
STAR_TREATMENT: float = 2.0

# ---------------------------------------------------------------------------
# Weekly factors
# ---------------------------------------------------------------------------

WEEKLY_WINNING_PCT: float = 0.6
WEEKLY_LOSING_PCT: float = 0.3
WEEKLY_WINNING_BONUS: float = 1.0
WEEKLY_LOSING_PENALTY: float = -1.0

# team_player / quiet drift this fraction of the way back to MORALE_START each week.
WEEKLY_DRIFT: float = 0.1

# ---------------------------------------------------------------------------
# Morale tiers: (threshold, development modifier, performance modifier)
# ---------------------------------------------------------------------------

MORALE_TIERS = (
    ("high", 80.0, 0.05, 0.02),
    ("normal", 50.0, 0.0, 0.0),
    ("low", 25.0, -0.05, -0.02),
    ("critical", 0.0, -0.10, -0.05),
)

# ---------------------------------------------------------------------------
# Team chemistry
# ---------------------------------------------------------------------------

CHEMISTRY_BASE: float = 70.0
CHEMISTRY_GOOD_LEADERSHIP: float = 5.0  # 1-2 leaders
CHEMISTRY_TOO_MANY_LEADERS: float = -5.0  # more than 3
CHEMISTRY_BALL_HOG_CLASH: float = -10.0  # 3+ ball hogs
CHEMISTRY_TEAM_FIRST: float = 5.0  # 5+ team players
