from __future__ import annotations

"""Tuning parameters for the between-game fatigue subsystem.

Model summary
-------------
Persisted state per player is a single ``fatigue`` value in [0, 100].

After a game:
    fatigue += GAIN_PER_MINUTE * minutes * (ROOKIE_WALL_MULT if in rookie wall)

Between games (weekly tick / rest day):
    fatigue -= base * (ATHLETIC_BASE + athletic_avg/100 * ATHLETIC_SCALE) * U(VAR_MIN, VAR_MAX)

In game, fatigue above PENALTY_START lowers performance linearly up to
MAX_PENALTY at fatigue 100.
"""

# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------

FATIGUE_MIN: float = 0.0
FATIGUE_MAX: float = 100.0

# ---------------------------------------------------------------------------
# Gain
# ---------------------------------------------------------------------------

GAIN_PER_MINUTE: float = 0.5

# Crossing this level after a game emits a fatigue warning.
WARNING_THRESHOLD: float = 70.0

# ---------------------------------------------------------------------------
# Rookie wall
# ---------------------------------------------------------------------------

# First-season players hit the wall after this many games...
ROOKIE_WALL_GAMES: int = 50
# ...and gain fatigue faster for the next ROOKIE_WALL_DURATION games.
ROOKIE_WALL_DURATION: int = 20
ROOKIE_WALL_MULT: float = 1.5

# ---------------------------------------------------------------------------
# Recovery
# ---------------------------------------------------------------------------

WEEKLY_RECOVERY: float = 15.0
REST_DAY_RECOVERY: float = 25.0

# Attribute weighting: 100-rated athletes recover ~20% more, 50-rated ~equal.
ATHLETIC_BASE: float = 0.8
ATHLETIC_SCALE: float = 0.4
ATHLETIC_DEFAULT: float = 70.0

RECOVERY_VARIANCE_MIN: float = 0.85
RECOVERY_VARIANCE_MAX: float = 1.15

# ---------------------------------------------------------------------------
# Performance penalty
# ---------------------------------------------------------------------------

PENALTY_START: float = 50.0
MAX_PENALTY: float = 0.15
