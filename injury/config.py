from __future__ import annotations

"""Tuning parameters for the injury subsystem.

Per-game injury chance
----------------------
    p = (BASE_CHANCE
         + (100 - durability)/100 * DURABILITY_WEIGHT
         + max(0, age - AGE_PIVOT) * AGE_WEIGHT
         + fatigue/100 * FATIGUE_WEIGHT
         + minutes/36 * MINUTES_WEIGHT) * risk_mult

then multiplied by PLAYOFF_MULT in the playoffs and capped at MAX_CHANCE.
"""

from typing import Dict

# ---------------------------------------------------------------------------
# Chance model
# ---------------------------------------------------------------------------

BASE_CHANCE: float = 0.001

DURABILITY_WEIGHT: float = 0.005
DEFAULT_DURABILITY: float = 75.0

AGE_PIVOT: int = 30
AGE_WEIGHT: float = 0.0005

FATIGUE_WEIGHT: float = 0.002
MINUTES_WEIGHT: float = 0.001

PLAYOFF_MULT: float = 1.2
MAX_CHANCE: float = 0.05

# Scouting risk grade (L/M/H) -> multiplier.
RISK_MULTIPLIER: Dict[str, float] = {
    "L": 0.5,
    "M": 1.0,
    "H": 2.0,
}

# ---------------------------------------------------------------------------
# Permanent damage
# ---------------------------------------------------------------------------

# Each sensitive attribute loses impact * U(PERM_VARIANCE_MIN, PERM_VARIANCE_MAX).
PERM_VARIANCE_MIN: float = 0.8
PERM_VARIANCE_MAX: float = 1.2
PERM_FLOOR: float = 25.0

# ---------------------------------------------------------------------------
# Recovery estimate buckets: (max games remaining, label)
# ---------------------------------------------------------------------------

RECOVERY_ESTIMATES = (
    (5, "day-to-day"),
    (14, "1-2 weeks"),
    (28, "2-4 weeks"),
    (42, "4-6 weeks"),
    (60, "6-8 weeks"),
)
RECOVERY_ESTIMATE_LONG: str = "out for season"
