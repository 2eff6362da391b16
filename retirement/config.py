from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RetirementConfig:
    """p = base + per_year*(age - min_age) + low_overall_bonus*[ovr < threshold] + per_major_injury*majors"""

    min_age: int = 35
    base_prob: float = 0.10
    per_year: float = 0.10

    # Rating deficit
    low_overall_threshold: int = 65
    low_overall_bonus: float = 0.15

    # Injury history
    per_major_injury: float = 0.05

    # Guards / clipping
    floor_prob: float = 0.0
    ceiling_prob: float = 1.0


DEFAULT_RETIREMENT_CONFIG = RetirementConfig()
