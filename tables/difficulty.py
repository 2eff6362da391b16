from __future__ import annotations

"""Campaign difficulty settings.

Difficulty scales monthly development/regression, the per-36 stat bars used
to decide which attributes micro-development touches, and the playing-time
expectations of star players.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping

from errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class DifficultySettings:
    name: str
    development_multiplier: float = 1.0
    regression_multiplier: float = 1.0
    # Per-36-minute baselines, scaled down by actual minutes played.
    stat_thresholds: Mapping[str, float] = field(
        default_factory=lambda: MappingProxyType(
            {"points": 14, "assists": 4, "rebounds": 5, "steals": 1, "blocks": 1, "threes": 2}
        )
    )
    star_expected_minutes: float = 28.0


def _thresholds(**kw: float) -> Mapping[str, float]:
    return MappingProxyType(dict(kw))


DIFFICULTY_SETTINGS: Mapping[str, DifficultySettings] = MappingProxyType(
    {
        "rookie": DifficultySettings(
            name="rookie",
            development_multiplier=1.3,
            regression_multiplier=0.7,
            stat_thresholds=_thresholds(points=12, assists=3, rebounds=5, steals=1, blocks=1, threes=2),
            star_expected_minutes=27.0,
        ),
        "pro": DifficultySettings(name="pro"),
        "all_star": DifficultySettings(
            name="all_star",
            development_multiplier=0.85,
            regression_multiplier=1.15,
            stat_thresholds=_thresholds(points=16, assists=5, rebounds=6, steals=2, blocks=2, threes=2),
            star_expected_minutes=29.0,
        ),
        "hall_of_fame": DifficultySettings(
            name="hall_of_fame",
            development_multiplier=0.7,
            regression_multiplier=1.3,
            stat_thresholds=_thresholds(points=18, assists=6, rebounds=7, steals=2, blocks=2, threes=3),
            star_expected_minutes=31.0,
        ),
    }
)

_ALIASES: Dict[str, str] = {
    "all-star": "all_star",
    "allstar": "all_star",
    "hall-of-fame": "hall_of_fame",
    "hof": "hall_of_fame",
    "halloffame": "hall_of_fame",
}


def normalize_difficulty(value: Any) -> str:
    s = str(value or "").strip().lower()
    if not s:
        return "pro"
    s = _ALIASES.get(s, s)
    if s not in DIFFICULTY_SETTINGS:
        raise ConfigurationError(f"unknown difficulty: {value!r}")
    return s


def get_difficulty(value: Any) -> DifficultySettings:
    if isinstance(value, DifficultySettings):
        return value
    return DIFFICULTY_SETTINGS[normalize_difficulty(value)]


def expected_minutes(overall: float, difficulty: Any = "pro") -> float:
    """Minutes per game a player of this overall expects."""
    ovr = float(overall)
    if ovr >= 85:
        return get_difficulty(difficulty).star_expected_minutes
    if ovr >= 80:
        return 28.0
    if ovr >= 75:
        return 24.0
    if ovr >= 70:
        return 18.0
    if ovr >= 65:
        return 12.0
    return 6.0
