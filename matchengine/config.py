from __future__ import annotations

"""Tuning parameters for the possession engine.

Model summary
-------------
A game is REGULATION_PERIODS periods of ``quarter_minutes`` plus overtime
periods of ``overtime_minutes`` while tied. Each possession consumes
U(POSSESSION_MIN_SEC, POSSESSION_MAX_SEC) of game clock (capped at the time
left) and ends in exactly one outcome.

Shot make chance:
    base(shot_type, attr) - contest * CONTEST_WEIGHT + scheme_shot_mod
    then * performance multiplier * (1 + chemistry), clamped to [MAKE_MIN, MAKE_MAX]

    three: THREE_BASE + three_point/100 * THREE_SCALE
    mid:   MID_BASE   + mid_range/100   * MID_SCALE
    paint: PAINT_BASE + layup/100       * PAINT_SCALE
    contest = def_rating/100 * (1 - separation * SEPARATION_WEIGHT)
    separation = (speed + acceleration) / 200

Offensive rebound chance:
    off = sum(offensive_rebound * pos_mult)
    dfn = sum(defensive_rebound * pos_mult) * DEFENSIVE_REBOUND_ADVANTAGE
    clamp(off / (off + dfn), OREB_MIN, OREB_MAX)
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional

from errors import ConfigurationError

# ---------------------------------------------------------------------------
# Game structure
# ---------------------------------------------------------------------------

REGULATION_PERIODS: int = 4
QUARTER_MINUTES: float = 10.0
OVERTIME_MINUTES: float = 5.0
LINEUP_SIZE: int = 5

POSSESSION_MIN_SEC: float = 10.0
POSSESSION_MAX_SEC: float = 24.0
SHOT_CLOCK_SEC: float = 24.0

# Rotation is checked every ROTATION_INTERVAL_SEC of game clock.
ROTATION_INTERVAL_SEC: float = 120.0
# A bench player comes in only when their minutes deficit beats the on-court
# player's by at least this margin.
ROTATION_MARGIN_SEC: float = 60.0
# In-game fatigue above this adds SUB_FATIGUE_WEIGHT seconds per point to the
# on-court player's sub-out score.
SUB_FATIGUE_THRESHOLD: float = 70.0
SUB_FATIGUE_WEIGHT: float = 6.0

# Default target minutes as a share of regulation length.
STARTER_SHARE: float = 0.75
BENCH_SLOTS: int = 5

# ---------------------------------------------------------------------------
# In-game fatigue
# ---------------------------------------------------------------------------

# gain per on-court minute = IN_GAME_FATIGUE_BASE - stamina/100 * IN_GAME_STAMINA_RELIEF
IN_GAME_FATIGUE_BASE: float = 1.25
IN_GAME_STAMINA_RELIEF: float = 0.5
BENCH_RECOVERY_PER_MIN: float = 1.5

# ---------------------------------------------------------------------------
# Shooting
# ---------------------------------------------------------------------------

THREE_BASE: float = 0.32
THREE_SCALE: float = 0.18
MID_BASE: float = 0.40
MID_SCALE: float = 0.18
PAINT_BASE: float = 0.58
PAINT_SCALE: float = 0.20

CONTEST_WEIGHT: float = 0.15
SEPARATION_WEIGHT: float = 0.3

MAKE_MIN: float = 0.05
MAKE_MAX: float = 0.95

FREE_THROW_MIN: float = 0.30
FREE_THROW_MAX: float = 0.95

# shot type mix per play category: (three, mid, paint)
SHOT_MIX: Mapping[str, tuple] = {
    "motion": (0.40, 0.30, 0.30),
    "cut": (0.00, 0.10, 0.90),
    "pick_and_roll": (0.30, 0.30, 0.40),
    "isolation": (0.30, 0.40, 0.30),
    "post_up": (0.00, 0.30, 0.70),
    "spot_up": (0.70, 0.20, 0.10),
    "transition": (0.30, 0.10, 0.60),
}
# plays tagged three_point move this much of the mix onto threes
THREE_TAG_SHIFT: float = 0.15

# ---------------------------------------------------------------------------
# Turnovers / fouls / blocks / assists
# ---------------------------------------------------------------------------

TURNOVER_CHANCE: float = 0.12
STEAL_SHARE: float = 0.60

NON_SHOOTING_FOUL_CHANCE: float = 0.05
SHOOTING_FOUL_CHANCE: Mapping[str, float] = {"three": 0.02, "mid": 0.05, "paint": 0.12}
BONUS_TEAM_FOULS: int = 5
FOUL_OUT: int = 6

BLOCK_CHANCE: Mapping[str, float] = {"three": 0.01, "mid": 0.04, "paint": 0.10}

ASSIST_CHANCE: float = 0.65

# ---------------------------------------------------------------------------
# Rebounding
# ---------------------------------------------------------------------------

REBOUND_POSITION_MULT: Mapping[str, float] = {"C": 1.8, "PF": 1.5, "SF": 1.1, "SG": 0.8, "PG": 0.6}
DEFENSIVE_REBOUND_ADVANTAGE: float = 2.5
OREB_MIN: float = 0.15
OREB_MAX: float = 0.40

# ---------------------------------------------------------------------------
# Modifiers
# ---------------------------------------------------------------------------

# chemistry = clamp((avg_morale - CHEMISTRY_MORALE_BASE)/CHEMISTRY_MORALE_BASE * CHEMISTRY_MAX, +-CHEMISTRY_MAX)
CHEMISTRY_MORALE_BASE: float = 80.0
CHEMISTRY_MAX: float = 0.03

# Clutch time: last CLUTCH_SECONDS of the final regulation period or any
# overtime, margin within CLUTCH_MARGIN.
CLUTCH_SECONDS: float = 120.0
CLUTCH_MARGIN: int = 5
# multiplier += (clutch_attr + trait clutch points - CLUTCH_PIVOT)/100 * CLUTCH_SCALE
CLUTCH_PIVOT: float = 70.0
CLUTCH_SCALE: float = 0.10

# Trailing by more than this boosts isolation and three-point plays.
TRAILING_MARGIN: int = 10
TRAILING_BOOST: float = 1.3
LATE_CLOCK_SEC: float = 8.0
LATE_CLOCK_BOOST: float = 1.5
POSITION_MISS_FIT: float = 0.5
MIN_IQ_PENALTY: float = 0.5

# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GameOptions:
    seed: Optional[int] = None
    play_by_play: bool = True
    target_minutes: Dict[str, float] = field(default_factory=dict)
    is_playoff: bool = False
    quarter_minutes: float = QUARTER_MINUTES
    overtime_minutes: float = OVERTIME_MINUTES

    @classmethod
    def coerce(cls, value: Any) -> "GameOptions":
        """Accept GameOptions, None, or a mapping with snake/camel keys."""
        if isinstance(value, GameOptions):
            return value
        if value is None:
            return cls()
        if not isinstance(value, Mapping):
            raise ConfigurationError(f"game options must be an object, got {type(value).__name__}")

        aliases = {
            "playByPlay": "play_by_play",
            "targetMinutes": "target_minutes",
            "isPlayoff": "is_playoff",
            "quarterMinutes": "quarter_minutes",
            "overtimeMinutes": "overtime_minutes",
        }
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for k, v in value.items():
            name = aliases.get(k, k)
            if name in known and v is not None:
                kwargs[name] = v

        try:
            if "seed" in kwargs:
                kwargs["seed"] = int(kwargs["seed"])
            for k in ("quarter_minutes", "overtime_minutes"):
                if k in kwargs:
                    kwargs[k] = float(kwargs[k])
                    if kwargs[k] <= 0:
                        raise ConfigurationError(f"{k} must be positive")
            if "target_minutes" in kwargs:
                kwargs["target_minutes"] = {str(pid): float(m) for pid, m in dict(kwargs["target_minutes"]).items()}
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"invalid game options: {exc}") from exc
        for k in ("play_by_play", "is_playoff"):
            if k in kwargs:
                kwargs[k] = bool(kwargs[k])
        return cls(**kwargs)


DEFAULT_GAME_OPTIONS = GameOptions()
