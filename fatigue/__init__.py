"""Between-game fatigue subsystem.

Fatigue (0..100) rises with minutes played, falls with weekly and rest-day
recovery, and lowers in-game performance once it passes 50.

Public API
----------
- apply_game_fatigue
- recover_fatigue
- fatigue_penalty / fatigue_multiplier
- in_rookie_wall

Implementation details live in fatigue.service; numbers in fatigue.config.
"""

from .service import (
    FatigueWarning,
    apply_game_fatigue,
    fatigue_multiplier,
    fatigue_penalty,
    game_fatigue_gain,
    in_rookie_wall,
    recover_fatigue,
    weighted_recovery,
)

__all__ = [
    "FatigueWarning",
    "apply_game_fatigue",
    "fatigue_multiplier",
    "fatigue_penalty",
    "game_fatigue_gain",
    "in_rookie_wall",
    "recover_fatigue",
    "weighted_recovery",
]
