"""Injury subsystem package.

Public API
----------
- injury_chance(player, minutes, is_playoff=...)
- roll_game_injury(player, minutes, rng, is_playoff=...)
- advance_recovery(player, games)
- heal(player)
- recovery_estimate(games_remaining)

Tiers and injury names live in injury.catalog; numbers in injury.config.
"""

from .service import advance_recovery, heal, injury_chance, recovery_estimate, roll_game_injury
from .types import InjuryEvent, InjuryRecovery

__all__ = [
    "InjuryEvent",
    "InjuryRecovery",
    "injury_chance",
    "roll_game_injury",
    "advance_recovery",
    "heal",
    "recovery_estimate",
]
