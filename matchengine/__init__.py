"""Possession-by-possession basketball engine.

Public API
----------
- simulate_game(home_team, away_team, options) -> GameResult
- start_game / continue_game / sim_to_end (live, period-at-a-time games)
- LiveGameState (JSON-safe snapshot of a game in progress)
- select_play (weighted play selection)
- GameOptions

Tuning numbers live in matchengine.config.
"""

from .config import DEFAULT_GAME_OPTIONS, GameOptions
from .live_state import LiveGameState, period_label
from .sim_game import GameResult, continue_game, new_game_state, sim_to_end, simulate_game, start_game
from .tactics import PLAYS, SCHEME_WEIGHTS, canonical_defense_scheme, canonical_offense_scheme, select_play

__all__ = [
    "DEFAULT_GAME_OPTIONS",
    "GameOptions",
    "GameResult",
    "LiveGameState",
    "PLAYS",
    "SCHEME_WEIGHTS",
    "canonical_defense_scheme",
    "canonical_offense_scheme",
    "continue_game",
    "new_game_state",
    "period_label",
    "select_play",
    "sim_to_end",
    "simulate_game",
    "start_game",
]
