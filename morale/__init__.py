"""Player morale and team chemistry.

Public API
----------
- update_after_game / update_weekly
- morale_tier / morale_development_modifier / morale_performance_modifier
- check_trade_request
- team_chemistry
"""

from .service import (
    MoraleChange,
    TradeRequest,
    check_trade_request,
    morale_development_modifier,
    morale_performance_modifier,
    morale_tier,
    playing_time_factor,
    team_chemistry,
    update_after_game,
    update_weekly,
)

__all__ = [
    "MoraleChange",
    "TradeRequest",
    "check_trade_request",
    "morale_development_modifier",
    "morale_performance_modifier",
    "morale_tier",
    "playing_time_factor",
    "team_chemistry",
    "update_after_game",
    "update_weekly",
]
