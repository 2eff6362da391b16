from __future__ import annotations

"""How much each upgradeable attribute matters at each position (0..1).

Used when upgrade points are spent automatically. Attributes missing from a
position's table count as DEFAULT_RELEVANCE; unknown positions use SF.
"""

from types import MappingProxyType
from typing import Mapping

DEFAULT_RELEVANCE: float = 0.5
FALLBACK_POSITION: str = "SF"

POSITION_RELEVANCE: Mapping[str, Mapping[str, float]] = MappingProxyType(
    {
        "PG": MappingProxyType(
            {
                "ball_handling": 1.0, "pass_accuracy": 1.0, "pass_vision": 0.9, "pass_iq": 0.9,
                "three_point": 0.8, "mid_range": 0.7, "layup": 0.7, "close_shot": 0.5,
                "free_throw": 0.6, "post_control": 0.2, "draw_foul": 0.6,
                "standing_dunk": 0.1, "driving_dunk": 0.4,
                "perimeter_defense": 1.0, "steal": 0.9, "pass_perception": 0.8,
                "help_defense_iq": 0.7, "interior_defense": 0.3, "block": 0.2,
                "offensive_rebound": 0.2, "defensive_rebound": 0.4,
                "speed": 1.0, "acceleration": 0.9, "stamina": 0.8, "vertical": 0.5, "strength": 0.4,
            }
        ),
        "SG": MappingProxyType(
            {
                "three_point": 1.0, "mid_range": 0.9, "ball_handling": 0.7, "layup": 0.8,
                "close_shot": 0.6, "free_throw": 0.7, "pass_accuracy": 0.6, "pass_vision": 0.5,
                "pass_iq": 0.5, "draw_foul": 0.7, "driving_dunk": 0.6,
                "standing_dunk": 0.3, "post_control": 0.2,
                "perimeter_defense": 1.0, "steal": 0.8, "pass_perception": 0.7,
                "help_defense_iq": 0.6, "interior_defense": 0.3, "block": 0.3,
                "offensive_rebound": 0.3, "defensive_rebound": 0.5,
                "speed": 0.9, "acceleration": 0.8, "stamina": 0.8, "vertical": 0.7, "strength": 0.5,
            }
        ),
        "SF": MappingProxyType(
            {
                "three_point": 0.8, "mid_range": 0.8, "layup": 0.8, "close_shot": 0.7,
                "ball_handling": 0.6, "pass_accuracy": 0.5, "pass_vision": 0.4, "pass_iq": 0.4,
                "free_throw": 0.6, "draw_foul": 0.7, "driving_dunk": 0.7,
                "standing_dunk": 0.5, "post_control": 0.4,
                "perimeter_defense": 0.8, "interior_defense": 0.6, "steal": 0.7,
                "block": 0.5, "help_defense_iq": 0.7, "pass_perception": 0.6,
                "offensive_rebound": 0.5, "defensive_rebound": 0.7,
                "speed": 0.7, "acceleration": 0.7, "stamina": 0.8, "vertical": 0.7, "strength": 0.7,
            }
        ),
        "PF": MappingProxyType(
            {
                "post_control": 0.8, "close_shot": 0.9, "mid_range": 0.7, "layup": 0.8,
                "standing_dunk": 0.8, "driving_dunk": 0.6, "three_point": 0.5,
                "free_throw": 0.6, "draw_foul": 0.7, "ball_handling": 0.3,
                "pass_accuracy": 0.4, "pass_vision": 0.3, "pass_iq": 0.4,
                "interior_defense": 0.9, "block": 0.8, "defensive_rebound": 0.9,
                "offensive_rebound": 0.8, "help_defense_iq": 0.7, "perimeter_defense": 0.5,
                "steal": 0.4, "pass_perception": 0.5,
                "strength": 0.9, "vertical": 0.7, "stamina": 0.7, "speed": 0.5, "acceleration": 0.5,
            }
        ),
        "C": MappingProxyType(
            {
                "post_control": 1.0, "close_shot": 0.9, "standing_dunk": 0.9, "layup": 0.7,
                "free_throw": 0.5, "draw_foul": 0.6, "mid_range": 0.4, "driving_dunk": 0.4,
                "three_point": 0.2, "ball_handling": 0.2, "pass_accuracy": 0.4,
                "pass_vision": 0.3, "pass_iq": 0.4,
                "interior_defense": 1.0, "block": 1.0, "defensive_rebound": 1.0,
                "offensive_rebound": 0.9, "help_defense_iq": 0.7, "perimeter_defense": 0.3,
                "steal": 0.3, "pass_perception": 0.4,
                "strength": 1.0, "vertical": 0.6, "stamina": 0.6, "speed": 0.3, "acceleration": 0.3,
            }
        ),
    }
)


def position_relevance(position: str, attribute: str) -> float:
    table = POSITION_RELEVANCE.get(str(position).upper(), POSITION_RELEVANCE[FALLBACK_POSITION])
    return float(table.get(attribute, DEFAULT_RELEVANCE))
