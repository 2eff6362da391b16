from __future__ import annotations

"""Overall rating formula.

overall = 0.40*offense + 0.25*defense + 0.20*physical + 0.15*mental

where each term is the plain average of that group's attributes (75 when the
group is missing), clamped to [40, 99] and rounded to an integer.
"""

from typing import Any, Dict, Mapping

from tables.attributes import ATTRIBUTE_GROUPS

OVERALL_WEIGHTS: Mapping[str, float] = {
    "offense": 0.40,
    "defense": 0.25,
    "physical": 0.20,
    "mental": 0.15,
}

MISSING_GROUP_AVERAGE: float = 75.0
OVERALL_MIN: int = 40
OVERALL_MAX: int = 99


def group_averages(attributes: Mapping[str, Mapping[str, Any]]) -> Dict[str, float]:
    out: Dict[str, float] = {}
    for group in ATTRIBUTE_GROUPS:
        values = attributes.get(group) if isinstance(attributes, Mapping) else None
        if not isinstance(values, Mapping) or not values:
            continue
        nums = [float(v) for v in values.values()]
        out[group] = sum(nums) / len(nums)
    return out


def overall_from_attributes(attributes: Mapping[str, Mapping[str, Any]]) -> int:
    avgs = group_averages(attributes)
    total = 0.0
    for group, weight in OVERALL_WEIGHTS.items():
        total += avgs.get(group, MISSING_GROUP_AVERAGE) * weight
    return int(round(min(float(OVERALL_MAX), max(float(OVERALL_MIN), total))))


def recalculate_overall(player: Any) -> Any:
    """Return a copy of ``player`` with ``overall`` recomputed from its attributes.

    Pure: the input is not modified and repeated calls on unchanged attributes
    give the same value.
    """
    out = player.copy()
    out.overall = overall_from_attributes(out.attributes)
    return out
