from __future__ import annotations

"""Numeric and randomness helpers shared by the engine and the evolution subsystems.

Every stochastic helper takes an explicit ``random.Random`` so that callers
can reproduce a run from a seed.
"""

import random
from typing import Any, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Coercion
# ---------------------------------------------------------------------------


def safe_float(x: Any, default: float = 0.0) -> float:
    try:
        if x is None:
            return float(default)
        return float(x)
    except (TypeError, ValueError):
        return float(default)


def safe_int(x: Any, default: int = 0) -> int:
    try:
        if x is None:
            return int(default)
        return int(x)
    except (TypeError, ValueError):
        return int(default)


# ---------------------------------------------------------------------------
# Math helpers
# ---------------------------------------------------------------------------


def clamp(x: Any, lo: float, hi: float) -> float:
    xf = safe_float(x, lo)
    if xf < lo:
        return float(lo)
    if xf > hi:
        return float(hi)
    return float(xf)


def clamp01(x: Any) -> float:
    return clamp(x, 0.0, 1.0)


def round1(x: float) -> float:
    """Round to one decimal (attribute storage precision)."""
    return round(float(x) * 10.0) / 10.0


# ---------------------------------------------------------------------------
# Randomness
# ---------------------------------------------------------------------------


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Seeded generator when ``seed`` is given, else an OS-seeded one."""
    return random.Random(seed) if seed is not None else random.Random()


def weighted_choice(rng: random.Random, items: Sequence[Tuple[T, float]]) -> T:
    """Pick a key from ``(key, weight)`` pairs. Non-positive weights never win."""
    if not items:
        raise ValueError("weighted_choice requires at least one item")
    total = sum(max(0.0, float(w)) for _k, w in items)
    if total <= 0:
        return items[0][0]
    r = rng.random() * total
    acc = 0.0
    for k, w in items:
        acc += max(0.0, float(w))
        if r < acc:
            return k
    return items[-1][0]


def uniform(rng: random.Random, lo: float, hi: float) -> float:
    return float(lo) + (float(hi) - float(lo)) * rng.random()


__all__ = [
    "safe_float",
    "safe_int",
    "clamp",
    "clamp01",
    "round1",
    "make_rng",
    "weighted_choice",
    "uniform",
]
