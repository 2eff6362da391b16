"""Retirement roll for veterans at season end."""

from .config import DEFAULT_RETIREMENT_CONFIG, RetirementConfig
from .engine import evaluate_retirement, retirement_probability
from .types import RetirementDecision, RetirementInputs

__all__ = [
    "DEFAULT_RETIREMENT_CONFIG",
    "RetirementConfig",
    "RetirementDecision",
    "RetirementInputs",
    "evaluate_retirement",
    "retirement_probability",
]
