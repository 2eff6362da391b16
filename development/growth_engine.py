from __future__ import annotations

"""Monthly development / regression and seasonal aging.

All functions work on ``Player`` records in place; the evolution pipeline
hands them copies.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from num_utils import round1
from player_model import Player
from ratings import overall_from_attributes
from tables.attributes import MAX_ATTR, MIN_ATTR, CategoryProfile, age_bracket, profile_for_attribute
from tables.badges import (
    DYNAMIC_DUO_BOOST,
    DYNAMIC_DUO_MIN_LEVEL,
    DYNAMIC_DUO_MIN_SYNERGIES,
    SYNERGY_DEV_BOOST,
    SYNERGY_DEV_BOOST_HOF,
    SYNERGY_DEV_BOOST_MAX,
    get_catalog,
)
from tables.difficulty import DifficultySettings, get_difficulty
from tables.personality import (
    MENTOR_MAX_MENTEE_AGE,
    MENTOR_MAX_MENTEES,
    MENTOR_YOUNG_PLAYER_BOOST,
    trait_effect,
)
from morale.service import morale_development_modifier

from . import config as dev_cfg
from .types import AttributeChange, NewsEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DevelopmentContext:
    avg_minutes: float = 0.0
    has_mentor: bool = False
    synergy_boost: float = 0.0
    duo_boost: float = 0.0


@dataclass(frozen=True, slots=True)
class MonthlyOutcome:
    player_id: str
    old_overall: int
    new_overall: int
    development: Optional[AttributeChange] = None
    regression: Optional[AttributeChange] = None
    news: Optional[NewsEvent] = None
    capped: bool = False

    @property
    def overall_change(self) -> int:
        return self.new_overall - self.old_overall


# ---------------------------------------------------------------------------
# Roster context
# ---------------------------------------------------------------------------


def mentees_of(mentor: Player, roster: Sequence[Player]) -> List[Player]:
    """Youngest eligible teammates, at most MENTOR_MAX_MENTEES."""
    eligible = [
        p
        for p in roster
        if p.player_id != mentor.player_id and not p.is_retired and int(p.age) <= MENTOR_MAX_MENTEE_AGE
    ]
    eligible.sort(key=lambda p: (int(p.age), p.player_id))
    return eligible[:MENTOR_MAX_MENTEES]


def has_mentor(player: Player, roster: Sequence[Player]) -> bool:
    if int(player.age) > MENTOR_MAX_MENTEE_AGE:
        return False
    for m in roster:
        if m.player_id == player.player_id or not m.has_trait("mentor"):
            continue
        if any(p.player_id == player.player_id for p in mentees_of(m, roster)):
            return True
    return False


def synergy_development_boost(player: Player, roster: Sequence[Player]) -> float:
    """+5% per active teammate synergy (+8% when a HOF badge is involved), capped."""
    catalog = get_catalog()
    boost = 0.0
    for mate in roster:
        if mate.player_id == player.player_id:
            continue
        for match in catalog.find_synergies(player.badges, mate.badges):
            boost += SYNERGY_DEV_BOOST_HOF if match.has_hof else SYNERGY_DEV_BOOST
    return min(boost, SYNERGY_DEV_BOOST_MAX)


def dynamic_duo_boost(player: Player, roster: Sequence[Player]) -> float:
    catalog = get_catalog()
    for mate in roster:
        if mate.player_id == player.player_id:
            continue
        strong = [
            m for m in catalog.find_synergies(player.badges, mate.badges) if m.min_level >= DYNAMIC_DUO_MIN_LEVEL
        ]
        if len(strong) >= DYNAMIC_DUO_MIN_SYNERGIES:
            return DYNAMIC_DUO_BOOST
    return 0.0


def build_context(player: Player, roster: Sequence[Player]) -> DevelopmentContext:
    gp = int(player.games_played_this_season)
    avg = float(player.minutes_played_this_season) / gp if gp > 0 else 0.0
    return DevelopmentContext(
        avg_minutes=avg,
        has_mentor=has_mentor(player, roster),
        synergy_boost=synergy_development_boost(player, roster),
        duo_boost=dynamic_duo_boost(player, roster),
    )


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------


def personality_modifier(player: Player) -> float:
    mod = sum(trait_effect(t).development_bonus for t in player.traits)
    we = float(player.work_ethic)
    if we >= dev_cfg.WORK_ETHIC_HIGH:
        mod += dev_cfg.WORK_ETHIC_HIGH_BONUS
    elif we <= dev_cfg.WORK_ETHIC_LOW:
        mod += dev_cfg.WORK_ETHIC_LOW_PENALTY
    return mod


def development_points(player: Player, ctx: DevelopmentContext, difficulty: DifficultySettings) -> float:
    current = float(player.overall)
    potential = float(player.potential)
    if current >= potential:
        return 0.0
    age_mult = age_bracket(player.age).development
    base = (
        (potential - current)
        * dev_cfg.BASE_RATE
        * age_mult
        * difficulty.development_multiplier
        / dev_cfg.MONTHS_PER_SEASON
    )
    if base <= 0:
        return 0.0

    total = base
    total += base * float(player.work_ethic) / 100.0 * dev_cfg.WORK_ETHIC_SHARE
    total += base * ctx.avg_minutes / dev_cfg.FULL_GAME_MINUTES * dev_cfg.PLAYING_TIME_SHARE
    if ctx.has_mentor:
        total += base * MENTOR_YOUNG_PLAYER_BOOST
    total += base * ctx.synergy_boost
    total += base * ctx.duo_boost
    total *= 1.0 + morale_development_modifier(player.morale)
    total *= 1.0 + personality_modifier(player)
    return max(0.0, total)


def regression_points(player: Player, difficulty: DifficultySettings) -> float:
    if int(player.age) < dev_cfg.REGRESSION_START_AGE:
        return 0.0
    mult = age_bracket(player.age).regression * difficulty.regression_multiplier
    return max(0.0, mult * dev_cfg.REGRESSION_RATE / dev_cfg.MONTHS_PER_SEASON)


def _dev_share(profile: CategoryProfile, age: int) -> float:
    if age < profile.peak_age:
        return 1.0
    if not profile.can_improve_past_peak:
        return 0.0
    if age < profile.decline_start:
        return dev_cfg.PLATEAU_SHARE
    return dev_cfg.DECLINE_SHARE


def proposed_changes(player: Player, dev: float, reg: float) -> Tuple[Dict[str, float], Dict[str, float]]:
    """(gains, losses) per attribute before the season cap is applied."""
    gains: Dict[str, float] = {}
    losses: Dict[str, float] = {}
    age = int(player.age)
    ceiling = min(float(MAX_ATTR), max(float(player.potential), float(MIN_ATTR)))
    for _group, name, value in player.iter_attributes():
        profile = profile_for_attribute(name)
        if profile is None:
            continue
        if dev > 0:
            g = dev * _dev_share(profile, age)
            g = min(g, max(0.0, ceiling - value))
            if g > 0:
                gains[name] = g
        if reg > 0 and age >= profile.decline_start:
            loss = reg * profile.decline_rate / dev_cfg.REFERENCE_DECLINE_RATE
            loss = min(loss, max(0.0, value - float(MIN_ATTR)))
            if loss > 0:
                losses[name] = loss
    return gains, losses


# ---------------------------------------------------------------------------
# Season cap
# ---------------------------------------------------------------------------


def _overall_with(player: Player, gains: Mapping[str, float], losses: Mapping[str, float], f: float) -> int:
    attrs = {g: dict(a) for g, a in player.attributes.items()}
    for group, name, value in player.iter_attributes():
        delta = f * (gains.get(name, 0.0) - losses.get(name, 0.0))
        if delta:
            attrs[group][name] = round1(min(float(MAX_ATTR), max(float(MIN_ATTR), value + delta)))
    return overall_from_attributes(attrs)


def cap_scale(
    player: Player,
    gains: Mapping[str, float],
    losses: Mapping[str, float],
    *,
    base_overall: int,
) -> float:
    """Largest scale in [0, 1] keeping the season change inside the cap.

    Scale 0 leaves the overall unchanged, which is always allowed while the
    running total is inside the window.
    """
    acc = int(player.season_overall_change)
    lo = dev_cfg.SEASON_CAP_MIN - acc
    hi = dev_cfg.SEASON_CAP_MAX - acc

    def ok(f: float) -> bool:
        change = _overall_with(player, gains, losses, f) - base_overall
        return lo <= change <= hi

    if ok(1.0):
        return 1.0
    good, bad = 0.0, 1.0
    for _ in range(dev_cfg.CAP_SEARCH_STEPS):
        mid = (good + bad) / 2.0
        if ok(mid):
            good = mid
        else:
            bad = mid
    return good


# ---------------------------------------------------------------------------
# Monthly step
# ---------------------------------------------------------------------------


def _apply_scaled(player: Player, changes: Mapping[str, float], f: float, sign: float) -> Dict[str, float]:
    applied: Dict[str, float] = {}
    for name, amount in changes.items():
        before = player.attribute(name)
        after = player.set_attribute(name, round1(before + sign * f * amount))
        if after != before:
            applied[name] = round(after - before, 2)
    return applied


def apply_monthly_development(
    player: Player,
    roster: Sequence[Player],
    difficulty: object = "pro",
) -> MonthlyOutcome:
    """One monthly checkpoint for ``player`` (mutated); ``roster`` is the player's team."""
    diff = get_difficulty(difficulty)
    base_overall = overall_from_attributes(player.attributes)
    old_overall = int(player.overall)

    if player.is_injured or player.is_retired:
        return MonthlyOutcome(player.player_id, old_overall, old_overall)

    ctx = build_context(player, roster)
    dev = development_points(player, ctx, diff)
    reg = regression_points(player, diff)
    gains, losses = proposed_changes(player, dev, reg)
    if not gains and not losses:
        return MonthlyOutcome(player.player_id, old_overall, old_overall)

    f = cap_scale(player, gains, losses, base_overall=base_overall)
    capped = f < 1.0
    if capped:
        logger.debug(
            "SEASON_CAP_APPLIED player_id=%s season_change=%s scale=%.3f",
            player.player_id,
            player.season_overall_change,
            f,
        )

    applied_gains = _apply_scaled(player, gains, f, 1.0) if f > 0 else {}
    applied_losses = _apply_scaled(player, losses, f, -1.0) if f > 0 else {}

    new_overall = overall_from_attributes(player.attributes)
    change = new_overall - base_overall
    player.overall = new_overall
    player.season_overall_change = int(player.season_overall_change) + change

    development = (
        AttributeChange(player.player_id, player.name, "monthly_development", applied_gains, old_overall, new_overall)
        if applied_gains
        else None
    )
    regression = (
        AttributeChange(player.player_id, player.name, "monthly_regression", applied_losses, old_overall, new_overall)
        if applied_losses
        else None
    )

    news: Optional[NewsEvent] = None
    if change >= dev_cfg.BREAKOUT_CHANGE:
        news = NewsEvent(player.player_id, player.name, "breakout", change, new_overall)
    elif change <= dev_cfg.DECLINE_CHANGE:
        news = NewsEvent(player.player_id, player.name, "decline", change, new_overall)

    return MonthlyOutcome(player.player_id, old_overall, new_overall, development, regression, news, capped)


# ---------------------------------------------------------------------------
# Seasonal aging
# ---------------------------------------------------------------------------


def yearly_change(name: str, age: int) -> float:
    profile = profile_for_attribute(name)
    if profile is None or int(age) < profile.decline_start:
        return 0.0
    return -profile.decline_rate


def apply_seasonal_aging(player: Player) -> Dict[str, float]:
    """Past a category's decline start its attributes lose ``decline_rate`` for the year."""
    applied: Dict[str, float] = {}
    for _group, name, value in list(player.iter_attributes()):
        change = yearly_change(name, player.age)
        if not change:
            continue
        after = player.set_attribute(name, round1(value + change))
        if after != value:
            applied[name] = round(after - value, 2)
    return applied


def group_by_team(players: Iterable[Player]) -> Dict[str, List[Player]]:
    out: Dict[str, List[Player]] = {}
    for p in players:
        out.setdefault(p.team_id or "", []).append(p)
    return out
