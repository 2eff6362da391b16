"""Player morale: pure decision logic.

Operates on ``Player`` records in place (callers pass copies) and returns
small change records for reporting.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from num_utils import clamp
from player_model import Player
from tables.badges import SYNERGY_CHEMISTRY, get_catalog
from tables.difficulty import expected_minutes
from tables.personality import combined_morale_stability, combined_volatility, trait_effect

from . import config as mcfg

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MoraleChange:
    player_id: str
    name: str
    before: float
    after: float
    reasons: Tuple[str, ...] = ()

    @property
    def delta(self) -> float:
        return self.after - self.before

    def to_row(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "name": self.name,
            "old_morale": round(self.before, 1),
            "new_morale": round(self.after, 1),
            "change": round(self.delta, 1),
            "reasons": list(self.reasons),
        }


@dataclass(frozen=True, slots=True)
class TradeRequest:
    player_id: str
    name: str
    morale: float

    def to_row(self) -> Dict[str, Any]:
        return {"player_id": self.player_id, "name": self.name, "morale": round(self.morale, 1)}


# -----------------------------------------------------------------------------
# Tiers
# -----------------------------------------------------------------------------


def morale_tier(morale: float) -> str:
    m = float(morale)
    for name, threshold, _dev, _perf in mcfg.MORALE_TIERS:
        if m >= threshold:
            return name
    return "critical"


def morale_development_modifier(morale: float) -> float:
    m = float(morale)
    for _name, threshold, dev, _perf in mcfg.MORALE_TIERS:
        if m >= threshold:
            return dev
    return mcfg.MORALE_TIERS[-1][2]


def morale_performance_modifier(morale: float) -> float:
    """High +2%, normal 0, low -2%, critical -5%."""
    m = float(morale)
    for _name, threshold, _dev, perf in mcfg.MORALE_TIERS:
        if m >= threshold:
            return perf
    return mcfg.MORALE_TIERS[-1][3]


# -----------------------------------------------------------------------------
# Updates
# -----------------------------------------------------------------------------


def _apply_delta(player: Player, raw_delta: float) -> float:
    stability = combined_morale_stability(player.traits)
    volatility = combined_volatility(player.traits)
    delta = raw_delta * (1.0 - stability) * volatility
    player.morale = clamp(player.morale + delta, mcfg.MORALE_MIN, mcfg.MORALE_MAX)
    return delta


def playing_time_factor(minutes: float, expected: float) -> Tuple[float, str]:
    m = float(minutes)
    if m >= expected * mcfg.EXCEEDED_RATIO:
        return mcfg.PLAYING_TIME_EXCEEDED, "playing_time_exceeded"
    if m >= expected * mcfg.MET_RATIO:
        return mcfg.PLAYING_TIME_MET, "playing_time_met"
    return mcfg.PLAYING_TIME_UNMET, "playing_time_unmet"


def update_after_game(
    player: Player,
    *,
    won: bool,
    minutes: float,
    team_streak: int = 0,
    difficulty: Any = "pro",
    contract_year: bool = False,
    extension_offered: bool = False,
) -> Optional[MoraleChange]:
    """Post-game morale update. ``team_streak`` is +N for N straight wins, -N for losses.

    Returns a change record only when the move is big enough to report.
    """
    before = float(player.morale)
    reasons = []

    raw = mcfg.WIN if won else mcfg.LOSS
    reasons.append("win" if won else "loss")

    if abs(int(team_streak)) >= mcfg.STREAK_GAMES:
        if team_streak > 0:
            raw += mcfg.WINNING_STREAK_BONUS
            reasons.append("winning_streak")
        else:
            raw += mcfg.LOSING_STREAK_PENALTY
            reasons.append("losing_streak")

    pt, pt_reason = playing_time_factor(minutes, expected_minutes(player.overall, difficulty))
    raw += pt
    reasons.append(pt_reason)

    if contract_year:
        raw += mcfg.FINAL_CONTRACT_YEAR
        reasons.append("final_contract_year")
    if extension_offered:
        raw += mcfg.EXTENSION_OFFERED
        reasons.append("extension_offered")

    _apply_delta(player, raw)
    if abs(player.morale - before) >= mcfg.REPORT_THRESHOLD:
        return MoraleChange(player.player_id, player.name, before, float(player.morale), tuple(reasons))
    return None


def update_weekly(player: Player, *, wins: int, losses: int) -> Optional[MoraleChange]:
    before = float(player.morale)
    morale = before
    reasons = []

    if int(player.contract_years_remaining) <= 1:
        morale += mcfg.FINAL_CONTRACT_YEAR
        reasons.append("final_contract_year")

    games = max(1, int(wins) + int(losses))
    win_pct = int(wins) / games
    if wins + losses > 0:
        if win_pct >= mcfg.WEEKLY_WINNING_PCT:
            morale += mcfg.WEEKLY_WINNING_BONUS
            reasons.append("team_winning")
        elif win_pct <= mcfg.WEEKLY_LOSING_PCT:
            morale += mcfg.WEEKLY_LOSING_PENALTY
            reasons.append("team_losing")

    if player.has_trait("team_player") or player.has_trait("quiet"):
        morale += (mcfg.MORALE_START - morale) * mcfg.WEEKLY_DRIFT
        reasons.append("steady_personality")

    player.morale = clamp(morale, mcfg.MORALE_MIN, mcfg.MORALE_MAX)
    if abs(player.morale - before) >= mcfg.REPORT_THRESHOLD:
        return MoraleChange(player.player_id, player.name, before, float(player.morale), tuple(reasons))
    return None


def check_trade_request(player: Player, rng: random.Random) -> Optional[TradeRequest]:
    """Below the threshold, chance = (threshold - morale) / 100."""
    morale = float(player.morale)
    if morale >= mcfg.TRADE_REQUEST_THRESHOLD:
        return None
    chance = (mcfg.TRADE_REQUEST_THRESHOLD - morale) / 100.0
    if rng.random() < chance:
        logger.info("TRADE_REQUEST player_id=%s morale=%.1f", player.player_id, morale)
        return TradeRequest(player.player_id, player.name, morale)
    return None


# -----------------------------------------------------------------------------
# Team chemistry
# -----------------------------------------------------------------------------


def team_chemistry(roster: Iterable[Player]) -> float:
    players = list(roster)
    chemistry = mcfg.CHEMISTRY_BASE
    leaders = ball_hogs = team_players = 0
    for p in players:
        for t in p.traits:
            chemistry += trait_effect(t).chemistry
        leaders += int(p.has_trait("leader"))
        ball_hogs += int(p.has_trait("ball_hog"))
        team_players += int(p.has_trait("team_player"))

    if 1 <= leaders <= 2:
        chemistry += mcfg.CHEMISTRY_GOOD_LEADERSHIP
    elif leaders > 3:
        chemistry += mcfg.CHEMISTRY_TOO_MANY_LEADERS
    if ball_hogs >= 3:
        chemistry += mcfg.CHEMISTRY_BALL_HOG_CLASH
    if team_players >= 5:
        chemistry += mcfg.CHEMISTRY_TEAM_FIRST

    catalog = get_catalog()
    for i, a in enumerate(players):
        for b in players[i + 1 :]:
            if catalog.find_synergies(a.badges, b.badges):
                chemistry += SYNERGY_CHEMISTRY

    return clamp(chemistry, 0.0, 100.0)
