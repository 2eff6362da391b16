from __future__ import annotations

"""Game orchestration (setup, period loop, overtime, live-game state machine, reporting).

NotStarted -> Q1 -> Q2 -> Q3 -> Q4 -> OT1 -> ... -> Complete

``simulate_game`` runs every period in one call. ``start_game`` /
``continue_game`` / ``sim_to_end`` step the same state machine one period at a
time through a JSON-safe ``LiveGameState`` snapshot, so a game can be paused,
shipped across a process boundary and resumed.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from errors import ConfigurationError, GameStateError
from num_utils import uniform
from player_model import Team

from . import config as me_cfg
from .box_score import StatLine, build_side_box, team_totals
from .config import GameOptions
from .live_state import AWAY, COMPLETE, HOME, IN_PROGRESS, LiveGameState, SideState, period_label
from .modifiers import is_clutch_time
from .possession import PossessionContext, simulate_possession
from .rotation import (
    available_players,
    perform_rotation,
    replace_fouled_out,
    starting_lineup,
    target_seconds,
    update_minutes,
    validate_lineup,
)
from .tactics import DEFAULT_DEFENSE, canonical_defense_scheme, canonical_offense_scheme

logger = logging.getLogger(__name__)

ENGINE_VERSION = "1.0"

# Possession ends that let the next offense push in transition.
LIVE_BALL_ENDS = frozenset({"steal", "defensive_rebound"})

_RNG_STRIDE = 1_000_003


# -------------------------
# Result
# -------------------------


@dataclass
class GameResult:
    home_team_id: str
    away_team_id: str
    home_team: str
    away_team: str
    home_score: int
    away_score: int
    box_score: Dict[str, Dict[str, Dict[str, Any]]]
    team_stats: Dict[str, Dict[str, Any]]
    quarter_scores: List[Dict[str, int]]
    overtime_periods: int
    synergies_activated: Dict[str, int]
    possessions: int
    seed: int
    play_by_play: List[Dict[str, Any]] = field(default_factory=list)
    clutch_plays: List[Dict[str, Any]] = field(default_factory=list)
    animation_data: Optional[Any] = None

    @property
    def winner(self) -> str:
        return HOME if self.home_score > self.away_score else AWAY

    @property
    def winner_team_id(self) -> str:
        return self.home_team_id if self.winner == HOME else self.away_team_id

    def minutes_by_player(self) -> Dict[str, float]:
        out: Dict[str, float] = {}
        for side in (HOME, AWAY):
            for pid, line in self.box_score.get(side, {}).items():
                out[pid] = float(line.get("minutes", 0.0))
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meta": {"engine_version": ENGINE_VERSION, "seed": self.seed, "possessions": self.possessions},
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "home_team": self.home_team,
            "away_team": self.away_team,
            "home_team_name": self.home_team,
            "away_team_name": self.away_team,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "winner": self.winner,
            "winner_team_id": self.winner_team_id,
            "box_score": {side: {pid: dict(line) for pid, line in lines.items()} for side, lines in self.box_score.items()},
            "team_stats": {side: dict(v) for side, v in self.team_stats.items()},
            "quarter_scores": [dict(q) for q in self.quarter_scores],
            "play_by_play": [dict(e) for e in self.play_by_play],
            "animation_data": self.animation_data,
            "synergies_activated": dict(self.synergies_activated),
            "clutch_plays": [dict(c) for c in self.clutch_plays],
            "overtime_periods": self.overtime_periods,
        }


# -------------------------
# Setup
# -------------------------


def _coerce_team(team: Any, label: str) -> Team:
    t = Team.from_dict(team)
    if not t.roster:
        raise ConfigurationError(f"{label} team {t.team_id} has an empty roster")
    return t


def _new_side(team: Team, opts: GameOptions, regulation_minutes: float) -> SideState:
    players = available_players(team.roster)
    if not players:
        raise ConfigurationError(f"team {team.team_id} has no available players")
    targets = target_seconds(players, regulation_minutes, opts.target_minutes)
    lineup = starting_lineup(players, targets)
    starters = set(lineup)
    return SideState(
        team_id=team.team_id,
        name=team.name,
        scheme=canonical_offense_scheme(team.scheme) or "balanced",
        defense=canonical_defense_scheme(team.defensive_style) or DEFAULT_DEFENSE,
        players={p.player_id: p.copy() for p in players},
        lineup=lineup,
        starter_ids=list(lineup),
        target_seconds=targets,
        box={p.player_id: StatLine.for_player(p, is_starter=p.player_id in starters) for p in players},
        game_fatigue={p.player_id: float(p.fatigue) for p in players},
    )


def new_game_state(home_team: Any, away_team: Any, options: Any = None) -> LiveGameState:
    opts = GameOptions.coerce(options)
    home = _coerce_team(home_team, "home")
    away = _coerce_team(away_team, "away")
    if home.team_id == away.team_id:
        raise ConfigurationError(f"invalid matchup: home_team_id == away_team_id ({home.team_id})")
    overlap = {p.player_id for p in home.roster} & {p.player_id for p in away.roster}
    if overlap:
        raise ConfigurationError(f"player_id appears on both teams in a single game: {sorted(overlap)!r}")

    regulation_minutes = opts.quarter_minutes * me_cfg.REGULATION_PERIODS
    seed = opts.seed if opts.seed is not None else random.Random().randrange(1 << 31)
    return LiveGameState(
        home=_new_side(home, opts, regulation_minutes),
        away=_new_side(away, opts, regulation_minutes),
        seed=seed,
        quarter_minutes=opts.quarter_minutes,
        overtime_minutes=opts.overtime_minutes,
        is_playoff=opts.is_playoff,
        record_play_by_play=opts.play_by_play,
    )


# -------------------------
# Period loop
# -------------------------


def _period_rng(state: LiveGameState) -> random.Random:
    return random.Random(state.seed * _RNG_STRIDE + state.possession_count)


def _elapsed_before(state: LiveGameState, period: int) -> float:
    return sum(state.period_seconds(p) for p in range(1, period))


def _play_period(state: LiveGameState) -> Dict[str, Any]:
    if state.is_complete:
        raise GameStateError("game is already complete")

    period = state.current_period
    length = state.period_seconds(period)
    reg_sec = state.regulation_seconds()
    game_elapsed = _elapsed_before(state, period)
    home, away = state.home, state.away
    rng = _period_rng(state)

    if period > state.regulation_periods:
        logger.debug(
            "OVERTIME period=%s home_team_id=%s away_team_id=%s score=%s-%s",
            period, home.team_id, away.team_id, home.score, away.score,
        )

    home.team_fouls = 0
    away.team_fouls = 0
    state.status = IN_PROGRESS
    state.possession = HOME if rng.random() < 0.5 else AWAY
    state.last_end = "period_start"
    start_home, start_away = home.score, away.score
    pbp_start = len(state.play_by_play)

    clock = length
    next_rotation = length - me_cfg.ROTATION_INTERVAL_SEC

    while clock > 0:
        off_key = state.possession
        offense = state.side(off_key)
        defense = state.side(AWAY if off_key == HOME else HOME)

        duration = min(uniform(rng, me_cfg.POSSESSION_MIN_SEC, me_cfg.POSSESSION_MAX_SEC), clock)
        ctx = PossessionContext(
            period=period,
            clock_sec=clock,
            shot_clock=me_cfg.SHOT_CLOCK_SEC - duration,
            score_diff=offense.score - defense.score,
            tempo=None if state.last_end in LIVE_BALL_ENDS else "halfcourt",
            is_playoff=state.is_playoff,
            clutch=is_clutch_time(period, state.regulation_periods, clock, home.score - away.score),
            record_play_by_play=state.record_play_by_play,
        )
        off_on = list(offense.lineup)
        def_on = list(defense.lineup)

        res = simulate_possession(rng, offense, defense, ctx)

        if res.points:
            for pid in off_on:
                offense.box[pid].plus_minus += res.points
            for pid in def_on:
                defense.box[pid].plus_minus -= res.points
        offense.synergies_activated += res.active_synergies

        clock -= duration
        update_minutes(home, duration)
        update_minutes(away, duration)

        for ev in res.events:
            ev["home_score"] = home.score
            ev["away_score"] = away.score
            state.play_by_play.append(ev)
        state.clutch_plays.extend(res.clutch_plays)

        state.possession_count += 1
        state.last_end = res.end
        if not res.keep_ball:
            state.possession = AWAY if off_key == HOME else HOME

        replace_fouled_out(home)
        replace_fouled_out(away)
        if clock > 0 and clock <= next_rotation:
            elapsed = game_elapsed + (length - clock)
            perform_rotation(home, elapsed, reg_sec)
            perform_rotation(away, elapsed, reg_sec)
            while next_rotation >= clock:
                next_rotation -= me_cfg.ROTATION_INTERVAL_SEC

    q = {HOME: home.score - start_home, AWAY: away.score - start_away}
    state.quarter_scores.append(q)
    state.periods_completed += 1
    if state.periods_completed >= state.regulation_periods and home.score != away.score:
        state.status = COMPLETE

    return {
        "period": period,
        "label": period_label(period, state.regulation_periods),
        "home_points": q[HOME],
        "away_points": q[AWAY],
        "home_score": home.score,
        "away_score": away.score,
        "play_by_play": [dict(e) for e in state.play_by_play[pbp_start:]],
    }


# -------------------------
# Adjustments
# -------------------------


def _adjust(adjustments: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        if adjustments.get(k) is not None:
            return adjustments[k]
    return None


def apply_adjustments(state: LiveGameState, adjustments: Optional[Mapping[str, Any]]) -> None:
    """Lineups and schemes between periods. Unknown scheme names are rejected."""
    if not adjustments:
        return
    if not isinstance(adjustments, Mapping):
        raise ConfigurationError("adjustments must be an object")
    for key, side in ((HOME, state.home), (AWAY, state.away)):
        lineup = _adjust(adjustments, f"{key}_lineup", f"{key}Lineup")
        if lineup is not None:
            side.lineup = validate_lineup(side, lineup)

        scheme = _adjust(adjustments, f"{key}_scheme", f"{key}Scheme", f"{key}_offensive_style", f"{key}OffensiveStyle")
        if scheme is not None:
            canon = canonical_offense_scheme(scheme)
            if canon is None:
                raise ConfigurationError(f"unknown offensive scheme: {scheme!r}")
            side.scheme = canon

        defense = _adjust(adjustments, f"{key}_defense", f"{key}Defense", f"{key}_defensive_style", f"{key}DefensiveStyle")
        if defense is not None:
            canon = canonical_defense_scheme(defense)
            if canon is None:
                raise ConfigurationError(f"unknown defensive scheme: {defense!r}")
            side.defense = canon


# -------------------------
# Reporting
# -------------------------


def build_result(state: LiveGameState) -> GameResult:
    home, away = state.home, state.away
    return GameResult(
        home_team_id=home.team_id,
        away_team_id=away.team_id,
        home_team=home.name,
        away_team=away.name,
        home_score=home.score,
        away_score=away.score,
        box_score={HOME: build_side_box(home.box.values()), AWAY: build_side_box(away.box.values())},
        team_stats={HOME: team_totals(home.box.values()), AWAY: team_totals(away.box.values())},
        quarter_scores=[dict(q) for q in state.quarter_scores],
        overtime_periods=state.overtime_periods,
        synergies_activated={HOME: home.synergies_activated, AWAY: away.synergies_activated},
        possessions=state.possession_count,
        seed=state.seed,
        play_by_play=[dict(e) for e in state.play_by_play],
        clutch_plays=[dict(c) for c in state.clutch_plays],
    )


def _run_to_end(state: LiveGameState) -> GameResult:
    while not state.is_complete:
        _play_period(state)
    result = build_result(state)
    logger.debug(
        "GAME_COMPLETE home_team_id=%s away_team_id=%s score=%s-%s overtime_periods=%s",
        result.home_team_id, result.away_team_id, result.home_score, result.away_score, result.overtime_periods,
    )
    return result


def _load_state(game_state: Any) -> LiveGameState:
    if game_state is None:
        raise GameStateError("No game in progress")
    state = LiveGameState.from_dict(game_state)
    if state.is_complete:
        raise GameStateError("game is already complete")
    return state


# -------------------------
# Public API
# -------------------------


def simulate_game(home_team: Any, away_team: Any, options: Any = None) -> GameResult:
    """Simulate a full game: regulation plus overtime periods while tied."""
    state = new_game_state(home_team, away_team, options)
    logger.debug(
        "GAME_START home_team_id=%s away_team_id=%s seed=%s",
        state.home.team_id, state.away.team_id, state.seed,
    )
    return _run_to_end(state)


def start_game(home_team: Any, away_team: Any, options: Any = None) -> Dict[str, Any]:
    """Simulate the first period only; returns ``{quarter_result, game_state}``."""
    state = new_game_state(home_team, away_team, options)
    logger.debug(
        "GAME_START home_team_id=%s away_team_id=%s seed=%s live=1",
        state.home.team_id, state.away.team_id, state.seed,
    )
    quarter = _play_period(state)
    return {"quarter_result": quarter, "game_state": state.to_dict()}


def continue_game(game_state: Any, adjustments: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """Apply ``adjustments`` then play the next period.

    Returns ``{quarter_result, game_state, is_complete: False}`` while the game
    goes on and ``{quarter_result, final_result, is_complete: True}`` once it ends.
    """
    state = _load_state(game_state)
    apply_adjustments(state, adjustments)
    quarter = _play_period(state)
    if state.is_complete:
        result = build_result(state)
        logger.debug(
            "GAME_COMPLETE home_team_id=%s away_team_id=%s score=%s-%s overtime_periods=%s",
            result.home_team_id, result.away_team_id, result.home_score, result.away_score, result.overtime_periods,
        )
        return {"quarter_result": quarter, "final_result": result.to_dict(), "is_complete": True}
    return {"quarter_result": quarter, "game_state": state.to_dict(), "is_complete": False}


def sim_to_end(game_state: Any, adjustments: Optional[Mapping[str, Any]] = None) -> GameResult:
    """Play every remaining period of a live game."""
    state = _load_state(game_state)
    apply_adjustments(state, adjustments)
    return _run_to_end(state)


__all__ = [
    "ENGINE_VERSION",
    "GameResult",
    "new_game_state",
    "apply_adjustments",
    "build_result",
    "simulate_game",
    "start_game",
    "continue_game",
    "sim_to_end",
]
