from __future__ import annotations

"""Single possession resolution.

One possession ends in exactly one outcome: made 2, made 3, missed shot
(followed by a rebound), turnover (optionally a steal), shooting foul (free
throws), or a non-shooting foul. An offensive rebound keeps the ball with the
offense; every other outcome hands it over.
"""

import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from num_utils import clamp, weighted_choice
from player_model import Player
from tables.personality import trait_effect

from . import config as me_cfg
from .live_state import SideState
from .modifiers import chemistry_modifier, lineup_synergies, performance_multiplier
from .tactics import DefenseModifiers, Play, defense_modifiers, select_play

SHOT_TYPES = ("three", "mid", "paint")

# Shooter selection leans on these attributes per play category.
_USAGE_ATTRS: Dict[str, Sequence[str]] = {
    "motion": ("mid_range", "three_point", "basketball_iq"),
    "cut": ("layup", "speed", "driving_dunk"),
    "pick_and_roll": ("ball_handling", "pass_vision", "layup"),
    "isolation": ("ball_handling", "mid_range", "driving_dunk"),
    "post_up": ("post_control", "strength", "close_shot"),
    "spot_up": ("three_point", "mid_range"),
    "transition": ("speed", "layup", "driving_dunk"),
}
PRIMARY_POSITION_USAGE: float = 1.5
HANDLING_TURNOVER_BASE: float = 1.2
HANDLING_TURNOVER_SCALE: float = 0.4


@dataclass
class PossessionContext:
    period: int
    clock_sec: float
    shot_clock: float
    score_diff: int  # offense minus defense
    tempo: Optional[str] = None
    is_playoff: bool = False
    clutch: bool = False
    record_play_by_play: bool = True


@dataclass
class PossessionResult:
    outcome: str
    points: int = 0
    keep_ball: bool = False
    # live-ball ends allow a transition look on the next trip
    end: str = "dead_ball"
    play_id: Optional[str] = None
    shooter_id: Optional[str] = None
    active_synergies: int = 0
    events: List[Dict[str, Any]] = field(default_factory=list)
    clutch_plays: List[Dict[str, Any]] = field(default_factory=list)


# -------------------------
# Helpers
# -------------------------


def _mult(side: SideState, p: Player, ctx: PossessionContext, synergies: int) -> float:
    return performance_multiplier(
        p,
        side.game_fatigue.get(p.player_id, p.fatigue),
        active_synergies=synergies,
        is_playoff=ctx.is_playoff,
        clutch=ctx.clutch,
    )


def _pick_shooter(rng: random.Random, lineup: Sequence[Player], play: Play) -> Player:
    attrs = _USAGE_ATTRS.get(play.category, ("mid_range",))
    items = []
    for p in lineup:
        w = sum(p.attribute(a) for a in attrs) / len(attrs)
        if p.position in play.primary_positions:
            w *= PRIMARY_POSITION_USAGE
        w *= 1.0 + sum(trait_effect(t).usage for t in p.traits)
        items.append((p, max(1.0, w)))
    return weighted_choice(rng, items)


def _pick_weighted(rng: random.Random, players: Sequence[Player], attr: str) -> Player:
    return weighted_choice(rng, [(p, max(1.0, p.attribute(attr))) for p in players])


def _matchup(rng: random.Random, shooter: Player, defenders: Sequence[Player]) -> Player:
    for d in defenders:
        if d.position == shooter.position:
            return d
    return rng.choice(list(defenders))


def _shot_type(rng: random.Random, play: Play) -> str:
    three, mid, paint = me_cfg.SHOT_MIX.get(play.category, (0.33, 0.33, 0.34))
    if "three_point" in play.tags:
        shift = min(me_cfg.THREE_TAG_SHIFT, mid + paint)
        mid_cut = shift * (mid / (mid + paint)) if mid + paint > 0 else 0.0
        three, mid, paint = three + shift, mid - mid_cut, paint - (shift - mid_cut)
    return weighted_choice(rng, [("three", three), ("mid", mid), ("paint", paint)])


def base_percentage(shot_type: str, shooter: Player) -> float:
    if shot_type == "three":
        return me_cfg.THREE_BASE + shooter.attribute("three_point") / 100.0 * me_cfg.THREE_SCALE
    if shot_type == "mid":
        return me_cfg.MID_BASE + shooter.attribute("mid_range") / 100.0 * me_cfg.MID_SCALE
    return me_cfg.PAINT_BASE + shooter.attribute("layup") / 100.0 * me_cfg.PAINT_SCALE


def contest_level(shot_type: str, shooter: Player, defender: Player) -> float:
    rating = defender.attribute("interior_defense" if shot_type == "paint" else "perimeter_defense")
    separation = (shooter.attribute("speed") + shooter.attribute("acceleration")) / 200.0
    return clamp(rating / 100.0 * (1.0 - separation * me_cfg.SEPARATION_WEIGHT), 0.0, 1.0)


def make_chance(
    shot_type: str,
    shooter: Player,
    defender: Player,
    multiplier: float,
    chemistry: float,
    mods: DefenseModifiers,
) -> float:
    chance = base_percentage(shot_type, shooter) - contest_level(shot_type, shooter, defender) * me_cfg.CONTEST_WEIGHT
    chance += mods.shot
    chance *= multiplier * (1.0 + chemistry)
    return clamp(chance, me_cfg.MAKE_MIN, me_cfg.MAKE_MAX)


def turnover_chance(handler: Player, multiplier: float, mods: DefenseModifiers) -> float:
    handling = HANDLING_TURNOVER_BASE - handler.attribute("ball_handling") / 100.0 * HANDLING_TURNOVER_SCALE
    return clamp(me_cfg.TURNOVER_CHANCE * handling / max(multiplier, 0.1) + mods.turnover, 0.02, 0.35)


def steal_chance(defender_multiplier: float, chemistry: float, mods: DefenseModifiers) -> float:
    return clamp(me_cfg.STEAL_SHARE * (1.0 + chemistry) * defender_multiplier + mods.steal, 0.0, 0.95)


def block_chance(shot_type: str, defender_multiplier: float, mods: DefenseModifiers) -> float:
    return clamp(me_cfg.BLOCK_CHANCE[shot_type] * defender_multiplier + mods.block, 0.0, 0.5)


def offensive_rebound_chance(offense: Sequence[Player], defense: Sequence[Player]) -> float:
    pos = me_cfg.REBOUND_POSITION_MULT
    off = sum(p.attribute("offensive_rebound") * pos.get(p.position, 1.0) for p in offense)
    dfn = sum(p.attribute("defensive_rebound") * pos.get(p.position, 1.0) for p in defense)
    dfn *= me_cfg.DEFENSIVE_REBOUND_ADVANTAGE
    if off + dfn <= 0:
        return me_cfg.OREB_MIN
    return clamp(off / (off + dfn), me_cfg.OREB_MIN, me_cfg.OREB_MAX)


def _rebounder(rng: random.Random, players: Sequence[Player], attr: str) -> Player:
    pos = me_cfg.REBOUND_POSITION_MULT
    return weighted_choice(rng, [(p, max(1.0, p.attribute(attr) * pos.get(p.position, 1.0))) for p in players])


def _free_throw_chance(shooter: Player, multiplier: float) -> float:
    return clamp(shooter.attribute("free_throw") / 100.0 * multiplier, me_cfg.FREE_THROW_MIN, me_cfg.FREE_THROW_MAX)


def _clock_str(sec: float) -> str:
    s = max(0, int(round(sec)))
    return f"{s // 60}:{s % 60:02d}"


# -------------------------
# Resolution
# -------------------------


class _Recorder:
    def __init__(self, ctx: PossessionContext, offense: SideState, res: PossessionResult) -> None:
        self.ctx = ctx
        self.offense = offense
        self.res = res

    def event(self, kind: str, player: Optional[Player], description: str, *, team: Optional[SideState] = None, points: int = 0) -> None:
        if not self.ctx.record_play_by_play:
            return
        t = team or self.offense
        self.res.events.append(
            {
                "period": self.ctx.period,
                "clock": _clock_str(self.ctx.clock_sec),
                "team_id": t.team_id,
                "player_id": player.player_id if player else None,
                "type": kind,
                "points": points,
                "description": description,
            }
        )

    def clutch(self, player: Player, points: int, description: str) -> None:
        if not self.ctx.clutch or points <= 0:
            return
        self.res.clutch_plays.append(
            {
                "period": self.ctx.period,
                "clock": _clock_str(self.ctx.clock_sec),
                "team_id": self.offense.team_id,
                "player_id": player.player_id,
                "name": player.name,
                "points": points,
                "description": description,
            }
        )


def _shoot_free_throws(
    rng: random.Random,
    offense: SideState,
    shooter: Player,
    count: int,
    multiplier: float,
    rec: _Recorder,
) -> Tuple[int, bool]:
    """Returns (points, last_missed)."""
    line = offense.box[shooter.player_id]
    chance = _free_throw_chance(shooter, multiplier)
    pts = 0
    last_missed = False
    for _ in range(count):
        made = rng.random() < chance
        pts += line.record_free_throw(made)
        last_missed = not made
    offense.score += pts
    rec.event("free_throws", shooter, f"{shooter.name} makes {pts} of {count} free throws", points=pts)
    rec.clutch(shooter, pts, f"{shooter.name} clutch free throws ({pts}/{count})")
    return pts, last_missed


def _rebound(
    rng: random.Random,
    offense: SideState,
    defense: SideState,
    off_players: Sequence[Player],
    def_players: Sequence[Player],
    res: PossessionResult,
    rec: _Recorder,
) -> None:
    if rng.random() < offensive_rebound_chance(off_players, def_players):
        p = _rebounder(rng, off_players, "offensive_rebound")
        offense.box[p.player_id].offensive_rebounds += 1
        res.keep_ball = True
        res.end = "offensive_rebound"
        rec.event("offensive_rebound", p, f"{p.name} offensive rebound")
    else:
        p = _rebounder(rng, def_players, "defensive_rebound")
        defense.box[p.player_id].defensive_rebounds += 1
        res.end = "defensive_rebound"
        rec.event("defensive_rebound", p, f"{p.name} defensive rebound", team=defense)


def _charge_foul(defense: SideState, def_players: Sequence[Player], rng: random.Random) -> Player:
    fouler = rng.choice(list(def_players))
    defense.box[fouler.player_id].fouls += 1
    defense.team_fouls += 1
    return fouler


def simulate_possession(
    rng: random.Random,
    offense: SideState,
    defense: SideState,
    ctx: PossessionContext,
) -> PossessionResult:
    off_players = offense.on_court()
    def_players = defense.on_court()

    play = select_play(off_players, offense.scheme, ctx.shot_clock, ctx.score_diff, rng, tempo=ctx.tempo)
    mods = defense_modifiers(defense.defense, play)
    synergies = len(lineup_synergies(off_players))
    def_synergies = len(lineup_synergies(def_players))
    off_chem = chemistry_modifier(off_players)
    def_chem = chemistry_modifier(def_players)

    res = PossessionResult(outcome="", play_id=play.play_id, active_synergies=synergies)
    rec = _Recorder(ctx, offense, res)

    shooter = _pick_shooter(rng, off_players, play)
    res.shooter_id = shooter.player_id
    line = offense.box[shooter.player_id]
    mult = _mult(offense, shooter, ctx, synergies)
    defender = _matchup(rng, shooter, def_players)
    def_mult = _mult(defense, defender, ctx, def_synergies)

    # Turnover
    if rng.random() < turnover_chance(shooter, mult, mods):
        line.turnovers += 1
        res.outcome = "turnover"
        if rng.random() < steal_chance(def_mult, def_chem, mods):
            thief = _pick_weighted(rng, def_players, "steal")
            defense.box[thief.player_id].steals += 1
            res.end = "steal"
            rec.event("steal", thief, f"{thief.name} steals the ball from {shooter.name}", team=defense)
        else:
            res.end = "turnover"
            rec.event("turnover", shooter, f"{shooter.name} turns it over ({play.name})")
        return res

    # Non-shooting foul
    if rng.random() < me_cfg.NON_SHOOTING_FOUL_CHANCE:
        fouler = _charge_foul(defense, def_players, rng)
        rec.event("foul", fouler, f"Foul on {fouler.name}", team=defense)
        if defense.team_fouls >= me_cfg.BONUS_TEAM_FOULS:
            res.outcome = "free_throws"
            pts, last_missed = _shoot_free_throws(rng, offense, shooter, 2, mult, rec)
            res.points = pts
            if last_missed:
                _rebound(rng, offense, defense, off_players, def_players, res, rec)
        else:
            res.outcome = "foul"
            res.keep_ball = True
            res.end = "foul"
        return res

    shot_type = _shot_type(rng, play)
    chance = make_chance(shot_type, shooter, defender, mult, off_chem, mods)
    shot_name = {"three": "three-pointer", "mid": "mid-range jumper", "paint": "shot in the paint"}[shot_type]

    # Shooting foul
    if rng.random() < me_cfg.SHOOTING_FOUL_CHANCE[shot_type]:
        fouler = _charge_foul(defense, def_players, rng)
        rec.event("shooting_foul", fouler, f"{shooter.name} is fouled by {fouler.name} on the {shot_name}", team=defense)
        res.outcome = "shooting_foul"
        and_one = rng.random() < chance * 0.5
        pts = 0
        if and_one:
            pts += line.record_shot(shot_type, True)
            offense.score += pts
            rec.event("made_shot", shooter, f"{shooter.name} scores the {shot_name} and one", points=pts)
            rec.clutch(shooter, pts, f"{shooter.name} clutch {shot_name}")
            _assist(rng, offense, shooter, off_players, off_chem, rec)
        ft_count = 1 if and_one else (3 if shot_type == "three" else 2)
        ft_pts, last_missed = _shoot_free_throws(rng, offense, shooter, ft_count, mult, rec)
        res.points = pts + ft_pts
        if last_missed:
            _rebound(rng, offense, defense, off_players, def_players, res, rec)
        return res

    made = rng.random() < chance
    pts = line.record_shot(shot_type, made)
    if made:
        offense.score += pts
        res.points = pts
        res.outcome = "made_3" if shot_type == "three" else "made_2"
        rec.event("made_shot", shooter, f"{shooter.name} makes the {shot_name} ({play.name})", points=pts)
        rec.clutch(shooter, pts, f"{shooter.name} clutch {shot_name}")
        _assist(rng, offense, shooter, off_players, off_chem, rec)
        return res

    res.outcome = "miss"
    if rng.random() < block_chance(shot_type, def_mult, mods):
        blocker = _pick_weighted(rng, def_players, "block")
        defense.box[blocker.player_id].blocks += 1
        rec.event("block", blocker, f"{blocker.name} blocks {shooter.name}'s {shot_name}", team=defense)
    else:
        rec.event("missed_shot", shooter, f"{shooter.name} misses the {shot_name} ({play.name})")
    _rebound(rng, offense, defense, off_players, def_players, res, rec)
    return res


def _assist(
    rng: random.Random,
    offense: SideState,
    shooter: Player,
    off_players: Sequence[Player],
    chemistry: float,
    rec: _Recorder,
) -> None:
    mates = [p for p in off_players if p.player_id != shooter.player_id]
    if not mates or rng.random() >= me_cfg.ASSIST_CHANCE * (1.0 + chemistry):
        return
    items = []
    for p in mates:
        w = (p.attribute("pass_accuracy") + p.attribute("pass_vision")) / 2.0
        w *= 1.0 + sum(trait_effect(t).assist for t in p.traits)
        items.append((p, max(1.0, w)))
    passer = weighted_choice(rng, items)
    offense.box[passer.player_id].assists += 1
    rec.event("assist", passer, f"Assist: {passer.name}")


__all__ = [
    "SHOT_TYPES",
    "PossessionContext",
    "PossessionResult",
    "base_percentage",
    "block_chance",
    "contest_level",
    "make_chance",
    "offensive_rebound_chance",
    "simulate_possession",
    "steal_chance",
    "turnover_chance",
]
