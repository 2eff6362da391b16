from __future__ import annotations

"""Player evolution stages.

Every stage copies its input players, applies one cadence of rules and
returns the updated copies with an ``EvolutionReport``:

  - process_post_game          after each game, for players who appeared
  - process_weekly_evolution   injury countdown, recovery, morale, streaks
  - process_monthly_development  development / regression checkpoint
  - process_rest_day           off-day fatigue recovery
  - process_season_end         healing, aging, retirement, resets

Stages are independent: skipping one never breaks another.
"""

import logging
import random
from typing import Any, Collection, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from development import (
    apply_micro_development,
    apply_monthly_development,
    apply_seasonal_aging,
    award_upgrade_points,
    clear_streak,
    group_by_team,
    note_growth,
    performance_from_line,
    record_performance,
    refresh_streak,
    spend_upgrade_points,
)
from development.types import AttributeChange, StreakEvent
from fatigue import apply_game_fatigue, recover_fatigue
from fatigue import config as fat_cfg
from injury import advance_recovery, heal, roll_game_injury
from morale import check_trade_request, update_after_game, update_weekly
from num_utils import make_rng, safe_float, safe_int
from player_model import Player
from ratings import overall_from_attributes
from ratings import recalculate_overall as _recalculate_overall
from retirement import DEFAULT_RETIREMENT_CONFIG, RetirementConfig, evaluate_retirement
from tables.difficulty import normalize_difficulty

from .types import EvolutionReport, PostGameResult, StageResult

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Input helpers
# ---------------------------------------------------------------------------


def _players(raw: Iterable[Any]) -> List[Player]:
    return [Player.from_dict(p) for p in (raw or [])]


def _opt(options: Optional[Mapping[str, Any]], *keys: str, default: Any = None) -> Any:
    if not options:
        return default
    for k in keys:
        if k in options and options[k] is not None:
            return options[k]
    return default


def _rng(options: Optional[Mapping[str, Any]], rng: Optional[random.Random]) -> random.Random:
    if rng is not None:
        return rng
    seed = _opt(options, "seed")
    return make_rng(int(seed) if seed is not None else None)


def _as_mapping(game_result: Any) -> Mapping[str, Any]:
    if isinstance(game_result, Mapping):
        return game_result
    to_dict = getattr(game_result, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return {}


def _box_lines(side_box: Any) -> Dict[str, Mapping[str, Any]]:
    """Box score side as {player_id: stat line}; accepts a mapping or a list of lines."""
    if isinstance(side_box, Mapping):
        return {str(k): v for k, v in side_box.items() if isinstance(v, Mapping)}
    out: Dict[str, Mapping[str, Any]] = {}
    for line in side_box or []:
        if isinstance(line, Mapping):
            pid = line.get("player_id") or line.get("playerId") or line.get("id")
            if pid is not None:
                out[str(pid)] = line
    return out


def _member(value: Any, player_id: str) -> bool:
    """Options flag that is either a bool for everyone or a collection of player ids."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (list, tuple, set, frozenset)):
        return player_id in {str(v) for v in value}
    return False


def _file_streak_events(report: EvolutionReport, events: Sequence[StreakEvent]) -> None:
    for ev in events:
        category = "hot_streaks" if ev.kind == "hot" else "cold_streaks"
        report.add(category, ev.player_id, ev.to_row())


def _refresh_overall(player: Player) -> None:
    player.overall = overall_from_attributes(player.attributes)


# ---------------------------------------------------------------------------
# Post-game
# ---------------------------------------------------------------------------


def _post_game_side(
    players: List[Player],
    lines: Mapping[str, Mapping[str, Any]],
    *,
    won: bool,
    team_streak: int,
    opponent: str,
    date: str,
    difficulty: str,
    options: Optional[Mapping[str, Any]],
    rng: random.Random,
) -> EvolutionReport:
    report = EvolutionReport()
    is_playoff = bool(_opt(options, "is_playoff", "isPlayoff", default=False))
    contract_year = _opt(options, "contract_year", "contractYear", default=False)
    extension = _opt(options, "extension_offered", "extensionOffered", default=False)

    for p in players:
        line = lines.get(p.player_id)
        minutes = safe_float(line.get("minutes"), 0.0) if line else 0.0
        if minutes <= 0:
            continue

        warning = apply_game_fatigue(p, minutes)
        if warning is not None:
            report.add("fatigue_warnings", p.player_id, warning.to_row())

        injury = roll_game_injury(p, minutes, rng, is_playoff=is_playoff)
        if injury is not None:
            report.add("injuries", p.player_id, injury.to_row())

        change = update_after_game(
            p,
            won=won,
            minutes=minutes,
            team_streak=team_streak,
            difficulty=difficulty,
            contract_year=_member(contract_year, p.player_id),
            extension_offered=_member(extension, p.player_id),
        )
        if change is not None:
            report.add("morale_changes", p.player_id, change.to_row())

        perf = performance_from_line(line, won=won, date=date, opponent=opponent)
        record_performance(p, perf)
        micro = apply_micro_development(p, line, rng, difficulty=difficulty, rating=perf.rating)
        if micro is not None:
            report.add(micro.reason, p.player_id, micro.to_row())
            if micro.reason == "development":
                note_growth(p, micro.changes)

        _file_streak_events(report, refresh_streak(p))

        p.games_played_this_season = int(p.games_played_this_season) + 1
        p.minutes_played_this_season = float(p.minutes_played_this_season) + minutes
        p.clamp_state()
    return report


def process_post_game(
    home_players: Iterable[Any],
    away_players: Iterable[Any],
    game_result: Any,
    options: Optional[Mapping[str, Any]] = None,
    *,
    rng: Optional[random.Random] = None,
) -> PostGameResult:
    """Fatigue, injury, morale, micro-development and streaks for one game.

    ``options`` keys: difficulty, seed, is_playoff, home_streak / away_streak
    (signed team streaks), contract_year / extension_offered (bool or ids).
    """
    r = _rng(options, rng)
    gr = _as_mapping(game_result)
    difficulty = normalize_difficulty(_opt(options, "difficulty", default="pro"))
    home = _players(home_players)
    away = _players(away_players)

    box = gr.get("box_score") or gr.get("boxScore") or {}
    home_score = safe_int(_opt(gr, "home_score", "homeScore"), 0)
    away_score = safe_int(_opt(gr, "away_score", "awayScore"), 0)
    date = str(_opt(options, "date", default=None) or gr.get("date") or "")

    home_report = _post_game_side(
        home,
        _box_lines(box.get("home")),
        won=home_score > away_score,
        team_streak=safe_int(_opt(options, "home_streak", "homeStreak"), 0),
        opponent=str(gr.get("away_team_name") or gr.get("away_team_id") or ""),
        date=date,
        difficulty=difficulty,
        options=options,
        rng=r,
    )
    away_report = _post_game_side(
        away,
        _box_lines(box.get("away")),
        won=away_score > home_score,
        team_streak=safe_int(_opt(options, "away_streak", "awayStreak"), 0),
        opponent=str(gr.get("home_team_name") or gr.get("home_team_id") or ""),
        date=date,
        difficulty=difficulty,
        options=options,
        rng=r,
    )
    return PostGameResult(home, away, home_report, away_report)


# ---------------------------------------------------------------------------
# Weekly
# ---------------------------------------------------------------------------


def team_records(game_results: Iterable[Any]) -> Dict[str, Tuple[int, int]]:
    """{team_id: (wins, losses)} from completed game results."""
    out: Dict[str, List[int]] = {}
    for raw in game_results or []:
        gr = _as_mapping(raw)
        home_id = str(_opt(gr, "home_team_id", "homeTeamId", default="") or "")
        away_id = str(_opt(gr, "away_team_id", "awayTeamId", default="") or "")
        hs = safe_int(_opt(gr, "home_score", "homeScore"), 0)
        as_ = safe_int(_opt(gr, "away_score", "awayScore"), 0)
        if not home_id or not away_id or hs == as_:
            continue
        out.setdefault(home_id, [0, 0])[0 if hs > as_ else 1] += 1
        out.setdefault(away_id, [0, 0])[0 if as_ > hs else 1] += 1
    return {k: (v[0], v[1]) for k, v in out.items()}


def process_weekly_evolution(
    players: Iterable[Any],
    game_results: Iterable[Any] = (),
    difficulty: Any = "pro",
    week: int = 0,
    options: Optional[Mapping[str, Any]] = None,
    *,
    rng: Optional[random.Random] = None,
) -> StageResult:
    """Injury countdown, recovery, morale, streaks and upgrade points for one week.

    ``options.is_ai`` (bool or player ids) marks players whose upgrade points
    are spent automatically.
    """
    r = _rng(options, rng)
    normalize_difficulty(difficulty)
    records = team_records(game_results)
    auto_upgrade = _opt(options, "is_ai", "isAI", "isAi", default=False)
    report = EvolutionReport()
    out = _players(players)

    for p in out:
        wins, losses = records.get(p.team_id, (0, 0))

        if p.injury is not None:
            recovery = advance_recovery(p, max(1, wins + losses))
            if recovery is not None:
                report.add("recoveries", p.player_id, recovery.to_row())

        recover_fatigue(p, fat_cfg.WEEKLY_RECOVERY, r)

        change = update_weekly(p, wins=wins, losses=losses)
        if change is not None:
            report.add("morale_changes", p.player_id, change.to_row())

        _file_streak_events(report, refresh_streak(p))

        award = award_upgrade_points(p)
        if award is not None:
            report.add("upgrade_points", p.player_id, award.to_row())
        if _member(auto_upgrade, p.player_id) and p.upgrade_points > 0:
            old_overall = int(p.overall)
            bought = spend_upgrade_points(p, r)
            if bought:
                _refresh_overall(p)
                spent = AttributeChange(p.player_id, p.name, "upgrade", bought, old_overall, int(p.overall))
                report.add("development", p.player_id, spent.to_row())
        _refresh_overall(p)

        request = check_trade_request(p, r)
        if request is not None:
            report.add("trade_requests", p.player_id, request.to_row())
        p.clamp_state()

    logger.debug("WEEKLY_EVOLUTION_DONE week=%s players=%d", week, len(out))
    return StageResult(out, report)


# ---------------------------------------------------------------------------
# Monthly
# ---------------------------------------------------------------------------


def process_monthly_development(
    players: Iterable[Any],
    difficulty: Any = "pro",
    options: Optional[Mapping[str, Any]] = None,
) -> StageResult:
    """Development checkpoint. Teammates (same ``team_id``) provide mentor and synergy context.

    ``options.full_roster`` may supply extra teammates that are read but not returned.
    """
    diff = normalize_difficulty(difficulty)
    report = EvolutionReport()
    out = _players(players)

    context = list(out)
    known = {p.player_id for p in out}
    for extra in _players(_opt(options, "full_roster", "fullRoster", default=[])):
        if extra.player_id not in known:
            context.append(extra)
    teams = group_by_team(context)

    for p in out:
        outcome = apply_monthly_development(p, teams.get(p.team_id or "", [p]), diff)
        if outcome.development is not None:
            report.add("development", p.player_id, outcome.development.to_row())
            note_growth(p, outcome.development.changes)
        if outcome.regression is not None:
            report.add("regression", p.player_id, outcome.regression.to_row())
        if outcome.news is not None:
            report.add("news", p.player_id, outcome.news.to_row())
        p.clamp_state()
    return StageResult(out, report)


# ---------------------------------------------------------------------------
# Rest day
# ---------------------------------------------------------------------------


def process_rest_day(
    players: Iterable[Any],
    teams_with_games: Collection[Any] = (),
    options: Optional[Mapping[str, Any]] = None,
    *,
    rng: Optional[random.Random] = None,
    days: Optional[Sequence[Collection[Any]]] = None,
) -> StageResult:
    """Off-day fatigue recovery.

    With ``days`` (one collection of playing team ids per day) a player gets
    one rest-day recovery for every day their team did not play, and
    ``teams_with_games`` is ignored. Otherwise it is a single day.
    """
    r = _rng(options, rng)
    if days is None:
        days = [teams_with_games or ()]
    games: Dict[str, int] = {}
    for day in days:
        for team in {str(t) for t in (day or ())}:
            games[team] = games.get(team, 0) + 1

    out = _players(players)
    for p in out:
        rest_days = len(days) - games.get(p.team_id, 0) if p.team_id else len(days)
        for _ in range(rest_days):
            if recover_fatigue(p, fat_cfg.REST_DAY_RECOVERY, r) <= 0.0:
                break
        p.clamp_state()
    if len(days) > 1:
        logger.debug("REST_DAYS_PROCESSED days=%d players=%d", len(days), len(out))
    return StageResult(out, EvolutionReport())


# ---------------------------------------------------------------------------
# Season end
# ---------------------------------------------------------------------------


def process_season_end(
    players: Iterable[Any],
    season_stats: Optional[Mapping[str, Any]] = None,
    difficulty: Any = "pro",
    options: Optional[Mapping[str, Any]] = None,
    *,
    rng: Optional[random.Random] = None,
    retirement_config: Optional[RetirementConfig] = None,
) -> StageResult:
    """Offseason rollover.

    Aging and the retirement roll use the age the player finished the season
    at; players who stay then turn a year older. ``season_stats`` is accepted
    for callers that track totals outside the player record and is not read.
    """
    r = _rng(options, rng)
    normalize_difficulty(difficulty)
    cfg = retirement_config or DEFAULT_RETIREMENT_CONFIG
    report = EvolutionReport()
    out = _players(players)

    for p in out:
        if p.is_retired:
            continue
        recovery = heal(p)
        if recovery is not None:
            report.add("recoveries", p.player_id, recovery.to_row())
        p.fatigue = 0.0
        p.career_seasons = int(p.career_seasons) + 1

        old_overall = int(p.overall)
        aged = apply_seasonal_aging(p)
        _refresh_overall(p)
        if aged:
            report.add(
                "regression",
                p.player_id,
                {
                    "player_id": p.player_id,
                    "name": p.name,
                    "reason": "aging",
                    "changes": aged,
                    "old_overall": old_overall,
                    "new_overall": int(p.overall),
                },
            )

        decision = evaluate_retirement(p, r, cfg)
        if decision.retired:
            p.is_retired = True
            report.add("retirements", p.player_id, decision.to_row())

        clear_streak(p)
        p.recent_performances = []
        p.games_played_this_season = 0
        p.minutes_played_this_season = 0.0
        p.season_overall_change = 0
        p.contract_years_remaining = max(0, int(p.contract_years_remaining) - 1)
        p.is_rookie = False
        if not p.is_retired:
            p.age = int(p.age) + 1
        _refresh_overall(p)
        p.clamp_state()

    logger.info("SEASON_END_PROCESSED players=%d retired=%d", len(out), report.count("retirements"))
    return StageResult(out, report)


process_offseason = process_season_end


def recalculate_overall(player: Any) -> Player:
    """Copy of ``player`` with the overall recomputed; accepts a record or a mapping."""
    return _recalculate_overall(Player.from_dict(player))
