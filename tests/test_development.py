from __future__ import annotations

import pytest

from conftest import make_player, player_dict
from development import apply_micro_development, performance_rating, record_performance, refresh_streak
from development import config as dev_cfg
from development.growth_engine import (
    DevelopmentContext,
    apply_monthly_development,
    apply_seasonal_aging,
    build_context,
    development_points,
    personality_modifier,
    regression_points,
    synergy_development_boost,
)
from evolution import process_monthly_development, recalculate_overall
from player_model import GamePerformance, Player
from tables.difficulty import get_difficulty

LINE_30_MIN = {"minutes": 30, "points": 22, "rebounds": 5, "assists": 6, "steals": 2, "blocks": 0, "turnovers": 2}


def test_performance_rating_formula():
    assert performance_rating(LINE_30_MIN) == pytest.approx(12.6667, abs=1e-3)
    assert performance_rating({"minutes": 0, "points": 10}) == 0.0


def test_mid_range_game_triggers_no_micro_development(rng):
    p = make_player("p1")
    before = p.to_dict()["attributes"]
    assert apply_micro_development(p, LINE_30_MIN, rng) is None
    assert p.to_dict()["attributes"] == before


def test_big_game_grows_relevant_attributes(rng):
    p = make_player("p1")
    line = {"minutes": 36, "points": 40, "rebounds": 12, "assists": 10, "steals": 3, "blocks": 2, "turnovers": 1, "fg3m": 6}
    change = apply_micro_development(p, line, rng)
    assert change is not None
    assert change.reason == "development"
    assert p.attribute("three_point") > 70


def test_injured_player_skips_micro_development(rng):
    p = make_player("p1", injury={"tier": "minor", "name": "Bruise", "games_remaining": 2})
    line = {"minutes": 36, "points": 40, "rebounds": 12, "assists": 10, "steals": 3, "blocks": 2, "fg3m": 6}
    assert apply_micro_development(p, line, rng) is None


def _log(player, ratings):
    for r in ratings:
        record_performance(player, GamePerformance(rating=r, minutes=30))


def test_hot_streak_starts_after_three_games_and_caps_at_ten():
    p = make_player("p1")
    _log(p, [30, 30])
    assert refresh_streak(p) == []
    _log(p, [30])
    events = refresh_streak(p)
    assert [e.event for e in events] == ["started"]
    assert p.streak.kind == "hot"
    shooting = p.attribute("three_point")
    assert shooting == pytest.approx(72.0)

    _log(p, [30] * 12)
    refresh_streak(p)
    assert p.streak.games == 10
    # refreshing an unchanged log does not stack the bonus
    refresh_streak(p)
    assert p.attribute("three_point") == pytest.approx(shooting)


def test_ending_a_streak_reverses_its_bonus():
    p = make_player("p1")
    _log(p, [5, 5, 5])
    refresh_streak(p)
    assert p.streak.kind == "cold"
    assert p.attribute("three_point") == pytest.approx(68.0)
    _log(p, [15])
    events = refresh_streak(p)
    assert [e.event for e in events] == ["ended"]
    assert p.streak is None
    assert p.attribute("three_point") == pytest.approx(70.0)


def test_streak_reversal_is_exact_at_the_rating_cap():
    p = make_player("p1", attributes={"three_point": 99})
    _log(p, [30, 30, 30])
    refresh_streak(p)
    assert p.streak.applied["three_point"] == pytest.approx(0.0)
    assert p.attribute("mid_range") == pytest.approx(72.0)

    # the per-attribute moves survive a round trip through the wire format
    p = Player.from_dict(p.to_dict())
    _log(p, [15])
    refresh_streak(p)
    assert p.attribute("three_point") == pytest.approx(99.0)
    assert p.attribute("mid_range") == pytest.approx(70.0)
    assert p.attribute("layup") == pytest.approx(70.0)


@pytest.mark.parametrize(
    "record",
    [
        player_dict("kid", level=50, age=19, potential=99, workEthic=100),
        player_dict("vet", level=85, age=38, potential=60, workEthic=30),
    ],
)
def test_season_overall_change_stays_within_cap(record):
    players = [record]
    start = recalculate_overall(record).overall
    for _ in range(12):
        players, _report = process_monthly_development(players, "rookie")
        players = [p.to_dict() for p in players]
    end = recalculate_overall(players[0])
    assert -4 <= end.overall - start <= 5
    assert -4 <= players[0]["season_overall_change"] <= 5


def test_recalculate_overall_is_pure_and_idempotent():
    p = make_player("p1", overall=20)
    once = recalculate_overall(p)
    twice = recalculate_overall(once)
    assert p.overall == 20
    assert once.overall == twice.overall
    assert 40 <= once.overall <= 99


# ---------------------------------------------------------------------------
# Monthly development rules
# ---------------------------------------------------------------------------


def test_mentor_helps_the_two_youngest_teammates_at_a_cost():
    mentor = make_player("vet", age=33, traits=["mentor"])
    kids = [make_player(f"kid{age}", age=age) for age in (21, 22, 23)]
    roster = [mentor, *kids]

    assert [build_context(k, roster).has_mentor for k in kids] == [True, True, False]
    assert personality_modifier(mentor) == pytest.approx(-0.05)

    pro = get_difficulty("pro")
    plain = development_points(kids[0], DevelopmentContext(), pro)
    mentored = development_points(kids[0], DevelopmentContext(has_mentor=True), pro)
    # work ethic 70 contributes 0.35 of base next to the 0.15 mentor share
    assert mentored / plain == pytest.approx(1.5 / 1.35)


def test_badge_synergies_boost_development_up_to_a_cap():
    passer = make_player("pg", badges={"dimer": "gold"})
    shooter = make_player("sg", badges={"catch_and_shoot": "silver"})
    legend = make_player("lg", badges={"catch_and_shoot": "hof"})

    assert synergy_development_boost(passer, [passer, shooter]) == pytest.approx(0.05)
    assert synergy_development_boost(passer, [passer, legend]) == pytest.approx(0.08)
    many = [make_player(f"s{i}", badges={"catch_and_shoot": "gold"}) for i in range(4)]
    assert synergy_development_boost(passer, [passer, *many]) == pytest.approx(0.15)
    assert synergy_development_boost(make_player("x"), [shooter, legend]) == 0.0


@pytest.mark.parametrize(
    "age, expected",
    [(31, 0.0), (32, 0.5 * 0.5 / 12), (35, 0.5 * 0.5 / 12), (36, 1.0 * 0.5 / 12)],
)
def test_regression_starts_at_32_and_grows_with_age(age, expected):
    assert regression_points(make_player("p", age=age), get_difficulty("pro")) == pytest.approx(expected)


def test_young_players_develop_faster_than_prime_players():
    pro = get_difficulty("pro")
    young = development_points(make_player("y", age=21), DevelopmentContext(), pro)
    prime = development_points(make_player("p", age=29), DevelopmentContext(), pro)
    capped = development_points(make_player("c", age=21, potential=60), DevelopmentContext(), pro)
    assert young == pytest.approx(prime * 1.5 / 0.3)
    assert capped == 0.0


def test_big_monthly_jump_is_news_and_respects_the_season_cap(monkeypatch):
    monkeypatch.setattr(dev_cfg, "BASE_RATE", 1.0)
    p = make_player("p", level=40, age=20, potential=99)
    out = apply_monthly_development(p, [p])
    assert out.capped
    assert 3 <= out.overall_change <= 5
    assert out.news is not None and out.news.kind == "breakout"
    assert p.season_overall_change == out.overall_change

    maxed = make_player("m", level=40, age=20, potential=99, season_overall_change=5)
    again = apply_monthly_development(maxed, [maxed])
    assert again.overall_change == 0
    assert again.news is None


def test_steep_monthly_decline_is_news_and_floors_at_minus_four(monkeypatch):
    monkeypatch.setattr(dev_cfg, "REGRESSION_RATE", 60.0)
    p = make_player("old", age=38)
    out = apply_monthly_development(p, [p])
    assert -4 <= out.overall_change <= -2
    assert out.news is not None and out.news.kind == "decline"
    assert out.development is None and out.regression is not None


def test_seasonal_aging_follows_each_category_clock():
    thirty = make_player("a", age=30)
    changes = apply_seasonal_aging(thirty)
    assert thirty.attribute("speed") == pytest.approx(69.2)
    assert thirty.attribute("strength") == 70.0
    assert thirty.attribute("three_point") == 70.0
    assert "strength" not in changes and changes["speed"] == pytest.approx(-0.8)

    vet = make_player("b", age=35)
    apply_seasonal_aging(vet)
    assert vet.attribute("perimeter_defense") == pytest.approx(69.6)
    assert vet.attribute("three_point") == pytest.approx(69.7)
    assert vet.attribute("basketball_iq") == 70.0
