from __future__ import annotations

import pytest

from conftest import make_player
from morale import morale_performance_modifier, morale_tier, team_chemistry, update_after_game
from retirement import RetirementInputs, retirement_probability


@pytest.mark.parametrize(
    "morale, tier, modifier",
    [(95, "high", 0.02), (80, "high", 0.02), (60, "normal", 0.0), (30, "low", -0.02), (10, "critical", -0.05)],
)
def test_morale_tiers(morale, tier, modifier):
    assert morale_tier(morale) == tier
    assert morale_performance_modifier(morale) == pytest.approx(modifier)


def test_morale_stays_in_bounds_after_bad_game():
    p = make_player("p1", morale=2)
    update_after_game(p, won=False, minutes=0, team_streak=-5, contract_year=True)
    assert p.morale == 0.0
    q = make_player("p2", morale=99)
    update_after_game(q, won=True, minutes=40, team_streak=5, extension_offered=True)
    assert q.morale == 100.0


def test_team_chemistry_rewards_leadership_and_punishes_ball_hogs():
    plain = [make_player(f"p{i}") for i in range(8)]
    base = team_chemistry(plain)
    with_leader = [make_player("l", traits=["leader"])] + plain[1:]
    hogs = [make_player(f"h{i}", traits=["ball_hog"]) for i in range(3)] + plain[3:]
    assert team_chemistry(with_leader) > base
    assert team_chemistry(hogs) < base
    assert 0.0 <= team_chemistry(hogs) <= 100.0


def _prob(age, ovr=75, injuries=0):
    return retirement_probability(RetirementInputs("p", age=age, ovr=ovr, major_injury_count=injuries))


def test_retirement_probability_is_zero_below_35():
    assert _prob(34, ovr=50, injuries=5) == 0.0


def test_retirement_probability_is_monotone():
    ages = [_prob(a) for a in range(35, 45)]
    assert ages == sorted(ages)
    assert _prob(36, ovr=60) >= _prob(36, ovr=80)
    assert _prob(36, injuries=3) >= _prob(36, injuries=1)
    assert _prob(35) == pytest.approx(0.10)
    assert _prob(37, ovr=60, injuries=1) == pytest.approx(0.10 + 0.20 + 0.15 + 0.05)


def test_traits_scale_post_game_morale_swings():
    calm = make_player("c", morale=50)
    hothead = make_player("h", morale=50, traits=["hot_head"])
    quiet = make_player("q", morale=50, traits=["quiet"])
    for p in (calm, hothead, quiet):
        update_after_game(p, won=True, minutes=40, team_streak=3)
    base = calm.morale - 50
    assert base > 0
    assert hothead.morale - 50 == pytest.approx(base * 2.0)
    assert quiet.morale - 50 == pytest.approx(base * 0.3)
