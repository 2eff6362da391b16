from __future__ import annotations

import random

import pytest

from conftest import make_player
from fatigue import apply_game_fatigue, fatigue_multiplier, fatigue_penalty, game_fatigue_gain, in_rookie_wall, recover_fatigue
from injury import advance_recovery, injury_chance, roll_game_injury
from injury.service import apply_permanent_damage, roll_tier
from player_model import Injury


def test_forty_minutes_adds_twenty_fatigue():
    p = make_player("p1", fatigue=10)
    apply_game_fatigue(p, 40)
    assert p.fatigue == pytest.approx(30.0)


def test_rookie_wall_multiplies_gain_inside_window_only():
    p = make_player("r1", isRookie=True, gamesPlayedThisSeason=55)
    assert in_rookie_wall(p)
    assert game_fatigue_gain(p, 40) == pytest.approx(30.0)
    p.games_played_this_season = 70
    assert not in_rookie_wall(p)
    assert game_fatigue_gain(p, 40) == pytest.approx(20.0)


def test_fatigue_is_clamped_and_warning_emitted_on_crossing():
    p = make_player("p1", fatigue=65)
    warning = apply_game_fatigue(p, 48)
    assert warning is not None
    assert warning.fatigue_before == 65
    p.fatigue = 95
    apply_game_fatigue(p, 48)
    assert p.fatigue == 100.0
    assert apply_game_fatigue(p, 10) is None


def test_recovery_never_goes_below_zero(rng):
    p = make_player("p1", fatigue=5)
    for _ in range(3):
        recover_fatigue(p, 25, rng)
    assert p.fatigue == 0.0


def test_fatigue_penalty_is_linear_above_fifty():
    assert fatigue_penalty(50) == 0.0
    assert fatigue_penalty(75) == pytest.approx(0.075)
    assert fatigue_penalty(100) == pytest.approx(0.15)
    assert fatigue_multiplier(100) == pytest.approx(0.85)


def test_injury_chance_is_capped():
    fragile = make_player("old", age=39, fatigue=100, attributes={"durability": 0})
    assert injury_chance(fragile, 48, is_playoff=True) <= 0.05
    sturdy = make_player("young", age=22, attributes={"durability": 99})
    assert injury_chance(sturdy, 10) < injury_chance(fragile, 10)


class _AlwaysHit(random.Random):
    def random(self) -> float:
        return 0.0


def test_successful_roll_records_injury():
    p = make_player("p1")
    event = roll_game_injury(p, 36, _AlwaysHit(1))
    assert event is not None
    assert p.is_injured
    assert p.injury.games_remaining == event.games_out
    assert p.career_injury_count == 1


def test_injured_player_is_not_rolled_again():
    p = make_player("p1", injury={"tier": "minor", "name": "Bruise", "games_remaining": 2})
    assert roll_game_injury(p, 48, _AlwaysHit(1)) is None
    assert p.career_injury_count == 0


def test_recovery_counts_down_and_clears():
    p = make_player("p1")
    p.injury = Injury(tier="moderate", name="Hamstring Strain", games_remaining=5)
    assert advance_recovery(p, 3) is None
    assert p.injury.games_remaining == 2
    healed = advance_recovery(p, 3)
    assert healed is not None
    assert p.injury is None
    assert not p.is_injured


def test_injury_tiers_follow_their_weights():
    rng = random.Random(7)
    draws = 20000
    counts = {}
    for _ in range(draws):
        tier = roll_tier(rng).tier
        counts[tier] = counts.get(tier, 0) + 1
    assert counts["minor"] / draws == pytest.approx(0.60, abs=0.02)
    assert counts["moderate"] / draws == pytest.approx(0.30, abs=0.02)
    assert counts["severe"] / draws == pytest.approx(0.08, abs=0.01)
    assert counts["season_ending"] / draws == pytest.approx(0.02, abs=0.006)


def test_permanent_damage_hits_physical_attributes_down_to_a_floor(rng):
    p = make_player("p1", attributes={"speed": 26.0, "acceleration": 80.0})
    drops = apply_permanent_damage(p, 3, rng)
    assert p.attribute("speed") == 25.0
    assert drops["speed"] == pytest.approx(1.0)
    assert 80.0 - 3 * 1.2 <= p.attribute("acceleration") <= 80.0 - 3 * 0.8
    assert set(drops) == {"speed", "acceleration", "vertical", "stamina"}
    assert p.attribute("three_point") == 70.0
    assert apply_permanent_damage(p, 0, rng) == {}
