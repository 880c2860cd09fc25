import random

import pytest

from hoops_life.app import new_player
from hoops_life.config import ARCHETYPES
from hoops_life.models import ALL_SKILLS, PRIMARY_SKILLS, SeasonAverages, TrainingFocus
from hoops_life.ratings import (
    age_multiplier,
    generate_initial_ratings,
    initial_potential,
    progress_aging,
    rookie_contract,
    should_force_retirement,
    train,
)


@pytest.mark.parametrize("archetype", sorted(ARCHETYPES))
def test_initial_ratings_stay_in_draft_range(archetype: str) -> None:
    rng = random.Random(5)
    for _ in range(25):
        ratings = generate_initial_ratings(rng, archetype)
        for skill in ALL_SKILLS:
            assert 40 <= ratings.get(skill) <= 95
        mean = sum(ratings.get(k) for k in PRIMARY_SKILLS) / 5
        assert abs(ratings.overall - mean) <= 0.5


def test_unknown_archetype_falls_back_to_a_profile() -> None:
    ratings = generate_initial_ratings(random.Random(1), "Goalie")
    assert 40 <= ratings.overall <= 95


@pytest.mark.parametrize(
    "age,expected",
    [(20, 1.0), (23, 1.0), (25, 1.10), (27, 1.2), (30, 1.05), (31, 0.96), (35, 0.80), (38, 0.56), (41, 0.5)],
)
def test_age_multiplier_curve(age: int, expected: float) -> None:
    assert age_multiplier(age) == pytest.approx(expected)


def test_potential_is_bounded() -> None:
    rng = random.Random(8)
    assert all(70 <= initial_potential(rng, ovr) <= 99 for ovr in (45, 60, 80, 95) for _ in range(20))


def test_rookie_contract_years_by_overall() -> None:
    rng = random.Random(4)
    assert rookie_contract(rng, 80).years == 4
    assert rookie_contract(rng, 75).years == 3
    assert rookie_contract(rng, 65).years == 2
    deal = rookie_contract(rng, 72, team="Heat")
    assert deal.team == "Heat"
    assert deal.year == 1
    assert (72 * 80 + 100) * 3 <= deal.salary <= (72 * 80 + 500) * 3
    assert deal.clause in {"None", "Team Option"}


def test_aging_declines_veterans_and_keeps_ratings_in_range() -> None:
    rng = random.Random(12)
    player = new_player(rng, age=36)
    start = player.ratings.overall
    for _ in range(6):
        progress_aging(player, rng)
        player.age += 1
    assert player.ratings.overall < start
    for skill in ALL_SKILLS:
        assert 40 <= player.ratings.get(skill) <= 99


def test_training_spends_peak_and_never_lowers_target_skill() -> None:
    rng = random.Random(21)
    player = new_player(rng, archetype="Shooter")
    player.peak = 90
    before = player.ratings.shooting
    notes = train(player, TrainingFocus.SHOOTING, 2, rng)
    assert player.peak == 74
    assert player.ratings.shooting >= before
    assert notes[-1] == "Shooting session (2x) completed."


def test_training_auto_rests_an_exhausted_player() -> None:
    rng = random.Random(22)
    player = new_player(rng)
    player.peak = 10
    notes = train(player, TrainingFocus.DEFENSE, 1, rng)
    assert notes[0].startswith("Auto-rest")
    assert player.peak == 17


def test_recovery_restores_peak() -> None:
    rng = random.Random(23)
    player = new_player(rng)
    player.peak = 50
    train(player, TrainingFocus.RECOVERY, 3, rng)
    assert player.peak == 74


def test_forced_retirement_rules() -> None:
    player = new_player(random.Random(9), age=34)
    washed = SeasonAverages(gp=40, mins=6.0, pts=2.0, reb=1.0, ast=0.5)
    assert not should_force_retirement(player, washed)
    player.age = 35
    assert should_force_retirement(player, washed)
    player.ratings.overall = 70
    assert not should_force_retirement(player, SeasonAverages(gp=60, mins=25.0, pts=12.0, reb=4.0, ast=3.0))
    player.ratings.overall = 54
    assert should_force_retirement(player, SeasonAverages(gp=60, mins=25.0, pts=12.0, reb=4.0, ast=3.0))


def test_age_multiplier_never_rises_after_peak() -> None:
    values = [age_multiplier(age) for age in range(27, 45)]
    assert all(later <= earlier for earlier, later in zip(values, values[1:]))
