import random

import pytest

from hoops_life.app import new_player
from hoops_life.engine import calculate_per, calculate_ts, consistency_factor, simulate_game
from hoops_life.models import Ratings


def _star(rng: random.Random):
    player = new_player(rng, age=27)
    for skill in ("shooting", "finishing", "playmaking", "defense", "rebounding"):
        player.ratings.set(skill, 92)
    player.ratings.overall = 92
    return player


def test_box_score_is_internally_consistent() -> None:
    rng = random.Random(31)
    player = new_player(rng)
    for _ in range(300):
        line = simulate_game(player, rng)
        assert 12 <= line.minutes <= 42
        assert 0 <= line.fg_made <= line.fg_att
        assert 0 <= line.threes_att <= line.fg_att
        assert 0 <= line.threes_made <= line.threes_att
        assert 0 <= line.ft_made <= line.ft_att
        assert 0.15 <= line.usage <= 0.38
        assert 0.0 <= line.per <= 50.0
        assert 0.0 <= line.ts <= 1.0
        assert min(line.points, line.rebounds, line.assists, line.steals, line.blocks) >= 0


def test_stars_outproduce_role_players() -> None:
    rng = random.Random(32)
    role = new_player(rng, age=27)
    role.ratings = Ratings(**{k: 55 for k in Ratings.__dataclass_fields__})
    star = _star(rng)
    role_pts = sum(simulate_game(role, rng).points for _ in range(200))
    star_pts = sum(simulate_game(star, rng).points for _ in range(200))
    assert star_pts > role_pts


def test_line_records_multipliers() -> None:
    rng = random.Random(33)
    star = _star(rng)
    line = simulate_game(star, rng)
    assert line.consistency_factor == 1.2
    assert line.age_multiplier == pytest.approx(1.2)


@pytest.mark.parametrize("overall,expected", [(95, 1.2), (90, 1.2), (87, 1.1), (80, 1.05), (79, 1.0)])
def test_consistency_factor_tiers(overall: int, expected: float) -> None:
    assert consistency_factor(overall) == expected


def test_per_is_zero_without_minutes_and_clamped() -> None:
    assert calculate_per(30, 10, 10, 2, 2, 12, 20, 6, 6, 0) == 0.0
    assert calculate_per(0, 0, 0, 0, 0, 0, 30, 0, 10, 30) == 0.0
    assert calculate_per(80, 25, 20, 8, 8, 35, 40, 10, 10, 10) == 50.0
    assert 0.0 < calculate_per(20, 6, 4, 1, 1, 8, 16, 4, 5, 32) < 50.0


def test_true_shooting() -> None:
    assert calculate_ts(10, 0, 0) == 0.0
    assert calculate_ts(20, 15, 5) == pytest.approx(20 / (2 * (15 + 2.2)))
    assert calculate_ts(100, 1, 0) == 1.0
