import math
import random

import pytest

from hoops_life.app import new_player
from hoops_life.integrity import apply_delta, sanitize_player
from hoops_life.models import ALL_SKILLS, Deal, StatDelta


def test_sanitize_repairs_corrupted_state() -> None:
    player = new_player(random.Random(80))
    player.cash = math.nan
    player.health = 140
    player.morale = -12
    player.peak = math.inf
    player.followers = -50
    player.ratings.shooting = 120
    player.ratings.defense = 12.6
    player.endorsements = [Deal(name="Swish Soda", value=-30)]
    sanitize_player(player)

    assert player.cash == 0.0
    assert player.health == 100.0
    assert player.morale == 0.0
    assert player.peak == 0.0
    assert player.followers == 0
    assert player.ratings.shooting == 99
    assert player.ratings.defense == 40
    assert player.endorsements[0].value == 0
    for skill in ALL_SKILLS:
        assert isinstance(player.ratings.get(skill), int)
    primary = [player.ratings.shooting, player.ratings.finishing, player.ratings.playmaking,
               player.ratings.defense, player.ratings.rebounding]
    assert player.ratings.overall == int(math.floor(sum(primary) / 5 + 0.5))


def test_debit_refuses_overdraft() -> None:
    player = new_player(random.Random(81))
    player.cash = 20
    assert not player.debit(25)
    assert player.cash == 20
    assert player.debit(20)
    assert player.cash == 0
    player.credit(math.nan)
    assert player.cash == 0


def test_apply_delta_clamps_and_recomputes_overall() -> None:
    player = new_player(random.Random(82))
    player.health = 95
    player.cash = 3
    apply_delta(player, StatDelta(health=20, cash=-10, followers=-10**9, ratings={"shooting": 500}))
    assert player.health == 100
    assert player.cash == 0
    assert player.followers == 0
    assert player.ratings.shooting == 99


def test_ratings_reject_overall_as_skill() -> None:
    player = new_player(random.Random(83))
    with pytest.raises(KeyError):
        player.ratings.set("overall", 99)
