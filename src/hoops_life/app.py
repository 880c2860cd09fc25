from __future__ import annotations

import random
from typing import Iterable

from .config import ARCHETYPES, ARENAS, POSITIONS
from .league import get_standings, initialize_league
from .models import Career, LeagueState, PlayerState, SeasonRecord, Teammate
from .names import NameGenerator
from .ratings import generate_initial_ratings, initial_potential, rookie_contract
from .rng import irnd, pick


def generate_arena(rng: random.Random, team: str) -> str:
    return f"{team.split(' ')[0]} {pick(rng, ARENAS)}"


def generate_teammates(rng: random.Random, name_gen: NameGenerator | None = None) -> list[Teammate]:
    names = name_gen or NameGenerator(rng)
    return [
        Teammate(
            name=names.next_name(),
            overall=irnd(rng, 55, 85),
            ppg=irnd(rng, 8, 24),
            rpg=irnd(rng, 3, 12),
            apg=irnd(rng, 2, 9),
            position=pick(rng, POSITIONS),
        )
        for _ in range(irnd(rng, 4, 7))
    ]


def new_player(
    rng: random.Random,
    name: str | None = None,
    age: int | None = None,
    archetype: str | None = None,
) -> PlayerState:
    """Draft a fresh player onto a random franchise with a new league around them."""
    name_gen = NameGenerator(rng)
    name = (name or "").strip() or name_gen.next_name()
    name_gen.reserve([name])
    age = int(age) if age else irnd(rng, 18, 22)
    if archetype not in ARCHETYPES:
        archetype = pick(rng, tuple(ARCHETYPES))

    ratings = generate_initial_ratings(rng, archetype)
    contract = rookie_contract(rng, ratings.overall)
    player = PlayerState(
        name=name,
        age=age,
        archetype=archetype,
        ratings=ratings,
        potential=initial_potential(rng, ratings.overall),
        contract=contract,
        team=contract.team,
        arena=generate_arena(rng, contract.team),
        jersey=irnd(rng, 0, 99),
        followers=irnd(rng, 1000, 5000),
        team_chem=irnd(rng, 40, 75),
        team_strength=irnd(rng, 65, 85),
        team_standing=irnd(rng, 8, 15),
        teammates=generate_teammates(rng, name_gen),
        league=initialize_league(rng),
        career=Career(),
    )
    player.log("Signed", f"Drafted by {contract.team}")
    return player


def format_standings(league: LeagueState, highlight: str | None = None) -> str:
    lines = ["Pos Team                      Conf   W  L   Pct"]
    for idx, team in enumerate(get_standings(league), start=1):
        marker = "*" if team.key == highlight else " "
        lines.append(
            f"{idx:>3}{marker}{team.name:<25} {team.conference:<4} {team.wins:>3} {team.losses:>2}"
            f" {team.win_pct:.3f}"
        )
    return "\n".join(lines)


def format_career_seasons(seasons: Iterable[SeasonRecord]) -> str:
    lines = ["Season Team           Age OVR GP   PTS  REB  AST   PER Awards"]
    for rec in seasons:
        avg = rec.averages
        lines.append(
            f"{rec.season:>6} {rec.team:<14} {rec.age:>3} {rec.overall:>3} {avg.gp:>2}"
            f" {avg.pts:>5.1f} {avg.reb:>4.1f} {avg.ast:>4.1f} {avg.per:>5.1f} {', '.join(rec.awards)}"
        )
    return "\n".join(lines)
