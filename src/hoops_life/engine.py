from __future__ import annotations

import random

from .models import GameStatLine, PlayerState
from .ratings import age_multiplier
from .rng import binomial, clamp, irnd, poisson, rnd, round_half_up

# Linear PER weights (per made/missed event), tuned so an average starter lands near 15.
PER_WEIGHTS: dict[str, float] = {
    "fg_made": 85.910,
    "steal": 53.897,
    "assist": 34.677,
    "ft_made": 46.845,
    "block": 39.190,
    "rebound": 39.190,
    "fg_miss": 39.190,
    "ft_miss": 20.091,
    "turnover": 53.897,
}


def consistency_factor(overall: int) -> float:
    if overall >= 90:
        return 1.2
    if overall >= 85:
        return 1.1
    if overall >= 80:
        return 1.05
    return 1.0


def _tier_bonus(rating: int, steps: tuple[tuple[int, float], ...]) -> float:
    for threshold, bonus in steps:
        if rating >= threshold:
            return bonus
    return 0.0


def _efficiency_multiplier(player: PlayerState, peak_factor: float, health_factor: float) -> float:
    r = player.ratings
    mult = 0.8 + _tier_bonus(r.overall, ((95, 0.18), (90, 0.15), (85, 0.12), (80, 0.08), (75, 0.04)))
    condition_scale = 0.8 if r.overall >= 85 else 1.0
    mult += (peak_factor - 0.5) * 0.12 * condition_scale
    mult += (health_factor - 0.5) * 0.10 * condition_scale
    mult += max(0.0, (r.shooting - 75) / 100 * 0.1)
    mult += max(0.0, (r.finishing - 75) / 100 * 0.1)
    if player.age >= 30:
        experience = 0.04 if r.overall >= 85 else 0.03
        mult += min(experience, (player.age - 30) * 0.007)
        decline = 0.01 if r.overall >= 90 else 0.015
        mult -= max(0, (player.age - 33) * decline)
    return mult


def simulate_game(player: PlayerState, rng: random.Random) -> GameStatLine:
    """Generate one box-score line from the player's ratings and condition."""
    r = player.ratings
    peak_factor = player.peak / 100
    health_factor = player.health / 100
    age_mult = age_multiplier(player.age)
    consistency = consistency_factor(r.overall)

    # Stars get a higher floor and a narrower spread on minutes.
    mins_spread = 6 if r.overall >= 85 else 8
    prime_bonus = 1 if 24 <= player.age <= 32 else 0
    minutes = int(clamp(
        22
        + irnd(rng, -3, mins_spread)
        + round_half_up((r.overall - 70) / 5)
        + round_half_up((peak_factor - 0.5) * 6)
        - round_half_up((100 - player.health) / 15)
        + prime_bonus,
        12,
        42,
    ))

    star_usage = 0.02 if r.overall >= 90 else 0.01 if r.overall >= 85 else 0.0
    usage = clamp(
        0.16
        + (r.overall - 60) / 100 * 0.18
        + star_usage
        + (r.shooting + r.finishing) / 300 * 0.08
        + rnd(rng, -0.02, 0.02),
        0.15,
        0.38,
    )

    shots_base = max(3, round_half_up(minutes * 0.7 * usage))
    efficiency = _efficiency_multiplier(player, peak_factor, health_factor)
    shots = round_half_up(shots_base * max(0.6, efficiency * consistency))

    three_rate = clamp(
        0.25
        + max(0.0, (r.shooting - 70) / 100 * 0.20)
        + (0.02 if r.overall >= 85 else 0.0)
        + rnd(rng, -0.04, 0.04),
        0.18,
        0.50,
    )
    threes = round_half_up(shots * three_rate)
    twos = max(0, shots - threes)

    shooting_bonus = _tier_bonus(r.shooting, ((95, 0.05), (90, 0.04), (85, 0.03), (80, 0.02)))
    finishing_bonus = _tier_bonus(r.finishing, ((95, 0.04), (90, 0.03), (85, 0.02), (80, 0.01)))
    noise = 0.03 if r.overall >= 85 else 0.05

    fg2_pct = clamp(
        0.45 + (r.finishing - 70) / 100 * 0.18 + finishing_bonus + (health_factor - 0.5) * 0.04
        + rnd(rng, -noise, noise),
        0.40,
        0.62,
    )
    fg3_pct = clamp(
        0.33 + (r.shooting - 70) / 100 * 0.15 + shooting_bonus + (peak_factor - 0.5) * 0.03
        + rnd(rng, -noise, noise),
        0.28,
        0.48,
    )
    ft_pct = clamp(
        0.72 + (r.shooting - 70) / 100 * 0.18 + shooting_bonus * 0.5 + rnd(rng, -0.02, 0.02),
        0.62,
        0.92,
    )

    made2 = binomial(rng, twos, fg2_pct)
    made3 = binomial(rng, threes, fg3_pct)
    and_ones = binomial(rng, made2 + made3, 0.06)
    ft_att = and_ones + irnd(rng, 0, 3)
    ft_made = binomial(rng, ft_att, ft_pct)

    playmaking_rate = 0.12 + _tier_bonus(r.playmaking, ((90, 0.10), (80, 0.07), (70, 0.04)))
    rebounding_rate = 0.18 + _tier_bonus(r.rebounding, ((90, 0.14), (80, 0.10), (70, 0.06)))
    defense_rate = 0.03 + _tier_bonus(r.defense, ((90, 0.025), (80, 0.02), (70, 0.015)))

    base_ast = poisson(rng, minutes * (r.playmaking / 100) * playmaking_rate)
    base_reb = poisson(rng, minutes * (r.rebounding / 100) * rebounding_rate)
    base_stl = poisson(rng, minutes * (r.defense / 100) * defense_rate)
    base_blk = poisson(rng, minutes * (r.defense / 100) * defense_rate * 0.8)

    assists = round_half_up(base_ast * age_mult * consistency)
    rebounds = round_half_up(base_reb * age_mult * consistency)
    steals = round_half_up(base_stl * age_mult)
    blocks = round_half_up(base_blk * age_mult)
    points = round_half_up((made2 * 2 + made3 * 3 + ft_made) * age_mult)

    fg_made = made2 + made3
    fg_att = twos + threes
    return GameStatLine(
        minutes=minutes,
        fg_made=fg_made,
        fg_att=fg_att,
        threes_made=made3,
        threes_att=threes,
        ft_made=ft_made,
        ft_att=ft_att,
        points=points,
        rebounds=rebounds,
        assists=assists,
        steals=steals,
        blocks=blocks,
        per=calculate_per(points, rebounds, assists, steals, blocks, fg_made, fg_att, ft_made, ft_att, minutes),
        ts=calculate_ts(points, fg_att, ft_att),
        usage=usage,
        age_multiplier=age_mult,
        consistency_factor=consistency,
    )


def calculate_per(
    points: int,
    rebounds: int,
    assists: int,
    steals: int,
    blocks: int,
    fg_made: int,
    fg_att: int,
    ft_made: int,
    ft_att: int,
    minutes: int,
) -> float:
    if minutes <= 0:
        return 0.0
    w = PER_WEIGHTS
    positive = (
        fg_made * w["fg_made"]
        + steals * w["steal"]
        + assists * w["assist"]
        + ft_made * w["ft_made"]
        + blocks * w["block"]
        + rebounds * w["rebound"]
    )
    negative = (fg_att - fg_made) * w["fg_miss"] + (ft_att - ft_made) * w["ft_miss"]
    # No turnover stat is tracked; estimate ~12% of touches.
    est_turnovers = (fg_att + ft_att * 0.44 + assists) * 0.12
    unadjusted = (positive - negative - est_turnovers * w["turnover"]) / minutes
    return clamp(unadjusted * (48 / 100), 0.0, 50.0)


def calculate_ts(points: int, fg_att: int, ft_att: int) -> float:
    attempts = 2 * (fg_att + 0.44 * ft_att)
    if attempts <= 0:
        return 0.0
    return clamp(points / attempts, 0.0, 1.0)
