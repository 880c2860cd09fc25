from __future__ import annotations

import random

from .config import ARCHETYPES, TEAM_KEYS
from .integrity import clamp_rating, recompute_overall
from .models import ALL_SKILLS, PRIMARY_SKILLS, Contract, PlayerState, Ratings, SeasonAverages, TrainingFocus
from .rng import chance, clamp, irnd, pick, rnd, round_half_up

INITIAL_RATING_MAX = 95


def generate_initial_ratings(rng: random.Random, archetype: str) -> Ratings:
    base = ARCHETYPES.get(archetype) or ARCHETYPES["Scorer"]
    ratings = Ratings()
    for skill in ALL_SKILLS:
        jittered = clamp(base[skill] + irnd(rng, -6, 6), 40, INITIAL_RATING_MAX)
        ratings.set(skill, int(jittered))
    recompute_overall(ratings)
    return ratings


def initial_potential(rng: random.Random, overall: int) -> int:
    return int(clamp(overall + irnd(rng, 4, 15), 70, 99))


def rookie_contract(rng: random.Random, overall: int, team: str | None = None) -> Contract:
    years = 2 + (2 if overall > 78 else 1 if overall > 70 else 0)
    salary = round_half_up((overall * 80 + irnd(rng, 100, 500)) * years)
    clause = "Team Option" if chance(rng, 0.2) else "None"
    return Contract(team=team or pick(rng, TEAM_KEYS), years=years, salary=salary, year=1, clause=clause)


def age_multiplier(age: int) -> float:
    """Production multiplier: flat to 23, peak 1.2 at 27, 0.5 floor from 39."""
    if age <= 23:
        return 1.0
    if age <= 26:
        return 1.0 + (age - 23) * 0.05
    if age == 27:
        return 1.2
    if age <= 30:
        return 1.2 - (age - 27) * 0.05
    if age <= 35:
        return 1.0 - (age - 30) * 0.04
    if age <= 38:
        return 0.8 - (age - 35) * 0.08
    return 0.5


def aging_delta(rng: random.Random, age: int, room_to_grow: int) -> float:
    if age <= 24:
        growth = rnd(rng, 0.2, 1.5) if room_to_grow > 0 else rnd(rng, -0.5, 0.5)
        return clamp(growth + rnd(rng, -0.4, 0.4), -1.0, 2.0)
    if age <= 28:
        return clamp(rnd(rng, -0.3, 1.2), -0.8, 1.5)
    if age <= 32:
        return clamp(rnd(rng, -1.0, 0.6), -1.6, 1.0)
    return clamp(rnd(rng, -2.2, -0.2), -3.0, 0.2)


def progress_aging(player: PlayerState, rng: random.Random) -> float:
    delta = aging_delta(rng, player.age, player.potential - player.ratings.overall)
    for skill in ALL_SKILLS:
        current = player.ratings.get(skill)
        if skill in PRIMARY_SKILLS:
            updated = current + delta + rnd(rng, -0.4, 0.4)
        else:
            updated = current + delta * 0.7 + rnd(rng, -0.3, 0.3)
        player.ratings.set(skill, clamp_rating(updated))
    recompute_overall(player.ratings)
    return delta


def _skill_level_scale(rating: int) -> float:
    if rating >= 95:
        return 0.4
    if rating >= 90:
        return 0.5
    if rating >= 85:
        return 0.65
    if rating >= 80:
        return 0.75
    if rating >= 75:
        return 0.85
    if rating >= 70:
        return 0.9
    return 1.0


def train(player: PlayerState, focus: TrainingFocus, intensity: int, rng: random.Random) -> list[str]:
    """One training session; returns the timeline texts it produced."""
    notes: list[str] = []
    intensity = max(1, int(intensity))
    if player.peak < 25 and focus is not TrainingFocus.RECOVERY:
        player.peak = clamp(player.peak + 15, 0, 100)
        player.morale = clamp(player.morale + 2, 0, 100)
        notes.append("Auto-rest applied before training.")

    if focus is TrainingFocus.RECOVERY:
        peak_change = 8 * intensity
        morale_base = 2
    else:
        peak_change = -8 * intensity
        morale_base = 1 if chance(rng, 0.8) else -1
    player.peak = clamp(player.peak + peak_change, 0, 100)
    player.morale = clamp(player.morale + morale_base * intensity, 0, 100)

    base_boost = 0.15 + rnd(rng, 0, 0.25)
    # Cumulative age brackets: a 33-year-old pays all four.
    for threshold, factor in ((25, 0.95), (28, 0.9), (30, 0.85), (33, 0.8)):
        if player.age >= threshold:
            base_boost *= factor

    for skill in focus.skills:
        boost = base_boost * intensity * _skill_level_scale(player.ratings.get(skill))
        boost *= player.peak / 100
        if chance(rng, 0.2):
            boost *= 1.8
        elif chance(rng, 0.1):
            boost *= 0.6
        player.ratings.set(skill, clamp_rating(player.ratings.get(skill) + boost))
    recompute_overall(player.ratings)
    notes.append(f"{focus.value} session ({intensity}x) completed.")
    return notes


def should_force_retirement(player: PlayerState, averages: SeasonAverages) -> bool:
    if player.age < 35:
        return False
    washed_up = (
        averages.pts < 3.0
        and averages.reb < 1.5
        and averages.ast < 1.0
        and averages.mins < 8.0
    )
    return washed_up or player.ratings.overall < 55
