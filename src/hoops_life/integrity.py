from __future__ import annotations

from .models import ALL_SKILLS, PRIMARY_SKILLS, RATING_MAX, RATING_MIN, PlayerState, Ratings, StatDelta
from .rng import clamp, round_half_up, safe_number

CONDITION_FIELDS = ("health", "peak", "morale", "fame", "team_chem")


def clamp_rating(value: float) -> int:
    return int(clamp(round_half_up(safe_number(value, RATING_MIN)), RATING_MIN, RATING_MAX))


def recompute_overall(ratings: Ratings) -> int:
    ratings.overall = round_half_up(sum(ratings.get(k) for k in PRIMARY_SKILLS) / len(PRIMARY_SKILLS))
    return ratings.overall


def sanitize_ratings(ratings: Ratings) -> None:
    for skill in ALL_SKILLS:
        ratings.set(skill, clamp_rating(getattr(ratings, skill)))
    recompute_overall(ratings)


def sanitize_player(player: PlayerState) -> PlayerState:
    """Coerce every guarded field of ``player`` back into its legal range, in place."""
    player.cash = safe_number(player.cash, 0.0)
    for name in CONDITION_FIELDS:
        setattr(player, name, clamp(safe_number(getattr(player, name), 0.0), 0.0, 100.0))
    player.followers = int(safe_number(player.followers, 0.0))
    player.potential = clamp_rating(player.potential)
    sanitize_ratings(player.ratings)
    for deal in [*player.endorsements, *player.shoe_deals]:
        deal.value = int(safe_number(deal.value, 0.0))
    player.contract.salary = int(safe_number(player.contract.salary, 0.0))
    player.contract.years = max(1, int(safe_number(player.contract.years, 1.0)))
    player.contract.year = max(1, int(safe_number(player.contract.year, 1.0)))
    return player


def apply_delta(player: PlayerState, delta: StatDelta) -> None:
    player.morale = clamp(player.morale + delta.morale, 0.0, 100.0)
    player.fame = clamp(player.fame + delta.fame, 0.0, 100.0)
    player.health = clamp(player.health + delta.health, 0.0, 100.0)
    player.peak = clamp(player.peak + delta.peak, 0.0, 100.0)
    player.team_chem = clamp(player.team_chem + delta.team_chem, 0.0, 100.0)
    player.followers = max(0, player.followers + int(delta.followers))
    if delta.cash:
        player.credit(delta.cash)
    if delta.ratings:
        for skill, change in delta.ratings.items():
            player.ratings.set(skill, clamp_rating(player.ratings.get(skill) + change))
        recompute_overall(player.ratings)
