from __future__ import annotations

import math
import random
from typing import Sequence, TypeVar

T = TypeVar("T")


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    # Matches the browser game's Math.round; round() would bias .5 ratings downward.
    return int(math.floor(value + 0.5))


def rnd(rng: random.Random, low: float = 0.0, high: float = 1.0) -> float:
    return rng.random() * (high - low) + low


def irnd(rng: random.Random, low: int, high: int) -> int:
    return rng.randint(low, high)


def chance(rng: random.Random, p: float) -> bool:
    return rng.random() < p


def pick(rng: random.Random, items: Sequence[T]) -> T:
    return items[rng.randrange(0, len(items))]


def binomial(rng: random.Random, n: int, p: float) -> int:
    """Successes over ``n`` Bernoulli trials; never exceeds ``n``."""
    if n <= 0 or p <= 0.0:
        return 0
    if p >= 1.0:
        return n
    return sum(1 for _ in range(n) if rng.random() < p)


def poisson(rng: random.Random, lam: float) -> int:
    """Knuth's multiplication method, fine for the small per-game rates used here."""
    if lam <= 0.0:
        return 0
    limit = math.exp(-lam)
    k = 0
    p = 1.0
    while p > limit:
        k += 1
        p *= rng.random()
    return max(0, k - 1)


def safe_number(value: float, floor: float = 0.0, *, allow_negative: bool = False) -> float:
    """Coerce NaN/inf to ``floor`` and, unless ``allow_negative``, clip at ``floor``."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return floor
    if not math.isfinite(number):
        return floor
    if not allow_negative and number < floor:
        return floor
    return number
