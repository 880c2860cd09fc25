from __future__ import annotations

import random

FIRST_NAMES = [
    "Jalen", "Zion", "Luka", "Jaiden", "Marcus", "CJ", "Devin", "Evan", "Tyrese", "Jamal",
    "Darius", "Kyrie", "Jayson", "Kobe", "Trey", "Jaxson", "Nikola", "Gianni", "Anthony", "Victor",
    "Scoot", "Micah", "Paolo", "Cade", "Keegan", "Bam", "Trae", "LaMelo", "Shai", "Brandon",
]

LAST_NAMES = [
    "Johnson", "Williams", "Miller", "Davis", "Brown", "Wilson", "Moore", "Taylor", "Anderson", "Thomas",
    "Jackson", "White", "Harris", "Martin", "Thompson", "Garcia", "Martinez", "Robinson", "Clark", "Rodriguez",
    "Young", "Allen", "King", "Wright", "Lopez", "Hill", "Scott", "Green", "Adams", "Baker",
]


class NameGenerator:
    """Hands out names without repeats until the first/last pool is exhausted."""

    def __init__(self, rng: random.Random) -> None:
        self._rng = rng
        self._used: set[str] = set()

    def reserve(self, names: list[str]) -> None:
        self._used.update(names)

    def next_name(self) -> str:
        pool_size = len(FIRST_NAMES) * len(LAST_NAMES)
        for _ in range(pool_size):
            name = f"{self._rng.choice(FIRST_NAMES)} {self._rng.choice(LAST_NAMES)}"
            if name not in self._used:
                self._used.add(name)
                return name

        suffix = 2
        base = f"{self._rng.choice(FIRST_NAMES)} {self._rng.choice(LAST_NAMES)}"
        while f"{base} {suffix}" in self._used:
            suffix += 1
        candidate = f"{base} {suffix}"
        self._used.add(candidate)
        return candidate
