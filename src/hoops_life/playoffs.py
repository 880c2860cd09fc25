from __future__ import annotations

from dataclasses import dataclass, field
import random

from .awards import season_averages
from .config import PLAYOFF_CUTOFF
from .league import team_rank, team_win_chance
from .models import LeagueState, PlayerState
from .rng import chance

PLAYOFF_ROUNDS = ("First Round", "Conference Semifinals", "Conference Finals", "NBA Finals")
ROUND_DIFFICULTY = (1.0, 0.9, 0.8, 0.7)


@dataclass(slots=True)
class PlayoffResult:
    champion: bool = False
    finals_mvp: bool = False
    wins: int = 0
    rounds: list[tuple[str, bool]] = field(default_factory=list)
    seed: int = 0

    @property
    def qualified(self) -> bool:
        return bool(self.rounds)

    @property
    def reached_finals(self) -> bool:
        return len(self.rounds) == len(PLAYOFF_ROUNDS)

    @property
    def eliminated_in(self) -> str | None:
        if not self.rounds or self.rounds[-1][1]:
            return None
        return self.rounds[-1][0]


def finals_mvp_chance(player: PlayerState, seed: int) -> float:
    avg = season_averages(player.stats)
    odds = 0.15
    if avg.pts >= 25:
        odds += 0.25
    if avg.pts >= 20 and avg.reb >= 8 and avg.ast >= 6:
        odds += 0.20
    if player.ratings.overall >= 85:
        odds += 0.15
    odds += 0.3 if seed <= 4 else 0.2 if seed <= 8 else 0.1
    return min(0.75, odds)


def simulate_playoffs(player: PlayerState, league: LeagueState, rng: random.Random) -> PlayoffResult:
    """Best-of-series abstraction: one draw per round, the first loss ends the run."""
    seed = team_rank(league, player.team)
    result = PlayoffResult(seed=seed)
    if seed > PLAYOFF_CUTOFF:
        return result

    for round_name, difficulty in zip(PLAYOFF_ROUNDS, ROUND_DIFFICULTY):
        won = chance(rng, team_win_chance(player, league) * difficulty)
        result.rounds.append((round_name, won))
        if not won:
            break
        result.wins += 1

    if result.wins == len(PLAYOFF_ROUNDS):
        result.champion = True
        result.finals_mvp = chance(rng, finals_mvp_chance(player, seed))
    return result
