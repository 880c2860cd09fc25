from __future__ import annotations

import random

from .config import NBA_TEAMS, OFFSEASON_GAMES_PER_WEEK, PLAYOFF_CUTOFF, REGULAR_GAMES_PER_WEEK
from .models import REGULAR_SEASON_GAMES, LeagueState, Phase, PlayerState, TeamStanding
from .rng import clamp, rnd, round_half_up


def initialize_league(rng: random.Random, season: int = 1) -> LeagueState:
    """Seed all 30 franchises with a strength roll and a projected record."""
    standings: dict[str, TeamStanding] = {}
    for key, (name, conference, strength) in NBA_TEAMS.items():
        adjusted = clamp(strength + rnd(rng, -10, 10), 50, 95)
        base_wins = round_half_up((adjusted - 30) * 0.8)
        wins = int(clamp(base_wins + round_half_up(rnd(rng, -10, 10)), 10, 72))
        standings[key] = TeamStanding(
            key=key,
            name=name,
            conference=conference,
            base_strength=strength,
            current_strength=adjusted,
            wins=wins,
            losses=REGULAR_SEASON_GAMES - wins,
            projected_wins=wins,
        )
    return LeagueState(standings=standings, season=season)


def start_regular_season(league: LeagueState) -> None:
    for team in league.standings.values():
        if team.games_played:
            team.last_season_wins = team.wins
            team.last_season_losses = team.losses
            team.projected_wins = team.wins
        team.wins = 0
        team.losses = 0


def update_standings(league: LeagueState, phase: Phase, rng: random.Random) -> None:
    games_this_week = REGULAR_GAMES_PER_WEEK if phase is Phase.REGULAR else OFFSEASON_GAMES_PER_WEEK
    for team in league.standings.values():
        games = max(0, min(games_this_week, REGULAR_SEASON_GAMES - team.games_played))
        form = team.current_strength + rnd(rng, -6, 6)
        win_rate = clamp(form / 100, 0.20, 0.80)
        wins = sum(1 for _ in range(games) if rng.random() < win_rate)
        team.wins += wins
        team.losses += games - wins
        team.current_strength = clamp(team.current_strength + rnd(rng, -0.75, 0.75), 50, 90)


def get_standings(league: LeagueState) -> list[TeamStanding]:
    return sorted(
        league.standings.values(),
        key=lambda t: (t.win_pct, t.wins, -t.losses, t.key),
        reverse=True,
    )


def get_conference_standings(league: LeagueState, conference: str) -> list[TeamStanding]:
    return [team for team in get_standings(league) if team.conference == conference]


def get_conferences(league: LeagueState) -> list[str]:
    return sorted({team.conference for team in league.standings.values()})


def team_rank(league: LeagueState, team_key: str) -> int:
    """1-based league rank; teams missing from the table rank last."""
    for idx, team in enumerate(get_standings(league), start=1):
        if team.key == team_key:
            return idx
    return len(league.standings) + 1


def team_win_chance(player: PlayerState, league: LeagueState) -> float:
    star_power = (player.ratings.overall - 70) * 0.006 + player.fame * 0.002
    chemistry = (player.team_chem - 50) / 100 * 0.08

    franchise = league.standings.get(player.team)
    franchise_strength = franchise.base_strength if franchise else player.team_strength

    rank = team_rank(league, player.team)
    if rank <= 4:
        base = 0.70
    elif rank <= 8:
        base = 0.55
    elif rank <= 16:
        base = 0.35
    elif rank <= 24:
        base = 0.20
    else:
        base = 0.15

    strength = (franchise_strength - 70) / 100 * 0.12
    peak = (player.peak - 50) / 100 * 0.04
    health = (player.health - 50) / 100 * 0.03
    morale = (player.morale - 70) / 100 * 0.02
    return clamp(base + star_power + chemistry + strength + peak + health + morale, 0.05, 0.80)


def record_playoff_field(league: LeagueState, season: int) -> list[str]:
    qualified = [team.key for team in get_standings(league)[:PLAYOFF_CUTOFF]]
    for key in qualified:
        team = league.standings[key]
        team.playoff_appearances += 1
        team.last_playoff = season
    return qualified


def crown_champion(
    league: LeagueState,
    season: int,
    rng: random.Random,
    winner: str | None = None,
    exclude: str | None = None,
) -> str | None:
    """Record the season's title, drawing a strength-weighted winner when none is given."""
    if season in league.championship_history:
        return league.championship_history[season]
    if winner is None:
        field_ = [t for t in get_standings(league)[:PLAYOFF_CUTOFF] if t.key != exclude]
        if not field_:
            return None
        weights = [max(1.0, t.current_strength - 45) for t in field_]
        winner = rng.choices(field_, weights=weights, k=1)[0].key
    team = league.standings.get(winner)
    if team is not None:
        team.championships += 1
        team.last_championship = season
    league.championship_history[season] = winner
    return winner
