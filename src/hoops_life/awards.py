from __future__ import annotations

from dataclasses import dataclass
import random

from .config import ALL_TIME_GREATS, CURRENT_LEAGUE_LEADERS
from .models import Career, PlayerState, SeasonAverages, SeasonStats
from .rng import chance, rnd, round_half_up

NO_TITLE_PENALTY = 0.75
NO_MVP_PENALTY = 0.8
NO_ALL_STAR_PENALTY = 0.6
FULL_CAREER_SEASONS = 8


@dataclass(slots=True)
class AwardContext:
    """League-wide thresholds rolled once per season."""

    mvp_pts: float
    dpoy_def: float
    scoring_leader: float
    all_star_pts: float


def season_award_context(rng: random.Random) -> AwardContext:
    return AwardContext(
        mvp_pts=24 + rnd(rng, -2, 2),
        dpoy_def=3.0 + rnd(rng, -0.3, 0.3),
        scoring_leader=26 + rnd(rng, -2, 2),
        all_star_pts=16 + rnd(rng, -2, 2),
    )


def season_averages(stats: SeasonStats) -> SeasonAverages:
    gp = max(1, stats.games)
    logs = stats.game_logs
    n_logs = len(logs)
    return SeasonAverages(
        gp=stats.games,
        mins=stats.minutes / gp,
        pts=stats.points / gp,
        reb=stats.rebounds / gp,
        ast=stats.assists / gp,
        stl=stats.steals / gp,
        blk=stats.blocks / gp,
        fg_pct=stats.fg_made / stats.fg_att if stats.fg_att else 0.0,
        tp_pct=stats.threes_made / stats.threes_att if stats.threes_att else 0.0,
        ft_pct=stats.ft_made / stats.ft_att if stats.ft_att else 0.0,
        wins_pct=stats.wins / gp,
        per=sum(log.line.per for log in logs) / n_logs if n_logs else 0.0,
        ts=sum(log.line.ts for log in logs) / n_logs if n_logs else 0.0,
        usage=sum(log.line.usage for log in logs) / n_logs if n_logs else 0.0,
    )


def end_season_awards(
    player: PlayerState,
    averages: SeasonAverages,
    context: AwardContext,
    rng: random.Random,
) -> list[str]:
    """Season-end honours. Every award rolls independently of the others."""
    avg = averages
    awards: list[str] = []
    if player.stats.champion:
        awards.append("NBA Champion")

    if avg.pts >= context.mvp_pts and avg.wins_pct >= 0.55 and player.ratings.overall >= 83:
        efficient = avg.per >= 23
        well_rounded = (avg.reb >= 5 and avg.ast >= 4) or avg.reb >= 7 or avg.ast >= 7
        winning = avg.wins_pct >= 0.60
        near_scoring_lead = avg.pts >= context.scoring_leader - 2
        if (efficient or well_rounded or winning or near_scoring_lead) and chance(rng, 0.55):
            awards.append("MVP")

    if (
        avg.stl + avg.blk >= context.dpoy_def
        and avg.wins_pct >= 0.40
        and player.ratings.defense >= 78
        and chance(rng, 0.40)
    ):
        awards.append("DPOY")

    if player.stats.champion and player.stats.finals_mvp:
        awards.append("Finals MVP")

    if player.season == 1 and avg.pts >= 14 and avg.mins >= 22:
        awards.append("ROY")

    if avg.pts >= context.scoring_leader - 0.5:
        awards.append("Scoring Title")

    if avg.pts >= context.all_star_pts and avg.wins_pct >= 0.30 and player.ratings.overall >= 72:
        all_star_odds = min(0.8, 0.3 + (avg.pts - 16) * 0.025 + (avg.wins_pct - 0.30) * 0.7)
        if chance(rng, all_star_odds):
            awards.append("All-Star")

    improved = avg.gp > 10 and (avg.pts > 18 or avg.ast > 7 or avg.reb > 10) and chance(rng, 0.3)
    if improved and player.season > 1 and chance(rng, 0.25):
        awards.append("MIP")

    bench_scorer = avg.mins < 24 and avg.pts > 14 and chance(rng, 0.4)
    if bench_scorer and chance(rng, 0.3):
        awards.append("6MOY")
    return awards


def _mean(values: list[float], default: float) -> float:
    # Zero entries come from seasons without a recorded value.
    if not values:
        return default
    return sum(v or default for v in values) / len(values)


def calculate_player_score(career: Career) -> int:
    """Composite legacy score: production, efficiency, peak, accolades, longevity."""
    seasons = career.seasons
    if not seasons:
        return 0
    totals = career.totals
    gp = max(totals.games, 1)

    avg_pts = totals.points / gp
    avg_reb = totals.rebounds / gp
    avg_ast = totals.assists / gp
    avg_stl = totals.steals / gp
    avg_blk = totals.blocks / gp
    avg_ts = _mean(totals.ts, 0.55)
    avg_per = _mean(totals.per, 15.0)

    win_shares = sum(
        max(0.0, s.averages.pts * 0.032 + s.averages.reb * 0.045 + s.averages.ast * 0.054)
        for s in seasons
    )
    bpm = sum(
        (s.averages.pts - 14.6) * 0.1
        + (s.averages.reb - 4.6) * 0.14
        + (s.averages.ast - 2.3) * 0.15
        + (s.averages.stl - 0.9) * 0.22
        + (s.averages.blk - 0.6) * 0.18
        for s in seasons
    ) / len(seasons)
    best = sorted((s.averages.per or 15.0 for s in seasons), reverse=True)[:5]
    peak_per = sum(best) / len(best)

    score = avg_pts * 2.5 + avg_reb * 1.8 + avg_ast * 2.2 + avg_stl * 3.0 + avg_blk * 2.5
    score += (avg_per - 15) * 4
    score += (avg_ts - 0.55) * 100
    score += max(0.0, bpm) * 8
    score += win_shares * 1.5
    score += (peak_per - 20) * 3

    score += totals.titles * 60
    score += totals.finals_mvps * 40
    score += totals.mvps * 50
    score += totals.allstars * 6
    score += totals.dpoys * 20
    score += totals.scoring * 12

    score += len(seasons) * 3
    score += min(10.0, gp / 70) * 5
    score = max(0.0, score)

    # Empty trophy cases and short careers are scaled down hard.
    if totals.titles == 0:
        score *= NO_TITLE_PENALTY
    if totals.mvps == 0:
        score *= NO_MVP_PENALTY
    if totals.allstars == 0:
        score *= NO_ALL_STAR_PENALTY
    score *= min(1.0, len(seasons) / FULL_CAREER_SEASONS)
    if avg_ts < 0.50:
        score *= 0.9
    return round_half_up(score)


def get_hall_of_fame_chance(career: Career) -> int:
    if not career.seasons:
        return 0
    totals = career.totals
    n_seasons = len(career.seasons)
    odds = min(95.0, calculate_player_score(career) / 12)

    if n_seasons < 5:
        odds = min(odds, 15)
    if n_seasons < 8:
        odds = min(odds, 35)
    if n_seasons >= 15:
        odds += 10

    if totals.titles == 0 and totals.mvps == 0:
        odds = min(odds, 45)
        if totals.allstars < 5:
            odds = min(odds, 25)

    if totals.titles >= 3:
        odds += 15
    if totals.mvps >= 2:
        odds += 20
    if totals.finals_mvps >= 2:
        odds += 15
    if totals.allstars >= 10:
        odds += 10

    gp = max(totals.games, 1)
    if totals.points / gp >= 25:
        odds += 8
    if totals.assists / gp >= 8:
        odds += 8
    if totals.rebounds / gp >= 12:
        odds += 8
    return round_half_up(max(0.0, min(100.0, odds)))


def all_time_rankings(player: PlayerState, limit: int = 20) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = [
        {
            "name": name,
            "score": score,
            "championships": titles,
            "mvps": mvps,
            "avg_ppg": ppg,
            "avg_per": per,
            "is_player": False,
        }
        for name, score, titles, mvps, ppg, per in ALL_TIME_GREATS
    ]
    career = player.career
    if career.seasons:
        totals = career.totals
        rows.append({
            "name": player.name,
            "score": calculate_player_score(career),
            "championships": totals.titles,
            "mvps": totals.mvps,
            "avg_ppg": round(totals.points / max(totals.games, 1), 1),
            "avg_per": round(sum(totals.per) / len(totals.per), 1) if totals.per else 15.0,
            "is_player": True,
        })
    rows.sort(key=lambda r: r["score"], reverse=True)
    for idx, row in enumerate(rows, start=1):
        row["rank"] = idx
    return rows[:limit]


def _leaderboard_score(ppg: float, rpg: float, apg: float, per: float, ts: float) -> float:
    return ppg + rpg * 0.8 + apg * 1.2 + (per - 15) * 1.5 + (ts - 0.55) * 50


def current_league_rankings(player: PlayerState) -> list[dict[str, object]]:
    """This season's leaderboard with the player slotted in once they have a stat line."""
    rows: list[dict[str, object]] = [
        {"name": name, "team": team, "ppg": ppg, "rpg": rpg, "apg": apg, "per": per, "ts": ts, "is_player": False}
        for name, team, ppg, rpg, apg, per, ts in CURRENT_LEAGUE_LEADERS
    ]
    if player.stats.games:
        avg = season_averages(player.stats)
    elif player.career.seasons:
        avg = player.career.seasons[-1].averages
    else:
        avg = None
    if avg is not None:
        rows.append({
            "name": player.name,
            "team": player.team,
            "ppg": round(avg.pts, 1),
            "rpg": round(avg.reb, 1),
            "apg": round(avg.ast, 1),
            "per": round(avg.per or 15.0, 1),
            "ts": round(avg.ts or 0.55, 3),
            "is_player": True,
        })
    for row in rows:
        row["score"] = round(
            _leaderboard_score(row["ppg"], row["rpg"], row["apg"], row["per"], row["ts"]), 1
        )
    rows.sort(key=lambda r: r["score"], reverse=True)
    for idx, row in enumerate(rows, start=1):
        row["rank"] = idx
    return rows
