"""Trades, contracts, endorsements, shoe deals and premium services."""

from __future__ import annotations

import logging
import random
from typing import Any

from .app import generate_arena, generate_teammates
from .awards import season_averages
from .config import ENDORSEMENTS, PREMIUM_SERVICES, SHOE_BRANDS, TEAM_KEYS
from .integrity import apply_delta
from .models import ActiveService, Contract, Deal, LeagueState, PlayerState, SeasonAverages
from .rng import chance, clamp, irnd, pick, rnd, round_half_up

logger = logging.getLogger(__name__)

SCANDAL_CHANCE = 0.08


def recent_averages(player: PlayerState) -> SeasonAverages:
    """Current-season averages, or last season's once the stats were reset."""
    if player.stats.games == 0 and player.career.seasons:
        return player.career.seasons[-1].averages
    return season_averages(player.stats)


def _franchise_strength(player: PlayerState, league: LeagueState) -> float:
    team = league.standings.get(player.team)
    return team.base_strength if team else player.team_strength


def move_to_team(player: PlayerState, team: str, rng: random.Random) -> str:
    old_team = player.team
    player.team = team
    player.contract.team = team
    player.arena = generate_arena(rng, team)
    player.teammates = generate_teammates(rng)
    return old_team


def trade_success_chance(player: PlayerState, league: LeagueState) -> float:
    avg = recent_averages(player)
    odds = 0.35
    if player.contract.expiring:
        odds *= 0.7
    if avg.pts > 25 or avg.per > 22:
        odds += 0.15
    if avg.pts < 10 and avg.per < 15:
        odds -= 0.15
    if _franchise_strength(player, league) > 85:
        odds -= 0.1
    if player.morale < 40:
        odds += 0.1
    if player.contract.annual_value / 30 > 1.5:
        odds -= 0.1
    return clamp(odds, 0.15, 0.85)


def request_trade(player: PlayerState, league: LeagueState, rng: random.Random) -> dict[str, Any]:
    if not chance(rng, trade_success_chance(player, league)):
        player.morale = clamp(player.morale - 8, 0, 100)
        player.log("Trade", "Trade request denied by management.")
        return {"ok": False, "message": "Trade request denied"}

    destination = pick(rng, [key for key in TEAM_KEYS if key != player.team])
    old_team = move_to_team(player, destination, rng)
    player.team_chem = irnd(rng, 25, 65)
    player.team_strength = irnd(rng, 60, 90)
    player.team_standing = irnd(rng, 5, 20)
    player.log("Trade", f"Successfully traded from {old_team} to {destination}.")
    return {"ok": True, "message": "Trade request approved!", "team": destination}


def request_contract(player: PlayerState, league: LeagueState, rng: random.Random) -> dict[str, Any]:
    """Ask for a raise: an extension before the final two years, a new deal otherwise."""
    contract = player.contract
    current_value = contract.annual_value
    avg = recent_averages(player)
    is_extension = contract.year < contract.years - 1
    is_contract_year = contract.expiring
    strength = _franchise_strength(player, league)

    performance = 1.0
    performance += clamp((player.ratings.overall - 78) / 80, -0.2, 0.3)
    performance += clamp((avg.pts - 18) / 40, -0.15, 0.25)
    performance += clamp((avg.per - 16) / 20, -0.1, 0.15)
    market = 1 + clamp(player.fame / 150, 0, 0.25)
    loyalty = 1.05 if is_extension else 1.0
    max_increase = 1.4 if is_extension else 1.8
    min_decrease = 0.7 if is_contract_year else 0.85

    new_value = current_value * performance * market * loyalty
    new_value *= 1 + rnd(rng, -0.1, 0.15)
    new_value = round_half_up(clamp(new_value, current_value * min_decrease, current_value * max_increase))

    if is_extension:
        odds = 0.65
        if avg.pts > 15 and avg.per > 16:
            odds += 0.15
        if player.ratings.overall >= 80:
            odds += 0.1
        if strength >= 75:
            odds += 0.1
        if player.morale >= 70:
            odds += 0.1
    else:
        odds = 0.35
        if avg.pts > 20:
            odds += 0.2
        if avg.per > 18:
            odds += 0.15
        if strength < 75:
            odds += 0.15

    raise_ratio = new_value / current_value if current_value > 0 else 1.0
    if raise_ratio > 1.5:
        odds -= 0.2
    if raise_ratio < 1.1:
        odds += 0.1
    odds = clamp(odds, 0.1, 0.9)

    label = "Extension" if is_extension else "Contract"
    if not chance(rng, odds):
        player.morale = clamp(player.morale - (3 if is_extension else 6), 0, 100)
        player.log(label, f"{label} negotiation rejected by management.")
        hint = "try again later" if is_extension else "improve performance"
        return {"ok": False, "message": f"{label} request denied - {hint}"}

    increase = round_half_up(new_value - current_value)
    if is_extension:
        years = contract.years + irnd(rng, 2, 4)
        year = contract.year
    else:
        years = irnd(rng, 2, 5)
        year = 1
    player.contract = Contract(
        team=player.team,
        years=years,
        salary=round_half_up(new_value * years),
        year=year,
        clause=contract.clause,
    )
    player.credit(round_half_up(abs(increase) * 0.15))
    sign = "+" if increase > 0 else ""
    player.log(label, f"{label} signed: ${new_value}k/year for {years} years ({sign}${increase}k/year).")
    return {"ok": True, "message": f"{label} signed: ${new_value}k/year!", "annual_value": new_value}


def resolve_expiring_contract(player: PlayerState, averages: SeasonAverages, rng: random.Random) -> bool:
    """Re-sign or hit free agency; returns whether the player changed teams."""
    if averages.pts >= 15 and averages.wins_pct >= 0.4 and player.team_chem >= 60 and chance(rng, 0.80):
        years = irnd(rng, 2, 4)
        salary = round_half_up(
            (player.ratings.overall * 120 + player.fame * 25 + player.followers / 800 + irnd(rng, 200, 800)) * years
        )
        clause = "Player Option" if chance(rng, 0.30) else "None"
        player.contract = Contract(team=player.team, years=years, salary=salary, year=1, clause=clause)
        player.log("Extension", f"You signed an extension with the {player.team} ({years}y, ${salary}k).")
        return False

    best: Contract | None = None
    for _ in range(irnd(rng, 1, 3)):
        team = pick(rng, TEAM_KEYS)
        years = irnd(rng, 2, 4)
        salary = round_half_up(
            (player.ratings.overall * 100 + player.fame * 20 + player.followers / 1000 + irnd(rng, 100, 600)) * years
        )
        if best is None or salary > best.salary:
            clause = "Player Option" if chance(rng, 0.25) else "None"
            best = Contract(team=team, years=years, salary=salary, year=1, clause=clause)

    moved = best.team != player.team
    player.contract = best
    if moved:
        move_to_team(player, best.team, rng)
    player.log("Free Agency", f"You signed with the {best.team} ({best.years}y, ${best.salary}k).")
    return moved


def endorsement_offers(player: PlayerState) -> list[str]:
    signed = {deal.name for deal in player.endorsements}
    return [
        name for name, min_overall, _base, _risk in ENDORSEMENTS
        if player.ratings.overall >= min_overall and name not in signed
    ]


def shoe_deal_offers(player: PlayerState) -> list[str]:
    signed = {deal.name for deal in player.shoe_deals}
    return [
        name for name, min_overall, min_followers, _base, _risk in SHOE_BRANDS
        if player.ratings.overall >= min_overall and player.followers >= min_followers and name not in signed
    ]


def premium_service_offers(player: PlayerState) -> list[str]:
    active = {service.name for service in player.premium_services}
    return [name for name in PREMIUM_SERVICES if name not in active]


def endorsement_multiplier(player: PlayerState) -> float:
    overall = player.ratings.overall
    totals = player.career.totals
    mult = 1.0
    if overall >= 95:
        mult += 4.0
    elif overall >= 90:
        mult += 2.5
    elif overall >= 85:
        mult += 1.5
    elif overall >= 80:
        mult += 0.8
    mult += player.fame / 50 + player.followers / 500_000
    mult += totals.titles * 0.5 + totals.mvps * 0.8 + totals.allstars * 0.1
    return mult


def shoe_multiplier(player: PlayerState) -> float:
    overall = player.ratings.overall
    totals = player.career.totals
    mult = 1.0
    if overall >= 95:
        mult += 6.0
    elif overall >= 90:
        mult += 3.5
    elif overall >= 85:
        mult += 2.0
    elif overall >= 80:
        mult += 1.0
    mult += player.fame / 40 + player.followers / 400_000
    mult += totals.titles * 0.8 + totals.mvps * 1.2 + totals.scoring * 0.3
    return mult


def sign_endorsement(player: PlayerState, rng: random.Random, name: str | None = None) -> dict[str, Any]:
    offers = endorsement_offers(player)
    if not offers:
        return {"ok": False, "message": "No new offers right now"}
    if name is None:
        name = pick(rng, offers)
    elif name not in offers:
        return {"ok": False, "message": f"{name} is not offering a deal"}

    base = next(b for n, _min, b, _risk in ENDORSEMENTS if n == name)
    value = round_half_up(base * endorsement_multiplier(player) * (1 + rnd(rng, -0.1, 0.25)))
    player.credit(value)
    player.endorsements.append(Deal(name=name, value=value))
    player.log("Endorsement", f"Signed with {name} for ${value}k")
    return {"ok": True, "message": f"Signed with {name}", "value": value}


def sign_shoe_deal(player: PlayerState, rng: random.Random, name: str | None = None) -> dict[str, Any]:
    offers = shoe_deal_offers(player)
    if not offers:
        return {"ok": False, "message": "No shoe deals available"}
    if name is None:
        name = pick(rng, offers)
    elif name not in offers:
        return {"ok": False, "message": f"{name} is not offering a shoe deal"}

    base = next(b for n, _min, _followers, b, _risk in SHOE_BRANDS if n == name)
    value = round_half_up(base * shoe_multiplier(player) * (1 + rnd(rng, -0.1, 0.3)))
    player.credit(value)
    player.shoe_deals.append(Deal(name=name, value=value, years=irnd(rng, 2, 5)))
    player.log("Shoe Deal", f"Signed with {name} for ${value}k")
    return {"ok": True, "message": f"Signed with {name}", "value": value}


def hire_premium_service(player: PlayerState, name: str) -> dict[str, Any]:
    service = PREMIUM_SERVICES.get(name)
    if service is None:
        return {"ok": False, "message": f"Unknown service: {name}"}
    if any(active.name == name for active in player.premium_services):
        return {"ok": False, "message": "Already active"}
    cost, duration, effect = service
    if not player.debit(cost):
        return {"ok": False, "message": f"Need ${cost}k"}
    player.premium_services.append(ActiveService(name=name, cost=cost, weeks_left=duration))
    apply_delta(player, effect)
    player.log("Premium", f"Hired {name} for {duration} weeks (-${cost}k).")
    return {"ok": True, "message": f"{name} hired!"}


def tick_premium_services(player: PlayerState) -> list[str]:
    expired: list[str] = []
    remaining: list[ActiveService] = []
    for service in player.premium_services:
        service.weeks_left -= 1
        if service.weeks_left <= 0:
            expired.append(service.name)
            player.log("Premium", f"{service.name} contract expired.")
        else:
            remaining.append(service)
    player.premium_services = remaining
    return expired


def pay_annual_deals(player: PlayerState) -> int:
    total = 0
    for deal in player.endorsements:
        player.credit(deal.value)
        total += deal.value
        player.log("Endorsement", f"Received ${deal.value}k from {deal.name}.")
    for deal in player.shoe_deals:
        player.credit(deal.value)
        total += deal.value
        player.log("Shoe Deal", f"Received ${deal.value}k from {deal.name}.")
    return total


def count_down_shoe_deals(player: PlayerState) -> list[str]:
    ended: list[str] = []
    active: list[Deal] = []
    for deal in player.shoe_deals:
        if deal.years is not None:
            deal.years -= 1
            if deal.years <= 0:
                ended.append(deal.name)
                player.log("Shoe Deal", f"Your {deal.name} shoe deal has run its course.")
                continue
        active.append(deal)
    player.shoe_deals = active
    return ended


def deal_scandal_risk(name: str) -> float:
    """Annual chance that the brand walks away; unknown brands use the league default."""
    for brand, _min, _base, risk in ENDORSEMENTS:
        if brand == name:
            return risk
    for brand, _min, _followers, _base, risk in SHOE_BRANDS:
        if brand == name:
            return risk
    return SCANDAL_CHANCE


def maybe_drop_deal(player: PlayerState, rng: random.Random) -> Deal | None:
    """Roll each deal's scandal risk in turn; at most one deal is lost per offseason."""
    removed = None
    for deals in (player.endorsements, player.shoe_deals):
        for idx, deal in enumerate(deals):
            if chance(rng, deal_scandal_risk(deal.name)):
                removed = deals.pop(idx)
                break
        if removed is not None:
            break
    if removed is None:
        return None
    player.fame = max(0.0, player.fame - 3)
    player.followers = max(0, player.followers - 5000)
    player.log("PR", f"{removed.name} ended your deal after a PR hiccup.")
    logger.info("%s lost the %s deal to a PR scandal", player.name, removed.name)
    return removed
