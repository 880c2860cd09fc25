from __future__ import annotations

import copy
from dataclasses import asdict
import logging
from pathlib import Path
import random
from typing import Any, Callable

from .app import new_player
from .awards import (
    calculate_player_score,
    end_season_awards,
    get_hall_of_fame_chance,
    season_averages,
    season_award_context,
)
from .config import (
    HEALTH_SESSIONS,
    INJURY_TYPES,
    LIFE_EVENTS,
    PLAYOFF_CUTOFF,
    PRESEASON_WEEKS,
    REGULAR_GAMES_PER_WEEK,
    REGULAR_SEASON_WEEKS,
    SEASON_LOOP_SAFETY_CAP,
    SOCIAL_MEDIA_POSTS,
    TEAM_KEYS,
)
from .engine import simulate_game
from .integrity import apply_delta, sanitize_player
from .league import (
    crown_champion,
    initialize_league,
    record_playoff_field,
    start_regular_season,
    team_rank,
    team_win_chance,
    update_standings,
)
from .market import (
    count_down_shoe_deals,
    endorsement_offers,
    hire_premium_service,
    maybe_drop_deal,
    move_to_team,
    pay_annual_deals,
    premium_service_offers,
    request_contract,
    request_trade,
    resolve_expiring_contract,
    shoe_deal_offers,
    sign_endorsement,
    sign_shoe_deal,
    tick_premium_services,
)
from .models import (
    COUNTING_STATS,
    AwardEntry,
    GameLog,
    HealthSession,
    Legacy,
    OfferKind,
    Phase,
    PlayerState,
    SeasonAverages,
    SeasonRecord,
    SeasonStats,
    StatDelta,
    TrainingFocus,
)
from .persistence import export_game, import_game, load_game, save_game
from .playoffs import simulate_playoffs
from .ratings import progress_aging, should_force_retirement, train as run_training
from .rng import chance, clamp, irnd, pick, round_half_up

logger = logging.getLogger(__name__)

RETIRED_MESSAGE = "Your playing career is over. Start a new career to keep playing."
TRAINING_PHASES = (Phase.PRESEASON, Phase.REGULAR, Phase.OFFSEASON)
MAX_TRAINING_INTENSITY = 3


class CareerSimulator:
    """Owns one career and applies every action as an atomic copy-mutate-replace step."""

    def __init__(
        self,
        player: PlayerState | None = None,
        seed: int | None = None,
        state_path: str | Path | None = None,
    ) -> None:
        self._rng = random.Random(seed)
        self.state_path = Path(state_path) if state_path else None
        self.last_load_error: str = ""
        if player is None and self.state_path is not None:
            player, self.last_load_error = load_game(self.state_path)
        if player is None:
            player = new_player(self._rng)
        if not player.league.standings:
            player.league = initialize_league(self._rng, season=player.season)
        self.player = sanitize_player(player)

    # -- plumbing ---------------------------------------------------------

    def _transition(self, action: Callable[[PlayerState], dict[str, Any]]) -> dict[str, Any]:
        if self.player.retired:
            return {"ok": False, "message": RETIRED_MESSAGE, "events": []}
        draft = copy.deepcopy(self.player)
        mark = len(draft.career.timeline)
        result = action(draft)
        sanitize_player(draft)
        self.player = draft
        self._autosave()
        result.setdefault("ok", True)
        result["events"] = [asdict(ev) for ev in draft.career.timeline[mark:]]
        return result

    def _autosave(self) -> None:
        if self.state_path is None:
            return
        try:
            save_game(self.state_path, self.player, with_backup=False)
        except OSError as exc:
            logger.warning("Autosave to %s failed: %s", self.state_path, exc)

    def save(self) -> None:
        if self.state_path is not None:
            save_game(self.state_path, self.player)

    def export_state(self) -> str:
        return export_game(self.player)

    def import_state(self, text: str) -> dict[str, Any]:
        player, error = import_game(text)
        if player is None:
            return {"ok": False, "message": f"Import failed: {error}"}
        if not player.league.standings:
            player.league = initialize_league(self._rng, season=player.season)
        self.player = player
        self._autosave()
        return {"ok": True, "message": "Save loaded!"}

    def new_career(
        self,
        name: str | None = None,
        age: int | None = None,
        archetype: str | None = None,
    ) -> dict[str, Any]:
        self.player = new_player(self._rng, name=name, age=age, archetype=archetype)
        self.save()
        return {"ok": True, "message": "New career started!", "name": self.player.name}

    def offers(self) -> dict[str, list[str]]:
        return {
            OfferKind.ENDORSEMENT.value: endorsement_offers(self.player),
            OfferKind.SHOE.value: shoe_deal_offers(self.player),
            OfferKind.PREMIUM.value: premium_service_offers(self.player),
        }

    # -- time -------------------------------------------------------------

    def advance_week(self) -> dict[str, Any]:
        def action(p: PlayerState) -> dict[str, Any]:
            self._play_week(p)
            return {"message": f"Season {p.season} {p.phase.value} week {p.week}"}

        return self._transition(action)

    def advance_month(self) -> dict[str, Any]:
        def action(p: PlayerState) -> dict[str, Any]:
            weeks = 0
            for _ in range(4):
                if p.retired:
                    break
                self._play_week(p)
                weeks += 1
            return {"message": f"Simmed {weeks} weeks", "weeks": weeks}

        return self._transition(action)

    def advance_season(self) -> dict[str, Any]:
        """Play weeks until the next Offseason (or retirement), never more than the safety cap."""

        def action(p: PlayerState) -> dict[str, Any]:
            weeks = 0
            while weeks < SEASON_LOOP_SAFETY_CAP and not p.retired:
                self._play_week(p)
                weeks += 1
                if p.phase is Phase.OFFSEASON:
                    break
            else:
                if not p.retired:
                    logger.warning(
                        "Season loop hit the %d-week cap in phase %s; stopping early",
                        SEASON_LOOP_SAFETY_CAP,
                        p.phase.value,
                    )
            return {"message": "Season simulated!", "weeks": weeks}

        return self._transition(action)

    def _play_week(self, p: PlayerState) -> None:
        rng = self._rng
        update_standings(p.league, p.phase, rng)
        tick_premium_services(p)

        if p.peak < 25 and chance(rng, 0.15):
            p.health = clamp(p.health - irnd(rng, 5, 12), 0, 100)
            p.log("Injury", "Minor injury from low peak condition.")

        if p.phase is Phase.PRESEASON:
            if p.week >= PRESEASON_WEEKS:
                start_regular_season(p.league)
                p.phase = Phase.REGULAR
                p.week = 1
                p.log("Season", f"Season {p.season} tip-off!")
            else:
                p.week += 1
        elif p.phase is Phase.REGULAR:
            self.simulate_games(p, REGULAR_GAMES_PER_WEEK)
            if p.week >= REGULAR_SEASON_WEEKS:
                self._close_regular_season(p)
            else:
                p.week += 1
        elif p.phase is Phase.PLAYOFFS:
            self._run_playoffs(p)
        elif p.phase is Phase.OFFSEASON:
            self._roll_over_season(p)
            if p.retired:
                return

        p.peak = clamp(p.peak - 1, 0, 100)
        if chance(rng, 0.3):
            p.followers += irnd(rng, 100, 1000)
        if chance(rng, 0.25):
            self._life_event(p)

    def _close_regular_season(self, p: PlayerState) -> None:
        seed = team_rank(p.league, p.team)
        record_playoff_field(p.league, p.season)
        p.stats.playoffs = seed <= PLAYOFF_CUTOFF
        p.week = 1
        if p.stats.playoffs:
            p.phase = Phase.PLAYOFFS
            p.log("Playoffs", f"Your team (#{seed} seed) clinched a playoff berth!")
        else:
            p.phase = Phase.OFFSEASON
            p.log("Season End", f"Season ended. Team finished #{seed} in standings.")
            champion = crown_champion(p.league, p.season, self._rng, exclude=p.team)
            if champion:
                p.log("League", f"The {champion} won the Season {p.season} title.")

    def _run_playoffs(self, p: PlayerState) -> None:
        result = simulate_playoffs(p, p.league, self._rng)
        p.stats.playoff_wins = result.wins
        p.stats.finals = result.reached_finals
        if result.champion:
            p.stats.champion = True
            p.stats.finals_mvp = result.finals_mvp
            crown_champion(p.league, p.season, self._rng, winner=p.team)
            p.log("Championship", "You win the title and Finals MVP!" if result.finals_mvp else "You are an NBA champion!")
        else:
            if result.eliminated_in:
                p.log("Playoffs", f"Eliminated in the {result.eliminated_in} after {result.wins} series wins.")
            champion = crown_champion(p.league, p.season, self._rng, exclude=p.team)
            if champion:
                p.log("League", f"The {champion} won the Season {p.season} title.")
        p.phase = Phase.OFFSEASON
        p.week = 1

    def _roll_over_season(self, p: PlayerState) -> None:
        averages = self.finalize_season(p)
        if p.retired:
            return
        self.offseason_moves(p, averages)
        p.season += 1
        p.league.season = p.season
        p.phase = Phase.PRESEASON
        p.week = 1
        p.age += 1
        progress_aging(p, self._rng)
        p.log("Season", f"Entering Season {p.season}")

    # -- games ------------------------------------------------------------

    def simulate_games(self, p: PlayerState, count: int) -> dict[str, int]:
        """Play up to ``count`` games, honouring rest days and injuries."""
        rng = self._rng
        played = 0
        game = 0
        while game < count:
            reason = self._rest_reason(p)
            if reason is None and chance(rng, 0.03 + (100 - p.health) / 800 + (p.age - 25) / 300):
                injury = pick(rng, INJURY_TYPES)
                major = chance(rng, 0.1)
                health_loss = irnd(rng, 15, 30) if major else irnd(rng, 5, 15)
                games_out = irnd(rng, 3, 12) if major else irnd(rng, 1, 4)
                p.health = clamp(p.health - health_loss, 0, 100)
                severity = "major" if major else "minor"
                p.log("Injury", f"{severity} {injury} (-{health_loss} health, {games_out} games out).")
                game += games_out
                continue
            if reason is not None:
                p.log("Rest", f"Missed game due to {reason}.")
                game += 1
                continue
            self._play_one(p)
            played += 1
            game += 1

        # A scheduled week never passes without at least one appearance.
        if count > 0 and played == 0:
            self._play_one(p)
            played = 1
        return {"scheduled": count, "played": played}

    def _rest_reason(self, p: PlayerState) -> str | None:
        rng = self._rng
        reason = None
        if p.ratings.overall >= 85 and p.age >= 30 and chance(rng, 0.08):
            reason = "Load Management"
        if p.health < 40 and chance(rng, 0.25):
            reason = "Injury Recovery"
        elif p.health < 60 and chance(rng, 0.12):
            reason = "Minor Injury"
        elif p.health < 80 and chance(rng, 0.06):
            reason = "Precautionary Rest"
        if p.peak < 30 and chance(rng, 0.15):
            reason = "Fatigue Management"
        return reason

    def _play_one(self, p: PlayerState) -> None:
        rng = self._rng
        line = simulate_game(p, rng)
        win = chance(rng, team_win_chance(p, p.league))
        p.stats.add_line(line)
        if win:
            p.stats.wins += 1
        else:
            p.stats.losses += 1

        gain = float(line.points * 150 + line.assists * 120 + line.rebounds * 80 + (800 if win else -300))
        overall = p.ratings.overall
        if overall >= 95:
            gain *= 3.5
        elif overall >= 90:
            gain *= 2.8
        elif overall >= 85:
            gain *= 2.2
        elif overall >= 80:
            gain *= 1.6
        if line.points >= 40:
            gain *= 2.0
        if line.points >= 30:
            gain *= 1.5
        if line.assists >= 15:
            gain *= 1.8
        if line.rebounds >= 20:
            gain *= 1.6
        p.followers = max(0, p.followers + round_half_up(gain))

        p.peak = clamp(p.peak - 1, 0, 100)
        mood = (2 if win else -2) + (1 if line.points >= 25 else 0) - (1 if line.points < 8 else 0)
        p.morale = clamp(p.morale + mood, 0, 100)
        p.stats.game_logs.insert(0, GameLog(game_no=p.stats.games, win=win, line=line))

    # -- season end -------------------------------------------------------

    def finalize_season(self, p: PlayerState) -> SeasonAverages:
        rng = self._rng
        averages = season_averages(p.stats)
        awards = end_season_awards(p, averages, season_award_context(rng), rng)
        for award in awards:
            p.career.awards.append(AwardEntry(season=p.season, award=award))
            p.career.totals.count_award(award)

        salary = round_half_up(p.contract.annual_value)
        p.credit(salary)
        p.log("Contract", f"Received ${salary}k salary payment.")
        pay_annual_deals(p)

        archived = copy.deepcopy(p.stats)
        archived.game_logs = []
        p.career.seasons.append(SeasonRecord(
            season=p.season,
            team=p.team,
            stats=archived,
            averages=averages,
            overall=p.ratings.overall,
            age=p.age,
            awards=list(awards),
        ))
        totals = p.career.totals
        for key in COUNTING_STATS:
            setattr(totals, key, getattr(totals, key) + getattr(p.stats, key))
        totals.per.append(averages.per)
        totals.ts.append(averages.ts)
        totals.usage.append(averages.usage)

        honours = [a for a in awards if a != "NBA Champion"]
        if honours:
            p.log("Awards", f"Season {p.season} awards: {', '.join(honours)}")
        if p.stats.champion:
            p.log("Banner", "You captured the championship!")
        logger.info(
            "Season %d finalized for %s: %.1f ppg, awards=%s", p.season, p.name, averages.pts, awards or "none"
        )

        if should_force_retirement(p, averages):
            p.log("Retirement", f"Forced retirement due to declining performance at age {p.age}.")
            logger.info("%s forced into retirement at age %d", p.name, p.age)
            self._retire(p)
        p.stats = SeasonStats()
        return averages

    def offseason_moves(self, p: PlayerState, averages: SeasonAverages) -> None:
        rng = self._rng
        drift = 2 if p.team_standing <= 8 else 3
        p.team_standing = int(clamp(p.team_standing + irnd(rng, -drift, drift), 1, 30))

        moved = False
        if p.contract.expiring:
            moved = resolve_expiring_contract(p, averages, rng)
        elif chance(rng, 0.08):
            destination = pick(rng, [key for key in TEAM_KEYS if key != p.team])
            old_team = move_to_team(p, destination, rng)
            p.contract.year = min(p.contract.year + 1, p.contract.years)
            p.log("Trade", f"Traded from {old_team} to {destination}.")
            moved = True
        else:
            p.contract.year += 1

        p.team_chem = clamp(p.team_chem + (irnd(rng, -10, 10) if moved else irnd(rng, -3, 6)), 30, 95)
        strength_change = irnd(rng, -4, 4) + (irnd(rng, -6, 6) if moved else 0)
        p.team_strength = clamp(p.team_strength + strength_change, 60, 90)

        count_down_shoe_deals(p)
        maybe_drop_deal(p, rng)

        if p.career.seasons:
            last = p.career.seasons[-1]
            fame_gain = 6 if last.averages.pts > 22 else 3 if last.averages.pts > 16 else -1
            if last.stats.champion:
                fame_gain += 4
            p.fame = clamp(p.fame + fame_gain, 0, 100)
            p.followers = max(0, p.followers + fame_gain * 2000)

    # -- retirement -------------------------------------------------------

    def _retire(self, p: PlayerState) -> Legacy:
        p.retired = True
        p.phase = Phase.RETIRED
        hof_chance = get_hall_of_fame_chance(p.career)
        legacy = Legacy(
            score=calculate_player_score(p.career),
            hall_of_fame_chance=hof_chance,
            inducted=chance(self._rng, hof_chance / 100),
            retired_age=p.age,
            retired_season=p.season,
        )
        p.legacy = legacy
        if legacy.inducted:
            p.log("Hall of Fame", f"Inducted into the Hall of Fame ({hof_chance}% odds).")
        return legacy

    def retire(self) -> dict[str, Any]:
        def action(p: PlayerState) -> dict[str, Any]:
            p.log("Retired", "You have retired.")
            legacy = self._retire(p)
            return {"message": "You have retired.", "legacy": asdict(legacy)}

        return self._transition(action)

    # -- player actions ---------------------------------------------------

    def train(self, focus: TrainingFocus | str, intensity: int = 1) -> dict[str, Any]:
        try:
            focus = TrainingFocus(focus)
        except ValueError:
            return {"ok": False, "message": f"Unknown training focus: {focus}", "events": []}
        intensity = int(clamp(intensity, 1, MAX_TRAINING_INTENSITY))

        def action(p: PlayerState) -> dict[str, Any]:
            if p.phase not in TRAINING_PHASES:
                return {"ok": False, "message": f"No training sessions during the {p.phase.value.lower()}."}
            for note in run_training(p, focus, intensity, self._rng):
                p.log("Training", note)
            return {"message": f"{focus.value} training ({intensity}x) applied"}

        return self._transition(action)

    def health_session(self, kind: HealthSession | str) -> dict[str, Any]:
        try:
            kind = HealthSession(kind)
        except ValueError:
            return {"ok": False, "message": f"Unknown health session: {kind}", "events": []}
        cost, health, peak, morale = HEALTH_SESSIONS[kind]

        def action(p: PlayerState) -> dict[str, Any]:
            if not p.debit(cost):
                return {"ok": False, "message": f"Not enough cash for {kind.value} (${cost}k needed)"}
            apply_delta(p, StatDelta(health=health, peak=peak, morale=morale))
            p.log("Health", f"{kind.value} session completed (-${cost}k).")
            return {"message": f"{kind.value} completed!"}

        return self._transition(action)

    def post_social_media(self) -> dict[str, Any]:
        def action(p: PlayerState) -> dict[str, Any]:
            post = pick(self._rng, SOCIAL_MEDIA_POSTS)
            delta = copy.deepcopy(post.delta)
            delta.followers = round_half_up(delta.followers * (1 + p.fame / 200))
            apply_delta(p, delta)
            p.log("Social Media", f'Posted: "{post.text}"')
            return {"message": "Social media post published!"}

        return self._transition(action)

    def random_life_event(self) -> dict[str, Any]:
        def action(p: PlayerState) -> dict[str, Any]:
            text = self._life_event(p)
            return {"message": text}

        return self._transition(action)

    def _life_event(self, p: PlayerState) -> str:
        event = pick(self._rng, LIFE_EVENTS)
        apply_delta(p, event.delta)
        p.log("Event", event.text)
        return event.text

    def request_trade(self) -> dict[str, Any]:
        return self._transition(lambda p: request_trade(p, p.league, self._rng))

    def request_contract(self) -> dict[str, Any]:
        return self._transition(lambda p: request_contract(p, p.league, self._rng))

    def accept_offer(self, kind: OfferKind | str, name: str | None = None) -> dict[str, Any]:
        try:
            kind = OfferKind(kind)
        except ValueError:
            return {"ok": False, "message": f"Unknown offer kind: {kind}", "events": []}

        def action(p: PlayerState) -> dict[str, Any]:
            if kind is OfferKind.ENDORSEMENT:
                return sign_endorsement(p, self._rng, name)
            if kind is OfferKind.SHOE:
                return sign_shoe_deal(p, self._rng, name)
            if not name:
                return {"ok": False, "message": "Choose a premium service to hire"}
            return hire_premium_service(p, name)

        return self._transition(action)

    def decline_offer(self, kind: OfferKind | str, name: str) -> dict[str, Any]:
        try:
            kind = OfferKind(kind)
        except ValueError:
            return {"ok": False, "message": f"Unknown offer kind: {kind}", "events": []}
        if name not in self.offers()[kind.value]:
            return {"ok": False, "message": f"No open {kind.value} offer from {name}", "events": []}

        def action(p: PlayerState) -> dict[str, Any]:
            p.log("Offer", f"Declined the {name} {kind.value} offer.")
            return {"message": f"Declined {name}"}

        return self._transition(action)

    def summary(self) -> dict[str, Any]:
        p = self.player
        avg = season_averages(p.stats)
        return {
            "name": p.name,
            "age": p.age,
            "team": p.team,
            "season": p.season,
            "week": p.week,
            "phase": p.phase.value,
            "overall": p.ratings.overall,
            "cash": p.cash,
            "retired": p.retired,
            "team_rank": team_rank(p.league, p.team),
            "averages": asdict(avg),
        }
