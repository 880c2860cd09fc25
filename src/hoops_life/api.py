from __future__ import annotations

from dataclasses import asdict
import logging
import os
from pathlib import Path
from threading import Lock
from typing import Any, Callable

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .awards import all_time_rankings, calculate_player_score, current_league_rankings, get_hall_of_fame_chance
from .config import ARCHETYPES, DATA_DIR_ENV
from .league import get_conference_standings, get_conferences, get_standings, team_rank
from .models import HealthSession, OfferKind, TeamStanding, TrainingFocus
from .persistence import player_to_dict
from .season import CareerSimulator

logger = logging.getLogger(__name__)

SAVE_FILE = "basketball_life_save.json"


class AdvanceSelection(BaseModel):
    span: str = "week"


class TrainingSelection(BaseModel):
    focus: str
    intensity: int = 1


class HealthSelection(BaseModel):
    kind: str


class OfferSelection(BaseModel):
    kind: str
    name: str | None = None


class NewCareerSelection(BaseModel):
    name: str | None = None
    age: int | None = None
    archetype: str | None = None


class ImportSelection(BaseModel):
    save: str


class SimService:
    def __init__(self, data_root: Path | None = None, seed: int | None = None) -> None:
        env_root = os.getenv(DATA_DIR_ENV)
        self.data_root = data_root or (Path(env_root) if env_root else Path(__file__).resolve().parents[2])
        self.save_path = self.data_root / SAVE_FILE
        self.simulator = CareerSimulator(seed=seed, state_path=self.save_path)
        if self.simulator.last_load_error:
            logger.warning("Starting a new career: %s", self.simulator.last_load_error)
        self._lock = Lock()

    def _team_row(self, rank: int, team: TeamStanding) -> dict[str, Any]:
        return {
            "rank": rank,
            "team": team.key,
            "name": team.name,
            "conference": team.conference,
            "wins": team.wins,
            "losses": team.losses,
            "win_pct": round(team.win_pct, 3),
            "championships": team.championships,
            "is_player_team": team.key == self.simulator.player.team,
        }

    def standings(self, conference: str | None = None) -> dict[str, Any]:
        league = self.simulator.player.league
        if conference:
            if conference not in get_conferences(league):
                raise HTTPException(status_code=400, detail=f"Unknown conference '{conference}'")
            rows = get_conference_standings(league, conference)
        else:
            rows = get_standings(league)
        return {
            "season": league.season,
            "player_team_rank": team_rank(league, self.simulator.player.team),
            "rows": [self._team_row(idx, team) for idx, team in enumerate(rows, start=1)],
            "championship_history": {str(k): v for k, v in league.championship_history.items()},
        }

    def legacy(self) -> dict[str, Any]:
        player = self.simulator.player
        return {
            "score": calculate_player_score(player.career),
            "hall_of_fame_chance": get_hall_of_fame_chance(player.career),
            "record": asdict(player.legacy) if player.legacy else None,
            "all_time": all_time_rankings(player),
        }

    def act(self, action: Callable[[], dict[str, Any]]) -> dict[str, Any]:
        if self.simulator.player.retired:
            raise HTTPException(status_code=409, detail="Career is over; start a new career.")
        return action()


service = SimService()
app = FastAPI(title="Hoops Life API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/meta")
def meta() -> dict[str, Any]:
    return {
        "archetypes": list(ARCHETYPES),
        "training_focus": [focus.value for focus in TrainingFocus],
        "health_sessions": [kind.value for kind in HealthSession],
        "offer_kinds": [kind.value for kind in OfferKind],
    }


@app.get("/api/state")
def state() -> dict[str, Any]:
    with service._lock:
        return player_to_dict(service.simulator.player)


@app.get("/api/summary")
def summary() -> dict[str, Any]:
    with service._lock:
        return service.simulator.summary()


@app.get("/api/standings")
def standings(conference: str | None = None) -> dict[str, Any]:
    with service._lock:
        return service.standings(conference=conference)


@app.get("/api/offers")
def offers() -> dict[str, list[str]]:
    with service._lock:
        return service.simulator.offers()


@app.get("/api/legacy")
def legacy() -> dict[str, Any]:
    with service._lock:
        return service.legacy()


@app.get("/api/rankings")
def rankings() -> dict[str, Any]:
    with service._lock:
        player = service.simulator.player
        return {"current": current_league_rankings(player), "all_time": all_time_rankings(player)}


@app.post("/api/advance")
def advance(payload: AdvanceSelection) -> dict[str, Any]:
    with service._lock:
        sim = service.simulator
        span = payload.span.lower().strip()
        actions = {"week": sim.advance_week, "month": sim.advance_month, "season": sim.advance_season}
        if span not in actions:
            raise HTTPException(status_code=400, detail=f"Unknown span '{payload.span}'")
        return service.act(actions[span])


@app.post("/api/train")
def train(payload: TrainingSelection) -> dict[str, Any]:
    with service._lock:
        try:
            focus = TrainingFocus(payload.focus)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Unknown training focus '{payload.focus}'") from exc
        return service.act(lambda: service.simulator.train(focus, payload.intensity))


@app.post("/api/health-session")
def health_session(payload: HealthSelection) -> dict[str, Any]:
    with service._lock:
        try:
            kind = HealthSession(payload.kind)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Unknown health session '{payload.kind}'") from exc
        return service.act(lambda: service.simulator.health_session(kind))


@app.post("/api/trade")
def trade() -> dict[str, Any]:
    with service._lock:
        return service.act(service.simulator.request_trade)


@app.post("/api/contract")
def contract() -> dict[str, Any]:
    with service._lock:
        return service.act(service.simulator.request_contract)


@app.post("/api/offers/accept")
def accept_offer(payload: OfferSelection) -> dict[str, Any]:
    with service._lock:
        try:
            kind = OfferKind(payload.kind)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Unknown offer kind '{payload.kind}'") from exc
        return service.act(lambda: service.simulator.accept_offer(kind, payload.name))


@app.post("/api/offers/decline")
def decline_offer(payload: OfferSelection) -> dict[str, Any]:
    with service._lock:
        try:
            kind = OfferKind(payload.kind)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Unknown offer kind '{payload.kind}'") from exc
        if not payload.name:
            raise HTTPException(status_code=400, detail="name is required to decline an offer")
        return service.act(lambda: service.simulator.decline_offer(kind, payload.name))


@app.post("/api/social")
def social() -> dict[str, Any]:
    with service._lock:
        return service.act(service.simulator.post_social_media)


@app.post("/api/life-event")
def life_event() -> dict[str, Any]:
    with service._lock:
        return service.act(service.simulator.random_life_event)


@app.post("/api/retire")
def retire() -> dict[str, Any]:
    with service._lock:
        return service.act(service.simulator.retire)


@app.post("/api/new-career")
def new_career(payload: NewCareerSelection) -> dict[str, Any]:
    with service._lock:
        if payload.archetype and payload.archetype not in ARCHETYPES:
            raise HTTPException(status_code=400, detail=f"Unknown archetype '{payload.archetype}'")
        return service.simulator.new_career(name=payload.name, age=payload.age, archetype=payload.archetype)


@app.get("/api/export")
def export_save() -> dict[str, str]:
    with service._lock:
        return {"save": service.simulator.export_state()}


@app.post("/api/import")
def import_save(payload: ImportSelection) -> dict[str, Any]:
    with service._lock:
        result = service.simulator.import_state(payload.save)
        if not result["ok"]:
            raise HTTPException(status_code=400, detail=result["message"])
        return result
