from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar
from uuid import uuid4

from .rng import safe_number

PRIMARY_SKILLS = ("shooting", "finishing", "playmaking", "defense", "rebounding")
SECONDARY_SKILLS = ("stamina", "dunking", "passing", "leadership")
ALL_SKILLS = PRIMARY_SKILLS + SECONDARY_SKILLS

RATING_MIN = 40
RATING_MAX = 99
REGULAR_SEASON_GAMES = 82


class Phase(str, Enum):
    PRESEASON = "Preseason"
    REGULAR = "Regular"
    PLAYOFFS = "Playoffs"
    OFFSEASON = "Offseason"
    RETIRED = "Retired"


class TrainingFocus(str, Enum):
    SHOOTING = "Shooting"
    FINISHING = "Finishing"
    PLAYMAKING = "Playmaking"
    DEFENSE = "Defense"
    REBOUNDING = "Rebounding"
    STAMINA = "Stamina"
    DUNKING = "Dunking"
    PASSING = "Passing"
    LEADERSHIP = "Leadership"
    BALANCED = "Balanced"
    RECOVERY = "Recovery"

    @property
    def skills(self) -> tuple[str, ...]:
        if self is TrainingFocus.BALANCED:
            return PRIMARY_SKILLS
        if self is TrainingFocus.RECOVERY:
            return ()
        return (self.value.lower(),)


class HealthSession(str, Enum):
    DIET = "Diet"
    GYM = "Gym"
    CRYOTHERAPY = "Cryotherapy"


class OfferKind(str, Enum):
    ENDORSEMENT = "endorsement"
    SHOE = "shoe"
    PREMIUM = "premium"


@dataclass(slots=True)
class Ratings:
    shooting: int = 60
    finishing: int = 60
    playmaking: int = 60
    defense: int = 60
    rebounding: int = 60
    stamina: int = 60
    dunking: int = 60
    passing: int = 60
    leadership: int = 60
    overall: int = 60

    def get(self, skill: str) -> int:
        return int(getattr(self, skill))

    def set(self, skill: str, value: int) -> None:
        if skill not in ALL_SKILLS:
            raise KeyError(skill)
        setattr(self, skill, value)

    def primary_mean(self) -> float:
        return sum(self.get(k) for k in PRIMARY_SKILLS) / len(PRIMARY_SKILLS)


@dataclass(slots=True)
class StatDelta:
    """Additive change produced by life events, social posts and services."""

    morale: float = 0.0
    fame: float = 0.0
    followers: int = 0
    health: float = 0.0
    peak: float = 0.0
    team_chem: float = 0.0
    cash: float = 0.0
    ratings: dict[str, float] = field(default_factory=dict)


@dataclass(slots=True)
class LifeEvent:
    text: str
    delta: StatDelta


@dataclass(slots=True)
class Contract:
    team: str
    years: int
    salary: int
    year: int = 1
    clause: str = "None"

    @property
    def annual_value(self) -> float:
        return self.salary / max(1, self.years)

    @property
    def expiring(self) -> bool:
        return self.year >= self.years


@dataclass(slots=True)
class Deal:
    name: str
    value: int
    years: int | None = None


@dataclass(slots=True)
class ActiveService:
    name: str
    cost: int
    weeks_left: int


@dataclass(slots=True)
class Teammate:
    name: str
    overall: int
    ppg: int
    rpg: int
    apg: int
    position: str


@dataclass(slots=True)
class TimelineEvent:
    type: str
    text: str
    season: int = 1
    week: int = 1
    id: str = field(default_factory=lambda: uuid4().hex)


@dataclass(slots=True)
class GameStatLine:
    minutes: int = 0
    fg_made: int = 0
    fg_att: int = 0
    threes_made: int = 0
    threes_att: int = 0
    ft_made: int = 0
    ft_att: int = 0
    points: int = 0
    rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    per: float = 0.0
    ts: float = 0.0
    usage: float = 0.0
    age_multiplier: float = 1.0
    consistency_factor: float = 1.0


@dataclass(slots=True)
class GameLog:
    game_no: int
    win: bool
    line: GameStatLine


COUNTING_STATS = (
    "games", "minutes", "points", "rebounds", "assists", "steals", "blocks",
    "fg_made", "fg_att", "threes_made", "threes_att", "ft_made", "ft_att", "wins", "losses",
)


@dataclass(slots=True)
class SeasonStats:
    games: int = 0
    minutes: int = 0
    points: int = 0
    rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    fg_made: int = 0
    fg_att: int = 0
    threes_made: int = 0
    threes_att: int = 0
    ft_made: int = 0
    ft_att: int = 0
    wins: int = 0
    losses: int = 0
    playoffs: bool = False
    finals: bool = False
    champion: bool = False
    finals_mvp: bool = False
    playoff_wins: int = 0
    game_logs: list[GameLog] = field(default_factory=list)

    def add_line(self, line: GameStatLine) -> None:
        self.games += 1
        self.minutes += line.minutes
        self.points += line.points
        self.rebounds += line.rebounds
        self.assists += line.assists
        self.steals += line.steals
        self.blocks += line.blocks
        self.fg_made += line.fg_made
        self.fg_att += line.fg_att
        self.threes_made += line.threes_made
        self.threes_att += line.threes_att
        self.ft_made += line.ft_made
        self.ft_att += line.ft_att


@dataclass(slots=True)
class SeasonAverages:
    gp: int = 0
    mins: float = 0.0
    pts: float = 0.0
    reb: float = 0.0
    ast: float = 0.0
    stl: float = 0.0
    blk: float = 0.0
    fg_pct: float = 0.0
    tp_pct: float = 0.0
    ft_pct: float = 0.0
    wins_pct: float = 0.0
    per: float = 0.0
    ts: float = 0.0
    usage: float = 0.0


@dataclass(slots=True)
class CareerTotals:
    games: int = 0
    minutes: int = 0
    points: int = 0
    rebounds: int = 0
    assists: int = 0
    steals: int = 0
    blocks: int = 0
    fg_made: int = 0
    fg_att: int = 0
    threes_made: int = 0
    threes_att: int = 0
    ft_made: int = 0
    ft_att: int = 0
    wins: int = 0
    losses: int = 0
    titles: int = 0
    mvps: int = 0
    dpoys: int = 0
    sixmoys: int = 0
    mips: int = 0
    scoring: int = 0
    allstars: int = 0
    roys: int = 0
    finals_mvps: int = 0
    per: list[float] = field(default_factory=list)
    ts: list[float] = field(default_factory=list)
    usage: list[float] = field(default_factory=list)

    AWARD_COUNTERS: ClassVar[dict[str, str]] = {
        "MVP": "mvps",
        "DPOY": "dpoys",
        "6MOY": "sixmoys",
        "MIP": "mips",
        "Scoring Title": "scoring",
        "All-Star": "allstars",
        "ROY": "roys",
        "Finals MVP": "finals_mvps",
        "NBA Champion": "titles",
    }

    def count_award(self, award: str) -> None:
        attr = self.AWARD_COUNTERS.get(award)
        if attr is not None:
            setattr(self, attr, getattr(self, attr) + 1)


@dataclass(slots=True)
class SeasonRecord:
    season: int
    team: str
    stats: SeasonStats
    averages: SeasonAverages
    overall: int
    age: int = 0
    awards: list[str] = field(default_factory=list)


@dataclass(slots=True)
class AwardEntry:
    season: int
    award: str


@dataclass(slots=True)
class Career:
    seasons: list[SeasonRecord] = field(default_factory=list)
    awards: list[AwardEntry] = field(default_factory=list)
    totals: CareerTotals = field(default_factory=CareerTotals)
    timeline: list[TimelineEvent] = field(default_factory=list)


@dataclass(slots=True)
class TeamStanding:
    key: str
    name: str
    conference: str
    base_strength: float
    current_strength: float
    wins: int = 0
    losses: int = 0
    projected_wins: int = 41
    last_season_wins: int | None = None
    last_season_losses: int | None = None
    championships: int = 0
    playoff_appearances: int = 0
    last_playoff: int | None = None
    last_championship: int | None = None

    @property
    def games_played(self) -> int:
        return self.wins + self.losses

    @property
    def win_pct(self) -> float:
        gp = self.games_played
        if gp <= 0:
            return self.projected_wins / REGULAR_SEASON_GAMES
        return self.wins / gp


@dataclass(slots=True)
class LeagueState:
    standings: dict[str, TeamStanding] = field(default_factory=dict)
    season: int = 1
    championship_history: dict[int, str] = field(default_factory=dict)

    def champion_for(self, season: int) -> str | None:
        return self.championship_history.get(season)


@dataclass(slots=True)
class Legacy:
    score: int = 0
    hall_of_fame_chance: int = 0
    inducted: bool = False
    retired_age: int = 0
    retired_season: int = 0


@dataclass(slots=True)
class PlayerState:
    name: str
    age: int
    archetype: str
    ratings: Ratings
    potential: int
    contract: Contract
    team: str
    arena: str = ""
    jersey: int = 0
    morale: float = 70.0
    health: float = 100.0
    peak: float = 90.0
    fame: float = 5.0
    followers: int = 0
    cash: float = 50.0
    team_chem: float = 60.0
    team_strength: float = 75.0
    team_standing: int = 10
    season: int = 1
    week: int = 1
    phase: Phase = Phase.PRESEASON
    teammates: list[Teammate] = field(default_factory=list)
    stats: SeasonStats = field(default_factory=SeasonStats)
    league: LeagueState = field(default_factory=LeagueState)
    career: Career = field(default_factory=Career)
    endorsements: list[Deal] = field(default_factory=list)
    shoe_deals: list[Deal] = field(default_factory=list)
    premium_services: list[ActiveService] = field(default_factory=list)
    retired: bool = False
    legacy: Legacy | None = None

    def log(self, event_type: str, text: str) -> TimelineEvent:
        event = TimelineEvent(type=event_type, text=text, season=self.season, week=self.week)
        self.career.timeline.append(event)
        return event

    def credit(self, amount: float) -> None:
        self.cash = safe_number(self.cash + safe_number(amount, 0.0, allow_negative=True), 0.0)

    def debit(self, amount: float) -> bool:
        cost = safe_number(amount, 0.0)
        if self.cash < cost:
            return False
        self.cash = safe_number(self.cash - cost, 0.0)
        return True
