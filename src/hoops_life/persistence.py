from __future__ import annotations

from dataclasses import asdict, fields
import json
import logging
from pathlib import Path
import re
import shutil
from typing import Any

from .config import SAVE_VERSION, STORAGE_KEY
from .integrity import sanitize_player
from .models import (
    ActiveService,
    AwardEntry,
    Career,
    CareerTotals,
    Contract,
    Deal,
    GameLog,
    GameStatLine,
    LeagueState,
    Legacy,
    Phase,
    PlayerState,
    Ratings,
    SeasonAverages,
    SeasonRecord,
    SeasonStats,
    TeamStanding,
    Teammate,
    TimelineEvent,
)

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
# Only identifier-style keys; franchise keys such as "Trail Blazers" stay as-is.
_CAMEL_KEY = re.compile(r"^[a-z][A-Za-z0-9]*$")
# Models use postponed annotations, so field types arrive as strings.
_NUMERIC_CASTS = {"int": int, "float": float, "int | None": int, "float | None": float}


def _snake(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


def _snake_keys(value: Any) -> Any:
    """Browser saves use camelCase keys; normalize them recursively."""
    if isinstance(value, dict):
        return {
            (_snake(k) if isinstance(k, str) and _CAMEL_KEY.match(k) else k): _snake_keys(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_snake_keys(v) for v in value]
    return value


def _dict(raw: Any) -> dict[str, Any]:
    return raw if isinstance(raw, dict) else {}


def _list(raw: Any) -> list[Any]:
    return [item for item in raw if isinstance(item, dict)] if isinstance(raw, list) else []


def _coerce(annotation: str, value: Any) -> Any:
    cast = _NUMERIC_CASTS.get(annotation)
    if cast is None or (value is None and annotation.endswith("None")):
        return value
    # A bad value raises here and the whole payload is rejected.
    return cast(value)


def _build(cls: type, raw: Any, **overrides: Any) -> Any:
    annotations = {f.name: f.type for f in fields(cls)}
    kwargs = {k: v for k, v in _dict(raw).items() if k in annotations}
    kwargs.update(overrides)
    return cls(**{k: _coerce(annotations[k], v) for k, v in kwargs.items()})


def player_to_dict(player: PlayerState) -> dict[str, Any]:
    data = asdict(player)
    data["phase"] = player.phase.value
    data["league"]["championship_history"] = {
        str(season): team for season, team in player.league.championship_history.items()
    }
    return data


def _game_log(raw: dict[str, Any]) -> GameLog:
    # Older saves stored the box score flat on the log entry.
    line_raw = raw.get("line") if isinstance(raw.get("line"), dict) else raw
    return GameLog(
        game_no=int(raw.get("game_no", 0) or 0),
        win=bool(raw.get("win", False)),
        line=_build(GameStatLine, line_raw),
    )


def _season_stats(raw: Any) -> SeasonStats:
    raw = _dict(raw)
    return _build(SeasonStats, raw, game_logs=[_game_log(log) for log in _list(raw.get("game_logs"))])


def _season_record(raw: dict[str, Any]) -> SeasonRecord:
    return _build(
        SeasonRecord,
        raw,
        season=int(raw.get("season", 1) or 1),
        team=str(raw.get("team", "")),
        stats=_season_stats(raw.get("stats")),
        averages=_build(SeasonAverages, raw.get("averages")),
        overall=int(raw.get("overall", 0) or 0),
        awards=[str(a) for a in raw.get("awards", []) if isinstance(a, str)],
    )


def _career(raw: Any) -> Career:
    raw = _dict(raw)
    totals_raw = _dict(raw.get("totals"))
    totals = _build(
        CareerTotals,
        totals_raw,
        per=[float(v or 0) for v in totals_raw.get("per", []) or []],
        ts=[float(v or 0) for v in totals_raw.get("ts", []) or []],
        usage=[float(v or 0) for v in totals_raw.get("usage", []) or []],
    )
    timeline = [
        _build(TimelineEvent, ev, type=str(ev.get("type", "Event")), text=str(ev.get("text", "")))
        for ev in _list(raw.get("timeline"))
    ]
    awards = [
        AwardEntry(season=int(a.get("season", 0) or 0), award=str(a.get("award", "")))
        for a in _list(raw.get("awards"))
    ]
    return Career(
        seasons=[_season_record(s) for s in _list(raw.get("seasons"))],
        awards=awards,
        totals=totals,
        timeline=timeline,
    )


def _league(raw: Any) -> LeagueState:
    raw = _dict(raw)
    standings: dict[str, TeamStanding] = {}
    for key, team_raw in _dict(raw.get("standings")).items():
        if not isinstance(team_raw, dict):
            continue
        strength = float(team_raw.get("base_strength", 75) or 75)
        standings[key] = _build(
            TeamStanding,
            team_raw,
            key=key,
            name=str(team_raw.get("name", key)),
            conference=str(team_raw.get("conference", "East")),
            base_strength=strength,
            current_strength=float(team_raw.get("current_strength", strength) or strength),
        )
    history: dict[int, str] = {}
    for season, team in _dict(raw.get("championship_history")).items():
        try:
            history[int(season)] = str(team)
        except (TypeError, ValueError):
            continue
    return LeagueState(standings=standings, season=int(raw.get("season", 1) or 1), championship_history=history)


def _phase(raw: Any) -> Phase:
    try:
        return Phase(raw)
    except ValueError:
        return Phase.PRESEASON


def player_from_dict(raw: dict[str, Any]) -> PlayerState:
    """Rebuild a player from a (possibly partial or camelCase) payload, defaulting what is missing."""
    raw = _snake_keys(raw)
    name = str(raw.get("name") or " ".join(
        part for part in (raw.get("first_name"), raw.get("last_name")) if part
    ) or "Player")
    team = str(raw.get("team", "") or "")
    contract_raw = _dict(raw.get("contract"))
    contract = _build(
        Contract,
        contract_raw,
        team=str(contract_raw.get("team", team) or team),
        years=contract_raw.get("years", 1),
        salary=contract_raw.get("salary", 0),
    )
    legacy_raw = raw.get("legacy")
    player = _build(
        PlayerState,
        raw,
        name=name,
        age=int(raw.get("age", 20) or 20),
        archetype=str(raw.get("archetype", "Scorer")),
        ratings=_build(Ratings, raw.get("ratings")),
        potential=raw.get("potential", 75),
        contract=contract,
        team=team or contract.team,
        phase=_phase(raw.get("phase", Phase.PRESEASON.value)),
        teammates=[_build(Teammate, t, name=str(t.get("name", "")), overall=t.get("overall", 70),
                          ppg=t.get("ppg", 0), rpg=t.get("rpg", 0), apg=t.get("apg", 0),
                          position=str(t.get("position", "SF")))
                   for t in _list(raw.get("teammates"))],
        stats=_season_stats(raw.get("stats")),
        league=_league(raw.get("league")),
        career=_career(raw.get("career")),
        endorsements=[_build(Deal, d, name=str(d.get("name", "")), value=d.get("value", 0))
                      for d in _list(raw.get("endorsements"))],
        shoe_deals=[_build(Deal, d, name=str(d.get("name", "")), value=d.get("value", 0))
                    for d in _list(raw.get("shoe_deals"))],
        premium_services=[
            ActiveService(
                name=str(s.get("name", "")),
                cost=int(s.get("cost", 0) or 0),
                weeks_left=int(s.get("weeks_left", s.get("duration", 0)) or 0),
            )
            for s in _list(raw.get("premium_services"))
        ],
        retired=bool(raw.get("retired", False)),
        legacy=_build(Legacy, legacy_raw) if isinstance(legacy_raw, dict) else None,
    )
    if player.retired:
        player.phase = Phase.RETIRED
    return sanitize_player(player)


def _unwrap(raw: Any) -> tuple[dict[str, Any] | None, str]:
    if not isinstance(raw, dict):
        return None, "Save file has invalid format."
    if isinstance(raw.get("game"), dict):
        version = int(raw.get("save_version", 1) or 1)
        if version > SAVE_VERSION:
            return None, f"Unsupported save version {version}; app supports up to {SAVE_VERSION}."
        return raw["game"], ""
    # Bare game dict from the browser build (no wrapper, version 1).
    return raw, ""


def _validate_game(game: dict[str, Any]) -> str:
    if not game.get("name") and not (game.get("firstName") or game.get("first_name")):
        return "Invalid save: missing player name."
    if not isinstance(game.get("career"), dict):
        return "Invalid save: missing career."
    return ""


def _parse(text: str) -> tuple[PlayerState | None, str]:
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        return None, f"Invalid JSON ({exc})."
    game, error = _unwrap(raw)
    if game is None:
        return None, error
    error = _validate_game(game)
    if error:
        return None, error
    try:
        return player_from_dict(game), ""
    except (TypeError, ValueError, OverflowError) as exc:
        return None, f"Invalid save: {exc}"


def export_game(player: PlayerState) -> str:
    payload = {
        "save_version": SAVE_VERSION,
        "storage_key": STORAGE_KEY,
        "game": player_to_dict(player),
    }
    return json.dumps(payload, indent=2)


def import_game(text: str) -> tuple[PlayerState | None, str]:
    player, error = _parse(text)
    if error:
        logger.warning("Rejected import: %s", error)
    return player, error


def _write_json_with_backup(path: Path, text: str, *, with_backup: bool = True) -> None:
    if with_backup and path.exists():
        backup = path.with_suffix(path.suffix + ".bak")
        try:
            shutil.copy2(path, backup)
        except OSError as exc:
            logger.warning("Could not write backup %s: %s", backup, exc)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def save_game(path: str | Path, player: PlayerState, *, with_backup: bool = True) -> None:
    _write_json_with_backup(Path(path), export_game(player), with_backup=with_backup)


def load_game(path: str | Path) -> tuple[PlayerState | None, str]:
    """Return ``(player, "")`` or ``(None, reason)``; a missing file is not an error."""
    path = Path(path)
    if not path.exists():
        return None, ""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        logger.warning("Failed to read save %s: %s", path, exc)
        return None, f"Failed to load save ({exc}); starting a new career."
    player, error = _parse(text)
    if error:
        logger.warning("Failed to load save %s: %s", path, error)
    return player, error
