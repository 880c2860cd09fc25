import json
import random

import pytest

from hoops_life.app import new_player
from hoops_life.config import SAVE_VERSION, STORAGE_KEY
from hoops_life.models import Deal, Phase
from hoops_life.persistence import export_game, import_game, load_game, save_game
from hoops_life.season import CareerSimulator


def _legacy_browser_save() -> dict:
    return {
        "name": "Avery Stone",
        "age": 24,
        "archetype": "Slasher",
        "ratings": {"shooting": 70, "finishing": 84, "playmaking": 66, "defense": 64, "rebounding": 58,
                    "stamina": 75, "dunking": 80, "passing": 68, "leadership": 60, "overall": 1},
        "potential": 88,
        "morale": 72,
        "health": 91,
        "peak": 80,
        "fame": 22,
        "followers": 48000,
        "cash": 812,
        "teamChem": 66,
        "teamStrength": 79,
        "teamStanding": 9,
        "team": "Trail Blazers",
        "contract": {"team": "Trail Blazers", "years": 3, "salary": 18000, "year": 2, "clause": "None"},
        "season": 3,
        "week": 4,
        "phase": "Regular",
        "shoeDeals": [{"name": "Puma", "value": 240}],
        "premiumServices": [{"name": "Private Chef", "cost": 50, "healthBoost": 15, "duration": 4, "weeksLeft": 2}],
        "stats": {
            "games": 1, "points": 25, "rebounds": 7, "assists": 4, "minutes": 33, "wins": 1,
            "gameLogs": [{"id": "x1", "gameNo": 1, "win": True, "points": 25, "rebounds": 7,
                          "assists": 4, "minutes": 33, "per": 18.2}],
        },
        "league": {
            "standings": {"Trail Blazers": {"wins": 20, "losses": 12}, "76ers": {"wins": 14, "losses": 18}},
        },
        "career": {
            "seasons": [{"season": 1, "team": "Trail Blazers", "overall": 72,
                         "averages": {"gp": 70, "pts": 14.2, "reb": 4.1, "ast": 3.0}}],
            "awards": [{"season": 1, "award": "ROY"}],
            "timeline": [{"type": "Signed", "text": "Drafted by Trail Blazers"}],
        },
        "alive": True,
        "retired": False,
    }


def test_save_and_load_preserve_career(tmp_path) -> None:
    rng = random.Random(90)
    player = new_player(rng, name="Jordan Vale")
    player.cash = 1234
    player.shoe_deals.append(Deal(name="Nike", value=350, years=3))
    player.league.championship_history[1] = "Celtics"
    path = tmp_path / "basketball_life_save.json"

    save_game(path, player)
    loaded, error = load_game(path)

    assert error == ""
    assert loaded is not None
    assert loaded.name == "Jordan Vale"
    assert loaded.cash == 1234
    assert loaded.ratings == player.ratings
    assert loaded.shoe_deals == player.shoe_deals
    assert loaded.league.championship_history == {1: "Celtics"}
    assert set(loaded.league.standings) == set(player.league.standings)
    assert loaded.career.timeline[0].text == player.career.timeline[0].text


@pytest.mark.regression
def test_save_wraps_payload_and_keeps_backup(tmp_path) -> None:
    path = tmp_path / "basketball_life_save.json"
    player = new_player(random.Random(91))
    save_game(path, player)
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["save_version"] == SAVE_VERSION
    assert payload["storage_key"] == STORAGE_KEY
    assert payload["game"]["phase"] == "Preseason"

    save_game(path, player)
    assert (tmp_path / "basketball_life_save.json.bak").exists()


@pytest.mark.regression
def test_loads_legacy_browser_save(tmp_path) -> None:
    path = tmp_path / "legacy.json"
    path.write_text(json.dumps(_legacy_browser_save()), encoding="utf-8")
    player, error = load_game(path)

    assert error == ""
    assert player is not None
    assert player.team_chem == 66
    assert player.phase is Phase.REGULAR
    assert player.ratings.overall == 68
    assert player.shoe_deals[0].name == "Puma"
    assert player.premium_services[0].weeks_left == 2
    assert player.stats.game_logs[0].game_no == 1
    assert player.stats.game_logs[0].line.points == 25
    assert "Trail Blazers" in player.league.standings
    assert "76ers" in player.league.standings
    assert player.career.seasons[0].averages.pts == 14.2
    assert player.career.awards[0].award == "ROY"


@pytest.mark.regression
def test_legacy_split_name_and_retired_flag() -> None:
    raw = _legacy_browser_save()
    del raw["name"]
    raw["firstName"] = "Avery"
    raw["lastName"] = "Stone"
    raw["retired"] = True
    player, error = import_game(json.dumps(raw))
    assert error == ""
    assert player.name == "Avery Stone"
    assert player.phase is Phase.RETIRED


@pytest.mark.regression
def test_rejects_future_save_version_with_clear_error(tmp_path) -> None:
    path = tmp_path / "basketball_life_save.json"
    path.write_text(
        json.dumps({"save_version": 999, "game": _legacy_browser_save()}),
        encoding="utf-8",
    )
    player, error = load_game(path)
    assert player is None
    assert "Unsupported save version 999" in error


@pytest.mark.parametrize(
    "text,message",
    [
        ("{not json", "Invalid JSON"),
        ("[1, 2, 3]", "invalid format"),
        (json.dumps({"career": {}}), "missing player name"),
        (json.dumps({"name": "No Career"}), "missing career"),
    ],
)
def test_import_rejects_malformed_payloads(text: str, message: str) -> None:
    player, error = import_game(text)
    assert player is None
    assert message in error


def test_missing_file_is_not_an_error(tmp_path) -> None:
    assert load_game(tmp_path / "absent.json") == (None, "")


def test_export_import_round_trip_keeps_identity() -> None:
    player = new_player(random.Random(92), name="Kai Mercer", age=19, archetype="Big")
    restored, error = import_game(export_game(player))
    assert error == ""
    assert (restored.name, restored.age, restored.archetype) == ("Kai Mercer", 19, "Big")
    assert restored.contract == player.contract


@pytest.mark.regression
def test_corrupt_state_file_starts_new_career(tmp_path) -> None:
    path = tmp_path / "basketball_life_save.json"
    path.write_text("{oops", encoding="utf-8")
    sim = CareerSimulator(seed=5, state_path=path)
    assert "Invalid JSON" in sim.last_load_error
    assert sim.player.season == 1
    assert len(sim.player.league.standings) == 30


def _exported_game(seed: int = 93) -> dict:
    return json.loads(export_game(new_player(random.Random(seed))))


@pytest.mark.regression
@pytest.mark.parametrize(
    "path,value",
    [
        (("season",), "two"),
        (("week",), [1]),
        (("stats", "games"), "many"),
        (("career", "totals", "points"), {"total": 10}),
        (("league", "standings", "Celtics", "wins"), "lots"),
        (("contract", "salary"), "a lot"),
    ],
)
def test_import_rejects_non_numeric_counters(path: tuple[str, ...], value: object) -> None:
    payload = _exported_game()
    target = payload["game"]
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value
    player, error = import_game(json.dumps(payload))
    assert player is None
    assert error.startswith("Invalid save")


@pytest.mark.regression
def test_import_casts_numeric_strings() -> None:
    payload = _exported_game()
    payload["game"]["season"] = "2"
    payload["game"]["stats"]["points"] = "40"
    payload["game"]["league"]["standings"]["Celtics"]["wins"] = 3.0
    player, error = import_game(json.dumps(payload))
    assert error == ""
    assert player.season == 2
    assert player.stats.points == 40
    assert player.league.standings["Celtics"].wins == 3
    assert isinstance(player.league.standings["Celtics"].wins, int)
