import json
import logging
import math

from hoops_life import season as season_module
from hoops_life.config import TEAM_KEYS
from hoops_life.models import ALL_SKILLS, PRIMARY_SKILLS, REGULAR_SEASON_GAMES, HealthSession, Phase, TrainingFocus
from hoops_life.season import RETIRED_MESSAGE, CareerSimulator


def _sim(tmp_path=None, seed: int = 7, **kwargs) -> CareerSimulator:
    state_path = tmp_path / "basketball_life_save.json" if tmp_path is not None else None
    return CareerSimulator(seed=seed, state_path=state_path, **kwargs)


def _assert_invariants(sim: CareerSimulator) -> None:
    p = sim.player
    assert math.isfinite(p.cash) and p.cash >= 0
    for skill in ALL_SKILLS:
        assert 40 <= p.ratings.get(skill) <= 99
    primary_mean = sum(p.ratings.get(k) for k in PRIMARY_SKILLS) / len(PRIMARY_SKILLS)
    assert p.ratings.overall == math.floor(primary_mean + 0.5)
    for name in ("health", "peak", "morale", "fame", "team_chem"):
        assert 0 <= getattr(p, name) <= 100
    assert p.followers >= 0
    for team in p.league.standings.values():
        assert team.wins + team.losses <= REGULAR_SEASON_GAMES


def _to_regular(sim: CareerSimulator) -> None:
    while sim.player.phase is Phase.PRESEASON:
        sim.advance_week()


def test_new_career_matches_draft_rules() -> None:
    for seed in range(15):
        p = _sim(seed=seed).player
        assert 18 <= p.age <= 22
        assert p.phase is Phase.PRESEASON
        assert p.team in TEAM_KEYS
        expected_years = 4 if p.ratings.overall > 78 else 3 if p.ratings.overall > 70 else 2
        assert p.contract.years == expected_years
        ovr = p.ratings.overall
        assert round((ovr * 80 + 100) * expected_years) <= p.contract.salary <= round((ovr * 80 + 500) * expected_years)
        assert p.career.timeline[0].text == f"Drafted by {p.team}"


def test_preseason_lasts_two_weeks() -> None:
    sim = _sim()
    sim.advance_week()
    assert (sim.player.phase, sim.player.week) == (Phase.PRESEASON, 2)
    result = sim.advance_week()
    assert (sim.player.phase, sim.player.week) == (Phase.REGULAR, 1)
    assert any(ev["type"] == "Season" for ev in result["events"])
    assert all(team.games_played == 0 for team in sim.player.league.standings.values())
    sim.advance_week()
    assert all(team.games_played == 10 for team in sim.player.league.standings.values())


def test_nine_regular_weeks_end_the_regular_season() -> None:
    for seed in (1, 2, 3):
        sim = _sim(seed=seed)
        _to_regular(sim)
        for _ in range(8):
            sim.advance_week()
            assert sim.player.phase is Phase.REGULAR
            _assert_invariants(sim)
        sim.advance_week()
        assert sim.player.phase in (Phase.PLAYOFFS, Phase.OFFSEASON)
        assert sim.player.week == 1
        assert 1 <= sim.player.stats.games <= 90


def test_month_is_four_weeks() -> None:
    sim = _sim()
    result = sim.advance_month()
    assert result["weeks"] == 4
    assert (sim.player.phase, sim.player.week) == (Phase.REGULAR, 3)


def test_full_seasons_keep_invariants_and_archive_history() -> None:
    sim = _sim(seed=11)
    result = sim.advance_season()
    assert result["ok"]
    assert sim.player.phase is Phase.OFFSEASON
    assert sim.player.league.champion_for(1) in TEAM_KEYS
    _assert_invariants(sim)

    for expected in (1, 2):
        sim.advance_season()
        _assert_invariants(sim)
        if sim.player.retired:
            break
        assert len(sim.player.career.seasons) == expected
        record = sim.player.career.seasons[-1]
        assert record.stats.game_logs == []
        assert record.averages.gp == record.stats.games
        assert sim.player.phase is Phase.OFFSEASON

    totals = sim.player.career.totals
    assert totals.games == sum(rec.stats.games for rec in sim.player.career.seasons)
    assert len(totals.per) == len(sim.player.career.seasons)


def test_same_seed_reproduces_a_season() -> None:
    a = _sim(seed=21)
    b = _sim(seed=21)
    a.advance_season()
    b.advance_season()
    assert a.player.name == b.player.name
    assert a.player.stats.points == b.player.stats.points
    assert a.player.ratings == b.player.ratings
    assert a.player.league.championship_history == b.player.league.championship_history


def test_expiring_contract_always_renews_in_offseason() -> None:
    for seed in range(12):
        sim = _sim(seed=seed)
        p = sim.player
        p.phase = Phase.OFFSEASON
        p.contract.year = p.contract.years
        start_season, start_age = p.season, p.age
        sim.advance_week()
        p = sim.player
        assert p.phase is Phase.PRESEASON
        assert p.contract.year == 1
        assert p.contract.team == p.team
        assert (p.season, p.age) == (start_season + 1, start_age + 1)
        assert p.league.season == p.season
        assert any(ev.type in ("Extension", "Free Agency") for ev in p.career.timeline)


def test_offseason_rollover_pays_salary() -> None:
    sim = _sim(seed=4)
    p = sim.player
    p.phase = Phase.OFFSEASON
    p.contract.year = 1
    p.contract.years = 3
    p.contract.salary = 9000
    cash = p.cash
    sim.advance_week()
    assert sim.player.cash > cash
    texts = [ev.text for ev in sim.player.career.timeline]
    assert "Received $3000k salary payment." in texts


def test_worn_out_veteran_is_forced_to_retire() -> None:
    sim = _sim(seed=5)
    p = sim.player
    p.age = 37
    for skill in PRIMARY_SKILLS:
        p.ratings.set(skill, 45)
    p.phase = Phase.OFFSEASON
    sim.advance_week()
    assert sim.player.retired
    assert sim.player.phase is Phase.RETIRED
    assert sim.player.legacy is not None
    assert sim.player.legacy.retired_age == 37


def test_retired_career_rejects_actions() -> None:
    sim = _sim(seed=6)
    result = sim.retire()
    assert result["ok"]
    assert result["legacy"]["hall_of_fame_chance"] == 0
    week, cash = sim.player.week, sim.player.cash
    for action in (sim.advance_week, sim.advance_season, sim.request_trade, sim.post_social_media):
        outcome = action()
        assert outcome == {"ok": False, "message": RETIRED_MESSAGE, "events": []}
    assert not sim.train(TrainingFocus.SHOOTING)["ok"]
    assert (sim.player.week, sim.player.cash) == (week, cash)


def test_new_career_after_retirement(tmp_path) -> None:
    sim = _sim(tmp_path, seed=8)
    sim.retire()
    result = sim.new_career(name="Rae Lindqvist", age=20, archetype="Playmaker")
    assert result["ok"]
    assert not sim.player.retired
    assert sim.player.archetype == "Playmaker"
    assert sim.advance_week()["ok"]


def test_health_session_needs_cash() -> None:
    sim = _sim(seed=9)
    sim.player.cash = 10
    sim.player.health = 50
    result = sim.health_session(HealthSession.CRYOTHERAPY)
    assert not result["ok"]
    assert (sim.player.cash, sim.player.health) == (10, 50)

    sim.player.cash = 100
    assert sim.health_session("Gym")["ok"]
    assert sim.player.cash == 75
    assert sim.player.health == 62
    assert not sim.health_session("Sauna")["ok"]


def test_training_caps_intensity_and_rejects_unknown_focus() -> None:
    sim = _sim(seed=10)
    sim.player.peak = 90
    result = sim.train("Finishing", intensity=10)
    assert result["ok"]
    assert "(3x)" in result["message"]
    assert sim.player.peak == 66
    assert [ev["type"] for ev in result["events"]] == ["Training"]
    assert not sim.train("Juggling")["ok"]


def test_social_post_and_life_event_log_to_timeline() -> None:
    sim = _sim(seed=12)
    followers = sim.player.followers
    result = sim.post_social_media()
    assert result["events"][0]["type"] == "Social Media"
    assert sim.player.followers > followers
    result = sim.random_life_event()
    assert result["events"][-1]["type"] == "Event"


def test_offers_accept_and_decline() -> None:
    sim = _sim(seed=13)
    sim.player.cash = 500
    assert "Private Chef" in sim.offers()["premium"]
    assert not sim.accept_offer("premium")["ok"]
    assert sim.accept_offer("premium", "Private Chef")["ok"]
    assert "Private Chef" not in sim.offers()["premium"]
    assert not sim.decline_offer("premium", "Private Chef")["ok"]
    assert sim.decline_offer("premium", "Mental Coach")["ok"]
    assert not sim.accept_offer("yacht")["ok"]


def test_contract_and_trade_requests_report_events() -> None:
    sim = _sim(seed=14)
    trade = sim.request_trade()
    assert trade["events"][-1]["type"] == "Trade"
    contract = sim.request_contract()
    assert contract["events"][-1]["type"] in ("Extension", "Contract")
    _assert_invariants(sim)


def test_simulate_games_always_records_an_appearance() -> None:
    sim = _sim(seed=15)
    p = sim.player
    p.health = 5
    p.peak = 5
    outcome = sim.simulate_games(p, 10)
    assert outcome["scheduled"] == 10
    assert 1 <= outcome["played"] <= 10
    assert p.stats.games == outcome["played"]
    assert len(p.stats.game_logs) == p.stats.games
    assert p.stats.game_logs[0].game_no == p.stats.games


def test_season_loop_cap_stops_early(monkeypatch, caplog) -> None:
    monkeypatch.setattr(season_module, "SEASON_LOOP_SAFETY_CAP", 3)
    sim = _sim(seed=16)
    with caplog.at_level(logging.WARNING, logger="hoops_life.season"):
        result = sim.advance_season()
    assert result["weeks"] == 3
    assert sim.player.phase is Phase.REGULAR
    assert "cap" in caplog.text


def test_actions_autosave(tmp_path) -> None:
    sim = _sim(tmp_path, seed=17)
    path = tmp_path / "basketball_life_save.json"
    assert not path.exists()
    sim.advance_week()
    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["game"]["week"] == sim.player.week

    reloaded = CareerSimulator(seed=1, state_path=path)
    assert reloaded.last_load_error == ""
    assert reloaded.player.name == sim.player.name
    assert reloaded.player.week == sim.player.week


def test_import_keeps_state_on_bad_payload() -> None:
    sim = _sim(seed=18)
    name = sim.player.name
    result = sim.import_state('{"name": "Half Save"}')
    assert not result["ok"]
    assert result["message"].startswith("Import failed")
    assert sim.player.name == name

    other = _sim(seed=19)
    assert sim.import_state(other.export_state())["ok"]
    assert sim.player.name == other.player.name


def test_summary_reports_current_state() -> None:
    sim = _sim(seed=20)
    info = sim.summary()
    assert info["phase"] == "Preseason"
    assert info["team"] == sim.player.team
    assert 1 <= info["team_rank"] <= 30
    assert info["averages"]["gp"] == 0


def test_imported_string_season_survives_offseason_rollover() -> None:
    sim = _sim(seed=22)
    payload = json.loads(sim.export_state())
    payload["game"]["season"] = "2"
    payload["game"]["phase"] = "Offseason"
    assert sim.import_state(json.dumps(payload))["ok"]
    assert sim.advance_week()["ok"]
    assert sim.player.season == 3
    assert sim.player.phase is Phase.PRESEASON


def test_import_with_bad_counter_keeps_current_career() -> None:
    sim = _sim(seed=23)
    name, season = sim.player.name, sim.player.season
    payload = json.loads(sim.export_state())
    payload["game"]["name"] = "Someone Else"
    payload["game"]["stats"]["games"] = "several"
    result = sim.import_state(json.dumps(payload))
    assert not result["ok"]
    assert (sim.player.name, sim.player.season) == (name, season)


def test_training_is_closed_during_playoffs() -> None:
    sim = _sim(seed=24)
    sim.player.phase = Phase.PLAYOFFS
    sim.player.peak = 80
    ratings = sim.player.ratings
    result = sim.train(TrainingFocus.SHOOTING, intensity=2)
    assert not result["ok"]
    assert "playoffs" in result["message"]
    assert result["events"] == []
    assert sim.player.peak == 80
    assert sim.player.ratings == ratings

    sim.player.phase = Phase.OFFSEASON
    assert sim.train(TrainingFocus.SHOOTING)["ok"]
