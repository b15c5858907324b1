import pytest
from httpx import ASGITransport, AsyncClient

from hoopdraft.api import _run_to_lineup_score, create_app
from hoopdraft.draft import penalty_pick
from hoopdraft.models import METRICS, ZERO_STATS
from hoopdraft.persistence import RunStore
from hoopdraft.scoring import SnapshotHolder, score_lineup


@pytest.fixture
async def client(tmp_path, monkeypatch, snapshot):
    monkeypatch.delenv("HOOPDRAFT_DB_PATH", raising=False)
    monkeypatch.delenv("HOOPDRAFT_SHOT_CLOCK_SECONDS", raising=False)
    app = create_app(
        snapshot_holder=SnapshotHolder(snapshot=snapshot),
        store=RunStore(tmp_path / "api.sqlite"),
    )
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


def _payload(picks):
    return [pick.model_dump(mode="json") for pick in picks]


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


async def test_franchises_include_logos(client):
    resp = await client.get("/franchises")
    assert resp.status_code == 200
    franchises = resp.json()
    assert len(franchises) == 30
    assert all(item["logo_url"].endswith("logo.svg") for item in franchises)


async def test_roster_lookup_and_missing_franchise(client):
    resp = await client.get("/franchises/lal/roster")
    assert resp.status_code == 200
    body = resp.json()
    assert body["franchise"]["abbr"] == "LAL"
    assert len(body["players"]) == 15
    assert all(player["explanation"] is not None for player in body["players"])

    missing = await client.get("/franchises/SEA/roster")
    assert missing.status_code == 404


async def test_seeded_draw_is_stable(client):
    first = await client.post("/draws", json={"seed": "friday-night"})
    second = await client.post("/draws", json={"seed": "friday-night"})
    assert first.status_code == 200
    assert first.json()["franchises"] == second.json()["franchises"]
    assert first.json()["shot_clock_seconds"] == 24


async def test_preview_score_accepts_partial_lineups(client, complete_lineup):
    resp = await client.post("/score", json={"picks": _payload(complete_lineup[:2])})
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["player_scores"]) == 2
    assert body["used_fallback_stats"] is False
    assert 1.0 <= body["chemistry"]["multiplier"] <= 2.0


async def test_preview_score_rejects_players_off_the_roster(client, complete_lineup):
    stranger = complete_lineup[0].model_copy(update={"player_name": "Nonexistent Player"})
    resp = await client.post("/score", json={"picks": _payload([stranger])})
    assert resp.status_code == 400


async def test_submit_and_fetch_run(client, complete_lineup):
    resp = await client.post(
        "/runs",
        json={"user_name": "Sam", "group_code": "office league", "seed": "s1", "picks": _payload(complete_lineup)},
    )
    assert resp.status_code == 200
    run = resp.json()
    assert len(run["share_code"]) == 8
    assert run["group_code"] == "OFFICE-LEAGUE"
    assert run["team_score"] >= run["base_team_score"]

    fetched = await client.get(f"/runs/{run['share_code'].lower()}")
    assert fetched.status_code == 200
    body = fetched.json()
    assert body["run"]["share_code"] == run["share_code"]
    assert body["benchmarks"]["scope"] == "group"
    assert body["benchmarks"]["sample_size"] == 1
    assert 3 <= len(body["tips"]) <= 4

    board = await client.get("/leaderboard", params={"group": "Office League"})
    assert board.status_code == 200
    entries = board.json()["entries"]
    assert [entry["rank"] for entry in entries] == [1]
    assert entries[0]["players"] == [pick.player_name for pick in complete_lineup]

    bench = await client.get("/benchmarks")
    assert bench.json()["sample_size"] == 1


async def test_incomplete_or_unknown_runs_are_rejected(client, complete_lineup):
    short = await client.post("/runs", json={"user_name": "Sam", "picks": _payload(complete_lineup[:4])})
    assert short.status_code == 400

    bogus = complete_lineup[0].model_copy(update={"franchise_abbr": "SEA"})
    unknown = await client.post("/runs", json={"user_name": "Sam", "picks": _payload([bogus] + complete_lineup[1:])})
    assert unknown.status_code == 400

    missing = await client.get("/runs/ZZZZ9999")
    assert missing.status_code == 404


def test_stored_run_rebuilds_live_normalized_metrics(tmp_path, monkeypatch, snapshot, complete_lineup):
    monkeypatch.delenv("HOOPDRAFT_DB_PATH", raising=False)
    store = RunStore(tmp_path / "rebuild.sqlite")
    last = complete_lineup[-1]
    picks = complete_lineup[:-1] + [penalty_pick(last.slot, last.franchise_abbr)]
    live = score_lineup(picks, snapshot)
    run = store.save_run(share_code="REBUILD1", user_name="Sam", score=live)

    rebuilt = _run_to_lineup_score(run, snapshot)

    for stored, scored in zip(rebuilt.player_scores, live.player_scores):
        assert stored.pick == scored.pick
        for metric in METRICS:
            assert stored.normalized_metrics.metric(metric) == pytest.approx(scored.normalized_metrics.metric(metric))
    assert rebuilt.player_scores[-1].normalized_metrics == ZERO_STATS
