from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from hoopdraft.persistence import RunStore
from hoopdraft.scoring import score_lineup


@pytest.fixture
def store(tmp_path: Path, monkeypatch) -> RunStore:
    monkeypatch.delenv("HOOPDRAFT_DB_PATH", raising=False)
    return RunStore(tmp_path / "runs.sqlite")


def test_save_and_fetch_run_round_trips_scores(store, snapshot, complete_lineup):
    score = score_lineup(complete_lineup, snapshot)
    saved = store.save_run(share_code="abcd1234", user_name="Jordan", score=score, group_code="OFFICE", seed="s-1")

    assert saved.share_code == "ABCD1234"
    fetched = store.get_run_by_share_code(" abcd1234 ")
    assert fetched == saved
    assert fetched.team_score == score.team_score
    assert fetched.chemistry == score.chemistry
    assert [record.pick.slot for record in fetched.picks] == ["PG", "SG", "SF", "PF", "C"]
    assert [record.contribution for record in fetched.picks] == [p.contribution for p in score.player_scores]


def test_missing_run_returns_none(store):
    assert store.get_run_by_share_code("NOPE0000") is None


def test_leaderboard_orders_by_score_and_filters_group(store, snapshot, complete_lineup):
    score = score_lineup(complete_lineup, snapshot)
    low = score.model_copy(update={"team_score": 40.0})
    high = score.model_copy(update={"team_score": 95.0})
    store.save_run(share_code="AAAA0001", user_name="Low", score=low, group_code="CREW")
    store.save_run(share_code="AAAA0002", user_name="High", score=high, group_code="CREW")
    store.save_run(share_code="AAAA0003", user_name="Elsewhere", score=score)

    crew = store.leaderboard(group_code="CREW")
    assert [run.user_name for run in crew] == ["High", "Low"]
    assert len(store.leaderboard()) == 3
    assert len(store.leaderboard(limit=1)) == 1


def test_daily_leaderboard_excludes_older_runs(store, snapshot, complete_lineup):
    score = score_lineup(complete_lineup, snapshot)
    two_days_ago = datetime.now(timezone.utc) - timedelta(days=2)
    store.save_run(share_code="OLD00001", user_name="Yesterday", score=score, created_at=two_days_ago)
    store.save_run(share_code="NEW00001", user_name="Today", score=score)

    daily = store.leaderboard(timeframe="daily")
    assert [run.user_name for run in daily] == ["Today"]


def test_benchmarks_average_runs_and_picks(store, snapshot, complete_lineup):
    empty = store.benchmarks()
    assert empty.scope == "global"
    assert empty.sample_size == 0
    assert empty.averages.team_score == 0.0

    score = score_lineup(complete_lineup, snapshot)
    store.save_run(share_code="BBBB0001", user_name="A", score=score.model_copy(update={"team_score": 50.0}), group_code="G1")
    store.save_run(share_code="BBBB0002", user_name="B", score=score.model_copy(update={"team_score": 61.0}), group_code="G1")
    store.save_run(share_code="BBBB0003", user_name="C", score=score.model_copy(update={"team_score": 99.0}))

    group = store.benchmarks("G1")
    assert group.scope == "group"
    assert group.sample_size == 2
    assert group.averages.team_score == pytest.approx(55.5)

    overall = store.benchmarks()
    assert overall.sample_size == 3
    assert overall.averages.team_score == pytest.approx(70.0)
    mean_contribution = sum(p.contribution for p in score.player_scores) / 5
    assert overall.averages.contribution == pytest.approx(mean_contribution, abs=0.06)
