from pathlib import Path

import pytest

from hoopdraft.config import LINEUP_SLOTS, ROSTER_SIZE, franchise_abbrs
from hoopdraft.config.settings import DEFAULT_SEED_PATH
from hoopdraft.ingest import SeedPlayer, load_snapshot_file, normalize_name, write_snapshot_file
from hoopdraft.models import METRICS, CategoryRaw
from hoopdraft.scoring import Snapshot, SnapshotHolder, fallback_stats, tenure_ratio
from hoopdraft.scoring.snapshot import build_snapshot


def _filler(index: int) -> SeedPlayer:
    return SeedPlayer(
        name=f"Filler {index}",
        years="2001-2006",
        positions=["SG"],
        career_years=9,
        championships=index % 2,
        category_raw=CategoryRaw(
            player_accolades=10 + index * 5,
            team_accolades=20 + index * 6,
            stats=3000 + index * 900,
            advanced=40 + index * 3,
        ),
    )


def test_every_franchise_has_a_full_roster(snapshot: Snapshot):
    for abbr in franchise_abbrs():
        roster = snapshot.get_roster(abbr)
        assert len(roster) == ROSTER_SIZE, abbr
        for player in roster:
            assert player.eligible_slots
            assert set(player.eligible_slots) <= set(LINEUP_SLOTS)
        assert len({normalize_name(player.name) for player in roster}) == ROSTER_SIZE


def test_category_scores_stay_inside_bounds(snapshot: Snapshot):
    for entries in snapshot.rosters.values():
        for entry in entries:
            for metric in METRICS:
                assert 4.0 <= entry.stats.metric(metric) <= 97.0
            assert 0.08 <= entry.explanation.tenure_ratio <= 1.0


def test_unknown_player_falls_back_to_baseline(snapshot: Snapshot):
    lookup = snapshot.lookup_player_stats("ATL", "Nonexistent Player")
    assert lookup.used_fallback is True
    assert all(lookup.stats.metric(metric) > 0 for metric in METRICS)
    assert lookup.stats == fallback_stats("PG")


def test_known_player_lookup_is_name_insensitive(snapshot: Snapshot):
    assert snapshot.is_player_on_team("lal", "SHAQUILLE O’NEAL")
    assert snapshot.is_player_on_team("LAL", "shaquille oneal")
    assert snapshot.is_player_on_team("SAC", "Dé'Aaron Fox")
    assert snapshot.get_player_eligible_slots("LAL", "Shaquille O'Neal") == ("C",)

    lookup = snapshot.lookup_player_stats("LAL", "Shaquille O'Neal")
    assert lookup.used_fallback is False


def test_same_player_is_scoped_per_franchise(snapshot: Snapshot):
    cleveland = snapshot.get_player_explanation("CLE", "LeBron James")
    miami = snapshot.get_player_explanation("MIA", "LeBron James")
    assert cleveland is not None and miami is not None
    assert cleveland.years_with_team == 16
    assert miami.years_with_team == 5
    assert snapshot.get_player_explanation("BOS", "LeBron James") is None


def test_unknown_player_is_eligible_everywhere(snapshot: Snapshot):
    assert snapshot.get_player_eligible_slots("ATL", "Nobody") == LINEUP_SLOTS


def test_long_prime_stint_outranks_short_late_stint():
    prime = SeedPlayer(
        name="Prime Star",
        years="1991-2000",
        positions=["SF"],
        career_years=10,
        championships=2,
        category_raw=CategoryRaw(player_accolades=60, team_accolades=90, stats=20000, advanced=80),
    )
    late = SeedPlayer(
        name="Prime Star",
        years="2000-2000",
        positions=["SF"],
        career_years=10,
        championships=0,
        category_raw=CategoryRaw(player_accolades=6, team_accolades=9, stats=2000, advanced=80),
    )
    snapshot = build_snapshot(
        {
            "BOS": [prime] + [_filler(index) for index in range(4)],
            "CLE": [late] + [_filler(index) for index in range(4, 8)],
        }
    )

    long_stint = snapshot.get_player_explanation("BOS", "Prime Star")
    short_stint = snapshot.get_player_explanation("CLE", "Prime Star")
    assert long_stint.tenure_ratio == pytest.approx(1.0)
    assert short_stint.tenure_ratio == pytest.approx(0.1)
    assert long_stint.franchise_score > short_stint.franchise_score
    assert snapshot.roster_names("BOS")[0] == "Prime Star"


def test_unmeasured_seed_entries_keep_their_order():
    twins = [
        SeedPlayer(name=name, years="2000-2009", positions=["PG"], career_years=12)
        for name in ("First Listed", "Second Listed")
    ]
    snapshot = build_snapshot({"ATL": twins})

    assert snapshot.roster_names("ATL") == ["First Listed", "Second Listed"]
    first = snapshot.get_player_explanation("ATL", "First Listed")
    second = snapshot.get_player_explanation("ATL", "Second Listed")
    assert first.franchise_score > second.franchise_score


def test_tenure_ratio_is_clamped():
    assert tenure_ratio(1, 20) == pytest.approx(0.08)
    assert tenure_ratio(12, 10) == 1.0
    assert tenure_ratio(5, 0) == 1.0


def test_build_is_deterministic():
    seed = load_snapshot_file(DEFAULT_SEED_PATH)
    first = Snapshot.build(seed)
    second = Snapshot.build(seed)
    for abbr in franchise_abbrs():
        assert [entry.stats for entry in first.rosters[abbr]] == [entry.stats for entry in second.rosters[abbr]]


def test_holder_reload_swaps_in_a_new_snapshot(tmp_path: Path, snapshot: Snapshot):
    target = tmp_path / "snapshot.json"
    write_snapshot_file(target, snapshot.to_snapshot_file())

    holder = SnapshotHolder(path=target)
    first = holder.snapshot
    assert holder.snapshot is first

    refreshed = holder.reload()
    assert holder.snapshot is refreshed
    assert refreshed is not first
    assert set(refreshed.roster_names("BOS")) == set(snapshot.roster_names("BOS"))
