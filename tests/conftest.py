from typing import List

import pytest

from hoopdraft.config import LINEUP_SLOTS, get_franchise, iter_franchises
from hoopdraft.config.settings import DEFAULT_SEED_PATH
from hoopdraft.models import LineupPick
from hoopdraft.scoring import Snapshot


def build_complete_lineup(snapshot: Snapshot) -> List[LineupPick]:
    """First eligible player per slot, each from a different franchise."""

    picks: List[LineupPick] = []
    used: set[str] = set()
    for slot in LINEUP_SLOTS:
        for info in iter_franchises():
            if info.abbr in used:
                continue
            player = next((p for p in snapshot.get_roster(info.abbr) if slot in p.eligible_slots), None)
            if player is None:
                continue
            picks.append(
                LineupPick(
                    slot=slot,
                    player_name=player.name,
                    franchise_abbr=info.abbr,
                    franchise_name=get_franchise(info.abbr).name,
                )
            )
            used.add(info.abbr)
            break
    assert len(picks) == len(LINEUP_SLOTS)
    return picks


@pytest.fixture(scope="session")
def snapshot() -> Snapshot:
    return Snapshot.load(DEFAULT_SEED_PATH)


@pytest.fixture
def complete_lineup(snapshot: Snapshot) -> List[LineupPick]:
    return build_complete_lineup(snapshot)
