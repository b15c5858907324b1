"""Draft-session helpers: franchise draws, penalty picks and lineup validation."""

from __future__ import annotations

import random
import re
from typing import List, Optional, Sequence
from uuid import uuid4

from hoopdraft.config import LINEUP_SLOTS, get_franchise, iter_franchises
from hoopdraft.models import Franchise, LineupPick
from hoopdraft.scoring.snapshot import Snapshot


DRAW_SIZE = len(LINEUP_SLOTS)
SHARE_CODE_LENGTH = 8
GROUP_CODE_MAX_LENGTH = 24
PENALTY_PLAYER_NAME = "Shot Clock Violation"

_GROUP_CODE_STRIP = re.compile(r"[^A-Z0-9-]")


class LineupValidationError(ValueError):
    """Submitted picks do not form a legal lineup."""


def draw_franchises(seed: Optional[str] = None, count: int = DRAW_SIZE) -> List[Franchise]:
    """Draw ``count`` distinct franchises; a seed makes the draw repeatable."""

    franchises = [Franchise(abbr=info.abbr, name=info.name) for info in iter_franchises()]
    if not 1 <= count <= len(franchises):
        raise ValueError(f"count must be between 1 and {len(franchises)}")
    rng = random.Random(seed) if seed else random.Random()
    return rng.sample(franchises, count)


def penalty_pick(slot: str, franchise_abbr: str) -> LineupPick:
    info = get_franchise(franchise_abbr)
    return LineupPick(
        slot=slot,
        player_name=PENALTY_PLAYER_NAME,
        franchise_abbr=info.abbr,
        franchise_name=info.name,
        is_penalty=True,
    )


def open_slots(picks: Sequence[LineupPick]) -> List[str]:
    taken = {pick.slot for pick in picks}
    return [slot for slot in LINEUP_SLOTS if slot not in taken]


def validate_lineup(picks: Sequence[LineupPick], snapshot: Snapshot, *, complete: bool = True) -> None:
    """Raise ``LineupValidationError`` unless ``picks`` is a legal (complete) lineup."""

    if complete and len(picks) != len(LINEUP_SLOTS):
        raise LineupValidationError(f"a completed lineup needs {len(LINEUP_SLOTS)} picks, got {len(picks)}")
    if len(picks) > len(LINEUP_SLOTS):
        raise LineupValidationError("too many picks")

    # Lineup shape first, so a duplicated slot is reported as such.
    seen_slots: set[str] = set()
    seen_franchises: set[str] = set()
    for pick in picks:
        if pick.slot in seen_slots:
            raise LineupValidationError(f"slot {pick.slot} is filled twice")
        seen_slots.add(pick.slot)

        try:
            info = get_franchise(pick.franchise_abbr)
        except KeyError as exc:
            raise LineupValidationError(f"unknown franchise {pick.franchise_abbr}") from exc
        if info.abbr in seen_franchises:
            raise LineupValidationError(f"franchise {info.abbr} is used twice")
        seen_franchises.add(info.abbr)

    for pick in picks:
        if pick.is_penalty:
            continue
        info = get_franchise(pick.franchise_abbr)
        player = snapshot.find_player(info.abbr, pick.player_name)
        if player is None:
            raise LineupValidationError(f"{pick.player_name} is not on the {info.abbr} all-time roster")
        if pick.slot not in player.eligible_slots:
            raise LineupValidationError(f"{player.name} is not eligible at {pick.slot}")


def generate_share_code() -> str:
    return uuid4().hex[:SHARE_CODE_LENGTH].upper()


def normalize_group_code(code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    cleaned = _GROUP_CODE_STRIP.sub("", code.strip().upper().replace(" ", "-"))[:GROUP_CODE_MAX_LENGTH]
    return cleaned or None
