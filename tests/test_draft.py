import re

import pytest

from hoopdraft.draft import (
    PENALTY_PLAYER_NAME,
    LineupValidationError,
    draw_franchises,
    generate_share_code,
    normalize_group_code,
    open_slots,
    penalty_pick,
    validate_lineup,
)


def test_seeded_draw_is_repeatable_and_distinct():
    first = draw_franchises("daily-2024-03-01")
    second = draw_franchises("daily-2024-03-01")
    assert first == second
    assert len(first) == 5
    assert len({franchise.abbr for franchise in first}) == 5


def test_draw_count_is_validated():
    assert len(draw_franchises("x", count=30)) == 30
    with pytest.raises(ValueError):
        draw_franchises("x", count=31)
    with pytest.raises(ValueError):
        draw_franchises("x", count=0)


def test_penalty_pick_uses_canonical_names():
    pick = penalty_pick("C", "lal")
    assert pick.is_penalty
    assert pick.player_name == PENALTY_PLAYER_NAME
    assert pick.franchise_abbr == "LAL"
    assert pick.franchise_name == "Los Angeles Lakers"


def test_open_slots_preserves_lineup_order(complete_lineup):
    assert open_slots([]) == ["PG", "SG", "SF", "PF", "C"]
    assert open_slots(complete_lineup[1:3]) == ["PG", "PF", "C"]
    assert open_slots(complete_lineup) == []


def test_complete_lineup_validates(snapshot, complete_lineup):
    validate_lineup(complete_lineup, snapshot)


def test_partial_lineup_only_validates_when_allowed(snapshot, complete_lineup):
    validate_lineup(complete_lineup[:3], snapshot, complete=False)
    with pytest.raises(LineupValidationError):
        validate_lineup(complete_lineup[:3], snapshot)


def test_duplicate_slot_is_rejected(snapshot, complete_lineup):
    duplicate = complete_lineup[0].model_copy(update={"slot": "SG"})
    with pytest.raises(LineupValidationError, match="filled twice"):
        validate_lineup([duplicate] + complete_lineup[1:], snapshot)


def test_duplicate_slot_is_reported_before_eligibility(snapshot):
    ineligible = penalty_pick("PG", "LAL").model_copy(update={"is_penalty": False, "player_name": "Shaquille O'Neal"})
    with pytest.raises(LineupValidationError, match="filled twice"):
        validate_lineup([ineligible, penalty_pick("PG", "ATL")], snapshot, complete=False)


def test_duplicate_franchise_is_rejected(snapshot, complete_lineup):
    repeated = penalty_pick("C", complete_lineup[0].franchise_abbr)
    with pytest.raises(LineupValidationError, match="used twice"):
        validate_lineup(complete_lineup[:4] + [repeated], snapshot)


def test_player_must_be_on_the_franchise_roster(snapshot, complete_lineup):
    stranger = complete_lineup[0].model_copy(update={"player_name": "Nonexistent Player"})
    with pytest.raises(LineupValidationError, match="all-time roster"):
        validate_lineup([stranger] + complete_lineup[1:], snapshot)


def test_player_must_be_eligible_for_the_slot(snapshot):
    pick = penalty_pick("PG", "LAL").model_copy(update={"is_penalty": False, "player_name": "Shaquille O'Neal"})
    with pytest.raises(LineupValidationError, match="not eligible"):
        validate_lineup([pick], snapshot, complete=False)


def test_penalty_picks_skip_roster_checks(snapshot, complete_lineup):
    last = complete_lineup[-1]
    validate_lineup(complete_lineup[:-1] + [penalty_pick(last.slot, last.franchise_abbr)], snapshot)


def test_share_code_format():
    codes = {generate_share_code() for _ in range(20)}
    assert len(codes) == 20
    assert all(re.fullmatch(r"[0-9A-F]{8}", code) for code in codes)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, None),
        ("", None),
        ("  !!  ", None),
        ("office league", "OFFICE-LEAGUE"),
        ("Team#1_west", "TEAM1WEST"),
        ("x" * 40, "X" * 24),
    ],
)
def test_normalize_group_code(raw, expected):
    assert normalize_group_code(raw) == expected
