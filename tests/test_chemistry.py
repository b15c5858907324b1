import itertools

import pytest

from hoopdraft.models import METRICS, LineupPick, PlayerScoreBreakdown, PlayerStats, RoleProfile
from hoopdraft.scoring import compute_chemistry, role_profile
from hoopdraft.scoring.chemistry import complementarity, culture, multiplier_for, usage_balance


def _scored(slot: str, value: float, *, penalty: bool = False) -> PlayerScoreBreakdown:
    metrics = PlayerStats(**{metric: 0.0 if penalty else value for metric in METRICS})
    return PlayerScoreBreakdown(
        pick=LineupPick(
            slot=slot,
            player_name=f"{slot} player",
            franchise_abbr="ATL",
            franchise_name="Atlanta Hawks",
            is_penalty=penalty,
        ),
        stats=metrics,
        used_fallback=False,
        normalized_metrics=metrics,
        contribution=0.0 if penalty else value,
    )


def test_empty_lineup_is_all_zero_with_neutral_multiplier():
    chemistry = compute_chemistry([])
    assert chemistry.chemistry_score == 0.0
    assert chemistry.role_coverage == 0.0
    assert chemistry.multiplier == 1.0


def test_penalty_pick_has_zero_role_profile():
    profile = role_profile(_scored("C", 95.0, penalty=True))
    assert profile == RoleProfile()


def test_slot_archetype_shapes_the_profile():
    guard = role_profile(_scored("PG", 70.0))
    center = role_profile(_scored("C", 70.0))
    assert guard.playmaking > center.playmaking
    assert center.rim_protection > guard.rim_protection
    assert guard.ball_dominance > center.ball_dominance


def test_balanced_lineup_earns_a_strong_multiplier():
    lineup = [_scored("PG", 90.0)] + [_scored(slot, 70.0) for slot in ("SG", "SF", "PF", "C")]
    chemistry = compute_chemistry(lineup)

    assert chemistry.chemistry_score > 60
    assert chemistry.multiplier > 1.0
    assert chemistry.role_coverage == pytest.approx(85.3)
    assert chemistry.culture == pytest.approx(72.5)


def test_stacked_ball_dominant_lineup_has_poor_usage_balance():
    lineup = [_scored(slot, 95.0) for slot in ("PG", "SG", "SF", "PF")] + [_scored("C", 60.0)]
    profiles = [role_profile(score) for score in lineup]
    assert sum(1 for profile in profiles if profile.ball_dominance > 85) == 4

    chemistry = compute_chemistry(lineup)
    assert chemistry.usage_balance < 40


def test_pair_metrics_need_two_players():
    profile = role_profile(_scored("SF", 80.0))
    assert complementarity([profile]) == 0.0
    assert complementarity([]) == 0.0
    assert usage_balance([]) == 0.0


def test_penalty_pick_drags_culture_down():
    full = culture([80.0, 80.0, 80.0, 80.0, 80.0])
    with_penalty = culture([80.0, 80.0, 80.0, 80.0, 0.0])
    assert with_penalty < full


@pytest.mark.parametrize("score", [-40.0, 0.0, 37.5, 100.0, 180.0])
def test_multiplier_for_is_bounded(score):
    multiplier = multiplier_for(score)
    assert 1.0 <= multiplier <= 2.0


def test_multiplier_bounds_hold_across_lineups():
    levels = (0.0, 35.0, 70.0, 100.0)
    for values in itertools.product(levels, repeat=3):
        lineup = [
            _scored("PG", values[0]),
            _scored("SG", values[1]),
            _scored("SF", values[2]),
            _scored("PF", values[0], penalty=values[1] == 0.0),
            _scored("C", values[2]),
        ]
        chemistry = compute_chemistry(lineup)
        assert 1.0 <= chemistry.multiplier <= 2.0
        assert 0.0 <= chemistry.chemistry_score <= 100.0
