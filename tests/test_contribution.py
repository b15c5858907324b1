import pytest

from hoopdraft.models import METRICS, PlayerStats
from hoopdraft.scoring import METRIC_WEIGHTS, round_one, score_player, soft_cap


def _uniform(value: float) -> PlayerStats:
    return PlayerStats(**{metric: value for metric in METRICS})


def test_metric_weights_sum_to_one():
    assert sum(METRIC_WEIGHTS.values()) == pytest.approx(1.0)


def test_soft_cap_is_bounded_and_concave():
    assert soft_cap(0.0) == 0.0
    assert soft_cap(100.0) == pytest.approx(95.0)
    assert soft_cap(140.0) == pytest.approx(95.0)
    assert soft_cap(-5.0) == 0.0
    assert soft_cap(50.0) < 50.0
    assert soft_cap(50.0) == pytest.approx(0.5**1.15 * 95.0)


def test_score_player_without_normalizer_treats_values_as_percentiles():
    elite = score_player(_uniform(100.0))
    assert elite.contribution == pytest.approx(95.0)
    assert elite.normalized_metrics.stats == pytest.approx(95.0)

    empty = score_player(_uniform(0.0))
    assert empty.contribution == 0.0


def test_score_player_uses_normalizer_per_metric():
    seen = []

    def normalizer(metric, value):
        seen.append(metric)
        return 100.0 if metric == "player_accolades" else 0.0

    result = score_player(_uniform(12.0), normalizer=normalizer)
    assert seen == list(METRICS)
    assert result.contribution == pytest.approx(round_one(95.0 * 0.30))


def test_contribution_is_rounded_to_one_decimal():
    result = score_player(_uniform(50.0))
    assert result.contribution == round_one(soft_cap(50.0))
    assert result.contribution == pytest.approx(42.8)
