"""Turn calibrated category percentiles into a single player contribution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from hoopdraft.models import METRICS, Metric, PlayerStats


MetricNormalizer = Callable[[Metric, float], float]

METRIC_WEIGHTS: Mapping[Metric, float] = {
    # Player-level awards and honors tied to franchise years.
    "player_accolades": 0.30,
    # Team success while with the franchise.
    "team_accolades": 0.25,
    # Franchise box-score production.
    "stats": 0.25,
    # Franchise advanced impact.
    "advanced": 0.20,
}

SOFT_CAP_GAMMA = 1.15
SOFT_CAP_CEILING = 95.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_one(value: float) -> float:
    return round(value * 10) / 10


def soft_cap(percentile: float) -> float:
    """Concave compression so elite players do not bunch at 99-100."""

    scaled = (_clamp(percentile, 0.0, 100.0) / 100.0) ** SOFT_CAP_GAMMA
    return scaled * SOFT_CAP_CEILING


@dataclass(frozen=True)
class PlayerScore:
    normalized_metrics: PlayerStats
    contribution: float


def score_player(stats: PlayerStats, *, normalizer: Optional[MetricNormalizer] = None) -> PlayerScore:
    """Score one player's category values.

    ``normalizer`` converts a raw category value to its population percentile;
    without one the values are taken to be percentiles already.
    """

    normalized: dict[str, float] = {}
    for metric in METRICS:
        value = stats.metric(metric)
        percentile = normalizer(metric, value) if normalizer is not None else value
        normalized[metric] = soft_cap(percentile)

    contribution = sum(normalized[metric] * METRIC_WEIGHTS[metric] for metric in METRICS)
    return PlayerScore(
        normalized_metrics=PlayerStats(**normalized),
        contribution=round_one(contribution),
    )
