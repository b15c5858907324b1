"""Order-statistics percentile lookup over cross-franchise populations."""

from __future__ import annotations

import math
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Sequence, Tuple

from hoopdraft.models import CategoryRaw


NEUTRAL_PERCENTILE = 50.0

PERSONAL_RAW = "personal_raw"
TEAM_RAW = "team_raw"
STATS_RAW = "stats_raw"
ADVANCED_RAW = "advanced_raw"
STATS_PER_YEAR = "stats_per_year"
STATS_PEAK_PROXY = "stats_peak_proxy"
WINNING_IMPACT_PROXY = "winning_impact_proxy"
CHAMPIONSHIPS = "championships"

RAW_DISTRIBUTIONS: Tuple[str, ...] = (
    PERSONAL_RAW,
    TEAM_RAW,
    STATS_RAW,
    ADVANCED_RAW,
    STATS_PER_YEAR,
    STATS_PEAK_PROXY,
    WINNING_IMPACT_PROXY,
    CHAMPIONSHIPS,
)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def sorted_finite(values: Iterable[float]) -> Tuple[float, ...]:
    return tuple(sorted(float(value) for value in values if math.isfinite(value)))


def percentile_rank(value: float, sorted_values: Sequence[float]) -> float:
    """Return the 0-100 percentile of ``value`` within an ascending population.

    Ties share the midpoint of their rank range. Populations of size 0 or 1
    carry no information and map every query to 50.
    """

    size = len(sorted_values)
    if size <= 1:
        return NEUTRAL_PERCENTILE
    lower = bisect_left(sorted_values, value)
    upper = bisect_right(sorted_values, value)
    low_rank = _clamp(lower, 0, size - 1)
    high_rank = _clamp(upper - 1, 0, size - 1)
    average_rank = (low_rank + high_rank) / 2
    return (average_rank / (size - 1)) * 100.0


def stats_per_year_raw(raw: CategoryRaw, years_with_team: int) -> float:
    return raw.stats / max(1, years_with_team)


def stats_peak_proxy_raw(raw: CategoryRaw, years_with_team: int) -> float:
    # Rewards concentrated excellence without discarding total production.
    return raw.stats / math.sqrt(max(1, years_with_team))


def winning_impact_proxy_raw(raw: CategoryRaw, championships: int) -> float:
    return raw.advanced * 0.52 + raw.team_accolades * 0.31 + raw.player_accolades * 0.17 + championships * 26


@dataclass(frozen=True)
class CalibrationStore:
    """Immutable set of named, ascending value distributions."""

    distributions: Mapping[str, Tuple[float, ...]] = field(default_factory=dict)

    @classmethod
    def from_values(cls, values: Mapping[str, Iterable[float]]) -> "CalibrationStore":
        return cls({name: sorted_finite(series) for name, series in values.items()})

    def percentile(self, name: str, value: float) -> float:
        """Percentile of ``value`` in distribution ``name``; unknown names are neutral."""

        return percentile_rank(value, self.distributions.get(name, ()))

    def size(self, name: str) -> int:
        return len(self.distributions.get(name, ()))

    def bounds(self, name: str) -> Tuple[float, float]:
        series = self.distributions.get(name, ())
        if not series:
            return 0.0, 100.0
        return series[0], series[-1]


@dataclass(frozen=True)
class RawProfile:
    """Inputs needed to place one roster entry in the raw distributions."""

    raw: CategoryRaw
    years_with_team: int
    championships: int


def build_raw_calibration(profiles: Sequence[RawProfile]) -> CalibrationStore:
    """Build the raw-category and derived distributions for a player population."""

    series: Dict[str, list[float]] = {name: [] for name in RAW_DISTRIBUTIONS}
    for profile in profiles:
        raw = profile.raw
        series[PERSONAL_RAW].append(raw.player_accolades)
        series[TEAM_RAW].append(raw.team_accolades)
        series[STATS_RAW].append(raw.stats)
        series[ADVANCED_RAW].append(raw.advanced)
        series[STATS_PER_YEAR].append(stats_per_year_raw(raw, profile.years_with_team))
        series[STATS_PEAK_PROXY].append(stats_peak_proxy_raw(raw, profile.years_with_team))
        series[WINNING_IMPACT_PROXY].append(winning_impact_proxy_raw(raw, profile.championships))
        series[CHAMPIONSHIPS].append(float(profile.championships))
    return CalibrationStore.from_values(series)
