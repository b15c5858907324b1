"""Percentile calibration over the full roster population."""

from .distribution import (
    ADVANCED_RAW,
    CHAMPIONSHIPS,
    NEUTRAL_PERCENTILE,
    PERSONAL_RAW,
    RAW_DISTRIBUTIONS,
    STATS_PEAK_PROXY,
    STATS_PER_YEAR,
    STATS_RAW,
    TEAM_RAW,
    WINNING_IMPACT_PROXY,
    CalibrationStore,
    RawProfile,
    build_raw_calibration,
    percentile_rank,
    stats_peak_proxy_raw,
    stats_per_year_raw,
    winning_impact_proxy_raw,
)

__all__ = [
    "ADVANCED_RAW",
    "CHAMPIONSHIPS",
    "NEUTRAL_PERCENTILE",
    "PERSONAL_RAW",
    "RAW_DISTRIBUTIONS",
    "STATS_PEAK_PROXY",
    "STATS_PER_YEAR",
    "STATS_RAW",
    "TEAM_RAW",
    "WINNING_IMPACT_PROXY",
    "CalibrationStore",
    "RawProfile",
    "build_raw_calibration",
    "percentile_rank",
    "stats_peak_proxy_raw",
    "stats_per_year_raw",
    "winning_impact_proxy_raw",
]
