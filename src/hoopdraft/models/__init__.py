"""Shared pydantic models."""

from .lineup import (
    ChemistryBreakdown,
    LineupPick,
    LineupScore,
    PlayerScoreBreakdown,
    RoleProfile,
    Slot,
)
from .player import (
    METRICS,
    ZERO_STATS,
    CategoryRaw,
    Franchise,
    Metric,
    PlayerExplanation,
    PlayerStats,
    RosterPlayer,
    StatsLookup,
)
from .run import (
    BenchmarkAverages,
    Benchmarks,
    BenchmarkScope,
    LeaderboardTimeframe,
    RunPickRecord,
    RunRecord,
)

__all__ = [
    "METRICS",
    "ZERO_STATS",
    "BenchmarkAverages",
    "BenchmarkScope",
    "Benchmarks",
    "CategoryRaw",
    "ChemistryBreakdown",
    "Franchise",
    "LeaderboardTimeframe",
    "LineupPick",
    "LineupScore",
    "Metric",
    "PlayerExplanation",
    "PlayerScoreBreakdown",
    "PlayerStats",
    "RoleProfile",
    "RosterPlayer",
    "RunPickRecord",
    "RunRecord",
    "Slot",
    "StatsLookup",
]
