"""Persisted run records and aggregate benchmark views."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from .lineup import ChemistryBreakdown, LineupPick
from .player import PlayerStats


BenchmarkScope = Literal["group", "global"]
LeaderboardTimeframe = Literal["all", "daily"]


class RunPickRecord(BaseModel):
    pick: LineupPick
    stats: PlayerStats
    contribution: float
    used_fallback: bool = False

    model_config = ConfigDict(frozen=True)


class RunRecord(BaseModel):
    share_code: str
    user_name: str
    group_code: Optional[str] = None
    seed: Optional[str] = None
    base_team_score: float
    team_score: float
    chemistry: ChemistryBreakdown
    used_fallback_stats: bool = False
    picks: List[RunPickRecord] = Field(default_factory=list)
    created_at: datetime

    model_config = ConfigDict(frozen=True)


class BenchmarkAverages(BaseModel):
    team_score: float = 0.0
    base_team_score: float = 0.0
    chemistry_score: float = 0.0
    contribution: float = 0.0
    player_accolades: float = 0.0
    team_accolades: float = 0.0
    stats: float = 0.0
    advanced: float = 0.0

    model_config = ConfigDict(frozen=True)


class Benchmarks(BaseModel):
    scope: BenchmarkScope
    sample_size: int = Field(default=0, ge=0)
    averages: BenchmarkAverages = Field(default_factory=BenchmarkAverages)

    model_config = ConfigDict(frozen=True)
