from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel

from hoopdraft.models import Benchmarks, ChemistryBreakdown, PlayerStats, RunRecord


class RunResultResponse(BaseModel):
    run: RunRecord
    category_averages: PlayerStats
    benchmarks: Benchmarks
    tips: List[str]


class LeaderboardEntry(BaseModel):
    rank: int
    share_code: str
    user_name: str
    group_code: str | None
    team_score: float
    base_team_score: float
    chemistry: ChemistryBreakdown
    players: List[str]
    created_at: datetime


class LeaderboardResponse(BaseModel):
    group_code: str | None
    timeframe: str
    entries: List[LeaderboardEntry]
