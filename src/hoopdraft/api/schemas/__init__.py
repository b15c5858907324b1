"""Pydantic models for API I/O."""

from .draft import (
    DrawRequest,
    DrawResponse,
    FranchiseResponse,
    RosterPlayerResponse,
    RosterResponse,
    RunRequest,
    ScoreRequest,
)
from .results import LeaderboardEntry, LeaderboardResponse, RunResultResponse

__all__ = [
    "DrawRequest",
    "DrawResponse",
    "FranchiseResponse",
    "LeaderboardEntry",
    "LeaderboardResponse",
    "RosterPlayerResponse",
    "RosterResponse",
    "RunRequest",
    "RunResultResponse",
    "ScoreRequest",
]
