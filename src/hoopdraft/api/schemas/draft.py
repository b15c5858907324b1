from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from hoopdraft.models import Franchise, LineupPick, PlayerExplanation


class FranchiseResponse(BaseModel):
    abbr: str
    name: str
    logo_url: str | None = None


class RosterPlayerResponse(BaseModel):
    name: str
    years_with_team: str
    eligible_slots: List[str]
    championships: int
    explanation: PlayerExplanation | None = None


class RosterResponse(BaseModel):
    franchise: FranchiseResponse
    players: List[RosterPlayerResponse]


class DrawRequest(BaseModel):
    seed: str | None = Field(default=None, max_length=64)
    count: int = Field(default=5, ge=1, le=30)


class DrawResponse(BaseModel):
    seed: str | None
    franchises: List[Franchise]
    shot_clock_seconds: int


class ScoreRequest(BaseModel):
    picks: List[LineupPick] = Field(default_factory=list, max_length=5)


class RunRequest(BaseModel):
    user_name: str = Field(..., min_length=1, max_length=40)
    group_code: str | None = Field(default=None, max_length=64)
    seed: str | None = Field(default=None, max_length=64)
    picks: List[LineupPick]
