"""Lineup picks and the score breakdowns computed from them."""

from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from .player import PlayerStats


Slot = Literal["PG", "SG", "SF", "PF", "C"]


class LineupPick(BaseModel):
    slot: Slot
    player_name: str
    franchise_abbr: str
    franchise_name: str
    is_penalty: bool = False

    model_config = ConfigDict(frozen=True)


class PlayerScoreBreakdown(BaseModel):
    pick: LineupPick
    stats: PlayerStats
    used_fallback: bool
    normalized_metrics: PlayerStats
    contribution: float

    model_config = ConfigDict(frozen=True)


class RoleProfile(BaseModel):
    playmaking: float = Field(default=0.0, ge=0.0, le=100.0)
    spacing: float = Field(default=0.0, ge=0.0, le=100.0)
    rim_pressure: float = Field(default=0.0, ge=0.0, le=100.0)
    perimeter_defense: float = Field(default=0.0, ge=0.0, le=100.0)
    rim_protection: float = Field(default=0.0, ge=0.0, le=100.0)
    rebounding: float = Field(default=0.0, ge=0.0, le=100.0)
    ball_dominance: float = Field(default=0.0, ge=0.0, le=100.0)

    model_config = ConfigDict(frozen=True)


class ChemistryBreakdown(BaseModel):
    role_coverage: float = 0.0
    complementarity: float = 0.0
    usage_balance: float = 0.0
    two_way_balance: float = 0.0
    culture: float = 0.0
    chemistry_score: float = 0.0
    multiplier: float = Field(default=1.0, ge=1.0, le=2.0)

    model_config = ConfigDict(frozen=True)


class LineupScore(BaseModel):
    base_team_score: float
    team_score: float
    chemistry: ChemistryBreakdown
    player_scores: List[PlayerScoreBreakdown]
    used_fallback_stats: bool

    model_config = ConfigDict(frozen=True)
