"""Canonical player models shared across the sync pipeline and scoring layers."""

from __future__ import annotations

import math
from typing import Literal, Tuple

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


Metric = Literal["player_accolades", "team_accolades", "stats", "advanced"]
METRICS: Tuple[Metric, ...] = ("player_accolades", "team_accolades", "stats", "advanced")


class Franchise(BaseModel):
    abbr: str = Field(..., min_length=2, max_length=4)
    name: str

    model_config = ConfigDict(frozen=True)


class CategoryRaw(BaseModel):
    """Unbounded raw category scalars for one player-franchise pairing."""

    player_accolades: float
    team_accolades: float
    stats: float
    advanced: float

    model_config = ConfigDict(frozen=True)

    @field_validator("player_accolades", "team_accolades", "stats", "advanced")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("category values must be finite")
        return value


class RosterPlayer(BaseModel):
    """Runtime-facing, franchise-scoped roster entry."""

    name: str = Field(..., min_length=1)
    years_with_team: str
    eligible_slots: Tuple[str, ...] = Field(..., min_length=1)
    career_years: int = Field(default=1, ge=1)
    championships: int = Field(default=0, ge=0)
    category_raw: CategoryRaw

    model_config = ConfigDict(frozen=True)


class PlayerStats(BaseModel):
    """Per-category values for one player, on the 0-100 category scale."""

    player_accolades: float
    team_accolades: float
    stats: float
    advanced: float

    model_config = ConfigDict(frozen=True)

    def metric(self, name: Metric) -> float:
        return float(getattr(self, name))


ZERO_STATS = PlayerStats(player_accolades=0.0, team_accolades=0.0, stats=0.0, advanced=0.0)


class StatsLookup(BaseModel):
    franchise_abbr: str
    player_name: str
    stats: PlayerStats
    used_fallback: bool

    model_config = ConfigDict(frozen=True)


class PlayerExplanation(BaseModel):
    """Supporting detail for a roster player's category scores."""

    years_with_team: int
    career_years: int
    tenure_ratio: float
    championships: int
    franchise_score: float
    category_scores: PlayerStats

    model_config = ConfigDict(frozen=True)
