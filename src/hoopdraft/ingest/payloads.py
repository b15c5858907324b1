"""Strict parsing of stats-provider result-set payloads into typed rows."""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict


class PayloadParseError(ValueError):
    """A provider payload did not match the expected result-set shape."""


class ResultSet(BaseModel):
    name: Optional[str] = None
    headers: List[str]
    rows: List[List[Any]] = Field(alias="rowSet")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def column(self, *variants: str) -> Optional[int]:
        targets = {variant.upper() for variant in variants}
        for index, header in enumerate(self.headers):
            if header.upper() in targets:
                return index
        return None


class StatsPayload(BaseModel):
    result_sets: Optional[List[ResultSet]] = Field(default=None, alias="resultSets")
    result_set: Optional[ResultSet] = Field(default=None, alias="resultSet")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class RawPlayerCandidate(BaseModel):
    """Franchise career totals for one player, as screened by the pipeline."""

    player_id: int
    player_name: str = Field(..., min_length=1)
    gp: float = 0.0
    pts: float = 0.0
    reb: float = 0.0
    ast: float = 0.0
    stl: float = 0.0
    blk: float = 0.0
    tov: float = 0.0

    model_config = ConfigDict(frozen=True)


class PlayerInfo(BaseModel):
    position: str = ""
    career_years: int = 0

    model_config = ConfigDict(frozen=True)


class PlayerSeason(BaseModel):
    team_id: str
    season_id: str
    gp: float
    wins: float = 0.0
    losses: float = 0.0

    model_config = ConfigDict(frozen=True)


class PlayerAward(BaseModel):
    description: str
    season: str = ""

    model_config = ConfigDict(frozen=True)


def parse_result_set(payload: Any, preferred_name: Optional[str] = None) -> ResultSet:
    """Select the named (or first) result set from a provider payload."""

    try:
        parsed = StatsPayload.model_validate(payload)
    except ValidationError as exc:
        raise PayloadParseError(f"unexpected stats payload: {exc.error_count()} validation errors") from exc

    if parsed.result_sets:
        selected = None
        if preferred_name:
            wanted = preferred_name.lower()
            selected = next((rs for rs in parsed.result_sets if (rs.name or "").lower() == wanted), None)
        return selected or parsed.result_sets[0]
    if parsed.result_set is not None:
        return parsed.result_set
    raise PayloadParseError("stats payload has no result set")


def _cell(row: Sequence[Any], index: Optional[int]) -> Any:
    if index is None or index >= len(row):
        return None
    return row[index]


def _number(value: Any) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return 0.0
    return numeric if math.isfinite(numeric) else 0.0


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def parse_franchise_players(payload: Any) -> List[RawPlayerCandidate]:
    table = parse_result_set(payload)
    id_col = table.column("PLAYER_ID", "PERSON_ID")
    name_col = table.column("PLAYER", "PLAYER_NAME")
    if id_col is None or name_col is None:
        raise PayloadParseError("franchise players table is missing player id/name columns")

    columns = {stat: table.column(stat.upper()) for stat in ("gp", "pts", "reb", "ast", "stl", "blk", "tov")}
    rows: List[RawPlayerCandidate] = []
    for row in table.rows:
        raw_id = _cell(row, id_col)
        name = _text(_cell(row, name_col))
        try:
            player_id = int(float(raw_id))
        except (TypeError, ValueError):
            continue
        if not name:
            continue
        rows.append(
            RawPlayerCandidate(
                player_id=player_id,
                player_name=name,
                **{stat: _number(_cell(row, index)) for stat, index in columns.items()},
            )
        )
    return rows


def parse_franchise_leaders(payload: Any) -> Dict[int, int]:
    """Count how many franchise-leader columns name each player."""

    table = parse_result_set(payload)
    counts: Dict[int, int] = {}
    if not table.rows:
        return counts
    row = table.rows[0]
    for index, header in enumerate(table.headers):
        if not header.upper().endswith("_PLAYER_ID"):
            continue
        try:
            player_id = int(float(_cell(row, index)))
        except (TypeError, ValueError):
            continue
        counts[player_id] = counts.get(player_id, 0) + 1
    return counts


def parse_player_info(payload: Any) -> PlayerInfo:
    table = parse_result_set(payload, "CommonPlayerInfo")
    row = table.rows[0] if table.rows else []
    position = _text(_cell(row, table.column("POSITION")))
    from_year = _number(_cell(row, table.column("FROM_YEAR")))
    to_year = _number(_cell(row, table.column("TO_YEAR")))
    career = 0
    if from_year > 0 and to_year >= from_year:
        career = int(to_year - from_year + 1)
    return PlayerInfo(position=position, career_years=career)


def parse_career_seasons(payload: Any) -> List[PlayerSeason]:
    table = parse_result_set(payload, "SeasonTotalsRegularSeason")
    team_col = table.column("TEAM_ID")
    season_col = table.column("SEASON_ID")
    gp_col = table.column("GP")
    if team_col is None or season_col is None or gp_col is None:
        return []
    wins_col = table.column("W")
    losses_col = table.column("L")

    seasons: List[PlayerSeason] = []
    for row in table.rows:
        team_id = _text(_cell(row, team_col))
        season_id = _text(_cell(row, season_col))
        gp = _number(_cell(row, gp_col))
        if not team_id or not season_id or gp <= 0:
            continue
        seasons.append(
            PlayerSeason(
                team_id=team_id,
                season_id=season_id,
                gp=gp,
                wins=_number(_cell(row, wins_col)),
                losses=_number(_cell(row, losses_col)),
            )
        )
    return seasons


def parse_player_awards(payload: Any) -> List[PlayerAward]:
    table = parse_result_set(payload)
    description_col = table.column("DESCRIPTION")
    if description_col is None:
        return []
    season_col = table.column("SEASON")
    awards: List[PlayerAward] = []
    for row in table.rows:
        description = _text(_cell(row, description_col))
        if description:
            awards.append(PlayerAward(description=description, season=_text(_cell(row, season_col))))
    return awards
