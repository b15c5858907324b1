"""Async client for the public basketball stats endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional

import httpx

from hoopdraft.config import PipelineSettings

from .payloads import (
    PlayerAward,
    PlayerInfo,
    PlayerSeason,
    RawPlayerCandidate,
    parse_career_seasons,
    parse_franchise_leaders,
    parse_franchise_players,
    parse_player_awards,
    parse_player_info,
)


logger = logging.getLogger(__name__)

STATS_BASE_URL = "https://stats.nba.com/stats"

STATS_HEADERS: Mapping[str, str] = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
    ),
    "Referer": "https://www.nba.com/",
    "Origin": "https://www.nba.com",
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
}


class FetchError(RuntimeError):
    """An external fetch failed after exhausting its retries."""


class StatsClient:
    """Thin wrapper adding headers, timeouts and linear-backoff retries."""

    def __init__(
        self,
        settings: Optional[PipelineSettings] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = STATS_BASE_URL,
    ) -> None:
        self.settings = settings or PipelineSettings()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            headers=dict(STATS_HEADERS),
            timeout=self.settings.timeout_seconds,
        )

    async def __aenter__(self) -> "StatsClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_json(self, endpoint: str, params: Dict[str, Any]) -> Any:
        retries = self.settings.retries
        last_error: Optional[Exception] = None
        for attempt in range(1, retries + 1):
            try:
                response = await self._client.get(f"/{endpoint}", params=params)
                response.raise_for_status()
                return response.json()
            except (httpx.HTTPError, ValueError) as exc:
                last_error = exc
                logger.debug("Fetch %s attempt %d/%d failed: %s", endpoint, attempt, retries, exc)
                if attempt < retries:
                    await asyncio.sleep(attempt * self.settings.backoff_seconds)
        raise FetchError(f"{endpoint} failed after {retries} attempts: {last_error}") from last_error

    async def franchise_players(self, team_id: str) -> List[RawPlayerCandidate]:
        payload = await self.fetch_json(
            "franchiseplayers", {"LeagueID": "00", "PerMode": "Totals", "TeamID": team_id}
        )
        return parse_franchise_players(payload)

    async def franchise_leader_counts(self, team_id: str) -> Dict[int, int]:
        payload = await self.fetch_json("franchiseleaders", {"LeagueID": "00", "TeamID": team_id})
        return parse_franchise_leaders(payload)

    async def player_info(self, player_id: int) -> PlayerInfo:
        payload = await self.fetch_json("commonplayerinfo", {"LeagueID": "00", "PlayerID": player_id})
        return parse_player_info(payload)

    async def career_seasons(self, player_id: int) -> List[PlayerSeason]:
        payload = await self.fetch_json(
            "playercareerstats", {"LeagueID": "00", "PerMode": "Totals", "PlayerID": player_id}
        )
        return parse_career_seasons(payload)

    async def player_awards(self, player_id: int) -> List[PlayerAward]:
        payload = await self.fetch_json("playerawards", {"PlayerID": player_id})
        return parse_player_awards(payload)
