"""Offline roster sync: screen, enrich, derive raw categories, rank and backfill."""

from __future__ import annotations

import asyncio
import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from hoopdraft.config import (
    LINEUP_SLOTS,
    ROSTER_SIZE,
    FranchiseInfo,
    PipelineSettings,
    get_franchise,
    iter_franchises,
    order_slots,
)
from hoopdraft.models import CategoryRaw

from .client import FetchError, StatsClient
from .payloads import PayloadParseError, PlayerAward, PlayerSeason, RawPlayerCandidate
from .seed import SeedPlayer, SnapshotFile, find_seed_player, normalize_name, write_snapshot_file


logger = logging.getLogger(__name__)

MIN_TENURE_RATIO = 0.08

# Ordered (counter, description substring, weight); descriptions are matched upper-case.
AWARD_RULES: Tuple[Tuple[str, str, float], ...] = (
    ("mvp", "NBA MOST VALUABLE PLAYER", 24.0),
    ("finals_mvp", "NBA FINALS MOST VALUABLE PLAYER", 16.0),
    ("dpoy", "NBA DEFENSIVE PLAYER OF THE YEAR", 10.0),
    ("roy", "NBA ROOKIE OF THE YEAR", 6.0),
    ("sixth_man", "NBA SIXTH MAN", 4.0),
    ("mip", "NBA MOST IMPROVED PLAYER", 4.0),
    ("all_nba_first", "ALL-NBA FIRST TEAM", 9.0),
    ("all_nba_second", "ALL-NBA SECOND TEAM", 6.0),
    ("all_nba_third", "ALL-NBA THIRD TEAM", 4.0),
    ("all_defensive_first", "ALL-DEFENSIVE FIRST TEAM", 4.0),
    ("all_defensive_second", "ALL-DEFENSIVE SECOND TEAM", 3.0),
    ("all_star", "NBA ALL-STAR", 2.0),
    ("scoring_titles", "NBA SCORING CHAMPION", 2.0),
    ("rebounding_titles", "NBA REBOUNDING CHAMPION", 1.5),
    ("assists_titles", "NBA ASSISTS LEADER", 1.5),
    ("steals_titles", "NBA STEALS LEADER", 1.5),
    ("blocks_titles", "NBA BLOCKS LEADER", 1.5),
)
CHAMPION_MARKER = "NBA CHAMPION"

_FULL_RANGE = re.compile(r"^(\d{4})\D+(\d{4})$")
_SHORT_RANGE = re.compile(r"^(\d{4})\D+(\d{2})$")
_ANY_YEAR = re.compile(r"(\d{4})")

_EXACT_POSITIONS = {
    "PG": ("PG",),
    "SG": ("SG",),
    "SF": ("SF",),
    "PF": ("PF",),
    "C": ("C",),
    "G": ("PG", "SG"),
    "F": ("SF", "PF"),
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def parse_season_bounds(season_id: str) -> Optional[Tuple[int, int]]:
    """Parse ``2003-04``, ``2003-2004`` or a bare year into ``(start, end)``."""

    compact = (season_id or "").strip()
    match = _FULL_RANGE.match(compact)
    if match:
        start, end = int(match.group(1)), int(match.group(2))
        if end >= start:
            return start, end

    match = _SHORT_RANGE.match(compact)
    if match:
        start = int(match.group(1))
        end = (start // 100) * 100 + int(match.group(2))
        if end < start:
            end += 100
        return start, end

    match = _ANY_YEAR.search(compact)
    if match:
        start = int(match.group(1))
        return start, start + 1
    return None


def map_position_to_slots(position: str) -> Tuple[str, ...]:
    normalized = (position or "").strip().upper()
    if not normalized:
        return LINEUP_SLOTS
    if normalized in _EXACT_POSITIONS:
        return _EXACT_POSITIONS[normalized]

    slots: Set[str] = set()
    if "GUARD" in normalized:
        slots.update(("PG", "SG"))
    if "FORWARD" in normalized:
        slots.update(("SF", "PF"))
    if "CENTER" in normalized:
        slots.add("C")
    for token in re.split(r"[-/,]", normalized):
        slots.update(_EXACT_POSITIONS.get(token.strip(), ()))

    ordered = order_slots(sorted(slots))
    return tuple(ordered) if ordered else LINEUP_SLOTS


def slot_list(seed: Optional[SeedPlayer], from_provider: Sequence[str]) -> Tuple[str, ...]:
    """Prefer provider positions unless they are the generic all-slots answer."""

    looks_generic = len(from_provider) == len(LINEUP_SLOTS)
    if from_provider and not looks_generic:
        chosen: Sequence[str] = from_provider
    elif seed is not None and seed.positions:
        chosen = seed.positions
    else:
        chosen = from_provider or LINEUP_SLOTS
    ordered = order_slots(chosen)
    return tuple(ordered) if ordered else LINEUP_SLOTS


@dataclass(frozen=True)
class YearRange:
    label: str
    years_with_team: int
    season_starts: frozenset = field(default_factory=frozenset)


def derive_year_range(seasons: Iterable[PlayerSeason]) -> YearRange:
    starts: Set[int] = set()
    ends: List[int] = []
    for season in seasons:
        bounds = parse_season_bounds(season.season_id)
        if bounds is None:
            continue
        starts.add(bounds[0])
        ends.append(bounds[1])
    if not starts:
        return YearRange(label="Unknown", years_with_team=1)
    first, last = min(starts), max(ends)
    return YearRange(label=f"{first}-{last}", years_with_team=max(1, last - first + 1), season_starts=frozenset(starts))


def seed_years_with_team(seed: Optional[SeedPlayer]) -> int:
    bounds = parse_season_bounds(seed.years) if seed is not None else None
    if bounds is None:
        return 1
    return max(1, bounds[1] - bounds[0] + 1)


def award_breakdown(awards: Iterable[PlayerAward]) -> Dict[str, int]:
    counts = {name: 0 for name, _, _ in AWARD_RULES}
    for award in awards:
        description = award.description.upper()
        for name, marker, _ in AWARD_RULES:
            if marker in description:
                counts[name] += 1
    return counts


def player_accolades_raw(awards: Iterable[PlayerAward]) -> float:
    counts = award_breakdown(awards)
    return round(sum(counts[name] * weight for name, _, weight in AWARD_RULES), 2)


def championships_for_team(awards: Iterable[PlayerAward], season_starts: Iterable[int]) -> int:
    starts = set(season_starts)
    seasons: Set[int] = set()
    for award in awards:
        if CHAMPION_MARKER not in award.description.upper():
            continue
        bounds = parse_season_bounds(award.season)
        if bounds is not None and bounds[0] in starts:
            seasons.add(bounds[0])
    return len(seasons)


def team_win_pct(seasons: Iterable[PlayerSeason]) -> float:
    seasons = list(seasons)
    wins = sum(season.wins for season in seasons)
    losses = sum(season.losses for season in seasons)
    total = wins + losses
    if total <= 0:
        return 0.5
    return wins / total


def initial_impact(row: RawPlayerCandidate) -> float:
    """Cheap screening score from franchise box totals."""

    return row.pts + row.reb * 1.2 + row.ast * 1.5 + row.stl * 2.5 + row.blk * 2.5 + row.gp * 0.18 - row.tov * 0.7


def stats_raw(row: RawPlayerCandidate) -> float:
    return row.pts + row.reb * 1.2 + row.ast * 1.5 + row.stl * 2.2 + row.blk * 2.2 - row.tov * 1.1


def advanced_raw(row: RawPlayerCandidate) -> float:
    per_game = 0.0
    if row.gp > 0:
        per_game = (
            row.pts + row.reb * 1.25 + row.ast * 1.6 + row.stl * 2.3 + row.blk * 2.3 - row.tov * 1.25
        ) / row.gp
    return per_game * 12 + math.log10(max(10.0, row.gp + 1)) * 20


def team_accolades_raw(championships: int, leader_appearances: int, years_with_team: int, win_pct: float) -> float:
    return championships * 18 + leader_appearances * 4 + years_with_team * 0.9 + win_pct * 40


def min_max_normalize(value: float, values: Sequence[float]) -> float:
    """Scale within the current batch; a degenerate batch maps to 50."""

    if not values:
        return 50.0
    low, high = min(values), max(values)
    if not (math.isfinite(low) and math.isfinite(high)) or high == low:
        return 50.0
    return (value - low) / (high - low) * 100.0


@dataclass(frozen=True)
class PlayerMeta:
    slots: Tuple[str, ...]
    career_years: int
    seasons: Tuple[PlayerSeason, ...]
    awards: Tuple[PlayerAward, ...]


class PlayerMetaLoader:
    """Per-run request de-duplication: concurrent lookups of one player share a task."""

    def __init__(self, client: StatsClient) -> None:
        self._client = client
        self._inflight: Dict[int, "asyncio.Task[PlayerMeta]"] = {}

    def __len__(self) -> int:
        return len(self._inflight)

    def get(self, player_id: int) -> "asyncio.Task[PlayerMeta]":
        task = self._inflight.get(player_id)
        if task is None:
            task = asyncio.ensure_future(self._load(player_id))
            self._inflight[player_id] = task
        return task

    async def _load(self, player_id: int) -> PlayerMeta:
        info, seasons, awards = await asyncio.gather(
            self._client.player_info(player_id),
            self._client.career_seasons(player_id),
            self._client.player_awards(player_id),
        )
        career = info.career_years
        if career <= 0 and seasons:
            starts = {bounds[0] for bounds in (parse_season_bounds(s.season_id) for s in seasons) if bounds}
            career = len(starts)
        return PlayerMeta(
            slots=map_position_to_slots(info.position),
            career_years=max(1, career),
            seasons=tuple(seasons),
            awards=tuple(awards),
        )


@dataclass(frozen=True)
class EnrichedCandidate:
    player_id: int
    name: str
    years: str
    years_with_team: int
    career_years: int
    positions: Tuple[str, ...]
    championships: int
    raw: CategoryRaw
    enriched: bool = True

    @property
    def tenure_ratio(self) -> float:
        return _clamp(self.years_with_team / max(1, self.career_years), MIN_TENURE_RATIO, 1.0)


def enrich_from_meta(
    candidate: RawPlayerCandidate,
    meta: PlayerMeta,
    *,
    team_id: str,
    seed: Optional[SeedPlayer],
    leader_counts: Dict[int, int],
) -> EnrichedCandidate:
    team_seasons = [season for season in meta.seasons if season.team_id == team_id]
    year_range = derive_year_range(team_seasons)
    if year_range.label == "Unknown":
        years = seed.years if seed is not None else "Unknown"
        years_with_team = seed_years_with_team(seed)
    else:
        years = year_range.label
        years_with_team = year_range.years_with_team
    seed_career = seed.career_years if seed is not None and seed.career_years else 0
    career = max(meta.career_years, seed_career, years_with_team)
    titles = max(
        championships_for_team(meta.awards, year_range.season_starts),
        seed.championships if seed is not None else 0,
    )
    raw = CategoryRaw(
        player_accolades=player_accolades_raw(meta.awards),
        team_accolades=team_accolades_raw(
            titles, leader_counts.get(candidate.player_id, 0), years_with_team, team_win_pct(team_seasons)
        ),
        stats=stats_raw(candidate),
        advanced=advanced_raw(candidate),
    )
    return EnrichedCandidate(
        player_id=candidate.player_id,
        name=candidate.player_name,
        years=years,
        years_with_team=years_with_team,
        career_years=career,
        positions=slot_list(seed, meta.slots),
        championships=titles,
        raw=raw,
    )


def enrich_from_seed(candidate: RawPlayerCandidate, seed: Optional[SeedPlayer]) -> EnrichedCandidate:
    """Degraded record used when a candidate's detail fetches fail."""

    years_with_team = seed_years_with_team(seed)
    seed_career = seed.career_years if seed is not None and seed.career_years else years_with_team
    if seed is not None and seed.category_raw is not None:
        raw = seed.category_raw
    else:
        raw = CategoryRaw(
            player_accolades=0.0,
            team_accolades=years_with_team * 1.1,
            stats=initial_impact(candidate),
            advanced=0.0,
        )
    return EnrichedCandidate(
        player_id=candidate.player_id,
        name=candidate.player_name,
        years=seed.years if seed is not None else "Unknown",
        years_with_team=years_with_team,
        career_years=max(seed_career, years_with_team),
        positions=slot_list(seed, ()),
        championships=seed.championships if seed is not None else 0,
        raw=raw,
        enriched=False,
    )


def franchise_scores(candidates: Sequence[EnrichedCandidate]) -> List[float]:
    """Batch-relative franchise score with the multiplicative tenure dampener."""

    personal = [c.raw.player_accolades for c in candidates]
    team = [c.raw.team_accolades for c in candidates]
    stats = [c.raw.stats for c in candidates]
    advanced = [c.raw.advanced for c in candidates]
    scores: List[float] = []
    for c in candidates:
        base = (
            min_max_normalize(c.raw.player_accolades, personal) * 0.30
            + min_max_normalize(c.raw.team_accolades, team) * 0.25
            + min_max_normalize(c.raw.stats, stats) * 0.25
            + min_max_normalize(c.raw.advanced, advanced) * 0.20
        )
        scores.append(base * (0.52 + c.tenure_ratio * 0.48))
    return scores


def rank_candidates(candidates: Sequence[EnrichedCandidate], limit: int = ROSTER_SIZE) -> List[EnrichedCandidate]:
    scored = list(zip(franchise_scores(candidates), candidates))
    scored.sort(key=lambda item: item[0], reverse=True)
    return [candidate for _, candidate in scored[:limit]]


def to_seed_player(candidate: EnrichedCandidate) -> SeedPlayer:
    return SeedPlayer(
        name=candidate.name,
        years=candidate.years,
        positions=list(candidate.positions),
        career_years=max(1, int(round(candidate.career_years))),
        championships=max(0, int(round(candidate.championships))),
        category_raw=CategoryRaw(
            player_accolades=round(candidate.raw.player_accolades, 3),
            team_accolades=round(candidate.raw.team_accolades, 3),
            stats=round(candidate.raw.stats, 3),
            advanced=round(candidate.raw.advanced, 3),
        ),
    )


def backfill(players: Sequence[SeedPlayer], fallback: Sequence[SeedPlayer], size: int = ROSTER_SIZE) -> List[SeedPlayer]:
    """Pad from ``fallback`` without repeating a (normalized) name."""

    roster = list(players)[:size]
    seen = {normalize_name(player.name) for player in roster}
    for candidate in fallback:
        if len(roster) >= size:
            break
        key = normalize_name(candidate.name)
        if key in seen:
            continue
        roster.append(candidate)
        seen.add(key)
    return roster


@dataclass(frozen=True)
class FranchiseSyncReport:
    abbr: str
    players: Tuple[SeedPlayer, ...]
    used_fallback: bool
    candidates: int = 0
    degraded_candidates: int = 0
    backfilled: int = 0
    error: Optional[str] = None


@dataclass(frozen=True)
class SyncResult:
    snapshot: SnapshotFile
    reports: Tuple[FranchiseSyncReport, ...]

    @property
    def fallback_franchises(self) -> List[str]:
        return [report.abbr for report in self.reports if report.used_fallback]


def _fallback_report(info: FranchiseInfo, fallback: Sequence[SeedPlayer], error: Optional[str]) -> FranchiseSyncReport:
    return FranchiseSyncReport(abbr=info.abbr, players=tuple(fallback[:ROSTER_SIZE]), used_fallback=True, error=error)


async def sync_franchise(
    client: StatsClient,
    loader: PlayerMetaLoader,
    info: FranchiseInfo,
    fallback: Sequence[SeedPlayer],
    settings: PipelineSettings,
) -> FranchiseSyncReport:
    """Rebuild one franchise; any franchise-level failure keeps the seed roster."""

    try:
        rows = await client.franchise_players(info.stats_id)
    except (FetchError, PayloadParseError) as exc:
        logger.warning("Could not fetch franchise players for %s; using existing seed: %s", info.abbr, exc)
        return _fallback_report(info, fallback, str(exc))

    if not rows:
        logger.warning("No franchise player rows returned for %s; using existing seed", info.abbr)
        return _fallback_report(info, fallback, "no franchise rows")

    leader_counts: Dict[int, int] = {}
    try:
        leader_counts = await client.franchise_leader_counts(info.stats_id)
    except (FetchError, PayloadParseError) as exc:
        logger.warning("Could not fetch franchise leaders for %s; continuing without leader bonus: %s", info.abbr, exc)

    screened = sorted(rows, key=initial_impact, reverse=True)[: settings.candidate_limit]
    logger.info("%s: evaluating %d candidates", info.abbr, len(screened))

    semaphore = asyncio.Semaphore(settings.concurrency)

    async def enrich(candidate: RawPlayerCandidate) -> EnrichedCandidate:
        seed = find_seed_player(fallback, candidate.player_name)
        async with semaphore:
            try:
                meta = await loader.get(candidate.player_id)
                return enrich_from_meta(
                    candidate, meta, team_id=info.stats_id, seed=seed, leader_counts=leader_counts
                )
            except Exception as exc:
                # One candidate never aborts its siblings in the gather below.
                logger.warning(
                    "Could not fully enrich %s (%s); using fallback information: %s",
                    candidate.player_name,
                    info.abbr,
                    exc,
                )
                return enrich_from_seed(candidate, seed)

    enriched = await asyncio.gather(*(enrich(candidate) for candidate in screened))
    ranked = [to_seed_player(candidate) for candidate in rank_candidates(enriched)]
    players = backfill(ranked, fallback)
    logger.info("Top %s: %s", info.abbr, ", ".join(player.name for player in players[:5]))
    return FranchiseSyncReport(
        abbr=info.abbr,
        players=tuple(players),
        used_fallback=False,
        candidates=len(screened),
        degraded_candidates=sum(1 for candidate in enriched if not candidate.enriched),
        backfilled=max(0, len(players) - len(ranked)),
    )


def _selected(abbrs: Optional[Iterable[str]]) -> Optional[Set[str]]:
    if abbrs is None:
        return None
    return {get_franchise(abbr).abbr for abbr in abbrs}


async def run_pipeline(
    seed: SnapshotFile,
    *,
    settings: Optional[PipelineSettings] = None,
    abbrs: Optional[Iterable[str]] = None,
    client: Optional[StatsClient] = None,
    offline: bool = False,
) -> SyncResult:
    """Sync every franchise (or the selected ones) and return the new snapshot file.

    Franchises that are not selected, or every franchise when ``offline``,
    carry their seed roster forward unchanged.
    """

    settings = settings or PipelineSettings.from_env()
    selected = _selected(abbrs)
    owns_client = client is None and not offline
    if owns_client:
        client = StatsClient(settings)

    reports: List[FranchiseSyncReport] = []
    try:
        loader = PlayerMetaLoader(client) if client is not None else None
        for info in iter_franchises():
            fallback = seed.players_for(info.abbr)
            if offline or loader is None or (selected is not None and info.abbr not in selected):
                reports.append(
                    FranchiseSyncReport(abbr=info.abbr, players=tuple(fallback[:ROSTER_SIZE]), used_fallback=True)
                )
                continue
            logger.info("Syncing all-time roster for %s", info.abbr)
            reports.append(await sync_franchise(client, loader, info, fallback, settings))
            if settings.team_delay_seconds > 0:
                await asyncio.sleep(settings.team_delay_seconds)
    finally:
        if owns_client and client is not None:
            await client.aclose()

    snapshot = SnapshotFile(
        generated_at=datetime.now(timezone.utc),
        franchises={report.abbr: list(report.players) for report in reports},
    )
    return SyncResult(snapshot=snapshot, reports=tuple(reports))


async def rebuild_snapshot(
    seed: SnapshotFile,
    output: Path,
    **kwargs,
) -> SyncResult:
    """Pipeline entry point: run the sync and persist the snapshot JSON."""

    result = await run_pipeline(seed, **kwargs)
    write_snapshot_file(output, result.snapshot)
    if result.fallback_franchises:
        logger.info("Franchises kept from seed: %s", ", ".join(result.fallback_franchises))
    return result
