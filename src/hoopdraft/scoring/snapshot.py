"""Immutable roster + calibration snapshot consumed by the runtime scorers."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from hoopdraft.calibration import (
    ADVANCED_RAW,
    CHAMPIONSHIPS,
    PERSONAL_RAW,
    STATS_PEAK_PROXY,
    STATS_PER_YEAR,
    STATS_RAW,
    TEAM_RAW,
    WINNING_IMPACT_PROXY,
    CalibrationStore,
    RawProfile,
    build_raw_calibration,
    stats_peak_proxy_raw,
    stats_per_year_raw,
    winning_impact_proxy_raw,
)
from hoopdraft.config import LINEUP_SLOTS, ROSTER_SIZE, get_franchise, iter_franchises, order_slots, snapshot_path
from hoopdraft.ingest.seed import (
    SeedPlayer,
    SnapshotFile,
    load_snapshot_file,
    normalize_name,
    parse_years_with_team,
)
from hoopdraft.models import (
    METRICS,
    CategoryRaw,
    Franchise,
    Metric,
    PlayerExplanation,
    PlayerStats,
    RosterPlayer,
    StatsLookup,
)

from .contribution import METRIC_WEIGHTS, round_one


logger = logging.getLogger(__name__)

MIN_TENURE_RATIO = 0.08
CATEGORY_FLOOR = 4.0
CATEGORY_CEILING = 97.0
FRANCHISE_SCORE_FLOOR = 8.0

_FALLBACK_BY_SLOT: Mapping[str, PlayerStats] = {
    "PG": PlayerStats(player_accolades=30, team_accolades=28, stats=33, advanced=29),
    "SG": PlayerStats(player_accolades=29, team_accolades=27, stats=32, advanced=28),
    "SF": PlayerStats(player_accolades=30, team_accolades=28, stats=33, advanced=29),
    "PF": PlayerStats(player_accolades=31, team_accolades=29, stats=34, advanced=30),
    "C": PlayerStats(player_accolades=32, team_accolades=30, stats=35, advanced=31),
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def tenure_ratio(years_with_team: int, career_years: int) -> float:
    return _clamp(years_with_team / max(1, career_years), MIN_TENURE_RATIO, 1.0)


def legacy_category_raw(rank_index: int, years_with_team: int, career_years: int, championships: int) -> CategoryRaw:
    """Estimate raw categories for a seed entry that was never measured.

    Seed files list players best-first, so the entry's position is the
    strongest available signal.
    """

    rank = _clamp(1 - rank_index / (ROSTER_SIZE - 1), 0.0, 1.0)
    years = _clamp(years_with_team / 16, 0.0, 1.0)
    tenure = tenure_ratio(years_with_team, career_years)
    return CategoryRaw(
        player_accolades=rank * 72 + championships * 6 + years * 10 + tenure * 8,
        team_accolades=championships * 20 + years * 28 + rank * 24 + tenure * 12,
        stats=rank * 56 + years * 36 + tenure * 14 + championships * 2,
        advanced=rank * 62 + tenure * 22 + years * 12 + championships * 3,
    )


@dataclass(frozen=True)
class SeedProfile:
    abbr: str
    name: str
    years_label: str
    positions: Tuple[str, ...]
    years_with_team: int
    career_years: int
    championships: int
    raw: CategoryRaw

    @property
    def raw_profile(self) -> RawProfile:
        return RawProfile(raw=self.raw, years_with_team=self.years_with_team, championships=self.championships)


def seed_profile(abbr: str, entry: SeedPlayer, rank_index: int) -> SeedProfile:
    years = parse_years_with_team(entry.years)
    career = max(entry.career_years or years, years)
    titles = max(0, entry.championships)
    raw = entry.category_raw or legacy_category_raw(rank_index, years, career, titles)
    positions = order_slots(entry.positions) or LINEUP_SLOTS
    return SeedProfile(
        abbr=abbr,
        name=entry.name,
        years_label=entry.years,
        positions=tuple(positions),
        years_with_team=years,
        career_years=career,
        championships=titles,
        raw=raw,
    )


def category_scores(profile: SeedProfile, calibration: CalibrationStore) -> PlayerStats:
    """Distribution-relative 0-100 category scores for one roster entry."""

    raw = profile.raw
    tenure = tenure_ratio(profile.years_with_team, profile.career_years)
    pct = calibration.percentile

    personal = pct(PERSONAL_RAW, raw.player_accolades)
    team = pct(TEAM_RAW, raw.team_accolades)
    volume = pct(STATS_RAW, raw.stats)
    per_year = pct(STATS_PER_YEAR, stats_per_year_raw(raw, profile.years_with_team))
    peak = pct(STATS_PEAK_PROXY, stats_peak_proxy_raw(raw, profile.years_with_team))
    advanced = pct(ADVANCED_RAW, raw.advanced)
    titles = pct(CHAMPIONSHIPS, float(profile.championships))
    winning = pct(WINNING_IMPACT_PROXY, winning_impact_proxy_raw(raw, profile.championships))

    personal_base = personal * 0.8 + team * 0.1 + titles * 0.1
    team_base = team * 0.56 + winning * 0.26 + titles * 0.18
    stats_base = volume * 0.37 + per_year * 0.29 + peak * 0.34
    advanced_base = advanced * 0.52 + winning * 0.36 + team * 0.12
    # Anchor advanced to winning so it does not echo the box-score category.
    advanced_decoupled = _clamp(advanced_base - max(0.0, stats_base - advanced_base) * 0.35, 0.0, 100.0)

    def bounded(value: float) -> float:
        return _clamp(value, CATEGORY_FLOOR, CATEGORY_CEILING)

    return PlayerStats(
        player_accolades=bounded(personal_base * (0.92 + tenure * 0.08)),
        team_accolades=bounded(team_base * (0.86 + tenure * 0.14)),
        stats=bounded(stats_base * (0.93 + tenure * 0.07)),
        advanced=bounded(advanced_decoupled * (0.94 + tenure * 0.06)),
    )


def franchise_score(categories: PlayerStats, years_with_team: int, career_years: int) -> float:
    weighted = sum(categories.metric(metric) * METRIC_WEIGHTS[metric] for metric in METRICS)
    multiplier = 0.56 + tenure_ratio(years_with_team, career_years) * 0.44
    return _clamp(weighted * multiplier, FRANCHISE_SCORE_FLOOR, CATEGORY_CEILING)


def fallback_stats(primary_slot: Optional[str]) -> PlayerStats:
    return _FALLBACK_BY_SLOT.get(primary_slot or "SF", _FALLBACK_BY_SLOT["SF"])


def _key(abbr: str, name: str) -> Tuple[str, str]:
    return abbr.strip().upper(), normalize_name(name)


@dataclass(frozen=True)
class RosterEntry:
    player: RosterPlayer
    stats: PlayerStats
    explanation: PlayerExplanation


@dataclass(frozen=True)
class Snapshot:
    """Build-once, read-many roster state.

    Scores are pure functions of a ``Snapshot``; refreshing data means
    building a new one rather than mutating this one.
    """

    rosters: Mapping[str, Tuple[RosterEntry, ...]]
    raw_calibration: CalibrationStore
    metric_calibration: CalibrationStore
    generated_at: Optional[datetime] = None
    _index: Dict[Tuple[str, str], RosterEntry] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        for abbr, entries in self.rosters.items():
            for entry in entries:
                self._index[_key(abbr, entry.player.name)] = entry

    @classmethod
    def build(cls, seed: SnapshotFile) -> "Snapshot":
        profiles: Dict[str, List[SeedProfile]] = {}
        for info in iter_franchises():
            entries = seed.players_for(info.abbr)
            profiles[info.abbr] = [seed_profile(info.abbr, entry, index) for index, entry in enumerate(entries)]

        population = [profile.raw_profile for team in profiles.values() for profile in team]
        raw_calibration = build_raw_calibration(population)

        rosters: Dict[str, Tuple[RosterEntry, ...]] = {}
        for abbr, team in profiles.items():
            ranked: List[Tuple[float, RosterEntry]] = []
            for profile in team:
                categories = category_scores(profile, raw_calibration)
                score = franchise_score(categories, profile.years_with_team, profile.career_years)
                player = RosterPlayer(
                    name=profile.name,
                    years_with_team=profile.years_label,
                    eligible_slots=profile.positions,
                    career_years=profile.career_years,
                    championships=profile.championships,
                    category_raw=profile.raw,
                )
                explanation = PlayerExplanation(
                    years_with_team=profile.years_with_team,
                    career_years=profile.career_years,
                    tenure_ratio=round_one(tenure_ratio(profile.years_with_team, profile.career_years)),
                    championships=profile.championships,
                    franchise_score=round_one(score),
                    category_scores=PlayerStats(
                        **{metric: round_one(categories.metric(metric)) for metric in METRICS}
                    ),
                )
                ranked.append((score, RosterEntry(player=player, stats=categories, explanation=explanation)))
            # Stable sort keeps seed order for equal scores.
            ranked.sort(key=lambda item: item[0], reverse=True)
            rosters[abbr] = tuple(entry for _, entry in ranked[:ROSTER_SIZE])
            if len(rosters[abbr]) < ROSTER_SIZE:
                logger.warning("Franchise %s has only %d roster entries", abbr, len(rosters[abbr]))

        metric_calibration = CalibrationStore.from_values(
            {
                metric: [entry.stats.metric(metric) for entries in rosters.values() for entry in entries]
                for metric in METRICS
            }
        )
        logger.info(
            "Built snapshot: %d franchises, %d players",
            len(rosters),
            sum(len(entries) for entries in rosters.values()),
        )
        return cls(
            rosters=rosters,
            raw_calibration=raw_calibration,
            metric_calibration=metric_calibration,
            generated_at=seed.generated_at,
        )

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Snapshot":
        return cls.build(load_snapshot_file(path or snapshot_path()))

    # Roster queries

    def franchises(self) -> List[Franchise]:
        return [Franchise(abbr=info.abbr, name=info.name) for info in iter_franchises()]

    def get_roster(self, abbr: str) -> List[RosterPlayer]:
        return [entry.player for entry in self.rosters.get(abbr.strip().upper(), ())]

    def roster_names(self, abbr: str) -> List[str]:
        return [player.name for player in self.get_roster(abbr)]

    def find_player(self, abbr: str, name: str) -> Optional[RosterPlayer]:
        entry = self._index.get(_key(abbr, name))
        return entry.player if entry else None

    def is_player_on_team(self, abbr: str, name: str) -> bool:
        return _key(abbr, name) in self._index

    def get_player_eligible_slots(self, abbr: str, name: str) -> Tuple[str, ...]:
        entry = self._index.get(_key(abbr, name))
        if entry is None:
            return LINEUP_SLOTS
        return entry.player.eligible_slots

    def get_player_explanation(self, abbr: str, name: str) -> Optional[PlayerExplanation]:
        entry = self._index.get(_key(abbr, name))
        return entry.explanation if entry else None

    # Scoring inputs

    def lookup_player_stats(self, abbr: str, name: str) -> StatsLookup:
        entry = self._index.get(_key(abbr, name))
        if entry is not None:
            return StatsLookup(franchise_abbr=abbr.upper(), player_name=name, stats=entry.stats, used_fallback=False)

        primary = self.get_player_eligible_slots(abbr, name)[0]
        logger.debug("No roster entry for %s/%s; using %s baseline", abbr, name, primary)
        return StatsLookup(
            franchise_abbr=abbr.upper(),
            player_name=name,
            stats=fallback_stats(primary),
            used_fallback=True,
        )

    def normalize_metric_globally(self, metric: Metric, value: float) -> float:
        return self.metric_calibration.percentile(metric, value)

    def to_snapshot_file(self) -> SnapshotFile:
        franchises = {
            abbr: [
                SeedPlayer(
                    name=entry.player.name,
                    years=entry.player.years_with_team,
                    positions=list(entry.player.eligible_slots),
                    career_years=entry.player.career_years,
                    championships=entry.player.championships,
                    category_raw=entry.player.category_raw,
                )
                for entry in entries
            ]
            for abbr, entries in self.rosters.items()
        }
        return SnapshotFile(generated_at=self.generated_at, franchises=franchises)


class SnapshotHolder:
    """Process-wide handle on the active snapshot with atomic reload."""

    def __init__(self, snapshot: Optional[Snapshot] = None, path: Optional[Path] = None) -> None:
        self._lock = threading.Lock()
        self._path = path
        self._snapshot = snapshot

    @property
    def snapshot(self) -> Snapshot:
        current = self._snapshot
        if current is None:
            with self._lock:
                if self._snapshot is None:
                    self._snapshot = Snapshot.load(self._path)
                current = self._snapshot
        return current

    def reload(self, path: Optional[Path] = None) -> Snapshot:
        """Build a fresh snapshot fully, then swap it in."""

        target = path or self._path
        fresh = Snapshot.load(target)
        with self._lock:
            self._snapshot = fresh
            self._path = target
        logger.info("Reloaded snapshot from %s", target or snapshot_path())
        return fresh

    def replace(self, snapshot: Snapshot) -> None:
        with self._lock:
            self._snapshot = snapshot


def franchise_or_none(abbr: str) -> Optional[Franchise]:
    try:
        info = get_franchise(abbr)
    except KeyError:
        return None
    return Franchise(abbr=info.abbr, name=info.name)


def build_snapshot(players_by_franchise: Mapping[str, Sequence[SeedPlayer]]) -> Snapshot:
    return Snapshot.build(SnapshotFile(franchises={abbr: list(players) for abbr, players in players_by_franchise.items()}))
