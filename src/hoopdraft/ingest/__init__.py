"""Input adapters: stats-provider client, payload schema and the roster sync pipeline."""

from .client import STATS_BASE_URL, FetchError, StatsClient
from .payloads import (
    PayloadParseError,
    PlayerAward,
    PlayerInfo,
    PlayerSeason,
    RawPlayerCandidate,
    parse_result_set,
)
from .pipeline import (
    EnrichedCandidate,
    FranchiseSyncReport,
    PlayerMetaLoader,
    SyncResult,
    rebuild_snapshot,
    run_pipeline,
    sync_franchise,
)
from .seed import (
    SeedPlayer,
    SnapshotFile,
    find_seed_player,
    load_snapshot_file,
    normalize_name,
    parse_years_with_team,
    write_snapshot_file,
)

__all__ = [
    "STATS_BASE_URL",
    "EnrichedCandidate",
    "FetchError",
    "FranchiseSyncReport",
    "PayloadParseError",
    "PlayerAward",
    "PlayerInfo",
    "PlayerMetaLoader",
    "PlayerSeason",
    "RawPlayerCandidate",
    "SeedPlayer",
    "SnapshotFile",
    "StatsClient",
    "SyncResult",
    "find_seed_player",
    "load_snapshot_file",
    "normalize_name",
    "parse_result_set",
    "parse_years_with_team",
    "rebuild_snapshot",
    "run_pipeline",
    "sync_franchise",
    "write_snapshot_file",
]
