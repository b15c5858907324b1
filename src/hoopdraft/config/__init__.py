"""Configuration helpers for franchises, slots and pipeline settings."""

from .franchises import (
    LINEUP_SLOTS,
    ROSTER_SIZE,
    FranchiseInfo,
    franchise_abbrs,
    franchise_logo_url,
    franchise_stats_id,
    get_franchise,
    iter_franchises,
    order_slots,
    slot_index,
)
from .settings import PipelineSettings, snapshot_path

__all__ = [
    "LINEUP_SLOTS",
    "ROSTER_SIZE",
    "FranchiseInfo",
    "PipelineSettings",
    "franchise_abbrs",
    "franchise_logo_url",
    "franchise_stats_id",
    "get_franchise",
    "iter_franchises",
    "order_slots",
    "slot_index",
    "snapshot_path",
]
