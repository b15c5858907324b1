"""Runtime scoring: snapshot lookups, contribution, chemistry and lineup totals."""

from .chemistry import compute_chemistry, role_profile
from .contribution import METRIC_WEIGHTS, PlayerScore, round_one, score_player, soft_cap
from .insights import category_averages, improvement_tips
from .lineup import score_lineup, score_pick
from .snapshot import RosterEntry, Snapshot, SnapshotHolder, fallback_stats, tenure_ratio

__all__ = [
    "METRIC_WEIGHTS",
    "PlayerScore",
    "RosterEntry",
    "Snapshot",
    "SnapshotHolder",
    "category_averages",
    "compute_chemistry",
    "fallback_stats",
    "improvement_tips",
    "role_profile",
    "round_one",
    "score_lineup",
    "score_pick",
    "score_player",
    "soft_cap",
    "tenure_ratio",
]
