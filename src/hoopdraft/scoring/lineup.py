"""Compose contribution and chemistry into the final lineup score."""

from __future__ import annotations

import logging
from statistics import fmean
from typing import List, Sequence

from hoopdraft.models import ZERO_STATS, LineupPick, LineupScore, PlayerScoreBreakdown

from .chemistry import compute_chemistry
from .contribution import round_one, score_player
from .snapshot import Snapshot


logger = logging.getLogger(__name__)


def score_pick(pick: LineupPick, snapshot: Snapshot) -> PlayerScoreBreakdown:
    if pick.is_penalty:
        return PlayerScoreBreakdown(
            pick=pick,
            stats=ZERO_STATS,
            used_fallback=False,
            normalized_metrics=ZERO_STATS,
            contribution=0.0,
        )

    lookup = snapshot.lookup_player_stats(pick.franchise_abbr, pick.player_name)
    scored = score_player(lookup.stats, normalizer=snapshot.normalize_metric_globally)
    return PlayerScoreBreakdown(
        pick=pick,
        stats=lookup.stats,
        used_fallback=lookup.used_fallback,
        normalized_metrics=scored.normalized_metrics,
        contribution=scored.contribution,
    )


def score_lineup(picks: Sequence[LineupPick], snapshot: Snapshot) -> LineupScore:
    """Score a complete or partial lineup against ``snapshot``.

    Deterministic for a fixed snapshot; unresolved players degrade to a
    baseline profile and set ``used_fallback_stats`` instead of raising.
    """

    if not picks:
        return LineupScore(
            base_team_score=0.0,
            team_score=0.0,
            chemistry=compute_chemistry([]),
            player_scores=[],
            used_fallback_stats=False,
        )

    player_scores: List[PlayerScoreBreakdown] = [score_pick(pick, snapshot) for pick in picks]
    base_team_score = round_one(fmean(score.contribution for score in player_scores))
    chemistry = compute_chemistry(player_scores)
    team_score = round_one(base_team_score * chemistry.multiplier)
    used_fallback = any(score.used_fallback for score in player_scores)
    if used_fallback:
        logger.debug("Lineup scored with fallback stats for at least one pick")

    return LineupScore(
        base_team_score=base_team_score,
        team_score=team_score,
        chemistry=chemistry,
        player_scores=player_scores,
        used_fallback_stats=used_fallback,
    )
