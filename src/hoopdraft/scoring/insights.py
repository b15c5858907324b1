"""Post-game summaries: category averages and improvement tips."""

from __future__ import annotations

from statistics import fmean
from typing import List, Optional, Sequence

from hoopdraft.models import METRICS, Benchmarks, LineupScore, PlayerScoreBreakdown, PlayerStats

from .contribution import round_one


MAX_TIPS = 4

_CATEGORY_ADVICE = {
    "player_accolades": (
        "player accolades",
        "target players with MVP or All-NBA award profiles during their franchise stint.",
    ),
    "team_accolades": (
        "team accolades",
        "prioritize players tied to title runs and stronger team-level winning context.",
    ),
    "stats": (
        "stats",
        "look for players with bigger box-score production and peak years.",
    ),
    "advanced": (
        "advanced impact",
        "pick players with stronger winning-impact indicators, not just box-score totals.",
    ),
}

_CHEMISTRY_LABELS = {
    "role_coverage": "role coverage",
    "complementarity": "complementarity",
    "usage_balance": "usage balance",
    "two_way_balance": "two-way balance",
    "culture": "culture",
}


def category_averages(player_scores: Sequence[PlayerScoreBreakdown]) -> PlayerStats:
    """Mean category score over the non-penalty picks."""

    scored = [score.stats for score in player_scores if not score.pick.is_penalty]
    if not scored:
        return PlayerStats(player_accolades=0.0, team_accolades=0.0, stats=0.0, advanced=0.0)
    return PlayerStats(**{metric: round_one(fmean(stats.metric(metric) for stats in scored)) for metric in METRICS})


def _signed(value: float) -> str:
    rounded = round_one(value)
    return f"+{rounded:.1f}" if rounded > 0 else f"{rounded:.1f}"


def improvement_tips(score: LineupScore, benchmarks: Optional[Benchmarks] = None) -> List[str]:
    tips: List[str] = []

    candidates = [player for player in score.player_scores if not player.pick.is_penalty]
    if candidates:
        weakest = min(candidates, key=lambda player: player.contribution)
        tips.append(
            f"Biggest immediate lift: upgrade {weakest.pick.slot}. "
            f"{weakest.pick.player_name} was your lowest contribution ({weakest.contribution:.1f})."
        )

        averages = category_averages(score.player_scores)
        metric = min(METRICS, key=averages.metric)
        label, action = _CATEGORY_ADVICE[metric]
        tips.append(f"Weakest category was {label} ({averages.metric(metric):.1f}) so next run should {action}")

    chemistry = score.chemistry
    if score.player_scores:
        key = min(_CHEMISTRY_LABELS, key=lambda name: getattr(chemistry, name))
        tips.append(
            f"Chemistry bottleneck was {_CHEMISTRY_LABELS[key]} ({getattr(chemistry, key):.1f}), "
            "so focus on lineup fit instead of stacking similar archetypes."
        )

    if benchmarks is not None and benchmarks.sample_size > 0:
        delta = score.team_score - benchmarks.averages.team_score
        if delta < 0:
            tips.append(
                f"This run finished {_signed(delta)} below your benchmark. "
                "Fixing the weakest category and chemistry area should create the fastest gains."
            )
        else:
            tips.append(
                f"You finished {_signed(delta)} above your benchmark. "
                "Doubling down on your strongest category can push an even higher ceiling."
            )

    return tips[:MAX_TIPS]
