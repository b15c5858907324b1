"""Lineup chemistry: role profiles, five sub-scores and the bounded multiplier."""

from __future__ import annotations

from itertools import combinations
from statistics import fmean, pstdev
from typing import Mapping, Sequence, Tuple

from hoopdraft.models import ChemistryBreakdown, PlayerScoreBreakdown, RoleProfile

from .contribution import round_one


CORE_ROLES: Tuple[str, ...] = (
    "playmaking",
    "spacing",
    "perimeter_defense",
    "rim_protection",
    "rebounding",
)
PAIR_ROLES: Tuple[str, ...] = (
    "playmaking",
    "spacing",
    "rim_pressure",
    "perimeter_defense",
    "rim_protection",
    "rebounding",
)
OFFENSE_ROLES: Tuple[str, ...] = ("playmaking", "spacing", "rim_pressure")
DEFENSE_ROLES: Tuple[str, ...] = ("perimeter_defense", "rim_protection", "rebounding")

SUBSCORE_WEIGHTS: Mapping[str, float] = {
    "role_coverage": 0.30,
    "complementarity": 0.25,
    "usage_balance": 0.20,
    "two_way_balance": 0.15,
    "culture": 0.10,
}

# Weights over (player_accolades, team_accolades, stats, advanced).
_ROLE_METRIC_WEIGHTS: Mapping[str, Tuple[float, float, float, float]] = {
    "playmaking": (0.15, 0.0, 0.45, 0.25),
    "spacing": (0.30, 0.0, 0.40, 0.10),
    "rim_pressure": (0.15, 0.0, 0.40, 0.25),
    "perimeter_defense": (0.10, 0.25, 0.0, 0.40),
    "rim_protection": (0.0, 0.20, 0.10, 0.40),
    "rebounding": (0.0, 0.05, 0.35, 0.30),
}
_BALL_DOMINANCE_WEIGHTS = (0.35, 0.0, 0.45, 0.20)
_BALL_DOMINANCE_GAIN = 1.25
_BALL_DOMINANCE_OFFSET = -20.0

SLOT_ARCHETYPE_BONUS: Mapping[str, Mapping[str, float]] = {
    "PG": {
        "playmaking": 30, "spacing": 15, "rim_pressure": 5, "perimeter_defense": 10,
        "rim_protection": -15, "rebounding": -10, "ball_dominance": 14,
    },
    "SG": {
        "playmaking": 10, "spacing": 25, "rim_pressure": 10, "perimeter_defense": 12,
        "rim_protection": -12, "rebounding": -5, "ball_dominance": 8,
    },
    "SF": {
        "playmaking": 5, "spacing": 12, "rim_pressure": 12, "perimeter_defense": 15,
        "rim_protection": 0, "rebounding": 8, "ball_dominance": 2,
    },
    "PF": {
        "playmaking": -5, "spacing": 2, "rim_pressure": 15, "perimeter_defense": 5,
        "rim_protection": 18, "rebounding": 22, "ball_dominance": -6,
    },
    "C": {
        "playmaking": -10, "spacing": -10, "rim_pressure": 18, "perimeter_defense": -5,
        "rim_protection": 32, "rebounding": 32, "ball_dominance": -12,
    },
}

COMPLEMENTARITY_BASE = 52.0
COMPLEMENTARITY_DISTANCE_GAIN = 0.55
DOMINANCE_PAIR_THRESHOLD = 72.0
DOMINANCE_PAIR_PENALTY = 1.1

USAGE_TARGET = 66.0
HIGH_USAGE_THRESHOLD = 80.0
HIGH_CULTURE_THRESHOLD = 75.0

ZERO_PROFILE = RoleProfile()


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def role_profile(score: PlayerScoreBreakdown) -> RoleProfile:
    """Synthesize a 7-dimension role profile from normalized metrics and slot archetype."""

    if score.pick.is_penalty:
        return ZERO_PROFILE

    metrics = score.normalized_metrics
    values = (metrics.player_accolades, metrics.team_accolades, metrics.stats, metrics.advanced)
    bonus = SLOT_ARCHETYPE_BONUS[score.pick.slot]

    dims: dict[str, float] = {}
    for role, weights in _ROLE_METRIC_WEIGHTS.items():
        base = sum(weight * value for weight, value in zip(weights, values))
        dims[role] = _clamp(base + bonus[role])

    dominance = sum(weight * value for weight, value in zip(_BALL_DOMINANCE_WEIGHTS, values))
    dims["ball_dominance"] = _clamp(
        dominance * _BALL_DOMINANCE_GAIN + _BALL_DOMINANCE_OFFSET + bonus["ball_dominance"]
    )
    return RoleProfile(**dims)


def role_coverage(profiles: Sequence[RoleProfile]) -> float:
    if not profiles:
        return 0.0
    return fmean(max(getattr(profile, role) for profile in profiles) for role in CORE_ROLES)


def _pair_score(first: RoleProfile, second: RoleProfile) -> float:
    distance = fmean(abs(getattr(first, role) - getattr(second, role)) for role in PAIR_ROLES)
    pair_dominance = (first.ball_dominance + second.ball_dominance) / 2
    penalty = 0.0
    if pair_dominance > DOMINANCE_PAIR_THRESHOLD:
        penalty = (pair_dominance - DOMINANCE_PAIR_THRESHOLD) * DOMINANCE_PAIR_PENALTY
    return _clamp(COMPLEMENTARITY_BASE + distance * COMPLEMENTARITY_DISTANCE_GAIN - penalty)


def complementarity(profiles: Sequence[RoleProfile]) -> float:
    pairs = list(combinations(profiles, 2))
    if not pairs:
        return 0.0
    return fmean(_pair_score(first, second) for first, second in pairs)


def usage_balance(ball_dominance: Sequence[float]) -> float:
    """Reward one clear primary handler; punish stacks of high-usage players."""

    if not ball_dominance:
        return 0.0
    mean = fmean(ball_dominance)
    spread = pstdev(ball_dominance)
    high_usage = sum(1 for value in ball_dominance if value > HIGH_USAGE_THRESHOLD)
    return _clamp(100.0 - abs(mean - USAGE_TARGET) * 1.2 - spread * 1.35 - high_usage * 3.5)


def two_way_balance(profiles: Sequence[RoleProfile]) -> float:
    if not profiles:
        return 0.0
    offense = fmean(fmean(getattr(profile, role) for role in OFFENSE_ROLES) for profile in profiles)
    defense = fmean(fmean(getattr(profile, role) for role in DEFENSE_ROLES) for profile in profiles)
    return _clamp(100.0 - abs(offense - defense) * 1.25)


def culture(team_metrics: Sequence[float]) -> float:
    if not team_metrics:
        return 0.0
    mean = fmean(team_metrics)
    spread = pstdev(team_metrics)
    strong = sum(1 for value in team_metrics if value > HIGH_CULTURE_THRESHOLD)
    return _clamp(mean - 0.5 * spread + 2.5 * strong)


def multiplier_for(chemistry_score: float) -> float:
    return _clamp(1.0 + chemistry_score / 100.0, 1.0, 2.0)


def compute_chemistry(player_scores: Sequence[PlayerScoreBreakdown]) -> ChemistryBreakdown:
    """Combine the five sub-scores for a (possibly partial) lineup."""

    if not player_scores:
        return ChemistryBreakdown()

    profiles = [role_profile(score) for score in player_scores]
    team_metrics = [
        0.0 if score.pick.is_penalty else score.normalized_metrics.team_accolades
        for score in player_scores
    ]

    subscores = {
        "role_coverage": round_one(role_coverage(profiles)),
        "complementarity": round_one(complementarity(profiles)),
        "usage_balance": round_one(usage_balance([profile.ball_dominance for profile in profiles])),
        "two_way_balance": round_one(two_way_balance(profiles)),
        "culture": round_one(culture(team_metrics)),
    }
    chemistry_score = round_one(
        _clamp(sum(subscores[name] * weight for name, weight in SUBSCORE_WEIGHTS.items()))
    )
    return ChemistryBreakdown(
        **subscores,
        chemistry_score=chemistry_score,
        multiplier=multiplier_for(chemistry_score),
    )
