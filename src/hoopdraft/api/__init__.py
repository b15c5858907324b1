"""REST API for the all-time franchise draft."""

from __future__ import annotations

import logging
from typing import List, Literal

from fastapi import FastAPI, HTTPException, Query

from hoopdraft.api.schemas import (
    DrawRequest,
    DrawResponse,
    FranchiseResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    RosterPlayerResponse,
    RosterResponse,
    RunRequest,
    RunResultResponse,
    ScoreRequest,
)
from hoopdraft.config import franchise_logo_url, get_franchise
from hoopdraft.config.settings import PACKAGE_ROOT, shot_clock_seconds
from hoopdraft.draft import (
    LineupValidationError,
    draw_franchises,
    generate_share_code,
    normalize_group_code,
    penalty_pick,
    validate_lineup,
)
from hoopdraft.models import (
    ZERO_STATS,
    Benchmarks,
    LineupPick,
    LineupScore,
    PlayerScoreBreakdown,
    PlayerStats,
    RunPickRecord,
    RunRecord,
)
from hoopdraft.persistence import LEADERBOARD_LIMIT, RunStore
from hoopdraft.scoring import SnapshotHolder, category_averages, improvement_tips, score_lineup, score_player
from hoopdraft.scoring.snapshot import Snapshot, franchise_or_none


logger = logging.getLogger(__name__)


def _canonical_picks(picks: List[LineupPick]) -> List[LineupPick]:
    """Replace client-supplied franchise names and penalty names with canonical values."""

    canonical: List[LineupPick] = []
    for pick in picks:
        try:
            info = get_franchise(pick.franchise_abbr)
        except KeyError as exc:
            raise HTTPException(status_code=400, detail=f"Unknown franchise {pick.franchise_abbr}") from exc
        if pick.is_penalty:
            canonical.append(penalty_pick(pick.slot, info.abbr))
        else:
            canonical.append(pick.model_copy(update={"franchise_abbr": info.abbr, "franchise_name": info.name}))
    return canonical


def _normalized_metrics(record: RunPickRecord, snapshot: Snapshot) -> PlayerStats:
    if record.pick.is_penalty:
        return ZERO_STATS
    return score_player(record.stats, normalizer=snapshot.normalize_metric_globally).normalized_metrics


def _run_to_lineup_score(run: RunRecord, snapshot: Snapshot) -> LineupScore:
    player_scores = [
        PlayerScoreBreakdown(
            pick=record.pick,
            stats=record.stats,
            used_fallback=record.used_fallback,
            normalized_metrics=_normalized_metrics(record, snapshot),
            contribution=record.contribution,
        )
        for record in run.picks
    ]
    return LineupScore(
        base_team_score=run.base_team_score,
        team_score=run.team_score,
        chemistry=run.chemistry,
        player_scores=player_scores,
        used_fallback_stats=run.used_fallback_stats,
    )


def _franchise_response(abbr: str, name: str) -> FranchiseResponse:
    return FranchiseResponse(abbr=abbr, name=name, logo_url=franchise_logo_url(abbr))


def create_app(
    snapshot_holder: SnapshotHolder | None = None,
    store: RunStore | None = None,
) -> FastAPI:
    app = FastAPI(title="hoopdraft")
    holder = snapshot_holder or SnapshotHolder()
    store = store or RunStore(PACKAGE_ROOT / "hoopdraft.sqlite")
    app.state.snapshot_holder = holder
    app.state.run_store = store

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/franchises", response_model=List[FranchiseResponse])
    async def list_franchises():
        return [_franchise_response(franchise.abbr, franchise.name) for franchise in holder.snapshot.franchises()]

    @app.get("/franchises/{abbr}/roster", response_model=RosterResponse)
    async def franchise_roster(abbr: str):
        franchise = franchise_or_none(abbr)
        if franchise is None:
            raise HTTPException(status_code=404, detail="Franchise not found")
        snapshot = holder.snapshot
        players = [
            RosterPlayerResponse(
                name=player.name,
                years_with_team=player.years_with_team,
                eligible_slots=list(player.eligible_slots),
                championships=player.championships,
                explanation=snapshot.get_player_explanation(franchise.abbr, player.name),
            )
            for player in snapshot.get_roster(franchise.abbr)
        ]
        return RosterResponse(franchise=_franchise_response(franchise.abbr, franchise.name), players=players)

    @app.post("/draws", response_model=DrawResponse)
    async def draw(request: DrawRequest):
        franchises = draw_franchises(request.seed, request.count)
        return DrawResponse(seed=request.seed, franchises=franchises, shot_clock_seconds=shot_clock_seconds())

    @app.post("/score", response_model=LineupScore)
    async def preview_score(request: ScoreRequest):
        picks = _canonical_picks(request.picks)
        snapshot = holder.snapshot
        try:
            validate_lineup(picks, snapshot, complete=False)
        except LineupValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return score_lineup(picks, snapshot)

    @app.post("/runs", response_model=RunRecord)
    async def submit_run(request: RunRequest):
        picks = _canonical_picks(request.picks)
        snapshot = holder.snapshot
        try:
            validate_lineup(picks, snapshot)
        except LineupValidationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        score = score_lineup(picks, snapshot)
        if score.used_fallback_stats:
            logger.warning("Run for %s scored with fallback stats", request.user_name)
        return store.save_run(
            share_code=generate_share_code(),
            user_name=request.user_name.strip(),
            group_code=normalize_group_code(request.group_code),
            seed=request.seed,
            score=score,
        )

    def _fetch_run_or_404(share_code: str) -> RunRecord:
        run = store.get_run_by_share_code(share_code)
        if run is None:
            raise HTTPException(status_code=404, detail="Run not found")
        return run

    @app.get("/runs/{share_code}", response_model=RunResultResponse)
    async def get_run(share_code: str):
        run = _fetch_run_or_404(share_code)
        benchmarks = store.benchmarks(run.group_code)
        score = _run_to_lineup_score(run, holder.snapshot)
        return RunResultResponse(
            run=run,
            category_averages=category_averages(score.player_scores),
            benchmarks=benchmarks,
            tips=improvement_tips(score, benchmarks),
        )

    @app.get("/leaderboard", response_model=LeaderboardResponse)
    async def leaderboard(
        group: str | None = None,
        timeframe: Literal["all", "daily"] = "all",
        limit: int = Query(default=LEADERBOARD_LIMIT, ge=1, le=LEADERBOARD_LIMIT),
    ):
        group_code = normalize_group_code(group)
        runs = store.leaderboard(group_code=group_code, timeframe=timeframe, limit=limit)
        entries = [
            LeaderboardEntry(
                rank=index,
                share_code=run.share_code,
                user_name=run.user_name,
                group_code=run.group_code,
                team_score=run.team_score,
                base_team_score=run.base_team_score,
                chemistry=run.chemistry,
                players=[record.pick.player_name for record in run.picks],
                created_at=run.created_at,
            )
            for index, run in enumerate(runs, start=1)
        ]
        return LeaderboardResponse(group_code=group_code, timeframe=timeframe, entries=entries)

    @app.get("/benchmarks", response_model=Benchmarks)
    async def benchmarks(group: str | None = None):
        return store.benchmarks(normalize_group_code(group))

    return app


__all__ = ["create_app"]
