"""Persistence layer for completed draft runs, leaderboards and benchmarks."""

from __future__ import annotations

import json
import logging
import sqlite3
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from hoopdraft.config import slot_index
from hoopdraft.config.settings import db_path as configured_db_path
from hoopdraft.models import (
    BenchmarkAverages,
    Benchmarks,
    ChemistryBreakdown,
    LeaderboardTimeframe,
    LineupPick,
    LineupScore,
    PlayerStats,
    RunPickRecord,
    RunRecord,
)


logger = logging.getLogger(__name__)

LEADERBOARD_LIMIT = 100


def _round_one(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    return round(float(value) * 10) / 10


def _start_of_utc_day(now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return datetime(now.year, now.month, now.day, tzinfo=timezone.utc)


class RunStore:
    """Simple SQLite-backed store for completed runs."""

    def __init__(self, db_path: Path | str):
        self.db_path = configured_db_path(Path(db_path))
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.OperationalError:
            fallback_dir = Path(tempfile.gettempdir()) / "hoopdraft-runtime"
            fallback_dir.mkdir(parents=True, exist_ok=True)
            fallback = fallback_dir / "hoopdraft.sqlite"
            logger.warning("Cannot open %s; falling back to %s", self.db_path, fallback)
            conn = sqlite3.connect(fallback)
            self.db_path = fallback
            self._create_schema(conn)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS runs (
                share_code TEXT PRIMARY KEY,
                created_at TEXT NOT NULL,
                user_name TEXT NOT NULL,
                group_code TEXT,
                seed TEXT,
                base_team_score REAL NOT NULL,
                team_score REAL NOT NULL,
                chemistry_score REAL NOT NULL,
                chemistry_multiplier REAL NOT NULL,
                chemistry_json TEXT NOT NULL,
                used_fallback_stats INTEGER NOT NULL DEFAULT 0
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS run_picks (
                share_code TEXT NOT NULL REFERENCES runs(share_code) ON DELETE CASCADE,
                slot TEXT NOT NULL,
                player_name TEXT NOT NULL,
                franchise_abbr TEXT NOT NULL,
                franchise_name TEXT NOT NULL,
                is_penalty INTEGER NOT NULL DEFAULT 0,
                contribution REAL NOT NULL,
                player_accolades REAL NOT NULL,
                team_accolades REAL NOT NULL,
                stats REAL NOT NULL,
                advanced REAL NOT NULL,
                used_fallback INTEGER NOT NULL DEFAULT 0,
                PRIMARY KEY (share_code, slot)
            )
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS runs_group_score ON runs (group_code, team_score)")
        conn.commit()

    def save_run(
        self,
        *,
        share_code: str,
        user_name: str,
        score: LineupScore,
        group_code: Optional[str] = None,
        seed: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> RunRecord:
        created_at = created_at or datetime.now(timezone.utc)
        code = share_code.strip().upper()
        chemistry = score.chemistry
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO runs (
                    share_code, created_at, user_name, group_code, seed,
                    base_team_score, team_score, chemistry_score, chemistry_multiplier,
                    chemistry_json, used_fallback_stats
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    code,
                    created_at.isoformat(),
                    user_name,
                    group_code,
                    seed,
                    score.base_team_score,
                    score.team_score,
                    chemistry.chemistry_score,
                    chemistry.multiplier,
                    json.dumps(chemistry.model_dump()),
                    int(score.used_fallback_stats),
                ),
            )
            conn.executemany(
                """
                INSERT INTO run_picks (
                    share_code, slot, player_name, franchise_abbr, franchise_name, is_penalty,
                    contribution, player_accolades, team_accolades, stats, advanced, used_fallback
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        code,
                        player.pick.slot,
                        player.pick.player_name,
                        player.pick.franchise_abbr,
                        player.pick.franchise_name,
                        int(player.pick.is_penalty),
                        player.contribution,
                        player.stats.player_accolades,
                        player.stats.team_accolades,
                        player.stats.stats,
                        player.stats.advanced,
                        int(player.used_fallback),
                    )
                    for player in score.player_scores
                ],
            )
            conn.commit()
        logger.info("Saved run %s (team score %.1f)", code, score.team_score)
        run = self.get_run_by_share_code(code)
        if run is None:  # pragma: no cover
            raise KeyError(f"Run {code} not found after insert")
        return run

    def get_run_by_share_code(self, share_code: str) -> Optional[RunRecord]:
        code = share_code.strip().upper()
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM runs WHERE share_code = ?", (code,)).fetchone()
            if row is None:
                return None
            return self._row_to_record(conn, row)

    def leaderboard(
        self,
        *,
        group_code: Optional[str] = None,
        timeframe: LeaderboardTimeframe = "all",
        limit: int = LEADERBOARD_LIMIT,
    ) -> List[RunRecord]:
        query = "SELECT * FROM runs"
        conditions: list[str] = []
        params: list[str | int] = []
        if group_code:
            conditions.append("group_code = ?")
            params.append(group_code)
        if timeframe == "daily":
            conditions.append("datetime(created_at) >= datetime(?)")
            params.append(_start_of_utc_day().isoformat())
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY team_score DESC, datetime(created_at) DESC LIMIT ?"
        params.append(min(limit, LEADERBOARD_LIMIT))
        with self._connect() as conn:
            rows = conn.execute(query, tuple(params)).fetchall()
            return [self._row_to_record(conn, row) for row in rows]

    def benchmarks(self, group_code: Optional[str] = None) -> Benchmarks:
        run_where = "WHERE group_code = ?" if group_code else ""
        pick_where = "WHERE r.group_code = ?" if group_code else ""
        params = (group_code,) if group_code else ()
        with self._connect() as conn:
            runs = conn.execute(
                f"""
                SELECT COUNT(*) AS sample_size,
                       AVG(team_score) AS team_score,
                       AVG(base_team_score) AS base_team_score,
                       AVG(chemistry_score) AS chemistry_score
                FROM runs {run_where}
                """,
                params,
            ).fetchone()
            picks = conn.execute(
                f"""
                SELECT AVG(p.contribution) AS contribution,
                       AVG(p.player_accolades) AS player_accolades,
                       AVG(p.team_accolades) AS team_accolades,
                       AVG(p.stats) AS stats,
                       AVG(p.advanced) AS advanced
                FROM run_picks p JOIN runs r ON r.share_code = p.share_code
                {pick_where}
                """,
                params,
            ).fetchone()
        return Benchmarks(
            scope="group" if group_code else "global",
            sample_size=runs["sample_size"] or 0,
            averages=BenchmarkAverages(
                team_score=_round_one(runs["team_score"]),
                base_team_score=_round_one(runs["base_team_score"]),
                chemistry_score=_round_one(runs["chemistry_score"]),
                contribution=_round_one(picks["contribution"]),
                player_accolades=_round_one(picks["player_accolades"]),
                team_accolades=_round_one(picks["team_accolades"]),
                stats=_round_one(picks["stats"]),
                advanced=_round_one(picks["advanced"]),
            ),
        )

    def _row_to_record(self, conn: sqlite3.Connection, row: sqlite3.Row) -> RunRecord:
        pick_rows = conn.execute("SELECT * FROM run_picks WHERE share_code = ?", (row["share_code"],)).fetchall()
        picks = [
            RunPickRecord(
                pick=LineupPick(
                    slot=pick["slot"],
                    player_name=pick["player_name"],
                    franchise_abbr=pick["franchise_abbr"],
                    franchise_name=pick["franchise_name"],
                    is_penalty=bool(pick["is_penalty"]),
                ),
                stats=PlayerStats(
                    player_accolades=pick["player_accolades"],
                    team_accolades=pick["team_accolades"],
                    stats=pick["stats"],
                    advanced=pick["advanced"],
                ),
                contribution=pick["contribution"],
                used_fallback=bool(pick["used_fallback"]),
            )
            for pick in pick_rows
        ]
        picks.sort(key=lambda record: slot_index(record.pick.slot))
        return RunRecord(
            share_code=row["share_code"],
            user_name=row["user_name"],
            group_code=row["group_code"],
            seed=row["seed"],
            base_team_score=row["base_team_score"],
            team_score=row["team_score"],
            chemistry=ChemistryBreakdown(**json.loads(row["chemistry_json"])),
            used_fallback_stats=bool(row["used_fallback_stats"]),
            picks=picks,
            created_at=datetime.fromisoformat(row["created_at"]),
        )


__all__ = ["LEADERBOARD_LIMIT", "RunStore"]
