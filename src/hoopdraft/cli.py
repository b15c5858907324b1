"""Command-line interface for refreshing the all-time roster snapshot."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Sequence

from hoopdraft.config import PipelineSettings, franchise_abbrs, snapshot_path
from hoopdraft.config.settings import DEFAULT_SEED_PATH
from hoopdraft.ingest import load_snapshot_file, rebuild_snapshot


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rebuild the all-time franchise roster snapshot")
    parser.add_argument(
        "--seed",
        type=Path,
        default=DEFAULT_SEED_PATH,
        help="Seed roster JSON used as the fallback for every franchise",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Snapshot JSON to write (defaults to HOOPDRAFT_SNAPSHOT_PATH or the bundled seed)",
    )
    parser.add_argument(
        "--teams",
        nargs="*",
        default=None,
        help="Franchise abbreviations to sync (others keep their seed roster)",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Rebuild from the seed without contacting the stats provider",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _selected_teams(teams: Sequence[str] | None) -> list[str] | None:
    if not teams:
        return None
    selected = [team.strip().upper() for team in teams if team.strip()]
    unknown = sorted(set(selected) - set(franchise_abbrs()))
    if unknown:
        raise SystemExit(f"Unknown franchise abbreviations: {', '.join(unknown)}")
    return selected


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    teams = _selected_teams(args.teams)
    seed = load_snapshot_file(args.seed)
    output = args.output or snapshot_path()
    result = asyncio.run(
        rebuild_snapshot(
            seed,
            output,
            settings=PipelineSettings.from_env(),
            abbrs=teams,
            offline=args.offline,
        )
    )

    synced = [report for report in result.reports if not report.used_fallback]
    print(f"Wrote {output} ({len(result.reports)} franchises, {len(synced)} synced from the stats provider)")
    if result.fallback_franchises:
        print(f"Kept seed rosters for: {', '.join(result.fallback_franchises)}")


if __name__ == "__main__":  # pragma: no cover
    main()
