"""Lightweight REST client for the hoopdraft API."""

from __future__ import annotations

import argparse
import json

import httpx


def _print(resp: httpx.Response) -> None:
    if resp.status_code == 404:
        raise SystemExit(resp.json().get("detail", "not found"))
    resp.raise_for_status()
    print(json.dumps(resp.json(), indent=2))


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the hoopdraft REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--roster", metavar="ABBR", help="Show a franchise's all-time roster")
    parser.add_argument("--draw", metavar="SEED", nargs="?", const="", help="Draw five franchises (optional seed)")
    parser.add_argument("--get-run", metavar="SHARE_CODE", help="Fetch a completed run with insights")
    parser.add_argument("--leaderboard", action="store_true", help="Show the leaderboard")
    parser.add_argument("--group", default=None, help="Group code for leaderboard and benchmarks")
    parser.add_argument("--daily", action="store_true", help="Limit the leaderboard to today's runs")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.roster:
            _print(client.get(f"/franchises/{args.roster}/roster"))
        if args.draw is not None:
            _print(client.post("/draws", json={"seed": args.draw or None}))
        if args.get_run:
            _print(client.get(f"/runs/{args.get_run}"))
        if args.leaderboard:
            params = {"timeframe": "daily" if args.daily else "all"}
            if args.group:
                params["group"] = args.group
            _print(client.get("/leaderboard", params=params))
        if not (args.roster or args.draw is not None or args.get_run or args.leaderboard):
            params = {"group": args.group} if args.group else {}
            _print(client.get("/benchmarks", params=params))


if __name__ == "__main__":
    main()
