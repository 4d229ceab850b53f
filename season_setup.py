#!/usr/bin/env python3
"""
ESPN Fantasy Basketball season lineup setup CLI.

Puts long-term OUT players on IR and sets the starting lineup for every
remaining day of the season. League settings come from
data/lineup_config.json (or $FBA_LINEUP_CONFIG); ESPN cookies come from
ESPN_S2 / ESPN_SWID.

Usage:
    python season_setup.py preview
    python season_setup.py run --dry-run
    python season_setup.py run --report reports/run.json
"""

import argparse
import logging
import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from fba_lineup.config import get_auth, get_config, get_slot_table_for
from fba_lineup.espn_client import ESPNClient, ESPNClientError
from fba_lineup.logging_config import setup_logging
from fba_lineup.schemas import RunReport
from fba_lineup.submitter import RunOptions, preview_season, run_season_setup
from fba_lineup.utils import save_json


def print_progress(completed: int, total: int) -> None:
    print(f"\r  {completed}/{total} days", end="", flush=True)


def cmd_preview(args, config, auth, client, table) -> int:
    preview = preview_season(
        config.league_id,
        config.season,
        auth,
        client=client,
        table=table,
        options=RunOptions.from_config(config),
        team_id=config.team_id,
    )

    print(f"Team: {preview.team_name} (id {preview.team_id})")
    print(f"Current scoring period: {preview.current_scoring_period_id}")
    print(f"Remaining game days: {preview.game_day_count}")
    print("\nInjured (OUT) players:")
    if not preview.ir_assignments:
        print("  none")
    for assignment in preview.ir_assignments:
        player = assignment.player
        returns = player.estimated_return_date.isoformat() if player.estimated_return_date else "indefinite"
        print(f"  {table.name(assignment.assigned_slot):<6} {player.name} (return: {returns})")
    return 0


def cmd_run(args, config, auth, client, table) -> int:
    options = RunOptions.from_config(config)
    if args.dry_run:
        options = replace(options, dry_run=True)

    started_at = datetime.now(timezone.utc).isoformat()
    if args.period:
        print(f"Setting lineups from period {args.period}...")
    else:
        print("Setting lineups from the current period...")
    result = run_season_setup(
        config.league_id,
        config.team_id,
        config.season,
        args.period,
        auth,
        on_progress=None if args.quiet else print_progress,
        client=client,
        table=table,
        options=options,
    )
    print()

    print("\n" + "=" * 60)
    print(f"Submitted: {result.submitted}  Skipped: {result.skipped}  Errors: {len(result.errors)}")
    print("=" * 60)
    for error in result.errors:
        print(f"  ❌ {error}")

    if args.report:
        report = RunReport(
            league_id=config.league_id,
            team_id=result.team_id,
            season=config.season,
            started_at=started_at,
            finished_at=datetime.now(timezone.utc).isoformat(),
            dry_run=options.dry_run,
            **result.to_dict(),
        )
        save_json(Path(args.report), report)
        print(f"Report saved: {args.report}")

    return 1 if result.errors else 0


def main():
    parser = argparse.ArgumentParser(description="ESPN Fantasy Basketball season lineup setup")
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging",
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Write a log file to this directory",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("preview", help="Show team, IR plan and remaining game days")

    run_parser = subparsers.add_parser("run", help="Submit lineups for every remaining day")
    run_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build lineups but do not submit them",
    )
    run_parser.add_argument(
        "--period", "-p",
        type=int,
        default=None,
        help="Override the current scoring period",
    )
    run_parser.add_argument(
        "--report", "-o",
        default=None,
        help="Save a JSON run report to this path",
    )
    run_parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="No progress output",
    )

    args = parser.parse_args()

    logger = setup_logging(
        log_dir=Path(args.log_dir) if args.log_dir else None,
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_to_file=args.log_dir is not None,
    )

    try:
        config = get_config()
        auth = get_auth()
    except (FileNotFoundError, ValueError, RuntimeError) as e:
        print(f"❌ {e}")
        sys.exit(1)

    table = get_slot_table_for(config)
    client = ESPNClient(auth, sport=config.sport, timeout=config.request_timeout_seconds)

    handler = cmd_preview if args.command == "preview" else cmd_run
    try:
        sys.exit(handler(args, config, auth, client, table))
    except ESPNClientError as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"❌ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
