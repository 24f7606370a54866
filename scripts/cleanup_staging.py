"""Cron entry point for removing staged uploads left by interrupted requests."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from src.vidnorm.config import load_config
from src.vidnorm.ingest.staging_store import StagingStore


@dataclass(slots=True)
class CleanupSummary:
    staged_removed: int
    dry_run: bool


def perform_cleanup(
    *,
    dry_run: bool,
    max_age_minutes: int = 60,
    reference_time: datetime | None = None,
) -> CleanupSummary:
    """Delete staged uploads older than ``max_age_minutes`` and return counters."""
    config = load_config()
    staging = StagingStore(config.paths.uploads)
    now = reference_time or datetime.now(timezone.utc)

    stale = staging.list_stale(timedelta(minutes=max_age_minutes), now=now)
    if dry_run:
        return CleanupSummary(staged_removed=len(stale), dry_run=True)

    removed = sum(1 for path in stale if staging.discard(path))
    return CleanupSummary(staged_removed=removed, dry_run=False)


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cleanup stale staged uploads.")
    parser.add_argument("--dry-run", action="store_true", help="Only report counts without deleting files.")
    parser.add_argument(
        "--max-age-minutes",
        type=int,
        default=60,
        help="Staged files older than this are considered abandoned (default: 60).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv or [])
    try:
        summary = perform_cleanup(dry_run=args.dry_run, max_age_minutes=args.max_age_minutes)
    except Exception as exc:
        print(f"cleanup failed: {exc}", file=sys.stderr)
        return 2

    if summary.dry_run:
        print(f"cleanup dry-run, staged_stale={summary.staged_removed}", file=sys.stdout)
    else:
        print(f"cleanup done, staged_removed={summary.staged_removed}", file=sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
