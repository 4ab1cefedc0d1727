"""CLI entrypoint for the SJLibWatcher agent."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from sjlibwatcher.config import Settings
from sjlibwatcher.dashboard import build_frequency_table, count_by_hour, count_by_location
from sjlibwatcher.db import Database, resolve_sqlite_path
from sjlibwatcher.errors import ConfigError
from sjlibwatcher.runner import SJLibWatcherRunner
from sjlibwatcher.store import load_readings

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SJLibWatcher occupancy collector")
    parser.add_argument("--init", action="store_true", help="initialize storage and exit")
    parser.add_argument("--run", action="store_true", help="execute one collection cycle")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="fetch and extract readings without writing them to the workbook",
    )
    parser.add_argument(
        "--archive",
        action="store_true",
        help="save the raw page content to the folder instead of parsing it",
    )
    parser.add_argument(
        "--process-folder",
        action="store_true",
        help="parse saved page snapshots in the folder into the workbook",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="log aggregated counts of the stored readings",
    )
    parser.add_argument("--target-url", help="page to collect (overrides TARGET_URL env var)")
    parser.add_argument("--folder", help="storage folder (overrides FOLDER_ID env var)")
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser


def build_runner(settings: Settings) -> SJLibWatcherRunner:
    database = Database(path=resolve_sqlite_path(settings.database_url))
    return SJLibWatcherRunner(settings=settings, database=database)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    if args.target_url:
        settings = replace(settings, target_url=args.target_url)
    if args.folder:
        settings = replace(settings, folder=Path(args.folder))

    runner = build_runner(settings)

    if args.init:
        return runner.init().fold(
            lambda handle: _log_ok("Storage ready at %s[%s]", handle.workbook_path, handle.sheet_name),
            lambda error: _log_error("Initialization failed: %s", error),
        )

    if args.archive:
        return runner.archive().fold(
            lambda path: _log_ok("Archived page content to %s", path),
            lambda error: _log_error("Archive failed: %s", error),
        )

    if args.process_folder:
        return runner.process_folder().fold(
            lambda summary: _log_ok(
                "Processed %d file(s), %d failed, %d rows saved",
                len(summary.processed),
                len(summary.failed),
                summary.saved_rows,
            ),
            lambda error: _log_error("Folder processing failed: %s", error),
        )

    if args.report:
        return runner.open_store().bind(load_readings).fold(
            _log_report,
            lambda error: _log_error("Report failed: %s", error),
        )

    if not args.run:
        parser.print_help()
        return 1

    summary = runner.run(dry_run=args.dry_run)
    return 1 if summary.status == "error" else 0


def scheduled_main() -> None:
    """No-argument entry point for an external scheduler."""
    main(["--run"])


def _log_ok(message: str, *args) -> int:
    logger.info(message, *args)
    return 0


def _log_error(message: str, *args) -> int:
    logger.error(message, *args)
    return 1


def _log_report(readings) -> int:
    logger.info("Stored readings: %d", len(readings))
    for location, counts in sorted(count_by_location(readings).items()):
        logger.info("%s | %s", location, dict(counts))
    for hour, counts in count_by_hour(readings).items():
        logger.info("%02d:00 | %s", hour, dict(counts))
    table = build_frequency_table(readings)
    logger.info("Frequency table covers %d (floor, location, weekday, hour) slots", len(table))
    return 0


if __name__ == "__main__":
    sys.exit(main())
