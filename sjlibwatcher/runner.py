"""Core execution workflow for SJLibWatcher."""

from __future__ import annotations

import datetime as dt
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

import requests

from .archive import process_snapshot_folder, save_snapshot
from .config import Settings
from .db import Database
from .errors import ExtractionError, TimeWindowError, ValidationError
from .models import ArchiveSummary, Reading, RunSummary, StoreHandle
from .result import Result
from .schedule import check_operating_hours, format_timestamp, now_in
from .scraper import ScraperApiClient, parse_fetch_result, validate_response
from .store import open_store, save_from

logger = logging.getLogger(__name__)


@dataclass
class SJLibWatcherRunner:
    """Coordinates gate, fetch, validation, extraction, and persistence steps."""

    settings: Settings
    database: Optional[Database] = None
    session: Optional[requests.Session] = None
    clock: Optional[Callable[[], dt.datetime]] = None

    def now(self) -> dt.datetime:
        if self.clock is not None:
            return self.clock()
        return now_in(self.settings.timezone)

    def init(self) -> Result[StoreHandle]:
        """Initialize run history and the destination sheet."""
        if self.database is not None:
            logger.info("Initializing database at %s", self.database.path)
            self.database.initialize()
        return self.open_store()

    def open_store(self) -> Result[StoreHandle]:
        return open_store(
            self.settings.folder,
            self.settings.workbook_name,
            self.settings.sheet_name,
        )

    def client(self) -> Result[ScraperApiClient]:
        return ScraperApiClient.create(
            self.settings.api_key,
            self.settings.target_url,
            session=self.session,
            timeout=self.settings.fetch_timeout,
            tz_name=self.settings.timezone,
            clock=self.now,
        )

    def collect(self) -> Result[List[Reading]]:
        """Fetch the page and extract readings, short-circuiting on failure."""
        return (
            self.client()
            .bind(lambda client: check_operating_hours(
                client, now=self.now(), tz_name=self.settings.timezone))
            .bind(lambda client: client.fetch())
            .bind(validate_response)
            .bind(parse_fetch_result)
        )

    def run(self, dry_run: bool = False) -> RunSummary:
        """Execute a single collection cycle."""
        executed_at = format_timestamp(self.now())
        logger.info("Starting collection cycle for %s", self.settings.target_url)
        readings = self.collect()

        if dry_run:
            saved = readings.map(lambda items: 0)
        else:
            saved = (
                readings
                .bind(lambda _: self.open_store())
                .bind(lambda handle: save_from(handle, readings))
            )

        summary = saved.fold(
            lambda count: RunSummary(
                executed_at=executed_at,
                status="dry_run" if dry_run else "success",
                readings=readings.unwrap(),
                saved_rows=count,
            ),
            lambda error: self._failed(executed_at, error),
        )
        self._report(summary)
        return summary

    def archive(self) -> Result[Path]:
        """Fetch the page and save the raw content, whatever the status code."""
        return (
            self.client()
            .bind(lambda client: check_operating_hours(
                client, now=self.now(), tz_name=self.settings.timezone))
            .bind(lambda client: client.fetch())
            .bind(lambda fetched: save_snapshot(self.settings.folder, fetched))
        )

    def process_folder(self) -> Result[ArchiveSummary]:
        """Parse saved snapshots in the settings folder into the sheet."""
        return self.open_store().bind(
            lambda handle: process_snapshot_folder(self.settings.folder, handle)
        )

    def _failed(self, executed_at: str, error: object) -> RunSummary:
        if isinstance(error, TimeWindowError):
            logger.info("Run skipped: %s", error)
            return RunSummary(executed_at=executed_at, status="skipped", error=str(error))
        if isinstance(error, (ValidationError, ExtractionError)):
            logger.warning("Operation failed: %s", error)
        else:
            logger.error("Operation failed: %s", error)
        return RunSummary(executed_at=executed_at, status="error", error=str(error))

    def _report(self, summary: RunSummary) -> None:
        if summary.status in ("success", "dry_run"):
            for reading in summary.readings:
                logger.debug(
                    "Reading: %s, %s, %s, %s",
                    reading.timestamp,
                    reading.floor,
                    reading.location,
                    reading.status,
                )
            logger.info(
                "Collected %d readings, saved %d rows%s",
                len(summary.readings),
                summary.saved_rows,
                " (dry run)" if summary.status == "dry_run" else "",
            )

        self._record_run(summary)

    def _record_run(self, summary: RunSummary) -> None:
        if self.database is None:
            return
        try:
            # CREATE TABLE IF NOT EXISTS, so runs work without a prior --init.
            self.database.initialize()
            self.database.add_run(
                executed_at=summary.executed_at,
                status=summary.status,
                reading_count=len(summary.readings),
                notes=summary.error,
            )
        except (sqlite3.Error, OSError):
            logger.exception("Failed to record run in %s", self.database.path)

