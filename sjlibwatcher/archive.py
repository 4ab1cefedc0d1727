"""Raw page snapshots on disk and batch processing of saved snapshots."""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path
from typing import Optional

from .errors import PersistenceError
from .models import ArchiveSummary, FetchResult, StoreHandle
from .result import Err, Ok, Result
from .scraper import extract_readings
from .store import append_readings, sort_rows

logger = logging.getLogger(__name__)

TIMESTAMP_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2})")
DONE_FOLDER = "Done"
ERROR_FOLDER = "Error"


def snapshot_filename(fetch_result: FetchResult) -> str:
    return f"{fetch_result.timestamp}_PageContent_Code-{fetch_result.status_code}.html"


def parse_timestamp_from_filename(name: str) -> Optional[str]:
    match = TIMESTAMP_PATTERN.search(name)
    return match.group(1) if match else None


def save_snapshot(folder: Path, fetch_result: FetchResult) -> Result[Path]:
    """Write the fetched page as-is, whatever its status code."""
    try:
        folder.mkdir(parents=True, exist_ok=True)
        path = folder / snapshot_filename(fetch_result)
        path.write_text(fetch_result.content, encoding="utf-8")
    except OSError as exc:
        return Err(PersistenceError("save snapshot", exc))
    logger.info("Saved page snapshot to %s", path)
    return Ok(path)


def locate_or_create_subfolder(parent: Path, name: str) -> Path:
    folder = parent / name
    if not folder.is_dir():
        logger.info("Creating folder '%s' inside '%s'.", name, parent)
        folder.mkdir(parents=True, exist_ok=True)
    return folder


def process_snapshot_folder(folder: Path, handle: StoreHandle) -> Result[ArchiveSummary]:
    """Parse every saved snapshot in ``folder`` into the sheet.

    Valid files are moved to ``Done/`` after their rows are saved; files
    without a timestamp in their name or without readings go to ``Error/``.
    """
    try:
        done_folder = locate_or_create_subfolder(folder, DONE_FOLDER)
        error_folder = locate_or_create_subfolder(folder, ERROR_FOLDER)
        candidates = sorted(path for path in folder.iterdir() if path.is_file())
    except OSError as exc:
        return Err(PersistenceError("list snapshots", exc))

    summary = ArchiveSummary()
    logger.info("Starting processing for folder: %s", folder)
    for path in candidates:
        if path.suffix.lower() not in (".html", ".htm"):
            logger.debug("Skipping (not HTML): %s", path.name)
            continue
        _process_snapshot(path, handle, done_folder, error_folder, summary)

    logger.info(
        "Processed %d snapshot(s), %d failed, %d rows saved",
        len(summary.processed),
        len(summary.failed),
        summary.saved_rows,
    )
    if summary.saved_rows:
        return sort_rows(handle, dedupe=True).map(lambda _: summary)
    return Ok(summary)


def _process_snapshot(
    path: Path,
    handle: StoreHandle,
    done_folder: Path,
    error_folder: Path,
    summary: ArchiveSummary,
) -> None:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Could not read %s (%s); moving to %s", path.name, exc, ERROR_FOLDER)
        _move(path, error_folder)
        summary.failed.append(path.name)
        return

    timestamp = parse_timestamp_from_filename(path.name)
    if timestamp is None:
        logger.warning("File name %s does not contain a valid date/time", path.name)
        _move(path, error_folder)
        summary.failed.append(path.name)
        return

    saved = extract_readings(content, timestamp).bind(
        lambda readings: append_readings(handle, readings)
    )

    def on_saved(count: int) -> None:
        summary.saved_rows += count
        summary.processed.append(path.name)
        _move(path, done_folder)
        logger.info("Saved %d rows from %s", count, path.name)

    def on_failed(error: object) -> None:
        summary.failed.append(path.name)
        if isinstance(error, PersistenceError):
            logger.error("Could not save rows from %s: %s", path.name, error)
            return
        logger.warning("No traffic data in %s (%s); moving to %s", path.name, error, ERROR_FOLDER)
        _move(path, error_folder)

    saved.fold(on_saved, on_failed)


def _move(path: Path, destination: Path) -> Path:
    return Path(shutil.move(str(path), str(destination / path.name)))
