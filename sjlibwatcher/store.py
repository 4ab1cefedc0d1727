"""Workbook-backed persistence for readings.

A workbook (``<name>.xlsx``) inside a root folder plays the role of the
container, and a worksheet inside it the role of the table. Both are created
lazily, and the header row is guaranteed before any rows are appended.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from .errors import PersistenceError
from .models import SHEET_HEADER, Reading, StoreHandle
from .result import Err, Ok, Result

logger = logging.getLogger(__name__)

WORKBOOK_SUFFIX = ".xlsx"
DEFAULT_SHEET = "Sheet"


def locate_or_create_workbook(root: Path, name: str) -> Result[Path]:
    """Find ``<name>.xlsx`` under ``root`` or create it there."""
    try:
        root.mkdir(parents=True, exist_ok=True)
        for candidate in sorted(root.iterdir()):
            if (
                candidate.is_file()
                and candidate.stem == name
                and candidate.suffix.lower() == WORKBOOK_SUFFIX
            ):
                load_workbook(candidate, read_only=True).close()
                logger.debug("Found existing workbook %s", candidate)
                return Ok(candidate)

        path = root / f"{name}{WORKBOOK_SUFFIX}"
        logger.info("Workbook '%s' not found in %s. Creating...", name, root)
        Workbook().save(path)
        return Ok(path)
    except Exception as exc:  # noqa: BLE001
        return Err(PersistenceError("locate container", exc))


def locate_or_create_sheet(workbook_path: Path, name: str) -> Result[StoreHandle]:
    """Find the sheet ``name`` or create it, making sure the header is present."""
    try:
        workbook = load_workbook(workbook_path)
        changed = False
        if name not in workbook.sheetnames:
            logger.info("Sheet '%s' not found. Creating with header.", name)
            _write_header(workbook.create_sheet(name))
            changed = True
        elif _is_empty(workbook[name]):
            logger.info("Sheet '%s' exists but is empty. Adding header.", name)
            _write_header(workbook[name])
            changed = True

        if (
            name != DEFAULT_SHEET
            and DEFAULT_SHEET in workbook.sheetnames
            and len(workbook.sheetnames) > 1
        ):
            workbook.remove(workbook[DEFAULT_SHEET])
            logger.debug("Removed default sheet '%s'", DEFAULT_SHEET)
            changed = True

        if changed:
            workbook.active = workbook.sheetnames.index(name)
            workbook.save(workbook_path)
        return Ok(StoreHandle(workbook_path=workbook_path, sheet_name=name))
    except Exception as exc:  # noqa: BLE001
        return Err(PersistenceError("locate table", exc))


def open_store(root: Path, workbook_name: str, sheet_name: str) -> Result[StoreHandle]:
    return locate_or_create_workbook(root, workbook_name).bind(
        lambda path: locate_or_create_sheet(path, sheet_name)
    )


def append_readings(handle: StoreHandle, readings: Sequence[Reading]) -> Result[int]:
    """Append one row per reading as a single block after existing content."""
    if not readings:
        return Ok(0)
    try:
        workbook = load_workbook(handle.workbook_path)
        sheet = workbook[handle.sheet_name]
        start_row = sheet.max_row + 1
        for reading in readings:
            sheet.append(reading.as_row())
        workbook.save(handle.workbook_path)
    except Exception as exc:  # noqa: BLE001
        return Err(PersistenceError("append rows", exc))

    logger.info(
        "Appended %d rows to %s[%s] starting at row %d",
        len(readings),
        handle.workbook_path.name,
        handle.sheet_name,
        start_row,
    )
    return Ok(len(readings))


def save_from(handle: StoreHandle, readings: Result[List[Reading]]) -> Result[int]:
    return readings.bind(lambda items: append_readings(handle, items))


def sort_rows(handle: StoreHandle, dedupe: bool = False) -> Result[int]:
    """Sort data rows by timestamp, optionally dropping exact duplicates.

    Returns the number of data rows left in the sheet.
    """
    try:
        workbook = load_workbook(handle.workbook_path)
        sheet = workbook[handle.sheet_name]
        rows = _data_rows(sheet)
        if dedupe:
            rows = list(dict.fromkeys(rows))
        rows.sort(key=lambda row: "" if row[0] is None else str(row[0]))
        if sheet.max_row > 1:
            sheet.delete_rows(2, sheet.max_row - 1)
        # append() keeps its cursor past deleted rows, so write by index.
        for row_idx, row in enumerate(rows, start=2):
            for col_idx, value in enumerate(row, start=1):
                sheet.cell(row=row_idx, column=col_idx, value=value)
        workbook.save(handle.workbook_path)
    except Exception as exc:  # noqa: BLE001
        return Err(PersistenceError("sort rows", exc))
    logger.info("Sorted %d rows in %s by timestamp", len(rows), handle.sheet_name)
    return Ok(len(rows))


def load_readings(handle: StoreHandle) -> Result[List[Reading]]:
    try:
        workbook = load_workbook(handle.workbook_path, read_only=True)
        try:
            rows = _data_rows(workbook[handle.sheet_name])
        finally:
            workbook.close()
    except Exception as exc:  # noqa: BLE001
        return Err(PersistenceError("read rows", exc))
    return Ok([Reading.from_row(row) for row in rows])


def _data_rows(sheet: Worksheet) -> List[tuple]:
    rows = []
    for row in sheet.iter_rows(min_row=2, values_only=True):
        if all(value is None for value in row):
            continue
        rows.append(tuple(row[: len(SHEET_HEADER)]))
    return rows


def _is_empty(sheet: Worksheet) -> bool:
    return sheet.max_row == 1 and sheet.max_column == 1 and sheet["A1"].value is None


def _write_header(sheet: Worksheet) -> None:
    # Reading A1 moves the append() cursor, so the header is placed by index.
    for col_idx, title in enumerate(SHEET_HEADER, start=1):
        sheet.cell(row=1, column=col_idx, value=title)
