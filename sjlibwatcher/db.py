"""SQLite-backed run history."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .models import RunRecord

SQLITE_PREFIX = "sqlite://"


def resolve_sqlite_path(database_url: str) -> Path:
    """Translate a DATABASE_URL into a filesystem path."""
    if not database_url:
        raise ValueError("DATABASE_URL must not be empty")

    raw_path = database_url
    if raw_path.startswith(SQLITE_PREFIX):
        # sqlite:////abs/path.db is absolute; fewer slashes are relative to cwd.
        raw_path = raw_path[len(SQLITE_PREFIX):].lstrip("/")
        if database_url.startswith(SQLITE_PREFIX + "//"):
            raw_path = "/" + raw_path
    path = Path(raw_path).expanduser()
    if not path.is_absolute():
        path = Path.cwd() / path
    return path.resolve()


@dataclass
class Database:
    """Records the outcome of every invocation."""

    path: Path

    def connect(self) -> sqlite3.Connection:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.path)

    def initialize(self) -> None:
        with self.connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS runs (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    executed_at TEXT NOT NULL,
                    status TEXT NOT NULL,
                    reading_count INTEGER NOT NULL DEFAULT 0,
                    notes TEXT
                )
                """
            )
            conn.commit()

    def add_run(
        self,
        executed_at: str,
        status: str,
        reading_count: int = 0,
        notes: Optional[str] = None,
    ) -> None:
        with self.connect() as conn:
            conn.execute(
                "INSERT INTO runs (executed_at, status, reading_count, notes) VALUES (?, ?, ?, ?)",
                (executed_at, status, reading_count, notes),
            )
            conn.commit()

    def recent_runs(self, limit: int = 10) -> List[RunRecord]:
        with self.connect() as conn:
            cursor = conn.execute(
                """
                SELECT executed_at, status, reading_count, notes
                FROM runs ORDER BY id DESC LIMIT ?
                """,
                (limit,),
            )
            return [
                RunRecord(
                    executed_at=row[0],
                    status=row[1],
                    reading_count=int(row[2]),
                    notes=row[3],
                )
                for row in cursor.fetchall()
            ]
