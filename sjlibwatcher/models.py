"""Core data models for SJLibWatcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence

SHEET_HEADER = ["Timestamp", "Floor", "Location", "Status"]
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


class ReadingStatus(str, Enum):
    """Traffic density labels shown on the library floor maps."""

    SMOOTH = "원활"
    MODERATE = "보통"
    CONGESTED = "혼잡"

    @classmethod
    def parse(cls, token: str) -> Optional["ReadingStatus"]:
        try:
            return cls(token.strip())
        except ValueError:
            return None


@dataclass(frozen=True)
class Reading:
    """One (floor, location, status) observation taken at ``timestamp``."""

    timestamp: str
    floor: str
    location: str
    status: str

    @property
    def status_level(self) -> Optional[ReadingStatus]:
        return ReadingStatus.parse(self.status)

    def as_row(self) -> List[str]:
        return [self.timestamp, self.floor, self.location, self.status]

    @classmethod
    def from_row(cls, row: Sequence[object]) -> "Reading":
        values = ["" if value is None else str(value) for value in row[:4]]
        values += [""] * (4 - len(values))
        return cls(*values)


@dataclass(frozen=True)
class FetchResult:
    """Raw page content returned by the fetch service."""

    timestamp: str
    content: str
    status_code: int


@dataclass(frozen=True)
class StoreHandle:
    """Reference to a worksheet inside a workbook on disk."""

    workbook_path: Path
    sheet_name: str


@dataclass
class RunSummary:
    """Aggregated result returned by a collection cycle."""

    executed_at: str
    status: str
    readings: List[Reading] = field(default_factory=list)
    saved_rows: int = 0
    error: Optional[str] = None


@dataclass
class ArchiveSummary:
    """Outcome of processing a folder of saved page snapshots."""

    processed: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)
    saved_rows: int = 0


@dataclass
class RunRecord:
    """Persisted representation of one invocation."""

    executed_at: str
    status: str
    reading_count: int
    notes: Optional[str]
