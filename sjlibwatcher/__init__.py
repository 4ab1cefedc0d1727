"""SJLibWatcher package initialization."""

from .config import Settings
from .db import Database
from .models import (
    ArchiveSummary,
    FetchResult,
    Reading,
    ReadingStatus,
    RunRecord,
    RunSummary,
    StoreHandle,
)
from .result import Err, Ok, Result
from .runner import SJLibWatcherRunner
from .scraper import ScraperApiClient, extract_readings, validate_response

__all__ = [
    "ArchiveSummary",
    "Database",
    "Err",
    "FetchResult",
    "Ok",
    "Reading",
    "ReadingStatus",
    "Result",
    "RunRecord",
    "RunSummary",
    "SJLibWatcherRunner",
    "ScraperApiClient",
    "Settings",
    "StoreHandle",
    "extract_readings",
    "validate_response",
]
