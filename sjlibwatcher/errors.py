"""Exception taxonomy carried inside ``Err`` results."""

from __future__ import annotations


class WatcherError(Exception):
    """Base class for every expected pipeline failure."""


class ConfigError(WatcherError):
    """Missing or malformed credentials and settings."""


class TimeWindowError(WatcherError):
    """The run was triggered outside the operating window."""


class TransportError(WatcherError):
    """The HTTP exchange with the fetch service did not complete."""


class ValidationError(WatcherError):
    """The fetch completed with a non-2xx status code."""

    def __init__(self, status_code: int):
        super().__init__(f"status {status_code}, not 2xx")
        self.status_code = status_code


class ExtractionError(WatcherError):
    """No readings could be extracted from the page content."""


class PersistenceError(WatcherError):
    """A workbook operation failed; ``step`` names the failing operation."""

    def __init__(self, step: str, detail: object):
        super().__init__(f"{step} failed: {detail}")
        self.step = step
        self.detail = detail
