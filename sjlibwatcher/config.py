"""Runtime settings loaded once from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .errors import ConfigError

DEFAULT_TARGET_URL = "https://lib.sejong.go.kr/main/site/sensor/traffic.do"
DEFAULT_TIMEZONE = "Asia/Seoul"
DEFAULT_WORKBOOK_NAME = "SJLib"
DEFAULT_SHEET_NAME = "Complexity"
DEFAULT_DATABASE_URL = "sqlite:///sjlib_watcher.db"


@dataclass(frozen=True)
class Settings:
    """Configuration passed into the runner at process start."""

    api_key: str
    folder: Path
    target_url: str = DEFAULT_TARGET_URL
    timezone: str = DEFAULT_TIMEZONE
    workbook_name: str = DEFAULT_WORKBOOK_NAME
    sheet_name: str = DEFAULT_SHEET_NAME
    database_url: str = DEFAULT_DATABASE_URL
    fetch_timeout: Optional[float] = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            api_key=(env.get("SCRAPERAPI_API_KEY") or "").strip(),
            folder=Path(env.get("FOLDER_ID") or "data"),
            target_url=(env.get("TARGET_URL") or DEFAULT_TARGET_URL).strip(),
            timezone=env.get("WATCHER_TIMEZONE") or DEFAULT_TIMEZONE,
            workbook_name=env.get("WORKBOOK_NAME") or DEFAULT_WORKBOOK_NAME,
            sheet_name=env.get("SHEET_NAME") or DEFAULT_SHEET_NAME,
            database_url=env.get("DATABASE_URL") or DEFAULT_DATABASE_URL,
            fetch_timeout=_parse_timeout(env.get("FETCH_TIMEOUT")),
        )


def _parse_timeout(raw: str | None) -> Optional[float]:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"FETCH_TIMEOUT must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigError(f"FETCH_TIMEOUT must be positive, got {raw!r}")
    return value
