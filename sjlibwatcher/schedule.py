"""Operating-window gate evaluated in a fixed timezone."""

from __future__ import annotations

import datetime as dt
import logging
from typing import Optional, TypeVar
from zoneinfo import ZoneInfo

from .errors import TimeWindowError
from .models import TIMESTAMP_FORMAT
from .result import Err, Ok, Result

logger = logging.getLogger(__name__)

T = TypeVar("T")

KST = "Asia/Seoul"
OPENING_HOUR = 9
WEEKDAY_LAST_HOUR = 21
WEEKEND_LAST_HOUR = 17


def now_in(tz_name: str = KST) -> dt.datetime:
    return dt.datetime.now(ZoneInfo(tz_name))


def to_zone(moment: dt.datetime, tz_name: str = KST) -> dt.datetime:
    """Convert ``moment`` into the zone; naive values are taken as local to it."""
    zone = ZoneInfo(tz_name)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=zone)
    return moment.astimezone(zone)


def format_timestamp(moment: dt.datetime) -> str:
    return moment.strftime(TIMESTAMP_FORMAT)


def is_operating_hour(isoweekday: int, hour: int) -> bool:
    """Return True when (ISO weekday 1-7, hour 0-23) falls inside the window."""
    if 1 <= isoweekday <= 5:
        return OPENING_HOUR <= hour <= WEEKDAY_LAST_HOUR
    if isoweekday in (6, 7):
        return OPENING_HOUR <= hour <= WEEKEND_LAST_HOUR
    return False


def check_operating_hours(
    value: T,
    now: Optional[dt.datetime] = None,
    tz_name: str = KST,
) -> Result[T]:
    """Pass ``value`` through when the window is open, otherwise fail."""
    local = to_zone(now, tz_name) if now is not None else now_in(tz_name)
    day, hour = local.isoweekday(), local.hour
    if is_operating_hour(day, hour):
        logger.debug("Inside operating window (day=%d, hour=%d)", day, hour)
        return Ok(value)
    return Err(
        TimeWindowError(
            f"outside scheduled {tz_name} hours (day={day}, hour={hour})"
        )
    )
