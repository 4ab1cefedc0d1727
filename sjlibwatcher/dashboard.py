"""Chart-ready aggregation and naive prediction over stored readings."""

from __future__ import annotations

import datetime as dt
from collections import Counter, defaultdict
from typing import Dict, Iterable, Optional, Tuple

from .models import TIMESTAMP_FORMAT, Reading

FrequencyKey = Tuple[str, str, str, int]
WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def parse_reading_time(reading: Reading) -> Optional[dt.datetime]:
    try:
        return dt.datetime.strptime(reading.timestamp, TIMESTAMP_FORMAT)
    except ValueError:
        return None


def count_by_location(readings: Iterable[Reading]) -> Dict[str, Counter]:
    buckets: Dict[str, Counter] = defaultdict(Counter)
    for reading in readings:
        buckets[reading.location][reading.status] += 1
    return dict(buckets)


def count_by_hour(readings: Iterable[Reading]) -> Dict[int, Counter]:
    buckets: Dict[int, Counter] = defaultdict(Counter)
    for reading in readings:
        moment = parse_reading_time(reading)
        if moment is None:
            continue
        buckets[moment.hour][reading.status] += 1
    return dict(sorted(buckets.items()))


def build_frequency_table(readings: Iterable[Reading]) -> Dict[FrequencyKey, Counter]:
    """Count statuses per (floor, location, weekday name, hour)."""
    table: Dict[FrequencyKey, Counter] = defaultdict(Counter)
    for reading in readings:
        moment = parse_reading_time(reading)
        if moment is None:
            continue
        key = (reading.floor, reading.location, WEEKDAY_NAMES[moment.weekday()], moment.hour)
        table[key][reading.status] += 1
    return dict(table)


def predict_status(
    table: Dict[FrequencyKey, Counter],
    floor: str,
    location: str,
    when: dt.datetime,
) -> Optional[str]:
    """Most frequently observed status for the slot, or None if never observed."""
    counts = table.get((floor, location, WEEKDAY_NAMES[when.weekday()], when.hour))
    if not counts:
        return None
    return counts.most_common(1)[0][0]
