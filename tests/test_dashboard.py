import datetime as dt
from collections import Counter

from sjlibwatcher.dashboard import (
    build_frequency_table,
    count_by_hour,
    count_by_location,
    predict_status,
)
from sjlibwatcher.models import Reading

READINGS = [
    # 2025-11-06 is a Thursday.
    Reading("2025-11-06_11-20-02", "1F", "대강당", "원활"),
    Reading("2025-11-06_11-35-02", "1F", "대강당", "혼잡"),
    Reading("2025-11-13_11-05-00", "1F", "대강당", "혼잡"),
    Reading("2025-11-06_14-00-00", "B1", "자료실", "보통"),
    Reading("not-a-timestamp", "B1", "자료실", "원활"),
]


def test_count_by_location_includes_every_reading():
    counts = count_by_location(READINGS)

    assert counts["대강당"] == Counter({"혼잡": 2, "원활": 1})
    assert counts["자료실"] == Counter({"보통": 1, "원활": 1})


def test_count_by_hour_skips_unparsable_timestamps():
    counts = count_by_hour(READINGS)

    assert list(counts) == [11, 14]
    assert counts[11] == Counter({"혼잡": 2, "원활": 1})
    assert counts[14] == Counter({"보통": 1})


def test_frequency_table_keys_by_floor_location_weekday_hour():
    table = build_frequency_table(READINGS)

    assert table[("1F", "대강당", "Thursday", 11)] == Counter({"혼잡": 2, "원활": 1})
    assert ("B1", "자료실", "Thursday", 14) in table
    assert len(table) == 2


def test_predict_status_picks_most_frequent():
    table = build_frequency_table(READINGS)

    thursday_morning = dt.datetime(2025, 11, 20, 11, 45)
    assert predict_status(table, "1F", "대강당", thursday_morning) == "혼잡"
    assert predict_status(table, "1F", "대강당", thursday_morning.replace(hour=9)) is None
