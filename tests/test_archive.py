from sjlibwatcher.archive import (
    parse_timestamp_from_filename,
    process_snapshot_folder,
    save_snapshot,
    snapshot_filename,
)
from sjlibwatcher.models import FetchResult
from sjlibwatcher.store import load_readings, open_store

PAGE = """
<div class="floor_info"><div class="f_num">1F</div></div>
<div class="floor_img"><p class="map_pin"><span class='situ1'>원활</span>대강당</p></div>
<div class="floor_info"><div class="f_num">B1</div></div>
<div class="floor_img"><p class="map_pin"><span class='situ3'>혼잡</span>자료실</p></div>
"""


def test_snapshot_filename_round_trips_timestamp():
    fetched = FetchResult(timestamp="2025-11-06_11-20-02", content=PAGE, status_code=503)

    name = snapshot_filename(fetched)

    assert name == "2025-11-06_11-20-02_PageContent_Code-503.html"
    assert parse_timestamp_from_filename(name) == "2025-11-06_11-20-02"


def test_parse_timestamp_from_filename_without_match():
    assert parse_timestamp_from_filename("PageContent_Code-200.html") is None


def test_save_snapshot_writes_utf8_content(tmp_path):
    fetched = FetchResult(timestamp="2025-11-06_11-20-02", content=PAGE, status_code=200)

    path = save_snapshot(tmp_path / "snapshots", fetched).unwrap()

    assert path.name == "2025-11-06_11-20-02_PageContent_Code-200.html"
    assert path.read_text(encoding="utf-8") == PAGE


def test_process_snapshot_folder_moves_files_and_saves_sorted_rows(tmp_path):
    folder = tmp_path / "snapshots"
    folder.mkdir()
    (folder / "2025-11-06_12-00-00_PageContent_Code-200.html").write_text(PAGE, encoding="utf-8")
    (folder / "2025-11-06_11-20-02_PageContent_Code-200.html").write_text(PAGE, encoding="utf-8")
    (folder / "PageContent_Code-200.html").write_text(PAGE, encoding="utf-8")
    (folder / "2025-11-06_13-00-00_PageContent_Code-503.html").write_text(
        "<html>Service Unavailable</html>", encoding="utf-8"
    )
    (folder / "notes.txt").write_text("ignore me", encoding="utf-8")
    handle = open_store(tmp_path / "store", "SJLib", "Complexity").unwrap()

    summary = process_snapshot_folder(folder, handle).unwrap()

    assert summary.saved_rows == 4
    assert sorted(summary.processed) == [
        "2025-11-06_11-20-02_PageContent_Code-200.html",
        "2025-11-06_12-00-00_PageContent_Code-200.html",
    ]
    assert sorted(summary.failed) == [
        "2025-11-06_13-00-00_PageContent_Code-503.html",
        "PageContent_Code-200.html",
    ]
    assert sorted(path.name for path in (folder / "Done").iterdir()) == summary.processed
    assert sorted(path.name for path in (folder / "Error").iterdir()) == summary.failed
    assert (folder / "notes.txt").exists()

    readings = load_readings(handle).unwrap()
    assert [reading.timestamp for reading in readings] == [
        "2025-11-06_11-20-02",
        "2025-11-06_11-20-02",
        "2025-11-06_12-00-00",
        "2025-11-06_12-00-00",
    ]
