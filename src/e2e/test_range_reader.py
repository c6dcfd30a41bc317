import threading
from pathlib import Path

import pytest

import namedir.reader as R
from namedir.errors import DataSourceUnavailable, ScanCancelled
from namedir.reader import Deadline, read_range, read_segments


def _seed(tmp: Path, lines: list[str]) -> str:
    p = tmp / "users.txt"
    p.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(p)


class _TrackingFile:
    """Stand-in for the dataset handle that records how far it was read."""

    def __init__(self, lines):
        self._lines = iter(lines)
        self.lines_read = 0
        self.closed = False

    def __iter__(self):
        return self

    def __next__(self):
        line = next(self._lines)
        self.lines_read += 1
        return line

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False


def test_reads_half_open_range_in_order(tmp_path: Path):
    path = _seed(tmp_path, [f"Person {i:02d}" for i in range(10)])
    rows = list(read_range(path, 2, 5))
    assert [r.id for r in rows] == [3, 4, 5]
    assert [r.display_name for r in rows] == ["Person 02", "Person 03", "Person 04"]


def test_ids_skip_comment_and_blank_lines(tmp_path: Path):
    path = _seed(tmp_path, ["# header", "Ahmed Naciri", "", "Amine Tazi", "# x", "Brahim Idrissi"])
    rows = list(read_range(path, 0, 10))
    assert [(r.id, r.display_name) for r in rows] == [
        (1, "Ahmed Naciri"), (2, "Amine Tazi"), (3, "Brahim Idrissi"),
    ]


def test_consecutive_ranges_concatenate_to_prefix(tmp_path: Path):
    path = _seed(tmp_path, [f"Name {i}" for i in range(23)])
    limit = 5
    pages = []
    for page in range(1, 5):
        pages.extend(read_range(path, (page - 1) * limit, page * limit))
    assert pages == list(read_range(path, 0, 4 * limit))


def test_stream_closed_as_soon_as_end_is_reached(monkeypatch):
    tracker = _TrackingFile([f"Name {i}\n" for i in range(1000)])
    monkeypatch.setattr(R, "_open_dataset", lambda path: tracker)
    rows = list(read_range("ignored.txt", 0, 5))
    assert len(rows) == 5
    assert tracker.lines_read == 5
    assert tracker.closed


def test_abandoned_iteration_closes_stream(monkeypatch):
    tracker = _TrackingFile([f"Name {i}\n" for i in range(1000)])
    monkeypatch.setattr(R, "_open_dataset", lambda path: tracker)
    rows = read_range("ignored.txt", 0, 500)
    next(rows)
    rows.close()
    assert tracker.closed
    assert tracker.lines_read == 1


def test_multiple_segments_in_one_pass(tmp_path: Path):
    path = _seed(tmp_path, [f"Name {i}" for i in range(10)])
    rows = list(read_segments(path, [(0, 2), (5, 7)]))
    assert [r.id for r in rows] == [1, 2, 6, 7]


def test_range_past_end_is_empty(tmp_path: Path):
    path = _seed(tmp_path, ["Ahmed Naciri"])
    assert list(read_range(path, 5, 10)) == []
    assert list(read_range(path, 3, 3)) == []


def test_missing_file_is_data_source_unavailable(tmp_path: Path):
    with pytest.raises(DataSourceUnavailable):
        list(read_range(str(tmp_path / "missing.txt"), 0, 1))


def test_cancel_signal_stops_the_read(tmp_path: Path):
    path = _seed(tmp_path, [f"Name {i}" for i in range(10)])
    ev = threading.Event()
    ev.set()
    with pytest.raises(ScanCancelled):
        list(read_range(path, 0, 5, cancel=ev))
    with pytest.raises(ScanCancelled):
        list(read_range(path, 0, 5, cancel=Deadline(0)))
