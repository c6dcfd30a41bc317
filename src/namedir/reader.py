# namedir/reader.py
from __future__ import annotations
import time
from typing import IO, Iterable, Iterator, Optional, Protocol, Tuple

from .errors import DataSourceUnavailable, ScanCancelled
from .models import Entry
from .parser import is_data_line, parse_line

READ_BUFFER_SIZE = 1 << 20


class CancelSignal(Protocol):
    def is_set(self) -> bool: ...


class Deadline:
    """Cancel signal that fires once `seconds` have elapsed (threading.Event compatible)."""

    def __init__(self, seconds: float) -> None:
        self._expires = time.monotonic() + float(seconds)

    def is_set(self) -> bool:
        return time.monotonic() >= self._expires


def _open_dataset(path: str) -> IO[str]:
    return open(path, "r", encoding="utf-8-sig", errors="ignore", buffering=READ_BUFFER_SIZE)


def iter_data_lines(dataset_path: str, *, cancel: Optional[CancelSignal] = None) -> Iterator[Tuple[int, str]]:
    """
    Yield (index, stripped_line) for every data line, index counting from 0.

    Blank and comment lines are skipped and do not advance the index, which is
    the same counting rule the indexer uses. Closing the generator closes the
    file. I/O failures surface as DataSourceUnavailable.
    """
    try:
        fh = _open_dataset(dataset_path)
    except OSError as exc:
        raise DataSourceUnavailable(str(dataset_path), exc.strerror or str(exc)) from exc

    with fh:
        index = 0
        try:
            for raw in fh:
                if cancel is not None and cancel.is_set():
                    raise ScanCancelled(f"scan of {dataset_path} cancelled at line {index}")
                text = raw.strip()
                if not is_data_line(text):
                    continue
                yield index, text
                index += 1
        except OSError as exc:
            raise DataSourceUnavailable(str(dataset_path), exc.strerror or str(exc)) from exc


def read_segments(
    dataset_path: str,
    segments: Iterable[Tuple[int, int]],
    *,
    cancel: Optional[CancelSignal] = None,
) -> Iterator[Entry]:
    """
    Stream entries for ascending, disjoint [start, end) segments in one pass.
    The file is closed as soon as the last segment's end is reached.
    """
    wanted = [(int(s), int(e)) for s, e in segments if e > s]
    if not wanted:
        return

    lines = iter_data_lines(dataset_path, cancel=cancel)
    try:
        seg = 0
        start, end = wanted[0]
        for index, text in lines:
            if index < start:
                continue
            entry = parse_line(text, index + 1)
            if entry is not None:
                yield entry
            if index + 1 >= end:
                seg += 1
                if seg == len(wanted):
                    break
                start, end = wanted[seg]
    finally:
        lines.close()


def read_range(
    dataset_path: str,
    start: int,
    end: int,
    *,
    cancel: Optional[CancelSignal] = None,
) -> Iterator[Entry]:
    """Entries whose 0-based line index is in [start, end), in file order."""
    yield from read_segments(dataset_path, ((start, end),), cancel=cancel)
