# namedir/indexer.py
from __future__ import annotations
import logging
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from . import config as CFG
from .models import DatasetStats, LetterRange
from .reader import iter_data_lines

if TYPE_CHECKING:  # pragma: no cover
    from .DB.api import IndexStore

log = logging.getLogger(__name__)


class _Bucket:
    """Mutable per-letter accumulator used only while indexing."""
    __slots__ = ("start", "end", "count", "runs")

    def __init__(self) -> None:
        self.start: Optional[int] = None
        self.end: Optional[int] = None
        self.count = 0
        self.runs: List[List[int]] = []   # [start, end] pairs; end filled on close

    def open(self, at: int) -> None:
        if self.start is None:
            self.start = at
        self.runs.append([at, at])

    def close(self, at: int) -> None:
        self.end = at
        self.runs[-1][1] = at

    def freeze(self, letter: str) -> LetterRange:
        return LetterRange(
            letter=letter,
            start=int(self.start),
            end=int(self.end),
            count=self.count,
            runs=tuple((s, e) for s, e in self.runs),
        )


def _letter_of(text: str) -> Optional[str]:
    first = text[0].upper()
    return first if len(first) == 1 and first in CFG.ALPHABET else None


def build_index(dataset_path: str) -> Tuple[Dict[str, LetterRange], DatasetStats]:
    """
    One sequential pass over the dataset -> (letter -> LetterRange, DatasetStats).

    A letter is "open" while consecutive data lines start with it. A line with
    a different letter, or with a first character outside A-Z, closes it at
    the current counter. Re-opening a letter later starts a new run, so
    ungrouped input still yields correct (if fragmented) ranges. A letter page
    therefore reports the sum of its run lengths as `total`, which is smaller
    than `end - start` when non-letter lines sit inside the letter's block.
    """
    buckets: Dict[str, _Bucket] = {ch: _Bucket() for ch in CFG.ALPHABET}
    current: Optional[str] = None
    counter = 0

    for _, text in iter_data_lines(dataset_path):
        letter = _letter_of(text)
        if letter != current:
            if current is not None:
                buckets[current].close(counter)
            if letter is not None:
                buckets[letter].open(counter)
            current = letter
        if letter is not None:
            buckets[letter].count += 1
        counter += 1
        if CFG.VERBOSE and counter % CFG.PROGRESS_EVERY_LINES == 0:
            log.info("[indexed] lines=%s", f"{counter:,}")

    if current is not None:
        buckets[current].close(counter)

    ranges = {ch: b.freeze(ch) for ch, b in buckets.items() if b.count > 0}
    for ch, rng in ranges.items():
        if len(rng.runs) > 1:
            log.warning("letter %s is not contiguous in %s (%d runs)", ch, dataset_path, len(rng.runs))
    return ranges, DatasetStats(total=counter)


def rebuild_index(dataset_path: str, store: "IndexStore") -> DatasetStats:
    """Index `dataset_path` and replace whatever `store` held before."""
    log.info("Indexing %s", dataset_path)
    ranges, stats = build_index(dataset_path)
    store.save(ranges, stats)
    for ch in sorted(ranges):
        rng = ranges[ch]
        log.info("Index for %s: %s entries (%d - %d)", ch, f"{rng.count:,}", rng.start, rng.end)
    log.info("Total entries indexed: %s", f"{stats.total:,}")
    return stats
