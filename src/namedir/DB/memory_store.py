# namedir/DB/memory_store.py
from __future__ import annotations
from typing import Dict, Mapping, Optional

from .api import IndexStore
from ..models import DatasetStats, LetterRange


class MemoryStore(IndexStore):
    """In-memory letter index (useful for tests or ephemeral runs)."""

    def __init__(self) -> None:
        self._ranges: Dict[str, LetterRange] = {}
        self._stats: Optional[DatasetStats] = None

    def save(self, ranges: Mapping[str, LetterRange], stats: DatasetStats) -> None:
        self._ranges = {k.upper(): v for k, v in ranges.items()}
        self._stats = stats

    def read_letter(self, letter: str) -> Optional[LetterRange]:
        return self._ranges.get(letter.upper())

    def read_all(self) -> Dict[str, LetterRange]:
        return dict(self._ranges)

    def read_stats(self) -> Optional[DatasetStats]:
        return self._stats

    def close(self) -> None:
        self._ranges.clear()
        self._stats = None
