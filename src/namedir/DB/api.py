# namedir/DB/api.py
from __future__ import annotations
import os
from typing import Dict, Mapping, Optional, Protocol

from ..models import DatasetStats, LetterRange


class IndexStore(Protocol):
    # Write (indexer only)
    def save(self, ranges: Mapping[str, LetterRange], stats: DatasetStats) -> None: ...
    # Read
    def read_letter(self, letter: str) -> Optional[LetterRange]: ...
    def read_all(self) -> Dict[str, LetterRange]: ...
    def read_stats(self) -> Optional[DatasetStats]: ...
    # lifecycle
    def close(self) -> None: ...


def make_store(dsn: str) -> IndexStore:
    """
    Factory:
      - sqlite:///path -> SQLiteStore (file created on first save)
      - memory://      -> MemoryStore
    """
    if dsn.startswith("sqlite:///"):
        from .sqlite_store import SQLiteStore
        path = dsn.removeprefix("sqlite:///")
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        return SQLiteStore(path)

    if dsn.startswith("memory://"):
        from .memory_store import MemoryStore
        return MemoryStore()

    raise ValueError(f"Unsupported store DSN: {dsn}")
