"""Name directory: letter-indexed paging and bounded substring search over a flat name list."""
from __future__ import annotations

from .engine import DirectoryEngine
from .errors import DataSourceUnavailable, DirectoryError, IndexNotBuilt, ScanCancelled
from .models import DatasetStats, Entry, LetterRange, QueryResult, SearchPage

__all__ = [
    "DirectoryEngine",
    "DirectoryError",
    "DataSourceUnavailable",
    "IndexNotBuilt",
    "ScanCancelled",
    "DatasetStats",
    "Entry",
    "LetterRange",
    "QueryResult",
    "SearchPage",
]
