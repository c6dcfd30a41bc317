from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Entry:
    id: int                   # 1-based position among data lines
    display_name: str
    first_part: str
    last_part: str
    contact: str              # derived, never read from the dataset

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "firstPart": self.first_part,
            "lastPart": self.last_part,
            "derivedContact": self.contact,
        }


@dataclass(frozen=True)
class LetterRange:
    letter: str
    start: int                # inclusive
    end: int                  # exclusive
    count: int
    runs: Tuple[Tuple[int, int], ...] = ()   # disjoint [start, end) runs, ascending

    def segments(self) -> Tuple[Tuple[int, int], ...]:
        """Line segments holding this letter; one segment for grouped input."""
        return self.runs or ((self.start, self.end),)


@dataclass(frozen=True)
class DatasetStats:
    total: int


@dataclass(frozen=True)
class SearchPage:
    entries: Tuple[Entry, ...]
    has_more: bool
    total_estimate: int       # exact unless has_more
    matches_seen: int


@dataclass(frozen=True)
class QueryResult:
    entries: Tuple[Entry, ...]
    total: int
    has_more: bool
    page: int
    approximate: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entries": [e.to_dict() for e in self.entries],
            "total": self.total,
            "hasMore": self.has_more,
            "page": self.page,
            "approximate": self.approximate,
        }


def empty_result(page: int) -> QueryResult:
    return QueryResult(entries=(), total=0, has_more=False, page=page)
