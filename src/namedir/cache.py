# namedir/cache.py
from __future__ import annotations
import json
import threading
from collections import OrderedDict
from typing import Generic, Hashable, Optional, TypeVar

from .config import CACHE_CAPACITY

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class ResultCache(Generic[K, V]):
    """
    Bounded least-recently-used cache for computed query results.

    Every operation runs under one lock per instance, so LRU order stays
    consistent when several request threads share the cache.
    """

    def __init__(self, capacity: int = CACHE_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"cache capacity must be >= 1, got {capacity}")
        self.capacity = int(capacity)
        self._items: "OrderedDict[K, V]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: K) -> Optional[V]:
        with self._lock:
            if key not in self._items:
                self.misses += 1
                return None
            self._items.move_to_end(key)
            self.hits += 1
            return self._items[key]

    def set(self, key: K, value: V) -> None:
        with self._lock:
            if key in self._items:
                self._items.move_to_end(key)
            elif len(self._items) >= self.capacity:
                self._items.popitem(last=False)   # drop LRU
            self._items[key] = value

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items


def query_signature(
    op: str,
    *,
    page: int,
    limit: int,
    letter: Optional[str] = None,
    search: Optional[str] = None,
) -> str:
    """
    Canonical cache key for a query shape.
    Letter is uppercased, an empty search counts as no search, and the key is
    sorted-key JSON so argument order never changes it.
    """
    shape = {
        "op": op,
        "page": int(page),
        "limit": int(limit),
        "letter": letter.upper() if letter else None,
        "search": search if search else None,
    }
    return json.dumps(shape, sort_keys=True, separators=(",", ":"))
