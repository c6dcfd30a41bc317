# namedir/engine.py
from __future__ import annotations

import os
import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from . import config as CFG
from .cache import ResultCache, query_signature
from .errors import IndexNotBuilt
from .indexer import rebuild_index
from .models import DatasetStats, Entry, QueryResult, empty_result
from .parser import entry_matches
from .reader import CancelSignal, read_range, read_segments
from .search import search as scan_search
from .DB.api import IndexStore, make_store

log = logging.getLogger(__name__)

Segment = Tuple[int, int]


def _page_window(segments: Sequence[Segment], skip: int, limit: int) -> List[Segment]:
    """
    Map positions [skip, skip + limit) of the concatenated segments back onto
    line segments. With a single segment this is the plain
    actual_start = start + skip, actual_end = min(actual_start + limit, end).
    """
    window: List[Segment] = []
    want = limit
    for start, end in segments:
        size = end - start
        if skip >= size:
            skip -= size
            continue
        s = start + skip
        e = min(s + want, end)
        window.append((s, e))
        want -= e - s
        skip = 0
        if want <= 0:
            break
    return window


class DirectoryEngine:
    """
    Orchestration layer that glues together:
      - the persisted letter index (IndexStore: SQLite or in-memory),
      - the range reader (reader.read_segments),
      - the search scanner (search.search),
      - the LRU result cache (cache.ResultCache).

    Public API (used by CLI/Flask):
      * build(dataset, ...): index -> persist -> attach
      * load(dataset, ...):  attach an index built earlier
      * get_page / search / get_alphabet_stats / jump_to_letter / get_entry
      * rebuild():           re-index the attached dataset, drop cached results
      * shutdown():          close underlying resources

    Store DSNs (via namedir.DB.api.make_store):
      - "sqlite:///path/to/indexes.sqlite"
      - "memory://"
    """

    # ------------- lifecycle -------------

    def __init__(self, *, cache: Optional[ResultCache] = None, cache_capacity: int = CFG.CACHE_CAPACITY) -> None:
        self.dataset_path: Optional[str] = None
        self._store: Optional[IndexStore] = None
        self.cache: ResultCache = cache if cache is not None else ResultCache(cache_capacity)

    # /* ~~~ Index a dataset and wire up storage ~~~ */
    def build(self, dataset: str, *, db_dsn: Optional[str] = None, verbose: bool = False) -> DatasetStats:
        if verbose:
            logging.basicConfig(level=logging.INFO)
            CFG.VERBOSE = True

        dsn = db_dsn or "memory://"
        log.info("Initializing index store: %s", dsn)
        store = make_store(dsn)
        stats = rebuild_index(dataset, store)

        self._attach(dataset, store)
        log.info("Engine build() complete: entries=%d", stats.total)
        return stats

    # /* ~~~ Attach a dataset to an index that was built out-of-band ~~~ */
    def load(self, dataset: str, *, db_dsn: str, verbose: bool = False) -> None:
        if verbose:
            logging.basicConfig(level=logging.INFO)
        if db_dsn.startswith("sqlite:///"):
            path = db_dsn.removeprefix("sqlite:///")
            if not os.path.exists(path):
                raise FileNotFoundError(path)

        log.info("Initializing index store: %s", db_dsn)
        store = make_store(db_dsn)
        self._attach(dataset, store)
        stats = store.read_stats()
        if stats is None:
            log.warning("Index %s has no stats record; treating dataset as empty", db_dsn)
        log.info("Engine load() complete: entries=%d", stats.total if stats else 0)

    def rebuild(self) -> DatasetStats:
        store, dataset = self._require()
        stats = rebuild_index(dataset, store)
        self.cache.clear()
        return stats

    # ------------- queries -------------

    def get_page(
        self,
        page: int,
        limit: int,
        letter: Optional[str] = None,
        search: Optional[str] = None,
        *,
        cancel: Optional[CancelSignal] = None,
    ) -> QueryResult:
        """
        One page of the whole directory, or of one letter.
        `search` filters the returned page only; it is not a global search.
        """
        key = query_signature("page", page=page, limit=limit, letter=letter, search=search)
        return self._cached(key, lambda: self._compute_page(page, limit, letter, search, cancel))

    def search(
        self,
        query: str,
        limit: int,
        page: int = 1,
        *,
        cancel: Optional[CancelSignal] = None,
    ) -> QueryResult:
        """Global substring search. `total` is exact unless `has_more` (then approximate)."""
        query = (query or "").strip()
        if not query:
            return empty_result(page)
        key = query_signature("search", page=page, limit=limit, search=query)
        return self._cached(key, lambda: self._compute_search(query, limit, page, cancel))

    def get_alphabet_stats(self) -> Dict[str, Dict[str, int]]:
        store, _ = self._require()
        ranges = store.read_all()
        stats: Dict[str, Dict[str, int]] = {}
        for letter in CFG.ALPHABET:
            rng = ranges.get(letter)
            if rng is not None:
                stats[letter] = {"count": rng.count, "start": rng.start}
            else:
                stats[letter] = {"count": 0, "start": 0}
        return stats

    def jump_to_letter(self, letter: str, limit: int = CFG.JUMP_LIMIT) -> QueryResult:
        return self.get_page(1, limit, letter=letter)

    def get_entry(self, entry_id: int, *, cancel: Optional[CancelSignal] = None) -> Optional[Entry]:
        """Entry with the given 1-based id, or None when out of range."""
        store, dataset = self._require()
        stats = store.read_stats()
        if entry_id < 1 or entry_id > (stats.total if stats else 0):
            return None
        rows = read_range(dataset, entry_id - 1, entry_id, cancel=cancel)
        try:
            return next(rows, None)
        finally:
            rows.close()

    # ------------- teardown -------------

    # /* ~~~ Close underlying resources (DB handles, etc.) ~~~ */
    def shutdown(self) -> None:
        try:
            if self._store:
                self._store.close()
        finally:
            self._store = None
            self.dataset_path = None
            self.cache.clear()
            log.info("Engine shutdown complete")

    # ------------- internals -------------

    def _attach(self, dataset: str, store: IndexStore) -> None:
        if self._store is not None:
            self._store.close()
        self._store = store
        self.dataset_path = dataset
        self.cache.clear()

    def _require(self) -> Tuple[IndexStore, str]:
        if self._store is None or self.dataset_path is None:
            raise IndexNotBuilt("Engine not initialized. Call build() or load() first.")
        return self._store, self.dataset_path

    def _cached(self, key: str, compute: Callable[[], QueryResult]) -> QueryResult:
        # cache errors degrade to a recompute
        try:
            hit = self.cache.get(key)
        except Exception:
            log.warning("result cache lookup failed for %s", key, exc_info=True)
            hit = None
        if hit is not None:
            log.debug("cache hit %s", key)
            return hit

        result = compute()
        try:
            self.cache.set(key, result)
        except Exception:
            log.warning("result cache store failed for %s", key, exc_info=True)
        return result

    def _segments_for(self, store: IndexStore, letter: Optional[str]) -> Optional[Sequence[Segment]]:
        if letter:
            rng = store.read_letter(letter)
            return rng.segments() if rng is not None else None
        stats = store.read_stats()
        if stats is None:
            log.warning("index has no stats record; treating dataset as empty")
            return ((0, 0),)
        return ((0, stats.total),)

    def _compute_page(
        self,
        page: int,
        limit: int,
        letter: Optional[str],
        search: Optional[str],
        cancel: Optional[CancelSignal],
    ) -> QueryResult:
        store, dataset = self._require()
        segments = self._segments_for(store, letter)
        if segments is None:
            return empty_result(page)

        universe = sum(e - s for s, e in segments)
        skip = (page - 1) * limit
        window = _page_window(segments, skip, limit)
        entries = list(read_segments(dataset, window, cancel=cancel))

        if search:
            needle = search.lower()
            entries = [e for e in entries if entry_matches(e, needle)]

        has_more = skip + limit < universe and len(entries) > 0
        return QueryResult(entries=tuple(entries), total=universe, has_more=has_more, page=page)

    def _compute_search(
        self,
        query: str,
        limit: int,
        page: int,
        cancel: Optional[CancelSignal],
    ) -> QueryResult:
        _, dataset = self._require()
        found = scan_search(dataset, query, page, limit, cancel=cancel)
        return QueryResult(
            entries=found.entries,
            total=found.total_estimate,
            has_more=found.has_more,
            page=page,
            approximate=found.has_more,
        )
