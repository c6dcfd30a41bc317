# namedir/DB/sqlite_store.py
from __future__ import annotations
import sqlite3
import threading
from typing import Dict, Mapping, Optional

from .api import IndexStore
from ..models import DatasetStats, LetterRange

_SCHEMA = """
CREATE TABLE IF NOT EXISTS letter_ranges (
  letter TEXT PRIMARY KEY,
  start INTEGER NOT NULL,
  "end" INTEGER NOT NULL,
  count INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS letter_runs (
  letter TEXT NOT NULL,
  seq INTEGER NOT NULL,
  start INTEGER NOT NULL,
  "end" INTEGER NOT NULL,
  PRIMARY KEY (letter, seq)
);
CREATE TABLE IF NOT EXISTS stats (
  key TEXT PRIMARY KEY,
  value INTEGER NOT NULL
);
"""


class SQLiteStore(IndexStore):
    """Persisted letter index: one row per letter, its runs, and the dataset total."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path
        # request threads share one connection; the lock serializes access
        self.conn = sqlite3.connect(db_path, check_same_thread=False)
        self._lock = threading.Lock()
        with self._lock:
            self.conn.executescript(_SCHEMA)

    # ---- Write ----
    def save(self, ranges: Mapping[str, LetterRange], stats: DatasetStats) -> None:
        range_rows = [(r.letter.upper(), r.start, r.end, r.count) for r in ranges.values()]
        run_rows = [
            (r.letter.upper(), seq, s, e)
            for r in ranges.values()
            for seq, (s, e) in enumerate(r.segments())
        ]
        with self._lock, self.conn:
            self.conn.execute("DELETE FROM letter_ranges")
            self.conn.execute("DELETE FROM letter_runs")
            self.conn.execute("DELETE FROM stats")
            self.conn.executemany(
                'INSERT INTO letter_ranges(letter, start, "end", count) VALUES (?,?,?,?)',
                range_rows,
            )
            self.conn.executemany(
                'INSERT INTO letter_runs(letter, seq, start, "end") VALUES (?,?,?,?)',
                run_rows,
            )
            self.conn.execute("INSERT INTO stats(key, value) VALUES ('total', ?)", (int(stats.total),))

    # ---- Read ----
    def read_letter(self, letter: str) -> Optional[LetterRange]:
        letter = letter.upper()
        with self._lock:
            row = self.conn.execute(
                'SELECT start, "end", count FROM letter_ranges WHERE letter=?', (letter,)
            ).fetchone()
            if row is None:
                return None
            runs = self.conn.execute(
                'SELECT start, "end" FROM letter_runs WHERE letter=? ORDER BY seq', (letter,)
            ).fetchall()
        return LetterRange(
            letter=letter, start=row[0], end=row[1], count=row[2],
            runs=tuple((s, e) for s, e in runs),
        )

    def read_all(self) -> Dict[str, LetterRange]:
        with self._lock:
            letters = [r[0] for r in self.conn.execute("SELECT letter FROM letter_ranges")]
        out: Dict[str, LetterRange] = {}
        for letter in letters:
            rng = self.read_letter(letter)
            if rng is not None:
                out[letter] = rng
        return out

    def read_stats(self) -> Optional[DatasetStats]:
        with self._lock:
            row = self.conn.execute("SELECT value FROM stats WHERE key='total'").fetchone()
        return DatasetStats(total=int(row[0])) if row else None

    # ---- lifecycle ----
    def close(self) -> None:
        with self._lock:
            self.conn.close()
