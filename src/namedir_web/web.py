from __future__ import annotations
import argparse
import logging
import re
from datetime import datetime, timezone

from flask import Flask, abort, jsonify, request

from namedir import config as CFG
from namedir.engine import DirectoryEngine
from namedir.errors import DataSourceUnavailable, IndexNotBuilt, ScanCancelled
from namedir.reader import Deadline

log = logging.getLogger(__name__)

app = Flask(__name__)
_engine: DirectoryEngine | None = None

_LETTER = re.compile(r"^[A-Za-z]$")


def _bad_request(message: str):
    return jsonify({"error": message}), 400


def _limit_arg(default: int) -> int:
    limit = request.args.get("limit", default, type=int)
    return max(1, min(limit or default, CFG.MAX_LIMIT))


def _deadline() -> Deadline:
    return Deadline(CFG.SCAN_TIMEOUT_SECONDS)


def _require_engine() -> DirectoryEngine:
    if _engine is None:
        raise IndexNotBuilt("directory engine is not initialized")
    return _engine


# ---------- errors ----------
@app.errorhandler(DataSourceUnavailable)
def _data_source_unavailable(exc: DataSourceUnavailable):
    log.error("data source unavailable: %s", exc)
    return jsonify({"error": "Data source unavailable"}), 503


@app.errorhandler(ScanCancelled)
def _scan_cancelled(exc: ScanCancelled):
    log.warning("scan cancelled: %s", exc)
    return jsonify({"error": "Query took too long"}), 504


@app.errorhandler(IndexNotBuilt)
def _index_not_built(exc: IndexNotBuilt):
    return jsonify({"error": str(exc)}), 503


# ---------- API ----------
@app.get("/api/users/paginated")
def api_paginated():
    page = request.args.get("page", 1, type=int)
    limit = _limit_arg(CFG.DEFAULT_LIMIT)
    letter = request.args.get("letter") or None
    search = request.args.get("search") or None

    if page < 1:
        return _bad_request("Page must be greater than 0")
    if letter is not None and not _LETTER.match(letter):
        return _bad_request("Invalid letter. Must be A-Z")

    res = _require_engine().get_page(
        page, limit, letter=letter.upper() if letter else None, search=search, cancel=_deadline()
    )
    return jsonify(res.to_dict())


@app.get("/api/users/alphabet-stats")
def api_alphabet_stats():
    return jsonify(_require_engine().get_alphabet_stats())


@app.get("/api/users/search")
def api_search():
    q = request.args.get("q", "", type=str)
    page = request.args.get("page", 1, type=int)
    limit = _limit_arg(CFG.DEFAULT_LIMIT)

    if not q.strip():
        return _bad_request('Query parameter "q" is required')
    if page < 1:
        return _bad_request("Page must be greater than 0")

    res = _require_engine().search(q, limit, page, cancel=_deadline())
    return jsonify(res.to_dict())


@app.get("/api/users/jump-to-letter/<letter>")
def api_jump_to_letter(letter: str):
    if not _LETTER.match(letter):
        return _bad_request("Invalid letter. Must be A-Z")
    limit = _limit_arg(CFG.JUMP_LIMIT)
    res = _require_engine().get_page(1, limit, letter=letter.upper(), cancel=_deadline())
    return jsonify(res.to_dict())


@app.get("/api/users/<int:entry_id>")
def api_entry(entry_id: int):
    entry = _require_engine().get_entry(entry_id, cancel=_deadline())
    if entry is None:
        abort(404)
    return jsonify(entry.to_dict())


@app.get("/health")
def health():
    return jsonify({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run the name directory JSON API")
    mode = ap.add_mutually_exclusive_group(required=True)
    mode.add_argument("--build", action="store_true", help="Index --data into --db, then serve")
    mode.add_argument("--load", action="store_true", help="Serve an index built earlier")
    ap.add_argument("--data", default=CFG.DATA_FILE)
    ap.add_argument("--db", default=CFG.INDEX_DSN)   # DSN: "sqlite:///path" or "memory://"
    ap.add_argument("--cache-size", type=int, default=CFG.CACHE_CAPACITY)
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=3000)
    ap.add_argument("--verbose", action="store_true")
    ap.add_argument("--debug", action="store_true", help="Enable the Flask debugger (local use only)")
    args = ap.parse_args(argv)

    global _engine
    _engine = DirectoryEngine(cache_capacity=args.cache_size)
    if args.build:
        _engine.build(args.data, db_dsn=args.db, verbose=args.verbose)
    else:
        _engine.load(args.data, db_dsn=args.db, verbose=args.verbose)

    try:
        app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)
    finally:
        _engine.shutdown()
    return 0
