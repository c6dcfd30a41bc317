from __future__ import annotations
import argparse, json, os, sys

from . import config as CFG
from .engine import DirectoryEngine
from .errors import DirectoryError
from .models import QueryResult


def _print_result(res: QueryResult, as_json: bool) -> None:
    if as_json:
        print(json.dumps(res.to_dict(), ensure_ascii=False, indent=2))
        return
    if not res.entries:
        print("(no entries)")
    else:
        print("id        Name                                 Contact")
        for e in res.entries:
            print(f"{e.id:<9} {e.display_name:<36} {e.contact}")
    total = f"~{res.total:,}" if res.approximate else f"{res.total:,}"
    print(f"-- page {res.page} | total {total} | more: {'yes' if res.has_more else 'no'}")


def _print_stats(stats: dict, as_json: bool) -> None:
    if as_json:
        print(json.dumps(stats, indent=2))
        return
    for letter, row in stats.items():
        if row["count"]:
            print(f"{letter}  {row['count']:>12,}  from line {row['start']:,}")


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Name directory CLI (index, page, search)")
    p.add_argument("--data", default=CFG.DATA_FILE, help="Dataset file, one name per line")
    p.add_argument("--db", default=CFG.INDEX_DSN, help='Index DSN: "sqlite:///path" or "memory://"')
    p.add_argument("--build", action="store_true", help="(Re)build the letter index before querying")
    p.add_argument("--stats", action="store_true", help="Print per-letter counts")
    p.add_argument("--letter", default=None, help="Restrict paging to names starting with this letter")
    p.add_argument("--page", type=int, default=1)
    p.add_argument("-k", "--limit", type=int, default=CFG.DEFAULT_LIMIT, help="Entries per page")
    p.add_argument("--q", default=None, help="Global substring search")
    p.add_argument("--filter", default=None, help="Substring filter applied to the returned page only")
    p.add_argument("--repl", action="store_true", help="Interactive search loop after init")
    p.add_argument("--json", action="store_true", help="Emit JSON")
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)

    if args.page < 1:
        p.error("--page must be >= 1")
    if not 1 <= args.limit <= CFG.MAX_LIMIT:
        p.error(f"--limit must be between 1 and {CFG.MAX_LIMIT}")
    if args.letter is not None and not (len(args.letter) == 1 and args.letter.upper() in CFG.ALPHABET):
        p.error("--letter must be a single letter A-Z")

    eng = DirectoryEngine()
    try:
        memory = args.db.startswith("memory://")
        if args.build or memory or not os.path.exists(args.db.removeprefix("sqlite:///")):
            eng.build(args.data, db_dsn=args.db, verbose=args.verbose)
        else:
            eng.load(args.data, db_dsn=args.db, verbose=args.verbose)

        if args.stats:
            _print_stats(eng.get_alphabet_stats(), args.json)

        if args.q:
            _print_result(eng.search(args.q, args.limit, args.page), args.json)
        elif not args.stats and not args.repl:
            res = eng.get_page(args.page, args.limit, letter=args.letter, search=args.filter)
            _print_result(res, args.json)

        if args.repl:
            print("Type a query (empty line to exit).")
            while True:
                try:
                    q = input("> ").strip()
                except (EOFError, KeyboardInterrupt):
                    break
                if not q:
                    break
                _print_result(eng.search(q, args.limit), args.json)

        return 0
    except DirectoryError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    finally:
        eng.shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
