from __future__ import annotations
import logging
import re
from typing import Callable, List, Optional

from .config import CONTACT_DOMAIN, SEARCH_TOTAL_PADDING
from .models import Entry, SearchPage
from .parser import entry_matches, parse_line
from .reader import CancelSignal, iter_data_lines

log = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\s,]")
_NOT_ALNUM = re.compile(r"[^a-z0-9]")


def _prefilter(needle: str) -> Callable[[str], bool]:
    """
    Cheap test on a lowercased raw line that never rejects a real match.

    The display name differs from the raw line only in whitespace and commas,
    so a display match survives dropping those from both sides. The contact
    keeps only [a-z0-9] of the name (plus dots) ahead of the domain, so a
    contact match survives reducing both sides to [a-z0-9].
    """
    key = _NOT_ALNUM.sub("", needle)
    domain_key = _NOT_ALNUM.sub("", CONTACT_DOMAIN.lower())
    if not key or key in domain_key:
        # every contact carries the domain
        return lambda low: True

    loose = _SEPARATORS.sub("", needle) if _SEPARATORS.search(needle) else None

    def candidate(low: str) -> bool:
        if needle in low:
            return True
        if loose is not None and loose in _SEPARATORS.sub("", low):
            return True
        return key in _NOT_ALNUM.sub("", low) + domain_key

    return candidate


def search(
    dataset_path: str,
    query: str,
    page: int,
    limit: int,
    *,
    padding: int = SEARCH_TOTAL_PADDING,
    cancel: Optional[CancelSignal] = None,
) -> SearchPage:
    """
    Single forward scan for entries whose display name or contact contains `query`.

    Stage 1 is a cheap test on the raw line (see _prefilter), stage 2 re-checks the
    parsed fields. Matches belonging to earlier pages are only counted. The
    stream is closed at the first match past the requested page, so a request
    costs at most the offset of match number (page * limit + 1).

    When the scan stops early `total_estimate` is a lower bound plus `padding`;
    otherwise it is the exact number of matches in the file.
    """
    needle = query.lower()
    is_candidate = _prefilter(needle)
    skip = (page - 1) * limit

    found: List[Entry] = []
    matches = 0
    has_more = False

    lines = iter_data_lines(dataset_path, cancel=cancel)
    try:
        for index, text in lines:
            if not is_candidate(text.lower()):
                continue
            entry = parse_line(text, index + 1)
            if entry is None or not entry_matches(entry, needle):
                continue
            matches += 1
            if matches <= skip:
                continue
            if len(found) < limit:
                found.append(entry)
            else:
                has_more = True
                break
    finally:
        lines.close()

    total = matches + padding if has_more else matches
    log.debug("search %r page=%d limit=%d -> %d rows, matches_seen=%d, has_more=%s",
              query, page, limit, len(found), matches, has_more)
    return SearchPage(
        entries=tuple(found),
        has_more=has_more,
        total_estimate=total,
        matches_seen=matches,
    )
