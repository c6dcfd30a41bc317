from __future__ import annotations
import re
from typing import Optional

from .config import COMMENT_MARKER, CONTACT_DOMAIN
from .models import Entry

_WS_RUN = re.compile(r"\s+")
_NOT_CONTACT = re.compile(r"[^a-z0-9.]")


def is_data_line(stripped: str) -> bool:
    """True for a stripped line that carries a record (not blank, not a comment)."""
    return bool(stripped) and not stripped.startswith(COMMENT_MARKER)


def derive_contact(display_name: str) -> str:
    """
    Build the synthetic contact for a display name:
      * lowercase
      * whitespace runs -> "."
      * anything outside [a-z0-9.] dropped
      * "@<CONTACT_DOMAIN>" appended
    """
    local = _WS_RUN.sub(".", display_name.lower())
    local = _NOT_CONTACT.sub("", local)
    return f"{local}@{CONTACT_DOMAIN}"


def parse_line(raw: str, entry_id: int) -> Optional[Entry]:
    """
    Turn one raw dataset line into an Entry, or None for blank/comment lines.

    "First, Last"  -> first="First", last="Last", display="First Last"
    "First Last"   -> first="First", last="Last", display=original line
    "Mononym"      -> first="Mononym", last="",   display="Mononym"
    """
    name = raw.strip()
    if not is_data_line(name):
        return None

    if "," in name:
        head, *rest = name.split(",")
        first = head.strip()
        last = ",".join(rest).strip()
        display = f"{first} {last}"
    else:
        tokens = name.split()
        if len(tokens) > 1:
            first = tokens[0]
            last = " ".join(tokens[1:])
        else:
            first, last = name, ""
        display = name

    return Entry(
        id=entry_id,
        display_name=display,
        first_part=first,
        last_part=last,
        contact=derive_contact(display),
    )


def entry_matches(entry: Entry, needle: str) -> bool:
    """Case-insensitive containment on the structured fields; `needle` is already lowercase."""
    return needle in entry.display_name.lower() or needle in entry.contact
