from __future__ import annotations
import os

# Dataset: one display name per line, "#" lines are comments
DATA_FILE: str = os.environ.get("NAMEDIR_DATA_FILE", "data/users.txt")
COMMENT_MARKER: str = "#"

# Persisted letter index: "sqlite:///path" or "memory://"
INDEX_DSN: str = os.environ.get("NAMEDIR_DB", "sqlite:///data/indexes.sqlite")

ALPHABET: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Suffix of the synthetic contact derived from each display name
CONTACT_DOMAIN: str = "example.com"

# Paging
DEFAULT_LIMIT: int = 50
JUMP_LIMIT: int = 100
MAX_LIMIT: int = 500

# /* ~~~ added to the running match count when a search stops early ~~~ */
SEARCH_TOTAL_PADDING: int = 100

# Result cache size (entries)
CACHE_CAPACITY: int = int(os.environ.get("NAMEDIR_CACHE_SIZE", "100"))

# Per-request scan budget for the web layer, in seconds
SCAN_TIMEOUT_SECONDS: float = float(os.environ.get("NAMEDIR_SCAN_TIMEOUT", "30"))

# Progress logging while indexing (set NAMEDIR_VERBOSE=1 to enable)
VERBOSE: bool = os.environ.get("NAMEDIR_VERBOSE") == "1"
PROGRESS_EVERY_LINES: int = 1_000_000
