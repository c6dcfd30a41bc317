from __future__ import annotations


class DirectoryError(Exception):
    """Base exception for the name directory."""


class DataSourceUnavailable(DirectoryError):
    """The dataset file could not be opened or read.

    Distinct from an empty result so callers can report a service error
    instead of "no matches".
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"data source unavailable: {path}: {reason}")
        self.path = path
        self.reason = reason


class ScanCancelled(DirectoryError):
    """A read or search was abandoned because its cancel signal fired."""


class IndexNotBuilt(DirectoryError):
    """The engine was queried before build() or load()."""
