"""Flask JSON API over namedir.DirectoryEngine."""
from __future__ import annotations

from .web import app, main

__all__ = ["app", "main"]
