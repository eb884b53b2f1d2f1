# skill_scout/sources/__init__.py
from __future__ import annotations

# Importing the adapter modules registers them by kind.
from . import arbeitnow, remoteok, remotive, stub, themuse  # noqa: F401
from .base import SourceAdapter, SourceError
from .registry import all_kinds, get, register

__all__ = [
    "SourceAdapter",
    "SourceError",
    "all_kinds",
    "get",
    "register",
]
