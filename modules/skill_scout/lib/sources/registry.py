from __future__ import annotations

from .base import SourceAdapter

# Global in-process registry: kind -> adapter class
_REGISTRY: dict[str, type[SourceAdapter]] = {}


def register(cls: type[SourceAdapter]) -> type[SourceAdapter]:
    """
    Class decorator registering a source adapter under its `kind`.
    Re-registering the same class is a no-op; a different class for a taken
    kind is rejected.
    """
    kind = getattr(cls, "kind", "") or ""
    if not isinstance(kind, str) or not kind.strip():
        raise ValueError(f"Cannot register source {cls!r}: missing/empty 'kind'.")
    key = kind.strip().lower()
    if key in _REGISTRY and _REGISTRY[key] is not cls:
        raise ValueError(f"Source kind {key!r} already registered to {_REGISTRY[key]!r}.")
    _REGISTRY[key] = cls
    return cls


def get(kind: str) -> type[SourceAdapter]:
    """
    Look up a source class by kind (case-insensitive).
    Raises KeyError if not found.
    """
    key = (kind or "").strip().lower()
    if key not in _REGISTRY:
        raise KeyError(f"No source registered for kind {kind!r}.")
    return _REGISTRY[key]


def all_kinds() -> dict[str, type[SourceAdapter]]:
    return dict(_REGISTRY)
