from __future__ import annotations

import html
import os
from typing import Any


def esc(s: str | None) -> str:
    """
    Escape text for HTML contexts (titles, URLs). Do NOT wrap or add tags.
    """
    if s is None:
        return ""
    return html.escape(str(s), quote=True)


def truthy(v: Any) -> bool:
    """
    Normalize common truthy inputs from env/kwargs.
    Accepts bools or strings like: '1', 'true', 'yes', 'on'.
    """
    if isinstance(v, bool):
        return v
    if v is None:
        return False
    if isinstance(v, (int, float)):
        return v != 0
    s = str(v).strip().lower()
    return s in {"1", "true", "yes", "on", "y", "t"}


def getenv_str(name: str, default: str | None = None) -> str | None:
    val = os.getenv(name)
    return val if val not in (None, "") else default


def split_csv(value: Any) -> list[str]:
    """
    Accept "a, b,c" or ["a", "b"] and return stripped, non-empty strings.
    """
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = [str(x) for x in value]
    else:
        parts = [str(value)]
    return [p.strip() for p in parts if p and p.strip()]


def lower_text(value: Any) -> str:
    """Flatten str / list-of-str / None into one lowercase haystack."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value if v is not None).lower()
    return str(value).lower()
