from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from dateutil import parser as _dateparser

# Epoch values above this are taken to be milliseconds (year ~5138 in seconds).
_EPOCH_MS_THRESHOLD = 1e11


def _from_epoch(value: float) -> datetime | None:
    if value > _EPOCH_MS_THRESHOLD:
        value = value / 1000.0
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_date(value: Any) -> datetime | None:
    """
    Parse a source date into an aware datetime (UTC when no offset is given).

    Accepts ISO-8601 strings, other common textual formats and unix epoch
    numbers (int/float or digit-only strings). Returns None for anything
    missing or unparseable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        dt = _from_epoch(float(value))
    else:
        s = str(value).strip()
        if not s:
            return None
        if s.isascii() and s.isdigit():
            dt = _from_epoch(float(s))
        else:
            try:
                dt = _dateparser.isoparse(s)
            except (ValueError, OverflowError):
                try:
                    dt = _dateparser.parse(s)
                except (ValueError, OverflowError, TypeError):
                    return None
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def is_recent(value: Any, days: float = 7, now: datetime | None = None) -> bool:
    """
    True when `value` parses and is at most `days` old (boundary inclusive).
    Unparseable or missing dates are never recent.
    """
    posted = parse_date(value)
    if posted is None:
        return False
    now = now or datetime.now(timezone.utc)
    return (now - posted) <= timedelta(days=days)


def to_iso(value: Any) -> str | None:
    """Normalize a parseable date to an ISO-8601 string; None otherwise."""
    dt = parse_date(value)
    return dt.isoformat() if dt else None
