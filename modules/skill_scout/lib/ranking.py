from __future__ import annotations

from collections.abc import Iterable

from .dates import parse_date
from .models import JobPosting


def _sort_key(p: JobPosting) -> tuple[int, float]:
    dt = parse_date(p.date)
    if dt is None:
        return (1, 0.0)
    return (0, -dt.timestamp())


def rank_by_date(postings: Iterable[JobPosting]) -> list[JobPosting]:
    """
    Most recent first. Postings whose date doesn't parse go last; ties keep
    their input order.
    """
    return sorted(postings, key=_sort_key)
