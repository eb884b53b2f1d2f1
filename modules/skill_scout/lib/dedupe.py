from __future__ import annotations

from collections.abc import Iterable

from .models import JobPosting


def dedupe_by_url(postings: Iterable[JobPosting]) -> list[JobPosting]:
    """
    Collapse postings to one per url. The LAST posting seen for a url wins;
    callers control reproducibility by passing a fixed traversal order.
    """
    by_url: dict[str, JobPosting] = {}
    for p in postings:
        by_url[p.url] = p
    return list(by_url.values())
