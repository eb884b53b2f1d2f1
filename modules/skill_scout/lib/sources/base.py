from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from ..dates import is_recent
from ..http_client import HttpClient
from ..models import DEFAULT_COMPANY, DEFAULT_LOCATION, DEFAULT_TITLE, JobPosting
from ..utils import lower_text


class SourceError(Exception):
    """Raised when a source answers with a body we can't interpret."""


class SourceAdapter(ABC):
    """
    Abstract job-board source.

    One instance serves every skill of a run; `fetch` may be called
    concurrently from several worker threads, so adapters keep no per-call
    state on `self`.

    Contract:
      - fetch(skill) issues ONE outbound query and returns the postings that
        mention the skill (title or secondary text) and are recent enough.
      - Any network, HTTP, or body error propagates; the engine records it as
        a failure for this (skill, source) pair. No retries here.
    """

    # Concrete subclasses MUST set this to a stable string, e.g. "remotive"
    kind: str = ""
    description: str = ""

    def __init__(
        self,
        client: HttpClient | None = None,
        *,
        name: str | None = None,
        recency_days: float = 7.0,
        params: Mapping[str, Any] | None = None,
    ) -> None:
        self._client = client or HttpClient()
        # Configured source name; several names may share one adapter class
        self.name = name or self.kind
        self.recency_days = float(recency_days)
        self.params: dict[str, Any] = dict(params or {})

    def fetch(self, skill: str) -> list[JobPosting]:
        needle = skill.lower()
        out: list[JobPosting] = []
        for item in self.query(skill):
            if not isinstance(item, dict):
                raise SourceError(f"{self.kind}: expected an object per job, got {type(item).__name__}")
            if not self._mentions(item, needle):
                continue
            if not is_recent(self.posted_at(item), self.recency_days):
                continue
            posting = self.to_posting(item, skill)
            if posting is not None:
                out.append(posting)
        return out

    # ---- hooks ----

    @abstractmethod
    def query(self, skill: str) -> list[Any]:
        """Issue the outbound request and return the raw job items."""
        raise NotImplementedError

    @abstractmethod
    def title_of(self, item: dict[str, Any]) -> Any:
        raise NotImplementedError

    def secondary_text(self, item: dict[str, Any]) -> Any:
        """Source-specific text also searched for the skill (tags, category...)."""
        return None

    @abstractmethod
    def posted_at(self, item: dict[str, Any]) -> Any:
        raise NotImplementedError

    @abstractmethod
    def to_posting(self, item: dict[str, Any], skill: str) -> JobPosting | None:
        """Map a native item; return None when it has no usable URL."""
        raise NotImplementedError

    # ---- helpers ----

    def _mentions(self, item: dict[str, Any], needle: str) -> bool:
        return needle in lower_text(self.title_of(item)) or needle in lower_text(self.secondary_text(item))

    def _param(self, key: str, default: Any) -> Any:
        val = self.params.get(key)
        return default if val is None else val

    @staticmethod
    def _items(payload: Any, key: str | None, kind: str) -> list[Any]:
        """
        Pull the job list out of a payload. A missing/null list is an empty
        result; anything that isn't a list is a malformed body.
        """
        if key is None:
            items = payload
        else:
            if not isinstance(payload, dict):
                raise SourceError(f"{kind}: expected a JSON object, got {type(payload).__name__}")
            items = payload.get(key)
        if items is None:
            return []
        if not isinstance(items, list):
            raise SourceError(f"{kind}: expected a list of jobs, got {type(items).__name__}")
        return items

    @staticmethod
    def _posting(
        *,
        title: Any,
        company: Any,
        location: Any,
        url: Any,
        date: Any,
        skill: str,
    ) -> JobPosting | None:
        url_s = str(url or "").strip()
        if not url_s:
            return None
        return JobPosting(
            title=str(title or "").strip() or DEFAULT_TITLE,
            company=str(company or "").strip() or DEFAULT_COMPANY,
            location=str(location or "").strip() or DEFAULT_LOCATION,
            url=url_s,
            date=str(date).strip() if date not in (None, "") else None,
            skill=skill,
        )
