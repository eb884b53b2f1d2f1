from __future__ import annotations

from typing import Any

from ..dates import to_iso
from ..models import JobPosting
from .base import SourceAdapter
from .registry import register


@register
class ArbeitnowSource(SourceAdapter):
    """
    Arbeitnow public job board.

    Full listing fetch, filtered locally. `created_at` is a unix timestamp in
    seconds; it is normalized to ISO-8601 for JobPosting.date.

    params:
      url: str   # override endpoint (default below)
    """

    kind = "arbeitnow"
    description = "Arbeitnow job board API (full listing, local filter on title/tags)"
    URL = "https://www.arbeitnow.com/api/job-board-api"

    def query(self, skill: str) -> list[Any]:
        payload = self._client.get_json(self._param("url", self.URL))
        return self._items(payload, "data", self.kind)

    def title_of(self, item: dict[str, Any]) -> Any:
        return item.get("title")

    def secondary_text(self, item: dict[str, Any]) -> Any:
        return item.get("tags")

    def posted_at(self, item: dict[str, Any]) -> Any:
        return item.get("created_at")

    def to_posting(self, item: dict[str, Any], skill: str) -> JobPosting | None:
        return self._posting(
            title=item.get("title"),
            company=item.get("company_name") or item.get("company"),
            location=item.get("location"),
            url=item.get("url"),
            date=to_iso(item.get("created_at")),
            skill=skill,
        )
