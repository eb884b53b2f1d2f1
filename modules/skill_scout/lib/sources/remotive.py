from __future__ import annotations

from typing import Any

from ..models import JobPosting
from .base import SourceAdapter
from .registry import register

# Remotive rejects some non-browser agents.
_BROWSER_UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64)"


@register
class RemotiveSource(SourceAdapter):
    """
    Remotive remote-jobs API.

    Uses the native `search` parameter, then applies the same local
    title/category filter as the other boards.

    params:
      url: str
      limit: int = 100
      search: bool = True   # send the skill as `search`
    """

    kind = "remotive"
    description = "Remotive API (native search, local filter on title/category)"
    URL = "https://remotive.com/api/remote-jobs"

    def query(self, skill: str) -> list[Any]:
        params: dict[str, Any] = {"limit": self._param("limit", 100)}
        if self._param("search", True):
            params["search"] = skill
        payload = self._client.get_json(
            self._param("url", self.URL),
            params=params,
            headers={"User-Agent": _BROWSER_UA},
        )
        return self._items(payload, "jobs", self.kind)

    def title_of(self, item: dict[str, Any]) -> Any:
        return item.get("title")

    def secondary_text(self, item: dict[str, Any]) -> Any:
        return item.get("category")

    def posted_at(self, item: dict[str, Any]) -> Any:
        return item.get("publication_date")

    def to_posting(self, item: dict[str, Any], skill: str) -> JobPosting | None:
        return self._posting(
            title=item.get("title"),
            company=item.get("company_name"),
            location=item.get("candidate_required_location"),
            url=item.get("url"),
            date=item.get("publication_date"),
            skill=skill,
        )
