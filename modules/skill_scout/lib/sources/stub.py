from __future__ import annotations

from typing import Any

from ..models import JobPosting
from .base import SourceAdapter, SourceError
from .registry import register


@register
class StubSource(SourceAdapter):
    """
    A zero-network source used for tests and dry-runs.

    params:
      items: list[{title, company, location, url, date, tags}]
      error: str   # OPTIONAL, every fetch raises SourceError(error)

    Items go through the same relevance/recency filters as real boards.
    """

    kind = "stub"
    description = "In-memory items from params (tests, dry runs)"

    def query(self, skill: str) -> list[Any]:
        if self.params.get("error"):
            raise SourceError(str(self.params["error"]))
        items = self.params.get("items") or []
        if not isinstance(items, list):
            raise SourceError("stub: 'items' must be a list")
        return items

    def title_of(self, item: dict[str, Any]) -> Any:
        return item.get("title")

    def secondary_text(self, item: dict[str, Any]) -> Any:
        return item.get("tags")

    def posted_at(self, item: dict[str, Any]) -> Any:
        return item.get("date")

    def to_posting(self, item: dict[str, Any], skill: str) -> JobPosting | None:
        return self._posting(
            title=item.get("title"),
            company=item.get("company"),
            location=item.get("location"),
            url=item.get("url"),
            date=item.get("date"),
            skill=skill,
        )
