from __future__ import annotations

from typing import Any

from ..models import JobPosting
from .base import SourceAdapter
from .registry import register


@register
class RemoteOkSource(SourceAdapter):
    """
    RemoteOK public API.

    The response is a bare list whose first element is a legal notice rather
    than a job; anything without a `position` is skipped.
    """

    kind = "remoteok"
    description = "RemoteOK API (full listing, local filter on position/tags)"
    URL = "https://remoteok.com/api"

    def query(self, skill: str) -> list[Any]:
        payload = self._client.get_json(self._param("url", self.URL))
        return [it for it in self._items(payload, None, self.kind) if not isinstance(it, dict) or it.get("position")]

    def title_of(self, item: dict[str, Any]) -> Any:
        return item.get("position")

    def secondary_text(self, item: dict[str, Any]) -> Any:
        return item.get("tags")

    def posted_at(self, item: dict[str, Any]) -> Any:
        return item.get("date")

    def to_posting(self, item: dict[str, Any], skill: str) -> JobPosting | None:
        return self._posting(
            title=item.get("position"),
            company=item.get("company"),
            location=item.get("location"),
            url=item.get("url"),
            date=item.get("date"),
            skill=skill,
        )
