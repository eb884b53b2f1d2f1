from __future__ import annotations

from typing import Any

from bs4 import BeautifulSoup

from ..models import JobPosting
from .base import SourceAdapter
from .registry import register


def _html_to_text(html: Any) -> str:
    if not html:
        return ""
    return BeautifulSoup(str(html), "html.parser").get_text(" ", strip=True)


@register
class TheMuseSource(SourceAdapter):
    """
    The Muse public jobs API.

    One page of a category listing, filtered locally on the job name and the
    description body (`contents` is HTML, searched as plain text).

    params:
      url: str
      category: str = "Engineering"
      page: int = 1
    """

    kind = "themuse"
    description = "The Muse public jobs API (one category page, local filter on name/contents)"
    URL = "https://www.themuse.com/api/public/jobs"

    def query(self, skill: str) -> list[Any]:
        params = {
            "category": self._param("category", "Engineering"),
            "page": self._param("page", 1),
        }
        payload = self._client.get_json(self._param("url", self.URL), params=params)
        return self._items(payload, "results", self.kind)

    def title_of(self, item: dict[str, Any]) -> Any:
        return item.get("name")

    def secondary_text(self, item: dict[str, Any]) -> Any:
        return _html_to_text(item.get("contents"))

    def posted_at(self, item: dict[str, Any]) -> Any:
        return item.get("publication_date")

    def to_posting(self, item: dict[str, Any], skill: str) -> JobPosting | None:
        company = item.get("company") or {}
        locations = item.get("locations") or []
        refs = item.get("refs") or {}
        return self._posting(
            title=item.get("name"),
            company=company.get("name") if isinstance(company, dict) else None,
            location=", ".join(
                str(loc.get("name")) for loc in locations if isinstance(loc, dict) and loc.get("name")
            ),
            url=refs.get("landing_page") if isinstance(refs, dict) else None,
            date=item.get("publication_date"),
            skill=skill,
        )
