from __future__ import annotations

from collections.abc import Sequence

from . import utils
from .models import JobPosting

_COLUMNS = ("Title", "Company", "Location", "Posted", "Skill", "Link")


def build_table(jobs: Sequence[JobPosting]) -> str:
    """
    One HTML table of ranked postings, in the order given.
    Every cell is escaped; only the <a> wrapper is ours.
    """
    head = "".join(f"<th>{c}</th>" for c in _COLUMNS)
    rows: list[str] = []
    for j in jobs:
        link_html = f'<a href="{utils.esc(j.url)}">{utils.esc(j.url)}</a>'
        cells = (j.title, j.company, j.location, j.date or "", j.skill)
        rows.append("<tr>" + "".join(f"<td>{utils.esc(c)}</td>" for c in cells) + f"<td>{link_html}</td></tr>")
    return "<table border='1' cellspacing='0' cellpadding='6'>" f"<tr>{head}</tr>" + "".join(rows) + "</table>"


def wrap_document(
    content_html: str,
    *,
    heading: str | None = None,
    skills: Sequence[str] = (),
) -> str:
    parts: list[str] = ["<div>"]
    if heading:
        parts.append(f"<h2>{utils.esc(heading)}</h2>")
    if skills:
        parts.append(f"<p>Skills: {utils.esc(', '.join(skills))}</p>")
    parts.append(content_html)
    parts.append("</div>")
    return "\n".join(parts)
