from __future__ import annotations

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from typing import Any

DEFAULT_TITLE = "No title"
DEFAULT_COMPANY = "Unknown"
DEFAULT_LOCATION = "Remote"


@dataclass(frozen=True)
class JobPosting:
    """
    One normalized job listing produced by a single source call.
    `url` is the identity key: two postings with the same url are the same job,
    even if the skill tag or title casing differ.
    """

    title: str
    company: str
    location: str
    url: str
    date: str | None
    skill: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SourceOutcome:
    """
    Settled result of one (skill, source) call.
    - success: items holds the filtered postings, error is None.
    - failure: items is empty, error carries a short reason.
    """

    source: str
    skill: str
    items: tuple[JobPosting, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, source: str, skill: str, items: Iterable[JobPosting]) -> SourceOutcome:
        return cls(source=source, skill=skill, items=tuple(items))

    @classmethod
    def failure(cls, source: str, skill: str, reason: str) -> SourceOutcome:
        return cls(source=source, skill=skill, error=reason or "unknown error")


@dataclass
class PipelineResult:
    """
    What the caller gets back: either skills + ranked jobs, or a single error.
    `failures` is diagnostic only and never serialized.
    """

    skills: list[str] = field(default_factory=list)
    jobs: list[JobPosting] = field(default_factory=list)
    failures: list[SourceOutcome] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, message: str) -> PipelineResult:
        return cls(error=message)

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            return {"error": "Failed to process resume", "details": self.error}
        return {
            "skills": list(self.skills),
            "jobs": [j.to_dict() for j in self.jobs],
        }
