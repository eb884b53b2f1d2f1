# tests/test_engine.py
import json
import threading
import time
from datetime import datetime, timedelta, timezone
from unittest import mock

import pytest

from modules.skill_scout.lib import config as ss_config
from modules.skill_scout.lib import engine
from modules.skill_scout.lib.models import JobPosting
from modules.skill_scout.lib.sources.base import SourceAdapter, SourceError
from modules.skill_scout.lib.sources.stub import StubSource


def _posting(url, skill, *, title="Engineer", date="2025-01-07T00:00:00Z"):
    return JobPosting(title=title, company="Acme", location="Remote", url=url, date=date, skill=skill)


class _ListSource(SourceAdapter):
    """Returns canned postings per skill, after an optional per-skill delay."""

    def __init__(self, kind, by_skill, *, delays=None):
        super().__init__(client=object(), name=kind)
        self.kind = kind
        self._by_skill = by_skill
        self._delays = delays or {}

    def fetch(self, skill):
        time.sleep(self._delays.get(skill, 0))
        return list(self._by_skill.get(skill, []))

    def query(self, skill):  # pragma: no cover
        return []

    def title_of(self, item):  # pragma: no cover
        return None

    def posted_at(self, item):  # pragma: no cover
        return None

    def to_posting(self, item, skill):  # pragma: no cover
        return None


class _AlwaysFails(_ListSource):
    def __init__(self, kind="broken", exc=None):
        super().__init__(kind, {})
        self._exc = exc or SourceError("upstream exploded")
        self.calls = 0
        self._lock = threading.Lock()

    def fetch(self, skill):
        with self._lock:
            self.calls += 1
        raise self._exc


def _read_jsonl(log_dir, prefix):
    rows = []
    for p in sorted(log_dir.glob(f"{prefix}-*.jsonl")):
        rows.extend(json.loads(line) for line in p.read_text(encoding="utf-8").splitlines() if line.strip())
    return rows


# ----------------------------------------------------------------------
# 1. aggregate: failure isolation and settle-all
# ----------------------------------------------------------------------
def test_failing_source_does_not_affect_others():
    good = _ListSource("good", {"Python": [_posting("u1", "Python")], "AWS": [_posting("u2", "AWS")]})
    bad = _AlwaysFails()

    postings, outcomes = engine.aggregate(["Python", "AWS"], [good, bad], max_workers=4)

    assert [p.url for p in postings] == ["u1", "u2"]
    assert bad.calls == 2  # every pair is attempted
    assert [(o.source, o.skill, o.ok) for o in outcomes] == [
        ("good", "Python", True),
        ("broken", "Python", False),
        ("good", "AWS", True),
        ("broken", "AWS", False),
    ]
    assert "upstream exploded" in outcomes[1].error


def test_all_sources_failing_yields_empty_postings():
    postings, outcomes = engine.aggregate(
        ["Python"], [_AlwaysFails("a"), _AlwaysFails("b", exc=TimeoutError("slow"))], max_workers=2
    )
    assert postings == []
    assert len(outcomes) == 2 and not any(o.ok for o in outcomes)


def test_non_source_exceptions_are_isolated_too():
    weird = _AlwaysFails("weird", exc=KeyError("missing field"))
    good = _ListSource("good", {"Go": [_posting("g", "Go")]})
    postings, _ = engine.aggregate(["Go"], [weird, good])
    assert [p.url for p in postings] == ["g"]


def test_no_skills_means_no_calls():
    bad = _AlwaysFails()
    assert engine.aggregate([], [bad]) == ([], [])
    assert bad.calls == 0


def test_single_worker_still_settles_everything():
    good = _ListSource("good", {s: [_posting(f"u-{s}", s)] for s in ("A", "B", "C")})
    postings, outcomes = engine.aggregate(["A", "B", "C"], [good, _AlwaysFails()], max_workers=1)
    assert [p.url for p in postings] == ["u-A", "u-B", "u-C"]
    assert len(outcomes) == 6


def test_last_wins_order_ignores_completion_order():
    # The first skill finishes LAST; flattening must still follow submission order
    shared = "https://jobs.example/shared"
    src = _ListSource(
        "src",
        {"Python": [_posting(shared, "Python")], "AWS": [_posting(shared, "AWS")]},
        delays={"Python": 0.05, "AWS": 0.0},
    )
    postings, _ = engine.aggregate(["Python", "AWS"], [src], max_workers=2)
    assert [p.skill for p in postings] == ["Python", "AWS"]


def test_failures_are_logged_as_error_records(log_dir):
    engine.aggregate(["Python"], [_AlwaysFails("broken")])
    rows = _read_jsonl(log_dir, "error-test")
    assert len(rows) == 1
    assert rows[0]["op"] == "source_fetch"
    assert rows[0]["source"] == "broken"
    assert rows[0]["skill"] == "Python"


# ----------------------------------------------------------------------
# 2. run_once end to end (stub sources, no network)
# ----------------------------------------------------------------------
def _stub_settings(make_settings, *, items_a, items_b=None, **kw):
    source_params = {"src_a": {"items": items_a}}
    sources = ["src_a"]
    if items_b is not None:
        source_params["src_b"] = {"items": items_b}
        sources.append("src_b")
    return make_settings(
        vocabulary=["Python", "AWS", "Rust"],
        sources=sources,
        source_params=source_params,
        **kw,
    )


def test_run_once_end_to_end(make_settings, fake_client, frozen_utc):
    now = datetime(2025, 1, 8, tzinfo=timezone.utc)
    today = now.isoformat()
    ten_days_ago = (now - timedelta(days=10)).isoformat()
    settings = _stub_settings(
        make_settings,
        items_a=[
            {"title": "Python Developer", "url": "https://jobs.example/1", "date": today},
            {"title": "Python Developer", "url": "https://jobs.example/old", "date": ten_days_ago},
        ],
        items_b=[
            {"title": "Backend engineer", "tags": ["aws", "python"], "url": "https://jobs.example/1", "date": today},
        ],
    )

    result = engine.run_once(
        settings,
        "Experienced Python and AWS developer",
        get_source=lambda kind: StubSource,
        client=fake_client,
    )

    assert result.ok
    assert result.skills == ["Python", "AWS"]
    assert len(result.jobs) == 1
    job = result.jobs[0]
    assert job.url == "https://jobs.example/1"
    # Last submitted pair wins: skill AWS, source src_b
    assert job.skill == "AWS"
    assert job.title == "Backend engineer"
    assert result.failures == []
    assert fake_client.closed is False  # caller-owned client stays open


def test_run_once_ranks_by_date(make_settings, fake_client, frozen_utc):
    settings = _stub_settings(
        make_settings,
        items_a=[
            {"title": "Python A", "url": "a", "date": "2025-01-03T00:00:00Z"},
            {"title": "Python B", "url": "b", "date": "2025-01-07T00:00:00Z"},
            {"title": "Python C", "url": "c", "date": "2025-01-05T00:00:00Z"},
        ],
    )
    result = engine.run_once(settings, "python", get_source=lambda kind: StubSource, client=fake_client)
    assert [j.url for j in result.jobs] == ["b", "c", "a"]


def test_run_once_no_skills_returns_empty(make_settings, fake_client):
    settings = _stub_settings(make_settings, items_a=[{"title": "Python", "url": "x", "date": "2025-01-07"}])
    result = engine.run_once(settings, "I enjoy gardening", get_source=lambda kind: StubSource, client=fake_client)
    assert result.ok
    assert result.to_dict() == {"skills": [], "jobs": []}


def test_run_once_source_failure_is_not_fatal(make_settings, fake_client, frozen_utc, log_dir):
    settings = make_settings(
        vocabulary=["Python"],
        sources=["good", "bad"],
        source_params={
            "good": {"items": [{"title": "Python dev", "url": "ok", "date": "2025-01-07T00:00:00Z"}]},
            "bad": {"error": "HTTP 503"},
        },
    )
    result = engine.run_once(settings, "Python", get_source=lambda kind: StubSource, client=fake_client)

    assert result.ok
    assert [j.url for j in result.jobs] == ["ok"]
    assert [(f.source, f.skill) for f in result.failures] == [("bad", "Python")]
    assert "error" not in result.to_dict()

    summary = [r for r in _read_jsonl(log_dir, "activity-test") if r.get("op") == "summary"]
    assert len(summary) == 1
    assert summary[0]["calls"] == 2
    assert summary[0]["unique_jobs"] == 1
    assert summary[0]["failed_by_source"] == {"bad": 1}
    assert summary[0]["found_by_source"] == {"good": 1}


def test_run_once_unknown_source_kind_fails_whole_run(make_settings, fake_client, log_dir):
    settings = make_settings(vocabulary=["Python"], sources=["nope"])
    result = engine.run_once(settings, "Python", client=fake_client)

    assert not result.ok
    assert result.to_dict()["error"] == "Failed to process resume"
    assert "nope" in result.to_dict()["details"]
    assert any(r.get("op") == "pipeline" for r in _read_jsonl(log_dir, "error-test"))


def test_run_once_malformed_vocabulary_fails_whole_run(fake_client):
    settings = ss_config.Settings(vocabulary=("Python", ""), sources=("stub",))
    result = engine.run_once(settings, "Python", client=fake_client)
    assert not result.ok
    assert result.jobs == [] and result.skills == []


def test_skip_network_never_builds_sources(make_settings, fake_client):
    settings = make_settings(vocabulary=["Python"], sources=["stub"], skip_network=True)
    get_source = mock.Mock(side_effect=AssertionError("should not be called"))

    result = engine.run_once(settings, "Python", get_source=get_source, client=fake_client)

    assert result.ok
    assert result.skills == ["Python"]
    assert result.jobs == []
    get_source.assert_not_called()


def test_run_once_closes_the_client_it_creates(make_settings):
    settings = make_settings(vocabulary=["Python"], sources=["stub"], skip_network=True)
    with mock.patch.object(engine, "HttpClient") as client_cls:
        engine.run_once(settings, "Python")
    client_cls.return_value.close.assert_called_once()


@pytest.mark.parametrize("workers", [1, 3, 16])
def test_result_is_independent_of_pool_size(make_settings, fake_client, frozen_utc, workers):
    items = [
        {"title": "Python / AWS", "url": f"https://jobs.example/{i}", "date": f"2025-01-0{i + 2}T00:00:00Z"}
        for i in range(5)
    ]
    settings = make_settings(
        vocabulary=["Python", "AWS"],
        sources=["s1", "s2"],
        source_params={"s1": {"items": items}, "s2": {"items": items[::-1]}},
        max_workers=workers,
    )
    result = engine.run_once(settings, "Python AWS", get_source=lambda kind: StubSource, client=fake_client)
    assert [j.url for j in result.jobs] == [f"https://jobs.example/{i}" for i in (4, 3, 2, 1, 0)]
    assert all(j.skill == "AWS" for j in result.jobs)


def test_outcomes_carry_the_configured_source_name(make_settings, fake_client):
    settings = make_settings(
        vocabulary=["Python"],
        sources=["first", "second"],
        source_params={"first": {"error": "down"}, "second": {"error": "also down"}},
    )
    result = engine.run_once(settings, "Python", get_source=lambda kind: StubSource, client=fake_client)
    assert [f.source for f in result.failures] == ["first", "second"]


def test_run_once_passes_retries_to_its_client(make_settings):
    settings = make_settings(vocabulary=["Python"], sources=["stub"], skip_network=True, retries=2, max_workers=4)
    with mock.patch.object(engine, "HttpClient") as client_cls:
        engine.run_once(settings, "Python")
    client_cls.assert_called_once_with(timeout=15.0, pool_size=4, retries=2)
