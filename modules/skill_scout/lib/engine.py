"""
Engine for turning resume text into a ranked list of job postings.

Features:
  - Skill extraction against the configured vocabulary
  - Parallel fan-out: one call per (skill, source) pair on a bounded thread pool
  - Settle-all fan-in: a failing source is logged and skipped, never fatal
  - Deterministic last-wins URL dedupe (submission order, not completion order)
  - Dependency injection for testability (`get_source`, `client`)
  - Structured logging via `logging_bridge`
"""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from . import logging_bridge
from .config import Settings
from .dedupe import dedupe_by_url
from .http_client import HttpClient
from .matcher import SkillMatcher
from .models import JobPosting, PipelineResult, SourceOutcome
from .ranking import rank_by_date
from .sources.base import SourceAdapter


# =============================================================================
# DEFAULT SOURCE LOOKUP (PRODUCTION)
# =============================================================================
def _default_get_source(kind: str) -> type[SourceAdapter]:
    """Resolve an adapter class from the registry (overridable in tests)."""
    from .sources.registry import get as get_source_class

    return get_source_class(kind)


def build_sources(
    settings: Settings,
    client: HttpClient,
    get_source: Callable[[str], type[SourceAdapter]] | None = None,
) -> list[SourceAdapter]:
    """Instantiate one adapter per configured source kind, in config order."""
    get_source_func = get_source or _default_get_source
    out: list[SourceAdapter] = []
    for kind in settings.sources:
        cls = get_source_func(kind)
        out.append(
            cls(client, name=kind, recency_days=settings.recency_days, params=settings.params_for(kind))
        )
    return out


# =============================================================================
# FAN-OUT / FAN-IN
# =============================================================================
def aggregate(
    skills: Sequence[str],
    sources: Sequence[SourceAdapter],
    *,
    max_workers: int = 16,
) -> tuple[list[JobPosting], list[SourceOutcome]]:
    """
    Call `source.fetch(skill)` for every (skill, source) pair concurrently and
    wait for ALL of them to settle.

    Returns:
        (postings, outcomes)
        postings: successes flattened in submission order (skill, then source)
        outcomes: one SourceOutcome per pair, same order
    """
    pairs = [(skill, src) for skill in skills for src in sources]
    if not pairs:
        return [], []

    outcomes: list[SourceOutcome | None] = [None] * len(pairs)

    with ThreadPoolExecutor(max_workers=min(len(pairs), max(1, max_workers))) as pool:
        futures = {pool.submit(src.fetch, skill): i for i, (skill, src) in enumerate(pairs)}
        for fut in as_completed(futures):
            i = futures[fut]
            skill, src = pairs[i]
            try:
                outcomes[i] = SourceOutcome.success(src.name, skill, fut.result())
            except Exception as e:
                outcomes[i] = SourceOutcome.failure(src.name, skill, repr(e))
                logging_bridge.error({
                    "component": "skill_scout.engine",
                    "op": "source_fetch",
                    "source": src.name,
                    "skill": skill,
                    "error": repr(e),
                })

    settled = [o for o in outcomes if o is not None]
    postings = [p for o in settled if o.ok for p in o.items]
    return postings, settled


# =============================================================================
# MAIN ORCHESTRATOR
# =============================================================================
def run_once(
    settings: Settings,
    text: str,
    *,
    get_source: Callable[[str], type[SourceAdapter]] | None = None,
    client: HttpClient | None = None,
) -> PipelineResult:
    """
    Run one complete extraction + aggregation cycle.

    Args:
        settings: vocabulary, sources, recency window, pool size.
        text: plain resume text (already decoded by the caller).
        get_source: optional override to inject adapter classes (for testing).
        client: optional shared HttpClient; one is created (and closed) if omitted.

    Returns:
        PipelineResult with skills + ranked jobs, or a single error message.
        Source failures never surface here except as diagnostics.
    """
    start_ns = time.perf_counter_ns()
    own_client = client is None
    http = client or HttpClient(
        timeout=settings.request_timeout,
        pool_size=settings.max_workers,
        retries=settings.retries,
    )

    try:
        skills = SkillMatcher(settings.vocabulary).match(text)
        logging_bridge.activity({
            "component": "skill_scout.engine",
            "op": "skills",
            "skills": list(skills),
            "text_chars": len(text or ""),
        })

        if settings.skip_network:
            logging_bridge.activity({
                "component": "skill_scout.engine",
                "op": "skipped_sources",
                "reason": "skip_network",
                "sources": list(settings.sources),
            })
            sources: list[SourceAdapter] = []
        else:
            sources = build_sources(settings, http, get_source)

        t0 = time.perf_counter_ns()
        postings, outcomes = aggregate(skills, sources, max_workers=settings.max_workers)
        fanout_us = int((time.perf_counter_ns() - t0) // 1000)

        jobs = rank_by_date(dedupe_by_url(postings))
    except Exception as e:
        logging_bridge.error({
            "component": "skill_scout.engine",
            "op": "pipeline",
            "error": repr(e),
        })
        return PipelineResult.failed(str(e) or type(e).__name__)
    finally:
        if own_client:
            http.close()

    # -------------------------------------------------------------------------
    # SUMMARY LOG (always emitted on success)
    # -------------------------------------------------------------------------
    found_by_source: dict[str, int] = {}
    failed_by_source: dict[str, int] = {}
    for o in outcomes:
        if o.ok:
            found_by_source[o.source] = found_by_source.get(o.source, 0) + len(o.items)
        else:
            failed_by_source[o.source] = failed_by_source.get(o.source, 0) + 1
    failures = [o for o in outcomes if not o.ok]

    logging_bridge.activity({
        "component": "skill_scout.engine",
        "op": "summary",
        "skills": list(skills),
        "calls": len(outcomes),
        "found_by_source": found_by_source,
        "failed_by_source": failed_by_source,
        "pre_dedupe": len(postings),
        "unique_jobs": len(jobs),
        "fanout_us": fanout_us,
        "total_us": int((time.perf_counter_ns() - start_ns) // 1000),
    })

    return PipelineResult(skills=list(skills), jobs=jobs, failures=failures)
