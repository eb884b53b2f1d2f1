# tests/conftest.py
import os
from typing import Any

import pytest
from freezegun import freeze_time

from modules.skill_scout.lib import config as ss_config

# Every time-sensitive test runs "now" at this instant.
FROZEN_NOW = "2025-01-08T00:00:00Z"


# ---------------------------------------------------------------------
# Live tests are opt-in: use --live or RUN_LIVE_TESTS=1
# ---------------------------------------------------------------------
def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--live",
        action="store_true",
        default=False,
        help="Run tests marked as 'live' (network calls to real job boards).",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "live: marks tests that perform live network calls (skipped by default).",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    run_live = config.getoption("--live") or os.getenv("RUN_LIVE_TESTS") == "1"
    if run_live:
        return
    skip_live = pytest.mark.skip(reason="live tests disabled (use --live or RUN_LIVE_TESTS=1)")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


# ---------------------------------------------------------------------
# Test-wide env defaults (autouse, function-scoped)
# ---------------------------------------------------------------------
@pytest.fixture(autouse=True)
def _env_defaults(monkeypatch, tmp_path):
    # Write logs to a throwaway dir so real logs stay clean (per test)
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("ACTIVITY_LOG_PREFIX", "activity-test")
    monkeypatch.setenv("ERROR_LOG_PREFIX", "error-test")
    monkeypatch.delenv("LOG_DISABLE", raising=False)

    # Settings must come from the test, not the developer's shell
    for name in (
        "SKILL_SCOUT_VOCABULARY_PATH",
        "SKILL_SCOUT_SOURCES",
        "SKILL_SCOUT_RECENCY_DAYS",
        "SKILL_SCOUT_MAX_WORKERS",
        "SKILL_SCOUT_TIMEOUT",
        "SKILL_SCOUT_RETRIES",
        "SKILL_SCOUT_SKIP_NETWORK",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def log_dir(tmp_path):
    return tmp_path / "logs"


@pytest.fixture
def frozen_utc():
    with freeze_time(FROZEN_NOW):
        yield


# ---------------------------------------------------------------------
# HTTP double
# ---------------------------------------------------------------------
class FakeClient:
    """
    Stands in for HttpClient. `responses` maps URL -> payload, an exception
    instance (raised), or a callable taking the query params.
    """

    def __init__(self, responses: dict[str, Any] | None = None):
        self.responses: dict[str, Any] = dict(responses or {})
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def get_json(self, url, *, params=None, headers=None, timeout=None, **kwargs):
        self.calls.append({"url": url, "params": dict(params or {}), "headers": dict(headers or {})})
        resp = self.responses[url]
        if isinstance(resp, Exception):
            raise resp
        if callable(resp):
            return resp(dict(params or {}))
        return resp

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def make_settings():
    """Settings factory going through the real validation path."""

    def _make(**kwargs):
        return ss_config.Settings.from_env_and_kwargs(kwargs)

    return _make
