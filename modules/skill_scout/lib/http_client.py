# skill_scout/http_client.py
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

LOG = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "SkillScout/0.1 (+https://example.invalid)"


class HttpClient:
    """
    Shared HTTP client for job-board sources.

    One session per pipeline run; the connection pool is sized to the worker
    count so concurrent source calls don't queue on connections. Retries are
    off by default: a failed call becomes a source failure for this run.
    """

    def __init__(
        self,
        timeout: float = 15.0,
        user_agent: str = DEFAULT_USER_AGENT,
        *,
        pool_size: int = 16,
        retries: int = 0,
    ):
        self.timeout = float(timeout)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": user_agent, "Accept": "application/json"})

        retry = Retry(
            total=retries,
            backoff_factor=0.5,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset(["GET"]),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry, pool_connections=4, pool_maxsize=max(1, pool_size))
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def get_json(
        self,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> Any:
        """GET and parse JSON; non-2xx raises requests.HTTPError."""
        resp = self.session.get(url, params=params, headers=headers, timeout=timeout or self.timeout, **kwargs)
        resp.raise_for_status()
        try:
            return resp.json()
        except ValueError as e:
            # Some boards serve JSON as text/html; try the raw body once more.
            try:
                return json.loads(resp.text)
            except ValueError:
                preview = resp.text[:200].replace("\n", " ")
                raise ValueError(f"JSON decode failed for {url!r}; body starts: {preview!r}") from e

    def close(self) -> None:
        try:
            self.session.close()
        except Exception:
            LOG.debug("HttpClient.close() swallow", exc_info=True)
