from __future__ import annotations

import json
import math
from datetime import timedelta
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .utils import getenv_str, split_csv, truthy


# -----------------------------
# Exceptions
# -----------------------------
class ConfigError(ValueError):
    """Raised when provided kwargs/env cannot form a valid Settings."""


# -----------------------------
# Defaults
# -----------------------------
DEFAULT_VOCABULARY: tuple[str, ...] = (
    "Java", "Python", "JavaScript", "React", "Node", "SQL", "C++", "C#", "AWS",
    "Azure", "GCP", "HTML", "CSS", "Docker", "Kubernetes", "Linux", "Git",
    "Spring", "Django", "Flask", "MongoDB", "PostgreSQL", "MySQL", "NoSQL",
    "Machine Learning", "AI", "Data Science", "Deep Learning", "TensorFlow",
    "PyTorch", "PowerBI", "Tableau", "DevOps", "Jenkins", "CI/CD", "Microservices",
    "Angular", "Vue", "TypeScript", "PHP", "Ruby", "Go", "Swift", "Objective-C",
    "EC", "EEE",
)

DEFAULT_SOURCES: tuple[str, ...] = ("arbeitnow", "themuse", "remoteok", "remotive")

DEFAULT_RECENCY_DAYS = 7.0
DEFAULT_MAX_WORKERS = 16
DEFAULT_REQUEST_TIMEOUT = 15.0
DEFAULT_RETRIES = 0


# -----------------------------
# Model
# -----------------------------
@dataclass(frozen=True)
class Settings:
    """
    Canonical configuration for one skill_scout pipeline run.

    The vocabulary is an explicit value (not a module constant) so callers and
    tests can supply their own. Sources are kind names resolved through the
    in-process source registry.
    """

    vocabulary: tuple[str, ...] = DEFAULT_VOCABULARY
    sources: tuple[str, ...] = DEFAULT_SOURCES
    source_params: dict[str, dict[str, Any]] = field(default_factory=dict)

    recency_days: float = DEFAULT_RECENCY_DAYS
    max_workers: int = DEFAULT_MAX_WORKERS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    retries: int = DEFAULT_RETRIES
    skip_network: bool = False

    def params_for(self, kind: str) -> dict[str, Any]:
        return dict(self.source_params.get(kind) or {})

    # ------------- constructors -------------
    @classmethod
    def from_env_and_kwargs(cls, kwargs: Mapping[str, Any] | None = None) -> Settings:
        """
        Build Settings from kwargs, falling back to environment, then defaults.

        Expected kwargs (all optional):

            vocabulary: list[str]            # wins over vocabulary_path
            vocabulary_path: str             # JSON file holding a list of terms
            sources: list[str] | "a,b"       # source kinds to query
            source_params: {kind: {...}}     # per-source overrides (url, params)
            recency_days: float = 7
            max_workers: int = 16
            request_timeout: float = 15.0
            retries: int = 0                 # urllib3 retries on 429/5xx per request
            skip_network: bool = false

        Environment fallbacks:
            SKILL_SCOUT_VOCABULARY_PATH, SKILL_SCOUT_SOURCES,
            SKILL_SCOUT_RECENCY_DAYS, SKILL_SCOUT_MAX_WORKERS,
            SKILL_SCOUT_TIMEOUT, SKILL_SCOUT_RETRIES, SKILL_SCOUT_SKIP_NETWORK
        """
        kw = dict(kwargs or {})

        # Vocabulary: explicit list > file > built-in
        if kw.get("vocabulary") is not None:
            vocabulary = _coerce_vocabulary(kw.get("vocabulary"), origin="kwargs")
        else:
            path = kw.get("vocabulary_path") or getenv_str("SKILL_SCOUT_VOCABULARY_PATH")
            vocabulary = load_vocabulary(str(path)) if path else DEFAULT_VOCABULARY

        raw_sources = kw.get("sources")
        if raw_sources is None:
            raw_sources = getenv_str("SKILL_SCOUT_SOURCES")
        sources = tuple(s.lower() for s in split_csv(raw_sources)) if raw_sources is not None else DEFAULT_SOURCES

        source_params = kw.get("source_params") or {}
        if not isinstance(source_params, Mapping):
            raise ConfigError("'source_params' must be an object of {kind: {...}}.")
        for k, v in source_params.items():
            if v is not None and not isinstance(v, Mapping):
                raise ConfigError(f"source_params[{k!r}] must be an object (got {type(v).__name__}).")

        settings = cls(
            vocabulary=vocabulary,
            sources=sources,
            source_params={str(k).lower(): dict(v or {}) for k, v in source_params.items()},
            recency_days=_number(kw, "recency_days", "SKILL_SCOUT_RECENCY_DAYS", DEFAULT_RECENCY_DAYS, float),
            max_workers=_number(kw, "max_workers", "SKILL_SCOUT_MAX_WORKERS", DEFAULT_MAX_WORKERS, int),
            request_timeout=_number(kw, "request_timeout", "SKILL_SCOUT_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float),
            retries=_number(kw, "retries", "SKILL_SCOUT_RETRIES", DEFAULT_RETRIES, int),
            skip_network=truthy(
                kw["skip_network"] if "skip_network" in kw else getenv_str("SKILL_SCOUT_SKIP_NETWORK")
            ),
        )
        _validate_settings(settings)
        return settings


# -----------------------------
# Helpers
# -----------------------------
def load_vocabulary(path: str) -> tuple[str, ...]:
    """Read a JSON list of skill terms from `path`."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"vocabulary file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"vocabulary file is invalid JSON: {path}") from e
    return _coerce_vocabulary(data, origin=path)


def _coerce_vocabulary(value: Any, *, origin: str) -> tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigError(f"Vocabulary from {origin} must be a list of strings.")
    out: list[str] = []
    for i, term in enumerate(value):
        if not isinstance(term, str) or not term.strip():
            raise ConfigError(f"Vocabulary item[{i}] from {origin} must be a non-empty string.")
        out.append(term.strip())
    return tuple(out)


def _number(kw: Mapping[str, Any], key: str, env: str, default: Any, cast: type) -> Any:
    raw = kw.get(key)
    if raw is None or raw == "":
        raw = getenv_str(env)
    if raw is None:
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError, OverflowError) as e:
        raise ConfigError(f"'{key}' must be a number (got {raw!r}).") from e


def _validate_settings(s: Settings) -> None:
    if not s.vocabulary:
        raise ConfigError("Vocabulary cannot be empty.")
    if not s.sources:
        raise ConfigError("At least one source is required.")
    # NaN slips past "<= 0" comparisons; inf overflows timedelta
    if not math.isfinite(s.recency_days) or s.recency_days <= 0:
        raise ConfigError("'recency_days' must be a finite number > 0.")
    if s.recency_days > timedelta.max.days:
        raise ConfigError(f"'recency_days' must be <= {timedelta.max.days}.")
    if s.max_workers <= 0:
        raise ConfigError("'max_workers' must be >= 1.")
    if not math.isfinite(s.request_timeout) or s.request_timeout <= 0:
        raise ConfigError("'request_timeout' must be a finite number > 0.")
    if s.retries < 0:
        raise ConfigError("'retries' must be >= 0.")
