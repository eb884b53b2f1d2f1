from __future__ import annotations

from pathlib import Path
from typing import Any

from .lib.config import ConfigError, Settings
from .lib.engine import run_once as _run_engine
from .lib.logging_bridge import activity as log_activity
from .lib.logging_bridge import error as log_error


def read_text(text_path: str) -> str:
    """Read an already-decoded plain-text resume ('-' is not handled here)."""
    try:
        return Path(text_path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise ConfigError(f"cannot read resume text: {text_path} ({e})") from e


def run(**kwargs: Any) -> dict[str, Any]:
    """
    Entry point for the 'skill_scout' module.

    Accepts kwargs (from the CLI or another caller):
      text: str                      # resume text, OR
      text_path: str                 # path to a UTF-8 text file
      vocabulary / vocabulary_path   # see Settings.from_env_and_kwargs
      sources, source_params, recency_days, max_workers,
      request_timeout, skip_network

    Returns:
      {"skills": [...], "jobs": [...]} on success, or
      {"error": "Failed to process resume", "details": "..."}.
    """
    text = kwargs.pop("text", None)
    text_path = kwargs.pop("text_path", None)

    try:
        if text is None:
            if not text_path:
                raise ConfigError("Provide 'text' or 'text_path'.")
            text = read_text(str(text_path))
        settings = Settings.from_env_and_kwargs(kwargs)
    except ConfigError as e:
        log_error({"component": "skill_scout.main", "op": "settings", "error": repr(e)})
        return {"error": "Failed to process resume", "details": str(e)}

    log_activity({
        "component": "skill_scout.main",
        "op": "start",
        "sources": list(settings.sources),
        "vocabulary_size": len(settings.vocabulary),
        "recency_days": settings.recency_days,
        "skip_network": settings.skip_network,
    })

    return _run_engine(settings, str(text)).to_dict()
