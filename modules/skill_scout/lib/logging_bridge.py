from __future__ import annotations

import copy
import logging
from typing import Any

from service import logging_utils as _writer

# Keys that should be redacted from structured logs
_REDACT_KEYS = {
    "password",
    "token",
    "apikey",
    "api_key",
    "secret",
    "authorization",
    "auth",
    "bearer",
    "cookie",
}


def _redact_record(record: dict[str, Any]) -> dict[str, Any]:
    """
    Shallow-copy record and redact secret-like fields at top level.
    The JSONL writer redacts nested structures again.
    """
    redacted = copy.copy(record)
    for k in list(redacted.keys()):
        lk = str(k).lower()
        if lk in _REDACT_KEYS or lk.endswith("_secret") or lk.endswith("_token"):
            redacted[k] = "***REDACTED***"
    return redacted


def activity(record: dict[str, Any]) -> None:
    """
    Append an activity record to the JSONL activity log.
    Falls back to stdlib logging if the file write fails.
    """
    payload = _redact_record(record)
    try:
        _writer.write_activity_log(payload)
        return
    except Exception:
        logging.getLogger("skill_scout").debug("activity log write failed", exc_info=True)
    logging.getLogger("skill_scout.activity").info(payload)


def error(record: dict[str, Any]) -> None:
    """
    Append an error record to the JSONL error log.
    Falls back to stdlib logging if the file write fails.
    """
    payload = _redact_record(record)
    try:
        _writer.write_error_log(payload)
        return
    except Exception:
        logging.getLogger("skill_scout").debug("error log write failed", exc_info=True)
    logging.getLogger("skill_scout.error").error(payload)
