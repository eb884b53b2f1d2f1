# service/logging_utils.py
from __future__ import annotations

import contextlib
import datetime as _dt
import json
import os
import socket
from collections.abc import Iterable
from typing import Any

# ---- Configuration -----------------------------------------------------------
# Read on every write so tests (and long-lived callers) can redirect logs via env:
#   LOG_DIR                  base directory            (default: ./local/logs)
#   ACTIVITY_LOG_PREFIX      activity file prefix      (default: activity)
#   ERROR_LOG_PREFIX         error file prefix         (default: error)
#   ACTIVITY_LOG_MAX_BYTES   size rotation, <=0 = off  (default: 0)
#   LOG_DISABLE              "1" drops every record

_DEFAULT_LOG_DIR = os.path.join("local", "logs")

_DEFAULT_REDACT_KEYS = {
    "password",
    "token",
    "apikey",
    "api_key",
    "secret",
    "authorization",
    "cookie",
    "set-cookie",
}

_REDACTED = "***REDACTED***"

# Host + process metadata (fixed per-process)
_HOSTNAME = socket.gethostname()
_PID = os.getpid()


# ---- Public API --------------------------------------------------------------


def write_activity_log(record: dict[str, Any]) -> None:
    """
    Append one structured activity record as a JSON line.
    Never mutates `record`; may raise on unrecoverable I/O or serialization errors.
    """
    _write_jsonl(_path_for_today(os.getenv("ACTIVITY_LOG_PREFIX", "activity")), record)


def write_error_log(record: dict[str, Any]) -> None:
    """Append one structured error record, parallel to the activity log."""
    _write_jsonl(_path_for_today(os.getenv("ERROR_LOG_PREFIX", "error")), record)


def get_activity_log_path() -> str:
    """Return the current day's activity log path (<prefix>-YYYY-MM-DD.jsonl)."""
    return _path_for_today(os.getenv("ACTIVITY_LOG_PREFIX", "activity"))


def redact(record: dict[str, Any], keys: set[str] | None = None) -> dict[str, Any]:
    """
    Redacted deep copy of `record`: values whose KEY contains any of `keys`
    (case-insensitive substring) are replaced.
    """
    return _redact_deep(record, keys or _DEFAULT_REDACT_KEYS)


# ---- Internal helpers --------------------------------------------------------


def _disabled() -> bool:
    return os.getenv("LOG_DISABLE", "").strip().lower() in {"1", "true", "yes", "on"}


def _path_for_today(prefix: str) -> str:
    log_dir = os.getenv("LOG_DIR") or _DEFAULT_LOG_DIR
    return os.path.join(log_dir, f"{prefix}-{_dt.date.today().isoformat()}.jsonl")


def _max_bytes() -> int:
    try:
        return int(os.getenv("ACTIVITY_LOG_MAX_BYTES", "0"))
    except ValueError:
        return 0


def _rotate_if_needed(path: str) -> None:
    limit = _max_bytes()
    if limit <= 0:
        return
    try:
        if os.path.getsize(path) < limit:
            return
    except FileNotFoundError:
        return
    ts = _dt.datetime.now().strftime("%Y%m%d-%H%M%S")
    with contextlib.suppress(FileNotFoundError):
        os.replace(path, f"{path}.{ts}")


def _key_matches(name: str, patterns: Iterable[str]) -> bool:
    n = name.lower()
    return any(pat in n for pat in patterns)


def _scrub_bearer(value: str) -> str:
    if "bearer " not in value.lower():
        return value
    scheme, _, _rest = value.partition(" ")
    return f"{scheme} {_REDACTED}"


def _redact_deep(value: Any, patterns: Iterable[str]) -> Any:
    if isinstance(value, dict):
        return {
            k: (_REDACTED if isinstance(k, str) and _key_matches(k, patterns) else _redact_deep(v, patterns))
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return type(value)(_redact_deep(v, patterns) for v in value)
    if isinstance(value, str):
        return _scrub_bearer(value)
    return value


def _write_jsonl(path: str, record: dict[str, Any]) -> None:
    """
    Core writer: redact, stamp ts/host/pid, rotate by size, then append a
    single line with O_APPEND (atomic per write on POSIX). Retries once on OSError.
    """
    if _disabled():
        return

    payload = dict(_redact_deep(record, _DEFAULT_REDACT_KEYS))
    payload.setdefault("ts", _dt.datetime.now(_dt.timezone.utc).isoformat())
    payload["_meta"] = {"host": _HOSTNAME, "pid": _PID}

    # Serialize before touching the file; default=str covers tuples of dataclasses etc.
    data = (json.dumps(payload, ensure_ascii=False, separators=(",", ":"), default=str) + "\n").encode("utf-8")

    def _append_once() -> None:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        _rotate_if_needed(path)
        fd = os.open(path, os.O_CREAT | os.O_APPEND | os.O_WRONLY, 0o644)
        try:
            os.write(fd, data)
        finally:
            os.close(fd)

    try:
        _append_once()
    except OSError:
        _append_once()
