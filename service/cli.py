# service/cli.py
"""
User-facing command-line entrypoints.

Subcommands
-----------
match PATH [--vocabulary FILE] [--sources a,b] [--days N] [--max-workers N]
           [--timeout S] [--retries N] [--skip-network] [--format json|html] [--kwargs k=v ...]
    - Reads plain resume text (PATH or '-' for stdin)
    - Runs the skill_scout pipeline and prints {skills, jobs} as JSON (or HTML)

skills PATH [--vocabulary FILE]
    - Prints only the skills matched in the text, one per line

list-sources
    - Prints the registered job-board sources

validate-config [--vocabulary FILE] [--kwargs k=v ...]
    - Builds Settings from env + flags and returns nonzero on error
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from modules.skill_scout import main as _skill_scout
from modules.skill_scout.lib import logging_bridge, render
from modules.skill_scout.lib.config import ConfigError, Settings
from modules.skill_scout.lib.engine import run_once
from modules.skill_scout.lib.matcher import SkillMatcher
from modules.skill_scout.lib.sources import registry as _registry

LOG = logging.getLogger("service.cli")


# ----------------------------- Logging setup ---------------------------------
def _ensure_logging() -> None:
    """Initialize a reasonable logging setup if none exists yet."""
    root = logging.getLogger()
    if not root.handlers:
        level = os.getenv("LOG_LEVEL", "INFO").upper()
        logging.basicConfig(
            level=getattr(logging, level, logging.INFO),
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
            stream=sys.stderr,
        )


# -------------------------- Utility / glue code ------------------------------
def _parse_kv_pairs(pairs: Iterable[str]) -> dict[str, Any]:
    """
    Parse key=value strings into a dict.
    - Values that look like JSON (true/false/null/number/object/array) are parsed.
    - Otherwise keep as raw strings.
    """
    out: dict[str, Any] = {}
    for raw in pairs:
        if "=" not in raw:
            raise argparse.ArgumentTypeError(f"--kwargs item must be key=value (got {raw!r})")
        k, v = raw.split("=", 1)
        k = k.strip()
        v = v.strip()
        if not k:
            raise argparse.ArgumentTypeError(f"Invalid key in --kwargs item {raw!r}")
        try:
            out[k] = json.loads(v)
        except ValueError:
            out[k] = v
    return out


def _settings_kwargs(args: argparse.Namespace) -> dict[str, Any]:
    """Merge --kwargs with the dedicated flags (flags win)."""
    kw = _parse_kv_pairs(getattr(args, "kwargs", None) or [])
    if getattr(args, "vocabulary", None):
        kw["vocabulary_path"] = args.vocabulary
    if getattr(args, "sources", None):
        kw["sources"] = args.sources
    if getattr(args, "days", None) is not None:
        kw["recency_days"] = args.days
    if getattr(args, "max_workers", None) is not None:
        kw["max_workers"] = args.max_workers
    if getattr(args, "timeout", None) is not None:
        kw["request_timeout"] = args.timeout
    if getattr(args, "retries", None) is not None:
        kw["retries"] = args.retries
    if getattr(args, "skip_network", False):
        kw["skip_network"] = True
    return kw


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return _skill_scout.read_text(path)


def _print_table(rows: Iterable[tuple[str, str]], headers: tuple[str, str] = ("ID", "DETAILS")) -> None:
    """Very simple two-column table printer."""
    rows = list(rows)
    w0 = max(len(headers[0]), *(len(r[0]) for r in rows)) if rows else len(headers[0])
    w1 = max(len(headers[1]), *(len(r[1]) for r in rows)) if rows else len(headers[1])
    sep = f"+-{'-' * w0}-+-{'-' * w1}-+"
    print(sep)
    print(f"| {headers[0].ljust(w0)} | {headers[1].ljust(w1)} |")
    print(sep)
    for c0, c1 in rows:
        print(f"| {c0.ljust(w0)} | {c1.ljust(w1)} |")
    print(sep)


def _now_iso() -> str:
    return datetime.now().astimezone().isoformat()


# ------------------------------ Subcommands ----------------------------------
def cmd_match(args: argparse.Namespace) -> int:
    start_time = time.monotonic()
    try:
        text = _read_input(args.path)
        settings = Settings.from_env_and_kwargs(_settings_kwargs(args))
    except KeyboardInterrupt:
        return 130
    except (ConfigError, argparse.ArgumentTypeError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    try:
        result = run_once(settings, text)
    except KeyboardInterrupt:
        return 130

    logging_bridge.activity({
        "ts": _now_iso(),
        "event": "cli_match",
        "ok": result.ok,
        "skills": result.skills,
        "jobs": len(result.jobs),
        "source_failures": len(result.failures),
        "duration_ms": int((time.monotonic() - start_time) * 1000),
    })

    if not result.ok:
        print(json.dumps(result.to_dict(), indent=2), file=sys.stderr)
        return 1

    if args.format == "html":
        table = render.build_table(result.jobs)
        print(render.wrap_document(table, heading="Job matches", skills=result.skills))
    else:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


def cmd_skills(args: argparse.Namespace) -> int:
    try:
        text = _read_input(args.path)
        settings = Settings.from_env_and_kwargs(_settings_kwargs(args))
        skills = SkillMatcher(settings.vocabulary).match(text)
    except KeyboardInterrupt:
        return 130
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    for s in skills:
        print(s)
    return 0


def cmd_list_sources(args: argparse.Namespace) -> int:
    rows = [(kind, cls.description or cls.__name__) for kind, cls in sorted(_registry.all_kinds().items())]
    _print_table(rows, headers=("SOURCE", "DETAILS"))
    return 0


def cmd_validate_config(args: argparse.Namespace) -> int:
    try:
        settings = Settings.from_env_and_kwargs(_settings_kwargs(args))
        SkillMatcher(settings.vocabulary)
        for kind in settings.sources:
            _registry.get(kind)
    except KeyboardInterrupt:
        return 130
    except (ConfigError, KeyError, argparse.ArgumentTypeError) as e:
        LOG.debug("Configuration validation failed", exc_info=True)
        print(f"ERROR: configuration invalid: {e}", file=sys.stderr)
        return 1
    print(
        f"OK: {len(settings.vocabulary)} skills, sources={','.join(settings.sources)}, "
        f"recency_days={settings.recency_days:g}, max_workers={settings.max_workers}"
    )
    return 0


# ------------------------------- Argparse ------------------------------------
def _add_settings_flags(sp: argparse.ArgumentParser, *, full: bool) -> None:
    sp.add_argument("--vocabulary", help="JSON file with a list of skill terms.")
    if not full:
        return
    sp.add_argument("--sources", help="Comma-separated source kinds (see list-sources).")
    sp.add_argument("--days", type=float, help="Recency window in days (default 7).")
    sp.add_argument("--max-workers", type=int, help="Max concurrent source calls.")
    sp.add_argument("--timeout", type=float, help="Per-request timeout in seconds.")
    sp.add_argument("--retries", type=int, help="Retries per request on 429/5xx (default 0).")
    sp.add_argument(
        "--kwargs",
        metavar="k=v",
        nargs="*",
        help="Extra settings (JSON values supported), e.g. source_params={...}.",
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="skill-scout",
        description="Match resume skills to recent postings from several job boards.",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    # match
    sp = sub.add_parser("match", help="Extract skills and fetch matching recent jobs.")
    sp.add_argument("path", help="Plain-text resume file, or '-' for stdin.")
    _add_settings_flags(sp, full=True)
    sp.add_argument("--skip-network", action="store_true", help="Extract skills only; query no sources.")
    sp.add_argument("--format", choices=("json", "html"), default="json")
    sp.set_defaults(func=cmd_match)

    # skills
    sp = sub.add_parser("skills", help="Print skills found in a resume.")
    sp.add_argument("path", help="Plain-text resume file, or '-' for stdin.")
    _add_settings_flags(sp, full=False)
    sp.set_defaults(func=cmd_skills)

    # list-sources
    sp = sub.add_parser("list-sources", help="Print registered job-board sources.")
    sp.set_defaults(func=cmd_list_sources)

    # validate-config
    sp = sub.add_parser("validate-config", help="Verify configuration correctness.")
    _add_settings_flags(sp, full=True)
    sp.set_defaults(func=cmd_validate_config)

    return p


# --------------------------------- Main --------------------------------------
def main(argv: Iterable[str] | None = None) -> int:
    _ensure_logging()
    parser = _build_parser()
    args = parser.parse_args(args=list(argv) if argv is not None else None)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
