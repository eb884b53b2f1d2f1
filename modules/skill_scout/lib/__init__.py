# modules/skill_scout/lib/__init__.py
from __future__ import annotations

# Re-export commonly-used types for convenience
from .config import ConfigError, Settings
from .engine import aggregate, run_once
from .matcher import SkillMatcher
from .models import JobPosting, PipelineResult, SourceOutcome

# Register built-in sources by importing the package.
from . import sources as _sources  # noqa: F401,E402

__all__ = [
    "ConfigError",
    "JobPosting",
    "PipelineResult",
    "Settings",
    "SkillMatcher",
    "SourceOutcome",
    "aggregate",
    "run_once",
]
