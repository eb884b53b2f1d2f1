from __future__ import annotations

import re
from collections.abc import Sequence

from .config import ConfigError


def _compile(term: str) -> re.Pattern[str]:
    # Lookarounds instead of \b: terms may start or end with symbols ("C++", "C#").
    return re.compile(rf"(?<!\w){re.escape(term)}(?!\w)", re.IGNORECASE)


class SkillMatcher:
    """
    Scan document text against a fixed, ordered skill vocabulary.

    A term matches when it appears case-insensitively with no word character
    directly before or after it, so "Java" does not match inside "JavaScript".
    Output keeps vocabulary order, not order of appearance in the text.
    """

    def __init__(self, vocabulary: Sequence[str]):
        if isinstance(vocabulary, str) or not vocabulary:
            raise ConfigError("Vocabulary must be a non-empty sequence of terms.")

        seen: set[str] = set()
        patterns: list[tuple[str, re.Pattern[str]]] = []
        for i, term in enumerate(vocabulary):
            if not isinstance(term, str) or not term.strip():
                raise ConfigError(f"Vocabulary item[{i}] must be a non-empty string.")
            term = term.strip()
            key = term.casefold()
            if key in seen:
                continue
            seen.add(key)
            patterns.append((term, _compile(term)))
        self._patterns = tuple(patterns)

    @property
    def vocabulary(self) -> tuple[str, ...]:
        return tuple(term for term, _ in self._patterns)

    def match(self, text: str | None) -> tuple[str, ...]:
        haystack = text or ""
        return tuple(term for term, pat in self._patterns if pat.search(haystack))


def match(text: str | None, vocabulary: Sequence[str]) -> tuple[str, ...]:
    """One-shot convenience around SkillMatcher."""
    return SkillMatcher(vocabulary).match(text)
