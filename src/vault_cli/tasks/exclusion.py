# src/vault_cli/tasks/exclusion.py

"""
Exclusion patterns for task listings.

A pattern is one of:
- exact path: "Inbox/todo.md"
- file name / path suffix: "CLAUDE.md" matches "CLAUDE.md" and "projects/CLAUDE.md"
- wildcard: "Templates/*" ("*" = any characters, anchored at both ends)

Wildcard patterns are NOT escaped: apart from "*", regex metacharacters keep
their regex meaning ("." matches any character). A wildcard pattern that does not compile never
matches.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

logger = logging.getLogger(__name__)


def normalize_path(path: str) -> str:
    """Strip a leading "./" (as produced by `grep -r .`)."""
    return path[2:] if path.startswith("./") else path


def parse_exclude_patterns(raw: str | None) -> list[str]:
    """Split a comma-separated option value; trims entries and drops empty ones."""
    if not raw:
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


def _wildcard_matches(pattern: str, path: str) -> bool:
    try:
        return re.fullmatch(pattern.replace("*", ".*"), path) is not None
    except re.error:
        logger.debug("Exclusion pattern %r is not a valid expression; ignoring it.", pattern)
        return False


def pattern_matches(pattern: str, path: str) -> bool:
    if "*" in pattern:
        return _wildcard_matches(pattern, path)
    return path == pattern or path.endswith("/" + pattern) or path.endswith(pattern)


def is_excluded(path: str, patterns: Iterable[str]) -> bool:
    normalized = normalize_path(path)
    return any(pattern_matches(p, normalized) for p in patterns)
