# src/vault_cli/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import NamedTuple


class Priority(StrEnum):
    """
    Priority buckets derived from tags.

    Declaration order is the precedence order used by the classifier.
    Tasks with no matching tag have priority None.
    """

    P1 = "p1"
    P2 = "p2"
    P3 = "p3"
    NEXT = "next"
    WAITING = "waiting"
    SOMEDAY = "someday"

    @classmethod
    def parse(cls, raw: Priority | str | None) -> Priority | None:
        """Accept a Priority, its value ("p1", "#next") or None. Raises ValueError otherwise."""
        if raw is None or isinstance(raw, Priority):
            return raw
        value = raw.strip().lstrip("#").lower()
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join([*(p.value for p in cls), "none"])
            raise ValueError(f"Unknown priority {raw!r} (expected one of: {allowed})") from None


# Filter value selecting tasks without any priority tag.
NO_PRIORITY = "none"


def parse_filter(raw: Priority | str | None) -> Priority | str | None:
    """Priority.parse, plus "none" (NO_PRIORITY) for untagged tasks."""
    if isinstance(raw, str) and not isinstance(raw, Priority):
        if raw.strip().lstrip("#").lower() == NO_PRIORITY:
            return NO_PRIORITY
    return Priority.parse(raw)


class TaskLine(NamedTuple):
    """One line of a vault file, as produced by a line source."""

    file_path: str
    line_number: int
    text: str


@dataclass(frozen=True, slots=True)
class Task:
    """
    Snapshot of one checkbox line at scan time.

    line_number is 1-based and goes stale if lines are inserted/removed above it.
    """

    file_path: str
    line_number: int
    content: str
    tags: tuple[str, ...]
    completed: bool
    priority: Priority | None = None
