# src/vault_cli/tasks/priority.py

from __future__ import annotations

from collections.abc import Sequence

from .task_models import Priority

PRIORITY_ORDER: tuple[Priority, ...] = tuple(Priority)


def classify(tags: Sequence[str]) -> Priority | None:
    """
    Map tags to one priority bucket.

    The first priority (in PRIORITY_ORDER) whose name is a substring of any
    tag wins, regardless of tag order: ["#p2", "#p1"] -> p1, "#next/today" -> next.
    Matching is case-sensitive.
    """
    for priority in PRIORITY_ORDER:
        if any(priority.value in tag for tag in tags):
            return priority
    return None
