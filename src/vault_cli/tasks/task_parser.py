# src/vault_cli/tasks/task_parser.py

"""
Checkbox-line grammar.

A task line is, after optional leading whitespace, "- [ ]" (open) or "- [x]"
(done; lower-case x only). Everything after the marker, minus one separating
space, is the task content. Tags (#word, #project/sub) stay inside the content
and are also extracted into their own tuple.

The parser works on already-read lines; see line_sources.py for where they
come from.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from .exclusion import normalize_path
from .task_models import Task, TaskLine

OPEN_MARKER = "- [ ]"
DONE_MARKER = "- [x]"

TASK_LINE_RE = re.compile(r"^\s*- \[([ x])\]")
TAG_RE = re.compile(r"#[\w/]+")


def extract_tags(content: str) -> tuple[str, ...]:
    """All tags in order of appearance, duplicates kept."""
    return tuple(TAG_RE.findall(content))


def strip_tags(content: str) -> str:
    """Content without its tags, for display."""
    return TAG_RE.sub("", content).strip()


def parse_task_line(file_path: str, line_number: int, text: str) -> Task | None:
    """Return a Task for a checkbox line, None for anything else."""
    m = TASK_LINE_RE.match(text)
    if not m:
        return None

    rest = text[m.end():]
    content = rest[1:] if rest.startswith(" ") else rest

    return Task(
        file_path=normalize_path(file_path),
        line_number=line_number,
        content=content,
        tags=extract_tags(content),
        completed=m.group(1) == "x",
    )


def parse_task_lines(lines: Iterable[TaskLine]) -> Iterator[Task]:
    """Lazily map a line stream to task candidates, skipping non-task lines."""
    for file_path, line_number, text in lines:
        task = parse_task_line(file_path, line_number, text)
        if task is not None:
            yield task


def parse_search_output(output: str, *, extension: str = ".md") -> Iterator[TaskLine]:
    """
    Parse `grep -rn` style output: "<path>:<line>:<text>" per line.

    Empty output (no matches) yields nothing; lines that don't fit the format
    are skipped.
    """
    line_re = re.compile(r"^(.+?" + re.escape(extension) + r"):(\d+):(.*)$")
    for raw in output.split("\n"):
        if not raw.strip():
            continue
        if raw.endswith("\r"):
            raw = raw[:-1]
        m = line_re.match(raw)
        if not m:
            continue
        yield TaskLine(normalize_path(m.group(1)), int(m.group(2)), m.group(3))
