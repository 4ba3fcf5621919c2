# src/vault_cli/tasks/task_repository.py

from __future__ import annotations

import contextlib
import logging
import os
import shutil
from dataclasses import replace
from pathlib import Path

from ..core.errors import StaleReferenceError
from ..core.ports import LineSource, OptionsProvider
from .exclusion import is_excluded, normalize_path, parse_exclude_patterns
from .priority import classify
from .task_models import NO_PRIORITY, Priority, Task, parse_filter
from .task_parser import DONE_MARKER, OPEN_MARKER, parse_task_lines

logger = logging.getLogger(__name__)


def group_by_file(tasks: list[Task]) -> dict[str, list[Task]]:
    """Group tasks by file, files in first-seen order, tasks in input order."""
    by_file: dict[str, list[Task]] = {}
    for task in tasks:
        by_file.setdefault(task.file_path, []).append(task)
    return by_file


class TaskRepository:
    """
    Vault-wide task listing and toggling.

    Listing is a fresh scan every time (no cache); exclusion patterns come from
    the options provider at call time. Toggling re-reads the target file and
    rewrites exactly one line; all other bytes are kept as they are.
    """

    def __init__(self, root: str | Path, line_source: LineSource, options: OptionsProvider) -> None:
        self._root = Path(root)
        self._line_source = line_source
        self._options = options

    @property
    def root(self) -> Path:
        return self._root

    def list_tasks(self, filter: Priority | str | None = None) -> list[Task]:
        """
        Tasks across the vault.

        - filter given: tasks with exactly that priority, completed ones included
                        ("none" selects tasks without a priority tag)
        - no filter:    every incomplete task, completed ones hidden
        """
        wanted = parse_filter(filter)
        patterns = parse_exclude_patterns(self._options.current().tasks_exclude_files)

        out: list[Task] = []
        for candidate in parse_task_lines(self._line_source(self._root)):
            if is_excluded(candidate.file_path, patterns):
                continue

            priority = classify(candidate.tags)
            if wanted is None:
                if candidate.completed:
                    continue
            elif wanted == NO_PRIORITY:
                if priority is not None:
                    continue
            elif priority != wanted:
                continue

            out.append(replace(candidate, priority=priority))

        logger.debug("Listed %d tasks (filter=%s, excludes=%s)", len(out), wanted, patterns)
        return [t for group in group_by_file(out).values() for t in group]

    def _path_for(self, task: Task) -> Path:
        return self._root / normalize_path(task.file_path)

    def toggle_task(self, task: Task, *, strict: bool = False) -> bool:
        """
        Flip the checkbox of `task` in its file and return the new completed state.

        Raises FileNotFoundError if the file is gone. If the recorded line is
        out of range or no longer carries the expected marker, nothing is
        written and task.completed is returned; with strict=True a
        StaleReferenceError is raised instead.
        """
        path = self._path_for(task)
        if path.is_dir():
            raise FileNotFoundError(f"Not a file: {task.file_path}")

        with open(path, encoding="utf-8", newline="") as fh:
            content = fh.read()

        lines = content.split("\n")
        idx = task.line_number - 1
        search, replacement = (DONE_MARKER, OPEN_MARKER) if task.completed else (OPEN_MARKER, DONE_MARKER)

        if not 0 <= idx < len(lines):
            return self._stale(task, strict, f"line {task.line_number} is past the end of the file ({len(lines)} lines)")
        if search not in lines[idx]:
            return self._stale(task, strict, f"line {task.line_number} no longer contains {search!r}")

        lines[idx] = lines[idx].replace(search, replacement, 1)
        self._write(path, "\n".join(lines))

        logger.info("Toggled %s:%d -> %s", task.file_path, task.line_number, "done" if not task.completed else "open")
        return not task.completed

    @staticmethod
    def _stale(task: Task, strict: bool, reason: str) -> bool:
        if strict:
            raise StaleReferenceError(
                f"Stale task reference {task.file_path}:{task.line_number}: {reason}",
                file_path=task.file_path,
                line_number=task.line_number,
            )
        logger.warning("Toggle skipped for %s:%d: %s", task.file_path, task.line_number, reason)
        return task.completed

    @staticmethod
    def _write(path: Path, content: str) -> None:
        # Replace the whole file in one step so readers never see a half-written line.
        tmp = path.with_name(f".{path.name}.tmp")
        try:
            with open(tmp, "w", encoding="utf-8", newline="") as fh:
                fh.write(content)
            try:
                shutil.copymode(path, tmp)
            except OSError:
                logger.debug("Could not copy file mode to %s", tmp, exc_info=True)
            os.replace(tmp, path)
        except BaseException:
            with contextlib.suppress(OSError):
                tmp.unlink()
            raise
