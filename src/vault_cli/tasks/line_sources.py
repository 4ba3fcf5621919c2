# src/vault_cli/tasks/line_sources.py

"""
Line sources: given a vault root, produce (path, line_number, text) triples.

- WalkLineSource: direct recursive directory walk (default). Deterministic
  order (directories and files sorted), dot-directories (.git, .obsidian, ...)
  skipped.
- GrepLineSource: shells out to `grep -rn` and parses its output; only
  checkbox-looking lines come back, so it is cheaper on large vaults.

Both report paths relative to the root with "/" separators.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Iterator
from pathlib import Path

from ..core.errors import ExternalToolError
from .task_models import TaskLine
from .task_parser import parse_search_output

logger = logging.getLogger(__name__)

GREP_TASK_PATTERN = r"^\s*- \[[ x]\]"


def _split_lines(content: str) -> list[str]:
    # Split on "\n" only and drop one trailing "\r" per line, so CRLF files and
    # stray "\r" inside a line behave like the search tool would report them.
    lines = content.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class WalkLineSource:
    def __init__(self, extension: str = ".md") -> None:
        self.extension = extension

    def __call__(self, root: Path) -> Iterator[TaskLine]:
        root = Path(root)
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for name in sorted(filenames):
                if not name.endswith(self.extension):
                    continue
                path = Path(dirpath) / name
                rel = path.relative_to(root).as_posix()
                try:
                    with open(path, encoding="utf-8", newline="") as fh:
                        content = fh.read()
                except UnicodeDecodeError:
                    logger.warning("Skipping %s: not valid UTF-8.", rel)
                    continue
                except OSError:
                    # Deleted/renamed between listing and reading.
                    logger.warning("Skipping %s: unreadable.", rel, exc_info=True)
                    continue

                for idx, text in enumerate(_split_lines(content), start=1):
                    yield TaskLine(rel, idx, text)


class GrepLineSource:
    def __init__(self, extension: str = ".md", *, timeout: float = 30.0) -> None:
        self.extension = extension
        self.timeout = timeout

    def __call__(self, root: Path) -> Iterator[TaskLine]:
        command = ["grep", "-rn", f"--include=*{self.extension}", GREP_TASK_PATTERN, "."]
        try:
            process = subprocess.run(
                command,
                cwd=Path(root),
                capture_output=True,
                text=False,
                check=False,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise ExternalToolError(
                f"grep timed out after {self.timeout:g}s",
                command=command,
                timed_out=True,
            ) from exc
        except OSError as exc:
            raise ExternalToolError(f"Unable to run grep: {exc}", command=command) from exc

        stdout = process.stdout.decode("utf-8", errors="replace") if process.stdout else ""
        stderr = process.stderr.decode("utf-8", errors="replace") if process.stderr else ""

        # grep exits 1 when nothing matched: an empty vault is not an error.
        if process.returncode not in (0, 1):
            message = stderr.strip() or stdout.strip() or "unknown grep error"
            raise ExternalToolError(
                f"grep failed: {message}",
                command=command,
                returncode=process.returncode,
                stdout=stdout,
                stderr=stderr,
            )

        return parse_search_output(stdout, extension=self.extension)


def make_line_source(kind: str, *, extension: str = ".md", timeout: float = 30.0):
    """Pick a line source by name ("walk" or "grep")."""
    if kind == "grep":
        return GrepLineSource(extension, timeout=timeout)
    if kind != "walk":
        logger.warning("Unknown task source %r; falling back to directory walk.", kind)
    return WalkLineSource(extension)
