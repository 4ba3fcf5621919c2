# src/vault_cli/sync/status_parser.py

"""
Parser for the vault CLI `status` output.

Expected shape (order does not matter, unknown lines are ignored):

    Branch: main
    Uncommitted: 3
    M  notes/a.md
    ?? notes/b.md

or, when nothing is pending, a line containing "Working tree clean".
"""

from __future__ import annotations

import re

from .status_models import CHANGE_KINDS, ChangeKind, FileChange, StatusSnapshot

BRANCH_PREFIX = "Branch: "
CHANGES_TOKEN = "Uncommitted"
CLEAN_MARKER = "Working tree clean"

_INT_RE = re.compile(r"(\d+)")
_FILE_RE = re.compile(r"^\s*([MADR?]+)\s+(.+)$")


def parse_status_output(output: str) -> StatusSnapshot:
    lines = output.split("\n")

    branch = next((ln[len(BRANCH_PREFIX):] for ln in lines if ln.startswith(BRANCH_PREFIX)), "")
    branch = branch.strip() or "unknown"

    change_count = 0
    changes_line = next((ln for ln in lines if CHANGES_TOKEN in ln), None)
    if changes_line is not None:
        m = _INT_RE.search(changes_line)
        if m:
            change_count = int(m.group(1))

    is_clean = any(CLEAN_MARKER in ln for ln in lines)

    changed: list[FileChange] = []
    for ln in lines:
        m = _FILE_RE.match(ln.rstrip("\r"))
        if not m:
            continue
        code, path = m.group(1), m.group(2)
        changed.append(FileChange(kind=CHANGE_KINDS.get(code, ChangeKind.UNKNOWN), path=path, code=code))

    return StatusSnapshot(
        branch=branch,
        change_count=change_count,
        is_clean=is_clean,
        changed_files=tuple(changed),
    )
