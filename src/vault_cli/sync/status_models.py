# src/vault_cli/sync/status_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ChangeKind(StrEnum):
    MODIFIED = "modified"
    NEW = "new"
    DELETED = "deleted"
    RENAMED = "renamed"
    UNKNOWN = "unknown"


# Status letters as printed by the vault CLI -> kind. Anything not listed is UNKNOWN.
CHANGE_KINDS: dict[str, ChangeKind] = {
    "M": ChangeKind.MODIFIED,
    "A": ChangeKind.NEW,
    "??": ChangeKind.NEW,
    "D": ChangeKind.DELETED,
    "R": ChangeKind.RENAMED,
}


@dataclass(frozen=True, slots=True)
class ChangeDisplay:
    label: str
    style: str


CHANGE_DISPLAY: dict[ChangeKind, ChangeDisplay] = {
    ChangeKind.MODIFIED: ChangeDisplay("modified", "file-modified"),
    ChangeKind.NEW: ChangeDisplay("new", "file-new"),
    ChangeKind.DELETED: ChangeDisplay("deleted", "file-deleted"),
    ChangeKind.RENAMED: ChangeDisplay("renamed", "file-renamed"),
    ChangeKind.UNKNOWN: ChangeDisplay("", ""),
}


@dataclass(frozen=True, slots=True)
class FileChange:
    kind: ChangeKind
    path: str
    code: str  # raw status letters, e.g. "M", "??", "AM"

    @property
    def label(self) -> str:
        """Display label; unknown codes are shown as the raw letters."""
        return CHANGE_DISPLAY[self.kind].label or self.code


@dataclass(frozen=True, slots=True)
class StatusSnapshot:
    """One successful poll of the vault CLI status command."""

    branch: str
    change_count: int
    is_clean: bool
    changed_files: tuple[FileChange, ...] = ()
