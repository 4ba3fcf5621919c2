# src/vault_cli/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the vault CLI, the line source and the options backend swappable
and makes testing easier.
"""

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import TaskLine
    from .options import VaultOptions


class VaultCli(Protocol):
    """
    Boundary to the external vault CLI (status/sync/daily).

    run() returns the command's text output or raises ExternalToolError
    (non-zero exit, timeout, failure to start).
    """

    async def run(self, command: str) -> str: ...


class LineSource(Protocol):
    """
    Produces (path, line_number, text) triples for a vault root.

    Implementations may walk the filesystem or shell out to a search tool;
    the parser does not care which.
    """

    def __call__(self, root: Path) -> Iterable[TaskLine]: ...


class OptionsProvider(Protocol):
    """Current user options; read on every call, never cached by consumers."""

    def current(self) -> VaultOptions: ...


# Zero-argument trigger used by file watchers (-> StatusPoller.refresh_debounced).
StatusCallback = Callable[[], None]
