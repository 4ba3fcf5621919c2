# src/vault_cli/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..sync.status_models import StatusSnapshot
from ..sync.status_poller import StatusPoller, status_bar_text
from ..tasks.task_models import Task
from ..tasks.task_repository import TaskRepository
from .errors import ExternalToolError
from .options import OptionsStore, VaultOptions
from .ports import VaultCli


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    options: OptionsStore
    cli: VaultCli
    tasks: TaskRepository
    poller: StatusPoller

    # Last /tasks listing; /toggle <n> refers into it.
    last_tasks: list[Task] = field(default_factory=list)
    status_text: str = "git: ..."

    @property
    def current_options(self) -> VaultOptions:
        return self.options.current()

    def on_status(self, snapshot: StatusSnapshot | None, error: ExternalToolError | None) -> None:
        """Poller listener: keep the status-bar text current."""
        self.status_text = status_bar_text(snapshot, error)
