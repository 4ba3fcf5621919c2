# src/vault_cli/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (options, vault CLI, tasks, status poller).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.options import OptionsStore
from ..core.state import AppState
from ..sync.gateway import CliGateway
from ..sync.status_poller import StatusPoller
from ..tasks.line_sources import make_line_source
from ..tasks.task_repository import TaskRepository

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.options_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    options = OptionsStore(settings.options_path)
    cli = CliGateway(
        settings.vault_path,
        command=settings.cli_command,
        timeout=settings.cli_timeout_seconds,
    )
    line_source = make_line_source(
        settings.task_source,
        extension=settings.task_extension,
        timeout=settings.cli_timeout_seconds,
    )

    state = AppState(
        settings=settings,
        options=options,
        cli=cli,
        tasks=TaskRepository(settings.vault_path, line_source, options),
        poller=StatusPoller(cli, debounce_seconds=settings.debounce_seconds),
    )
    state.poller.add_listener(state.on_status)

    logger.info(
        "Vault %s (tasks via %s, cli=%r)",
        settings.vault_path,
        settings.task_source,
        settings.cli_command,
    )
    return state
