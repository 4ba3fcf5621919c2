# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from vault_cli.core.options import OptionsStore
from vault_cli.core.state import AppState
from vault_cli.sync.status_poller import StatusPoller
from vault_cli.tasks.line_sources import WalkLineSource
from vault_cli.tasks.task_repository import TaskRepository

from .fakes import FakeVaultCli, write


@pytest.fixture()
def vault(tmp_path: Path) -> Path:
    """A small vault with tasks spread over a few files."""
    root = tmp_path / "vault"
    write(
        root,
        "inbox.md",
        "# Inbox\n"
        "- [ ] call plumber #p1\n"
        "- [x] pay rent #p1\n"
        "- [ ] read paper #next\n",
    )
    write(
        root,
        "projects/garden.md",
        "Notes\n"
        "  - [ ] buy seeds #someday #p3\n"
        "- [ ] untagged task\n",
    )
    write(root, "Templates/daily.md", "- [ ] template task #p1\n")
    write(root, "CLAUDE.md", "- [ ] agent instructions #p1\n")
    write(root, ".obsidian/hidden.md", "- [ ] hidden #p1\n")
    return root


@pytest.fixture()
def settings(tmp_path: Path, vault: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    data_dir = tmp_path / "data"
    return SimpleNamespace(
        app_name="vault-cli-test",
        log_level="DEBUG",
        vault_path=vault,
        task_source="walk",
        task_extension=".md",
        cli_command="./cli.sh",
        cli_timeout_seconds=5.0,
        debounce_seconds=0.05,
        console_enabled=False,
        watch_enabled=False,
        data_dir=data_dir,
        options_path=data_dir / "options.json",
    )


@pytest.fixture()
def options(settings: SimpleNamespace) -> OptionsStore:
    return OptionsStore(settings.options_path)


@pytest.fixture()
def fake_cli() -> FakeVaultCli:
    return FakeVaultCli()


@pytest.fixture()
def repo(vault: Path, options: OptionsStore) -> TaskRepository:
    return TaskRepository(vault, WalkLineSource(".md"), options)


@pytest.fixture()
def state(settings: SimpleNamespace, options: OptionsStore, fake_cli: FakeVaultCli, repo: TaskRepository) -> AppState:
    """AppState wired with a fake vault CLI and a real task repository."""
    st = AppState(
        settings=settings,
        options=options,
        cli=fake_cli,
        tasks=repo,
        poller=StatusPoller(fake_cli, debounce_seconds=settings.debounce_seconds),
    )
    st.poller.add_listener(st.on_status)
    return st
