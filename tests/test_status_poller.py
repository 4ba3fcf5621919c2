# tests/test_status_poller.py

from __future__ import annotations

import asyncio

import pytest

from vault_cli.core.errors import ExternalToolError
from vault_cli.sync.status_poller import StatusPoller

from .fakes import STATUS_CLEAN, FakeVaultCli


@pytest.mark.asyncio
async def test_burst_of_triggers_collapses_into_one_refresh() -> None:
    cli = FakeVaultCli()
    poller = StatusPoller(cli, debounce_seconds=0.2)

    # Calls at ~0, ~0.12 and ~0.24s; each one restarts the 0.2s window.
    poller.refresh_debounced()
    await asyncio.sleep(0.12)
    poller.refresh_debounced()
    await asyncio.sleep(0.12)
    poller.refresh_debounced()

    # ~0.32s: a timer kept from the first call would have fired at ~0.2s.
    await asyncio.sleep(0.08)
    assert cli.count("status") == 0
    assert poller.pending

    # ~0.54s: past the window measured from the last call.
    await asyncio.sleep(0.22)
    await poller.wait_idle()

    assert cli.count("status") == 1
    assert not poller.pending
    assert poller.last_snapshot is not None
    assert poller.last_snapshot.change_count == 3


@pytest.mark.asyncio
async def test_triggers_after_the_window_refresh_again() -> None:
    cli = FakeVaultCli()
    poller = StatusPoller(cli, debounce_seconds=0.05)

    poller.refresh_debounced()
    await asyncio.sleep(0.2)
    await poller.wait_idle()
    poller.refresh_debounced()
    await asyncio.sleep(0.2)
    await poller.wait_idle()

    assert cli.count("status") == 2


@pytest.mark.asyncio
async def test_listeners_see_snapshots_and_errors() -> None:
    cli = FakeVaultCli()
    poller = StatusPoller(cli, debounce_seconds=0.05)
    seen: list[tuple[object, object]] = []
    poller.add_listener(lambda snap, err: seen.append((snap, err)))

    first = await poller.refresh()
    assert seen == [(first, None)]

    cli.failures["status"] = "not a git repository"
    with pytest.raises(ExternalToolError):
        await poller.refresh()

    # last good snapshot survives the failure
    assert poller.last_snapshot is first
    assert isinstance(poller.last_error, ExternalToolError)
    assert seen[-1][0] is None
    assert isinstance(seen[-1][1], ExternalToolError)

    del cli.failures["status"]
    cli.outputs["status"] = STATUS_CLEAN
    second = await poller.refresh()
    assert second.is_clean
    assert poller.last_error is None


@pytest.mark.asyncio
async def test_failing_listener_does_not_break_refresh() -> None:
    poller = StatusPoller(FakeVaultCli(), debounce_seconds=0.05)

    def boom(snap, err) -> None:
        raise RuntimeError("listener bug")

    poller.add_listener(boom)
    snap = await poller.refresh()
    assert poller.last_snapshot is snap


@pytest.mark.asyncio
async def test_debounced_failure_is_logged_not_raised() -> None:
    cli = FakeVaultCli(failures={"status": "boom"})
    poller = StatusPoller(cli, debounce_seconds=0.01)

    poller.refresh_debounced()
    await asyncio.sleep(0.1)
    await poller.wait_idle()

    assert cli.count("status") == 1
    assert poller.last_snapshot is None
    assert poller.last_error is not None


@pytest.mark.asyncio
async def test_close_cancels_pending_refresh() -> None:
    cli = FakeVaultCli()
    poller = StatusPoller(cli, debounce_seconds=0.05)

    poller.refresh_debounced()
    poller.close()
    assert not poller.pending
    assert poller.closed

    await asyncio.sleep(0.15)
    assert cli.count("status") == 0

    # further triggers are ignored
    poller.refresh_debounced()
    assert not poller.pending


@pytest.mark.asyncio
async def test_refresh_in_flight_at_close_publishes_nothing() -> None:
    cli = FakeVaultCli(delay=0.1)
    poller = StatusPoller(cli, debounce_seconds=0.01)
    seen: list[object] = []
    poller.add_listener(lambda snap, err: seen.append(snap))

    poller.refresh_debounced()
    await asyncio.sleep(0.05)
    assert cli.count("status") == 1

    poller.close()
    await poller.wait_idle()

    assert poller.last_snapshot is None
    assert seen == []
