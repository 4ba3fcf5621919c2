# src/vault_cli/connectors/sync_service.py

"""
Background event loop hosting everything asynchronous:
- the status poller (initial refresh, debounce timer),
- the vault watcher's callbacks,
- console commands submitted from the main thread.

Why a thread:
- console REPL is blocking (input()).
- the poller and the vault CLI calls are async and want one event loop that
  keeps running while the user is typing.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import contextlib
import logging
import threading
from collections.abc import Coroutine
from dataclasses import dataclass
from typing import Any, TypeVar

from ..core.errors import ExternalToolError
from ..core.state import AppState
from .vault_watcher import start_vault_watcher

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def sync_quietly(state: AppState) -> bool:
    """Run the sync command, logging instead of raising. Used on shutdown."""
    try:
        await state.cli.run("sync")
    except ExternalToolError as e:
        logger.error("Auto-sync failed: %s", e)
        return False
    logger.info("Auto-sync done.")
    return True


async def _run_sync_service(state: AppState, stop_event: asyncio.Event) -> None:
    settings = state.settings
    options = state.current_options
    loop = asyncio.get_running_loop()

    watcher = None
    if options.show_status_bar:
        try:
            await state.poller.refresh()
        except ExternalToolError as e:
            logger.warning("Initial status failed: %s", e)

        if getattr(settings, "watch_enabled", True):
            watcher = start_vault_watcher(settings.vault_path, loop, state.poller.refresh_debounced)

    try:
        await stop_event.wait()
    finally:
        state.poller.close()
        if watcher is not None:
            watcher.stop()
            await asyncio.to_thread(watcher.join, 5.0)

        # Re-read: the option may have been changed during the session.
        if state.current_options.auto_sync_on_close:
            await sync_quietly(state)


@dataclass(slots=True)
class SyncBackgroundRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def submit(self, coro: Coroutine[Any, Any, T]) -> concurrent.futures.Future[T]:
        """Schedule `coro` on the service loop from another thread."""
        return asyncio.run_coroutine_threadsafe(coro, self.loop)

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except Exception:
            logger.debug("Failed to signal sync service stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_sync_service_in_background(state: AppState) -> SyncBackgroundRunner | None:
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(_run_sync_service(state, stop_event))
        except Exception:
            logger.exception("Sync service crashed.")
        finally:
            with contextlib.suppress(Exception):
                loop.run_until_complete(loop.shutdown_asyncgens())
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="vault-sync", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Sync service thread did not initialize properly.")
        return None

    logger.info("Sync service started.")
    return SyncBackgroundRunner(thread=t, loop=loop, stop_event=stop_event)
