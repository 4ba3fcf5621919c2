# src/vault_cli/sync/status_poller.py

from __future__ import annotations

"""
Working-tree status poller.

refresh()            -> run the CLI `status` command now, parse, publish.
refresh_debounced()  -> collapse a burst of triggers (file events) into one
                        refresh, `debounce_seconds` after the last trigger.

There is exactly one pending timer: every refresh_debounced() call cancels the
previous handle before scheduling a new one. close() cancels it synchronously;
a refresh already running is left to finish and its result is dropped.
"""

import asyncio
import logging
from collections.abc import Callable

from ..core.errors import ExternalToolError
from ..core.ports import VaultCli
from .status_models import StatusSnapshot
from .status_parser import parse_status_output

logger = logging.getLogger(__name__)

StatusListener = Callable[[StatusSnapshot | None, ExternalToolError | None], None]


def status_bar_text(snapshot: StatusSnapshot | None, error: Exception | None = None) -> str:
    """Compact indicator: a check mark when clean, "<n> changes" when dirty."""
    if error is not None:
        return "git: error"
    if snapshot is None:
        return "git: ..."
    if snapshot.change_count == 0:
        return "✓"
    return f"{snapshot.change_count} changes"


class StatusPoller:
    def __init__(self, cli: VaultCli, *, debounce_seconds: float = 1.0) -> None:
        self._cli = cli
        self.debounce_seconds = max(0.0, float(debounce_seconds))

        self._pending: asyncio.TimerHandle | None = None
        self._inflight: set[asyncio.Task[None]] = set()
        self._listeners: list[StatusListener] = []
        self._closed = False

        self.last_snapshot: StatusSnapshot | None = None
        self.last_error: ExternalToolError | None = None

    # ---- listeners ----

    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def _notify(self, snapshot: StatusSnapshot | None, error: ExternalToolError | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot, error)
            except Exception:
                logger.exception("Status listener failed")

    # ---- polling ----

    @property
    def pending(self) -> bool:
        return self._pending is not None

    @property
    def closed(self) -> bool:
        return self._closed

    async def refresh(self) -> StatusSnapshot:
        """
        Poll the CLI once.

        Raises ExternalToolError on failure; last_snapshot is left as it was.
        """
        try:
            output = await self._cli.run("status")
        except ExternalToolError as exc:
            if self._closed:
                raise
            self.last_error = exc
            self._notify(None, exc)
            raise

        snapshot = parse_status_output(output)
        if self._closed:
            logger.debug("Poller closed while refreshing; dropping snapshot.")
            return snapshot

        self.last_snapshot = snapshot
        self.last_error = None
        logger.debug(
            "Status: branch=%s changes=%d clean=%s",
            snapshot.branch,
            snapshot.change_count,
            snapshot.is_clean,
        )
        self._notify(snapshot, None)
        return snapshot

    def refresh_debounced(self) -> None:
        """(Re)start the debounce timer. Must be called on the event loop thread."""
        if self._closed:
            return
        loop = asyncio.get_running_loop()
        if self._pending is not None:
            self._pending.cancel()
        self._pending = loop.call_later(self.debounce_seconds, self._fire)

    def _fire(self) -> None:
        self._pending = None
        if self._closed:
            return
        task = asyncio.get_running_loop().create_task(self._refresh_in_background())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _refresh_in_background(self) -> None:
        try:
            await self.refresh()
        except ExternalToolError as exc:
            logger.warning("Status refresh failed: %s", exc)
        except Exception:
            logger.exception("Status refresh crashed")

    async def wait_idle(self) -> None:
        """Wait for refreshes started by the debounce timer (not for the timer itself)."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    def close(self) -> None:
        """Cancel the pending timer. Running refreshes finish but publish nothing."""
        self._closed = True
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        logger.debug("StatusPoller closed (%d refreshes still running).", len(self._inflight))
