# src/vault_cli/connectors/vault_watcher.py

"""
Filesystem watcher for the vault root.

watchdog delivers events on its own observer thread; each relevant event is
handed to the event loop with call_soon_threadsafe, where it normally lands in
StatusPoller.refresh_debounced.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePath

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from ..core.ports import StatusCallback

logger = logging.getLogger(__name__)

RELEVANT_EVENTS = frozenset({EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_DELETED, EVENT_TYPE_MOVED})


def is_hidden_path(root: Path, path: str | os.PathLike[str]) -> bool:
    """True for anything inside a dot-directory or named with a leading dot."""
    try:
        rel = PurePath(os.fsdecode(path)).relative_to(root)
    except ValueError:
        return True
    return any(part.startswith(".") for part in rel.parts)


class VaultEventHandler(FileSystemEventHandler):
    """Forward create/modify/delete/move of visible vault files to `trigger`."""

    def __init__(self, root: Path, trigger: StatusCallback) -> None:
        super().__init__()
        self.root = Path(root).resolve()
        self.trigger = trigger

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in RELEVANT_EVENTS:
            return
        paths = [event.src_path]
        if event.event_type == EVENT_TYPE_MOVED:
            # Atomic saves rename a hidden temp file over the note.
            paths.append(getattr(event, "dest_path", None))
        if all(not p or is_hidden_path(self.root, p) for p in paths):
            return
        logger.debug("Vault %s: %s", event.event_type, event.src_path)
        try:
            self.trigger()
        except RuntimeError:
            # Loop already closed during shutdown.
            logger.debug("Dropping vault event after shutdown.", exc_info=True)


@dataclass(slots=True)
class VaultWatcher:
    observer: Observer
    handler: VaultEventHandler

    def stop(self) -> None:
        try:
            self.observer.stop()
        except Exception:
            logger.debug("Failed to stop vault observer.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.observer.join(timeout=timeout)


def start_vault_watcher(
    root: Path,
    loop: asyncio.AbstractEventLoop,
    on_change: StatusCallback,
) -> VaultWatcher | None:
    """Watch `root` recursively; `on_change` runs on `loop` for every relevant event."""
    handler = VaultEventHandler(root, lambda: loop.call_soon_threadsafe(on_change))
    observer = Observer()
    try:
        observer.schedule(handler, str(handler.root), recursive=True)
        observer.start()
    except Exception:
        logger.exception("Could not watch %s; status will only refresh on demand.", root)
        return None

    logger.info("Watching vault: %s", handler.root)
    return VaultWatcher(observer=observer, handler=handler)
