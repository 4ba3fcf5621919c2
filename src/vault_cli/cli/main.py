# src/vault_cli/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the sync service (status poller + vault watcher) in a background thread,
- the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..connectors.sync_service import start_sync_service_in_background
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/vault-cli")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "vault-cli"))

    # IMPORTANT: reuse same settings object
    state = create_initial_state(settings=settings)

    runner = start_sync_service_in_background(state)
    if runner is None:
        logger.error("Sync service unavailable; exiting.")
        return

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        signal.signal(signal.SIGTERM, _handle_signal)
        if not settings.console_enabled:
            signal.signal(signal.SIGINT, _handle_signal)
    except Exception:
        # Some platforms may not support SIGTERM, etc.
        pass

    try:
        if settings.console_enabled:
            run_console_loop(state, runner)
            stop_main.set()
        else:
            logger.info("Console disabled. Watching the vault only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        runner.stop()
        # Leave room for the quiet auto-sync on close.
        runner.join(timeout=settings.cli_timeout_seconds + 10.0)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
