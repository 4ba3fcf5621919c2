# src/vault_cli/connectors/console_connector.py

from __future__ import annotations

import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState
from .sync_service import SyncBackgroundRunner

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _prompt(state: AppState) -> str:
    if state.current_options.show_status_bar:
        return f"[{state.status_text}] > "
    return "> "


def run_console_loop(state: AppState, runner: SyncBackgroundRunner) -> None:
    """Blocking REPL; commands are executed on the sync service loop."""
    logger.info("Console connector started (vault=%s).", getattr(state.settings, "vault_path", "."))
    _print_ts("[CONSOLE] Type /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        # Immediate feedback for long operations (sync).
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input(_prompt(state)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            _print_ts("Commands start with '/'. Use /help to list them.")
            continue

        try:
            future = runner.submit(command_registry.handle(state, user_input, emit=emit))
            response = future.result()
        except KeyboardInterrupt:
            print()
            _print_ts("Interrupted.")
            continue
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is not None:
            _print_ts(response)

    logger.info("Console connector finished.")
