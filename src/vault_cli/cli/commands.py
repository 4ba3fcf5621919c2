# src/vault_cli/cli/commands.py

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import cast

from ..core.errors import ExternalToolError
from ..core.options import OPTION_KEYS, VaultOptions, coerce_option_value, options_to_mapping
from ..core.state import AppState
from ..sync.status_models import StatusSnapshot
from ..tasks.task_models import Task
from ..tasks.task_parser import strip_tags
from ..tasks.task_repository import group_by_file

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3
CommandGate = Callable[[VaultOptions], bool]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /tasks, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._gates: dict[str, CommandGate] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        enabled: CommandGate | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in [key, *(a.lower() for a in aliases)]:
            self._handlers[alias] = handler
            if enabled is not None:
                self._gates[alias] = enabled

    def is_enabled(self, name: str, options: VaultOptions) -> bool:
        gate = self._gates.get(name)
        return gate is None or bool(gate(options))

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler or not self.is_enabled(name, state.current_options):
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            return await result
        return result

    def build_help(self, options: VaultOptions | None = None) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            if options is not None and not self.is_enabled(name, options):
                continue
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----

def render_tasks(tasks: list[Task], filter: str | None = None) -> str:
    title = f"Tasks ({filter})" if filter else "Tasks"
    if not tasks:
        return f"{title}\nNo tasks found."

    lines = [title]
    n = 0
    for file_path, file_tasks in group_by_file(tasks).items():
        header = file_path[:-3] if file_path.endswith(".md") else file_path
        lines.append(f"\n{header}")
        for task in file_tasks:
            n += 1
            box = "[x]" if task.completed else "[ ]"
            tags = f"  {' '.join(task.tags)}" if task.tags else ""
            lines.append(f"  {n:>3}. {box} {strip_tags(task.content)}{tags}")

    count = len(tasks)
    lines.append(f"\n{count} task{'' if count == 1 else 's'}")
    return "\n".join(lines)


def render_status(snapshot: StatusSnapshot) -> str:
    lines = ["Git Status", f"  Branch: {snapshot.branch}"]
    if snapshot.is_clean:
        lines.append("  Status: ✓ Clean")
        return "\n".join(lines)

    lines.append(f"  Status: {snapshot.change_count} uncommitted")
    if snapshot.changed_files:
        lines.append("  Changed files:")
        width = max(len(change.label) for change in snapshot.changed_files)
        for change in snapshot.changed_files:
            lines.append(f"    {change.label:<{width}}  {change.path}")
    return "\n".join(lines)


# ---- handlers ----

def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help(state.current_options)


async def _list_tasks(state: AppState, filter: str | None) -> str:
    # list_tasks blocks on disk reads or grep; it runs off the loop thread.
    try:
        tasks = await asyncio.to_thread(state.tasks.list_tasks, filter)
    except ValueError as e:
        return str(e)
    except (ExternalToolError, OSError) as e:
        logger.warning("Task listing failed: %s", e)
        return f"Tasks failed: {e}"

    state.last_tasks = tasks
    return render_tasks(tasks, filter)


async def cmd_tasks(state: AppState, args: list[str]) -> str:
    """
    /tasks         -> open tasks (completed hidden)
    /tasks <prio>  -> tasks with that priority, completed included
    /tasks none    -> tasks without a priority tag, completed included
    """
    return await _list_tasks(state, args[0] if args else None)


async def cmd_tasks_p1(state: AppState, args: list[str]) -> str:
    return await _list_tasks(state, "p1")


async def cmd_tasks_next(state: AppState, args: list[str]) -> str:
    return await _list_tasks(state, "next")


def cmd_toggle(state: AppState, args: list[str]) -> str:
    """/toggle <n> -> flip the n-th task of the last /tasks listing."""
    if len(args) != 1 or not args[0].isdigit():
        return "Usage: /toggle <n> (number from the last /tasks listing)."

    idx = int(args[0]) - 1
    if not 0 <= idx < len(state.last_tasks):
        return "No such task. Run /tasks first."

    task = state.last_tasks[idx]
    try:
        new_state = state.tasks.toggle_task(task)
    except FileNotFoundError:
        return "File not found"
    except OSError as e:
        logger.exception("Toggle failed for %s:%d", task.file_path, task.line_number)
        return f"Failed to toggle task: {e}"

    if new_state == task.completed:
        return "Task unchanged: its line moved or was edited since the listing. Run /tasks again."

    state.last_tasks[idx] = replace(task, completed=new_state)
    with contextlib.suppress(RuntimeError):
        state.poller.refresh_debounced()

    box = "[x]" if new_state else "[ ]"
    return f"{box} {strip_tags(task.content)}"


async def cmd_status(state: AppState, args: list[str]) -> str:
    try:
        snapshot = await state.poller.refresh()
    except ExternalToolError as e:
        return f"Status failed: {e}"
    return render_status(snapshot)


async def cmd_sync(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        with contextlib.suppress(Exception):
            emit("Syncing...")

    try:
        await state.cli.run("sync")
    except ExternalToolError as e:
        logger.info("Sync failed: %s", e)
        return f"Sync failed: {e}"

    try:
        await state.poller.refresh()
    except ExternalToolError:
        logger.debug("Status refresh after sync failed.", exc_info=True)
    return "Synced!"


async def cmd_daily(state: AppState, args: list[str]) -> str:
    try:
        output = await state.cli.run("daily")
    except ExternalToolError as e:
        return f"Daily failed: {e}"
    return output.strip() or "Daily note opened."


def cmd_options(state: AppState, args: list[str]) -> str:
    """
    /options               -> show all options
    /options <name> <val>  -> change one option (saved immediately)
    """
    if not args:
        lines = ["Options:"]
        for key, value in options_to_mapping(state.current_options).items():
            shown = ("on" if value else "off") if isinstance(value, bool) else repr(value)
            lines.append(f"  {key} = {shown}")
        return "\n".join(lines)

    if len(args) < 2:
        return "Usage: /options <name> <value>"

    key = args[0]
    if key not in OPTION_KEYS:
        return f"Unknown option {key!r}. Known: {', '.join(OPTION_KEYS)}"

    try:
        value = coerce_option_value(key, " ".join(args[1:]))
    except ValueError as e:
        return str(e)

    state.options.update(key, value)
    return f"{key} updated."


def _tasks_enabled(options: VaultOptions) -> bool:
    return options.show_tasks


def _tasks_shortcut_enabled(options: VaultOptions) -> bool:
    return options.show_tasks and options.show_tasks_ribbon


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register(
    "tasks",
    cmd_tasks,
    help_text="List open tasks, or all tasks of one priority: /tasks [p1|p2|p3|next|waiting|someday|none].",
    enabled=_tasks_enabled,
)
registry.register("t", cmd_tasks, help_text="Shortcut for /tasks.", enabled=_tasks_shortcut_enabled)
registry.register("p1", cmd_tasks_p1, help_text="Show P1 tasks.", enabled=_tasks_enabled)
registry.register("next", cmd_tasks_next, help_text="Show next tasks.", enabled=_tasks_enabled)
registry.register(
    "toggle", cmd_toggle, help_text="Toggle a task from the last listing: /toggle <n>.", enabled=_tasks_enabled
)
registry.register("status", cmd_status, help_text="Show git status of the vault.")
registry.register("sync", cmd_sync, help_text="Sync the vault.")
registry.register("daily", cmd_daily, help_text="Open the daily note.")
registry.register("options", cmd_options, help_text="Show or change options: /options [name value].")
