# src/mission_control/cli/commands.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..core.state import AppState
from ..tasks.countdown import EXPIRED
from ..tasks.task_models import SyncStatus, Task, parse_deadline

CommandEmitter = Callable[[str], None]
CommandHandler = Callable[[AppState, list[str], CommandEmitter | None], Awaitable[str | None]]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string, or None if the line is not a command (or the command has nothing to say).
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return await handler(state, args, emit)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----

def _deadline_display(raw: str) -> str:
    try:
        return parse_deadline(raw).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return raw or "(none)"


def format_task(index: int, task: Task, countdown: str) -> str:
    if task.completed:
        label = "DONE"
    elif countdown == EXPIRED:
        label = "EXPIRED"
    else:
        label = "ACTIVE"

    sync = ""
    if task.sync == SyncStatus.PENDING:
        sync = " (syncing)"
    elif task.sync == SyncStatus.FAILED:
        sync = " (not saved)"

    mark = "x" if task.completed else " "
    return (
        f"{index}. [{mark}] {task.text} <{label}>{sync}\n"
        f"     Deadline: {_deadline_display(task.deadline)} | \U0001f552 {countdown}"
    )


def render_task_list(state: AppState) -> str:
    ctrl = state.controller
    if not ctrl.tasks:
        return "No missions yet. Use /add to create one."
    lines = [format_task(i, t, ctrl.countdown_for(t.id)) for i, t in enumerate(ctrl.tasks, start=1)]
    return "\n".join(lines)


def _resolve_task(state: AppState, args: list[str]) -> Task | str:
    """Map a 1-based list position to a task; returns an error message on bad input."""
    if len(args) != 1:
        return "Usage: /<command> <number> (see /list)."
    raw = args[0].rstrip(".")
    if not raw.isdigit():
        return "Invalid task number."
    idx = int(raw) - 1
    tasks = state.controller.tasks
    if idx < 0 or idx >= len(tasks):
        return f"No task #{raw}."
    return tasks[idx]


# ---- handlers ----

async def cmd_help(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return registry.build_help()


async def cmd_list(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    return render_task_list(state)


async def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    if state.controller.busy:
        return "Deploying... please wait for the current mission to be saved."
    task = await state.controller.add()
    if task is None:
        return None
    return render_task_list(state)


async def cmd_toggle(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    found = _resolve_task(state, args)
    if isinstance(found, str):
        return found
    state.controller.toggle(found.id)
    return f"Mission \"{found.text}\" marked {'done' if found.completed else 'not done'}."


async def cmd_edit(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    found = _resolve_task(state, args)
    if isinstance(found, str):
        return found
    if not await state.controller.edit(found.id):
        return None
    return render_task_list(state)


async def cmd_delete(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    found = _resolve_task(state, args)
    if isinstance(found, str):
        return found
    await state.controller.delete(found.id)
    return None


async def cmd_reload(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str | None:
    if not await state.controller.reload():
        return None
    state.controller.recompute()
    return render_task_list(state)


async def cmd_status(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    ctrl = state.controller
    settings = state.settings
    backend = getattr(settings, "store_backend", "?")
    where = getattr(settings, "tasks_collection", "tasks")
    if backend == "local":
        where = str(getattr(settings, "local_store_path", "(memory)"))
    done = sum(1 for t in ctrl.tasks if t.completed)
    diverged = ctrl.diverged()
    lines = [
        "Status:",
        f"  Store: {backend} ({where})",
        f"  Missions: {len(ctrl.tasks)} total, {done} done",
        f"  Busy: {'yes' if ctrl.busy else 'no'}",
    ]
    if diverged:
        lines.append(f"  Not saved: {len(diverged)} (use /reload to resync)")
    return "\n".join(lines)


async def cmd_watch(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /watch          -> redraw the list every tick for 10 seconds
    /watch <secs>   -> same, for the given number of seconds
    """
    seconds = 10
    if args:
        if not args[0].isdigit():
            return "Usage: /watch [seconds]."
        seconds = max(1, int(args[0]))

    interval = float(getattr(state.settings, "tick_interval_seconds", 1.0))
    if emit is None:
        return render_task_list(state)

    loop = asyncio.get_running_loop()
    end = loop.time() + seconds
    while loop.time() < end:
        emit(f"[{datetime.now().strftime('%H:%M:%S')}]\n{render_task_list(state)}\n")
        await asyncio.sleep(interval)
    return "Watch finished."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show missions with their countdowns.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a mission (prompts for name and deadline).")
registry.register("toggle", cmd_toggle, help_text="Mark a mission done/not done: /toggle <n>.", aliases=["t"])
registry.register("edit", cmd_edit, help_text="Edit a mission's name and deadline: /edit <n>.")
registry.register("rm", cmd_delete, help_text="Delete a mission (asks first): /rm <n>.", aliases=["delete"])
registry.register("watch", cmd_watch, help_text="Live countdown for a while: /watch [seconds].")
registry.register("reload", cmd_reload, help_text="Reload all missions from the store.")
registry.register("status", cmd_status, help_text="Show store, counts and unsaved changes.")
