# src/mission_control/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.ports import NoticeLevel
from ..core.state import AppState
from ..tasks.task_models import DEADLINE_FORMAT, TaskFields, validate_fields

logger = logging.getLogger(__name__)

LineReader = Callable[[str], Awaitable[str]]
Printer = Callable[[str], None]

CANCEL_WORD = "/cancel"

_NOTICE_ICONS = {
    NoticeLevel.SUCCESS: "[OK]",
    NoticeLevel.ERROR: "[ERROR]",
    NoticeLevel.INFO: "[i]",
}


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def _deliver(fut: asyncio.Future[str], line: str | None, exc: BaseException | None) -> None:
    if fut.done():
        return
    if exc is not None:
        fut.set_exception(exc)
    else:
        fut.set_result(line or "")


async def read_line(prompt: str) -> str:
    """
    input() without blocking the event loop (the countdown keeps ticking).

    The reader is a daemon thread so a pending prompt never holds up interpreter exit.
    EOFError / KeyboardInterrupt from input() are re-raised in the caller.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def _worker() -> None:
        try:
            line = input(prompt)
        except BaseException as e:  # noqa: BLE001 - forwarded to the awaiting coroutine
            line, exc = None, e
        else:
            exc = None
        try:
            loop.call_soon_threadsafe(_deliver, fut, line, exc)
        except RuntimeError:
            # Loop already closed (shutdown while the prompt was open).
            pass

    threading.Thread(target=_worker, name="console-input", daemon=True).start()
    return await fut


class ConsolePrompter:
    """
    Console implementation of the dialog port.

    - ask_fields: asks for a mission name and a deadline, re-prompts with a
      validation message until both are usable; "/cancel" or EOF cancels
    - confirm: y/N question
    - notify: timestamped one-line notice
    """

    def __init__(self, reader: LineReader = read_line, printer: Printer = _print_ts) -> None:
        self._read = reader
        self._print = printer

    async def _ask(self, label: str, default: str | None) -> str | None:
        prompt = f"{label} [{default}]: " if default else f"{label}: "
        try:
            raw = await self._read(prompt)
        except EOFError:
            return None
        value = raw.strip()
        if value.lower() == CANCEL_WORD:
            return None
        if not value and default:
            return default
        return value

    async def ask_fields(
        self,
        *,
        title: str,
        initial: TaskFields | None = None,
    ) -> TaskFields | None:
        self._print(f"== {title} == (type {CANCEL_WORD} to abort)")
        example = datetime.now().strftime(DEADLINE_FORMAT)

        while True:
            text = await self._ask("Mission name", initial.text if initial else None)
            if text is None:
                self._print("Aborted.")
                return None

            deadline = await self._ask(
                f"Deadline (e.g. {example})", initial.deadline if initial else None
            )
            if deadline is None:
                self._print("Aborted.")
                return None

            problem = validate_fields(text, deadline)
            if problem:
                self._print(f"[!] {problem}")
                continue
            return TaskFields(text=text, deadline=deadline)

    async def confirm(self, *, title: str, text: str) -> bool:
        try:
            raw = await self._read(f"{title} {text} [y/N]: ")
        except EOFError:
            return False
        return raw.strip().lower() in ("y", "yes")

    def notify(self, *, title: str, text: str, level: NoticeLevel = NoticeLevel.INFO) -> None:
        icon = _NOTICE_ICONS.get(level, "[i]")
        self._print(f"{icon} {title} {text}")


async def run_console_loop(state: AppState, *, reader: LineReader = read_line) -> None:
    logger.info("Console connector started.")
    app_name = str(getattr(state.settings, "app_name", "Mission Control"))
    _print_ts(f"[{app_name}] Use /help for commands. Use /exit to quit.\n")

    def emit(text: str) -> None:
        print(text, flush=True)

    first = await command_registry.handle(state, "/list")
    if first:
        print(first, flush=True)

    while True:
        try:
            user_input = (await reader(">>> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit", "exit", "quit"):
            logger.info("Console exit command received.")
            break

        # Bare words are accepted as commands too ("list" == "/list").
        line = user_input if user_input.startswith("/") else "/" + user_input

        try:
            response = await command_registry.handle(state, line, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response:
            print(response, flush=True)

    logger.info("Console connector finished.")
