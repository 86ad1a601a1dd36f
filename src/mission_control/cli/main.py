# src/mission_control/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, loads the task list once, starts the
one-second countdown loop and runs the console REPL until /exit.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import ConsolePrompter, run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.countdown import run_countdown

logger = logging.getLogger(__name__)


async def _shutdown(state: AppState) -> None:
    """Release the countdown timer; let in-flight store writes finish (they are never cancelled)."""
    task = state.countdown_task
    if task is not None:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        state.countdown_task = None

    try:
        await state.controller.wait_pending()
    except Exception:
        logger.exception("Waiting for pending writes failed.")


async def run_app(settings) -> None:
    state = create_initial_state(settings=settings, prompter=ConsolePrompter())

    await state.controller.initialize()
    state.controller.recompute()

    state.countdown_task = asyncio.create_task(
        run_countdown(state.controller, interval_seconds=settings.tick_interval_seconds)
    )
    try:
        await run_console_loop(state)
    finally:
        await _shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (store=%s)...", settings.app_name, settings.store_backend)

    try:
        asyncio.run(run_app(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")

    logger.info("Bye.")


if __name__ == "__main__":
    main()
