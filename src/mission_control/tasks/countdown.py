# src/mission_control/tasks/countdown.py

from __future__ import annotations

"""
Deadline countdown.

- remaining(): pure "time left" formatter
- run_countdown(): one-second loop that asks the controller to recompute
  every loaded task's countdown string (no store I/O)

To stop the loop, cancel the coroutine/task.
"""

import asyncio
import logging
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .task_models import parse_deadline

if TYPE_CHECKING:
    from .controller import TaskListController

logger = logging.getLogger(__name__)

EXPIRED = "⏳ Time Expired"
INVALID_DEADLINE = "Invalid deadline"
CALCULATING = "Calculating..."

_MS_PER_HOUR = 3_600_000
_MS_PER_MINUTE = 60_000
_MS_PER_SECOND = 1_000


def _align(deadline: datetime, now: datetime) -> tuple[datetime, datetime]:
    # Naive values are local time; mixing naive and aware goes through the local zone.
    if deadline.tzinfo is None and now.tzinfo is not None:
        deadline = deadline.astimezone()
    elif deadline.tzinfo is not None and now.tzinfo is None:
        now = now.astimezone()
    return deadline, now


def remaining(deadline: str | datetime, now: datetime | None = None) -> str:
    """
    Format the time left until `deadline` as "{h}h {m}m {s}s".

    Hours are not wrapped into days. Non-positive differences return EXPIRED;
    an unparseable deadline returns INVALID_DEADLINE.
    """
    try:
        deadline_dt = parse_deadline(deadline)
    except ValueError:
        logger.debug("Unparseable deadline: %r", deadline)
        return INVALID_DEADLINE

    if now is None:
        now = datetime.now()

    deadline_dt, now = _align(deadline_dt, now)
    diff_ms = (deadline_dt - now) // timedelta(milliseconds=1)
    if diff_ms <= 0:
        return EXPIRED

    hours = diff_ms // _MS_PER_HOUR
    minutes = (diff_ms % _MS_PER_HOUR) // _MS_PER_MINUTE
    seconds = (diff_ms % _MS_PER_MINUTE) // _MS_PER_SECOND
    return f"{hours}h {minutes}m {seconds}s"


async def run_countdown(
        controller: TaskListController,
        *,
        interval_seconds: float = 1.0,
) -> None:
    """
    Recompute every task's countdown once per interval until cancelled.

    A failing tick is logged and the loop keeps going.
    """
    sleep_s = max(0.01, float(interval_seconds))
    logger.debug("Countdown loop started interval=%.2fs", sleep_s)

    while True:
        try:
            controller.recompute()
        except Exception:
            logger.exception("countdown recompute failed")

        await asyncio.sleep(sleep_s)
