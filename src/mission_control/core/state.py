# src/mission_control/core/state.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from ..tasks.controller import TaskListController
from .ports import TaskRepo


@dataclass
class AppState:
    # Settings object (config.Settings or a test double with the same attributes).
    settings: object

    store: TaskRepo
    controller: TaskListController

    # Countdown loop task, owned by the composition root.
    countdown_task: asyncio.Task[None] | None = None
