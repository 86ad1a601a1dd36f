# src/mission_control/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the task controller.

The controller depends on Protocols instead of concrete implementations.
This keeps the store backend and the presentation layer swappable and makes testing easier.
"""

from collections.abc import Mapping
from enum import StrEnum
from typing import Any, Protocol

from ..tasks.task_models import Task, TaskFields


class NoticeLevel(StrEnum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class TaskRepo(Protocol):
    """Remote task collection. Every failure is raised as StoreError."""

    async def list_all(self) -> list[Task]: ...

    async def create(self, *, text: str, completed: bool, deadline: str) -> str: ...

    async def update(self, task_id: str, fields: Mapping[str, Any]) -> None: ...

    async def delete(self, task_id: str) -> None: ...


class Prompter(Protocol):
    """
    Dialog port: "ask for fields, get back validated values or a cancellation".

    The connector decides how to render prompts and notices (console, GUI, ...).
    """

    async def ask_fields(
            self,
            *,
            title: str,
            initial: TaskFields | None = None,
    ) -> TaskFields | None: ...

    async def confirm(self, *, title: str, text: str) -> bool: ...

    def notify(self, *, title: str, text: str, level: NoticeLevel = NoticeLevel.INFO) -> None: ...
