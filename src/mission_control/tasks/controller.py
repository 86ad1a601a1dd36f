# src/mission_control/tasks/controller.py

"""
Task list controller.

Holds the in-memory task list, mirrors mutations to the injected store and
keeps the per-task countdown strings.

Write policy:
- add / edit / delete: prompt, call the store, then mirror into memory on success
- toggle: optimistic (memory first), the store write runs in the background
- failures are logged and reported through the prompter; nothing is rolled back,
  failed optimistic writes are tagged SyncStatus.FAILED until the next reload
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from ..core.ports import NoticeLevel, Prompter, TaskRepo
from .countdown import CALCULATING, remaining
from .task_models import SyncStatus, Task, TaskFields, validate_fields

logger = logging.getLogger(__name__)


class TaskListController:
    def __init__(
            self,
            store: TaskRepo,
            prompter: Prompter,
            *,
            clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.store = store
        self.prompter = prompter
        self._clock = clock

        self.tasks: list[Task] = []
        self.time_remaining: dict[str, str] = {}
        self.busy: bool = False

        self._pending_writes: set[asyncio.Task[None]] = set()
        # Last toggle write per task id; each new write waits for it so writes land in order.
        self._write_chain: dict[str, asyncio.Task[None]] = {}

    # ---- queries ----

    def get(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def countdown_for(self, task_id: str) -> str:
        return self.time_remaining.get(task_id, CALCULATING)

    def diverged(self) -> list[Task]:
        return [t for t in self.tasks if t.sync == SyncStatus.FAILED]

    # ---- loading ----

    async def initialize(self) -> None:
        """Load every task once; on failure log and leave the list empty."""
        try:
            tasks = await self.store.list_all()
        except Exception:
            logger.exception("Error fetching tasks")
            self.tasks = []
            return
        self.tasks = list(tasks)
        logger.info("Loaded %d tasks", len(self.tasks))

    async def reload(self) -> bool:
        """Replace local state with the store's (converges diverged tasks)."""
        try:
            tasks = await self.store.list_all()
        except Exception:
            logger.exception("Error reloading tasks")
            self.prompter.notify(title="Error", text="Failed to reload missions.", level=NoticeLevel.ERROR)
            return False
        self.tasks = list(tasks)
        live = {t.id for t in self.tasks}
        self.time_remaining = {k: v for k, v in self.time_remaining.items() if k in live}
        logger.info("Reloaded %d tasks", len(self.tasks))
        return True

    # ---- mutations ----

    async def add(self) -> Task | None:
        """
        Prompt for text + deadline and create the task.

        While a create is in flight the action is disabled: returns None without prompting.
        """
        if self.busy:
            logger.info("Add ignored: a create is already in flight")
            return None

        fields = await self.prompter.ask_fields(title="Initialize Task")
        if fields is None:
            return None
        problem = validate_fields(fields.text, fields.deadline)
        if problem:
            logger.info("Add rejected: %s", problem)
            return None
        if self.busy:
            return None

        self.busy = True
        try:
            task_id = await self.store.create(text=fields.text, completed=False, deadline=fields.deadline)
            task = Task(id=task_id, text=fields.text, deadline=fields.deadline, completed=False)
            self.tasks.append(task)
            self.time_remaining[task.id] = remaining(task.deadline, self._clock())
            logger.info("Task added id=%s", task_id)
            self.prompter.notify(title="Success!", text="Mission deployed.", level=NoticeLevel.SUCCESS)
            return task
        except Exception:
            logger.exception("Error adding task")
            self.prompter.notify(title="Error", text="Failed to deploy mission.", level=NoticeLevel.ERROR)
            return None
        finally:
            self.busy = False

    def toggle(self, task_id: str) -> asyncio.Task[None] | None:
        """
        Flip `completed` in memory right away, then push it to the store in the background.

        Returns the background write (await it to observe the outcome) or None for an unknown id.
        Must be called from a running event loop.
        """
        task = self.get(task_id)
        if task is None:
            logger.warning("Toggle: unknown task id=%s", task_id)
            return None

        task.completed = not task.completed
        task.sync = SyncStatus.PENDING
        new_value = task.completed

        previous = self._write_chain.get(task.id)
        write = asyncio.get_running_loop().create_task(self._push_completed(task, new_value, previous))
        self._write_chain[task.id] = write
        self._pending_writes.add(write)
        write.add_done_callback(self._pending_writes.discard)
        write.add_done_callback(lambda done: self._release_chain(task.id, done))
        return write

    def _release_chain(self, task_id: str, done: asyncio.Task[None]) -> None:
        if self._write_chain.get(task_id) is done:
            del self._write_chain[task_id]

    async def _push_completed(self, task: Task, value: bool, previous: asyncio.Task[None] | None) -> None:
        if previous is not None:
            await asyncio.wait({previous})

        try:
            await self.store.update(task.id, {"completed": value})
        except Exception:
            logger.exception("Error updating task status id=%s", task.id)
            self.prompter.notify(title="Error", text="Failed to update task status.", level=NoticeLevel.ERROR)
            failed = True
        else:
            failed = False

        # Only the last write in the chain settles the sync state.
        if self._write_chain.get(task.id) is asyncio.current_task():
            task.sync = SyncStatus.FAILED if failed else SyncStatus.SYNCED

    async def edit(self, task_id: str) -> bool:
        task = self.get(task_id)
        if task is None:
            logger.warning("Edit: unknown task id=%s", task_id)
            return False

        fields = await self.prompter.ask_fields(
            title="Edit Mission",
            initial=TaskFields(text=task.text, deadline=task.deadline),
        )
        if fields is None or validate_fields(fields.text, fields.deadline):
            return False

        try:
            await self.store.update(task_id, {"text": fields.text, "deadline": fields.deadline})
        except Exception:
            logger.exception("Error updating task id=%s", task_id)
            self.prompter.notify(title="Error", text="Update failed.", level=NoticeLevel.ERROR)
            return False

        # The task may have been deleted while the update was in flight.
        current = self.get(task_id)
        if current is not None:
            current.text = fields.text
            current.deadline = fields.deadline
            self.time_remaining[task_id] = remaining(current.deadline, self._clock())
        self.prompter.notify(title="Updated!", text="Mission parameters updated.", level=NoticeLevel.SUCCESS)
        return True

    async def delete(self, task_id: str) -> bool:
        if self.get(task_id) is None:
            logger.warning("Delete: unknown task id=%s", task_id)
            return False

        confirmed = await self.prompter.confirm(title="Delete Mission?", text="This cannot be undone.")
        if not confirmed:
            return False

        try:
            await self.store.delete(task_id)
        except Exception:
            logger.exception("Error deleting task id=%s", task_id)
            self.prompter.notify(title="Error", text="Could not delete task.", level=NoticeLevel.ERROR)
            return False

        self.tasks = [t for t in self.tasks if t.id != task_id]
        self.time_remaining.pop(task_id, None)
        self.prompter.notify(title="Deleted!", text="Mission removed from database.", level=NoticeLevel.SUCCESS)
        return True

    # ---- countdown ----

    def recompute(self, now: datetime | None = None) -> dict[str, str]:
        """Rebuild the countdown map from in-memory deadlines (no I/O)."""
        if now is None:
            now = self._clock()
        self.time_remaining = {t.id: remaining(t.deadline, now) for t in self.tasks}
        return self.time_remaining

    async def wait_pending(self) -> None:
        """Wait for background toggle writes (they are never cancelled)."""
        if self._pending_writes:
            await asyncio.gather(*list(self._pending_writes), return_exceptions=True)
