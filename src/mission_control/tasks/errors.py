# src/mission_control/tasks/errors.py

from __future__ import annotations


class StoreError(RuntimeError):
    """A remote task operation failed (network, backend, or missing document)."""

    def __init__(self, operation: str, task_id: str | None = None, detail: str = "") -> None:
        self.operation = operation
        self.task_id = task_id
        msg = f"{operation} failed"
        if task_id:
            msg += f" task_id={task_id}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
