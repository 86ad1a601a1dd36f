# src/mission_control/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

# Fields a stored task document may carry (besides the backend id).
TASK_FIELDS: frozenset[str] = frozenset({"text", "completed", "deadline"})

DEADLINE_FORMAT = "%Y-%m-%dT%H:%M"

FIELDS_REQUIRED_MESSAGE = "Both fields are required."
DEADLINE_INVALID_MESSAGE = "Deadline must look like YYYY-MM-DDTHH:MM."


class SyncStatus(StrEnum):
    """
    Local-only sync state of a task.

    Never written to the store:
    - SYNCED: local copy matches what the store last confirmed
    - PENDING: an optimistic change is in flight
    - FAILED: the last write failed; local copy diverges until the next reload
    """

    PENDING = "pending"
    SYNCED = "synced"
    FAILED = "failed"


@dataclass(slots=True)
class Task:
    id: str
    text: str
    deadline: str
    completed: bool = False
    sync: SyncStatus = SyncStatus.SYNCED

    def to_document(self) -> dict[str, object]:
        return {"text": self.text, "completed": self.completed, "deadline": self.deadline}


@dataclass(slots=True, frozen=True)
class TaskFields:
    """Validated values returned by the add/edit dialogs."""

    text: str
    deadline: str


def parse_deadline(raw: str | datetime) -> datetime:
    """Parse an ISO local datetime string ("2025-01-31T18:30"). Raises ValueError."""
    if isinstance(raw, datetime):
        return raw
    value = (raw or "").strip()
    if not value:
        raise ValueError("empty deadline")
    return datetime.fromisoformat(value)


def validate_fields(text: str | None, deadline: str | None) -> str | None:
    """Return a user-facing validation message, or None when the fields are usable."""
    if not (text or "").strip() or not (deadline or "").strip():
        return FIELDS_REQUIRED_MESSAGE
    try:
        parse_deadline(deadline or "")
    except ValueError:
        return DEADLINE_INVALID_MESSAGE
    return None
