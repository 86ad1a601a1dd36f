# src/mission_control/tasks/local_store.py

from __future__ import annotations

import json
import logging
import os
import secrets
import string
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .errors import StoreError
from .task_models import TASK_FIELDS, Task

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits
_ID_LENGTH = 20


def _new_id() -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(_ID_LENGTH))


class LocalTaskStore:
    """
    In-process task store used when no Firestore project is configured (demos, tests).

    Same contract as FirestoreTaskStore:
    - generated 20-character ids
    - update/delete of a missing id raise StoreError
    - unknown update fields raise ValueError

    If `path` is given, documents are persisted as JSON after every write
    (temp file + os.replace) and loaded back on construction.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._docs: dict[str, dict[str, Any]] = {}
        if self._path is not None:
            self._docs = self._load(self._path)
        logger.info("LocalTaskStore ready path=%s total=%d", self._path, self.count_tasks())

    # ---- persistence ----

    @staticmethod
    def _load(path: Path) -> dict[str, dict[str, Any]]:
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text("utf-8"))
        except Exception:
            logger.exception("Failed to load local tasks from %s", path)
            return {}
        if not isinstance(data, dict):
            return {}

        docs: dict[str, dict[str, Any]] = {}
        for doc_id, doc in data.items():
            if not isinstance(doc_id, str) or not isinstance(doc, dict):
                continue
            docs[doc_id] = {
                "text": str(doc.get("text") or ""),
                "completed": bool(doc.get("completed", False)),
                "deadline": str(doc.get("deadline") or ""),
            }
        return docs

    def _commit(self, docs: dict[str, dict[str, Any]]) -> None:
        """Persist `docs`, then make them current; a failed write leaves the store unchanged."""
        if self._path is not None:
            self._save(self._path, docs)
        self._docs = docs

    @staticmethod
    def _save(path: Path, docs: dict[str, dict[str, Any]]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".tmp")
            tmp.write_text(json.dumps(docs, ensure_ascii=False, indent=2), "utf-8")
            os.replace(tmp, path)
        except OSError as e:
            raise StoreError("save", detail=str(e)) from e

    # ---- public API ----

    def count_tasks(self) -> int:
        return len(self._docs)

    async def list_all(self) -> list[Task]:
        return [
            Task(id=doc_id, text=doc["text"], completed=doc["completed"], deadline=doc["deadline"])
            for doc_id, doc in self._docs.items()
        ]

    async def create(self, *, text: str, completed: bool, deadline: str) -> str:
        task_id = _new_id()
        while task_id in self._docs:
            task_id = _new_id()
        task = Task(id=task_id, text=text, completed=bool(completed), deadline=deadline)
        self._commit({**self._docs, task_id: task.to_document()})
        logger.debug("Task created id=%s deadline=%s", task_id, deadline)
        return task_id

    async def update(self, task_id: str, fields: Mapping[str, Any]) -> None:
        unknown = set(fields) - TASK_FIELDS
        if unknown:
            raise ValueError(f"unknown task fields: {', '.join(sorted(unknown))}")
        doc = self._docs.get(task_id)
        if doc is None:
            raise StoreError("update", task_id, "document not found")
        if not fields:
            return
        docs = dict(self._docs)
        docs[task_id] = {**doc, **fields}
        self._commit(docs)
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(fields))

    async def delete(self, task_id: str) -> None:
        if task_id not in self._docs:
            raise StoreError("delete", task_id, "document not found")
        self._commit({k: v for k, v in self._docs.items() if k != task_id})
        logger.debug("Task deleted id=%s", task_id)
