# src/mission_control/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from google.cloud import firestore

from .errors import StoreError
from .task_models import TASK_FIELDS, Task

logger = logging.getLogger(__name__)


class FirestoreTaskStore:
    """
    Firestore task store.

    A thin adapter over one document collection (default "tasks"):
    - documents are shaped {text, completed, deadline}; the document id is the task id
    - full collection scan on every list (no caching, paging or filters)
    - every call is attempted exactly once; SDK errors are re-raised as StoreError
    """

    def __init__(self, client: firestore.AsyncClient, collection: str = "tasks") -> None:
        self._client = client
        self._collection_name = collection or "tasks"
        logger.info("FirestoreTaskStore ready collection=%s", self._collection_name)

    @classmethod
    def from_settings(cls, settings) -> FirestoreTaskStore:
        kwargs: dict[str, Any] = {}
        if settings.firestore_project:
            kwargs["project"] = settings.firestore_project
        if settings.firestore_database:
            kwargs["database"] = settings.firestore_database

        creds_path = settings.firestore_credentials_path
        if creds_path:
            from google.oauth2 import service_account

            kwargs["credentials"] = service_account.Credentials.from_service_account_file(
                str(Path(creds_path).expanduser())
            )

        return cls(firestore.AsyncClient(**kwargs), collection=settings.tasks_collection)

    # ---- low-level helpers ----

    def _collection(self):
        return self._client.collection(self._collection_name)

    @staticmethod
    def _doc_to_task(doc_id: str, data: Mapping[str, Any] | None) -> Task:
        data = data or {}
        return Task(
            id=str(doc_id),
            text=str(data.get("text") or ""),
            completed=bool(data.get("completed", False)),
            deadline=str(data.get("deadline") or ""),
        )

    @staticmethod
    def _check_fields(fields: Mapping[str, Any]) -> dict[str, Any]:
        unknown = set(fields) - TASK_FIELDS
        if unknown:
            raise ValueError(f"unknown task fields: {', '.join(sorted(unknown))}")
        return dict(fields)

    # ---- public API ----

    async def list_all(self) -> list[Task]:
        tasks: list[Task] = []
        try:
            async for snap in self._collection().stream():
                tasks.append(self._doc_to_task(snap.id, snap.to_dict()))
        except Exception as e:
            raise StoreError("list_all", detail=str(e)) from e
        logger.debug("Listed %d tasks from %s", len(tasks), self._collection_name)
        return tasks

    async def create(self, *, text: str, completed: bool, deadline: str) -> str:
        doc = {"text": text, "completed": bool(completed), "deadline": deadline}
        try:
            _update_time, ref = await self._collection().add(doc)
        except Exception as e:
            raise StoreError("create", detail=str(e)) from e
        logger.debug("Task created id=%s deadline=%s", ref.id, deadline)
        return str(ref.id)

    async def update(self, task_id: str, fields: Mapping[str, Any]) -> None:
        """Overwrite only the given fields. A missing document raises StoreError (NotFound)."""
        payload = self._check_fields(fields)
        if not payload:
            return
        try:
            await self._collection().document(task_id).update(payload)
        except Exception as e:
            raise StoreError("update", task_id, str(e)) from e
        logger.debug("Task updated id=%s fields=%s", task_id, sorted(payload))

    async def delete(self, task_id: str) -> None:
        """Delete the document; the exists precondition makes a missing id an error."""
        try:
            await self._collection().document(task_id).delete(
                option=self._client.write_option(exists=True)
            )
        except Exception as e:
            raise StoreError("delete", task_id, str(e)) from e
        logger.debug("Task deleted id=%s", task_id)
