# src/mission_control/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the task store backend (Firestore, or the local JSON store),
- wires store + prompter into the TaskListController and AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import Prompter, TaskRepo
from ..core.state import AppState
from ..tasks.controller import TaskListController
from ..tasks.local_store import LocalTaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.local_store_path.parent.mkdir(parents=True, exist_ok=True)


def build_store(settings) -> TaskRepo:
    """
    Build the configured task store.

    Falls back to the local store when the Firestore client cannot be
    constructed (no credentials / project), so the app still runs for demos.
    """
    if settings.store_backend == "local":
        return LocalTaskStore(settings.local_store_path)

    try:
        from ..tasks.task_store import FirestoreTaskStore

        return FirestoreTaskStore.from_settings(settings)
    except Exception:
        logger.warning(
            "Firestore unavailable; falling back to local store at %s",
            settings.local_store_path,
            exc_info=True,
        )
        return LocalTaskStore(settings.local_store_path)


def create_initial_state(*, prompter: Prompter, settings=None, store: TaskRepo | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the store) injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if store is None:
        store = build_store(settings)

    controller = TaskListController(store, prompter)
    return AppState(settings=settings, store=store, controller=controller)
