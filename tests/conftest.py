# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from mission_control.cli.bootstrap import create_initial_state
from mission_control.core.state import AppState
from mission_control.tasks.controller import TaskListController

from .fakes import FakeTaskRepo, ScriptedPrompter


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="Mission Control (test)",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        store_backend="local",
        tasks_collection="tasks",
        local_store_path=tmp_path / "data" / "tasks.json",
        firestore_project=None,
        firestore_database=None,
        firestore_credentials_path=None,
        tick_interval_seconds=0.01,
    )


@pytest.fixture()
def repo() -> FakeTaskRepo:
    return FakeTaskRepo()


@pytest.fixture()
def prompter() -> ScriptedPrompter:
    return ScriptedPrompter()


@pytest.fixture()
def controller(repo: FakeTaskRepo, prompter: ScriptedPrompter) -> TaskListController:
    return TaskListController(repo, prompter)


@pytest.fixture()
def state(settings: SimpleNamespace, repo: FakeTaskRepo, prompter: ScriptedPrompter) -> AppState:
    """AppState wired with the in-memory repo and the scripted prompter."""
    return create_initial_state(settings=settings, prompter=prompter, store=repo)
