# tests/test_task_store.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
from google.api_core import exceptions as gexc

from mission_control.tasks.errors import StoreError
from mission_control.tasks.local_store import LocalTaskStore
from mission_control.tasks.task_store import FirestoreTaskStore

from .fakes import ExistsOption, FakeFirestoreClient

DEADLINE = "2030-01-01T10:00"


# ---- Firestore adapter ----


@pytest.mark.asyncio
async def test_firestore_create_list_update_delete() -> None:
    client = FakeFirestoreClient()
    store = FirestoreTaskStore(client, collection="tasks")  # type: ignore[arg-type]

    task_id = await store.create(text="Launch", completed=False, deadline=DEADLINE)
    assert client.collections["tasks"].docs[task_id] == {"text": "Launch", "completed": False, "deadline": DEADLINE}

    await store.update(task_id, {"completed": True})
    tasks = await store.list_all()
    assert len(tasks) == 1
    assert tasks[0].id == task_id
    assert tasks[0].completed is True
    assert tasks[0].text == "Launch"

    await store.delete(task_id)
    assert await store.list_all() == []
    assert client.collections["tasks"].delete_options == [ExistsOption(exists=True)]


@pytest.mark.asyncio
async def test_firestore_coerces_partial_documents() -> None:
    client = FakeFirestoreClient()
    client.collection("tasks").docs.update({"x": {"text": "only text"}, "y": None})
    store = FirestoreTaskStore(client)  # type: ignore[arg-type]

    tasks = {t.id: t for t in await store.list_all()}

    assert tasks["x"].text == "only text"
    assert tasks["x"].completed is False
    assert tasks["x"].deadline == ""
    assert tasks["y"].text == ""


@pytest.mark.asyncio
async def test_firestore_missing_document_raises_store_error() -> None:
    store = FirestoreTaskStore(FakeFirestoreClient())  # type: ignore[arg-type]

    with pytest.raises(StoreError) as update_err:
        await store.update("nope", {"text": "x"})
    assert isinstance(update_err.value.__cause__, gexc.NotFound)
    assert update_err.value.task_id == "nope"

    with pytest.raises(StoreError) as delete_err:
        await store.delete("nope")
    assert delete_err.value.operation == "delete"


@pytest.mark.asyncio
async def test_firestore_list_failure_is_wrapped() -> None:
    client = FakeFirestoreClient()
    client.collection("tasks").fail_stream = True
    store = FirestoreTaskStore(client)  # type: ignore[arg-type]

    with pytest.raises(StoreError) as err:
        await store.list_all()
    assert isinstance(err.value.__cause__, gexc.ServiceUnavailable)


@pytest.mark.asyncio
async def test_firestore_rejects_unknown_fields() -> None:
    client = FakeFirestoreClient()
    store = FirestoreTaskStore(client)  # type: ignore[arg-type]
    task_id = await store.create(text="Launch", completed=False, deadline=DEADLINE)

    with pytest.raises(ValueError):
        await store.update(task_id, {"owner": "me"})


# ---- local store ----


@pytest.mark.asyncio
async def test_local_store_crud_and_errors() -> None:
    store = LocalTaskStore()

    task_id = await store.create(text="Launch", completed=False, deadline=DEADLINE)
    assert len(task_id) == 20

    await store.update(task_id, {"text": "Relaunch", "deadline": "2031-01-01T00:00"})
    (task,) = await store.list_all()
    assert (task.text, task.deadline, task.completed) == ("Relaunch", "2031-01-01T00:00", False)

    with pytest.raises(ValueError):
        await store.update(task_id, {"priority": 1})

    await store.delete(task_id)
    assert store.count_tasks() == 0

    with pytest.raises(StoreError):
        await store.delete(task_id)
    with pytest.raises(StoreError):
        await store.update(task_id, {"completed": True})


@pytest.mark.asyncio
async def test_local_store_persists_json(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "tasks.json"
    first = LocalTaskStore(path)
    keep = await first.create(text="Keep", completed=False, deadline=DEADLINE)
    drop = await first.create(text="Drop", completed=True, deadline=DEADLINE)
    await first.delete(drop)

    second = LocalTaskStore(path)
    tasks = await second.list_all()

    assert [t.id for t in tasks] == [keep]
    assert tasks[0].text == "Keep"


def test_local_store_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    path.write_text("{not json", "utf-8")

    assert LocalTaskStore(path).count_tasks() == 0


@pytest.mark.asyncio
async def test_local_store_failed_save_leaves_state_unchanged(tmp_path: Path) -> None:
    path = tmp_path / "tasks.json"
    store = LocalTaskStore(path)
    task_id = await store.create(text="Launch", completed=False, deadline=DEADLINE)

    # A directory where the JSON file belongs makes every later save fail.
    path.unlink()
    path.mkdir()

    with pytest.raises(StoreError):
        await store.create(text="Ghost", completed=False, deadline=DEADLINE)
    with pytest.raises(StoreError):
        await store.update(task_id, {"completed": True})
    with pytest.raises(StoreError):
        await store.delete(task_id)

    (task,) = await store.list_all()
    assert (task.id, task.text, task.completed) == (task_id, "Launch", False)
    assert store.count_tasks() == 1


# ---- client construction ----


def _firestore_settings(**overrides) -> SimpleNamespace:
    values = dict(
        tasks_collection="missions",
        firestore_project=None,
        firestore_database=None,
        firestore_credentials_path=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.mark.asyncio
async def test_from_settings_passes_project_database_and_credentials(monkeypatch, tmp_path: Path) -> None:
    from google.oauth2 import service_account

    from mission_control.tasks import task_store

    client = FakeFirestoreClient()
    client_kwargs: list[dict] = []
    creds_files: list[str] = []
    creds = object()

    def _client(**kwargs):
        client_kwargs.append(kwargs)
        return client

    def _from_file(filename, *args, **kwargs):
        creds_files.append(filename)
        return creds

    monkeypatch.setattr(task_store.firestore, "AsyncClient", _client)
    monkeypatch.setattr(service_account.Credentials, "from_service_account_file", _from_file)

    settings = _firestore_settings(
        firestore_project="demo-project",
        firestore_database="(default)",
        firestore_credentials_path=tmp_path / "sa.json",
    )
    store = FirestoreTaskStore.from_settings(settings)

    assert client_kwargs == [{"project": "demo-project", "database": "(default)", "credentials": creds}]
    assert creds_files == [str(tmp_path / "sa.json")]

    await store.create(text="Launch", completed=False, deadline=DEADLINE)
    assert list(client.collections) == ["missions"]


def test_from_settings_without_overrides_uses_ambient_defaults(monkeypatch) -> None:
    from mission_control.tasks import task_store

    client_kwargs: list[dict] = []

    def _client(**kwargs):
        client_kwargs.append(kwargs)
        return FakeFirestoreClient()

    monkeypatch.setattr(task_store.firestore, "AsyncClient", _client)

    FirestoreTaskStore.from_settings(_firestore_settings())

    assert client_kwargs == [{}]
