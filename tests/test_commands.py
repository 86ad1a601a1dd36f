# tests/test_commands.py

from __future__ import annotations

import pytest

from mission_control.cli.commands import CommandRegistry, registry
from mission_control.tasks.task_models import SyncStatus, Task

DEADLINE = "2030-01-01T10:00"


@pytest.mark.asyncio
async def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    called: list[list[str]] = []

    async def handler(state, args, emit):
        called.append(args)
        if emit is not None:
            emit("note")
        return "done"

    reg.register("go", handler, "go somewhere", aliases=["g"])

    assert await reg.handle(state, "/go x y") == "done"
    assert await reg.handle(state, "/G z", emit=lambda _: None) == "done"
    assert called == [["x", "y"], ["z"]]
    assert "/go - go somewhere" in reg.build_help()


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")
    assert "Empty command" in (await reg.handle(state, "/") or "")


@pytest.mark.asyncio
async def test_list_renders_tasks_with_countdowns(state, repo) -> None:
    repo.docs["a"] = {"text": "Launch rocket", "completed": False, "deadline": DEADLINE}
    repo.docs["b"] = {"text": "Old chore", "completed": True, "deadline": "2000-01-01T00:00"}
    await state.controller.initialize()

    before_tick = await registry.handle(state, "/list")
    assert before_tick is not None
    assert "Calculating..." in before_tick

    state.controller.recompute()
    out = await registry.handle(state, "/ls")
    assert out is not None
    assert "1. [ ] Launch rocket <ACTIVE>" in out
    assert "2. [x] Old chore <DONE>" in out
    assert "Deadline: 2030-01-01 10:00" in out


@pytest.mark.asyncio
async def test_list_empty(state) -> None:
    assert "No missions yet" in (await registry.handle(state, "/list") or "")


@pytest.mark.asyncio
async def test_toggle_by_position(state, repo) -> None:
    repo.docs["a"] = {"text": "Launch rocket", "completed": False, "deadline": DEADLINE}
    await state.controller.initialize()

    out = await registry.handle(state, "/toggle 1")
    assert out == 'Mission "Launch rocket" marked done.'
    await state.controller.wait_pending()
    assert repo.docs["a"]["completed"] is True


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("/toggle", "Usage"),
        ("/toggle x", "Invalid task number."),
        ("/toggle 5", "No task #5."),
        ("/edit 0", "No task #0."),
    ],
)
async def test_position_errors(state, line: str, expected: str) -> None:
    assert expected in (await registry.handle(state, line) or "")


@pytest.mark.asyncio
async def test_rm_asks_before_deleting(state, repo, prompter) -> None:
    repo.docs["a"] = {"text": "Launch rocket", "completed": False, "deadline": DEADLINE}
    await state.controller.initialize()

    await registry.handle(state, "/rm 1")
    assert "a" in repo.docs

    prompter.confirmations.append(True)
    await registry.handle(state, "/delete 1")
    assert "a" not in repo.docs
    assert state.controller.tasks == []


@pytest.mark.asyncio
async def test_status_reports_unsaved_changes(state, repo) -> None:
    repo.docs["a"] = {"text": "Launch rocket", "completed": False, "deadline": DEADLINE}
    await state.controller.initialize()
    state.controller.tasks[0].sync = SyncStatus.FAILED

    out = await registry.handle(state, "/status") or ""

    assert "Store: local" in out
    assert "Missions: 1 total, 0 done" in out
    assert "Not saved: 1" in out


@pytest.mark.asyncio
async def test_watch_emits_each_tick(state) -> None:
    state.controller.tasks = [Task(id="a", text="Launch", deadline=DEADLINE)]
    frames: list[str] = []

    out = await registry.handle(state, "/watch 1", emit=frames.append)

    assert out == "Watch finished."
    assert len(frames) >= 2
    assert "Launch" in frames[0]
    assert "Usage" in (await registry.handle(state, "/watch soon") or "")
