# tests/test_task_service.py

from __future__ import annotations

import asyncio

import pytest

from tickbox.tasks.task_models import InvalidInput, Task
from tickbox.tasks.task_service import TaskService
from tickbox.tasks.task_state import TaskListState
from tickbox.tasks.task_store import TaskStore

from .fakes import BrokenTaskRepo, FakeTaskRepo

SEED = [
    Task(id=1, description="Buy milk"),
    Task(id=2, description="Call mom", is_completed=True),
    Task(id=3, description="Pay rent"),
]


@pytest.mark.asyncio
async def test_list_is_empty_until_initialized() -> None:
    service = TaskService(FakeTaskRepo(SEED))
    assert service.tasks == ()
    assert service.state.loaded is False
    assert service.state.error is None

    await service.initialize()

    assert list(service.tasks) == SEED
    assert service.state.loaded is True


@pytest.mark.asyncio
async def test_add_task_round_trip(task_store: TaskStore) -> None:
    service = TaskService(task_store)
    await service.initialize()

    task_id = await service.add_task("X")

    assert list(service.tasks) == [Task(id=task_id, description="X", is_completed=False)]
    assert task_store.get_all_tasks() == list(service.tasks)


@pytest.mark.asyncio
async def test_add_task_keeps_text_and_rejects_blank() -> None:
    repo = FakeTaskRepo()
    service = TaskService(repo)

    await service.add_task("  Walk   the dog  ")
    assert service.tasks[0].description == "  Walk   the dog  "

    for blank in ("", "   ", None):
        with pytest.raises(InvalidInput):
            await service.add_task(blank)  # type: ignore[arg-type]
    assert repo.writes == 1


@pytest.mark.asyncio
async def test_toggle_twice_restores_task(task_store: TaskStore) -> None:
    service = TaskService(task_store)
    await service.add_task("Walk the dog")
    original = service.tasks[0]

    assert await service.toggle_task_completion(original) is True
    toggled = service.find(original.id)
    assert toggled == Task(id=original.id, description="Walk the dog", is_completed=True)

    assert await service.toggle_task_completion(toggled) is True
    assert service.find(original.id) == original
    assert task_store.get_task(original.id) == original


@pytest.mark.asyncio
async def test_update_description_keeps_completion(seeded_store: TaskStore) -> None:
    service = TaskService(seeded_store)
    await service.initialize()

    assert await service.update_task(service.find(2), "Call dad") is True

    assert seeded_store.get_task(2) == Task(id=2, description="Call dad", is_completed=True)
    assert service.find(2) == Task(id=2, description="Call dad", is_completed=True)


@pytest.mark.asyncio
async def test_update_rejects_blank_without_writing() -> None:
    repo = FakeTaskRepo(SEED)
    service = TaskService(repo)
    await service.initialize()

    with pytest.raises(InvalidInput):
        await service.update_task(SEED[0], "  ")
    assert repo.writes == 0
    assert service.find(1) == SEED[0]


@pytest.mark.asyncio
async def test_delete_task_reloads_list() -> None:
    repo = FakeTaskRepo(SEED)
    service = TaskService(repo)
    await service.initialize()

    assert await service.delete_task(SEED[1]) is True

    assert [t.id for t in service.tasks] == [1, 3]
    assert 2 not in repo.tasks


@pytest.mark.asyncio
async def test_stale_task_is_a_reported_noop() -> None:
    repo = FakeTaskRepo(SEED)
    service = TaskService(repo)
    await service.initialize()
    stale = Task(id=42, description="gone")

    assert await service.toggle_task_completion(stale) is False
    assert await service.update_task(stale, "still gone") is False
    assert await service.delete_task(stale) is False

    assert list(service.tasks) == SEED
    assert service.state.error is None


@pytest.mark.asyncio
async def test_delete_all_clears_store_and_list_without_reload() -> None:
    repo = FakeTaskRepo(SEED)
    service = TaskService(repo)
    await service.initialize()
    reads_before = repo.reads

    assert await service.delete_all_tasks() == 3

    assert service.tasks == ()
    assert repo.get_all_tasks() == []
    assert repo.reads == reads_before + 1  # only the check above


@pytest.mark.asyncio
async def test_every_mutation_reloads_full_list() -> None:
    repo = FakeTaskRepo()
    service = TaskService(repo)

    await service.add_task("a")
    await service.add_task("b")
    await service.toggle_task_completion(service.find(1))

    assert repo.reads == 3
    # A row written behind the service's back shows up after the next mutation.
    repo.tasks[99] = Task(id=99, description="external")
    await service.delete_task(service.find(2))
    assert [t.id for t in service.tasks] == [1, 99]


@pytest.mark.asyncio
async def test_listeners_see_each_change_and_can_unsubscribe() -> None:
    state = TaskListState()
    service = TaskService(FakeTaskRepo(), state=state)
    seen: list[tuple[int, ...]] = []
    unsubscribe = state.subscribe(lambda s: seen.append(tuple(t.id for t in s.tasks)))

    def broken_listener(_s: TaskListState) -> None:
        raise RuntimeError("listener bug")

    state.subscribe(broken_listener)

    await service.add_task("a")
    await service.add_task("b")
    unsubscribe()
    await service.delete_all_tasks()

    assert seen == [(1,), (1, 2)]
    assert service.state is state


@pytest.mark.asyncio
async def test_storage_failure_sets_error_and_propagates() -> None:
    service = TaskService(BrokenTaskRepo(SEED))
    await service.initialize()
    errors: list[str | None] = []
    service.state.subscribe(lambda s: errors.append(s.error))

    with pytest.raises(OSError):
        await service.add_task("never stored")

    assert service.state.error is not None
    assert "disk I/O error" in service.state.error
    assert errors == [service.state.error]
    assert list(service.tasks) == SEED

    with pytest.raises(OSError):
        await service.delete_all_tasks()
    assert list(service.tasks) == SEED

    # Next successful operation clears the error.
    await service.reload()
    assert service.state.error is None


@pytest.mark.asyncio
async def test_concurrent_mutations_are_serialized() -> None:
    repo = FakeTaskRepo(write_delay=0.02)
    service = TaskService(repo)
    snapshots: list[int] = []
    service.state.subscribe(lambda s: snapshots.append(len(s.tasks)))

    ids = await asyncio.gather(*(service.add_task(f"task {i}") for i in range(5)))

    assert sorted(ids) == [1, 2, 3, 4, 5]
    assert repo.max_active_writes == 1
    # Each reload lands in order: the list only ever grows.
    assert snapshots == [1, 2, 3, 4, 5]
    assert len(service.tasks) == 5


@pytest.mark.asyncio
async def test_exact_text_round_trips_through_sqlite(task_store: TaskStore) -> None:
    service = TaskService(task_store)

    task_id = await service.add_task("  X ")
    assert task_store.get_task(task_id) == Task(id=task_id, description="  X ")

    assert await service.update_task(service.find(task_id), "Buy   2  milk\t") is True
    assert task_store.get_task(task_id) == Task(id=task_id, description="Buy   2  milk\t")
    assert service.find(task_id) == task_store.get_task(task_id)
