from __future__ import annotations

import threading

import pytest

from task_api.storage.errors import TaskNotFoundError
from task_api.storage.memory import InMemoryTaskStorage


def test_returned_tasks_are_copies() -> None:
    storage = InMemoryTaskStorage()
    task = storage.create_task("original")

    task.title = "mutated outside storage"

    assert storage.get_task(task.id).title == "original"


def test_patch_ignores_fields_left_as_none() -> None:
    storage = InMemoryTaskStorage()
    task = storage.create_task("keep title", description="keep description")

    patched = storage.patch_task(task.id, title=None, completed=True)

    assert patched.title == "keep title"
    assert patched.description == "keep description"
    assert patched.completed is True


def test_delete_twice_raises_not_found() -> None:
    storage = InMemoryTaskStorage()
    task = storage.create_task("short lived")
    storage.delete_task(task.id)

    with pytest.raises(TaskNotFoundError):
        storage.delete_task(task.id)


def test_get_waits_for_writers_holding_the_lock() -> None:
    storage = InMemoryTaskStorage()
    task = storage.create_task("guarded")
    results: list[object] = []
    reader = threading.Thread(target=lambda: results.append(storage.get_task(task.id)))

    with storage._lock:
        reader.start()
        reader.join(timeout=0.2)
        assert reader.is_alive()
        assert results == []

    reader.join(timeout=5)
    assert not reader.is_alive()
    assert results == [task]
