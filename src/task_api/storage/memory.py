"""In-memory storage backend for tests only."""

from __future__ import annotations

import threading

from task_api.storage.errors import TaskNotFoundError
from task_api.storage.models import Task


class InMemoryTaskStorage:
    """Simple in-memory implementation with the same id semantics as SQLite."""

    def __init__(self) -> None:
        self._tasks: dict[int, Task] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def migrate(self) -> None:
        return None

    def list_tasks(self) -> list[Task]:
        with self._lock:
            return [self._tasks[task_id].model_copy() for task_id in sorted(self._tasks)]

    def create_task(self, title: str, description: str | None = None) -> Task:
        with self._lock:
            task = Task(id=self._next_id, title=title, description=description, completed=False)
            # Ids are never handed out twice, even after deletes.
            self._next_id += 1
            self._tasks[task.id] = task
            return task.model_copy()

    def get_task(self, task_id: int) -> Task | None:
        with self._lock:
            task = self._tasks.get(task_id)
            return task.model_copy() if task else None

    def update_task(
        self,
        task_id: int,
        *,
        title: str,
        description: str | None,
        completed: bool,
    ) -> Task:
        with self._lock:
            if task_id not in self._tasks:
                raise TaskNotFoundError(task_id)
            updated = Task(id=task_id, title=title, description=description, completed=completed)
            self._tasks[task_id] = updated
            return updated.model_copy()

    def patch_task(
        self,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        completed: bool | None = None,
    ) -> Task:
        with self._lock:
            current = self._tasks.get(task_id)
            if current is None:
                raise TaskNotFoundError(task_id)
            changes = {
                key: value
                for key, value in {
                    "title": title,
                    "description": description,
                    "completed": completed,
                }.items()
                if value is not None
            }
            updated = current.model_copy(update=changes)
            self._tasks[task_id] = updated
            return updated.model_copy()

    def delete_task(self, task_id: int) -> None:
        with self._lock:
            if self._tasks.pop(task_id, None) is None:
                raise TaskNotFoundError(task_id)
