"""Storage interface for the task table."""

from __future__ import annotations

from typing import Protocol

from task_api.storage.models import Task


class TaskStorage(Protocol):
    def migrate(self) -> None: ...

    def list_tasks(self) -> list[Task]: ...

    def create_task(self, title: str, description: str | None = None) -> Task: ...

    def get_task(self, task_id: int) -> Task | None: ...

    def update_task(
        self,
        task_id: int,
        *,
        title: str,
        description: str | None,
        completed: bool,
    ) -> Task: ...

    def patch_task(
        self,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        completed: bool | None = None,
    ) -> Task: ...

    def delete_task(self, task_id: int) -> None: ...
