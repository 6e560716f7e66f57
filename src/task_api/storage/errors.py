"""Errors raised by storage backends."""

from __future__ import annotations


class StorageError(RuntimeError):
    """Any failure reported by the persistence layer (connection, constraint, SQL)."""


class TaskNotFoundError(LookupError):
    """The targeted task id matched zero rows."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} does not exist")
        self.task_id = task_id
