"""Storage backends and models."""

from task_api.storage.base import TaskStorage
from task_api.storage.errors import StorageError, TaskNotFoundError
from task_api.storage.factory import build_storage
from task_api.storage.memory import InMemoryTaskStorage
from task_api.storage.models import Task
from task_api.storage.postgres import PostgresTaskStorage
from task_api.storage.sqlite import SqliteTaskStorage

__all__ = [
    "InMemoryTaskStorage",
    "PostgresTaskStorage",
    "SqliteTaskStorage",
    "StorageError",
    "Task",
    "TaskNotFoundError",
    "TaskStorage",
    "build_storage",
]
