"""SQLite storage backend for task records.

Beginner terms:
- AUTOINCREMENT: SQLite never reuses an id, even after the row is deleted.
- rowcount: number of rows touched by the last UPDATE/DELETE statement.
- Row factory: returns query rows as dict-like objects instead of tuples.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from task_api.storage.errors import StorageError, TaskNotFoundError
from task_api.storage.models import Task

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


class SqliteTaskStorage:
    """Thread-safe SQLite-backed storage for Task records."""

    def __init__(self, database_path: str | Path) -> None:
        if not str(database_path):
            raise ValueError("database_path is required")
        self.database_path = str(database_path)
        # Lock guards DB operations done through this storage instance.
        self._lock = threading.Lock()
        # An in-memory database lives only as long as its connection, so keep one open.
        self._shared_conn: sqlite3.Connection | None = None
        if self.database_path == MEMORY_DATABASE:
            self._shared_conn = self._open()
        else:
            Path(self.database_path).expanduser().parent.mkdir(parents=True, exist_ok=True)

    def migrate(self) -> None:
        """Create the tasks table if it does not already exist."""
        with self._lock, self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    title TEXT NOT NULL,
                    description TEXT,
                    completed BOOLEAN DEFAULT 0
                )
                """)
        logger.info("storage event=migrated backend=sqlite path=%s", self.database_path)

    def list_tasks(self) -> list[Task]:
        with self._lock, self._connect() as conn:
            rows = conn.execute("SELECT * FROM tasks ORDER BY id").fetchall()
        return [self._row_to_task(row) for row in rows]

    def create_task(self, title: str, description: str | None = None) -> Task:
        """Insert a new task and echo the submitted fields with the assigned id."""
        with self._lock, self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO tasks (title, description, completed) VALUES (?, ?, ?)",
                (title, description, False),
            )
            task_id = cursor.lastrowid
        if task_id is None:
            raise StorageError("Failed to read id of inserted task")
        return Task(id=task_id, title=title, description=description, completed=False)

    def get_task(self, task_id: int) -> Task | None:
        with self._lock, self._connect() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    def update_task(
        self,
        task_id: int,
        *,
        title: str,
        description: str | None,
        completed: bool,
    ) -> Task:
        """Overwrite all mutable columns; omitted values are written as given."""
        with self._lock, self._connect() as conn:
            cursor = conn.execute(
                "UPDATE tasks SET title = ?, description = ?, completed = ? WHERE id = ?",
                (title, description, completed, task_id),
            )
            changed = cursor.rowcount
        if changed == 0:
            raise TaskNotFoundError(task_id)
        return Task(id=task_id, title=title, description=description, completed=completed)

    def patch_task(
        self,
        task_id: int,
        *,
        title: str | None = None,
        description: str | None = None,
        completed: bool | None = None,
    ) -> Task:
        """Update only the fields that were provided, keeping the rest unchanged."""
        with self._lock, self._connect() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
            if row is None:
                raise TaskNotFoundError(task_id)
            current = self._row_to_task(row)
            merged = Task(
                id=task_id,
                title=title if title is not None else current.title,
                description=description if description is not None else current.description,
                completed=completed if completed is not None else current.completed,
            )
            conn.execute(
                "UPDATE tasks SET title = ?, description = ?, completed = ? WHERE id = ?",
                (merged.title, merged.description, merged.completed, task_id),
            )
        return merged

    def delete_task(self, task_id: int) -> None:
        with self._lock, self._connect() as conn:
            changed = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,)).rowcount
        if changed == 0:
            raise TaskNotFoundError(task_id)

    def close(self) -> None:
        if self._shared_conn is not None:
            self._shared_conn.close()
            self._shared_conn = None

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection, commit on success and map driver errors to StorageError."""
        conn = self._shared_conn or self._open()
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(str(exc)) from exc
        finally:
            if conn is not self._shared_conn:
                conn.close()

    def _open(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.database_path, check_same_thread=False)
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _row_to_task(row: Any) -> Task:
        """Map one DB row to the canonical Task model."""
        return Task(
            id=int(row["id"]),
            title=row["title"],
            description=row["description"],
            completed=bool(row["completed"]),
        )
