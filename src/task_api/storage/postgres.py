"""PostgreSQL-backed storage with automatic table creation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from task_api.storage.errors import StorageError, TaskNotFoundError
from task_api.storage.models import Task

logger = logging.getLogger(__name__)


class PostgresTaskStorage:
    """Persist tasks in PostgreSQL."""

    def __init__(self, database_url: str) -> None:
        if not database_url:
            raise ValueError("TASK_API_DATABASE_URL is required")
        self.database_url = database_url
        self._lock = threading.Lock()
        self._psycopg, self._dict_row = self._load_psycopg()

    def migrate(self) -> None:
        with self._lock, self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS tasks (
                    id BIGSERIAL PRIMARY KEY,
                    title TEXT NOT NULL,
                    description TEXT,
                    completed BOOLEAN DEFAULT FALSE
                )
                """)
        logger.info("storage event=migrated backend=postgres")

    def list_tasks(self) -> list[Task]:
        with self._lock, self._connect() as conn:
            rows = conn.execute("SELECT * FROM tasks ORDER BY id").fetchall()
        return [self._row_to_task(row) for row in rows]

    def create_task(self, title: str, description: str | None = None) -> Task:
        with self._lock, self._connect() as conn:
            row = conn.execute(
                """
                INSERT INTO tasks (title, description, completed)
                VALUES (%s, %s, %s)
                RETURNING id
                """,
                (title, description, False),
            ).fetchone()
        if row is None or row.get("id") is None:
            raise StorageError("Failed to persist task")
        return Task(id=int(row["id"]), title=title, description=description, completed=False)

    def get_task(self, task_id: int) -> Task | None:
        with self._lock, self._connect() as conn:
            row = conn.execute("SELECT * FROM tasks WHERE id = %s", (task_id,)).fetchone()
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
        with self._lock, self._connect() as conn:
            changed = conn.execute(
                """
                UPDATE tasks
                SET title = %s,
                    description = %s,
                    completed = %s
                WHERE id = %s
                """,
                (title, description, completed, task_id),
            ).rowcount
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
        # COALESCE keeps the stored value for every field left as NULL.
        with self._lock, self._connect() as conn:
            row = conn.execute(
                """
                UPDATE tasks
                SET title = COALESCE(%s, title),
                    description = COALESCE(%s, description),
                    completed = COALESCE(%s, completed)
                WHERE id = %s
                RETURNING *
                """,
                (title, description, completed, task_id),
            ).fetchone()
        if row is None:
            raise TaskNotFoundError(task_id)
        return self._row_to_task(row)

    def delete_task(self, task_id: int) -> None:
        with self._lock, self._connect() as conn:
            changed = conn.execute("DELETE FROM tasks WHERE id = %s", (task_id,)).rowcount
        if changed == 0:
            raise TaskNotFoundError(task_id)

    @contextmanager
    def _connect(self) -> Iterator[Any]:
        """Open a psycopg connection that yields dict-like rows."""
        try:
            with self._psycopg.connect(self.database_url, row_factory=self._dict_row) as conn:
                yield conn
                conn.commit()
        except self._psycopg.Error as exc:
            raise StorageError(str(exc)) from exc

    @staticmethod
    def _load_psycopg() -> tuple[Any, Any]:
        try:
            import psycopg
            from psycopg.rows import dict_row
        except ImportError as exc:  # pragma: no cover
            raise RuntimeError(
                "PostgreSQL storage requires psycopg. "
                'Install with: python -m pip install "psycopg[binary]>=3.2,<4.0"'
            ) from exc
        return psycopg, dict_row

    @staticmethod
    def _row_to_task(row: Any) -> Task:
        return Task(
            id=int(row["id"]),
            title=row["title"],
            description=row["description"],
            completed=bool(row["completed"]),
        )
