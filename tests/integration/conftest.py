from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from task_api.api.main import create_app
from task_api.config.settings import Settings
from task_api.storage.postgres import PostgresTaskStorage


@pytest.fixture
def postgres_storage() -> Iterator[PostgresTaskStorage]:
    if os.getenv("RUN_POSTGRES_INTEGRATION_TESTS") != "1":
        pytest.skip(
            "Set RUN_POSTGRES_INTEGRATION_TESTS=1 and TASK_API_DATABASE_URL "
            "to run integration tests against PostgreSQL."
        )
    database_url = os.getenv("TASK_API_DATABASE_URL", "")
    if not database_url.startswith(("postgresql://", "postgres://")):
        pytest.skip("TASK_API_DATABASE_URL must point at PostgreSQL for integration tests.")

    storage = PostgresTaskStorage(database_url)
    storage.migrate()
    created_ids: list[int] = []
    original_create = storage.create_task

    def tracking_create(title: str, description: str | None = None):
        task = original_create(title, description)
        created_ids.append(task.id)
        return task

    storage.create_task = tracking_create  # type: ignore[method-assign]
    yield storage
    for task_id in created_ids:
        if storage.get_task(task_id) is not None:
            storage.delete_task(task_id)


@pytest.fixture
def postgres_client(postgres_storage: PostgresTaskStorage) -> TestClient:
    app = create_app(
        storage=postgres_storage,
        settings_override=Settings(database_url=postgres_storage.database_url),
    )
    return TestClient(app)
