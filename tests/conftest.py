from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from task_api.api.main import create_app
from task_api.config.settings import Settings
from task_api.storage.errors import StorageError
from task_api.storage.memory import InMemoryTaskStorage
from task_api.storage.models import Task
from task_api.storage.sqlite import SqliteTaskStorage


class BrokenStorage:
    """Test-only storage double whose every call fails like a locked database."""

    def __init__(self, message: str = "database is locked") -> None:
        self.message = message
        self.calls: list[str] = []

    def migrate(self) -> None:
        return None

    def _fail(self, operation: str) -> None:
        self.calls.append(operation)
        raise StorageError(self.message)

    def list_tasks(self) -> list[Task]:
        self._fail("list")
        return []

    def create_task(self, title: str, description: str | None = None) -> Task:
        self._fail("create")
        raise AssertionError("unreachable")

    def get_task(self, task_id: int) -> Task | None:
        self._fail("get")
        return None

    def update_task(self, task_id: int, **_: object) -> Task:
        self._fail("update")
        raise AssertionError("unreachable")

    def patch_task(self, task_id: int, **_: object) -> Task:
        self._fail("patch")
        raise AssertionError("unreachable")

    def delete_task(self, task_id: int) -> None:
        self._fail("delete")


def _test_settings(database_url: str = "memory://") -> Settings:
    return Settings(database_url=database_url, host="127.0.0.1", port=3000)


@pytest.fixture(params=["memory", "sqlite"])
def client(request: pytest.FixtureRequest, tmp_path: Path) -> Iterator[TestClient]:
    if request.param == "memory":
        storage = InMemoryTaskStorage()
    else:
        storage = SqliteTaskStorage(tmp_path / "tasks.db")
    app = create_app(storage=storage, settings_override=_test_settings())
    yield TestClient(app)


@pytest.fixture
def broken_storage() -> BrokenStorage:
    return BrokenStorage()


@pytest.fixture
def broken_client(broken_storage: BrokenStorage) -> TestClient:
    app = create_app(storage=broken_storage, settings_override=_test_settings())
    return TestClient(app)


@pytest.fixture
def settings_factory():
    return _test_settings
