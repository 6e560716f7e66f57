from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration


def test_task_lifecycle_against_postgres(postgres_client: TestClient) -> None:
    created = postgres_client.post("/tasks", data={"title": "Buy milk"})
    assert created.status_code == 200
    task_id = created.json()["id"]
    assert created.json()["completed"] is False

    listed_ids = [item["id"] for item in postgres_client.get("/tasks").json()]
    assert task_id in listed_ids

    patched = postgres_client.patch(f"/tasks/{task_id}", data={"description": "2%"})
    assert patched.json() == {
        "id": task_id,
        "title": "Buy milk",
        "description": "2%",
        "completed": False,
    }

    updated = postgres_client.put(f"/tasks/{task_id}", data={"title": "Buy milk", "completed": "1"})
    assert updated.status_code == 200
    assert postgres_client.get(f"/tasks/{task_id}").json()["description"] is None

    assert postgres_client.delete(f"/tasks/{task_id}").status_code == 200
    assert postgres_client.get(f"/tasks/{task_id}").status_code == 404
    assert postgres_client.delete(f"/tasks/{task_id}").status_code == 404
