"""FastAPI app entrypoint for the task API.

Beginner terms used in this file:
- Form(): the request body arrives as form fields and is validated into a model.
- response_model: Pydantic model used to validate/shape API responses.
- app.state: a place to store shared runtime objects (settings, storage).
- Lifespan: code that runs once when the server starts and once when it stops.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import FastAPI, Form, Request
from fastapi.responses import JSONResponse

from task_api.api.schemas import (
    ErrorResponse,
    MessageResponse,
    TaskCreate,
    TaskPatch,
    TaskUpdate,
)
from task_api.config.settings import Settings, get_settings
from task_api.storage.base import TaskStorage
from task_api.storage.errors import StorageError, TaskNotFoundError
from task_api.storage.factory import build_storage
from task_api.storage.models import Task

logger = logging.getLogger(__name__)

TASK_NOT_FOUND_MESSAGE = "Tarea no encontrada"
TASK_DELETED_MESSAGE = "Tarea eliminada correctamente"
PATCH_DESCRIPTION = (
    "Solo cambian los campos enviados. Un campo omitido o vacío conserva su valor, "
    "por lo que la descripción no puede borrarse desde aquí: usa PUT para eso."
)

# Documented error bodies shared by every route that targets one task id.
SINGLE_TASK_RESPONSES = {
    404: {"model": MessageResponse, "description": TASK_NOT_FOUND_MESSAGE},
    500: {"model": ErrorResponse, "description": "Error de almacenamiento"},
}
COLLECTION_RESPONSES = {
    500: {"model": ErrorResponse, "description": "Error de almacenamiento"},
}


def _ensure_runtime_state(
    app: FastAPI,
    *,
    settings: Settings,
    storage_override: TaskStorage | None,
) -> None:
    if not hasattr(app.state, "storage"):
        storage = storage_override or build_storage(settings.database_url)
        storage.migrate()
        app.state.storage = storage
        # Only storage built here is closed on shutdown; injected clients belong to the caller.
        app.state.owns_storage = storage_override is None

    if not hasattr(app.state, "settings"):
        app.state.settings = settings


def create_app(
    *,
    storage: TaskStorage | None = None,
    settings_override: Settings | None = None,
) -> FastAPI:
    """Application factory.

    Pass ``storage`` to inject a ready storage client (tests do this); otherwise
    one is built from ``settings.database_url`` when the server starts.
    """
    settings = settings_override or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        _ensure_runtime_state(app, settings=settings, storage_override=storage)
        logger.info(
            "task_api event=startup docs=%s%s",
            settings.resolved_public_url(),
            settings.docs_url,
        )
        yield
        if getattr(app.state, "owns_storage", False):
            close = getattr(app.state.storage, "close", None)
            if callable(close):
                close()
            # A later startup builds a fresh client instead of reusing a closed one.
            del app.state.storage

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=settings.app_description,
        servers=[{"url": settings.resolved_public_url()}],
        docs_url=settings.docs_url,
        lifespan=lifespan,
    )

    # Keep test paths reliable when lifespan is not executed by the client.
    if storage is not None:
        _ensure_runtime_state(app, settings=settings, storage_override=storage)

    def _get_task_storage(request: Request) -> TaskStorage:
        if not hasattr(request.app.state, "storage"):
            _ensure_runtime_state(request.app, settings=settings, storage_override=storage)
        return request.app.state.storage

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "service": settings.app_name}

    @app.get(
        "/tasks",
        response_model=list[Task],
        responses=COLLECTION_RESPONSES,
        summary="Obtener todas las tareas",
    )
    def list_tasks(request: Request) -> list[Task] | JSONResponse:
        try:
            return _get_task_storage(request).list_tasks()
        except StorageError as exc:
            return _storage_failure("list", exc)

    @app.post(
        "/tasks",
        response_model=Task,
        responses=COLLECTION_RESPONSES,
        summary="Crear una nueva tarea",
    )
    def create_task(
        payload: Annotated[TaskCreate, Form()],
        request: Request,
    ) -> Task | JSONResponse:
        try:
            task = _get_task_storage(request).create_task(
                title=payload.title,
                description=payload.description,
            )
        except StorageError as exc:
            return _storage_failure("create", exc)
        logger.info("task_api event=created task_id=%s", task.id)
        return task

    @app.get(
        "/tasks/{task_id}",
        response_model=Task,
        responses=SINGLE_TASK_RESPONSES,
        summary="Obtener una tarea por ID",
    )
    def get_task(task_id: int, request: Request) -> Task | JSONResponse:
        try:
            task = _get_task_storage(request).get_task(task_id)
        except StorageError as exc:
            return _storage_failure("get", exc, task_id=task_id)
        if task is None:
            return _not_found()
        return task

    @app.put(
        "/tasks/{task_id}",
        response_model=Task,
        responses=SINGLE_TASK_RESPONSES,
        summary="Actualizar una tarea",
    )
    def update_task(
        task_id: int,
        payload: Annotated[TaskUpdate, Form()],
        request: Request,
    ) -> Task | JSONResponse:
        try:
            task = _get_task_storage(request).update_task(
                task_id,
                title=payload.title,
                description=payload.description,
                completed=payload.completed,
            )
        except TaskNotFoundError:
            return _not_found()
        except StorageError as exc:
            return _storage_failure("update", exc, task_id=task_id)
        logger.info("task_api event=updated task_id=%s completed=%s", task_id, task.completed)
        return task

    @app.patch(
        "/tasks/{task_id}",
        response_model=Task,
        responses=SINGLE_TASK_RESPONSES,
        summary="Actualizar parcialmente una tarea",
        description=PATCH_DESCRIPTION,
    )
    def patch_task(
        task_id: int,
        payload: Annotated[TaskPatch, Form()],
        request: Request,
    ) -> Task | JSONResponse:
        try:
            task = _get_task_storage(request).patch_task(
                task_id,
                **payload.model_dump(exclude_none=True),
            )
        except TaskNotFoundError:
            return _not_found()
        except StorageError as exc:
            return _storage_failure("patch", exc, task_id=task_id)
        logger.info("task_api event=patched task_id=%s", task_id)
        return task

    @app.delete(
        "/tasks/{task_id}",
        response_model=MessageResponse,
        responses=SINGLE_TASK_RESPONSES,
        summary="Eliminar una tarea",
    )
    def delete_task(task_id: int, request: Request) -> MessageResponse | JSONResponse:
        try:
            _get_task_storage(request).delete_task(task_id)
        except TaskNotFoundError:
            return _not_found()
        except StorageError as exc:
            return _storage_failure("delete", exc, task_id=task_id)
        logger.info("task_api event=deleted task_id=%s", task_id)
        return MessageResponse(message=TASK_DELETED_MESSAGE)

    return app


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content={"message": TASK_NOT_FOUND_MESSAGE})


def _storage_failure(operation: str, exc: StorageError, task_id: int | None = None) -> JSONResponse:
    """Log a storage failure and expose its message to the caller as a 500."""
    logger.error(
        "task_api event=storage_error operation=%s task_id=%s error=%s",
        operation,
        task_id,
        exc,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content={"error": str(exc)})


# Module-level app for `uvicorn task_api.api.main:app`.
app = create_app()
