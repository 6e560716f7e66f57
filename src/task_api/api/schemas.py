"""Request and response bodies for the task routes.

Mutating routes read these from form fields (``Form()``), so each model is the
typed contract for one operation.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class TaskCreate(BaseModel):
    """Form body for POST /tasks. ``completed`` always starts as false."""

    title: str = Field(min_length=1, description="El título de la tarea")
    description: str | None = Field(default=None, description="Descripción de la tarea")


class TaskUpdate(BaseModel):
    """Form body for PUT /tasks/{id}: every field is replaced, omitted ones included."""

    title: str = Field(min_length=1, description="El título de la tarea")
    description: str | None = Field(default=None, description="Descripción de la tarea")
    completed: bool = Field(default=False, description="Estado de la tarea")


class TaskPatch(BaseModel):
    """Form body for PATCH /tasks/{id}: only submitted fields change."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    completed: bool | None = None


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
