"""Storage models shared by API and persistence backends."""

from pydantic import BaseModel


class Task(BaseModel):
    """Persisted task record."""

    id: int
    title: str
    description: str | None = None
    completed: bool = False
