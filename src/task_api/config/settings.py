"""Application settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "Task API"
    app_version: str = "1.0.0"
    app_description: str = "API para la gestión de tareas"
    database_url: str = "sqlite:///./database.db"
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)
    # Advertised in the OpenAPI "servers" list; derived from host/port when empty.
    public_url: str = ""
    docs_url: str = "/api-docs"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TASK_API_",
        extra="ignore",
        env_file=(PROJECT_ROOT / ".env", PROJECT_ROOT / ".env.local"),
        env_file_encoding="utf-8",
    )

    def resolved_public_url(self) -> str:
        return self.public_url.rstrip("/") or f"http://{self.host}:{self.port}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
