"""Runtime settings, read from ``CONSTGRAPH_*`` environment variables."""

from __future__ import annotations

import functools

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .file_walker import DEFAULT_EXTENSIONS


class Settings(BaseSettings):
    PROJECT_PATH: str | None = None
    HOST: str = "127.0.0.1"
    PORT: int = 8080
    MAX_WORKERS: int = Field(default=10, ge=1)
    LOG_LEVEL: str = "INFO"
    EXTENSIONS: list[str] = Field(default_factory=lambda: list(DEFAULT_EXTENSIONS))

    model_config = SettingsConfigDict(
        env_prefix="CONSTGRAPH_", extra="ignore", case_sensitive=False
    )

    @field_validator("EXTENSIONS")
    @classmethod
    def dotted_extensions(cls, value: list[str]) -> list[str]:
        return [ext if ext.startswith(".") else f".{ext}" for ext in value]


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
