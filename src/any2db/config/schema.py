"""Pydantic model for resolved runtime settings."""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class Settings(BaseModel):
    cache_dir: Path
    memory_max_mb: float = Field(default=2048.0, gt=0)
    memory_ttl_seconds: float = Field(default=600.0, gt=0)
    cache_disabled: bool = False
    max_workers: int = Field(default=5, ge=1)
    verbose: bool = False
    credentials_file: Path | None = None
    log_level: LogLevel = LogLevel.WARNING

    @field_validator("cache_dir", "credentials_file", mode="before")
    @classmethod
    def _expand_user(cls, value: object) -> object:
        if isinstance(value, str):
            return Path(value).expanduser()
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value
