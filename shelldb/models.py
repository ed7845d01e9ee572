"""Pydantic models for shelldb connection profiles."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, PositiveInt, field_validator


class ConnectionProfileConfig(BaseModel):
    """Raw connection profile as loaded from a JSON file."""

    name: str
    dialect: str
    command: str | None = Field(
        default=None,
        description="Shell executable, optionally with leading arguments. Defaults to the dialect's executable.",
    )
    database: str | None = Field(default=None, description="Database name or, for SQLite, database file path.")
    working_dir: str | None = None
    env_file: str | None = Field(
        default=None,
        description="dotenv file whose values are passed to the shell, relative to the profile file.",
    )
    additional_args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    timeout_seconds: PositiveInt | None = Field(default=None)
    description: str | None = None

    @field_validator("additional_args", mode="before")
    @classmethod
    def _ensure_args_list(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(item) for item in value]
        if isinstance(value, str):
            return [value]
        raise TypeError("additional_args must be a list of strings or a single string")

    @field_validator("env", mode="before")
    @classmethod
    def _stringify_env(cls, value: Any) -> dict[str, str]:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(key): str(item) for key, item in value.items()}
        raise TypeError("env must be an object mapping variable names to values")


class ResolvedConnectionProfile(BaseModel):
    """Runtime profile after merging dialect defaults and resolving paths."""

    name: str
    dialect: str
    executable: list[str]
    database: str | None = None
    working_dir: Path | None = None
    env_file: Path | None = None
    additional_args: list[str] = Field(default_factory=list)
    env: dict[str, str] = Field(default_factory=dict)
    timeout_seconds: int
    description: str | None = None
