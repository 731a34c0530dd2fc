"""Configuration management for shellbase."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from shellbase.errors import ConfigurationError


def _split_paths(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str | os.PathLike):
        return [part for part in str(value).split(os.pathsep) if part]
    return value


class ShellArgs(BaseModel):
    """Options a shell is constructed with.

    Unknown keys are kept as-is so shells can carry their own options.
    """

    model_config = ConfigDict(extra="allow")

    histfile: Path | None = Field(default=None, description="File history is loaded from and persisted to")
    rcfiles: list[Path] = Field(default_factory=list, description="RC files, later files override earlier ones")
    histsize: int = Field(default=1000, ge=0, description="Maximum number of persisted history entries")

    @field_validator("rcfiles", mode="before")
    @classmethod
    def split_rcfiles(cls, value: Any) -> Any:
        return _split_paths(value)


def load_shell_args(args: dict[str, Any]) -> ShellArgs:
    try:
        return ShellArgs.model_validate(args)
    except ValidationError as exc:
        raise ConfigurationError(f"invalid shell options: {exc}") from exc


class ShellSettings(BaseSettings):
    """Process-level defaults, read from ``SHELLBASE_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SHELLBASE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    histfile: Path | None = Field(default=None, description="History file")
    rcfiles: Annotated[list[Path], NoDecode] = Field(default_factory=list, description="RC files separated by os.pathsep")
    prompt: str | None = Field(default=None, description="Prompt text")
    log_level: str = Field(default="WARNING", description="Log level")

    @field_validator("rcfiles", mode="before")
    @classmethod
    def split_rcfiles(cls, value: Any) -> Any:
        return _split_paths(value)


def load_settings(**overrides: Any) -> ShellSettings:
    """Load settings from the environment, applying non-empty overrides."""

    settings = ShellSettings()
    updates = {key: value for key, value in overrides.items() if value not in (None, [], ())}
    if updates:
        settings = settings.model_copy(update=updates)
    return settings
