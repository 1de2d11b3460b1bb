"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages
from ..domain.shared.types import PollIntervalSeconds, PositiveSeconds, VolumeLevel

DEFAULT_ARGS: tuple[str, ...] = ("-idle", "-slave", "-msglevel", "statusline=-1", "-novideo")


class PlayerSettings(BaseModel):
    """Player process configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    executable: str = Field(
        default="mplayer",
        validation_alias=AliasChoices("executable", "bin", "mplayer_bin"),
    )
    args: tuple[str, ...] = Field(default=DEFAULT_ARGS)
    volume: VolumeLevel | None = None
    command_timeout: PositiveSeconds | None = Field(
        default=10.0,
        validation_alias=AliasChoices("command_timeout", "timeout"),
    )
    exit_timeout: PositiveSeconds | None = 5.0

    @field_validator("executable")
    @classmethod
    def validate_executable(cls, v: str) -> str:
        """Reject blank executables."""
        if not v.strip():
            raise ValueError(ErrorMessages.EMPTY_EXECUTABLE)
        return v

    @field_validator("args", mode="before")
    @classmethod
    def validate_args(cls, v: tuple[str, ...] | list[str] | str) -> tuple[str, ...]:
        """Accept a list (JSON array in env vars) or a whitespace-separated string."""
        if isinstance(v, str):
            return tuple(v.split())
        return tuple(v)


class QuerySettings(BaseModel):
    """Ad hoc query polling configuration."""

    model_config = SettingsConfigDict(frozen=True)

    poll_interval: PollIntervalSeconds = 0.1
    timeout: PositiveSeconds = 5.0


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, DEBUG, LOG_LEVEL (top-level)
    - PLAYER__EXECUTABLE, PLAYER__ARGS, PLAYER__VOLUME, etc. (nested)
    - QUERY__POLL_INTERVAL, QUERY__TIMEOUT (nested)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    player: PlayerSettings = Field(default_factory=PlayerSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
