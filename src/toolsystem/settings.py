"""Environment-based configuration using pydantic-settings.

Example:
    >>> from toolsystem.settings import get_settings
    >>> settings = get_settings()
    >>> settings.logging.level
    'WARNING'

    # Or with environment variables:
    # TOOLSYSTEM_LOG_LEVEL=DEBUG
    # TOOLSYSTEM_LOG_FORMAT=json
    # TOOLSYSTEM_CODEC_DEFAULT=msgpack
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLSYSTEM_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "text"] = "text"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class CodecSettings(BaseSettings):
    """Transport codec used for tagged Value envelopes."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLSYSTEM_CODEC_",
        extra="ignore",
    )

    default: Literal["orjson", "msgpack"] = Field(default="orjson", description="Default envelope codec")


class ToolSystemSettings(BaseSettings):
    """Root settings, loaded from TOOLSYSTEM_* environment variables and .env."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLSYSTEM_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    codec: CodecSettings = Field(default_factory=CodecSettings)


@lru_cache(maxsize=1)
def get_settings() -> ToolSystemSettings:
    """Get the global settings instance (cached)."""
    return ToolSystemSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
