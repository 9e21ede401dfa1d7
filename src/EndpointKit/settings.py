"""Typed configuration for environments, transports, retries and logging.

Settings are read from ``ENDPOINTKIT_*`` environment variables (and an optional
``.env`` file) through ``pydantic-settings``.  Every field has a default taken
from :mod:`EndpointKit.network.policy`, so an empty environment yields a
working configuration.  :func:`get_settings` caches the loaded instance for the
process; tests call :func:`reset_settings_cache` after changing the environment.
"""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .http import HTTPScheme
from .network.policy import (
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    DEFAULT_USER_AGENT,
    HTTP_CONNECT_TIMEOUT,
    TLS_VERIFY_ENABLED,
)

__all__ = ["LogFormat", "NetworkingSettings", "get_settings", "reset_settings_cache"]


class LogFormat(str, Enum):
    """Console output formats supported by :func:`setup_logging`."""

    CONSOLE = "console"
    JSON = "json"


class NetworkingSettings(BaseSettings):
    """Process-wide networking configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ENDPOINTKIT_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    environment_name: str = Field("default", description="Display name of the target environment")
    host: str = Field("localhost", description="Host requests are issued against")
    scheme: HTTPScheme = Field(HTTPScheme.HTTPS, description="URL scheme (http/https)")
    timeout_seconds: float = Field(
        DEFAULT_REQUEST_TIMEOUT,
        description="Client-wide read/write timeout (seconds)",
        gt=0,
    )
    connect_timeout_seconds: float = Field(
        HTTP_CONNECT_TIMEOUT,
        description="Connection establishment timeout (seconds)",
        gt=0,
    )
    retry_attempts: int = Field(
        DEFAULT_RETRY_ATTEMPTS,
        description="Default number of attempts for retrying calls",
        ge=1,
    )
    retry_delay_seconds: float = Field(
        DEFAULT_RETRY_DELAY,
        description="Fixed delay between attempts (seconds)",
        ge=0,
    )
    verify_tls: bool = Field(TLS_VERIFY_ENABLED, description="Verify TLS certificates")
    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent header for the client")
    log_level: str = Field("INFO", description="Logging level for the EndpointKit logger")
    log_format: LogFormat = Field(LogFormat.CONSOLE, description="Console or structured JSON logs")

    @field_validator("scheme", mode="before")
    @classmethod
    def normalize_scheme(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Reject level names the logging module does not know."""
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level '{value}'")
        return level


@lru_cache
def get_settings() -> NetworkingSettings:
    return NetworkingSettings()


def reset_settings_cache() -> None:
    get_settings.cache_clear()
