"""Configuration contract for forgeaccess.

This module provides the Pydantic-validated settings shared by the hierarchy,
the fork engine and the logging setup (LOG_LEVEL, server URL, etc.).

Direct os.environ/os.getenv usage is limited to load_config_from_env();
everything else receives a ForgeConfig instance.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ForgeConfig(BaseModel):
    """Settings for a forgeaccess hierarchy.

    Environment variables (see :func:`load_config_from_env`):
        LOG_LEVEL                 — logging level
        LOG_JSON                  — JSON log output
        FORGE_SERVER_URL          — base URL used for project web URLs
        FORGE_DEFAULT_BRANCH      — default branch of new projects
        FORGE_FORK_REQUIRES_VIEW  — refuse forks of projects the user cannot view
    """

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Server
    server_url: str = Field(
        default="http://localhost",
        description="Base URL of the emulated server (e.g. https://gitlab.example.com)",
    )
    default_branch: str = Field(
        default="master",
        description="Default branch assigned to newly created projects",
    )

    # Fork policy
    fork_requires_view: bool = Field(
        default=False,
        description="Require can_view on the source project before forking",
    )

    @field_validator("server_url")
    @classmethod
    def validate_server_url(cls, v: str) -> str:
        """Validate server URL format and strip the trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Server URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("default_branch")
    @classmethod
    def validate_default_branch(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Default branch must not be empty")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",  # Prevent accidental extra fields
    }


def load_config_from_env() -> ForgeConfig:
    """Load configuration from environment variables.

    This is the ONLY place where os.getenv is allowed.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - FORGE_SERVER_URL: Base server URL (default: http://localhost)
    - FORGE_DEFAULT_BRANCH: Default branch of new projects (default: master)
    - FORGE_FORK_REQUIRES_VIEW: Check can_view before forking (default: false)

    Returns:
        ForgeConfig instance with values from environment or defaults.
    """
    import os

    truthy = ("true", "1", "yes", "on")

    return ForgeConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in truthy,
        server_url=os.getenv("FORGE_SERVER_URL", "http://localhost"),
        default_branch=os.getenv("FORGE_DEFAULT_BRANCH", "master"),
        fork_requires_view=os.getenv("FORGE_FORK_REQUIRES_VIEW", "false").lower() in truthy,
    )


__all__ = [
    "ForgeConfig",
    "LogLevel",
    "load_config_from_env",
]
