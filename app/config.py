"""Application configuration management via pydantic-settings.

Centralize the tunable parameters of the shellprobe service. Load settings from
environment variables and/or a `.env` file and provide type validation and
default values that reproduce the reference deployment (port 8080, 5 second
request budget, Docker server version as the version probe).

Probe commands are deliberately absent here: they are taken from the process
arguments only and frozen into a `ProbeConfig` at startup.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_VERSION_COMMAND = "docker version --format '{{.Server.Version}}'"
DEFAULT_TIMEOUT_MESSAGE = "Request timed out."


class Settings(BaseSettings):
    """Application-wide configuration settings.

    Attributes:
        PROJECT_NAME: Display name for the application.
        VERSION: Semantic version string of the service itself.
        ENVIRONMENT: Deployment environment identifier.
        LOG_LEVEL: Minimum logging verbosity level.
        LOGGING_NOISY_MODULES: Third-party loggers capped at WARNING.
        PROBE_LOG_LEVEL: Optional level for per-probe events, independent of
            LOG_LEVEL (e.g. "error" to hide routine probe failures).
        LOG_PROBE_OUTPUT_CHARS: Probe output kept per log event.
        LISTEN_HOST: Interface the HTTP server binds to.
        LISTEN_PORT: TCP port the HTTP server binds to.
        REQUEST_TIMEOUT_SECONDS: Budget for one full health evaluation.
        TIMEOUT_MESSAGE: Body returned when the budget is exceeded.
        VERSION_COMMAND: Shell command whose output fills the version line.
        PROBE_SHELL: Interpreter used to run probe commands with ``-c``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ==========================================================================
    # PROJECT METADATA
    # ==========================================================================
    PROJECT_NAME: str = "shellprobe"
    VERSION: str = "0.1.0"

    # ==========================================================================
    # ENVIRONMENT & LOGGING
    # ==========================================================================
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"
    LOG_LEVEL: Literal["debug", "info", "warning", "error", "critical"] = "info"
    LOGGING_NOISY_MODULES: list[str] = [
        "uvicorn.access",
        "asyncio",
    ]
    PROBE_LOG_LEVEL: Optional[Literal["debug", "info", "warning", "error", "critical"]] = None
    LOG_PROBE_OUTPUT_CHARS: int = Field(default=512, ge=0)

    # ==========================================================================
    # HTTP SERVER
    # ==========================================================================
    LISTEN_HOST: str = "0.0.0.0"
    LISTEN_PORT: int = Field(default=8080, ge=1, le=65535)
    REQUEST_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0)
    TIMEOUT_MESSAGE: str = DEFAULT_TIMEOUT_MESSAGE

    # ==========================================================================
    # PROBE EXECUTION
    # ==========================================================================
    VERSION_COMMAND: str = DEFAULT_VERSION_COMMAND
    PROBE_SHELL: str = "/bin/sh"

    @field_validator("VERSION_COMMAND", "PROBE_SHELL")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty command strings.

        Args:
            v: The value to validate.

        Returns:
            The validated value, unchanged.

        Raises:
            ValueError: If the value is empty or only whitespace.
        """
        if not v.strip():
            raise ValueError("must not be blank")
        return v


# ==============================================================================
# DEPENDENCY INJECTION
# ==============================================================================


@lru_cache()
def get_settings() -> Settings:
    """Return a cached singleton instance of the application settings.

    Use as a FastAPI dependency to inject configuration into route handlers.

    Returns:
        The singleton Settings instance.
    """
    return Settings()
