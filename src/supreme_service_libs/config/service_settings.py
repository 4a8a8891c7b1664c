"""
Base settings shared by Supreme services.

Loaded from ``.env`` files and ``SUPREME_``-prefixed environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from supreme_core.config_enums import Environment


class ServiceSettings(BaseSettings):
    """Settings consumed by the error-handling core and logging setup."""

    SERVICE_NAME: str = Field(default="supreme-dashboard", description="Service identifier")
    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT, description="Runtime environment"
    )
    LOG_LEVEL: str = "INFO"

    ERROR_LOG_DIR: Path = Field(
        default=Path("./logs"),
        description="Directory holding the daily error-YYYY-MM-DD.log partitions",
    )
    VERBOSE_ERRORS: bool = Field(
        default=False,
        description="Include stack traces in error responses (never enable in production)",
    )

    HTTP_HOST: str = "0.0.0.0"
    HTTP_PORT: int = 3001

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_prefix="SUPREME_",
    )

    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION
