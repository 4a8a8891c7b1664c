"""
Configuration module for the Supreme dashboard service.

Settings are loaded from .env files and SUPREME_-prefixed environment
variables, e.g. SUPREME_VERBOSE_ERRORS=true or SUPREME_ERROR_LOG_DIR=/var/log/supreme.
"""

from __future__ import annotations

from supreme_service_libs.config import ServiceSettings


class Settings(ServiceSettings):
    """Configuration settings for the dashboard service."""

    SERVICE_NAME: str = "supreme-dashboard"
    VERSION: str = "1.0.0"
    GRACEFUL_TIMEOUT: int = 30
