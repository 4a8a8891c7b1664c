"""Configuration utilities for Supreme services."""

from .service_settings import ServiceSettings

__all__ = ["ServiceSettings"]
