"""
Supreme Service Libraries Package.

Shared infrastructure for Supreme dashboard services: the error-handling core,
structured logging, settings, the Result type and the typed Quart app class.
"""

from .quart_app import SupremeApp
from .result import Result

__all__ = ["Result", "SupremeApp"]

# Framework-specific helpers should be imported directly from:
# - supreme_service_libs.error_handling.quart
