"""
supreme_core.error_enums - Centralized error code and severity definitions.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(str, Enum):
    """Drives console channel selection and whether alerting fires."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode(str, Enum):
    # Canonical taxonomy kinds
    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    FILE_SYSTEM_ERROR = "FILE_SYSTEM_ERROR"
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Refinements that reuse a kind's status code
    UNKNOWN_ERROR = "UNKNOWN_ERROR"  # Log default for partial errors
    ROUTE_NOT_FOUND = "ROUTE_NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    HEALTH_CHECK_FAILED = "HEALTH_CHECK_FAILED"
    UNHANDLED_TASK_FAILURE = "UNHANDLED_TASK_FAILURE"
    UNCAUGHT_EXCEPTION = "UNCAUGHT_EXCEPTION"
