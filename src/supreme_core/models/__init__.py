"""Pure pydantic models shared across Supreme services."""

from supreme_core.models.error_models import (
    ErrorBody,
    ErrorDetail,
    ErrorResponse,
    FieldViolation,
    LogEntry,
    RequestContext,
)

__all__ = [
    "ErrorBody",
    "ErrorDetail",
    "ErrorResponse",
    "FieldViolation",
    "LogEntry",
    "RequestContext",
]
