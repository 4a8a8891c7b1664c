"""
Standardized, PURE error data models for the Supreme dashboard.

ErrorDetail is the single error currency of the system. LogEntry and
ErrorResponse are its two projections: one for the durable audit log, one for
the wire. Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import datetime
from http import HTTPStatus
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from supreme_core.error_enums import ErrorCode, ErrorSeverity


class FieldViolation(BaseModel):
    """A single field-level validation failure."""

    field: str
    message: str
    value: Any = None

    model_config = ConfigDict(frozen=True)


class ErrorDetail(BaseModel):
    """
    The canonical, PURE data model for an error in the Supreme platform.
    This model contains only data fields and no behavior.
    """

    message: str
    status_code: int = 500
    error_code: ErrorCode
    severity: ErrorSeverity
    is_operational: bool = True
    timestamp: datetime
    cause_stack: Optional[str] = None
    details: Optional[tuple[FieldViolation, ...]] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("status_code")
    @classmethod
    def _known_http_status(cls, value: int) -> int:
        HTTPStatus(value)  # ValueError for anything outside the protocol
        return value


class RequestContext(BaseModel):
    """Request attributes captured at the moment a failure is observed."""

    url: Optional[str] = None
    method: Optional[str] = None
    ip: Optional[str] = None
    user_agent: Optional[str] = None
    user_id: Optional[str] = None
    request_id: Optional[str] = None
    body: Any = None
    query: Optional[dict[str, Any]] = None
    params: Optional[dict[str, Any]] = None
    route_matched: Optional[bool] = None  # None outside a request

    model_config = ConfigDict(frozen=True)


class LogEntry(BaseModel):
    """Flattened, serializable projection of an error plus request context."""

    timestamp: datetime
    level: ErrorSeverity
    message: str
    stack: Optional[str] = None
    status_code: int = Field(serialization_alias="statusCode")
    error_code: str = Field(serialization_alias="errorCode")
    is_operational: Optional[bool] = Field(default=None, serialization_alias="isOperational")
    url: Optional[str] = None
    method: Optional[str] = None
    ip: Optional[str] = None
    user_agent: Optional[str] = Field(default=None, serialization_alias="userAgent")
    user_id: Optional[str] = Field(default=None, serialization_alias="userId")
    request_id: Optional[str] = Field(default=None, serialization_alias="requestId")
    body: Any = None
    query: Optional[dict[str, Any]] = None
    params: Optional[dict[str, Any]] = None

    model_config = ConfigDict(frozen=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Wire/log shape with unset optional keys dropped."""
        payload = self.model_dump(mode="json", by_alias=True)
        return {key: value for key, value in payload.items() if value is not None}


class ErrorBody(BaseModel):
    message: str
    code: str
    status_code: int = Field(serialization_alias="statusCode")
    timestamp: datetime
    request_id: str = Field(default="unknown", serialization_alias="requestId")
    stack: Optional[str] = None
    details: Optional[tuple[FieldViolation, ...]] = None

    model_config = ConfigDict(frozen=True)


class ErrorResponse(BaseModel):
    """Wire-level error envelope returned to HTTP callers."""

    success: Literal[False] = False
    error: ErrorBody

    model_config = ConfigDict(frozen=True)

    def to_json_dict(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json", by_alias=True)
        error = payload["error"]
        for optional_key in ("stack", "details"):
            if error.get(optional_key) is None:
                error.pop(optional_key, None)
        return payload
