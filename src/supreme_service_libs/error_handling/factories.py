"""
Error factory functions for the Supreme error taxonomy.

Every constructor is pure: it performs no I/O and no logging, and returns the
same ErrorDetail for the same cause and timestamp. Raw exceptions are expected
to pass through ``causes.adapt_cause`` before they reach a constructor here.
"""

from __future__ import annotations

import traceback
from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Any, NamedTuple, Optional, Union

from supreme_core.error_enums import ErrorCode, ErrorSeverity
from supreme_core.models.error_models import ErrorDetail, FieldViolation

from supreme_service_libs.error_handling.causes import (
    DatabaseCause,
    DatabaseCauseCode,
    FileSystemCause,
    FileSystemCauseCode,
    HttpCause,
    NetworkCause,
    NetworkCauseCode,
    TimeoutCause,
    TokenCause,
    TokenCauseCode,
    UnrecognizedCause,
    ValidationCause,
    json_safe,
)


class ErrorKind(NamedTuple):
    status_code: int
    severity: ErrorSeverity


TAXONOMY: Mapping[ErrorCode, ErrorKind] = {
    ErrorCode.VALIDATION_ERROR: ErrorKind(400, ErrorSeverity.LOW),
    ErrorCode.AUTHENTICATION_ERROR: ErrorKind(401, ErrorSeverity.MEDIUM),
    ErrorCode.AUTHORIZATION_ERROR: ErrorKind(403, ErrorSeverity.MEDIUM),
    ErrorCode.NOT_FOUND: ErrorKind(404, ErrorSeverity.LOW),
    ErrorCode.CONFLICT: ErrorKind(409, ErrorSeverity.LOW),
    ErrorCode.RATE_LIMIT_EXCEEDED: ErrorKind(429, ErrorSeverity.LOW),
    # INTERNAL_SERVER_ERROR, DATABASE_ERROR and FILE_SYSTEM_ERROR share 500;
    # the error code is the disambiguator.
    ErrorCode.INTERNAL_SERVER_ERROR: ErrorKind(500, ErrorSeverity.MEDIUM),
    ErrorCode.DATABASE_ERROR: ErrorKind(500, ErrorSeverity.MEDIUM),
    ErrorCode.FILE_SYSTEM_ERROR: ErrorKind(500, ErrorSeverity.MEDIUM),
    ErrorCode.NETWORK_ERROR: ErrorKind(502, ErrorSeverity.MEDIUM),
    ErrorCode.TIMEOUT_ERROR: ErrorKind(504, ErrorSeverity.MEDIUM),
    ErrorCode.SERVICE_UNAVAILABLE: ErrorKind(503, ErrorSeverity.HIGH),
}

# First kind wins, so 500 resolves to INTERNAL_SERVER_ERROR.
_KIND_BY_STATUS: dict[int, ErrorCode] = {
    kind.status_code: code for code, kind in reversed(list(TAXONOMY.items()))
}

ViolationInput = Union[FieldViolation, Mapping[str, Any]]


def format_cause_stack(exception: Optional[BaseException]) -> Optional[str]:
    if exception is None:
        return None
    return "".join(traceback.format_exception(exception))


def create_error(
    kind: ErrorCode,
    message: str,
    *,
    error_code: Optional[ErrorCode] = None,
    severity: Optional[ErrorSeverity] = None,
    is_operational: bool = True,
    cause_stack: Optional[str] = None,
    details: Optional[Sequence[FieldViolation]] = None,
    status_code: Optional[int] = None,
    timestamp: Optional[datetime] = None,
) -> ErrorDetail:
    """Build an ErrorDetail from a taxonomy kind, applying its defaults.

    Args:
        kind: Taxonomy kind supplying default status code and severity
        message: Human-readable description
        error_code: Refined machine-readable code (defaults to ``kind``)
        severity: Overrides the kind's default severity
        is_operational: False when the failure signals corrupted process state
        cause_stack: Formatted traceback of the underlying cause
        details: Field-level violations (validation errors only)
        status_code: Overrides the kind's default status code
        timestamp: Creation time (defaults to now, UTC)

    Returns:
        Immutable ErrorDetail
    """
    defaults = TAXONOMY[kind]
    return ErrorDetail(
        message=message,
        status_code=status_code if status_code is not None else defaults.status_code,
        error_code=error_code or kind,
        severity=severity or defaults.severity,
        is_operational=is_operational,
        timestamp=timestamp or datetime.now(UTC),
        cause_stack=cause_stack,
        details=tuple(details) if details is not None else None,
    )


def _to_violation(item: ViolationInput) -> FieldViolation:
    if isinstance(item, FieldViolation):
        return item
    return FieldViolation(
        field=str(item.get("field", "")),
        message=str(item.get("message", "Invalid value")),
        value=json_safe(item.get("value")),
    )


def create_validation_error(
    cause: Union[ValidationCause, Sequence[ViolationInput], None] = None,
    *,
    message: str = "Validation failed",
    timestamp: Optional[datetime] = None,
) -> ErrorDetail:
    """Flatten field-level violations into a VALIDATION_ERROR."""
    exception: Optional[BaseException] = None
    if isinstance(cause, ValidationCause):
        violations = cause.violations
        exception = cause.exception
    else:
        violations = tuple(_to_violation(item) for item in cause or ())

    return create_error(
        ErrorCode.VALIDATION_ERROR,
        message,
        cause_stack=format_cause_stack(exception),
        details=violations or None,
        timestamp=timestamp,
    )


def create_authentication_error(
    cause: Optional[TokenCause] = None,
    *,
    message: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> ErrorDetail:
    if message is None:
        if cause is not None and cause.code is TokenCauseCode.EXPIRED:
            message = "Token has expired"
        elif cause is not None:
            message = "Invalid authentication token"
        else:
            message = "Authentication failed"
    return create_error(
        ErrorCode.AUTHENTICATION_ERROR,
        message,
        cause_stack=format_cause_stack(cause.exception if cause else None),
        timestamp=timestamp,
    )


def create_authorization_error(
    message: str = "Access denied", *, timestamp: Optional[datetime] = None
) -> ErrorDetail:
    return create_error(ErrorCode.AUTHORIZATION_ERROR, message, timestamp=timestamp)


def create_not_found_error(
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    *,
    message: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> ErrorDetail:
    if message is None:
        if resource_type and resource_id:
            message = f"{resource_type} with ID '{resource_id}' not found"
        elif resource_type:
            message = f"{resource_type} not found"
        else:
            message = "Resource not found"
    return create_error(ErrorCode.NOT_FOUND, message, timestamp=timestamp)


def create_route_not_found_error(
    method: str, path: str, *, timestamp: Optional[datetime] = None
) -> ErrorDetail:
    return create_error(
        ErrorCode.NOT_FOUND,
        f"Route {method.upper()} {path} not found",
        error_code=ErrorCode.ROUTE_NOT_FOUND,
        timestamp=timestamp,
    )


def create_method_not_allowed_error(
    method: str, path: str, *, timestamp: Optional[datetime] = None
) -> ErrorDetail:
    return create_error(
        ErrorCode.NOT_FOUND,
        f"Method {method.upper()} not allowed for {path}",
        error_code=ErrorCode.METHOD_NOT_ALLOWED,
        status_code=405,
        timestamp=timestamp,
    )


def create_conflict_error(
    message: str = "Resource conflict", *, timestamp: Optional[datetime] = None
) -> ErrorDetail:
    return create_error(ErrorCode.CONFLICT, message, timestamp=timestamp)


def create_rate_limit_error(
    message: str = "Too many requests", *, timestamp: Optional[datetime] = None
) -> ErrorDetail:
    return create_error(ErrorCode.RATE_LIMIT_EXCEEDED, message, timestamp=timestamp)


def create_internal_error(
    cause: Union[UnrecognizedCause, BaseException, None] = None,
    *,
    message: str = "An unexpected error occurred",
    timestamp: Optional[datetime] = None,
) -> ErrorDetail:
    """Wrap an unrecognized failure; its own text stays in the stack only."""
    exception = cause.exception if isinstance(cause, UnrecognizedCause) else cause
    return create_error(
        ErrorCode.INTERNAL_SERVER_ERROR,
        message,
        cause_stack=format_cause_stack(exception),
        timestamp=timestamp,
    )


_DATABASE_REFINEMENTS: dict[DatabaseCauseCode, tuple[str, ErrorSeverity]] = {
    DatabaseCauseCode.DUPLICATE_KEY: ("Duplicate entry found", ErrorSeverity.LOW),
    DatabaseCauseCode.CONNECTION_REFUSED: ("Database connection refused", ErrorSeverity.HIGH),
    DatabaseCauseCode.TIMEOUT: ("Database connection timeout", ErrorSeverity.MEDIUM),
    DatabaseCauseCode.OTHER: ("Database operation failed", ErrorSeverity.MEDIUM),
}


def create_database_error(
    cause: Optional[DatabaseCause] = None, *, timestamp: Optional[datetime] = None
) -> ErrorDetail:
    code = cause.code if cause else DatabaseCauseCode.OTHER
    message, severity = _DATABASE_REFINEMENTS[code]
    return create_error(
        ErrorCode.DATABASE_ERROR,
        message,
        severity=severity,
        cause_stack=format_cause_stack(cause.exception if cause else None),
        timestamp=timestamp,
    )


_FILE_SYSTEM_REFINEMENTS: dict[FileSystemCauseCode, tuple[str, ErrorSeverity]] = {
    FileSystemCauseCode.NOT_FOUND: ("File or directory not found", ErrorSeverity.LOW),
    FileSystemCauseCode.PERMISSION_DENIED: ("Permission denied", ErrorSeverity.MEDIUM),
    FileSystemCauseCode.NO_SPACE: ("No space left on device", ErrorSeverity.HIGH),
    FileSystemCauseCode.OTHER: ("File system operation failed", ErrorSeverity.MEDIUM),
}


def create_file_system_error(
    cause: Optional[FileSystemCause] = None, *, timestamp: Optional[datetime] = None
) -> ErrorDetail:
    code = cause.code if cause else FileSystemCauseCode.OTHER
    message, severity = _FILE_SYSTEM_REFINEMENTS[code]
    return create_error(
        ErrorCode.FILE_SYSTEM_ERROR,
        message,
        severity=severity,
        cause_stack=format_cause_stack(cause.exception if cause else None),
        timestamp=timestamp,
    )


_NETWORK_REFINEMENTS: dict[NetworkCauseCode, tuple[str, ErrorSeverity]] = {
    NetworkCauseCode.CONNECTION_REFUSED: ("Connection refused", ErrorSeverity.HIGH),
    NetworkCauseCode.TIMEOUT: ("Connection timeout", ErrorSeverity.MEDIUM),
    NetworkCauseCode.HOST_NOT_FOUND: ("Host not found", ErrorSeverity.MEDIUM),
    NetworkCauseCode.OTHER: ("Network operation failed", ErrorSeverity.MEDIUM),
}


def create_network_error(
    cause: Optional[NetworkCause] = None, *, timestamp: Optional[datetime] = None
) -> ErrorDetail:
    code = cause.code if cause else NetworkCauseCode.OTHER
    message, severity = _NETWORK_REFINEMENTS[code]
    return create_error(
        ErrorCode.NETWORK_ERROR,
        message,
        severity=severity,
        cause_stack=format_cause_stack(cause.exception if cause else None),
        timestamp=timestamp,
    )


def create_timeout_error(
    cause: Optional[TimeoutCause] = None,
    *,
    message: str = "Request timeout",
    timestamp: Optional[datetime] = None,
) -> ErrorDetail:
    return create_error(
        ErrorCode.TIMEOUT_ERROR,
        message,
        cause_stack=format_cause_stack(cause.exception if cause else None),
        timestamp=timestamp,
    )


def create_service_unavailable_error(
    message: str = "Service unavailable", *, timestamp: Optional[datetime] = None
) -> ErrorDetail:
    return create_error(ErrorCode.SERVICE_UNAVAILABLE, message, timestamp=timestamp)


def create_health_check_error(
    cause: Optional[BaseException] = None, *, timestamp: Optional[datetime] = None
) -> ErrorDetail:
    return create_error(
        ErrorCode.SERVICE_UNAVAILABLE,
        "Health check failed",
        error_code=ErrorCode.HEALTH_CHECK_FAILED,
        cause_stack=format_cause_stack(cause),
        timestamp=timestamp,
    )


def create_http_error(
    cause: HttpCause,
    *,
    method: Optional[str] = None,
    path: Optional[str] = None,
    route_matched: bool = False,
    timestamp: Optional[datetime] = None,
) -> ErrorDetail:
    """Map a framework-raised HTTP exception onto the taxonomy.

    A 404 is a route miss only when no URL rule matched; a view that aborts
    with 404 keeps the plain NOT_FOUND kind and its own description.
    """
    if cause.status_code == 404 and method and path and not route_matched:
        return create_route_not_found_error(method, path, timestamp=timestamp)
    if cause.status_code == 405:
        if method and path:
            return create_method_not_allowed_error(method, path, timestamp=timestamp)
        return create_error(
            ErrorCode.NOT_FOUND,
            cause.description or "Method not allowed",
            error_code=ErrorCode.METHOD_NOT_ALLOWED,
            status_code=405,
            timestamp=timestamp,
        )

    kind = _KIND_BY_STATUS.get(cause.status_code)
    if kind is None:
        kind = (
            ErrorCode.VALIDATION_ERROR
            if 400 <= cause.status_code < 500
            else ErrorCode.INTERNAL_SERVER_ERROR
        )
    return create_error(
        kind,
        cause.description or "Request failed",
        status_code=cause.status_code,
        timestamp=timestamp,
    )


def create_unhandled_task_failure(
    exception: Optional[BaseException] = None,
    *,
    message: str = "Unhandled task failure",
    timestamp: Optional[datetime] = None,
) -> ErrorDetail:
    return create_error(
        ErrorCode.INTERNAL_SERVER_ERROR,
        message,
        error_code=ErrorCode.UNHANDLED_TASK_FAILURE,
        severity=ErrorSeverity.CRITICAL,
        is_operational=False,
        cause_stack=format_cause_stack(exception),
        timestamp=timestamp,
    )


def create_uncaught_exception(
    exception: Optional[BaseException] = None,
    *,
    cause_stack: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> ErrorDetail:
    return create_error(
        ErrorCode.INTERNAL_SERVER_ERROR,
        "Uncaught exception",
        error_code=ErrorCode.UNCAUGHT_EXCEPTION,
        severity=ErrorSeverity.CRITICAL,
        is_operational=False,
        cause_stack=cause_stack or format_cause_stack(exception),
        timestamp=timestamp,
    )
