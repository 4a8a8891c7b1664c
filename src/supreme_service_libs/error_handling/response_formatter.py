"""Projection of an ErrorDetail onto the wire-level error response."""

from __future__ import annotations

from typing import Optional

from supreme_core.models.error_models import ErrorBody, ErrorDetail, ErrorResponse

UNKNOWN_REQUEST_ID = "unknown"


def format_error_response(
    error: ErrorDetail,
    request_id: Optional[str] = None,
    verbose: bool = False,
) -> ErrorResponse:
    """
    Build the response body for an error.

    The stack is included only in verbose mode and only when the error carries
    one; details are included whenever the error carries them. The timestamp is
    the error's own, so formatting the same error twice yields the same body.

    Args:
        error: The error to project
        request_id: Identifier of the failing request (defaults to "unknown")
        verbose: Whether stack traces may be exposed

    Returns:
        ErrorResponse with ``success`` always False
    """
    return ErrorResponse(
        error=ErrorBody(
            message=error.message,
            code=error.error_code.value,
            status_code=error.status_code,
            timestamp=error.timestamp,
            request_id=request_id or UNKNOWN_REQUEST_ID,
            stack=error.cause_stack if verbose else None,
            details=error.details,
        )
    )
