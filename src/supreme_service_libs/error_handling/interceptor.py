"""
Request-scope error interception.

``ErrorInterceptor.handle`` is the per-request boundary: it classifies a
failure (unless it is already an ErrorDetail), records it through the logging
pipeline, and only then formats the reply. It never raises.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlsplit

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from supreme_core.models.error_models import ErrorDetail, ErrorResponse, RequestContext

from supreme_service_libs.error_handling.causes import (
    DatabaseCause,
    FileSystemCause,
    HttpCause,
    NetworkCause,
    TimeoutCause,
    TokenCause,
    ValidationCause,
    adapt_cause,
)
from supreme_service_libs.error_handling.factories import (
    create_authentication_error,
    create_database_error,
    create_file_system_error,
    create_http_error,
    create_internal_error,
    create_network_error,
    create_timeout_error,
    create_validation_error,
)
from supreme_service_libs.error_handling.response_formatter import format_error_response
from supreme_service_libs.error_handling.supreme_error import SupremeError
from supreme_service_libs.logging_utils import create_service_logger
from supreme_service_libs.protocols import ErrorLogPipelineProtocol
from supreme_service_libs.result import Result


def classify(failure: object, context: Optional[RequestContext] = None) -> ErrorDetail:
    """Convert any failure into an ErrorDetail. Already-classified errors pass through."""
    if isinstance(failure, ErrorDetail):
        return failure
    if isinstance(failure, SupremeError):
        return failure.error_detail
    if isinstance(failure, Result) and failure.is_err:
        return classify(failure.error, context)
    if not isinstance(failure, BaseException):
        return create_internal_error(RuntimeError(f"Non-exception failure: {failure!r}"))

    cause = adapt_cause(failure)
    if isinstance(cause, ValidationCause):
        return create_validation_error(cause)
    if isinstance(cause, TokenCause):
        return create_authentication_error(cause)
    if isinstance(cause, DatabaseCause):
        return create_database_error(cause)
    if isinstance(cause, FileSystemCause):
        return create_file_system_error(cause)
    if isinstance(cause, NetworkCause):
        return create_network_error(cause)
    if isinstance(cause, TimeoutCause):
        return create_timeout_error(cause)
    if isinstance(cause, HttpCause):
        ctx = context or RequestContext()
        path = urlsplit(ctx.url).path if ctx.url else None
        return create_http_error(
            cause, method=ctx.method, path=path, route_matched=bool(ctx.route_matched)
        )
    return create_internal_error(cause)


def _mark_span(error: ErrorDetail, failure: object) -> None:
    span = trace.get_current_span()
    if span is None or not span.is_recording():
        return
    if isinstance(failure, BaseException):
        span.record_exception(failure)
    span.set_status(Status(StatusCode.ERROR, error.message))
    span.set_attribute("error", True)
    span.set_attribute("error.code", error.error_code.value)
    span.set_attribute("error.severity", error.severity.value)
    span.set_attribute("error.operational", error.is_operational)
    span.set_attribute("http.status_code", error.status_code)


class ErrorInterceptor:
    """Classify, record, then format. The log attempt always precedes the reply."""

    def __init__(
        self,
        pipeline: ErrorLogPipelineProtocol,
        *,
        verbose: bool = False,
        logger: Optional[Any] = None,
    ) -> None:
        self._pipeline = pipeline
        self._verbose = verbose
        self._logger = logger or create_service_logger("error_interceptor")

    @property
    def verbose(self) -> bool:
        return self._verbose

    async def handle(
        self, failure: object, context: Optional[RequestContext] = None
    ) -> tuple[ErrorResponse, int]:
        request_id = getattr(context, "request_id", None)
        try:
            error = classify(failure, context)
            await self._pipeline.record(error, context)
            _mark_span(error, failure)
            return format_error_response(error, request_id, self._verbose), error.status_code
        except Exception as e:
            self._logger.error(f"Error interceptor fault: {e}", exc_info=True)
            fallback = create_internal_error()
            return format_error_response(fallback, request_id), fallback.status_code
