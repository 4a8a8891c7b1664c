"""
Behavioral contracts for the Supreme error-handling core.

Components depend on these protocols rather than on concrete classes so the
pipeline, notifier and interceptor can be swapped for test doubles.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Protocol

from supreme_core.models.error_models import ErrorResponse, LogEntry, RequestContext


class AlertNotifierProtocol(Protocol):
    """External monitoring collaborator notified of high/critical errors."""

    def notify(self, entry: LogEntry) -> None:
        """
        Hand a high or critical entry to monitoring.

        Implementations must return quickly; they run on the request path.
        """
        ...


class ErrorLogPipelineProtocol(Protocol):
    """Durable, append-only error log with a console mirror."""

    @property
    def log_dir(self) -> Path:
        """Directory holding the date-partitioned log files."""
        ...

    async def record(self, error: Any, context: Optional[RequestContext] = None) -> None:
        """
        Record one observed failure. Never raises.

        Args:
            error: An ErrorDetail, or any partial error-like object or mapping
            context: Request context, when the failure happened inside a request
        """
        ...

    def record_sync(self, error: Any, context: Optional[RequestContext] = None) -> None:
        """Blocking variant for callers without a running event loop. Never raises."""
        ...


class ErrorInterceptorProtocol(Protocol):
    """Request-scope boundary turning any failure into an error response."""

    async def handle(
        self, failure: object, context: Optional[RequestContext] = None
    ) -> tuple[ErrorResponse, int]:
        """
        Classify, record and format a failure.

        Returns:
            The error response and the HTTP status code to send it with
        """
        ...
