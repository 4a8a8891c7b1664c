"""
Type-safe Quart application class for Supreme services.

Gives app-level error-handling infrastructure typed attributes instead of
ad hoc ``setattr``/``getattr`` on the app object.
"""

from __future__ import annotations

from typing import Any, Optional

from dishka import AsyncContainer
from quart import Quart

from supreme_service_libs.error_handling.process_handlers import ProcessHandlers
from supreme_service_libs.protocols import ErrorInterceptorProtocol, ErrorLogPipelineProtocol


class SupremeApp(Quart):
    """Quart application with guaranteed Supreme error-handling infrastructure.

    GUARANTEED INFRASTRUCTURE (Non-Optional):
        container: Dishka async container for dependency injection
        error_pipeline: Durable error log shared by request and process scope
        error_interceptor: Request-scope boundary registered as error handler
        extensions: Standard Quart extensions dictionary

    OPTIONAL INFRASTRUCTURE:
        process_handlers: Set by the process bootstrap, never by create_app

    Examples:
        >>> def create_app() -> SupremeApp:
        ...     app = SupremeApp(__name__)
        ...     app.error_pipeline = ErrorLogPipeline(settings.ERROR_LOG_DIR)
        ...     app.error_interceptor = ErrorInterceptor(app.error_pipeline)
        ...     app.container = make_async_container(...)
        ...     return app
    """

    container: AsyncContainer
    error_pipeline: ErrorLogPipelineProtocol
    error_interceptor: ErrorInterceptorProtocol
    extensions: dict[str, Any]

    process_handlers: Optional[ProcessHandlers] = None
    """Installed once per process by the bootstrap, after the loop is running."""

    def __init__(self, import_name: str, *args: Any, **kwargs: Any) -> None:
        """Initialize with an empty extensions dict.

        container, error_pipeline and error_interceptor MUST be set in the
        service's create_app factory.
        """
        super().__init__(import_name, *args, **kwargs)

        self.extensions = {}
        self.process_handlers = None
