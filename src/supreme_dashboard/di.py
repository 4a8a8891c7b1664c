"""
Dashboard dependency injection configuration.
"""

from __future__ import annotations

from dishka import Provider, Scope, provide

from supreme_dashboard.config import Settings
from supreme_service_libs.protocols import ErrorInterceptorProtocol, ErrorLogPipelineProtocol


class DashboardProvider(Provider):
    """Exposes the app's error-handling infrastructure to injected routes.

    The pipeline and interceptor are built by create_app, because the error
    handlers are registered before any container scope exists.
    """

    def __init__(
        self,
        settings: Settings,
        error_pipeline: ErrorLogPipelineProtocol,
        error_interceptor: ErrorInterceptorProtocol,
    ) -> None:
        super().__init__()
        self._settings = settings
        self._error_pipeline = error_pipeline
        self._error_interceptor = error_interceptor

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide service settings."""
        return self._settings

    @provide(scope=Scope.APP)
    def provide_error_pipeline(self) -> ErrorLogPipelineProtocol:
        """Provide the shared error log pipeline."""
        return self._error_pipeline

    @provide(scope=Scope.APP)
    def provide_error_interceptor(self) -> ErrorInterceptorProtocol:
        return self._error_interceptor
