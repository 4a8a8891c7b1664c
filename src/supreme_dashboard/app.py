"""
Supreme Dashboard Application.

Wires the error-handling core into a Quart app. Process-wide handlers are not
installed here; that happens once in ``run_service`` after the loop starts.
"""

from __future__ import annotations

from typing import Optional

from dishka import make_async_container
from quart_dishka import QuartDishka

from supreme_dashboard.api.health_routes import create_health_blueprint
from supreme_dashboard.config import Settings
from supreme_dashboard.di import DashboardProvider
from supreme_service_libs.error_handling import (
    ErrorInterceptor,
    ErrorLogPipeline,
    LoggingAlertNotifier,
)
from supreme_service_libs.error_handling.quart import (
    register_error_handlers,
    setup_request_id_middleware,
)
from supreme_service_libs.logging_utils import create_service_logger
from supreme_service_libs.quart_app import SupremeApp

logger = create_service_logger("dashboard.app")


def create_app(settings: Optional[Settings] = None) -> SupremeApp:
    """Create and configure the Quart application.

    Args:
        settings: Optional settings override for testing

    Returns:
        Configured SupremeApp
    """
    if settings is None:
        settings = Settings()

    app = SupremeApp(__name__)
    app.config.update({"DEBUG": settings.LOG_LEVEL == "DEBUG"})

    app.error_pipeline = ErrorLogPipeline(
        settings.ERROR_LOG_DIR, notifier=LoggingAlertNotifier()
    )
    app.error_interceptor = ErrorInterceptor(
        app.error_pipeline, verbose=settings.VERBOSE_ERRORS
    )
    app.container = make_async_container(
        DashboardProvider(settings, app.error_pipeline, app.error_interceptor)
    )
    QuartDishka(app=app, container=app.container)

    setup_request_id_middleware(app)
    register_error_handlers(app, app.error_interceptor)
    app.register_blueprint(create_health_blueprint(app.error_interceptor))

    if settings.VERBOSE_ERRORS and settings.is_production():
        logger.warning("Verbose error responses are enabled in production")

    @app.after_serving
    async def shutdown() -> None:
        """Close the DI container."""
        try:
            await app.container.close()
            logger.info("Supreme dashboard shutdown completed")
        except Exception as e:
            logger.error(f"Error during shutdown: {e}", exc_info=True)

    return app
