"""Health routes for the Supreme dashboard."""

from __future__ import annotations

import os
from typing import Any

import aiofiles.os
from dishka import FromDishka
from quart import Blueprint
from quart_dishka import inject

from supreme_core.models.error_models import ErrorDetail
from supreme_dashboard.config import Settings
from supreme_service_libs.error_handling import async_boundary, create_health_check_error
from supreme_service_libs.logging_utils import create_service_logger
from supreme_service_libs.protocols import ErrorInterceptorProtocol, ErrorLogPipelineProtocol
from supreme_service_libs.result import Result

logger = create_service_logger("dashboard.api.health")


def create_health_blueprint(interceptor: ErrorInterceptorProtocol) -> Blueprint:
    """Build the health blueprint bound to the app's interceptor."""
    health_bp = Blueprint("health_routes", __name__)

    @health_bp.route("/healthz")
    @async_boundary(interceptor)
    @inject
    async def health_check(
        settings: FromDishka[Settings],
        error_pipeline: FromDishka[ErrorLogPipelineProtocol],
    ) -> Result[tuple[dict[str, Any], int], ErrorDetail]:
        """Healthy only while the error log partition directory is writable."""
        log_dir = error_pipeline.log_dir
        try:
            await aiofiles.os.makedirs(log_dir, exist_ok=True)
            writable = await aiofiles.os.access(log_dir, os.W_OK)
        except OSError as e:
            logger.error(f"Error log directory unavailable: {e}", path=str(log_dir))
            return Result.err(create_health_check_error(e))

        if not writable:
            logger.error("Error log directory is not writable", path=str(log_dir))
            return Result.err(create_health_check_error())

        return Result.ok(
            (
                {
                    "service": settings.SERVICE_NAME,
                    "status": "healthy",
                    "message": "Supreme dashboard is healthy",
                    "version": settings.VERSION,
                    "checks": {
                        "service_responsive": True,
                        "error_log_writable": True,
                    },
                    "environment": settings.ENVIRONMENT.value,
                },
                200,
            )
        )

    return health_bp
