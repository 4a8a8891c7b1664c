"""Tests for dashboard health routes with dependency injection."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import patch

import aiofiles.os

from supreme_dashboard.app import create_app
from supreme_dashboard.config import Settings
from supreme_service_libs.quart_app import SupremeApp


class TestHealthRoutes:
    """Test suite for /healthz through the full create_app wiring."""

    async def test_health_check_healthy(self, app: SupremeApp, app_log_dir: Path) -> None:
        async with app.test_client() as client:
            response = await client.get("/healthz")

        assert response.status_code == 200
        data = await response.get_json()
        assert data["service"] == "supreme-dashboard"
        assert data["status"] == "healthy"
        assert data["checks"]["error_log_writable"] is True
        assert app_log_dir.is_dir()

    async def test_unwritable_log_dir_is_unhealthy(
        self, app: SupremeApp, app_log_lines: Any
    ) -> None:
        with patch.object(aiofiles.os, "access", return_value=False):
            async with app.test_client() as client:
                response = await client.get("/healthz")

        assert response.status_code == 503
        data = await response.get_json()
        assert data["success"] is False
        assert data["error"]["code"] == "HEALTH_CHECK_FAILED"

        lines = app_log_lines()
        assert len(lines) == 1
        assert lines[0]["level"] == "high"

    async def test_log_dir_that_is_a_file_is_unhealthy(self, tmp_path: Path) -> None:
        blocker = tmp_path / "occupied"
        blocker.write_text("not a directory")
        app = create_app(Settings(ERROR_LOG_DIR=blocker))

        async with app.test_client() as client:
            response = await client.get("/healthz")

        assert response.status_code == 503
        data = await response.get_json()
        assert data["error"]["code"] == "HEALTH_CHECK_FAILED"

    async def test_verbose_settings_expose_stack(self, tmp_path: Path) -> None:
        app = create_app(Settings(ERROR_LOG_DIR=tmp_path / "logs", VERBOSE_ERRORS=True))

        @app.route("/api/boom")
        async def boom() -> Any:
            raise RuntimeError("verbose boom")

        async with app.test_client() as client:
            response = await client.get("/api/boom")

        data = await response.get_json()
        assert "RuntimeError: verbose boom" in data["error"]["stack"]
