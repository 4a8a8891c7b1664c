"""Fixtures for app-level tests built through create_app."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from supreme_dashboard.app import create_app
from supreme_dashboard.config import Settings
from supreme_service_libs.quart_app import SupremeApp


@pytest.fixture
def app_log_dir(tmp_path: Path) -> Path:
    return tmp_path / "app-logs"


@pytest.fixture
def settings(app_log_dir: Path) -> Settings:
    """Settings pointing the error log at a temporary directory."""
    return Settings(ERROR_LOG_DIR=app_log_dir, VERBOSE_ERRORS=False)


@pytest.fixture
def app(settings: Settings) -> SupremeApp:
    return create_app(settings)


@pytest.fixture
def app_log_lines(app_log_dir: Path) -> Any:
    """Return a callable reading every JSON line across all partitions."""

    def _read() -> list[dict[str, Any]]:
        lines: list[dict[str, Any]] = []
        for partition in sorted(app_log_dir.glob("error-*.log")):
            lines.extend(json.loads(line) for line in partition.read_text("utf-8").splitlines())
        return lines

    return _read
