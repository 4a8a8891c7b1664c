"""Shared fixtures for the Supreme error-handling test suite."""

from __future__ import annotations

import json
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
import structlog

from supreme_service_libs.error_handling import ErrorInterceptor, ErrorLogPipeline
from supreme_service_libs.error_handling import process_handlers as process_handlers_module

FIXED_NOW = datetime(2025, 3, 14, 23, 59, 30, tzinfo=UTC)


@pytest.fixture
def fixed_now() -> datetime:
    """Provide a deterministic clock value."""
    return FIXED_NOW


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    return tmp_path / "logs"


@pytest.fixture
def pipeline(log_dir: Path, fixed_now: datetime) -> ErrorLogPipeline:
    """Pipeline writing into a temporary directory with a frozen clock."""
    return ErrorLogPipeline(log_dir, clock=lambda: fixed_now)


@pytest.fixture
def interceptor(pipeline: ErrorLogPipeline) -> ErrorInterceptor:
    return ErrorInterceptor(pipeline, verbose=False)


@pytest.fixture
def read_log_lines(log_dir: Path, fixed_now: datetime) -> Any:
    """Return a callable reading the JSON lines of today's partition."""

    def _read() -> list[dict[str, Any]]:
        partition = log_dir / f"error-{fixed_now.date().isoformat()}.log"
        if not partition.exists():
            return []
        return [json.loads(line) for line in partition.read_text("utf-8").splitlines()]

    return _read


@pytest.fixture(autouse=True)
def _reset_process_handlers() -> Generator[None, None, None]:
    """Ensure no test leaves process-wide hooks installed."""
    yield
    installed = process_handlers_module._installed
    if installed is not None:
        installed.uninstall()


@pytest.fixture(autouse=True)
def _reset_structlog() -> Generator[None, None, None]:
    yield
    structlog.reset_defaults()
