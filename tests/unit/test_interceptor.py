"""
Unit tests for request-scope error interception.

Verifies classification of raw failures, passthrough of pre-classified
errors, log-before-reply ordering and the never-raises guarantee.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest
from pydantic import BaseModel, ValidationError
from werkzeug.exceptions import MethodNotAllowed, NotFound

from supreme_core.error_enums import ErrorCode, ErrorSeverity
from supreme_core.models.error_models import RequestContext
from supreme_service_libs.error_handling import interceptor as interceptor_module
from supreme_service_libs.error_handling.error_log_pipeline import ErrorLogPipeline
from supreme_service_libs.error_handling.factories import (
    create_conflict_error,
    create_not_found_error,
)
from supreme_service_libs.error_handling.interceptor import ErrorInterceptor, classify
from supreme_service_libs.error_handling.supreme_error import SupremeError
from supreme_service_libs.result import Result


class DeployRequest(BaseModel):
    project: str
    replicas: int


class TestClassify:
    def test_raw_exception_is_internal(self) -> None:
        error = classify(RuntimeError("boom"))

        assert error.error_code == ErrorCode.INTERNAL_SERVER_ERROR
        assert error.status_code == 500
        assert error.message == "An unexpected error occurred"

    def test_error_detail_passes_through_unchanged(self) -> None:
        original = create_conflict_error("Project already exists")
        assert classify(original) is original

    def test_supreme_error_is_unwrapped(self) -> None:
        original = create_not_found_error("Project", "blog")
        assert classify(SupremeError(original)) is original

    def test_result_err_is_unwrapped(self) -> None:
        original = create_not_found_error()
        assert classify(Result.err(original)) is original

    def test_file_not_found_is_file_system_error(self) -> None:
        error = classify(FileNotFoundError(2, "No such file or directory", "/srv/x"))

        assert error.error_code == ErrorCode.FILE_SYSTEM_ERROR
        assert error.severity == ErrorSeverity.LOW

    def test_pydantic_error_becomes_validation_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            DeployRequest.model_validate({"project": "blog"})

        error = classify(exc_info.value)

        assert error.error_code == ErrorCode.VALIDATION_ERROR
        assert error.details is not None
        assert error.details[0].field == "replicas"

    def test_unknown_route_uses_request_path(self) -> None:
        context = RequestContext(url="http://localhost/api/missing?x=1", method="GET")

        error = classify(NotFound(), context)

        assert error.error_code == ErrorCode.ROUTE_NOT_FOUND
        assert error.message == "Route GET /api/missing not found"

    def test_abort_inside_matched_route_is_plain_not_found(self) -> None:
        context = RequestContext(
            url="http://localhost/api/projects/blog", method="GET", route_matched=True
        )

        error = classify(NotFound(description="Project 'blog' not found"), context)

        assert error.error_code == ErrorCode.NOT_FOUND
        assert error.message == "Project 'blog' not found"

    def test_method_not_allowed_keeps_status(self) -> None:
        error = classify(MethodNotAllowed(valid_methods=["GET"]))

        assert error.status_code == 405
        assert error.error_code == ErrorCode.METHOD_NOT_ALLOWED

    def test_non_exception_failure_is_internal(self) -> None:
        error = classify("something odd")

        assert error.error_code == ErrorCode.INTERNAL_SERVER_ERROR
        assert error.cause_stack is not None


class TestErrorInterceptor:
    async def test_raw_failure_yields_internal_response(
        self, interceptor: ErrorInterceptor, read_log_lines: Any
    ) -> None:
        context = RequestContext(url="http://localhost/api/deploy", method="POST", request_id="r1")

        body, status_code = await interceptor.handle(RuntimeError("boom"), context)

        assert status_code == 500
        payload = body.to_json_dict()
        assert payload["success"] is False
        assert payload["error"]["code"] == "INTERNAL_SERVER_ERROR"
        assert payload["error"]["requestId"] == "r1"
        assert "stack" not in payload["error"]

        lines = read_log_lines()
        assert len(lines) == 1
        assert lines[0]["requestId"] == "r1"
        assert "RuntimeError: boom" in lines[0]["stack"]

    async def test_verbose_interceptor_exposes_stack(self, pipeline: ErrorLogPipeline) -> None:
        verbose = ErrorInterceptor(pipeline, verbose=True)

        body, _ = await verbose.handle(RuntimeError("boom"))

        assert body.error.stack is not None
        assert "boom" in body.error.stack

    async def test_pre_classified_error_is_not_reclassified(
        self, interceptor: ErrorInterceptor
    ) -> None:
        original = create_conflict_error("Project already exists")

        body, status_code = await interceptor.handle(SupremeError(original))

        assert status_code == 409
        assert body.error.message == "Project already exists"
        assert body.error.timestamp == original.timestamp

    async def test_record_happens_before_formatting(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        calls: list[str] = []
        pipeline = Mock()
        pipeline.record = AsyncMock(side_effect=lambda *_: calls.append("record"))
        real_format = interceptor_module.format_error_response

        def tracking_format(*args: Any, **kwargs: Any) -> Any:
            calls.append("format")
            return real_format(*args, **kwargs)

        monkeypatch.setattr(interceptor_module, "format_error_response", tracking_format)

        await ErrorInterceptor(pipeline).handle(RuntimeError("boom"))

        assert calls == ["record", "format"]

    async def test_pipeline_fault_still_yields_response(self) -> None:
        pipeline = Mock()
        pipeline.record = AsyncMock(side_effect=RuntimeError("pipeline exploded"))
        interceptor = ErrorInterceptor(pipeline, logger=Mock())

        body, status_code = await interceptor.handle(
            create_not_found_error(), RequestContext(request_id="r9")
        )

        assert status_code == 500
        assert body.error.code == "INTERNAL_SERVER_ERROR"
        assert body.error.request_id == "r9"

    async def test_missing_context_uses_unknown_request_id(
        self, interceptor: ErrorInterceptor
    ) -> None:
        body, _ = await interceptor.handle(RuntimeError("boom"))
        assert body.error.request_id == "unknown"
