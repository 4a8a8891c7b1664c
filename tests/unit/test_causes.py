"""
Unit tests for cause adaptation.

Each raw collaborator failure must land in exactly one recognized cause
variant; anything else becomes UnrecognizedCause.
"""

from __future__ import annotations

import errno
import socket

import jwt
import pytest
from pydantic import BaseModel, ValidationError
from sqlalchemy import exc as sa_exc
from werkzeug.exceptions import MethodNotAllowed, NotFound

from supreme_service_libs.error_handling.causes import (
    DatabaseCause,
    DatabaseCauseCode,
    FileSystemCause,
    FileSystemCauseCode,
    HttpCause,
    NetworkCause,
    NetworkCauseCode,
    TimeoutCause,
    TokenCause,
    TokenCauseCode,
    UnrecognizedCause,
    ValidationCause,
    adapt_cause,
    json_safe,
)


class ProjectPayload(BaseModel):
    name: str
    port: int


class TestFileSystemCauses:
    @pytest.mark.parametrize(
        "exc, expected",
        [
            (FileNotFoundError(errno.ENOENT, "No such file", "/srv/a"), FileSystemCauseCode.NOT_FOUND),
            (OSError(errno.ENOENT, "No such file"), FileSystemCauseCode.NOT_FOUND),
            (PermissionError(errno.EACCES, "Denied", "/srv/b"), FileSystemCauseCode.PERMISSION_DENIED),
            (OSError(errno.EPERM, "Not permitted"), FileSystemCauseCode.PERMISSION_DENIED),
            (OSError(errno.ENOSPC, "No space left on device"), FileSystemCauseCode.NO_SPACE),
            (OSError(errno.EISDIR, "Is a directory"), FileSystemCauseCode.OTHER),
        ],
    )
    def test_os_errors_become_file_system_causes(
        self, exc: OSError, expected: FileSystemCauseCode
    ) -> None:
        cause = adapt_cause(exc)

        assert isinstance(cause, FileSystemCause)
        assert cause.code == expected
        assert cause.exception is exc

    def test_path_is_carried(self) -> None:
        cause = adapt_cause(FileNotFoundError(errno.ENOENT, "No such file", "/srv/a"))

        assert isinstance(cause, FileSystemCause)
        assert cause.path == "/srv/a"


class TestNetworkCauses:
    def test_connection_refused(self) -> None:
        cause = adapt_cause(ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused"))
        assert cause == NetworkCause(code=NetworkCauseCode.CONNECTION_REFUSED)

    def test_errno_timeout_is_network_timeout(self) -> None:
        cause = adapt_cause(OSError(errno.ETIMEDOUT, "Connection timed out"))
        assert cause == NetworkCause(code=NetworkCauseCode.TIMEOUT)

    def test_host_not_found(self) -> None:
        cause = adapt_cause(socket.gaierror(socket.EAI_NONAME, "Name or service not known"))
        assert cause == NetworkCause(code=NetworkCauseCode.HOST_NOT_FOUND)

    def test_other_connection_error(self) -> None:
        cause = adapt_cause(ConnectionResetError("reset by peer"))
        assert cause == NetworkCause(code=NetworkCauseCode.OTHER)

    def test_plain_timeout_is_timeout_cause(self) -> None:
        assert isinstance(adapt_cause(TimeoutError()), TimeoutCause)


class TestValidationAndTokenCauses:
    def test_pydantic_validation_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            ProjectPayload.model_validate({"name": "blog", "port": "not-a-number"})

        cause = adapt_cause(exc_info.value)

        assert isinstance(cause, ValidationCause)
        assert len(cause.violations) == 1
        assert cause.violations[0].field == "port"
        assert cause.violations[0].value == "not-a-number"

    def test_expired_token(self) -> None:
        cause = adapt_cause(jwt.ExpiredSignatureError("Signature has expired"))
        assert cause == TokenCause(code=TokenCauseCode.EXPIRED)

    def test_invalid_token(self) -> None:
        cause = adapt_cause(jwt.DecodeError("Not enough segments"))
        assert cause == TokenCause(code=TokenCauseCode.INVALID)


class TestDatabaseCauses:
    def test_integrity_error_with_duplicate_message(self) -> None:
        orig = Exception('duplicate key value violates unique constraint "projects_name_key"')
        exc = sa_exc.IntegrityError("INSERT INTO projects ...", {}, orig)

        assert adapt_cause(exc) == DatabaseCause(code=DatabaseCauseCode.DUPLICATE_KEY)

    def test_integrity_error_without_duplicate_marker(self) -> None:
        exc = sa_exc.IntegrityError("INSERT", {}, Exception("null value in column"))
        assert adapt_cause(exc) == DatabaseCause(code=DatabaseCauseCode.OTHER)

    def test_operational_error_connection_refused(self) -> None:
        exc = sa_exc.OperationalError("SELECT 1", {}, ConnectionRefusedError("refused"))
        assert adapt_cause(exc) == DatabaseCause(code=DatabaseCauseCode.CONNECTION_REFUSED)

    def test_pool_timeout(self) -> None:
        exc = sa_exc.TimeoutError("QueuePool limit reached")
        assert adapt_cause(exc) == DatabaseCause(code=DatabaseCauseCode.TIMEOUT)


class TestHttpAndUnrecognizedCauses:
    def test_werkzeug_not_found(self) -> None:
        cause = adapt_cause(NotFound())

        assert isinstance(cause, HttpCause)
        assert cause.status_code == 404

    def test_werkzeug_method_not_allowed(self) -> None:
        cause = adapt_cause(MethodNotAllowed(valid_methods=["GET"]))

        assert isinstance(cause, HttpCause)
        assert cause.status_code == 405

    def test_anything_else_is_unrecognized(self) -> None:
        exc = KeyError("missing")
        assert adapt_cause(exc) == UnrecognizedCause(exception=exc)


class TestJsonSafe:
    def test_nested_values_are_coerced(self) -> None:
        value = {"when": object, "tags": ("a", 1), "ok": None}
        result = json_safe(value)

        assert result["tags"] == ["a", 1]
        assert result["ok"] is None
        assert isinstance(result["when"], str)
