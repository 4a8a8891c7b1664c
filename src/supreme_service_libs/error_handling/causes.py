"""
Recognized external failure causes.

Raw collaborator failures (driver errors, OS errors, validation and token
errors) are converted exactly once, by ``adapt_cause``, into a closed set of
tagged variants. Factories only ever inspect these variants, never the raw
exception's ad hoc attributes.
"""

from __future__ import annotations

import errno
import socket
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

import jwt
from pydantic import ValidationError
from sqlalchemy import exc as sa_exc
from werkzeug.exceptions import HTTPException

from supreme_core.models.error_models import FieldViolation

_JSON_SCALARS = (str, int, float, bool, type(None))
_DUPLICATE_MARKERS = ("duplicate", "unique constraint", "unique violation")
_UNIQUE_VIOLATION_SQLSTATE = "23505"


class FileSystemCauseCode(str, Enum):
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    NO_SPACE = "no_space"
    OTHER = "other"


class DatabaseCauseCode(str, Enum):
    DUPLICATE_KEY = "duplicate_key"
    CONNECTION_REFUSED = "connection_refused"
    TIMEOUT = "timeout"
    OTHER = "other"


class NetworkCauseCode(str, Enum):
    CONNECTION_REFUSED = "connection_refused"
    TIMEOUT = "timeout"
    HOST_NOT_FOUND = "host_not_found"
    OTHER = "other"


class TokenCauseCode(str, Enum):
    EXPIRED = "expired"
    INVALID = "invalid"


@dataclass(frozen=True)
class ValidationCause:
    violations: tuple[FieldViolation, ...] = ()
    exception: Optional[BaseException] = field(default=None, compare=False)


@dataclass(frozen=True)
class TokenCause:
    code: TokenCauseCode
    exception: Optional[BaseException] = field(default=None, compare=False)


@dataclass(frozen=True)
class DatabaseCause:
    code: DatabaseCauseCode
    exception: Optional[BaseException] = field(default=None, compare=False)


@dataclass(frozen=True)
class FileSystemCause:
    code: FileSystemCauseCode
    path: Optional[str] = None
    exception: Optional[BaseException] = field(default=None, compare=False)


@dataclass(frozen=True)
class NetworkCause:
    code: NetworkCauseCode
    exception: Optional[BaseException] = field(default=None, compare=False)


@dataclass(frozen=True)
class TimeoutCause:
    exception: Optional[BaseException] = field(default=None, compare=False)


@dataclass(frozen=True)
class HttpCause:
    status_code: int
    description: Optional[str] = None
    exception: Optional[BaseException] = field(default=None, compare=False)


@dataclass(frozen=True)
class UnrecognizedCause:
    exception: BaseException


RecognizedCause = Union[
    ValidationCause,
    TokenCause,
    DatabaseCause,
    FileSystemCause,
    NetworkCause,
    TimeoutCause,
    HttpCause,
    UnrecognizedCause,
]


def json_safe(value: Any) -> Any:
    """Coerce a rejected input value into something the log line can hold."""
    if isinstance(value, _JSON_SCALARS):
        return value
    if isinstance(value, (list, tuple)):
        return [json_safe(item) for item in value]
    if isinstance(value, dict):
        return {str(key): json_safe(item) for key, item in value.items()}
    return repr(value)


def violations_from_pydantic(error: ValidationError) -> tuple[FieldViolation, ...]:
    return tuple(
        FieldViolation(
            field=".".join(str(part) for part in item.get("loc", ())),
            message=item.get("msg", "Invalid value"),
            value=json_safe(item.get("input")),
        )
        for item in error.errors()
    )


def adapt_cause(exc: BaseException) -> RecognizedCause:
    """Convert a raw collaborator failure into a recognized cause variant."""
    if isinstance(exc, ValidationError):
        return ValidationCause(violations=violations_from_pydantic(exc), exception=exc)

    if isinstance(exc, jwt.ExpiredSignatureError):
        return TokenCause(code=TokenCauseCode.EXPIRED, exception=exc)
    if isinstance(exc, jwt.InvalidTokenError):
        return TokenCause(code=TokenCauseCode.INVALID, exception=exc)

    if isinstance(exc, sa_exc.SQLAlchemyError):
        return DatabaseCause(code=_database_cause_code(exc), exception=exc)

    if isinstance(exc, HTTPException):
        return HttpCause(
            status_code=exc.code or 500,
            description=exc.description,
            exception=exc,
        )

    if isinstance(exc, OSError):
        return _adapt_os_error(exc)

    return UnrecognizedCause(exception=exc)


def _database_cause_code(exc: sa_exc.SQLAlchemyError) -> DatabaseCauseCode:
    if isinstance(exc, sa_exc.TimeoutError):
        return DatabaseCauseCode.TIMEOUT

    driver_error = getattr(exc, "orig", None)
    driver_text = str(driver_error).lower() if driver_error is not None else ""

    if isinstance(exc, sa_exc.IntegrityError):
        sqlstate = getattr(driver_error, "pgcode", None) or getattr(driver_error, "sqlstate", None)
        if sqlstate == _UNIQUE_VIOLATION_SQLSTATE or any(
            marker in driver_text for marker in _DUPLICATE_MARKERS
        ):
            return DatabaseCauseCode.DUPLICATE_KEY
        return DatabaseCauseCode.OTHER

    if isinstance(exc, sa_exc.DBAPIError):
        if isinstance(driver_error, ConnectionRefusedError) or "connection refused" in driver_text:
            return DatabaseCauseCode.CONNECTION_REFUSED
        if isinstance(driver_error, TimeoutError) or "timeout" in driver_text:
            return DatabaseCauseCode.TIMEOUT

    return DatabaseCauseCode.OTHER


def _adapt_os_error(exc: OSError) -> RecognizedCause:
    code = exc.errno

    if isinstance(exc, socket.gaierror):
        return NetworkCause(code=NetworkCauseCode.HOST_NOT_FOUND, exception=exc)
    if isinstance(exc, ConnectionRefusedError) or code == errno.ECONNREFUSED:
        return NetworkCause(code=NetworkCauseCode.CONNECTION_REFUSED, exception=exc)
    if code == errno.ETIMEDOUT:
        return NetworkCause(code=NetworkCauseCode.TIMEOUT, exception=exc)
    if isinstance(exc, TimeoutError):
        return TimeoutCause(exception=exc)
    if isinstance(exc, ConnectionError):
        return NetworkCause(code=NetworkCauseCode.OTHER, exception=exc)

    path = exc.filename if isinstance(exc.filename, str) else None
    if isinstance(exc, FileNotFoundError) or code == errno.ENOENT:
        fs_code = FileSystemCauseCode.NOT_FOUND
    elif isinstance(exc, PermissionError) or code in (errno.EACCES, errno.EPERM):
        fs_code = FileSystemCauseCode.PERMISSION_DENIED
    elif code == errno.ENOSPC:
        fs_code = FileSystemCauseCode.NO_SPACE
    else:
        fs_code = FileSystemCauseCode.OTHER
    return FileSystemCause(code=fs_code, path=path, exception=exc)
