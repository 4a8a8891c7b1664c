"""
Error logging pipeline.

Each observed failure becomes one LogEntry which is:
- mirrored to the console through structlog, keyed by severity
- appended as one JSON line to ``<log_dir>/error-YYYY-MM-DD.log`` (UTC date)
- handed to the alert notifier when severity is high or critical

Recording is best-effort. Nothing in this module raises to its caller; a
failed write is reported on the console and otherwise ignored. No lock is held
across calls: every entry is written with a single append so concurrent lines
never interleave within a line.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from datetime import UTC, date, datetime
from enum import Enum
from http import HTTPStatus
from pathlib import Path
from typing import Any, Optional

import aiofiles
import aiofiles.os

from supreme_core.error_enums import ErrorCode, ErrorSeverity
from supreme_core.models.error_models import LogEntry, RequestContext

from supreme_service_libs.error_handling.causes import json_safe
from supreme_service_libs.error_handling.factories import format_cause_stack
from supreme_service_libs.error_handling.supreme_error import SupremeError
from supreme_service_libs.logging_utils import create_service_logger
from supreme_service_libs.protocols import AlertNotifierProtocol

_ALERT_LEVELS = (ErrorSeverity.HIGH, ErrorSeverity.CRITICAL)


def partition_path(log_dir: Path, day: date) -> Path:
    """Log partition for a UTC calendar date."""
    return log_dir / f"error-{day.isoformat()}.log"


def _read(error: Any, name: str) -> Any:
    if isinstance(error, Mapping):
        return error.get(name)
    return getattr(error, name, None)


def _coerce_severity(raw: Any) -> ErrorSeverity:
    try:
        return ErrorSeverity(raw.value if isinstance(raw, Enum) else raw)
    except ValueError:
        return ErrorSeverity.MEDIUM


def _coerce_status(raw: Any) -> int:
    try:
        return HTTPStatus(int(raw)).value
    except (TypeError, ValueError):
        return 500


def _coerce_code(raw: Any) -> str:
    if isinstance(raw, Enum):
        return str(raw.value)
    return str(raw) if raw else ErrorCode.UNKNOWN_ERROR.value


def build_log_entry(
    error: Any, context: Optional[RequestContext], now: datetime
) -> LogEntry:
    """Project an error (complete or partial) plus request context into a LogEntry.

    Missing fields are defaulted rather than rejected: severity to medium,
    error code to UNKNOWN_ERROR, status code to 500.
    """
    if isinstance(error, SupremeError):
        error = error.error_detail

    message = _read(error, "message")
    if not message:
        message = str(error) if isinstance(error, BaseException) else "Unknown error"

    stack = _read(error, "cause_stack")
    if stack is None and isinstance(error, BaseException):
        stack = format_cause_stack(error)

    is_operational = _read(error, "is_operational")
    ctx = context or RequestContext()

    return LogEntry(
        timestamp=now,
        level=_coerce_severity(_read(error, "severity")),
        message=str(message),
        stack=stack,
        status_code=_coerce_status(_read(error, "status_code")),
        error_code=_coerce_code(_read(error, "error_code")),
        is_operational=is_operational if isinstance(is_operational, bool) else None,
        url=ctx.url,
        method=ctx.method,
        ip=ctx.ip,
        user_agent=ctx.user_agent,
        user_id=ctx.user_id,
        request_id=ctx.request_id,
        body=json_safe(ctx.body),
        query=json_safe(ctx.query),
        params=json_safe(ctx.params),
    )


class ErrorLogPipeline:
    """Durable append-only error log with console mirror and alert hand-off."""

    def __init__(
        self,
        log_dir: Path,
        *,
        notifier: Optional[AlertNotifierProtocol] = None,
        clock: Optional[Callable[[], datetime]] = None,
        logger: Optional[Any] = None,
    ) -> None:
        self._log_dir = Path(log_dir)
        self._notifier = notifier
        self._clock = clock or (lambda: datetime.now(UTC))
        self._logger = logger or create_service_logger("error_pipeline")

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    def current_partition(self) -> Path:
        return partition_path(self._log_dir, self._clock().astimezone(UTC).date())

    async def record(self, error: Any, context: Optional[RequestContext] = None) -> None:
        prepared = self._prepare(error, context)
        if prepared is None:
            return
        entry, path, line = prepared

        try:
            await aiofiles.os.makedirs(self._log_dir, exist_ok=True)
            async with aiofiles.open(path, "ab") as log_file:
                await log_file.write(line)
        except OSError as e:
            self._report_write_failure(path, e)

        self._notify(entry)

    def record_sync(self, error: Any, context: Optional[RequestContext] = None) -> None:
        prepared = self._prepare(error, context)
        if prepared is None:
            return
        entry, path, line = prepared

        try:
            self._log_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "ab") as log_file:
                log_file.write(line)
        except OSError as e:
            self._report_write_failure(path, e)

        self._notify(entry)

    def _prepare(
        self, error: Any, context: Optional[RequestContext]
    ) -> Optional[tuple[LogEntry, Path, bytes]]:
        try:
            now = self._clock().astimezone(UTC)
            entry = build_log_entry(error, context, now)
            self._emit_console(entry)
            line = json.dumps(entry.to_json_dict(), ensure_ascii=False, default=str) + "\n"
            return entry, partition_path(self._log_dir, now.date()), line.encode("utf-8")
        except Exception as e:
            self._logger.error(f"Failed to build error log entry: {e}", exc_info=True)
            return None

    def _emit_console(self, entry: LogEntry) -> None:
        fields = {
            "error_code": entry.error_code,
            "status_code": entry.status_code,
            "url": entry.url,
            "method": entry.method,
            "request_id": entry.request_id,
        }
        headline = f"{entry.level.value.upper()}: {entry.message}"

        if entry.level == ErrorSeverity.CRITICAL:
            self._logger.error(headline, stack=entry.stack, **fields)
        elif entry.level == ErrorSeverity.HIGH:
            self._logger.warning(headline, stack=entry.stack, **fields)
        else:
            self._logger.info(headline, **fields)

    def _notify(self, entry: LogEntry) -> None:
        if self._notifier is None or entry.level not in _ALERT_LEVELS:
            return
        try:
            self._notifier.notify(entry)
        except Exception as e:
            self._logger.error(f"Alert notifier failed: {e}", error_code=entry.error_code)

    def _report_write_failure(self, path: Path, error: OSError) -> None:
        self._logger.error(
            f"Failed to write error log to file: {error}",
            path=str(path),
            errno=error.errno,
        )
