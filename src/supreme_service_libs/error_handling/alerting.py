"""Default alert notifier: a structured console alert per high/critical error."""

from __future__ import annotations

from typing import Any, Optional

from supreme_core.models.error_models import LogEntry

from supreme_service_libs.logging_utils import create_service_logger


class LoggingAlertNotifier:
    """Emits one alert event; a monitoring agent scraping stdout picks it up."""

    def __init__(self, logger: Optional[Any] = None) -> None:
        self._logger = logger or create_service_logger("error_alerts")

    def notify(self, entry: LogEntry) -> None:
        self._logger.error(
            f"{entry.level.value.upper()} ERROR DETECTED",
            alert=True,
            error_message=entry.message,
            error_code=entry.error_code,
            url=entry.url,
            user_id=entry.user_id,
            request_id=entry.request_id,
        )
