"""Error handling core for Supreme services.

Taxonomy and factories, recognized causes, the logging pipeline, the response
formatter, request-scope interception, the async boundary adapter and the
process-scope handlers.
"""

from supreme_service_libs.error_handling.alerting import LoggingAlertNotifier
from supreme_service_libs.error_handling.async_boundary import async_boundary
from supreme_service_libs.error_handling.causes import RecognizedCause, adapt_cause
from supreme_service_libs.error_handling.error_log_pipeline import (
    ErrorLogPipeline,
    build_log_entry,
    partition_path,
)
from supreme_service_libs.error_handling.factories import (
    TAXONOMY,
    ErrorKind,
    create_authentication_error,
    create_authorization_error,
    create_conflict_error,
    create_database_error,
    create_error,
    create_file_system_error,
    create_health_check_error,
    create_http_error,
    create_internal_error,
    create_network_error,
    create_not_found_error,
    create_rate_limit_error,
    create_method_not_allowed_error,
    create_route_not_found_error,
    create_service_unavailable_error,
    create_timeout_error,
    create_uncaught_exception,
    create_unhandled_task_failure,
    create_validation_error,
)
from supreme_service_libs.error_handling.interceptor import ErrorInterceptor, classify
from supreme_service_libs.error_handling.process_handlers import (
    ProcessHandlers,
    install_process_handlers,
)
from supreme_service_libs.error_handling.response_formatter import format_error_response
from supreme_service_libs.error_handling.supreme_error import SupremeError

__all__ = [
    "TAXONOMY",
    "ErrorInterceptor",
    "ErrorKind",
    "ErrorLogPipeline",
    "LoggingAlertNotifier",
    "ProcessHandlers",
    "RecognizedCause",
    "SupremeError",
    "adapt_cause",
    "async_boundary",
    "build_log_entry",
    "classify",
    "create_authentication_error",
    "create_authorization_error",
    "create_conflict_error",
    "create_database_error",
    "create_error",
    "create_file_system_error",
    "create_health_check_error",
    "create_http_error",
    "create_internal_error",
    "create_network_error",
    "create_not_found_error",
    "create_rate_limit_error",
    "create_method_not_allowed_error",
    "create_route_not_found_error",
    "create_service_unavailable_error",
    "create_timeout_error",
    "create_uncaught_exception",
    "create_unhandled_task_failure",
    "create_validation_error",
    "format_error_response",
    "install_process_handlers",
    "partition_path",
]
