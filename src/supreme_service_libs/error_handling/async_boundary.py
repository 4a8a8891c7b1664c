"""
Async boundary adapter for request handlers.

A handler that awaits external resources can fail before or after it
suspends, or it can return ``Result.err``. ``async_boundary`` forwards each of
those outcomes into the interceptor exactly once and lets successes through
untouched, so no failure path is left unobserved.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Callable
from typing import Any

from quart import Response

from supreme_service_libs.error_handling.quart import render_error_response, safe_request_context
from supreme_service_libs.protocols import ErrorInterceptorProtocol
from supreme_service_libs.result import Result


async def _forward(interceptor: ErrorInterceptorProtocol, failure: object) -> tuple[Response, int]:
    context = await safe_request_context()
    body, status_code = await interceptor.handle(failure, context)
    return render_error_response(body, status_code)


def async_boundary(
    interceptor: ErrorInterceptorProtocol,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Wrap a view so its failures reach ``interceptor`` exactly once.

    ``Result.ok(value)`` is unwrapped to ``value``; ``Result.err(error)`` and
    raised exceptions become error responses. CancelledError and other
    BaseExceptions are not failures and propagate.

    Example:
        >>> @bp.route("/projects/<name>")
        ... @async_boundary(interceptor)
        ... async def get_project(name: str) -> Result[dict, ErrorDetail]:
        ...     ...
    """

    def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(handler)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                outcome = handler(*args, **kwargs)
                if inspect.isawaitable(outcome):
                    outcome = await outcome
            except Exception as exc:
                return await _forward(interceptor, exc)

            if isinstance(outcome, Result):
                if outcome.is_err:
                    return await _forward(interceptor, outcome.error)
                return outcome.value
            return outcome

        return wrapper

    return decorator
