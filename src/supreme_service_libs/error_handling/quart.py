"""
Quart integration for the Supreme error-handling core.

Routes every exception that escapes a view (including routing errors such as
404/405) through the ErrorInterceptor, and gives every request an id that is
echoed back in the ``X-Request-ID`` header and carried into error logs.
"""

from __future__ import annotations

from typing import Any
from uuid import uuid4

from quart import Quart, Response, g, has_request_context, jsonify, request

from supreme_core.models.error_models import ErrorResponse, RequestContext

from supreme_service_libs.logging_utils import (
    bind_request_context,
    clear_request_context,
    create_service_logger,
)
from supreme_service_libs.protocols import ErrorInterceptorProtocol

REQUEST_ID_HEADER = "X-Request-ID"
_BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

logger = create_service_logger("error_handling.quart")


async def build_request_context() -> RequestContext:
    """Capture the active request for error logging. Empty outside a request."""
    if not has_request_context():
        return RequestContext()

    body: Any = None
    if request.method in _BODY_METHODS:
        body = await request.get_json(silent=True)

    forwarded_for = request.headers.get("X-Forwarded-For")
    ip = forwarded_for.split(",")[0].strip() if forwarded_for else request.remote_addr
    user_id = getattr(g, "user_id", None)

    return RequestContext(
        url=request.url,
        method=request.method,
        ip=ip,
        user_agent=request.headers.get("User-Agent"),
        user_id=str(user_id) if user_id is not None else None,
        request_id=getattr(g, "request_id", None) or request.headers.get(REQUEST_ID_HEADER),
        body=body,
        query=request.args.to_dict() or None,
        params=dict(request.view_args) if request.view_args else None,
        route_matched=request.url_rule is not None,
    )


async def safe_request_context() -> RequestContext:
    try:
        return await build_request_context()
    except Exception as e:
        logger.warning(f"Could not capture request context: {e}")
        return RequestContext()


def render_error_response(response: ErrorResponse, status_code: int) -> tuple[Response, int]:
    return jsonify(response.to_json_dict()), status_code


def register_error_handlers(app: Quart, interceptor: ErrorInterceptorProtocol) -> None:
    """Install the catch-all error handler on a Quart app.

    Args:
        app: The Quart application instance
        interceptor: Request-scope interceptor receiving every escaped exception
    """

    @app.errorhandler(Exception)
    async def handle_exception(error: Exception) -> tuple[Response, int]:
        context = await safe_request_context()
        body, status_code = await interceptor.handle(error, context)
        return render_error_response(body, status_code)


def setup_request_id_middleware(app: Quart) -> None:
    """Assign ``g.request_id`` from the incoming header or a fresh id."""

    @app.before_request
    async def assign_request_id() -> None:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        g.request_id = request_id
        bind_request_context(request_id, method=request.method, path=request.path)

    @app.after_request
    async def echo_request_id(response: Response) -> Response:
        request_id = getattr(g, "request_id", None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response

    @app.teardown_request
    async def reset_request_context(exc: BaseException | None) -> None:
        clear_request_context()
