"""
Quill Backend — Request ID Middleware
======================================

What:  Gives every request a correlation id and returns it in X-Request-ID.
Why:   Error bodies carry the same id, so a client-reported failure can be
       matched to its server log lines.
How:   Reuses the client's X-Request-ID header when present, otherwise
       generates a short UUID prefix; stores it in a ContextVar and on
       request.state.
When:  Outermost application middleware. Rate-limit rejections and
       unexpected exceptions are answered here, so they carry the id too.
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Coroutine-local: concurrent requests on one loop each see their own id
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    # 8 hex chars is plenty for correlating log lines
    return uuid.uuid4().hex[:8]


def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """
    Builds the shared error body, stamped with the current request id.

    Body: {"error", "message", "details"?, "request_id"}
    """
    rid = request_id_var.get("")
    content: Dict[str, Any] = {"error": error, "message": message}
    if details is not None:
        content["details"] = details
    content["request_id"] = rid

    response_headers = dict(headers or {})
    if rid:
        response_headers[REQUEST_ID_HEADER] = rid
    return JSONResponse(status_code=status_code, content=content, headers=response_headers)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns, exposes and echoes the per-request correlation id."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or new_request_id()

        # Inner middlewares and handlers run in tasks that copy this context
        request_id_var.set(rid)
        request.state.request_id = rid

        try:
            response = await call_next(request)
        except Exception as exc:
            # Bugs only: every BlogError already has a handler in app.main
            logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
            response = error_response(
                500,
                "internal_server_error",
                "An unexpected error occurred. Please try again or contact support.",
            )

        response.headers[REQUEST_ID_HEADER] = rid
        return response
