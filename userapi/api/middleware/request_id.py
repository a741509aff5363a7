"""Request ID middleware — tags each request, logs its outcome, envelopes crashes."""

from __future__ import annotations

import time
import uuid
from http import HTTPStatus

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from userapi.api.errors import internal_error_response

log = structlog.get_logger("userapi.api")

REQUEST_ID_HEADER = "X-Request-ID"


def _request_id_from(request: Request) -> str:
    """Client-supplied id if it is a UUID, otherwise a fresh one."""
    raw = request.headers.get(REQUEST_ID_HEADER, "")
    try:
        return str(uuid.UUID(raw))
    except ValueError:
        return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind ``request_id`` into structlog contextvars and echo it on every response.

    Exceptions that escape the app's handlers are logged here and answered
    with the 500 envelope, so error responses carry the header too.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _request_id_from(request)
        request.state.request_id = request_id

        with structlog.contextvars.bound_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        ):
            start = time.perf_counter()
            try:
                response = await call_next(request)
            except Exception:
                log.exception("request.crashed", duration_ms=_elapsed_ms(start))
                response = internal_error_response()
            else:
                status = HTTPStatus(response.status_code)
                log_event = log.error if status >= 500 else log.info
                log_event(
                    "request.completed",
                    status_code=response.status_code,
                    status=status.name,
                    duration_ms=_elapsed_ms(start),
                )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 1)
