"""Unified error handling — ServiceError + RequestValidationError → envelope JSON."""

from __future__ import annotations

from http import HTTPStatus

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from userapi.schemas import ApiResponse
from userapi.services import (
    AuthenticationError,
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ServiceError,
)

log = structlog.get_logger("userapi.api")

_STATUS_MAP: dict[type[ServiceError], HTTPStatus] = {
    InvalidCredentialsError: HTTPStatus.BAD_REQUEST,
    AuthenticationError: HTTPStatus.UNAUTHORIZED,
    NotFoundError: HTTPStatus.NOT_FOUND,
    ConflictError: HTTPStatus.CONFLICT,
}


def status_for(exc: ServiceError) -> HTTPStatus:
    """Most specific mapped class in the MRO wins; unmapped errors are 500."""
    for cls in type(exc).__mro__:
        if cls in _STATUS_MAP:
            return _STATUS_MAP[cls]
    return HTTPStatus.INTERNAL_SERVER_ERROR


def envelope_response(envelope: ApiResponse) -> JSONResponse:
    """Render an envelope with the HTTP status taken from the envelope itself."""
    return JSONResponse(status_code=envelope.status, content=envelope.to_content())


async def _service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    status = status_for(exc)
    if status is HTTPStatus.INTERNAL_SERVER_ERROR:
        log.error("service.unmapped_error", error_type=type(exc).__name__, error=str(exc))
    return envelope_response(ApiResponse.error(status, str(exc) or status.phrase))


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    return envelope_response(ApiResponse.error(HTTPStatus.BAD_REQUEST, "; ".join(messages)))


def internal_error_response() -> JSONResponse:
    """500 envelope for failures nothing else mapped; the cause is logged, not returned."""
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    return envelope_response(ApiResponse.error(status, status.phrase))


async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    log.error("request.unhandled_error", error_type=type(exc).__name__, exc_info=exc)
    return internal_error_response()


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""
    app.add_exception_handler(ServiceError, _service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)
