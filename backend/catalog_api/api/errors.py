"""Error envelope rendering and exception handlers."""

from __future__ import annotations

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalog_api.api.schemas.error import ErrorDetail, ErrorEnvelope

logger = logging.getLogger(__name__)

# Starlette renamed its 422 constant; the numeric code is stable.
UNPROCESSABLE_ENTITY = 422


def reason_phrase(code: int) -> str:
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Error"


def error_response(
    code: int,
    message: str | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Reply with the uniform ``{"errors": [...]}`` envelope and HTTP ``code``."""
    envelope = ErrorEnvelope(
        errors=[ErrorDetail(code=code, message=message or reason_phrase(code))]
    )
    return JSONResponse(status_code=code, content=envelope.model_dump(), headers=headers)


class APIError(Exception):
    """A failure the client should see as an error envelope."""

    def __init__(self, code: int, message: str | None = None) -> None:
        self.code = code
        self.message = message or reason_phrase(code)
        super().__init__(f"{code}: {self.message}")

    def to_response(self) -> JSONResponse:
        return error_response(self.code, self.message)


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    return exc.to_response()


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unmatched paths (404) and router-level method mismatches (405)."""
    message = exc.detail if isinstance(exc.detail, str) else None
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.debug(f"Request validation failed for {request.url.path}: {exc.errors()}")
    return error_response(UNPROCESSABLE_ENTITY, "Unprocessable Entity")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
