"""Request logging and the last-resort per-request error guard."""

from __future__ import annotations

import logging

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware

from catalog_api.api.errors import error_response

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("catalog_api.access")


def client_address(request: Request) -> str:
    return request.client.host if request.client else ""


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log method, path and client address once per request, however it ends.

    Exceptions that escape the routes are logged and answered with a 500
    envelope, so a single bad request never takes the server down.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception:
            logger.exception(f"Unhandled error serving {request.method} {request.url.path}")
            return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR)
        finally:
            access_logger.info(f"{request.method} {request.url.path} {client_address(request)}")
