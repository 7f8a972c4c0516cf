"""Route class applied to every business endpoint."""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from typing import Any

from fastapi import Request, Response, status
from fastapi.routing import APIRoute

from catalog_api.api.content_type import JSON_MEDIA_TYPE, check_content_type
from catalog_api.api.errors import APIError, error_response
from catalog_api.repositories.exceptions import RepositoryError

logger = logging.getLogger(__name__)

UNIFORM_HEADERS = {
    "Content-Type": "application/json; charset=UTF-8",
    "X-Content-Type-Options": "nosniff",
}


class GatedRoute(APIRoute):
    """Validate Content-Type, stamp headers and hold traffic while unhealthy.

    Stages run in order: content-type gate (415), uniform headers, health
    gate (503), then the endpoint itself.
    """

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        route_handler = super().get_route_handler()

        async def gated_route_handler(request: Request) -> Response:
            try:
                check_content_type(JSON_MEDIA_TYPE, request)
            except ValueError as e:
                logger.info(f"Rejected {request.method} {request.url.path}: {e}")
                return error_response(status.HTTP_415_UNSUPPORTED_MEDIA_TYPE)

            if not request.app.state.health.is_healthy:
                response = error_response(status.HTTP_503_SERVICE_UNAVAILABLE)
            else:
                try:
                    response = await route_handler(request)
                except APIError as e:
                    response = e.to_response()
                except RepositoryError:
                    logger.exception(f"Storage failure serving {request.method} {request.url.path}")
                    response = error_response(status.HTTP_500_INTERNAL_SERVER_ERROR)

            response.headers.update(UNIFORM_HEADERS)
            return response

        return gated_route_handler
