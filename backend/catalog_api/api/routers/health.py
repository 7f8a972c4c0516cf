"""Liveness probe and the root catch-all."""

from __future__ import annotations

from fastapi import APIRouter, Request, Response, status

from catalog_api.api.errors import error_response

router = APIRouter(tags=["health"])

PROBE_METHODS = ["GET", "HEAD"]
ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


@router.api_route("/healthz", methods=PROBE_METHODS, summary="Liveness probe")
@router.api_route("/healthz/", methods=PROBE_METHODS, include_in_schema=False)
async def healthz(request: Request) -> Response:
    """Report 200 while the store was reachable at startup, 503 otherwise.

    Used by orchestration systems to decide whether to route traffic to
    this instance.
    """
    if not request.app.state.health.is_healthy:
        return error_response(status.HTTP_503_SERVICE_UNAVAILABLE)
    return Response(status_code=status.HTTP_200_OK)


@router.api_route("/", methods=ANY_METHOD, summary="Root")
async def index() -> Response:
    """Answer the exact root path, whatever the method; other unmatched paths are a 404."""
    return Response(status_code=status.HTTP_200_OK)
