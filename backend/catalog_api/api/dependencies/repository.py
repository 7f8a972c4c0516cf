"""Repository dependency."""

from fastapi import Request

from catalog_api.repositories.interfaces import ProductOps


def get_repository(request: Request) -> ProductOps:
    """FastAPI dependency returning the repository opened at startup."""
    return request.app.state.repository
