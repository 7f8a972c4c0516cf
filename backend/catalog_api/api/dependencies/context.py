"""Per-request context handed explicitly to route handlers."""

from dataclasses import dataclass

from fastapi import Request

from catalog_api.api.middleware import client_address


@dataclass(frozen=True)
class RequestContext:
    user_agent: str
    client_addr: str


def get_request_context(request: Request) -> RequestContext:
    return RequestContext(
        user_agent=request.headers.get("user-agent", ""),
        client_addr=client_address(request),
    )
