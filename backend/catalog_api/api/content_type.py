"""Content-Type validation for request bodies."""

from __future__ import annotations

import re

from starlette.requests import Request

JSON_MEDIA_TYPE = "application/json"

_TOKEN = r"[!#$%&'*+.^_`|~0-9A-Za-z-]+"
_MEDIA_TYPE_RE = re.compile(rf"^({_TOKEN})/({_TOKEN})$")
_PARAM_RE = re.compile(rf'^{_TOKEN}=({_TOKEN}|"(?:[^"\\]|\\.)*")$')


def parse_media_type(value: str) -> str:
    """Return the lower-cased media type of a Content-Type value.

    Parameters such as ``charset`` must be well-formed but are not
    interpreted. Raises ValueError when the value is malformed.
    """
    media_type, *raw_params = value.split(";")
    media_type = media_type.strip().lower()
    if not _MEDIA_TYPE_RE.match(media_type):
        raise ValueError(f"invalid media type {value!r}")

    for raw in raw_params:
        raw = raw.strip()
        if raw and not _PARAM_RE.match(raw):
            raise ValueError(f"invalid media type parameter {raw!r}")
    return media_type


def has_body(request: Request) -> bool:
    content_length = request.headers.get("content-length")
    if content_length is not None:
        return content_length.strip() != "0"
    return "transfer-encoding" in request.headers


def check_content_type(expected: str, request: Request) -> None:
    """Raise ValueError unless the request's Content-Type matches ``expected``.

    A request without a body and without a Content-Type header is accepted.
    """
    content_type = request.headers.get("content-type", "")
    if not content_type and not has_body(request):
        return

    media_type = parse_media_type(content_type)
    if media_type != expected:
        raise ValueError(f"bad Content-Type: expected {expected}, got {media_type}")
