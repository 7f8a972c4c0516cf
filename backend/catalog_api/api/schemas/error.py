"""Uniform error envelope returned by every failing request."""

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    code: int
    message: str


class ErrorEnvelope(BaseModel):
    errors: list[ErrorDetail]
