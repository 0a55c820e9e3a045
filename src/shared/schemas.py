"""Common Pydantic schemas."""

from typing import Any

from pydantic import BaseModel


class PaginationMeta(BaseModel):
    limit: int
    offset: int
    total: int
    count: int


class ErrorMessage(BaseModel):
    message: str


class ResponseEnvelope(BaseModel):
    """Standard API envelope.

    Optional members are left unset rather than ``None`` so they can be
    omitted from the serialized body.
    """

    status: int
    data: Any = None
    pagination: PaginationMeta | None = None
    errors: list[ErrorMessage] | None = None
