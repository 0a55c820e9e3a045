"""Handler results and the response envelope every route is rendered through."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, assert_never

from fastapi import status
from fastapi.responses import Response

from src.core.errors import (
    GenericFailure,
    MessageList,
    PipelineError,
    RecordedError,
    RequestBodyError,
    ValidationErrorSet,
)
from src.shared.schemas import ErrorMessage, PaginationMeta, ResponseEnvelope

UNKNOWN_ERROR_MESSAGE = "unknown error"
NO_BODY_STATUSES = {status.HTTP_204_NO_CONTENT, status.HTTP_304_NOT_MODIFIED}


@dataclass(frozen=True, slots=True)
class HandlerResult:
    """What a handler produced: an optional status plus data or an error."""

    status: int | None = None
    data: Any = None
    pagination: PaginationMeta | None = None
    error: RecordedError | None = None

    @classmethod
    def from_exception(cls, exc: PipelineError | ValidationErrorSet | RequestBodyError) -> "HandlerResult":
        if isinstance(exc, ValidationErrorSet):
            return cls(status=exc.status_code, error=exc)
        if isinstance(exc, RequestBodyError):
            return cls(status=exc.status_code, error=MessageList(exc.messages))
        return cls(status=exc.status_code, error=GenericFailure(exc.message))


def normalize_error(error: RecordedError) -> list[ErrorMessage]:
    match error:
        case ValidationErrorSet(violations):
            messages = [violation.message for violation in violations]
        case MessageList(messages=items):
            messages = list(items)
        case GenericFailure(message=message):
            messages = [message]
        case _:
            assert_never(error)

    messages = [message for message in messages if message]
    if not messages:
        messages = [UNKNOWN_ERROR_MESSAGE]
    return [ErrorMessage(message=message) for message in messages]


def resolve_status(result: HandlerResult) -> int:
    if result.status is not None:
        return result.status
    if result.error is not None:
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_200_OK


def build_envelope(result: HandlerResult) -> ResponseEnvelope:
    """Assemble the envelope; data and pagination are dropped once an error is recorded."""
    fields: dict[str, Any] = {"status": resolve_status(result)}
    if result.error is not None:
        fields["errors"] = normalize_error(result.error)
    else:
        if result.data is not None:
            fields["data"] = result.data
        if result.pagination is not None:
            fields["pagination"] = result.pagination
    return ResponseEnvelope(**fields)


def serialize_envelope(envelope: ResponseEnvelope) -> bytes:
    return envelope.model_dump_json(exclude_unset=True).encode("utf-8")


def render_envelope(result: HandlerResult) -> Response:
    envelope = build_envelope(result)
    if envelope.status in NO_BODY_STATUSES:
        return Response(status_code=envelope.status)
    return Response(
        content=serialize_envelope(envelope),
        status_code=envelope.status,
        media_type="application/json",
    )
