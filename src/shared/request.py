"""Request body decoding for handlers that validate payloads themselves."""

from typing import Any

from fastapi import Request

from src.core.errors import RequestBodyError

INVALID_JSON_MESSAGE = "request body is not valid JSON"
NOT_AN_OBJECT_MESSAGE = "request body must be a JSON object"


async def read_json_object(request: Request) -> dict[str, Any]:
    """Decode the body as a JSON object.

    Called from inside route handlers so that route dependencies such as the
    bearer token check have already run.
    """
    try:
        payload = await request.json()
    except ValueError as exc:
        raise RequestBodyError(INVALID_JSON_MESSAGE) from exc
    if not isinstance(payload, dict):
        raise RequestBodyError(NOT_AN_OBJECT_MESSAGE)
    return payload
