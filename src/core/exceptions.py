"""Exception handlers that route every failure through the response envelope."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.core.errors import GenericFailure, MessageList, PipelineError, RequestBodyError, ValidationErrorSet
from src.shared.envelope import HandlerResult, render_envelope

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "internal server error"


def _describe_request_error(error: dict) -> str:
    message = str(error.get("msg", "invalid request"))
    if error.get("type") == "json_invalid":
        return message
    # Integer parts are list indexes or JSON character offsets, not field names.
    location = ".".join(
        str(part) for part in error.get("loc", ()) if part != "body" and not isinstance(part, int)
    )
    return f"{location}: {message}" if location else message


def register_exception_handlers(app: FastAPI) -> None:
    """Attach shared exception handlers to the FastAPI app."""

    @app.exception_handler(PipelineError)
    async def _pipeline_error_handler(_: Request, exc: PipelineError) -> Response:
        return render_envelope(HandlerResult.from_exception(exc))

    @app.exception_handler(ValidationErrorSet)
    async def _validation_error_handler(_: Request, exc: ValidationErrorSet) -> Response:
        return render_envelope(HandlerResult.from_exception(exc))

    @app.exception_handler(RequestBodyError)
    async def _request_body_error_handler(_: Request, exc: RequestBodyError) -> Response:
        return render_envelope(HandlerResult.from_exception(exc))

    @app.exception_handler(RequestValidationError)
    async def _request_error_handler(_: Request, exc: RequestValidationError) -> Response:
        messages = tuple(_describe_request_error(error) for error in exc.errors())
        return render_envelope(
            HandlerResult(status=status.HTTP_400_BAD_REQUEST, error=MessageList(messages))
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http_error_handler(_: Request, exc: StarletteHTTPException) -> Response:
        response = render_envelope(
            HandlerResult(status=exc.status_code, error=GenericFailure(str(exc.detail)))
        )
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(Exception)
    async def _unexpected_error_handler(_: Request, exc: Exception) -> Response:
        logger.exception("Unhandled error: %s", type(exc).__name__)
        return render_envelope(
            HandlerResult(
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
                error=GenericFailure(INTERNAL_ERROR_MESSAGE),
            )
        )
