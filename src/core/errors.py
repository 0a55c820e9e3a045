"""Error kinds and the error values recorded by request handlers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from fastapi import status


class ErrorKind(StrEnum):
    AUTH_HEADER_MISSING = "auth_header_missing"
    AUTH_HEADER_MALFORMED = "auth_header_malformed"
    KEY_DECODE_FAILED = "key_decode_failed"
    KEY_PARSE_FAILED = "key_parse_failed"
    TOKEN_INVALID = "token_invalid"
    FIELD_REQUIRED = "field_required"
    FIELD_OUT_OF_RANGE = "field_out_of_range"
    INVALID_LIMIT = "invalid_limit"
    INVALID_OFFSET = "invalid_offset"
    RESOURCE_NOT_FOUND = "resource_not_found"
    STORE_FAILURE = "store_failure"

    @property
    def status_code(self) -> int:
        return KIND_STATUS[self]

    @property
    def default_message(self) -> str:
        return KIND_MESSAGES[self]


KIND_STATUS: dict[ErrorKind, int] = {
    ErrorKind.AUTH_HEADER_MISSING: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.AUTH_HEADER_MALFORMED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.KEY_DECODE_FAILED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.KEY_PARSE_FAILED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.TOKEN_INVALID: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FIELD_REQUIRED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FIELD_OUT_OF_RANGE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_LIMIT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_OFFSET: status.HTTP_400_BAD_REQUEST,
    ErrorKind.RESOURCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.STORE_FAILURE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

KIND_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.AUTH_HEADER_MISSING: "authorization header is missing",
    ErrorKind.AUTH_HEADER_MALFORMED: "invalid Authorization header format",
    ErrorKind.KEY_DECODE_FAILED: "error decoding public key",
    ErrorKind.KEY_PARSE_FAILED: "error parsing public key",
    ErrorKind.TOKEN_INVALID: "invalid token",
    ErrorKind.FIELD_REQUIRED: "field is required",
    ErrorKind.FIELD_OUT_OF_RANGE: "field is out of range",
    ErrorKind.INVALID_LIMIT: "invalid limit parameter, limit must be in the range of [1, 100]",
    ErrorKind.INVALID_OFFSET: "invalid offset parameter, offset must be a non-negative number",
    ErrorKind.RESOURCE_NOT_FOUND: "product not found",
    ErrorKind.STORE_FAILURE: "product store failure",
}


class PipelineError(Exception):
    """A single classified failure that stops the request pipeline."""

    def __init__(self, kind: ErrorKind, message: str | None = None):
        self.kind = kind
        self.message = message or kind.default_message
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code


@dataclass(frozen=True, slots=True)
class FieldViolation:
    field: str
    message: str


class ValidationErrorSet(Exception):
    """Every field violation found in one validation pass, in schema order."""

    status_code = status.HTTP_400_BAD_REQUEST
    __match_args__ = ("violations",)

    def __init__(self, violations: tuple[FieldViolation, ...] | list[FieldViolation]):
        self._violations = tuple(violations)
        super().__init__("validation error")

    @property
    def violations(self) -> tuple[FieldViolation, ...]:
        return self._violations

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationErrorSet):
            return NotImplemented
        return self._violations == other._violations

    def __hash__(self) -> int:
        return hash(self._violations)


@dataclass(frozen=True, slots=True)
class MessageList:
    messages: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class GenericFailure:
    message: str


class RequestBodyError(Exception):
    """The request body could not be decoded into a JSON object."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, *messages: str):
        self.messages = messages
        super().__init__("; ".join(messages))


RecordedError = ValidationErrorSet | MessageList | GenericFailure
