"""Parsing and bounds checking of list query parameters."""

import re
from dataclasses import dataclass

from src.core.errors import ErrorKind, PipelineError

DEFAULT_LIMIT = 10
DEFAULT_OFFSET = 0
MAX_LIMIT = 100

_INTEGER_LITERAL = re.compile(r"[+-]?[0-9]+")


@dataclass(frozen=True, slots=True)
class PaginationParams:
    limit: int
    offset: int


def _parse_int(raw: str) -> int | None:
    if not _INTEGER_LITERAL.fullmatch(raw):
        return None
    try:
        return int(raw)
    except ValueError:
        # Longer than the interpreter will convert; far outside any valid range.
        return None


def resolve_pagination(raw_limit: str | None, raw_offset: str | None) -> PaginationParams:
    """Turn raw ``limit``/``offset`` query values into bounded parameters.

    Missing values fall back to the defaults; anything out of range is
    rejected rather than clamped.
    """
    limit = DEFAULT_LIMIT
    if raw_limit is not None:
        parsed = _parse_int(raw_limit)
        if parsed is None or parsed <= 0 or parsed > MAX_LIMIT:
            raise PipelineError(ErrorKind.INVALID_LIMIT)
        limit = parsed

    offset = DEFAULT_OFFSET
    if raw_offset is not None:
        parsed = _parse_int(raw_offset)
        if parsed is None or parsed < 0:
            raise PipelineError(ErrorKind.INVALID_OFFSET)
        offset = parsed

    return PaginationParams(limit=limit, offset=offset)
