"""ULID helpers for product identifiers."""

import ulid

ULID_LENGTH = 26


def generate_ulid() -> str:
    """Return a string ULID for primary keys."""
    return str(ulid.new())


def is_ulid(value: str) -> bool:
    """Whether ``value`` could be an identifier produced by generate_ulid."""
    if len(value) != ULID_LENGTH:
        return False
    try:
        ulid.from_str(value)
    except ValueError:
        return False
    return True
