"""Bearer token verification against an RSA public key."""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Any

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey
from jose import JWTError, jwt

from .config import Settings
from .errors import ErrorKind, PipelineError

logger = logging.getLogger(__name__)

BEARER_SCHEME = "Bearer"
RSA_ALGORITHMS = ["RS256", "RS384", "RS512"]


@dataclass(frozen=True, slots=True)
class AuthConfig:
    """Read-only auth settings shared by every request."""

    enabled: bool
    public_key_b64: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthConfig":
        return cls(enabled=settings.auth_enabled, public_key_b64=settings.jwt_secret_key)


def extract_bearer_token(header_value: str | None) -> str:
    """Return the token part of an ``Authorization: Bearer <token>`` header."""
    if not header_value:
        raise PipelineError(ErrorKind.AUTH_HEADER_MISSING)

    parts = header_value.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME:
        raise PipelineError(ErrorKind.AUTH_HEADER_MALFORMED)
    return parts[1]


def load_public_key(public_key_b64: str) -> str:
    """Decode the configured key and return it as PEM text.

    Raises KEY_DECODE_FAILED for bad base64 and KEY_PARSE_FAILED when the
    decoded bytes are not a PEM encoded RSA public key.
    """
    try:
        pem = base64.b64decode(public_key_b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PipelineError(ErrorKind.KEY_DECODE_FAILED) from exc

    try:
        public_key = serialization.load_pem_public_key(pem)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise PipelineError(ErrorKind.KEY_PARSE_FAILED) from exc
    if not isinstance(public_key, RSAPublicKey):
        raise PipelineError(ErrorKind.KEY_PARSE_FAILED)
    # Re-encode: the configured bytes may carry text before the PEM block.
    return public_key.public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("ascii")


def decode_token(token: str, public_key_pem: str) -> dict[str, Any]:
    """Verify signature and expiry of an RSA-signed JWT."""
    try:
        return jwt.decode(
            token,
            public_key_pem,
            algorithms=RSA_ALGORITHMS,
            options={"verify_aud": False},
        )
    except JWTError as exc:
        raise PipelineError(ErrorKind.TOKEN_INVALID) from exc


def verify(header_value: str | None, config: AuthConfig) -> dict[str, Any]:
    """Validate the Authorization header and return the token claims.

    When auth is disabled no header is inspected and empty claims are returned.
    """
    if not config.enabled:
        return {}

    try:
        token = extract_bearer_token(header_value)
        public_key_pem = load_public_key(config.public_key_b64)
        return decode_token(token, public_key_pem)
    except PipelineError as exc:
        logger.info("Rejected request credentials: %s", exc.kind.value)
        raise
