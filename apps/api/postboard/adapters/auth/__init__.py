"""Auth verifier adapters."""

from .base import (
    EXPIRED_CREDENTIAL,
    INVALID_CREDENTIAL,
    PRINCIPAL_NOT_FOUND,
    AuthVerificationError,
    TokenVerifier,
)
from .jwt_auth import JwtTokenIssuer, JwtTokenVerifier
from .mock_auth import MockTokenVerifier

__all__ = [
    "AuthVerificationError",
    "EXPIRED_CREDENTIAL",
    "INVALID_CREDENTIAL",
    "PRINCIPAL_NOT_FOUND",
    "TokenVerifier",
    "JwtTokenIssuer",
    "JwtTokenVerifier",
    "MockTokenVerifier",
]
