"""Authentication provider interfaces."""

from abc import ABC, abstractmethod

from postboard.schemas.auth import AuthPrincipal

INVALID_CREDENTIAL = "invalid_credential"
EXPIRED_CREDENTIAL = "expired_credential"
PRINCIPAL_NOT_FOUND = "principal_not_found"


class AuthVerificationError(Exception):
    """Raised when a token cannot be verified or normalized."""

    def __init__(self, message: str, *, reason: str = INVALID_CREDENTIAL) -> None:
        self.reason = reason
        super().__init__(message)


class TokenVerifier(ABC):
    """Provider-neutral token verification interface."""

    @abstractmethod
    def verify_token(self, token: str) -> AuthPrincipal:
        """Verify token and return normalized principal."""


__all__ = [
    "AuthVerificationError",
    "EXPIRED_CREDENTIAL",
    "INVALID_CREDENTIAL",
    "PRINCIPAL_NOT_FOUND",
    "TokenVerifier",
]
