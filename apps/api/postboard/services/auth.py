"""User credential checks and token issuance."""

from __future__ import annotations

import logging

import bcrypt

from postboard.adapters.auth import INVALID_CREDENTIAL, JwtTokenIssuer
from postboard.core.logging_safety import safe_log_identifier
from postboard.errors import AuthenticationError
from postboard.repositories.base import UserRecord, UserStore

logger = logging.getLogger(__name__)

# Bcrypt only looks at the first 72 bytes of a password.
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, *, rounds: int = 12) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(plain), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash.
        return False


class TokenService:
    def __init__(self, users: UserStore, issuer: JwtTokenIssuer) -> None:
        self._users = users
        self._issuer = issuer

    def authenticate(self, *, email: str, password: str) -> UserRecord:
        user = self._users.find_user_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            logger.warning(
                "token.rejected email=%s reason=%s",
                safe_log_identifier(email, prefix="email"),
                INVALID_CREDENTIAL,
            )
            raise AuthenticationError("Invalid email or password", reason=INVALID_CREDENTIAL)
        return user

    def issue_token(self, *, email: str, password: str) -> str:
        user = self.authenticate(email=email, password=password)
        token = self._issuer.issue(user)
        logger.info("token.issued principal_id=%s", safe_log_identifier(user.id, prefix="pid"))
        return token


__all__ = ["TokenService", "hash_password", "verify_password"]
