"""Signed JWT verifier and issuer adapters."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import jwt

from postboard.adapters.auth.base import (
    EXPIRED_CREDENTIAL,
    INVALID_CREDENTIAL,
    PRINCIPAL_NOT_FOUND,
    AuthVerificationError,
    TokenVerifier,
)
from postboard.repositories.base import UserRecord, UserStore
from postboard.schemas.auth import AuthPrincipal

logger = logging.getLogger(__name__)

_REQUIRED_CLAIMS = ["sub", "iat", "exp"]


class JwtTokenVerifier(TokenVerifier):
    """Verifies HMAC-signed JWTs and normalizes principal data.

    When ``user_store`` is given, the principal is re-read from it so that a
    deleted account stops authenticating before its tokens expire.
    """

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        audience: str | None = None,
        leeway_seconds: int = 0,
        user_store: UserStore | None = None,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._audience = audience
        self._leeway = leeway_seconds
        self._user_store = user_store

    def verify_token(self, token: str) -> AuthPrincipal:
        if not token or not token.strip():
            raise AuthVerificationError("Empty bearer token", reason=INVALID_CREDENTIAL)

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                leeway=self._leeway,
                options={"require": _REQUIRED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthVerificationError("Bearer token has expired", reason=EXPIRED_CREDENTIAL) from exc
        except jwt.InvalidTokenError as exc:
            logger.debug("JWT verification failed: %s", exc)
            raise AuthVerificationError("Invalid bearer token", reason=INVALID_CREDENTIAL) from exc

        user_id = str(claims.get("sub") or "").strip()
        if not user_id:
            raise AuthVerificationError("Bearer token missing user identity")

        name = str(claims.get("name") or "").strip()
        email = str(claims.get("email") or "").strip()
        if not name or not email:
            raise AuthVerificationError("Bearer token missing principal claims")

        if self._user_store is not None:
            user = self._user_store.get_user(user_id)
            if user is None:
                raise AuthVerificationError("Bearer token principal no longer exists", reason=PRINCIPAL_NOT_FOUND)
            return AuthPrincipal(user_id=user.id, name=user.name, email=user.email)

        return AuthPrincipal(user_id=user_id, name=name, email=email)


class JwtTokenIssuer:
    """Mints tokens that ``JwtTokenVerifier`` accepts."""

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        audience: str | None = None,
        lifetime_seconds: int = 86400,
    ) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._audience = audience
        self._lifetime = timedelta(seconds=lifetime_seconds)

    def issue(self, user: UserRecord, *, now: datetime | None = None) -> str:
        issued_at = now or datetime.now(UTC)
        claims: dict[str, object] = {
            "sub": user.id,
            "name": user.name,
            "email": user.email,
            "iat": issued_at,
            "exp": issued_at + self._lifetime,
        }
        if self._audience:
            claims["aud"] = self._audience
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)


__all__ = ["JwtTokenIssuer", "JwtTokenVerifier"]
