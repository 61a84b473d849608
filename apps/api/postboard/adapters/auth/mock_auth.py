"""Mock auth verifier for local development and tests."""

from postboard.adapters.auth.base import AuthVerificationError, TokenVerifier
from postboard.schemas.auth import AuthPrincipal

_MOCK_PREFIX = "test"


class MockTokenVerifier(TokenVerifier):
    """Accepts deterministic test tokens only.

    Expected token format:
    - ``test:<user_id>``
    - ``test:<user_id>:<email>``

    Tokens in any other format are handed to ``issued_token_verifier`` when
    one is configured, so tokens minted by the login endpoint keep working.
    """

    def __init__(self, issued_token_verifier: TokenVerifier | None = None) -> None:
        self._issued_token_verifier = issued_token_verifier

    def verify_token(self, token: str) -> AuthPrincipal:
        parts = token.split(":")
        if parts[0] != _MOCK_PREFIX and self._issued_token_verifier is not None:
            return self._issued_token_verifier.verify_token(token)
        if len(parts) not in (2, 3) or parts[0] != _MOCK_PREFIX:
            raise AuthVerificationError("Invalid bearer token")

        user_id = parts[1].strip()
        email = parts[2].strip() if len(parts) == 3 else f"{user_id}@example.test"

        if not user_id:
            raise AuthVerificationError("Bearer token missing user identity")
        if not email:
            raise AuthVerificationError("Bearer token missing email")

        return AuthPrincipal(user_id=user_id, name=user_id, email=email)


__all__ = ["MockTokenVerifier"]
