"""Dependency wiring for routes."""

from __future__ import annotations

from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from postboard.adapters.auth import JwtTokenIssuer, JwtTokenVerifier, MockTokenVerifier, TokenVerifier
from postboard.core.config import Settings, get_settings
from postboard.repositories.memory import InMemoryStore
from postboard.services.auth import TokenService
from postboard.services.posts import PostRequestHandler

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_request_correlation_id(request: Request) -> str:
    return _request_correlation_id(request)


def get_bearer_credential(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
) -> str | None:
    """Return the raw bearer token, or ``None`` when no usable header was sent."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        return None
    return credentials.credentials


def get_store(request: Request) -> InMemoryStore:
    return request.app.state.store


def get_token_verifier(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[InMemoryStore, Depends(get_store)],
) -> TokenVerifier:
    """Resolve provider adapter from configuration."""
    jwt_verifier = JwtTokenVerifier(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        audience=settings.jwt_audience,
        leeway_seconds=settings.jwt_leeway_seconds,
        user_store=store if settings.verify_principal_exists else None,
    )
    if settings.auth_provider == "jwt":
        return jwt_verifier
    return MockTokenVerifier(issued_token_verifier=jwt_verifier)


def get_token_issuer(settings: Annotated[Settings, Depends(get_settings)]) -> JwtTokenIssuer:
    return JwtTokenIssuer(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        audience=settings.jwt_audience,
        lifetime_seconds=settings.token_lifetime_seconds,
    )


def get_post_handler(
    store: Annotated[InMemoryStore, Depends(get_store)],
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> PostRequestHandler:
    return PostRequestHandler(store, verifier)


def get_token_service(
    store: Annotated[InMemoryStore, Depends(get_store)],
    issuer: Annotated[JwtTokenIssuer, Depends(get_token_issuer)],
) -> TokenService:
    return TokenService(store, issuer)
