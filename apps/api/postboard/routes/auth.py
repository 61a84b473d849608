"""Token issuance routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from postboard.routes.dependencies import get_token_service
from postboard.schemas.auth import AuthTokenRequest, AuthTokenResponse
from postboard.schemas.envelope import ErrorEnvelope
from postboard.services.auth import TokenService

router = APIRouter(prefix="/knock", tags=["Auth"])


@router.post(
    "/auth_token",
    response_model=AuthTokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorEnvelope}, 401: {"model": ErrorEnvelope}},
)
async def create_auth_token(
    payload: AuthTokenRequest,
    service: Annotated[TokenService, Depends(get_token_service)],
) -> AuthTokenResponse:
    token = service.issue_token(email=payload.auth.email, password=payload.auth.password)
    return AuthTokenResponse(jwt=token)
