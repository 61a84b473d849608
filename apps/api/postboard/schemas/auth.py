"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, Field


class AuthPrincipal(BaseModel):
    """Normalized authenticated principal used by the post handler."""

    model_config = ConfigDict(frozen=True)

    user_id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)


class LoginCredentials(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AuthTokenRequest(BaseModel):
    auth: LoginCredentials


class AuthTokenResponse(BaseModel):
    jwt: str
