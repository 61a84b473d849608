"""Application configuration."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables."""

    auth_provider: Literal["mock", "jwt"] = "jwt"
    jwt_secret: str
    jwt_algorithm: Literal["HS256", "HS384", "HS512"] = "HS256"
    jwt_audience: str | None = None
    jwt_leeway_seconds: int = Field(default=0, ge=0)
    token_lifetime_seconds: int = Field(default=86400, gt=0)
    verify_principal_exists: bool = False
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    seed_user_email: str | None = None
    seed_user_password: str | None = None
    seed_user_name: str = "Lester Tester"

    model_config = SettingsConfigDict(env_prefix="POSTBOARD_", extra="ignore")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
