"""Dependency providers and settings management."""

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status
from jose import JWTError
from pydantic_settings import BaseSettings, SettingsConfigDict

from reporting.security import decode_token
from reporting.semantic.identity import CallerIdentity
from reporting.semantic.registry import DatasetRegistry
from reporting.services.analytics_service import AnalyticsService
from reporting.services.cube_client import CubeClient

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment or .env."""

    # Cube.js
    CUBE_API_URL: str = "http://localhost:4000"
    CUBE_API_TOKEN: Optional[str] = None
    CUBE_TIMEOUT_SECONDS: float = 30.0

    # Bearer tokens. Without a secret no token can be verified, so every
    # request runs without a caller identity.
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"

    BACKEND_CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def cors_origins(self):
        return [origin.strip() for origin in self.BACKEND_CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()  # type: ignore[call-arg]


def get_registry(request: Request) -> DatasetRegistry:
    """Registry built once by create_app and stored on app.state."""
    return request.app.state.registry


def get_cube_client(settings: Settings = Depends(get_settings)) -> CubeClient:
    return CubeClient(
        base_url=settings.CUBE_API_URL,
        api_token=settings.CUBE_API_TOKEN,
        timeout=settings.CUBE_TIMEOUT_SECONDS,
    )


def get_analytics_service(
    registry: DatasetRegistry = Depends(get_registry),
    cube_client: CubeClient = Depends(get_cube_client),
) -> AnalyticsService:
    return AnalyticsService(registry=registry, cube_client=cube_client)


def get_caller_identity(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> Optional[CallerIdentity]:
    """Resolve the caller from an ``Authorization: Bearer <jwt>`` header.

    No header, or no JWT_SECRET configured, means no identity (security
    filters are then not injected). A header that fails verification is a 401.
    """
    if not authorization:
        return None

    if not settings.JWT_SECRET:
        logger.debug("[AUTH] JWT_SECRET not set, ignoring Authorization header")
        return None

    # Remove optional "Bearer " prefix
    if authorization.startswith("Bearer "):
        token = authorization[len("Bearer "):]
    else:
        token = authorization

    try:
        claims = decode_token(token, settings.JWT_SECRET, settings.JWT_ALGORITHM)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    return CallerIdentity(claims)
