"""API-specific settings using Pydantic BaseSettings."""

from functools import lru_cache
from typing import List, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """
    FastAPI application settings.

    Settings can be configured via environment variables with the prefix KIDTUBE_API_.
    For example: KIDTUBE_API_HOST=0.0.0.0, KIDTUBE_API_JWT_SECRET=...

    Attributes:
        host: Server bind address
        port: Server bind port
        debug: Enable debug mode (auto-reload, verbose errors)
        allowed_origins: List of allowed CORS origins
        log_requests: Log all requests and responses
        openapi_url: OpenAPI schema URL (set to None to disable)
        multi_tenant: Scope collections to the owner named by a bearer token
        jwt_secret: Shared secret for HMAC-signed tokens
        jwt_algorithm: Algorithm for shared-secret tokens (default: HS256)
        jwks_url: Identity provider key set for asymmetric tokens (wins over jwt_secret)
        jwt_issuer: Expected ``iss`` claim (None = not checked)
        jwt_audience: Expected ``aud`` claim (None = not checked)
    """

    model_config = SettingsConfigDict(
        env_prefix="KIDTUBE_API_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    allowed_origins: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    log_requests: bool = True
    openapi_url: Optional[str] = "/openapi.json"

    # Identity settings
    multi_tenant: bool = True
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwks_url: Optional[str] = None
    jwt_issuer: Optional[str] = None
    jwt_audience: Optional[str] = None

    @model_validator(mode="after")
    def validate_identity_config(self) -> "APISettings":
        """Multi-tenant mode needs a way to verify bearer tokens."""
        if self.multi_tenant and not (self.jwt_secret or self.jwks_url):
            raise ValueError(
                "Multi-tenant mode requires KIDTUBE_API_JWKS_URL or KIDTUBE_API_JWT_SECRET. "
                "To run a single shared collection without authentication, "
                "set KIDTUBE_API_MULTI_TENANT=false."
            )
        return self


@lru_cache
def get_settings() -> APISettings:
    """
    Get cached API settings instance.

    Returns:
        APISettings instance (cached)
    """
    return APISettings()
