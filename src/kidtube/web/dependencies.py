"""FastAPI dependency injection for database, identity, and services."""

from typing import AsyncGenerator, Optional

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

import kidtube
from kidtube.api.oembed_client import OEmbedClient
from kidtube.auth import AuthenticationError, IdentityVerifier, OwnerInfo, create_verifier
from kidtube.common.logging_config import bind_owner
from kidtube.core.db import BookmarkRepository
from kidtube.services import (
    ChildProfileService,
    PopularityService,
    TitleFetcher,
    VideoService,
)

from .settings import APISettings, get_settings

logger = structlog.get_logger(__name__)

# Optional bearer scheme - doesn't require auth header, allows checking if present
optional_bearer = HTTPBearer(auto_error=False)


async def get_repository() -> AsyncGenerator[BookmarkRepository, None]:
    """
    Dependency that provides a BookmarkRepository instance.

    Yields the repository from the configured kidtube module.
    Requires kidtube.configure() to have been called (done in app lifespan).

    Example:
        @router.get("/videos")
        async def list_videos(repo: BookmarkRepository = Depends(get_repository)):
            ...
    """
    repo = await kidtube.get_repository()
    yield repo


def get_api_settings(request: Request) -> APISettings:
    """
    Dependency that provides the settings the app was created with.

    Falls back to the cached environment settings.
    """
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


def get_identity_verifier(
    request: Request,
    settings: APISettings = Depends(get_api_settings),
) -> Optional[IdentityVerifier]:
    """
    Dependency that provides the bearer token verifier.

    One verifier is kept per application so the JWKS cache survives
    across requests. Returns None in single-tenant mode.
    """
    if not settings.multi_tenant:
        return None

    verifier = getattr(request.app.state, "identity_verifier", None)
    if verifier is None:
        verifier = create_verifier(
            jwt_secret=settings.jwt_secret,
            jwt_algorithm=settings.jwt_algorithm,
            jwks_url=settings.jwks_url,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
        )
        request.app.state.identity_verifier = verifier
    return verifier


async def authenticate(
    credentials: Optional[HTTPAuthorizationCredentials],
    verifier: Optional[IdentityVerifier],
) -> Optional[OwnerInfo]:
    """
    Verify a bearer token, if one was sent, and tag the request's logs with its owner.

    Raises:
        AuthenticationError: If the token is invalid
        UpstreamUnavailableError: If the identity provider's keys cannot be fetched
    """
    if not credentials or verifier is None:
        return None

    owner = await verifier.verify(credentials.credentials)
    bind_owner(owner.owner_id)
    return owner


async def get_current_owner(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_bearer),
    settings: APISettings = Depends(get_api_settings),
    verifier: Optional[IdentityVerifier] = Depends(get_identity_verifier),
) -> Optional[OwnerInfo]:
    """
    Dependency that verifies the bearer token, if one was sent.

    Returns:
        OwnerInfo for a valid token; None in single-tenant mode or without a token

    Raises:
        AuthenticationError: If a token was sent but is invalid
        UpstreamUnavailableError: If the identity provider's keys cannot be fetched
    """
    if not settings.multi_tenant or verifier is None:
        return None

    return await authenticate(credentials, verifier)


async def require_owner(
    owner: Optional[OwnerInfo] = Depends(get_current_owner),
    settings: APISettings = Depends(get_api_settings),
) -> Optional[str]:
    """
    Dependency for owner-scoped routes.

    Returns:
        The caller's owner id, or None in single-tenant mode

    Raises:
        AuthenticationError: If multi-tenant and no valid token was sent

    Example:
        @router.post("/videos")
        async def add_video(owner_id: Optional[str] = Depends(require_owner)):
            ...
    """
    if not settings.multi_tenant:
        return None

    if owner is None:
        raise AuthenticationError("Authentication required")

    logger.debug("request_authenticated", owner_id=owner.owner_id)
    return owner.owner_id


# ==================== Service Dependencies ====================


def get_title_fetcher() -> TitleFetcher:
    """
    Dependency that provides the oEmbed title client.

    The client opens its HTTP connection only when a title is looked up,
    so list, rename and remove requests never touch the network.
    """
    return OEmbedClient.from_config(kidtube.get_config().oembed)


async def get_video_service(
    repo: BookmarkRepository = Depends(get_repository),
    title_fetcher: TitleFetcher = Depends(get_title_fetcher),
) -> VideoService:
    """
    Dependency that provides a VideoService instance.

    The service is created per-request with the repository and title fetcher.

    Example:
        @router.get("/videos")
        async def list_videos(video_service: VideoService = Depends(get_video_service)):
            return await video_service.list(owner_id)
    """
    return VideoService(repository=repo, title_fetcher=title_fetcher)


async def get_popularity_service(
    repo: BookmarkRepository = Depends(get_repository),
) -> PopularityService:
    """Dependency that provides a PopularityService instance."""
    return PopularityService(
        repository=repo,
        default_limit=kidtube.get_config().popular.default_limit,
    )


async def get_profile_service(
    repo: BookmarkRepository = Depends(get_repository),
) -> ChildProfileService:
    """Dependency that provides a ChildProfileService instance."""
    return ChildProfileService(repository=repo)
