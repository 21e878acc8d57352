"""Service layer for the video collection, popularity ranking and child profiles.

Services enforce business rules over the bookmark store and raise
service-specific exceptions that the web layer maps to HTTP statuses.

Example:
    >>> from kidtube.services import VideoService
    >>>
    >>> async def my_route(video_service: VideoService = Depends(get_video_service)):
    ...     videos = await video_service.list(owner_id)
"""

from .base import (
    BaseService,
    ConflictError,
    DuplicateVideoError,
    InvalidUrlError,
    NotFoundError,
    ServiceError,
    TitleFetcher,
    UpstreamUnavailableError,
    ValidationError,
    VideoCollectionStore,
)
from .popularity_service import PopularityService, PopularVideo
from .profile_service import ChildProfileService
from .video_service import VideoService

__all__ = [
    # Base classes and errors
    "BaseService",
    "ServiceError",
    "ValidationError",
    "InvalidUrlError",
    "NotFoundError",
    "ConflictError",
    "DuplicateVideoError",
    "UpstreamUnavailableError",
    "TitleFetcher",
    "VideoCollectionStore",
    # Services
    "VideoService",
    "PopularityService",
    "PopularVideo",
    "ChildProfileService",
]
