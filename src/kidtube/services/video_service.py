"""Video service: add, remove, rename and list an owner's bookmarked videos.

Orchestrates:
- Video ID resolution from raw IDs and URLs
- Per-owner duplicate detection
- Title lookup with fallback when the caller gives no title
- Store mutation

Example:
    >>> from kidtube.services import VideoService
    >>>
    >>> async def my_route(video_service: VideoService = Depends(get_video_service)):
    ...     record = await video_service.add("user_2abc", "https://youtu.be/dQw4w9WgXcQ")
"""

from typing import List, Optional

import structlog

from kidtube.common.video_id import extract_video_id
from kidtube.core.db.exceptions import DuplicateRecordError
from kidtube.core.db.models import BookmarkRecord

from .base import (
    BaseService,
    DuplicateVideoError,
    InvalidUrlError,
    NotFoundError,
    TitleFetcher,
    ValidationError,
    VideoCollectionStore,
)

logger = structlog.get_logger(__name__)


class VideoService(BaseService):
    """
    Service for an owner's video collection.

    All methods raise service-specific exceptions (InvalidUrlError,
    DuplicateVideoError, NotFoundError, ValidationError,
    UpstreamUnavailableError) that the API layer maps to HTTP statuses.
    """

    def __init__(self, repository: VideoCollectionStore, title_fetcher: TitleFetcher):
        """
        Args:
            repository: Bookmark store
            title_fetcher: Used when a video is added without a title
        """
        super().__init__(repository)
        self.title_fetcher = title_fetcher

    async def add(
        self,
        owner_id: Optional[str],
        raw_input: str,
        title_hint: Optional[str] = None,
    ) -> BookmarkRecord:
        """
        Bookmark a video for an owner.

        Resolution and the duplicate check both happen before anything is
        written. The check is advisory; the store's unique index settles
        concurrent adds of the same video.

        Args:
            owner_id: Owner of the collection (None in single-tenant mode)
            raw_input: Video ID or YouTube URL
            title_hint: Title to store; looked up when empty or whitespace

        Returns:
            The stored record

        Raises:
            ValidationError: If raw_input is empty
            InvalidUrlError: If raw_input is not a recognised ID or URL
            DuplicateVideoError: If the owner already has this video
            UpstreamUnavailableError: If the store fails
        """
        if not raw_input:
            raise ValidationError("URL is required", field="url")

        video_id = extract_video_id(raw_input)
        if video_id is None:
            raise InvalidUrlError(raw_input=raw_input)

        async with self._store_call("add"):
            existing = await self.repository.get_bookmark(owner_id, video_id)
        if existing is not None:
            raise DuplicateVideoError(video_id, owner_id=owner_id)

        if title_hint and title_hint.strip():
            title = title_hint
        else:
            title = await self.title_fetcher.fetch_title(video_id)

        try:
            async with self._store_call("add"):
                record = await self.repository.create_bookmark(owner_id, video_id, title)
        except DuplicateRecordError as e:
            raise DuplicateVideoError(video_id, owner_id=owner_id) from e

        self.logger.info("video_added", owner_id=owner_id, video_id=video_id)
        return record

    async def remove(self, owner_id: Optional[str], video_id: str) -> None:
        """
        Remove a video from an owner's collection.

        Raises:
            NotFoundError: If the owner has no such video
            UpstreamUnavailableError: If the store fails
        """
        async with self._store_call("remove"):
            deleted = await self.repository.delete_bookmark(owner_id, video_id)
        if not deleted:
            raise NotFoundError(
                "Video not found",
                resource_type="video",
                resource_id=video_id,
            )
        self.logger.info("video_removed", owner_id=owner_id, video_id=video_id)

    async def rename(
        self,
        owner_id: Optional[str],
        video_id: str,
        new_title: Optional[str],
    ) -> BookmarkRecord:
        """
        Change the title of a bookmarked video.

        Raises:
            ValidationError: If new_title is empty or whitespace
            NotFoundError: If the owner has no such video
            UpstreamUnavailableError: If the store fails
        """
        if not new_title or not new_title.strip():
            raise ValidationError("Title is required", field="title")

        async with self._store_call("rename"):
            record = await self.repository.update_bookmark_title(owner_id, video_id, new_title)
        if record is None:
            raise NotFoundError(
                "Video not found",
                resource_type="video",
                resource_id=video_id,
            )
        self.logger.info("video_renamed", owner_id=owner_id, video_id=video_id)
        return record

    async def list(self, owner_id: Optional[str]) -> List[BookmarkRecord]:
        """List an owner's videos, most recently added first."""
        async with self._store_call("list"):
            return await self.repository.list_bookmarks(owner_id)
