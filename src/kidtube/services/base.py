"""Base service infrastructure: collaborator protocols and service errors.

This module provides the foundation for all service classes:
- Service-specific exceptions mapped to HTTP statuses by the web layer
- VideoCollectionStore / TitleFetcher: the collaborators services depend on
- BaseService: shared repository access and store-failure translation
"""

from contextlib import asynccontextmanager
from typing import (
    Any,
    AsyncIterator,
    Dict,
    List,
    Optional,
    Protocol,
    runtime_checkable,
)

import structlog

from kidtube.core.db.exceptions import DatabaseError, DuplicateRecordError
from kidtube.core.db.models import BookmarkRecord, ChildProfile

logger = structlog.get_logger(__name__)


# ==================== Exceptions ====================


class ServiceError(Exception):
    """Base exception for all service errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(ServiceError):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, **kwargs: Any):
        super().__init__(message, details={"field": field, **kwargs})
        self.field = field


class InvalidUrlError(ValidationError):
    """Raised when input cannot be resolved to a YouTube video ID."""

    def __init__(self, message: str = "Invalid YouTube URL", raw_input: Optional[str] = None):
        super().__init__(message, field="url", raw_input=raw_input)
        self.raw_input = raw_input


class NotFoundError(ServiceError):
    """Raised when a requested resource is not found."""

    def __init__(
        self,
        message: str,
        resource_type: str,
        resource_id: Optional[Any] = None,
    ):
        super().__init__(
            message,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(ServiceError):
    """Raised when an operation would create a conflict (e.g., duplicate)."""

    def __init__(self, message: str, conflicting_id: Optional[Any] = None, **kwargs: Any):
        super().__init__(message, details={"conflicting_id": conflicting_id, **kwargs})
        self.conflicting_id = conflicting_id


class DuplicateVideoError(ConflictError):
    """Raised when an owner bookmarks a video that is already in their collection."""

    def __init__(self, video_id: str, owner_id: Optional[str] = None):
        super().__init__(
            "Video already exists in your collection",
            conflicting_id=video_id,
            owner_id=owner_id,
        )
        self.video_id = video_id
        self.owner_id = owner_id


class UpstreamUnavailableError(ServiceError):
    """Raised when the store or the identity provider cannot be reached."""

    def __init__(self, message: str, upstream: str):
        super().__init__(message, details={"upstream": upstream})
        self.upstream = upstream


# ==================== Collaborator Protocols ====================


@runtime_checkable
class TitleFetcher(Protocol):
    """Looks up a display title for a video; never raises for lookup failures."""

    async def fetch_title(self, video_id: str) -> str:
        ...


@runtime_checkable
class VideoCollectionStore(Protocol):
    """
    Durable per-owner bookmark storage.

    The store enforces ``(owner_id, video_id)`` uniqueness itself and
    raises DuplicateRecordError when an insert would violate it.
    Implemented by BookmarkRepository.
    """

    async def create_bookmark(
        self, owner_id: Optional[str], video_id: str, title: str
    ) -> BookmarkRecord:
        ...

    async def get_bookmark(
        self, owner_id: Optional[str], video_id: str
    ) -> Optional[BookmarkRecord]:
        ...

    async def list_bookmarks(self, owner_id: Optional[str]) -> List[BookmarkRecord]:
        ...

    async def list_all_bookmarks(self) -> List[BookmarkRecord]:
        ...

    async def update_bookmark_title(
        self, owner_id: Optional[str], video_id: str, title: str
    ) -> Optional[BookmarkRecord]:
        ...

    async def delete_bookmark(self, owner_id: Optional[str], video_id: str) -> bool:
        ...

    async def get_child_profile(self, owner_id: Optional[str]) -> Optional[ChildProfile]:
        ...

    async def upsert_child_profile(
        self,
        owner_id: Optional[str],
        child_name: str,
        date_of_birth: Optional[str] = None,
    ) -> ChildProfile:
        ...


# ==================== Base Service ====================


class BaseService:
    """
    Base class for all services.

    Provides:
    - Repository access
    - Structured logging bound to the service name
    - Translation of store failures into UpstreamUnavailableError
    """

    def __init__(self, repository: VideoCollectionStore):
        self.repository = repository
        self.logger = logger.bind(service=self.__class__.__name__)

    @asynccontextmanager
    async def _store_call(self, operation: str) -> AsyncIterator[None]:
        """
        Wrap store access for one operation.

        Uniqueness violations propagate unchanged so callers can map them;
        every other DatabaseError becomes UpstreamUnavailableError.
        """
        try:
            yield
        except DuplicateRecordError:
            raise
        except DatabaseError as e:
            self.logger.error("store_operation_failed", operation=operation, error=str(e))
            raise UpstreamUnavailableError(
                "Video store is unavailable", upstream="store"
            ) from e
