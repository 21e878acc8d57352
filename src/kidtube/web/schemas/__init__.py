"""Pydantic schemas for API request/response DTOs."""

from .common import (
    AUTH_ERROR_RESPONSES,
    COMMON_ERROR_RESPONSES,
    PUBLIC_ERROR_RESPONSES,
    ErrorDetail,
    HealthCheckResponse,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from .profile import ChildProfileResponse, ChildProfileSave, PublicChildProfileResponse
from .video import (
    MessageResponse,
    PopularVideoResponse,
    VideoCreate,
    VideoResponse,
    VideoUpdate,
)

__all__ = [
    # Common
    "AUTH_ERROR_RESPONSES",
    "COMMON_ERROR_RESPONSES",
    "PUBLIC_ERROR_RESPONSES",
    "ErrorDetail",
    "HealthCheckResponse",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
    # Videos
    "VideoCreate",
    "VideoUpdate",
    "VideoResponse",
    "PopularVideoResponse",
    "MessageResponse",
    # Child profiles
    "ChildProfileSave",
    "ChildProfileResponse",
    "PublicChildProfileResponse",
]
