"""Video schemas for API request/response DTOs."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from kidtube.core.db.models import BookmarkRecord
from kidtube.services.popularity_service import PopularVideo


class VideoCreate(BaseModel):
    """Schema for bookmarking a video."""

    url: Optional[str] = Field(
        default=None,
        max_length=2048,
        description="YouTube watch, short or embed URL, or a bare 11-character video ID",
        examples=["https://www.youtube.com/watch?v=dQw4w9WgXcQ"],
    )
    title: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Display title; looked up from YouTube when omitted or blank",
    )


class VideoUpdate(BaseModel):
    """Schema for renaming a bookmarked video."""

    title: Optional[str] = Field(default=None, max_length=500, description="New display title")


class VideoResponse(BaseModel):
    """A bookmarked video."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="YouTube video ID")
    title: str = Field(description="Display title")
    added_at: datetime = Field(alias="addedAt", description="When the video was bookmarked (UTC)")

    @classmethod
    def from_record(cls, record: BookmarkRecord) -> "VideoResponse":
        return cls(id=record.video_id, title=record.title, added_at=record.added_at)


class PopularVideoResponse(BaseModel):
    """A video ranked by how many owners bookmarked it."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(description="YouTube video ID")
    title: str = Field(description="Title from the earliest bookmark of this video")
    added_by_count: int = Field(alias="addedByCount", description="Number of owners")

    @classmethod
    def from_popular(cls, video: PopularVideo) -> "PopularVideoResponse":
        return cls(id=video.video_id, title=video.title, added_by_count=video.count)


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
