"""Records returned by the bookmark store."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value)


@dataclass(frozen=True)
class BookmarkRecord:
    """A video bookmarked by an owner."""

    owner_id: Optional[str]
    video_id: str
    title: str
    added_at: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "BookmarkRecord":
        return cls(
            owner_id=row["user_id"],
            video_id=row["youtube_video_id"],
            title=row["title"],
            added_at=_parse_timestamp(row["added_at"]),
        )


@dataclass(frozen=True)
class ChildProfile:
    """Profile of the child a bookmark list is curated for."""

    owner_id: Optional[str]
    child_name: str
    date_of_birth: Optional[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ChildProfile":
        return cls(
            owner_id=row["user_id"],
            child_name=row["child_name"],
            date_of_birth=row["date_of_birth"],
            created_at=_parse_timestamp(row["created_at"]),
            updated_at=_parse_timestamp(row["updated_at"]),
        )
