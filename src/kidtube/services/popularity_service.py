"""Popularity ranking of videos across every owner's collection."""

from dataclasses import dataclass
from typing import Dict, List, Optional

import structlog

from .base import BaseService, ValidationError, VideoCollectionStore

logger = structlog.get_logger(__name__)

DEFAULT_POPULAR_LIMIT = 10


@dataclass(frozen=True)
class PopularVideo:
    """A video and how many owners have bookmarked it."""

    video_id: str
    title: str
    count: int


class PopularityService(BaseService):
    """
    Read-only aggregation over the full bookmark set.

    Records are grouped by video id in store scan order. Each group keeps
    the title of the first record seen, and groups with equal counts keep
    that order after ranking.
    """

    def __init__(
        self,
        repository: VideoCollectionStore,
        default_limit: int = DEFAULT_POPULAR_LIMIT,
    ):
        super().__init__(repository)
        self.default_limit = default_limit

    async def top_popular(self, limit: Optional[int] = None) -> List[PopularVideo]:
        """
        Rank videos by the number of owners who bookmarked them.

        Args:
            limit: Maximum entries to return (defaults to default_limit)

        Raises:
            ValidationError: If limit is below 1
            UpstreamUnavailableError: If the store fails
        """
        if limit is None:
            limit = self.default_limit
        if limit < 1:
            raise ValidationError("Limit must be at least 1", field="limit", value=limit)

        async with self._store_call("top_popular"):
            records = await self.repository.list_all_bookmarks()

        titles: Dict[str, str] = {}
        counts: Dict[str, int] = {}
        for record in records:
            if record.video_id not in counts:
                titles[record.video_id] = record.title
                counts[record.video_id] = 0
            counts[record.video_id] += 1

        # sorted() is stable, so ties keep first-seen order
        ranked = sorted(counts, key=lambda video_id: counts[video_id], reverse=True)

        self.logger.debug("popular_videos_ranked", groups=len(ranked), limit=limit)
        return [
            PopularVideo(video_id=video_id, title=titles[video_id], count=counts[video_id])
            for video_id in ranked[:limit]
        ]
