"""YouTube oEmbed client used to look up video titles."""

from typing import Any, Optional

import httpx
import structlog

from ..common.config import OEmbedConfig
from ..common.http_client import AsyncHTTPClient
from ..common.video_id import build_watch_url

logger = structlog.get_logger(__name__)


class OEmbedClient(AsyncHTTPClient):
    """
    Title lookup against the YouTube oEmbed endpoint.

    ``fetch_title`` never raises for lookup failures: network errors,
    timeouts, error statuses and malformed bodies all yield the configured
    fallback title.

    Example:
        >>> async with OEmbedClient.from_config(OEmbedConfig()) as client:
        ...     title = await client.fetch_title("dQw4w9WgXcQ")
    """

    def __init__(self, config: Optional[OEmbedConfig] = None):
        self.oembed_config = config or OEmbedConfig()
        super().__init__(self.oembed_config.to_http_config())

    @classmethod
    def from_config(cls, config: OEmbedConfig) -> "OEmbedClient":
        """Create a client from OEmbedConfig."""
        return cls(config)

    @property
    def fallback_title(self) -> str:
        return self.oembed_config.fallback_title

    async def fetch_title(self, video_id: str) -> str:
        """
        Fetch the human-readable title for a video.

        Outside an ``async with`` block the client opens a connection pool
        for this one lookup and closes it afterwards.

        Args:
            video_id: Resolved YouTube video ID

        Returns:
            The video title, or the fallback title if the lookup failed
        """
        if self._client is None:
            async with self:
                return await self._lookup_title(video_id)
        return await self._lookup_title(video_id)

    async def _lookup_title(self, video_id: str) -> str:
        params = {"url": build_watch_url(video_id), "format": "json"}

        try:
            response = await self.get(self.oembed_config.base_url, params=params)
            response.raise_for_status()
            payload: Any = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "title_fetch_failed",
                video_id=video_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            return self.fallback_title

        title = payload.get("title") if isinstance(payload, dict) else None
        if not isinstance(title, str) or not title:
            logger.warning("title_missing_in_response", video_id=video_id)
            return self.fallback_title

        logger.debug("title_fetched", video_id=video_id)
        return title
