"""Fixtures specific to unit tests."""

from datetime import datetime, timezone
from typing import Optional
from unittest.mock import AsyncMock

import pytest

from kidtube.common.config import HTTPConfig, RetryConfig
from kidtube.core.db.models import BookmarkRecord


@pytest.fixture
def retry_config() -> RetryConfig:
    """Provide a retry configuration for unit tests."""
    return RetryConfig(
        max_attempts=3,
        backoff_multiplier=1.0,
        min_wait=0.1,  # Shorter wait for tests
        max_wait=1.0,  # Shorter wait for tests
        status_codes=[429, 500, 502, 503, 504],
    )


@pytest.fixture
def http_config_with_retry(retry_config: RetryConfig) -> HTTPConfig:
    """Provide HTTP config with custom retry settings for tests."""
    return HTTPConfig(
        timeout=5,
        retry=retry_config,
    )


def make_record(
    video_id: str,
    title: str = "Test Video",
    owner_id: Optional[str] = "user_1",
) -> BookmarkRecord:
    """Build a BookmarkRecord with a fixed timestamp."""
    return BookmarkRecord(
        owner_id=owner_id,
        video_id=video_id,
        title=title,
        added_at=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def mock_repository() -> AsyncMock:
    """Mock BookmarkRepository for service tests."""
    repository = AsyncMock()
    repository.get_bookmark = AsyncMock(return_value=None)
    repository.create_bookmark = AsyncMock(
        side_effect=lambda owner_id, video_id, title: make_record(video_id, title, owner_id)
    )
    repository.list_bookmarks = AsyncMock(return_value=[])
    repository.list_all_bookmarks = AsyncMock(return_value=[])
    repository.update_bookmark_title = AsyncMock(return_value=None)
    repository.delete_bookmark = AsyncMock(return_value=False)
    repository.get_child_profile = AsyncMock(return_value=None)
    repository.upsert_child_profile = AsyncMock()
    return repository


@pytest.fixture
def mock_title_fetcher() -> AsyncMock:
    """Mock title fetcher returning a fixed title."""
    fetcher = AsyncMock()
    fetcher.fetch_title = AsyncMock(return_value="Fetched Title")
    return fetcher


@pytest.fixture
def record_factory():
    """Provide the BookmarkRecord builder."""
    return make_record
