"""Unit tests for PopularityService."""

import pytest

from kidtube.core.db.exceptions import QueryError
from kidtube.services.base import UpstreamUnavailableError, ValidationError
from kidtube.services.popularity_service import PopularityService, PopularVideo


class TestTopPopular:
    """Tests for PopularityService.top_popular."""

    @pytest.mark.asyncio
    async def test_ranks_by_count(self, mock_repository, record_factory) -> None:
        mock_repository.list_all_bookmarks.return_value = [
            record_factory("AAAAAAAAAAA", "A first", "u1"),
            record_factory("AAAAAAAAAAA", "A second", "u2"),
            record_factory("BBBBBBBBBBB", "B", "u1"),
            record_factory("CCCCCCCCCCC", "C first", "u1"),
            record_factory("CCCCCCCCCCC", "C second", "u2"),
            record_factory("CCCCCCCCCCC", "C third", "u3"),
        ]
        service = PopularityService(mock_repository)

        popular = await service.top_popular(2)

        assert popular == [
            PopularVideo(video_id="CCCCCCCCCCC", title="C first", count=3),
            PopularVideo(video_id="AAAAAAAAAAA", title="A first", count=2),
        ]

    @pytest.mark.asyncio
    async def test_ties_keep_scan_order(self, mock_repository, record_factory) -> None:
        mock_repository.list_all_bookmarks.return_value = [
            record_factory("AAAAAAAAAAA", "A", "u1"),
            record_factory("BBBBBBBBBBB", "B", "u1"),
            record_factory("BBBBBBBBBBB", "B", "u2"),
            record_factory("CCCCCCCCCCC", "C", "u1"),
        ]
        service = PopularityService(mock_repository)

        popular = await service.top_popular()

        assert [(p.video_id, p.count) for p in popular] == [
            ("BBBBBBBBBBB", 2),
            ("AAAAAAAAAAA", 1),
            ("CCCCCCCCCCC", 1),
        ]

    @pytest.mark.asyncio
    async def test_default_limit(self, mock_repository, record_factory) -> None:
        mock_repository.list_all_bookmarks.return_value = [
            record_factory(f"video{i:06d}", f"Video {i}") for i in range(15)
        ]

        assert len(await PopularityService(mock_repository).top_popular()) == 10
        assert len(await PopularityService(mock_repository, default_limit=3).top_popular()) == 3

    @pytest.mark.asyncio
    async def test_empty_store(self, mock_repository) -> None:
        assert await PopularityService(mock_repository).top_popular() == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, -1])
    async def test_invalid_limit(self, mock_repository, limit: int) -> None:
        with pytest.raises(ValidationError):
            await PopularityService(mock_repository).top_popular(limit)

        mock_repository.list_all_bookmarks.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure(self, mock_repository) -> None:
        mock_repository.list_all_bookmarks.side_effect = QueryError("database is locked")

        with pytest.raises(UpstreamUnavailableError):
            await PopularityService(mock_repository).top_popular()

    @pytest.mark.asyncio
    async def test_first_seen_title_from_store(self, test_repository) -> None:
        """Against SQLite, the earliest bookmark of a video supplies its title."""
        await test_repository.create_bookmark("u1", "dQw4w9WgXcQ", "Original Name")
        await test_repository.create_bookmark("u2", "dQw4w9WgXcQ", "Renamed")
        await test_repository.create_bookmark("u2", "aaaaaaaaaaa", "Other")

        popular = await PopularityService(test_repository).top_popular(5)

        assert popular[0] == PopularVideo("dQw4w9WgXcQ", "Original Name", 2)
        assert popular[1] == PopularVideo("aaaaaaaaaaa", "Other", 1)
