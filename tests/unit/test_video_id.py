"""Unit tests for YouTube video ID extraction."""

import pytest

from kidtube.common.video_id import build_watch_url, extract_video_id, is_valid_video_id


class TestExtractVideoId:
    """Test suite for extract_video_id."""

    @pytest.mark.parametrize(
        "raw",
        ["dQw4w9WgXcQ", "abc_DEF-123", "___________", "-----------"],
    )
    def test_bare_id_returned_unchanged(self, raw: str) -> None:
        """Valid 11-character IDs are their own canonical form."""
        assert extract_video_id(raw) == raw

    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
            "http://www.youtube.com/watch?v=dQw4w9WgXcQ#comments",
            "https://youtu.be/dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ?si=share",
            "https://www.youtube.com/embed/dQw4w9WgXcQ",
            "youtube.com/embed/dQw4w9WgXcQ?autoplay=1",
        ],
    )
    def test_supported_url_shapes(self, url: str) -> None:
        """Watch, short and embed URLs yield the embedded ID."""
        assert extract_video_id(url) == "dQw4w9WgXcQ"

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "https://www.youtube.com/",
            "https://www.youtube.com/watch?list=PL123",
            "https://example.com/video",
            "not a video",
            "dQw4w9WgXc",  # 10 characters
            "dQw4w9WgXcQQ",  # 12 characters
            "dQw4w9WgX!Q",
            "dQw4w9WgXcQ\n",
        ],
    )
    def test_unrecognised_input_returns_none(self, raw: str) -> None:
        """Input with no supported shape resolves to nothing."""
        assert extract_video_id(raw) is None

    def test_url_captured_id_not_revalidated(self) -> None:
        """Whatever a URL carries in the ID position is returned as-is."""
        assert extract_video_id("https://youtu.be/short") == "short"
        assert extract_video_id("https://www.youtube.com/watch?v=a b") == "a b"

    def test_url_pattern_wins_over_bare_id(self) -> None:
        """URL patterns are tried before the bare-ID pattern."""
        assert extract_video_id("https://youtu.be/abcdefghijk") == "abcdefghijk"

    def test_never_raises_on_odd_strings(self) -> None:
        """Arbitrary strings never raise."""
        for raw in ("?v=", "youtu.be/", "://", "\x00" * 11, "é" * 11):
            extract_video_id(raw)


class TestIsValidVideoId:
    """Test suite for is_valid_video_id."""

    def test_valid(self) -> None:
        assert is_valid_video_id("dQw4w9WgXcQ")

    @pytest.mark.parametrize("value", [None, "", "short", "dQw4w9WgXcQ\n", "dQw4w9WgX Q"])
    def test_invalid(self, value) -> None:
        assert not is_valid_video_id(value)


def test_build_watch_url() -> None:
    """Watch URLs round-trip through the extractor."""
    url = build_watch_url("dQw4w9WgXcQ")
    assert url == "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
    assert extract_video_id(url) == "dQw4w9WgXcQ"
