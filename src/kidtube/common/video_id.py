"""YouTube video ID extraction from raw IDs and watch/short/embed URLs."""

import re
from typing import Optional, Pattern, Tuple

# Tried in order; the first pattern that matches wins.
VIDEO_ID_PATTERNS: Tuple[Pattern[str], ...] = (
    re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&\n?#]+)"),
    re.compile(r"^([a-zA-Z0-9_-]{11})\Z"),
)

_STRICT_VIDEO_ID = re.compile(r"^[A-Za-z0-9_-]{11}\Z")


def extract_video_id(raw: str) -> Optional[str]:
    """
    Resolve user input to a canonical YouTube video ID.

    Supported formats:
    - dQw4w9WgXcQ (bare 11-character ID, returned unchanged)
    - https://www.youtube.com/watch?v=dQw4w9WgXcQ
    - https://youtu.be/dQw4w9WgXcQ
    - https://www.youtube.com/embed/dQw4w9WgXcQ

    The value captured from a URL is returned as-is; it is not checked
    against the 11-character alphabet.

    Args:
        raw: Raw ID or URL as typed by the user

    Returns:
        The video ID, or None if the input matches no supported shape

    Example:
        >>> extract_video_id("https://youtu.be/dQw4w9WgXcQ?t=42")
        'dQw4w9WgXcQ'
        >>> extract_video_id("https://example.com/video") is None
        True
    """
    if not raw:
        return None

    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(raw)
        if match:
            return match.group(1)
    return None


def is_valid_video_id(value: Optional[str]) -> bool:
    """Check whether value has the exact shape of a YouTube video ID."""
    return bool(value) and _STRICT_VIDEO_ID.match(value) is not None


def build_watch_url(video_id: str) -> str:
    """Build the canonical watch URL for a video ID."""
    return f"https://www.youtube.com/watch?v={video_id}"
