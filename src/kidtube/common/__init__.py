"""Common utilities and shared components for KidTube."""

from .config import (
    Config,
    HTTPConfig,
    LoggingConfig,
    OEmbedConfig,
    PopularConfig,
    RetryConfig,
)
from .http_client import AsyncHTTPClient
from .logging_config import setup_logging
from .video_id import build_watch_url, extract_video_id, is_valid_video_id

__all__ = [
    "Config",
    "HTTPConfig",
    "RetryConfig",
    "LoggingConfig",
    "OEmbedConfig",
    "PopularConfig",
    "setup_logging",
    "AsyncHTTPClient",
    "extract_video_id",
    "is_valid_video_id",
    "build_watch_url",
]
