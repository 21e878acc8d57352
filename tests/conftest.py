"""Shared pytest fixtures for all tests."""

from pathlib import Path
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
import respx

from kidtube.common.config import Config, HTTPConfig, LoggingConfig, OEmbedConfig
from kidtube.core.db import BookmarkRepository


@pytest.fixture
def sample_config(tmp_path: Path) -> Config:
    """Provide a sample configuration for tests."""
    return Config(
        config_dir=tmp_path,
        database_path="test_kidtube.db",
        enable_wal=False,  # Disable WAL mode in tests to avoid lock issues
        logging=LoggingConfig(
            level="WARNING",
            format="text",
        ),
    )


@pytest.fixture
def http_config() -> HTTPConfig:
    """Provide a sample HTTP configuration for tests."""
    return HTTPConfig(
        timeout=10,
        max_redirects=3,
        verify_ssl=True,
    )


@pytest.fixture
def oembed_config() -> OEmbedConfig:
    """Provide an oEmbed configuration pointing at the real endpoint (mocked by respx)."""
    return OEmbedConfig(timeout=2)


@pytest_asyncio.fixture
async def async_httpx_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Provide an async httpx client for tests."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture
def mock_http():
    """Provide a respx mock for httpx requests."""
    with respx.mock:
        yield respx


@pytest_asyncio.fixture
async def test_repository(sample_config: Config) -> AsyncGenerator[BookmarkRepository, None]:
    """Provide a test database repository with migrations applied."""
    repo = await BookmarkRepository.from_config(sample_config)
    yield repo
    await repo.close()
