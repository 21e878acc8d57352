"""Shared pytest fixtures for API tests."""

import time
from contextlib import contextmanager
from typing import AsyncGenerator, Callable, Generator

import httpx
import pytest
import pytest_asyncio
import respx
from fastapi.testclient import TestClient
from jose import jwt

import kidtube
from kidtube.common.config import Config
from kidtube.core.db import BookmarkRepository
from kidtube.web.dependencies import get_repository
from kidtube.web.main import create_app
from kidtube.web.settings import APISettings

TEST_JWT_SECRET = "test-secret-key-for-testing-only-do-not-use-in-production"


@pytest.fixture
def api_settings() -> APISettings:
    """Provide multi-tenant test API settings with a shared-secret verifier."""
    return APISettings(
        host="127.0.0.1",
        port=8000,
        debug=True,
        allowed_origins=["*"],
        log_requests=False,  # Reduce noise in tests
        multi_tenant=True,
        jwt_secret=TEST_JWT_SECRET,
    )


@pytest.fixture
def single_tenant_settings() -> APISettings:
    """Provide test API settings for one shared, unauthenticated collection."""
    return APISettings(
        debug=True,
        allowed_origins=["*"],
        log_requests=False,
        multi_tenant=False,
    )


@pytest.fixture
def make_token() -> Callable[[str], str]:
    """Mint bearer tokens for an owner."""

    def _make(owner_id: str = "user_1") -> str:
        now = int(time.time())
        return jwt.encode(
            {"sub": owner_id, "iat": now, "exp": now + 300},
            TEST_JWT_SECRET,
            algorithm="HS256",
        )

    return _make


@pytest.fixture
def auth_headers(make_token) -> Callable[[str], dict]:
    """Build Authorization headers for an owner."""

    def _headers(owner_id: str = "user_1") -> dict:
        return {"Authorization": f"Bearer {make_token(owner_id)}"}

    return _headers


@pytest.fixture
def stale_headers() -> dict:
    """Authorization headers carrying a correctly signed but expired token."""
    token = jwt.encode({"sub": "user_1", "exp": 1}, TEST_JWT_SECRET, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def oembed_mock() -> Generator[respx.Route, None, None]:
    """Mock the YouTube oEmbed endpoint with a fixed title."""
    with respx.mock(assert_all_called=False) as mock:
        route = mock.get(host="www.youtube.com", path="/oembed").mock(
            return_value=httpx.Response(200, json={"title": "Fetched From YouTube"})
        )
        yield route


@contextmanager
def _build_client(
    settings: APISettings,
    config: Config,
    repository: BookmarkRepository,
    raise_server_exceptions: bool = True,
) -> Generator[TestClient, None, None]:
    # Override the global config before creating the app
    kidtube._config = config
    kidtube._repository = repository

    app = create_app(settings)

    async def override_get_repository() -> AsyncGenerator[BookmarkRepository, None]:
        yield repository

    app.dependency_overrides[get_repository] = override_get_repository

    with TestClient(app, raise_server_exceptions=raise_server_exceptions) as client:
        yield client

    app.dependency_overrides.clear()
    kidtube._config = None
    kidtube._repository = None


@pytest_asyncio.fixture
async def test_app(
    test_repository: BookmarkRepository,
    api_settings: APISettings,
    sample_config: Config,
    oembed_mock: respx.Route,
) -> AsyncGenerator[TestClient, None]:
    """
    Provide a multi-tenant FastAPI TestClient with a test database.

    This fixture:
    1. Creates a fresh test database
    2. Overrides the repository dependency to use the test database
    3. Mocks the oEmbed title lookup
    """
    with _build_client(api_settings, sample_config, test_repository) as client:
        yield client


@pytest_asyncio.fixture
async def single_tenant_app(
    test_repository: BookmarkRepository,
    single_tenant_settings: APISettings,
    sample_config: Config,
    oembed_mock: respx.Route,
) -> AsyncGenerator[TestClient, None]:
    """Provide a single-tenant FastAPI TestClient with a test database."""
    with _build_client(single_tenant_settings, sample_config, test_repository) as client:
        yield client
