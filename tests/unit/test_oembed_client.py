"""Unit tests for the oEmbed title client."""

import httpx
import pytest
import respx

import kidtube
from kidtube.api.oembed_client import OEmbedClient
from kidtube.common.config import OEmbedConfig, RetryConfig
from kidtube.web.dependencies import get_title_fetcher


def _oembed_route():
    return respx.get(host="www.youtube.com", path="/oembed")


class TestOEmbedClient:
    """Test suite for OEmbedClient.fetch_title."""

    @pytest.mark.asyncio
    async def test_returns_title(self, oembed_config: OEmbedConfig) -> None:
        """A well-formed response yields its title."""
        with respx.mock:
            route = _oembed_route().mock(
                return_value=httpx.Response(200, json={"title": "Baby Shark Dance"})
            )

            async with OEmbedClient(oembed_config) as client:
                title = await client.fetch_title("XqZsoesa55w")

        assert title == "Baby Shark Dance"
        assert route.call_count == 1
        request = route.calls.last.request
        assert request.url.params["url"] == "https://www.youtube.com/watch?v=XqZsoesa55w"
        assert request.url.params["format"] == "json"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [401, 404, 500, 503])
    async def test_error_status_falls_back(self, oembed_config: OEmbedConfig, status_code: int) -> None:
        """Non-2xx responses yield the fallback title without retrying."""
        with respx.mock:
            route = _oembed_route().mock(return_value=httpx.Response(status_code))

            async with OEmbedClient(oembed_config) as client:
                title = await client.fetch_title("dQw4w9WgXcQ")

        assert title == "Untitled Video"
        assert route.call_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            httpx.ConnectError("Connection refused"),
            httpx.ReadTimeout("Timed out"),
        ],
    )
    async def test_network_error_falls_back(self, oembed_config: OEmbedConfig, error: Exception) -> None:
        """Network errors and timeouts yield the fallback title after one attempt."""
        with respx.mock:
            route = _oembed_route().mock(side_effect=error)

            async with OEmbedClient(oembed_config) as client:
                title = await client.fetch_title("dQw4w9WgXcQ")

        assert title == "Untitled Video"
        assert route.call_count == 1

    @pytest.mark.asyncio
    async def test_non_json_body_falls_back(self, oembed_config: OEmbedConfig) -> None:
        """An HTML body yields the fallback title."""
        with respx.mock:
            _oembed_route().mock(return_value=httpx.Response(200, text="<html>nope</html>"))

            async with OEmbedClient(oembed_config) as client:
                title = await client.fetch_title("dQw4w9WgXcQ")

        assert title == "Untitled Video"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"title": ""},
            {"title": None},
            {"title": 42},
            ["title"],
            "title",
        ],
    )
    async def test_missing_title_falls_back(self, oembed_config: OEmbedConfig, payload) -> None:
        """Responses without a usable title yield the fallback title."""
        with respx.mock:
            _oembed_route().mock(return_value=httpx.Response(200, json=payload))

            async with OEmbedClient(oembed_config) as client:
                title = await client.fetch_title("dQw4w9WgXcQ")

        assert title == "Untitled Video"

    @pytest.mark.asyncio
    async def test_custom_fallback_title(self) -> None:
        """The fallback title is configurable."""
        config = OEmbedConfig(fallback_title="Mystery Video")
        with respx.mock:
            _oembed_route().mock(return_value=httpx.Response(404))

            async with OEmbedClient.from_config(config) as client:
                title = await client.fetch_title("dQw4w9WgXcQ")

        assert title == "Mystery Video"
        assert client.fallback_title == "Mystery Video"

    def test_single_attempt_configured(self) -> None:
        """Title lookups are not retried unless configured."""
        client = OEmbedClient()
        assert client.config.retry.max_attempts == 1
        assert client.config.timeout == 5

    @pytest.mark.asyncio
    async def test_configured_retry_recovers(self) -> None:
        """With oembed.retry raised, a transient 503 is retried before succeeding."""
        config = OEmbedConfig(
            retry=RetryConfig(max_attempts=3, backoff_multiplier=0.1, min_wait=0.1, max_wait=1.0)
        )
        with respx.mock:
            route = _oembed_route().mock(
                side_effect=[
                    httpx.Response(503),
                    httpx.Response(200, json={"title": "Second Try"}),
                ]
            )

            async with OEmbedClient(config) as client:
                title = await client.fetch_title("dQw4w9WgXcQ")

        assert title == "Second Try"
        assert route.call_count == 2

    @pytest.mark.asyncio
    async def test_configured_retry_exhausted_falls_back(self) -> None:
        """A lookup that keeps failing still ends in the fallback title."""
        config = OEmbedConfig(
            retry=RetryConfig(max_attempts=2, backoff_multiplier=0.1, min_wait=0.1, max_wait=1.0)
        )
        with respx.mock:
            route = _oembed_route().mock(return_value=httpx.Response(503))

            async with OEmbedClient(config) as client:
                title = await client.fetch_title("dQw4w9WgXcQ")

        assert title == "Untitled Video"
        assert route.call_count == 2


class TestLazyConnection:
    """The client only opens an HTTP connection pool for an actual lookup."""

    def test_dependency_returns_unopened_client(self, sample_config, monkeypatch) -> None:
        monkeypatch.setattr(kidtube, "_config", sample_config)

        fetcher = get_title_fetcher()

        assert isinstance(fetcher, OEmbedClient)
        assert fetcher._client is None

    @pytest.mark.asyncio
    async def test_lookup_outside_context_opens_and_closes(self, oembed_config: OEmbedConfig) -> None:
        client = OEmbedClient(oembed_config)
        with respx.mock:
            _oembed_route().mock(return_value=httpx.Response(200, json={"title": "Lazy Title"}))

            title = await client.fetch_title("dQw4w9WgXcQ")

        assert title == "Lazy Title"
        assert client._client is None
