"""Tests for the distribution platform client."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from artist_hub.models.release import Release
from artist_hub.services.base import APIError, RateLimitError
from artist_hub.services.distribution import DistributionClient

PLATFORM_URL = "https://distribution.example.com/v1"
REQUESTED_AT = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def release() -> MagicMock:
    """Create a mock Release object."""
    mock_release = MagicMock(spec=Release)
    mock_release.id = "3f1c9a7e2b404c6f9d1e2a3b4c5d6e7f"
    mock_release.title = "Night Shift"
    mock_release.artist = "Ada"
    return mock_release


@pytest.fixture
def dist_client() -> DistributionClient:
    """Create a distribution client pointed at a test platform."""
    return DistributionClient(base_url=PLATFORM_URL, api_key="platform-key")


class TestDistributionClientInit:
    """Tests for distribution client initialization."""

    def test_init_from_settings(self) -> None:
        """Test configuration falls back to settings."""
        with patch("artist_hub.services.distribution.get_settings") as mock:
            mock.return_value.distribution_api_url = PLATFORM_URL
            mock.return_value.distribution_api_key = "settings-key"
            client = DistributionClient()

        assert client.base_url == PLATFORM_URL
        assert client.enabled is True
        assert client.default_headers["X-API-Key"] == "settings-key"

    def test_disabled_without_url(self) -> None:
        """Test the client is disabled when no endpoint is configured."""
        client = DistributionClient(base_url="", api_key="")
        assert client.enabled is False
        assert "X-API-Key" not in client.default_headers


class TestRequestTakedown:
    """Tests for takedown notifications."""

    async def test_posts_takedown(self, dist_client: DistributionClient, release) -> None:
        """Test the takedown request payload."""
        mock_response = httpx.Response(202, json={"status": "queued"})

        with patch.object(dist_client, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.request.return_value = mock_response
            mock_get_client.return_value = mock_client

            await dist_client.request_takedown(release, REQUESTED_AT)

            call_args = mock_client.request.call_args
            assert call_args.kwargs["method"] == "POST"
            assert call_args.kwargs["url"] == "takedowns"
            assert call_args.kwargs["json"] == {
                "release_id": release.id,
                "title": "Night Shift",
                "artist": "Ada",
                "requested_at": "2024-06-01T12:00:00+00:00",
            }
            assert call_args.kwargs["headers"]["X-API-Key"] == "platform-key"

    async def test_simulated_when_disabled(self, release) -> None:
        """Test no request is made without a configured endpoint."""
        client = DistributionClient(base_url="", api_key="")

        with patch.object(client, "_get_client") as mock_get_client:
            await client.request_takedown(release, REQUESTED_AT)
            await client.cancel_takedown(release)

        mock_get_client.assert_not_called()

    async def test_error_response(self, dist_client: DistributionClient, release) -> None:
        """Test a rejected request raises APIError."""
        mock_response = httpx.Response(500, text="Internal error")

        with patch.object(dist_client, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.request.return_value = mock_response
            mock_get_client.return_value = mock_client

            with pytest.raises(APIError) as exc_info:
                await dist_client.request_takedown(release, REQUESTED_AT)

            assert exc_info.value.status_code == 500

    async def test_rate_limited(self, dist_client: DistributionClient, release) -> None:
        """Test a 429 response raises RateLimitError."""
        mock_response = httpx.Response(429, headers={"Retry-After": "30"})

        with patch.object(dist_client, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.request.return_value = mock_response
            mock_get_client.return_value = mock_client

            with pytest.raises(RateLimitError) as exc_info:
                await dist_client.request_takedown(release, REQUESTED_AT)

            assert exc_info.value.retry_after == 30

    async def test_connection_error(self, dist_client: DistributionClient, release) -> None:
        """Test a transport failure raises APIError."""
        with patch.object(dist_client, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.request.side_effect = httpx.ConnectError("Connection refused")
            mock_get_client.return_value = mock_client

            with pytest.raises(APIError, match="Request failed"):
                await dist_client.request_takedown(release, REQUESTED_AT)


class TestCancelTakedown:
    """Tests for takedown cancellation notices."""

    async def test_deletes_takedown(self, dist_client: DistributionClient, release) -> None:
        """Test the cancellation targets the release's takedown."""
        mock_response = httpx.Response(204)

        with patch.object(dist_client, "_get_client") as mock_get_client:
            mock_client = AsyncMock()
            mock_client.request.return_value = mock_response
            mock_get_client.return_value = mock_client

            await dist_client.cancel_takedown(release)

            call_args = mock_client.request.call_args
            assert call_args.kwargs["method"] == "DELETE"
            assert call_args.kwargs["url"] == f"takedowns/{release.id}"


class TestContextManager:
    """Tests for client lifecycle."""

    async def test_close(self, dist_client: DistributionClient) -> None:
        """Test the HTTP client is closed on exit."""
        async with dist_client as client:
            assert client._client is not None
            assert not client._client.is_closed

        assert dist_client._client is None
