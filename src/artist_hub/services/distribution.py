"""Distribution platform client for takedown notifications."""

import logging
from collections.abc import AsyncGenerator
from datetime import datetime

from artist_hub.config import get_settings
from artist_hub.models.release import Release
from artist_hub.services.base import BaseAPIClient

logger = logging.getLogger(__name__)


class DistributionClient(BaseAPIClient):
    """Client for the distribution platform that delivers releases to stores.

    When no endpoint is configured, notifications are only logged so the
    takedown workflow can run without a platform integration.
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the distribution client.

        Args:
            base_url: Distribution API base URL. If not provided, uses settings.
            api_key: API key. If not provided, uses settings.
            timeout: Request timeout in seconds.
        """
        settings = get_settings()
        self._api_key = api_key if api_key is not None else settings.distribution_api_key
        base = base_url if base_url is not None else settings.distribution_api_url
        super().__init__(base_url=base, timeout=timeout)

    @property
    def enabled(self) -> bool:
        """Whether a real distribution endpoint is configured."""
        return bool(self.base_url)

    @property
    def default_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["X-API-Key"] = self._api_key
        return headers

    async def request_takedown(self, release: Release, requested_at: datetime) -> None:
        """Ask the platform to remove a release from distribution.

        Raises:
            APIError: If the platform rejects the request or is unreachable.
        """
        if not self.enabled:
            logger.info("Simulating platform takedown request for release %s", release.id)
            return

        await self.post(
            "/takedowns",
            json={
                "release_id": release.id,
                "title": release.title,
                "artist": release.artist,
                "requested_at": requested_at.isoformat(),
            },
        )
        logger.info("Platform takedown requested for release %s", release.id)

    async def cancel_takedown(self, release: Release) -> None:
        """Withdraw a pending takedown request.

        Raises:
            APIError: If the platform rejects the request or is unreachable.
        """
        if not self.enabled:
            logger.info("Simulating platform takedown cancellation for release %s", release.id)
            return

        await self.delete(f"/takedowns/{release.id}")
        logger.info("Platform takedown cancelled for release %s", release.id)


async def get_distribution_client() -> AsyncGenerator[DistributionClient]:
    """Dependency that provides a distribution client, closed after the request."""
    client = DistributionClient()
    try:
        yield client
    finally:
        await client.close()
