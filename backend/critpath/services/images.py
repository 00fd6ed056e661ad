"""
Image lookup against the Pexels search API.

Only the first result is used; its medium-size URL is what gets attached to
a task.
"""

import httpx

from critpath.config import get_settings
from critpath.exceptions import ImageLookupError
from critpath.logging_config import get_logger

logger = get_logger(__name__)


class PexelsClient:
    """Thin async client for ``GET /search``."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.pexels.com/v1",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def search_first_image(self, query: str) -> str | None:
        """
        Return the medium-size URL of the first photo matching ``query``.

        Raises:
            ImageLookupError: No API key is configured, or the request failed.
        """
        if not self.api_key:
            raise ImageLookupError("Image lookup is not configured")

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            try:
                response = await client.get(
                    "/search",
                    params={"query": query, "per_page": 1},
                    headers={"Authorization": self.api_key},
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                logger.warning(f"Image lookup for '{query}' failed: {exc}")
                raise ImageLookupError("Error fetching image") from exc

        photos = response.json().get("photos") or []
        if not photos:
            logger.debug(f"No image found for '{query}'")
            return None
        return (photos[0].get("src") or {}).get("medium")


def get_image_client() -> PexelsClient:
    """Dependency for the configured image client."""
    settings = get_settings()
    return PexelsClient(
        api_key=settings.pexels_api_key,
        base_url=settings.pexels_base_url,
        timeout=settings.image_lookup_timeout,
    )
