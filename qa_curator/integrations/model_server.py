"""
Local model server probe.

Health check and model listing against an Ollama-compatible server. Both
hit the model-listing path derived from the generate URL
(``.../api/generate`` -> ``.../api/tags``). Neither raises: an unreachable
server is unhealthy and lists no models.
"""

from __future__ import annotations

import httpx
from loguru import logger

GENERATE_PATH = "/api/generate"
TAGS_PATH = "/api/tags"


def derive_tags_url(generate_url: str) -> str:
    """Model-listing URL for a generate endpoint (or a bare server root)."""
    url = generate_url.rstrip("/")
    if url.endswith(GENERATE_PATH):
        return url[: -len(GENERATE_PATH)] + TAGS_PATH
    if url.endswith(TAGS_PATH):
        return url
    return url + TAGS_PATH


class LocalModelServer:
    """HTTP client for local server health and model discovery."""

    def __init__(self, generate_url: str, timeout_seconds: float = 5.0):
        self.generate_url = generate_url
        self.tags_url = derive_tags_url(generate_url)
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def health_check(self) -> bool:
        """
        Check if the local server is reachable.

        Returns:
            True on HTTP 200 from the model-listing path, False otherwise
        """
        try:
            response = await self.client.get(self.tags_url)
            return response.status_code == 200
        except httpx.HTTPError as e:
            logger.warning(f"Local model server health check failed ({self.tags_url}): {e}")
            return False

    async def list_models(self) -> list[str]:
        """
        List model names installed on the local server.

        Returns:
            Model names in server order; empty on any failure
        """
        try:
            response = await self.client.get(self.tags_url)
            if response.status_code != 200:
                return []
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Could not list local models ({self.tags_url}): {e}")
            return []

        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, list):
            return []
        return [m["name"] for m in models if isinstance(m, dict) and m.get("name")]
