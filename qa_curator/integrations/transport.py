"""
Resilient HTTP transport for generation requests.

Retry policy:
- 2xx: return immediately
- 4xx other than 429: request defect (bad key, malformed body), fail at once
- 429, 5xx, network errors: back off 2^attempt seconds (1s, 2s, 4s) and retry
- attempts exhausted: fail with a terminal TransportError
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from loguru import logger

from qa_curator.core.errors import TransportError

DEFAULT_MAX_ATTEMPTS = 3
RATE_LIMITED = 429


def is_retryable_status(status_code: int) -> bool:
    """Client errors are terminal, except rate limiting."""
    return not (400 <= status_code < 500 and status_code != RATE_LIMITED)


class ResilientTransport:
    """Async JSON POST client with bounded exponential backoff."""

    def __init__(
        self,
        timeout_seconds: float = 120.0,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize transport.

        Args:
            timeout_seconds: Per-request timeout
            max_attempts: Default attempt budget per call
            sleep: Backoff wait (injectable for tests)
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self._sleep = sleep
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self.client.aclose()

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        max_attempts: int | None = None,
    ) -> httpx.Response:
        """
        POST a JSON payload with retry logic.

        Args:
            url: Target URL
            payload: JSON body
            headers: Extra request headers
            max_attempts: Override of the attempt budget

        Returns:
            The first successful response

        Raises:
            TransportError: Non-retryable client error, or retries exhausted
        """
        attempts = max_attempts or self.max_attempts
        last_error = "no attempt made"
        last_status: int | None = None

        for attempt in range(attempts):
            try:
                response = await self.client.post(url, json=payload, headers=headers)
            except httpx.HTTPError as e:
                last_error = f"{type(e).__name__}: {e}"
                last_status = None
            else:
                if response.is_success:
                    return response

                last_status = response.status_code
                if not is_retryable_status(last_status):
                    if last_status in (401, 403):
                        logger.error(f"Authentication/permission error {last_status}. Check the API key.")
                    raise TransportError(
                        f"API error {last_status}: {response.text}",
                        status_code=last_status,
                        retryable=False,
                        attempts=attempt + 1,
                    )
                last_error = f"HTTP {last_status}"

            if attempt < attempts - 1:
                wait_time = 2**attempt
                logger.warning(
                    f"Generation request failed ({last_error}) on attempt "
                    f"{attempt + 1}/{attempts}. Retrying in {wait_time}s..."
                )
                await self._sleep(wait_time)

        logger.error(f"Generation request failed after {attempts} attempts: {last_error}")
        raise TransportError(
            f"API request failed after {attempts} attempts: {last_error}",
            status_code=last_status,
            retryable=True,
            attempts=attempts,
        )
