"""Async HTTP transport for the SendGrid v3 API.

Wraps httpx with the behavior every call needs: bearer authentication,
expected status checking, rate limiter consumption before each send, and a
retry budget for rate-limited (HTTP 429) responses.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Collection
from typing import Any

import httpx

from templatesync.core.exceptions import (
    RateLimitedError,
    TransportError,
    UnexpectedStatusError,
)
from templatesync.core.logging import get_logger
from templatesync.infrastructure.ratelimit import RateLimiter

logger = get_logger(__name__)


class SendGridTransport:
    """HTTP transport bound to one API key and base URL."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.sendgrid.com/v3",
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
        default_retry_after: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the transport.

        Args:
            api_key: SendGrid API key.
            base_url: API base URL without trailing slash.
            timeout: Per-request timeout in seconds.
            client: Optional preconfigured httpx client (owned by the caller).
            default_retry_after: Wait used when a 429 carries no reset hint.
            sleep: Async sleep, injectable for tests.
        """
        self.base_url = base_url.rstrip("/")
        self.default_retry_after = default_retry_after
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._sleep = sleep

    async def __aenter__(self) -> "SendGridTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self._client.aclose()

    def _retry_after(self, response: httpx.Response) -> float:
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return max(0.0, float(retry_after))
            except ValueError:
                pass

        # X-RateLimit-Reset is a unix timestamp
        reset = response.headers.get("X-RateLimit-Reset")
        if reset:
            try:
                return max(0.0, float(reset) - time.time())
            except ValueError:
                pass

        return self.default_retry_after

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        expected_statuses: Collection[int] = (200,),
        rate_limiter: RateLimiter | None = None,
        retries: int = 1,
    ) -> httpx.Response:
        """Send a request and check its status.

        Args:
            method: HTTP method.
            path: Path relative to the base URL (e.g., "/templates").
            json: Optional JSON body.
            expected_statuses: Status codes treated as success.
            rate_limiter: Limiter to acquire before every attempt.
            retries: Total attempts allowed when the API answers 429.

        Returns:
            The response, whose status is one of expected_statuses.

        Raises:
            RateLimitedError: If every attempt was rate limited.
            UnexpectedStatusError: If the API answered with another status.
            TransportError: If the request could not be sent.
        """
        url = f"{self.base_url}{path}"
        attempts = max(1, retries)
        attempt = 0

        while True:
            attempt += 1
            if rate_limiter is not None:
                await rate_limiter.acquire()

            try:
                response = await self._client.request(
                    method, url, json=json, headers=self._headers
                )
            except httpx.HTTPError as e:
                raise TransportError(f"{method} {path} failed: {e}") from e

            if response.status_code == 429:
                error = RateLimitedError(method, path, self._retry_after(response))
                if attempt == attempts:
                    raise error
                logger.warning(
                    "Rate limited by API, retrying",
                    method=method,
                    path=path,
                    attempt=attempt,
                    retry_after=error.retry_after,
                )
                await self._sleep(error.retry_after)
                continue

            if response.status_code not in expected_statuses:
                raise UnexpectedStatusError(method, path, response.status_code, response.text)

            logger.debug(
                "API call succeeded",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            return response
