"""Shared retry loop for the upstream HTTP clients.

Retries 429, 5xx, timeouts and connection errors with fixed back-off.
Anything else that is not a success surfaces as UpstreamError.
"""

import asyncio
from typing import Any

import httpx
from loguru import logger

from src.clients.rate_limiter import RateLimiter

MAX_RETRIES = 2
RETRY_DELAYS = [1.0, 3.0]


class UpstreamError(Exception):
    """An external provider failed or returned an unusable response."""

    def __init__(self, service: str, message: str, status_code: int | None = None) -> None:
        super().__init__(f"{service}: {message}")
        self.service = service
        self.status_code = status_code


async def request_with_retry(
    client: httpx.AsyncClient,
    rate_limiter: RateLimiter,
    service: str,
    method: str,
    url: str,
    *,
    allow_status: tuple[int, ...] = (),
    **kwargs: Any,
) -> httpx.Response:
    """Send a rate-limited request. Statuses in ``allow_status`` are returned as-is."""
    tag = service.upper()
    last_exc: Exception | None = None

    for attempt in range(MAX_RETRIES + 1):
        await rate_limiter.acquire()
        try:
            resp = await client.request(method, url, **kwargs)
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            last_exc = e
            if attempt < MAX_RETRIES:
                delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                logger.debug(f"[{tag}] {type(e).__name__}, retry {attempt + 1} in {delay}s: {url}")
                await asyncio.sleep(delay)
                continue
            logger.warning(f"[{tag}] Failed after {MAX_RETRIES + 1} attempts: {e}")
            raise UpstreamError(service, f"request failed: {e}") from e
        except httpx.RequestError as e:
            raise UpstreamError(service, f"request failed: {e}") from e

        if resp.status_code in allow_status or resp.status_code < 400:
            return resp

        if resp.status_code == 429 or resp.status_code >= 500:
            if attempt < MAX_RETRIES:
                delay = RETRY_DELAYS[min(attempt, len(RETRY_DELAYS) - 1)]
                logger.debug(f"[{tag}] HTTP {resp.status_code}, retry {attempt + 1} in {delay}s: {url}")
                await asyncio.sleep(delay)
                continue

        logger.warning(f"[{tag}] HTTP {resp.status_code} for {url}")
        raise UpstreamError(service, f"HTTP {resp.status_code}", status_code=resp.status_code)

    raise UpstreamError(service, "request failed after retries") from last_exc
