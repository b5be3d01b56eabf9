"""Pinata IPFS pinning client."""

import base64
from typing import Any

import httpx
from loguru import logger

from src.clients.http import UpstreamError, request_with_retry
from src.clients.rate_limiter import RateLimiter

BASE_URL = "https://api.pinata.cloud/pinning"


class PinataClient:
    """Pins files and JSON documents. Returns ``ipfs://<hash>`` URIs."""

    def __init__(self, api_key: str, secret: str, max_rps: float = 3.0) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            base_url=BASE_URL,
            timeout=30.0,
            headers={"pinata_api_key": api_key, "pinata_secret_api_key": secret},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_bytes(self, url: str) -> bytes:
        """Load image bytes from an http(s) URL or a base64 data URL."""
        if url.startswith("data:"):
            _, _, payload = url.partition(",")
            return base64.b64decode(payload)
        async with httpx.AsyncClient(timeout=20.0, follow_redirects=True) as http:
            resp = await request_with_retry(http, self._rate_limiter, "pinata", "GET", url)
        return resp.content

    async def pin_file(self, content: bytes, filename: str = "cyberpunk-pfp.png") -> str:
        resp = await request_with_retry(
            self._client, self._rate_limiter, "pinata", "POST", "/pinFileToIPFS",
            files={"file": (filename, content)},
        )
        uri = _ipfs_uri(resp.json())
        logger.info(f"[PINATA] Pinned file {filename} -> {uri}")
        return uri

    async def pin_json(self, metadata: dict[str, Any]) -> str:
        resp = await request_with_retry(
            self._client, self._rate_limiter, "pinata", "POST", "/pinJSONToIPFS",
            json=metadata,
        )
        uri = _ipfs_uri(resp.json())
        logger.info(f"[PINATA] Pinned metadata -> {uri}")
        return uri


def _ipfs_uri(data: dict[str, Any]) -> str:
    ipfs_hash = data.get("IpfsHash")
    if not ipfs_hash:
        raise UpstreamError("pinata", "response missing IpfsHash")
    return f"ipfs://{ipfs_hash}"
