"""Profile picture restyling with a bounded result cache."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cachetools import TTLCache
from loguru import logger

if TYPE_CHECKING:
    from src.clients.stability.client import StabilityClient
    from src.clients.together.client import TogetherClient


class ImageTransformer:
    """Turns a pfp URL into a cyberpunk image URL, cached per (fid, url).

    provider="together" generates from the prompt; "stability" restyles the
    downloaded source picture.
    """

    def __init__(
        self,
        *,
        provider: str = "together",
        together: TogetherClient | None = None,
        stability: StabilityClient | None = None,
        cache_size: int = 5000,
        cache_ttl_sec: int = 6 * 3600,
    ) -> None:
        if provider not in ("together", "stability"):
            raise ValueError(f"Unknown image provider: {provider}")
        self._provider = provider
        self._together = together
        self._stability = stability
        self._cache: TTLCache[str, str] = TTLCache(maxsize=cache_size, ttl=cache_ttl_sec)
        self._total = 0

    @property
    def provider(self) -> str:
        return self._provider

    @staticmethod
    def cache_key(fid: int, image_url: str) -> str:
        return f"{fid}-{image_url}"

    async def transform(self, fid: int, image_url: str) -> str:
        key = self.cache_key(fid, image_url)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug(f"[TRANSFORM] Cache hit for fid={fid}")
            return cached

        if self._provider == "stability":
            if self._stability is None:
                raise RuntimeError("Stability client not configured")
            source = await self._stability.fetch_image(image_url)
            result = await self._stability.image_to_image(source)
        else:
            if self._together is None:
                raise RuntimeError("Together client not configured")
            result = await self._together.generate_image()

        self._cache[key] = result
        self._total += 1
        logger.info(f"[TRANSFORM] fid={fid} transformed via {self._provider}")
        return result

    def stats(self) -> dict[str, int]:
        return {"cached": len(self._cache), "total_transformations": self._total}
