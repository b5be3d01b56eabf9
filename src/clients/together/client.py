"""Together.ai image generation client (SDXL)."""

import random

import httpx
from loguru import logger

from src.clients.http import UpstreamError, request_with_retry
from src.clients.rate_limiter import RateLimiter

BASE_URL = "https://api.together.xyz/v1"
DEFAULT_MODEL = "stabilityai/stable-diffusion-xl-base-1.0"

CYBERPUNK_PROMPT = (
    "cyberpunk futuristic neon portrait, highly detailed, digital art, concept art, "
    "trending on artstation, dramatic lighting, neon colors, holographic elements, "
    "augmented reality, chrome and glass, dystopian aesthetic, 8k, masterpiece"
)
NEGATIVE_PROMPT = (
    "ugly, blurry, low quality, distorted, deformed, duplicate, worst quality"
)


class TogetherClient:
    """Text-to-image via Together.ai. Returns hosted image URLs."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, max_rps: float = 2.0) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._model = model
        self._client = httpx.AsyncClient(
            base_url=BASE_URL,
            timeout=60.0,  # generation is slow
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def generate_image(
        self,
        prompt: str = CYBERPUNK_PROMPT,
        *,
        negative_prompt: str = NEGATIVE_PROMPT,
        width: int = 1024,
        height: int = 1024,
        steps: int = 30,
        seed: int | None = None,
    ) -> str:
        """Generate one image and return its URL."""
        if seed is None:
            seed = random.randint(0, 999_999)
        resp = await request_with_retry(
            self._client, self._rate_limiter, "together", "POST",
            "/images/generations",
            json={
                "model": self._model,
                "prompt": prompt,
                "negative_prompt": negative_prompt,
                "width": width,
                "height": height,
                "steps": steps,
                "n": 1,
                "seed": seed,
            },
        )
        items = resp.json().get("data") or []
        if not items or not items[0].get("url"):
            raise UpstreamError("together", "response contained no image")
        logger.debug(f"[TOGETHER] Generated image seed={seed}")
        return items[0]["url"]
