"""Stability AI image-to-image client (alternative restyle provider)."""

import httpx

from src.clients.http import UpstreamError, request_with_retry
from src.clients.rate_limiter import RateLimiter

BASE_URL = "https://api.stability.ai/v1"
ENGINE = "stable-diffusion-xl-1024-v1-0"

CYBERPUNK_PROMPT = (
    "cyberpunk futuristic neon portrait, highly detailed digital art, neon colors, "
    "holographic, chrome, dystopian, 8k"
)


class StabilityClient:
    """Restyles an existing image. Returns a base64 PNG data URL."""

    def __init__(self, api_key: str, max_rps: float = 2.0) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            base_url=BASE_URL,
            timeout=60.0,
            headers={"Accept": "application/json", "Authorization": f"Bearer {api_key}"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def image_to_image(
        self,
        image: bytes,
        prompt: str = CYBERPUNK_PROMPT,
        *,
        image_strength: float = 0.35,
        cfg_scale: int = 7,
        steps: int = 30,
    ) -> str:
        resp = await request_with_retry(
            self._client, self._rate_limiter, "stability", "POST",
            f"/generation/{ENGINE}/image-to-image",
            files={"init_image": ("image.png", image, "image/png")},
            data={
                "init_image_mode": "IMAGE_STRENGTH",
                "image_strength": str(image_strength),
                "text_prompts[0][text]": prompt,
                "text_prompts[0][weight]": "1",
                "cfg_scale": str(cfg_scale),
                "samples": "1",
                "steps": str(steps),
            },
        )
        artifacts = resp.json().get("artifacts") or []
        if not artifacts or not artifacts[0].get("base64"):
            raise UpstreamError("stability", "response contained no artifacts")
        return f"data:image/png;base64,{artifacts[0]['base64']}"

    async def fetch_image(self, url: str) -> bytes:
        """Download the source picture (absolute URL, no auth headers)."""
        async with httpx.AsyncClient(timeout=20.0, follow_redirects=True) as http:
            resp = await request_with_retry(http, self._rate_limiter, "stability", "GET", url)
        return resp.content
