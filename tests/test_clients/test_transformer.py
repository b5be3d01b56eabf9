"""Tests for ImageTransformer provider selection and caching."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.clients.transformer import ImageTransformer


def _together(url: str = "https://cdn/x.png") -> MagicMock:
    together = MagicMock()
    together.generate_image = AsyncMock(return_value=url)
    return together


@pytest.mark.asyncio
async def test_cache_hit_skips_upstream():
    together = _together()
    transformer = ImageTransformer(together=together)

    first = await transformer.transform(1, "https://pfp/a.png")
    second = await transformer.transform(1, "https://pfp/a.png")

    assert first == second == "https://cdn/x.png"
    assert together.generate_image.await_count == 1
    assert transformer.stats() == {"cached": 1, "total_transformations": 1}


@pytest.mark.asyncio
async def test_cache_keyed_by_fid_and_url():
    together = _together()
    transformer = ImageTransformer(together=together)
    await transformer.transform(1, "https://pfp/a.png")
    await transformer.transform(2, "https://pfp/a.png")
    await transformer.transform(1, "https://pfp/b.png")
    assert together.generate_image.await_count == 3


@pytest.mark.asyncio
async def test_cache_is_bounded():
    transformer = ImageTransformer(together=_together(), cache_size=2)
    for fid in range(1, 6):
        await transformer.transform(fid, "https://pfp/a.png")
    assert transformer.stats()["cached"] == 2
    assert transformer.stats()["total_transformations"] == 5


@pytest.mark.asyncio
async def test_stability_provider_restyles_source():
    stability = MagicMock()
    stability.fetch_image = AsyncMock(return_value=b"src")
    stability.image_to_image = AsyncMock(return_value="data:image/png;base64,AA")
    transformer = ImageTransformer(provider="stability", stability=stability)

    result = await transformer.transform(9, "https://pfp/c.png")

    assert result == "data:image/png;base64,AA"
    stability.fetch_image.assert_awaited_once_with("https://pfp/c.png")
    stability.image_to_image.assert_awaited_once_with(b"src")


def test_unknown_provider():
    with pytest.raises(ValueError):
        ImageTransformer(provider="dalle")
