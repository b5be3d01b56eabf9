"""Tests for Together, Stability and Pinata clients."""

import base64
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.clients.http import UpstreamError
from src.clients.pinata.client import PinataClient
from src.clients.pinata.models import build_profile_metadata
from src.clients.stability.client import StabilityClient
from src.clients.together.client import TogetherClient


def _mock_http(client, payload: dict, status_code: int = 200) -> None:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    client._client = AsyncMock()
    client._client.request = AsyncMock(return_value=resp)


class TestTogether:
    @pytest.mark.asyncio
    async def test_generate_returns_url(self) -> None:
        client = TogetherClient("key", max_rps=100.0)
        _mock_http(client, {"data": [{"url": "https://cdn.together/x.png"}]})

        url = await client.generate_image(seed=42)

        assert url == "https://cdn.together/x.png"
        body = client._client.request.call_args.kwargs["json"]
        assert body["seed"] == 42
        assert body["width"] == body["height"] == 1024
        assert body["model"] == "stabilityai/stable-diffusion-xl-base-1.0"

    @pytest.mark.asyncio
    async def test_empty_response(self) -> None:
        client = TogetherClient("key", max_rps=100.0)
        _mock_http(client, {"data": []})
        with pytest.raises(UpstreamError):
            await client.generate_image()


class TestStability:
    @pytest.mark.asyncio
    async def test_image_to_image_data_url(self) -> None:
        client = StabilityClient("key", max_rps=100.0)
        _mock_http(client, {"artifacts": [{"base64": "QUJD"}]})

        result = await client.image_to_image(b"png-bytes")

        assert result == "data:image/png;base64,QUJD"
        kwargs = client._client.request.call_args.kwargs
        assert kwargs["data"]["image_strength"] == "0.35"
        assert kwargs["files"]["init_image"][1] == b"png-bytes"

    @pytest.mark.asyncio
    async def test_no_artifacts(self) -> None:
        client = StabilityClient("key", max_rps=100.0)
        _mock_http(client, {"artifacts": []})
        with pytest.raises(UpstreamError):
            await client.image_to_image(b"x")


class TestPinata:
    @pytest.mark.asyncio
    async def test_pin_file(self) -> None:
        client = PinataClient("key", "secret", max_rps=100.0)
        _mock_http(client, {"IpfsHash": "QmImage"})
        assert await client.pin_file(b"img") == "ipfs://QmImage"
        method, path = client._client.request.call_args.args
        assert (method, path) == ("POST", "/pinFileToIPFS")

    @pytest.mark.asyncio
    async def test_pin_json(self) -> None:
        client = PinataClient("key", "secret", max_rps=100.0)
        _mock_http(client, {"IpfsHash": "QmMeta"})
        assert await client.pin_json({"name": "x"}) == "ipfs://QmMeta"

    @pytest.mark.asyncio
    async def test_missing_hash(self) -> None:
        client = PinataClient("key", "secret", max_rps=100.0)
        _mock_http(client, {})
        with pytest.raises(UpstreamError):
            await client.pin_json({})

    @pytest.mark.asyncio
    async def test_fetch_bytes_data_url(self) -> None:
        client = PinataClient("key", "secret", max_rps=100.0)
        encoded = base64.b64encode(b"raw-png").decode()
        assert await client.fetch_bytes(f"data:image/png;base64,{encoded}") == b"raw-png"


def test_profile_metadata():
    meta = build_profile_metadata(
        fid=42, username="bob", display_name="Bob", image_uri="ipfs://QmImg"
    ).model_dump()
    assert meta["name"] == "CyberProfile #42"
    assert meta["description"] == "Cyberpunk transformation of @bob's Farcaster profile"
    assert meta["image"] == "ipfs://QmImg"
    traits = {a["trait_type"]: a["value"] for a in meta["attributes"]}
    assert traits == {"FID": 42, "Username": "bob", "Display Name": "Bob", "Style": "Cyberpunk"}
