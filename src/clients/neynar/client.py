"""Neynar API client: Farcaster users, sign-in, frame validation."""

from typing import Any

import httpx
from loguru import logger

from src.clients.http import UpstreamError, request_with_retry
from src.clients.neynar.models import FarcasterUser, LoginStatus
from src.clients.rate_limiter import RateLimiter

BASE_URL = "https://api.neynar.com/v2/farcaster"


class NeynarClient:
    """Async HTTP client for the Neynar v2 Farcaster API."""

    def __init__(self, api_key: str, base_url: str = BASE_URL, max_rps: float = 5.0) -> None:
        self._rate_limiter = RateLimiter(max_rps)
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=15.0,
            headers={"accept": "application/json", "api_key": api_key},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def get_user(self, fid: int) -> FarcasterUser | None:
        """Fetch a Farcaster user by fid. Returns None if Neynar has no such user."""
        resp = await request_with_retry(
            self._client, self._rate_limiter, "neynar", "GET",
            "/user/bulk", params={"fids": fid}, allow_status=(404,),
        )
        if resp.status_code == 404:
            return None
        users = resp.json().get("users") or []
        if not users:
            return None
        return _parse_user(users[0])

    async def validate_frame(self, message_bytes_in_hex: str) -> bool:
        """Validate a signed frame action. Any upstream failure counts as invalid."""
        try:
            resp = await request_with_retry(
                self._client, self._rate_limiter, "neynar", "POST",
                "/frame/validate", json={"message_bytes_in_hex": message_bytes_in_hex},
            )
        except UpstreamError as e:
            logger.warning(f"[NEYNAR] Frame validation failed: {e}")
            return False
        return bool(resp.json().get("valid", False))

    async def create_login(self) -> tuple[str, str]:
        """Start a sign-in request. Returns (signer_uuid, approval_url)."""
        resp = await request_with_retry(
            self._client, self._rate_limiter, "neynar", "POST", "/login", json={},
        )
        data = resp.json()
        signer_uuid = data.get("signer_uuid")
        if not signer_uuid:
            raise UpstreamError("neynar", "login response missing signer_uuid")
        return signer_uuid, data.get("url", "")

    async def get_login_status(self, signer_uuid: str) -> LoginStatus:
        resp = await request_with_retry(
            self._client, self._rate_limiter, "neynar", "GET",
            "/login", params={"signer_uuid": signer_uuid},
        )
        data = resp.json()
        return LoginStatus(
            state=data.get("state", "pending"),
            fid=data.get("fid"),
            custody_address=data.get("custody_address") or "",
        )


def _parse_user(data: dict[str, Any]) -> FarcasterUser:
    """Map raw Neynar user JSON to FarcasterUser."""
    verifications = data.get("verifications") or []
    return FarcasterUser(
        fid=int(data["fid"]),
        username=data.get("username") or "",
        display_name=data.get("display_name") or "",
        pfp_url=data.get("pfp_url") or "",
        is_pro=bool(data.get("power_badge", False)),
        custody_address=data.get("custody_address") or "",
        verifications=[v for v in verifications if isinstance(v, str)],
    )
