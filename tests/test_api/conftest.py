"""API fixtures: app built around a fresh ledger and mocked upstream clients."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from config.settings import settings
from src.api.app import create_app
from src.api.auth import create_admin_token, create_user_token
from src.api.limits import limiter
from src.api.registry import Registry
from src.api.sessions import AuthSessionStore
from src.clients.neynar.models import FarcasterUser

ORACLE_KEY = "oracle-key"


def make_user(fid: int, *, is_pro: bool = False) -> FarcasterUser:
    return FarcasterUser(
        fid=fid,
        username=f"user{fid}",
        display_name=f"User {fid}",
        pfp_url=f"https://img.example/{fid}.png",
        is_pro=is_pro,
        custody_address="0xcustody",
    )


@pytest.fixture(autouse=True)
def api_settings(monkeypatch):
    monkeypatch.setattr(settings, "jwt_secret", "test-jwt-secret")
    monkeypatch.setattr(settings, "admin_user", "admin")
    monkeypatch.setattr(settings, "admin_password", "s3cret")
    monkeypatch.setattr(settings, "oracle_api_key", ORACLE_KEY)
    monkeypatch.setattr(settings, "static_dir", "does-not-exist")
    monkeypatch.setattr(limiter, "enabled", False)


@pytest.fixture
def runtime(ledger) -> Registry:
    reg = Registry()
    reg.ledger = ledger
    reg.sessions = AuthSessionStore(maxsize=100, ttl_sec=60)

    reg.neynar = MagicMock()
    reg.neynar.get_user = AsyncMock(side_effect=lambda fid: make_user(fid))
    reg.neynar.validate_frame = AsyncMock(return_value=True)
    reg.neynar.create_login = AsyncMock(return_value=("signer-1", "https://warpcast.com/~/sign"))
    reg.neynar.get_login_status = AsyncMock()

    reg.pinata = MagicMock()
    reg.pinata.fetch_bytes = AsyncMock(return_value=b"png")
    reg.pinata.pin_file = AsyncMock(return_value="ipfs://QmImage")
    reg.pinata.pin_json = AsyncMock(return_value="ipfs://QmMeta")

    reg.transformer = MagicMock()
    reg.transformer.transform = AsyncMock(return_value="https://cdn/cyber.png")
    reg.transformer.stats = MagicMock(return_value={"cached": 1, "total_transformations": 3})
    return reg


@pytest.fixture
def client(runtime) -> TestClient:
    return TestClient(create_app(runtime))


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_admin_token('admin')}"}


@pytest.fixture
def user_headers():
    """Factory: bearer headers for a signed-in fid."""

    def _headers(fid: int) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_user_token(fid)}"}

    return _headers
