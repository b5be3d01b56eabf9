"""Tests for health and auth endpoints."""

from src.clients.neynar.models import FarcasterUser, LoginStatus


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["ledger_ok"] is True
    assert "timestamp" in data


def test_security_headers(client):
    resp = client.get("/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"


class TestSignIn:
    def test_challenge_creates_pending_session(self, client, runtime):
        resp = client.post("/api/auth/challenge")
        assert resp.status_code == 200
        data = resp.json()
        assert data["url"] == "https://warpcast.com/~/sign"
        assert len(data["channelToken"]) == 32
        session = runtime.sessions.get(data["channelToken"])
        assert session.signer_uuid == "signer-1"
        assert session.state == "pending"

    def test_status_unknown_channel(self, client):
        resp = client.get("/api/auth/status/nope")
        assert resp.status_code == 404
        assert resp.json()["error"] == "Session not found"

    def test_status_pending(self, client, runtime):
        token = client.post("/api/auth/challenge").json()["channelToken"]
        runtime.neynar.get_login_status.return_value = LoginStatus(state="pending")
        assert client.get(f"/api/auth/status/{token}").json() == {"state": "pending"}

    def test_status_completed_issues_token_once(self, client, runtime):
        channel = client.post("/api/auth/challenge").json()["channelToken"]
        runtime.neynar.get_login_status.return_value = LoginStatus(
            state="completed", fid=42, custody_address="0x42"
        )

        first = client.get(f"/api/auth/status/{channel}").json()
        second = client.get(f"/api/auth/status/{channel}").json()

        assert first["state"] == "completed"
        assert first["fid"] == 42
        assert second["token"] == first["token"]
        assert runtime.neynar.get_login_status.await_count == 1

        verify = client.get(
            "/api/auth/verify", headers={"Authorization": f"Bearer {first['token']}"}
        )
        assert verify.json() == {"valid": True, "fid": 42}

    def test_verify_requires_bearer(self, client):
        assert client.get("/api/auth/verify").status_code == 401

    def test_verify_rejects_garbage(self, client):
        resp = client.get("/api/auth/verify", headers={"Authorization": "Bearer not-a-jwt"})
        assert resp.status_code == 401

    def test_verify_rejects_admin_token(self, client, admin_headers):
        assert client.get("/api/auth/verify", headers=admin_headers).status_code == 403


class TestFarcasterAuth:
    def test_valid_frame_returns_profile(self, client):
        resp = client.post("/api/auth/farcaster", json={"fid": 5, "message": "0a0b", "signature": "s"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["fid"] == 5
        assert data["username"] == "user5"
        assert data["isPro"] is False

    def test_invalid_frame(self, client, runtime):
        runtime.neynar.validate_frame.return_value = False
        resp = client.post("/api/auth/farcaster", json={"fid": 5, "message": "bad"})
        assert resp.status_code == 401

    def test_unknown_user(self, client, runtime):
        runtime.neynar.get_user.side_effect = None
        runtime.neynar.get_user.return_value = None
        resp = client.post("/api/auth/farcaster", json={"fid": 5, "message": "0a"})
        assert resp.status_code == 404

    def test_pro_user(self, client, runtime):
        runtime.neynar.get_user.side_effect = None
        runtime.neynar.get_user.return_value = FarcasterUser(fid=9, is_pro=True)
        resp = client.post("/api/auth/farcaster", json={"fid": 9, "message": "0a"})
        assert resp.json()["isPro"] is True


class TestAdminLogin:
    def test_login(self, client):
        resp = client.post("/api/auth/admin/login", json={"username": "admin", "password": "s3cret"})
        assert resp.status_code == 200
        assert resp.json()["token"]

    def test_bad_password(self, client):
        resp = client.post("/api/auth/admin/login", json={"username": "admin", "password": "nope"})
        assert resp.status_code == 401

    def test_bcrypt_hashed_password(self, client, monkeypatch):
        from config.settings import settings
        from src.api.auth import hash_password

        monkeypatch.setattr(settings, "admin_password", hash_password("hashed-pass"))
        ok = client.post("/api/auth/admin/login", json={"username": "admin", "password": "hashed-pass"})
        bad = client.post("/api/auth/admin/login", json={"username": "admin", "password": "s3cret"})
        assert ok.status_code == 200
        assert bad.status_code == 401
