"""JWT authentication: Farcaster users (by fid) and the admin owner."""

from __future__ import annotations

import hmac
import secrets
from datetime import UTC, datetime, timedelta
from hashlib import sha256
from typing import Any

import bcrypt
from fastapi import HTTPException, status
from jose import JWTError, jwt

from config.settings import settings

ALGORITHM = "HS256"
ROLE_USER = "user"
ROLE_ADMIN = "admin"
ADMIN_TOKEN_EXPIRE_MINUTES = 720  # 12 hours


def _get_secret() -> str:
    """Return JWT secret, deriving one from the admin password if not configured."""
    if settings.jwt_secret:
        return settings.jwt_secret
    return sha256(f"jwt-{settings.admin_password}".encode()).hexdigest()


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (12 rounds)."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=12)).decode()


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plain password against a bcrypt hash."""
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def create_access_token(
    subject: str, role: str, *, expires_minutes: int | None = None
) -> tuple[str, dict[str, Any]]:
    """Create a signed JWT.  Returns (encoded_token, payload)."""
    if expires_minutes is None:
        expires_minutes = settings.auth_token_ttl_hours * 60
    now = datetime.now(UTC)
    payload: dict[str, Any] = {
        "sub": subject,
        "role": role,
        "jti": secrets.token_hex(16),
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, _get_secret(), algorithm=ALGORITHM), payload


def create_user_token(fid: int) -> str:
    token, _ = create_access_token(str(fid), ROLE_USER)
    return token


def create_admin_token(username: str) -> str:
    token, _ = create_access_token(
        username, ROLE_ADMIN, expires_minutes=ADMIN_TOKEN_EXPIRE_MINUTES
    )
    return token


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT.  Raises HTTPException on failure."""
    try:
        payload = jwt.decode(token, _get_secret(), algorithms=[ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token"
        )
    if not payload.get("sub") or payload.get("role") not in (ROLE_USER, ROLE_ADMIN):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return payload


def authenticate_admin(username: str, password: str) -> bool:
    """Check admin credentials. ``admin_password`` may be plain or a bcrypt hash."""
    expected_pass = settings.admin_password
    if not expected_pass:
        return False
    if not hmac.compare_digest(username, settings.admin_user):
        return False
    if expected_pass.startswith("$2"):
        return verify_password(password, expected_pass)
    return hmac.compare_digest(password, expected_pass)


def verify_oracle_key(key: str) -> bool:
    expected = settings.oracle_api_key
    return bool(expected) and hmac.compare_digest(key, expected)
