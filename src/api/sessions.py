"""Pending Farcaster sign-in challenges, bounded by size and TTL."""

from __future__ import annotations

import secrets
import time
from dataclasses import dataclass, field

from cachetools import TTLCache


@dataclass
class AuthSession:
    channel_token: str
    signer_uuid: str
    nonce: str
    state: str = "pending"
    fid: int | None = None
    custody_address: str = ""
    token: str = ""
    created_at: float = field(default_factory=time.time)


class AuthSessionStore:
    """channel_token -> AuthSession. Expired or evicted sessions read as unknown."""

    def __init__(self, *, maxsize: int = 10000, ttl_sec: int = 600) -> None:
        self._sessions: TTLCache[str, AuthSession] = TTLCache(maxsize=maxsize, ttl=ttl_sec)

    def create(self, signer_uuid: str) -> AuthSession:
        session = AuthSession(
            channel_token=secrets.token_hex(16),
            signer_uuid=signer_uuid,
            nonce=secrets.token_hex(16),
        )
        self._sessions[session.channel_token] = session
        return session

    def get(self, channel_token: str) -> AuthSession | None:
        return self._sessions.get(channel_token)

    def complete(
        self, session: AuthSession, *, fid: int, custody_address: str, token: str
    ) -> None:
        session.state = "completed"
        session.fid = fid
        session.custody_address = custody_address
        session.token = token
        # Re-insert so the completed session keeps a fresh TTL for polling
        self._sessions[session.channel_token] = session

    def __len__(self) -> int:
        return len(self._sessions)
