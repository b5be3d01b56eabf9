"""FastAPI dependency injection: bearer auth, roles, registry objects."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from src.api.auth import ROLE_ADMIN, ROLE_USER, decode_token, verify_oracle_key
from src.api.registry import Registry, registry
from src.minting.ledger import MintLedger


def get_registry() -> Registry:
    """Return the global runtime registry."""
    return registry


def get_ledger(reg: Registry = Depends(get_registry)) -> MintLedger:
    if reg.ledger is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Ledger not ready"
        )
    return reg.ledger


def _bearer_token(request: Request) -> str:
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return header[len("Bearer "):]


async def get_token_payload(request: Request) -> dict:
    """Decode the Bearer JWT from the Authorization header."""
    return decode_token(_bearer_token(request))


async def get_current_fid(payload: dict = Depends(get_token_payload)) -> int:
    """Fid of the signed-in Farcaster user."""
    if payload.get("role") != ROLE_USER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User token required")
    try:
        return int(payload["sub"])
    except (KeyError, ValueError):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def require_own_fid(fid: int, current_fid: int, action: str) -> None:
    if fid != current_fid:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Can only {action} your own profile",
        )


async def require_owner(
    payload: dict = Depends(get_token_payload),
    ledger: MintLedger = Depends(get_ledger),
) -> str:
    """Admin JWT -> owner address used as the ledger caller."""
    if payload.get("role") != ROLE_ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin token required")
    return ledger.owner


async def require_oracle(
    request: Request, ledger: MintLedger = Depends(get_ledger)
) -> str:
    """Admin JWT (acts as owner) or X-Oracle-Key header (acts as oracle)."""
    oracle_key = request.headers.get("X-Oracle-Key", "")
    if oracle_key:
        if not verify_oracle_key(oracle_key):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid oracle key")
        return ledger.oracle
    payload = decode_token(_bearer_token(request))
    if payload.get("role") != ROLE_ADMIN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return ledger.owner
