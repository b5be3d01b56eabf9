"""Auth endpoints: Farcaster sign-in challenge/polling, token verify, admin login."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from loguru import logger
from pydantic import BaseModel, Field

from src.api.auth import authenticate_admin, create_admin_token, create_user_token
from src.api.dependencies import get_current_fid, get_registry
from src.api.limits import limiter
from src.api.registry import Registry

router = APIRouter(prefix="/api/auth", tags=["auth"])


class FarcasterAuthRequest(BaseModel):
    fid: int = Field(gt=0)
    message: str = Field(min_length=1)
    signature: str = ""


class AdminLoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=1, max_length=128)


@router.post("/challenge")
@limiter.limit("20/minute")
async def create_challenge(
    request: Request, reg: Registry = Depends(get_registry)
) -> dict[str, Any]:
    """Start a Farcaster sign-in via Neynar and remember the pending session."""
    signer_uuid, url = await reg.neynar.create_login()
    session = reg.sessions.create(signer_uuid)
    return {"channelToken": session.channel_token, "url": url, "nonce": session.nonce}


@router.get("/status/{channel_token}")
async def auth_status(
    channel_token: str, reg: Registry = Depends(get_registry)
) -> dict[str, Any]:
    """Polling endpoint. Issues a user token once Neynar reports completion."""
    session = reg.sessions.get(channel_token)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")

    if session.state == "completed":
        return {"state": "completed", "fid": session.fid, "token": session.token}

    login = await reg.neynar.get_login_status(session.signer_uuid)
    if not login.completed:
        return {"state": "pending"}

    token = create_user_token(login.fid)
    reg.sessions.complete(
        session, fid=login.fid, custody_address=login.custody_address, token=token
    )
    logger.info(f"[AUTH] Sign-in completed for fid={login.fid}")
    return {"state": "completed", "fid": login.fid, "token": token}


@router.get("/verify")
async def verify(fid: int = Depends(get_current_fid)) -> dict[str, Any]:
    return {"valid": True, "fid": fid}


@router.post("/farcaster")
async def farcaster_auth(
    body: FarcasterAuthRequest, reg: Registry = Depends(get_registry)
) -> dict[str, Any]:
    """Validate a signed frame message, then return the user's profile."""
    if not await reg.neynar.validate_frame(body.message):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid signature")
    user = await reg.neynar.get_user(body.fid)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Farcaster user not found")
    return {
        "fid": user.fid,
        "username": user.username,
        "displayName": user.display_name,
        "profileImage": user.pfp_url,
        "isPro": user.is_pro,
        "custodyAddress": user.custody_address,
        "verifications": user.verifications,
    }


@router.post("/admin/login")
@limiter.limit("5/minute")
async def admin_login(request: Request, body: AdminLoginRequest) -> dict[str, Any]:
    """Exchange admin credentials for an owner-role bearer token."""
    if not authenticate_admin(body.username, body.password):
        logger.warning(f"[AUTH] Failed admin login for {body.username!r}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    return {"token": create_admin_token(body.username), "username": body.username}
