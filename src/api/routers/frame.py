"""Farcaster Frame action handler."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from config.settings import settings
from src.api.dependencies import get_ledger, get_registry
from src.api.registry import Registry
from src.minting.ledger import MintLedger

router = APIRouter(prefix="/api", tags=["frame"])


class UntrustedData(BaseModel):
    fid: int = Field(gt=0)
    button_index: int = Field(0, alias="buttonIndex")


class FrameAction(BaseModel):
    untrusted_data: UntrustedData = Field(alias="untrustedData")
    trusted_data: dict[str, Any] = Field(default_factory=dict, alias="trustedData")


def _button(label: str, action: str = "post", target: str | None = None) -> dict[str, str]:
    button = {"label": label, "action": action}
    if target:
        button["target"] = target
    return button


@router.post("/frame-action")
async def frame_action(
    body: FrameAction,
    reg: Registry = Depends(get_registry),
    ledger: MintLedger = Depends(get_ledger),
) -> dict[str, Any]:
    """Return the next frame (image + buttons) for the pressed button."""
    fid = body.untrusted_data.fid
    base = settings.public_base_url.rstrip("/")

    button_index = body.untrusted_data.button_index
    if button_index == 1:  # transform
        user = await reg.neynar.get_user(fid)
        if user is not None and user.pfp_url:
            image = await reg.transformer.transform(fid, user.pfp_url)
        else:
            image = f"{base}/api/generate-preview"
        buttons = [_button("💎 Mint NFT"), _button("🔄 Try Again"), _button("📊 Stats")]
    elif button_index == 2:  # mint
        image = f"{base}/api/generate-mint-confirmation/{fid}"
        buttons = [
            _button("✅ Confirm Mint", "tx", f"{settings.contract_address}/mint"),
            _button("↩️ Back"),
        ]
    elif button_index == 3:  # eligibility
        suffix = "eligible" if ledger.is_eligible(fid) else "ineligible"
        image = f"{base}/api/generate-eligibility-image/{fid}?status={suffix}"
        buttons = [_button("🔮 Transform"), _button("📈 View Parameters")]
    else:
        image = f"{base}/api/generate-preview"
        buttons = [
            _button("🔮 Transform My PFP"),
            _button("💎 Mint NFT"),
            _button("📊 Check Eligibility"),
        ]

    return {"image": image, "buttons": buttons}
