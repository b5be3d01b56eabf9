"""Public mint flow: parameters, eligibility, profile, transform, pin, mint."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from loguru import logger
from pydantic import BaseModel, Field

from src.api.dependencies import (
    get_current_fid,
    get_ledger,
    get_registry,
    require_own_fid,
)
from src.api.limits import limiter
from src.api.registry import Registry
from src.clients.neynar.models import FarcasterUser
from src.clients.pinata.models import build_profile_metadata
from src.minting.evaluator import ineligibility_reason, validate_fid
from src.minting.ledger import MintLedger
from src.minting.params import MintingParameters
from src.minting.units import format_ether

router = APIRouter(prefix="/api", tags=["minting"])


class TransformRequest(BaseModel):
    fid: int = Field(gt=0)
    image_url: str = Field(alias="imageUrl", min_length=1)


class PrepareMintRequest(BaseModel):
    fid: int = Field(gt=0)
    image_url: str = Field(alias="imageUrl", min_length=1)
    username: str = ""
    display_name: str = Field("", alias="displayName")


class MintRequest(BaseModel):
    fid: int = Field(gt=0)
    to: str = Field(min_length=1)
    token_uri: str = Field(alias="tokenURI", min_length=1)
    payment: int = Field(ge=0, description="Amount sent, in wei")


def parameters_payload(params: MintingParameters) -> dict[str, Any]:
    """Camel-case JSON view of the parameters (wei as strings)."""
    return {
        "minFid": params.min_fid,
        "maxFid": params.max_fid,
        "baseMintPrice": str(params.base_mint_price),
        "proMintPrice": str(params.pro_mint_price),
        "baseMintPriceEth": format_ether(params.base_mint_price),
        "proMintPriceEth": format_ether(params.pro_mint_price),
        "proDiscountPercent": params.pro_discount_percent,
        "maxSupply": params.max_supply,
        "currentSupply": params.current_supply,
        "remainingSupply": params.remaining_supply,
        "paused": params.paused,
        "requireProForDiscount": params.require_pro_for_discount,
    }


async def _load_user(reg: Registry, ledger: MintLedger, fid: int) -> FarcasterUser:
    """Fetch the Farcaster profile and sync its Pro flag into the ledger."""
    user = await reg.neynar.get_user(fid)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Farcaster user not found")
    if ledger.is_pro_user(fid) != user.is_pro:
        ledger.set_pro_status(ledger.oracle, fid, user.is_pro)
    return user


@router.get("/parameters")
async def get_parameters(ledger: MintLedger = Depends(get_ledger)) -> dict[str, Any]:
    return parameters_payload(ledger.params)


@router.get("/check-eligibility/{fid}")
async def check_eligibility(fid: int, ledger: MintLedger = Depends(get_ledger)) -> dict[str, Any]:
    validate_fid(fid)
    reason = ineligibility_reason(fid, ledger.params, ledger.get_record(fid))
    return {"isEligible": not reason, "reason": reason, "fid": fid}


@router.get("/user/{fid}")
async def get_user_profile(
    fid: int,
    current_fid: int = Depends(get_current_fid),
    reg: Registry = Depends(get_registry),
    ledger: MintLedger = Depends(get_ledger),
) -> dict[str, Any]:
    """Profile, eligibility and price for the signed-in user."""
    require_own_fid(fid, current_fid, "access")
    user = await _load_user(reg, ledger, fid)
    params = ledger.params
    return {
        "fid": user.fid,
        "username": user.username,
        "displayName": user.display_name,
        "profileImage": user.pfp_url,
        "isPro": user.is_pro,
        "custodyAddress": user.custody_address,
        "verifications": user.verifications,
        "isEligible": ledger.is_eligible(fid),
        "hasMinted": ledger.has_minted(fid),
        "mintPrice": format_ether(ledger.get_mint_price(fid, user.is_pro)),
        "parameters": {
            "minFid": params.min_fid,
            "maxFid": params.max_fid,
            "maxSupply": params.max_supply,
            "currentSupply": params.current_supply,
            "paused": params.paused,
        },
    }


@router.post("/transform")
@limiter.limit("10/minute")
async def transform(
    request: Request,
    body: TransformRequest,
    current_fid: int = Depends(get_current_fid),
    reg: Registry = Depends(get_registry),
    ledger: MintLedger = Depends(get_ledger),
) -> dict[str, Any]:
    """Restyle the user's picture. Rejected up front if the fid cannot mint."""
    require_own_fid(body.fid, current_fid, "transform")
    reason = ineligibility_reason(body.fid, ledger.params, ledger.get_record(body.fid))
    if reason:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Not eligible to mint: {reason}")

    transformed_url = await reg.transformer.transform(body.fid, body.image_url)
    return {
        "success": True,
        "transformedUrl": transformed_url,
        "isEligible": True,
        "fid": body.fid,
    }


@router.post("/prepare-mint")
async def prepare_mint(
    body: PrepareMintRequest,
    current_fid: int = Depends(get_current_fid),
    reg: Registry = Depends(get_registry),
) -> dict[str, Any]:
    """Pin the transformed image and its metadata; returns the token URI."""
    require_own_fid(body.fid, current_fid, "mint")
    image = await reg.pinata.fetch_bytes(body.image_url)
    ipfs_image_url = await reg.pinata.pin_file(image)
    metadata = build_profile_metadata(
        fid=body.fid,
        username=body.username,
        display_name=body.display_name,
        image_uri=ipfs_image_url,
    ).model_dump()
    token_uri = await reg.pinata.pin_json(metadata)
    return {
        "success": True,
        "tokenURI": token_uri,
        "ipfsImageUrl": ipfs_image_url,
        "metadata": metadata,
    }


@router.post("/mint")
async def mint(
    body: MintRequest,
    current_fid: int = Depends(get_current_fid),
    reg: Registry = Depends(get_registry),
    ledger: MintLedger = Depends(get_ledger),
) -> dict[str, Any]:
    """Record a paid mint. The Pro price is taken from the live Neynar flag."""
    require_own_fid(body.fid, current_fid, "mint")
    await _load_user(reg, ledger, body.fid)
    token_id = ledger.mint(body.to, body.token_uri, body.fid, body.payment)
    record = ledger.get_record(body.fid)
    logger.info(f"[API] fid={body.fid} minted token {token_id}")
    return {
        "success": True,
        "tokenId": token_id,
        "fid": body.fid,
        "pricePaid": str(record.price_paid),
        "pricePaidEth": format_ether(record.price_paid),
        "currentSupply": ledger.params.current_supply,
    }
