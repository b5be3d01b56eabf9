"""Admin endpoints: owner parameter control, pause, roles, airdrops, Pro sync."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from src.api.dependencies import get_ledger, get_registry, require_oracle, require_owner
from src.api.registry import Registry
from src.api.routers.minting import parameters_payload
from src.minting.errors import ValidationError
from src.minting.ledger import MintLedger
from src.minting.units import parse_ether

router = APIRouter(prefix="/api/admin", tags=["admin"])


class ParametersUpdate(BaseModel):
    """Partial update. Prices are ether strings ("0.002")."""

    min_fid: int | None = Field(None, alias="minFid", gt=0)
    max_fid: int | None = Field(None, alias="maxFid", gt=0)
    base_mint_price: str | None = Field(None, alias="baseMintPrice")
    pro_mint_price: str | None = Field(None, alias="proMintPrice")
    max_supply: int | None = Field(None, alias="maxSupply", gt=0)
    paused: bool | None = None
    require_pro_for_discount: bool | None = Field(None, alias="requireProForDiscount")


class AddressUpdate(BaseModel):
    address: str = Field(min_length=1)


class ProStatusUpdate(BaseModel):
    fid: int
    is_pro: bool = Field(alias="isPro")


class BatchProStatusUpdate(BaseModel):
    fids: list[int]
    statuses: list[bool]


class BatchMintRequest(BaseModel):
    recipients: list[str]
    token_uris: list[str] = Field(alias="tokenURIs")
    fids: list[int]


def _ether_to_wei(value: str | None, field: str) -> int | None:
    if value is None:
        return None
    try:
        return parse_ether(value)
    except ValueError as e:
        raise ValidationError(f"{field}: {e}")


@router.post("/update-parameters")
async def update_parameters(
    body: ParametersUpdate,
    caller: str = Depends(require_owner),
    ledger: MintLedger = Depends(get_ledger),
) -> dict[str, Any]:
    """Apply every provided field at once; any invariant failure rejects all."""
    params = ledger.update_minting_params(
        caller,
        min_fid=body.min_fid,
        max_fid=body.max_fid,
        base_mint_price=_ether_to_wei(body.base_mint_price, "baseMintPrice"),
        pro_mint_price=_ether_to_wei(body.pro_mint_price, "proMintPrice"),
        max_supply=body.max_supply,
        paused=body.paused,
        require_pro_for_discount=body.require_pro_for_discount,
    )
    return {"success": True, "parameters": parameters_payload(params)}


@router.post("/pause")
async def pause(
    caller: str = Depends(require_owner), ledger: MintLedger = Depends(get_ledger)
) -> dict[str, Any]:
    return {"success": True, "paused": ledger.pause(caller).paused}


@router.post("/unpause")
async def unpause(
    caller: str = Depends(require_owner), ledger: MintLedger = Depends(get_ledger)
) -> dict[str, Any]:
    return {"success": True, "paused": ledger.unpause(caller).paused}


@router.get("/stats")
async def stats(
    _caller: str = Depends(require_owner),
    reg: Registry = Depends(get_registry),
    ledger: MintLedger = Depends(get_ledger),
) -> dict[str, Any]:
    params = ledger.params
    transforms = reg.transformer.stats() if reg.transformer else {}
    return {
        "totalTransformations": transforms.get("total_transformations", 0),
        "cachedTransformations": transforms.get("cached", 0),
        "pendingAuthSessions": len(reg.sessions) if reg.sessions else 0,
        "currentSupply": params.current_supply,
        "maxSupply": params.max_supply,
        "remainingSupply": params.remaining_supply,
        "isPaused": params.paused,
        "treasury": ledger.treasury,
        "treasuryBalance": str(ledger.treasury_balance),
        "oracle": ledger.oracle,
        "parameters": parameters_payload(params),
    }


@router.post("/treasury")
async def update_treasury(
    body: AddressUpdate,
    caller: str = Depends(require_owner),
    ledger: MintLedger = Depends(get_ledger),
) -> dict[str, Any]:
    ledger.update_treasury(caller, body.address)
    return {"success": True, "treasury": ledger.treasury}


@router.post("/oracle")
async def update_oracle(
    body: AddressUpdate,
    caller: str = Depends(require_owner),
    ledger: MintLedger = Depends(get_ledger),
) -> dict[str, Any]:
    ledger.update_oracle(caller, body.address)
    return {"success": True, "oracle": ledger.oracle}


@router.post("/batch-mint")
async def batch_mint(
    body: BatchMintRequest,
    caller: str = Depends(require_owner),
    ledger: MintLedger = Depends(get_ledger),
) -> dict[str, Any]:
    token_ids = ledger.batch_mint(caller, body.recipients, body.token_uris, body.fids)
    return {
        "success": True,
        "tokenIds": token_ids,
        "currentSupply": ledger.params.current_supply,
    }


@router.post("/pro-status")
async def set_pro_status(
    body: ProStatusUpdate,
    caller: str = Depends(require_oracle),
    ledger: MintLedger = Depends(get_ledger),
) -> dict[str, Any]:
    ledger.set_pro_status(caller, body.fid, body.is_pro)
    return {"success": True, "fid": body.fid, "isPro": ledger.is_pro_user(body.fid)}


@router.post("/pro-status/batch")
async def batch_set_pro_status(
    body: BatchProStatusUpdate,
    caller: str = Depends(require_oracle),
    ledger: MintLedger = Depends(get_ledger),
) -> dict[str, Any]:
    ledger.batch_set_pro_status(caller, body.fids, body.statuses)
    return {"success": True, "updated": len(body.fids)}
