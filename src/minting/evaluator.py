"""Eligibility and pricing rules.

Pure functions over a MintingParameters snapshot and the fid's MintRecord.
The ledger calls these under its lock; the HTTP layer calls them for
read-only pre-checks.
"""

from __future__ import annotations

from src.minting.errors import (
    AlreadyMinted,
    FidOutOfRange,
    MintingPaused,
    SupplyExhausted,
    ValidationError,
)
from src.minting.params import MintingParameters, MintRecord


def validate_fid(fid: object) -> int:
    """Return fid if it is a positive int, else raise ValidationError."""
    if not isinstance(fid, int) or isinstance(fid, bool) or fid < 1:
        raise ValidationError(f"Invalid fid: {fid!r}")
    return fid


def check_eligibility(
    fid: int,
    params: MintingParameters,
    record: MintRecord | None = None,
) -> None:
    """Raise the first failing EligibilityError, or return None.

    Order: pause, uniqueness, range, supply. While paused every fid is
    rejected as paused; a minted fid stays AlreadyMinted whatever the
    range or supply later become.
    """
    if params.paused:
        raise MintingPaused("Minting is currently paused")
    if record is not None and record.has_minted:
        raise AlreadyMinted(f"FID {fid} has already minted")
    if fid < params.min_fid or fid > params.max_fid:
        raise FidOutOfRange(
            f"FID must be between {params.min_fid} and {params.max_fid}"
        )
    if params.current_supply >= params.max_supply:
        raise SupplyExhausted("Max supply reached")


def is_eligible(
    fid: int,
    params: MintingParameters,
    record: MintRecord | None = None,
) -> bool:
    try:
        check_eligibility(fid, params, record)
    except (FidOutOfRange, AlreadyMinted, MintingPaused, SupplyExhausted):
        return False
    return True


def ineligibility_reason(
    fid: int,
    params: MintingParameters,
    record: MintRecord | None = None,
) -> str:
    """Human readable reason, empty string when eligible."""
    try:
        check_eligibility(fid, params, record)
    except (FidOutOfRange, AlreadyMinted, MintingPaused, SupplyExhausted) as e:
        return e.message
    return ""


def get_mint_price(is_pro: bool, params: MintingParameters) -> int:
    """Price in wei. Pro price only applies while the discount toggle is on."""
    if is_pro and params.require_pro_for_discount:
        return params.pro_mint_price
    return params.base_mint_price
