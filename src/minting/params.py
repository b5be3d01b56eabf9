"""Minting parameters and per-fid mint records."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from src.minting.errors import InvariantViolation, ValidationError


@dataclass(frozen=True)
class MintingParameters:
    """Snapshot of the global mint configuration.

    Prices are in wei. Instances are immutable; updates produce a new
    snapshot through ``with_updates`` which validates the result as a whole.
    """

    min_fid: int = 1
    max_fid: int = 100_000
    base_mint_price: int = 2 * 10**15  # 0.002 ETH
    pro_mint_price: int = 1 * 10**15  # 0.001 ETH
    max_supply: int = 10_000
    current_supply: int = 0
    paused: bool = False
    require_pro_for_discount: bool = True

    def validate(self) -> None:
        """Raise InvariantViolation / ValidationError if the snapshot is inconsistent."""
        for name in (
            "min_fid", "max_fid", "base_mint_price", "pro_mint_price",
            "max_supply", "current_supply",
        ):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ValidationError(f"{name} must be an integer")
        if self.min_fid < 1:
            raise ValidationError("min_fid must be positive")
        if self.max_fid < self.min_fid:
            raise InvariantViolation(
                f"max_fid ({self.max_fid}) must be >= min_fid ({self.min_fid})"
            )
        if self.base_mint_price < 0 or self.pro_mint_price < 0:
            raise ValidationError("Mint prices must be non-negative")
        if self.pro_mint_price > self.base_mint_price:
            raise InvariantViolation("Pro price must be <= base price")
        if self.max_supply < 1:
            raise ValidationError("max_supply must be positive")
        if self.current_supply < 0:
            raise ValidationError("current_supply must be non-negative")
        if self.max_supply < self.current_supply:
            raise InvariantViolation(
                f"max_supply ({self.max_supply}) below current supply ({self.current_supply})"
            )

    def with_updates(self, **changes: Any) -> MintingParameters:
        """Return a validated copy with ``changes`` applied. Self is untouched."""
        updated = replace(self, **changes)
        updated.validate()
        return updated

    @property
    def pro_discount_percent(self) -> int:
        if self.base_mint_price == 0:
            return 0
        return round((1 - self.pro_mint_price / self.base_mint_price) * 100)

    @property
    def remaining_supply(self) -> int:
        return self.max_supply - self.current_supply


@dataclass
class MintRecord:
    """Per-fid state. ``has_minted`` only ever goes False -> True."""

    fid: int
    has_minted: bool = False
    is_pro: bool = False
    token_id: int | None = None
    owner: str = ""
    token_uri: str = ""
    price_paid: int | None = None  # fixed at mint time
    minted_at: datetime | None = None
