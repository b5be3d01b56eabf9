"""In-process mint ledger: owner/oracle roles, sequential token ids.

Holds the parameters and per-fid records behind a single lock. Every
mutation either commits fully or raises and leaves state untouched.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import UTC, datetime

from loguru import logger

from src.minting.errors import (
    AuthorizationError,
    InsufficientPayment,
    ValidationError,
)
from src.minting.evaluator import (
    check_eligibility,
    get_mint_price,
    is_eligible,
    validate_fid,
)
from src.minting.params import MintingParameters, MintRecord

ZERO_ADDRESS = "0x" + "0" * 40


def _normalize_address(address: str, label: str) -> str:
    address = (address or "").strip()
    if not address or address.lower() == ZERO_ADDRESS:
        raise ValidationError(f"Invalid {label} address")
    return address.lower()


class MintLedger:
    """Authoritative store for mint state.

    Owner: all parameter changes, pause, treasury/oracle, batch mint.
    Oracle (or owner): Pro status flags.
    """

    def __init__(
        self,
        *,
        owner: str,
        treasury: str,
        oracle: str,
        params: MintingParameters | None = None,
    ) -> None:
        params = params or MintingParameters()
        params.validate()
        self._owner = _normalize_address(owner, "owner")
        self._treasury = _normalize_address(treasury, "treasury")
        self._oracle = _normalize_address(oracle, "oracle")
        self._params = params
        self._records: dict[int, MintRecord] = {}
        self._token_to_fid: dict[int, int] = {}
        self._next_token_id = 0
        self._treasury_balance = 0
        self._lock = threading.Lock()

    # ── Roles ────────────────────────────────────────────────────────────

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def treasury(self) -> str:
        return self._treasury

    @property
    def oracle(self) -> str:
        return self._oracle

    @property
    def treasury_balance(self) -> int:
        return self._treasury_balance

    def _require_owner(self, caller: str) -> None:
        if (caller or "").lower() != self._owner:
            raise AuthorizationError("Caller is not the owner")

    def _require_owner_or_oracle(self, caller: str) -> None:
        if (caller or "").lower() not in (self._owner, self._oracle):
            raise AuthorizationError("Not authorized")

    # ── Reads ────────────────────────────────────────────────────────────

    @property
    def params(self) -> MintingParameters:
        return self._params

    @property
    def total_minted(self) -> int:
        return self._next_token_id

    def get_record(self, fid: int) -> MintRecord | None:
        record = self._records.get(fid)
        return replace(record) if record is not None else None

    def has_minted(self, fid: int) -> bool:
        record = self._records.get(fid)
        return bool(record and record.has_minted)

    def is_pro_user(self, fid: int) -> bool:
        record = self._records.get(fid)
        return bool(record and record.is_pro)

    def is_eligible(self, fid: int) -> bool:
        return is_eligible(fid, self._params, self._records.get(fid))

    def get_mint_price(self, fid: int, is_pro: bool | None = None) -> int:
        """Price for fid. ``is_pro`` overrides the stored flag when given."""
        if is_pro is None:
            is_pro = self.is_pro_user(fid)
        return get_mint_price(is_pro, self._params)

    def get_token_id_by_fid(self, fid: int) -> int | None:
        record = self._records.get(fid)
        return record.token_id if record else None

    def get_fid_by_token_id(self, token_id: int) -> int | None:
        return self._token_to_fid.get(token_id)

    def token_uri(self, token_id: int) -> str | None:
        fid = self._token_to_fid.get(token_id)
        return self._records[fid].token_uri if fid is not None else None

    def owner_of(self, token_id: int) -> str | None:
        fid = self._token_to_fid.get(token_id)
        return self._records[fid].owner if fid is not None else None

    # ── Minting ──────────────────────────────────────────────────────────

    def mint(self, to: str, token_uri: str, fid: int, payment: int) -> int:
        """Paid mint. Returns the new token id.

        Checks in order: fid valid, eligibility, payment. First failure
        raises with no state change.
        """
        validate_fid(fid)
        recipient = _normalize_address(to, "recipient")
        with self._lock:
            record = self._records.get(fid)
            check_eligibility(fid, self._params, record)
            price = get_mint_price(bool(record and record.is_pro), self._params)
            if payment < price:
                raise InsufficientPayment(
                    f"Insufficient payment: {payment} < {price} wei"
                )
            token_id = self._commit(fid, recipient, token_uri, price, record)
            self._treasury_balance += payment

        logger.info(
            f"[MINT] fid={fid} token_id={token_id} price={price} to={recipient}"
        )
        return token_id

    def batch_mint(
        self,
        caller: str,
        recipients: list[str],
        token_uris: list[str],
        fids: list[int],
    ) -> list[int]:
        """Owner airdrop. Free, but range/uniqueness/supply still apply.

        Everything is validated before the first commit.
        """
        self._require_owner(caller)
        if not (len(recipients) == len(token_uris) == len(fids)):
            raise ValidationError("Array lengths mismatch")
        if not fids:
            return []
        addresses = [_normalize_address(r, "recipient") for r in recipients]
        for fid in fids:
            validate_fid(fid)
        if len(set(fids)) != len(fids):
            raise ValidationError("Duplicate fid in batch")

        with self._lock:
            # Simulate supply growth so the whole batch fits or nothing commits
            params = self._params
            for fid in fids:
                check_eligibility(fid, params, self._records.get(fid))
                params = replace(params, current_supply=params.current_supply + 1)

            token_ids = [
                self._commit(fid, addr, uri, 0, self._records.get(fid))
                for addr, uri, fid in zip(addresses, token_uris, fids)
            ]

        logger.info(f"[MINT] Batch minted {len(token_ids)} tokens: {token_ids}")
        return token_ids

    def _commit(
        self,
        fid: int,
        recipient: str,
        token_uri: str,
        price: int,
        record: MintRecord | None,
    ) -> int:
        """Flag, supply and token id move together. Caller holds the lock."""
        if record is None:
            record = MintRecord(fid=fid)
            self._records[fid] = record
        token_id = self._next_token_id
        self._next_token_id += 1
        record.has_minted = True
        record.token_id = token_id
        record.owner = recipient
        record.token_uri = token_uri
        record.price_paid = price
        record.minted_at = datetime.now(UTC)
        self._token_to_fid[token_id] = fid
        self._params = replace(
            self._params, current_supply=self._params.current_supply + 1
        )
        return token_id

    # ── Owner parameter updates ──────────────────────────────────────────

    def _update(self, caller: str, **changes: object) -> MintingParameters:
        self._require_owner(caller)
        with self._lock:
            self._params = self._params.with_updates(**changes)
            params = self._params
        logger.info(f"[MINT] Parameters updated by owner: {changes}")
        return params

    def set_fid_range(self, caller: str, min_fid: int, max_fid: int) -> MintingParameters:
        return self._update(caller, min_fid=min_fid, max_fid=max_fid)

    def set_prices(self, caller: str, base_mint_price: int, pro_mint_price: int) -> MintingParameters:
        return self._update(
            caller, base_mint_price=base_mint_price, pro_mint_price=pro_mint_price
        )

    def set_max_supply(self, caller: str, max_supply: int) -> MintingParameters:
        return self._update(caller, max_supply=max_supply)

    def set_require_pro_for_discount(self, caller: str, enabled: bool) -> MintingParameters:
        return self._update(caller, require_pro_for_discount=bool(enabled))

    def update_minting_params(
        self,
        caller: str,
        *,
        min_fid: int | None = None,
        max_fid: int | None = None,
        base_mint_price: int | None = None,
        pro_mint_price: int | None = None,
        max_supply: int | None = None,
        paused: bool | None = None,
        require_pro_for_discount: bool | None = None,
    ) -> MintingParameters:
        """Partial update; omitted fields keep their value. All-or-nothing."""
        changes = {
            "min_fid": min_fid,
            "max_fid": max_fid,
            "base_mint_price": base_mint_price,
            "pro_mint_price": pro_mint_price,
            "max_supply": max_supply,
            "paused": paused,
            "require_pro_for_discount": require_pro_for_discount,
        }
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            self._require_owner(caller)
            return self._params
        return self._update(caller, **changes)

    def set_paused(self, caller: str, paused: bool) -> MintingParameters:
        return self._update(caller, paused=bool(paused))

    def pause(self, caller: str) -> MintingParameters:
        return self.set_paused(caller, True)

    def unpause(self, caller: str) -> MintingParameters:
        return self.set_paused(caller, False)

    def update_treasury(self, caller: str, treasury: str) -> None:
        self._require_owner(caller)
        self._treasury = _normalize_address(treasury, "treasury")
        logger.info(f"[MINT] Treasury updated to {self._treasury}")

    def update_oracle(self, caller: str, oracle: str) -> None:
        self._require_owner(caller)
        self._oracle = _normalize_address(oracle, "oracle")
        logger.info(f"[MINT] Oracle updated to {self._oracle}")

    # ── Oracle ───────────────────────────────────────────────────────────

    def set_pro_status(self, caller: str, fid: int, is_pro: bool) -> None:
        """Update the Pro flag. Does not touch the price of an existing mint."""
        self._require_owner_or_oracle(caller)
        validate_fid(fid)
        with self._lock:
            record = self._records.setdefault(fid, MintRecord(fid=fid))
            record.is_pro = bool(is_pro)
        logger.debug(f"[MINT] Pro status fid={fid} -> {bool(is_pro)}")

    def batch_set_pro_status(
        self, caller: str, fids: list[int], statuses: list[bool]
    ) -> None:
        self._require_owner_or_oracle(caller)
        if len(fids) != len(statuses):
            raise ValidationError("Array lengths mismatch")
        for fid in fids:
            validate_fid(fid)
        with self._lock:
            for fid, is_pro in zip(fids, statuses):
                record = self._records.setdefault(fid, MintRecord(fid=fid))
                record.is_pro = bool(is_pro)
        logger.info(f"[MINT] Batch pro status update: {len(fids)} fids")
