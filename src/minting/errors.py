"""Mint error taxonomy.

Every rejected call raises exactly one of these, so callers (HTTP layer,
tests) can tell the cause apart without parsing messages.
"""

from __future__ import annotations


class MintError(Exception):
    """Base class for all minting errors."""

    code: str = "mint_error"
    http_status: int = 400

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class ValidationError(MintError):
    """Malformed input (non-positive fid, empty address, length mismatch)."""

    code = "validation_error"
    http_status = 400


class EligibilityError(MintError):
    code = "not_eligible"
    http_status = 403


class FidOutOfRange(EligibilityError):
    code = "fid_out_of_range"


class AlreadyMinted(EligibilityError):
    code = "already_minted"
    http_status = 409


class MintingPaused(EligibilityError):
    code = "minting_paused"
    http_status = 423


class SupplyExhausted(EligibilityError):
    code = "supply_exhausted"
    http_status = 410


class PaymentError(MintError):
    code = "payment_error"
    http_status = 402


class InsufficientPayment(PaymentError):
    code = "insufficient_payment"


class AuthorizationError(MintError):
    """Caller lacks the owner or oracle capability."""

    code = "unauthorized"
    http_status = 403


UnauthorizedParameterChange = AuthorizationError


class InvariantViolation(MintError):
    """Parameter update would break maxFid >= minFid or price ordering."""

    code = "invariant_violation"
    http_status = 422
