"""Ether <-> wei conversion on Decimal, never float."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext

WEI_PER_ETHER = 10**18
ETHER_DECIMALS = 18


def parse_ether(value: str | int | Decimal) -> int:
    """Convert an ether amount ("0.002") into wei. Raises ValueError."""
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid ether amount: {value!r}")
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"Invalid ether amount: {value!r}")
    # Precision must cover every digit or long inputs round to an integer
    with localcontext() as ctx:
        ctx.prec = len(amount.as_tuple().digits) + ETHER_DECIMALS
        wei = amount.scaleb(ETHER_DECIMALS)
        if wei != wei.to_integral_value():
            raise ValueError(f"Too many decimals in ether amount: {value!r}")
    return int(wei)


def format_ether(wei: int) -> str:
    """Format wei as an ether string without trailing zeros ("0.002", "1.0")."""
    with localcontext() as ctx:
        ctx.prec = len(str(abs(wei))) + ETHER_DECIMALS
        amount = Decimal(wei).scaleb(-ETHER_DECIMALS).normalize()
    text = format(amount, "f")
    if "." not in text:
        text += ".0"
    return text
