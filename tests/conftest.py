"""Shared test fixtures."""

import pytest

from src.minting.ledger import MintLedger
from src.minting.params import MintingParameters

OWNER = "0x00000000000000000000000000000000000000a1"
TREASURY = "0x00000000000000000000000000000000000000a2"
ORACLE = "0x00000000000000000000000000000000000000a3"
USER1 = "0x00000000000000000000000000000000000000b1"
USER2 = "0x00000000000000000000000000000000000000b2"
USER3 = "0x00000000000000000000000000000000000000b3"
STRANGER = "0x00000000000000000000000000000000000000c1"

TEST_TOKEN_URI = "ipfs://QmTest123"


@pytest.fixture
def params() -> MintingParameters:
    """Small-number parameters: fids 1..100, base 10 wei, pro 5 wei."""
    return MintingParameters(
        min_fid=1,
        max_fid=100,
        base_mint_price=10,
        pro_mint_price=5,
        max_supply=10_000,
    )


@pytest.fixture
def ledger(params: MintingParameters) -> MintLedger:
    return MintLedger(owner=OWNER, treasury=TREASURY, oracle=ORACLE, params=params)
