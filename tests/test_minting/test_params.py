"""Tests for MintingParameters validation and ether/wei conversion."""

from decimal import Decimal

import pytest

from src.minting.errors import InvariantViolation, ValidationError
from src.minting.params import MintingParameters
from src.minting.units import WEI_PER_ETHER, format_ether, parse_ether


class TestValidation:
    def test_defaults_are_valid(self):
        MintingParameters().validate()

    def test_with_updates_returns_new_snapshot(self, params):
        updated = params.with_updates(min_fid=5)
        assert updated.min_fid == 5
        assert params.min_fid == 1

    def test_with_updates_rejects_and_keeps_original(self, params):
        with pytest.raises(InvariantViolation):
            params.with_updates(min_fid=50, max_fid=10)
        assert params.max_fid == 100

    def test_equal_prices_allowed(self, params):
        assert params.with_updates(pro_mint_price=10).pro_mint_price == 10

    def test_equal_bounds_allowed(self, params):
        p = params.with_updates(min_fid=7, max_fid=7)
        assert (p.min_fid, p.max_fid) == (7, 7)

    @pytest.mark.parametrize(
        "changes",
        [
            {"min_fid": 0},
            {"base_mint_price": -1},
            {"max_supply": 0},
            {"min_fid": "1"},
            {"paused": False, "max_fid": 1.5},
        ],
    )
    def test_malformed_values(self, params, changes):
        with pytest.raises(ValidationError):
            params.with_updates(**changes)


class TestDerived:
    def test_discount_percent(self):
        assert MintingParameters(base_mint_price=10, pro_mint_price=5).pro_discount_percent == 50
        assert MintingParameters(base_mint_price=3, pro_mint_price=2).pro_discount_percent == 33

    def test_discount_percent_zero_base(self):
        assert MintingParameters(base_mint_price=0, pro_mint_price=0).pro_discount_percent == 0

    def test_remaining_supply(self):
        assert MintingParameters(max_supply=10, current_supply=4).remaining_supply == 6


class TestUnits:
    def test_parse_ether(self):
        assert parse_ether("0.002") == 2 * 10**15
        assert parse_ether("1") == WEI_PER_ETHER
        assert parse_ether(Decimal("0.5")) == WEI_PER_ETHER // 2
        assert parse_ether("0") == 0

    @pytest.mark.parametrize("value", ["abc", "-1", "NaN", "", "0.0000000000000000001"])
    def test_parse_ether_rejects(self, value):
        with pytest.raises(ValueError):
            parse_ether(value)

    def test_format_ether(self):
        assert format_ether(2 * 10**15) == "0.002"
        assert format_ether(WEI_PER_ETHER) == "1.0"
        assert format_ether(0) == "0.0"
        assert format_ether(15 * 10**17) == "1.5"

    def test_parse_ether_long_fraction_not_rounded(self):
        with pytest.raises(ValueError, match="Too many decimals"):
            parse_ether("1.000000000000000000000000000001")

    def test_parse_ether_large_amount_exact(self):
        assert parse_ether("12345678901234567890123.456") == 12345678901234567890123456 * 10**15

    def test_format_ether_large_amount_exact(self):
        wei = 12345678901234567890123456 * 10**15 + 1
        assert format_ether(wei) == "12345678901234567890123.456000000000000001"
