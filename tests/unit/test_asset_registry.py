"""Unit tests for the settlement asset whitelist"""

import pytest
from factoring_gateway.domain.exceptions import AssetNotWhitelistedError, InvalidAddressError
from factoring_gateway.services.asset_registry import AssetRegistry
from factoring_gateway.utils.address_utils import ZERO_ADDRESS, is_zero_address
from helpers import LENDER_POOL, USDC


def test_registered_asset_is_whitelisted(asset_registry: AssetRegistry):
    assert asset_registry.is_asset_whitelisted(USDC) is True
    assert asset_registry.pool_for(USDC) == LENDER_POOL
    assert asset_registry.lender_pools() == {USDC.lower(): LENDER_POOL}


def test_unknown_asset_is_not_whitelisted(asset_registry: AssetRegistry):
    assert asset_registry.is_asset_whitelisted("0xdead") is False
    with pytest.raises(AssetNotWhitelistedError):
        asset_registry.pool_for("0xdead")


def test_lender_pool_can_be_replaced(asset_registry: AssetRegistry):
    asset_registry.set_lender_pool_address(USDC, "0x0000000000000000000000000000000000000001")
    assert asset_registry.pool_for(USDC) == "0x0000000000000000000000000000000000000001"


def test_asset_lookup_ignores_case_and_padding(db):
    registry = AssetRegistry(db)
    registry.set_lender_pool_address(f"  {USDC} ", LENDER_POOL)

    for asset_id in (f"  {USDC} ", USDC, USDC.lower(), USDC.upper().replace("0X", "0x")):
        assert registry.is_asset_whitelisted(asset_id) is True
        assert registry.pool_for(asset_id) == LENDER_POOL

    assert registry.lender_pools() == {USDC.lower(): LENDER_POOL}


def test_unknown_zero_asset_is_not_whitelisted(asset_registry: AssetRegistry):
    assert asset_registry.is_asset_whitelisted(None) is False
    assert asset_registry.is_asset_whitelisted(ZERO_ADDRESS) is False


@pytest.mark.parametrize(
    "asset_id, pool",
    [
        (ZERO_ADDRESS, LENDER_POOL),
        (USDC, ZERO_ADDRESS),
        ("", LENDER_POOL),
        (USDC, None),
    ],
)
def test_zero_addresses_are_rejected(db, asset_id, pool):
    registry = AssetRegistry(db)

    with pytest.raises(InvalidAddressError):
        registry.set_lender_pool_address(asset_id, pool)

    assert registry.lender_pools() == {}


def test_is_zero_address():
    assert is_zero_address(None)
    assert is_zero_address("  ")
    assert is_zero_address("0x")
    assert is_zero_address("0X0000")
    assert not is_zero_address("0x0000000000000000000000000000000000000001")
    assert not is_zero_address(USDC)
