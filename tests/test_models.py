"""Tests for Pydantic data models."""

import pytest
from pydantic import ValidationError

from vault_index.core.models import (
    ZERO_ADDRESS,
    APYSnapshot,
    MigrationStatus,
    Strategy,
    TVLSnapshot,
    VaultDetails,
    VaultRecord,
    normalize_address,
)

VAULT_ADDRESS = "0xa354F35829Ae975e850e23e9615b11Da1B3dC4DE"


def test_snapshots_default_to_zero(make_vault):
    """A fresh vault carries zero-valued snapshots, never None."""
    vault = make_vault()

    assert vault.tvl == TVLSnapshot()
    assert vault.tvl.total_assets == 0
    assert vault.apy == APYSnapshot()
    assert vault.apy.fees.performance == 0.0
    assert vault.apy.points.inception == 0.0
    assert vault.apy.composite.boost == 0.0
    assert vault.migration == MigrationStatus(available=False, address=ZERO_ADDRESS)
    assert vault.details is None
    assert vault.strategies == []


def test_address_is_lowercased(make_vault):
    """Addresses are validated and stored lowercase."""
    vault = make_vault()

    assert vault.address == VAULT_ADDRESS.lower()
    assert vault.token.address == vault.token.address.lower()


@pytest.mark.parametrize(
    "address",
    ["", "0x123", "a354F35829Ae975e850e23e9615b11Da1B3dC4DE", "0xZZ54F35829Ae975e850e23e9615b11Da1B3dC4DE"],
)
def test_invalid_address_rejected(address):
    """Malformed addresses fail validation."""
    with pytest.raises(ValidationError):
        VaultRecord(chain_id=1, address=address)


def test_normalize_address_rejects_non_string():
    """Only strings are accepted as addresses."""
    with pytest.raises(ValueError, match="Invalid address"):
        normalize_address(1234)


def test_raw_names_captured(make_vault):
    """Contract names are kept aside from the fields normalization rewrites."""
    vault = make_vault(name='My "Vault"', symbol="yvX")

    assert vault.raw_name == 'My "Vault"'
    assert vault.raw_symbol == "yvX"


def test_big_integers_serialize_as_strings(make_vault):
    """Arbitrary-precision integers keep full precision in JSON."""
    price = 10**40 + 7
    vault = make_vault(price_per_share=price, tvl=TVLSnapshot(total_assets=price))

    data = vault.model_dump(mode="json")

    assert data["price_per_share"] == str(price)
    assert data["tvl"]["total_assets"] == str(price)
    assert vault.model_dump()["price_per_share"] == price


def test_big_integers_accept_strings():
    """Integers supplied as decimal strings are parsed."""
    vault = VaultRecord(chain_id=1, address=VAULT_ADDRESS, price_per_share="1000000000000000000000000")

    assert vault.price_per_share == 10**24


def test_raw_names_not_serialized(make_vault):
    """Internal raw names are not part of the API payload."""
    data = make_vault().model_dump(mode="json")

    assert "raw_name" not in data
    assert "raw_symbol" not in data


def test_vault_details_defaults():
    """Details default to zero addresses and no overrides."""
    details = VaultDetails(deposit_limit=5 * 10**30, order=2.5)

    assert details.management == ZERO_ADDRESS
    assert details.available_deposit_limit is None
    assert details.deposit_limit == 5 * 10**30
    assert "order" not in details.model_dump()
    assert details.model_dump(mode="json")["deposit_limit"] == str(5 * 10**30)


def test_strategy_keeps_extra_fields():
    """Strategy descriptors are opaque and keep every field."""
    strategy = Strategy(address=VAULT_ADDRESS, name="StrategyLenderYieldOptimiser", debt_ratio=9500)

    assert strategy.name == "StrategyLenderYieldOptimiser"
    assert strategy.model_dump()["debt_ratio"] == 9500
