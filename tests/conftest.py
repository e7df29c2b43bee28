"""Pytest configuration for vault-index tests."""

import pytest

from vault_index.core.models import Token, VaultRecord
from vault_index.core.registry import VaultRegistry

VAULT_ADDRESS = "0xa354F35829Ae975e850e23e9615b11Da1B3dC4DE"
USDC_ADDRESS = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


@pytest.fixture(autouse=True)
def clear_registry():
    """Start every test with an empty vault registry."""
    VaultRegistry.clear()
    yield
    VaultRegistry.clear()


@pytest.fixture
def usdc_token():
    return Token(address=USDC_ADDRESS, symbol="USDC", decimals=6, name="USD Coin")


@pytest.fixture
def make_vault(usdc_token):
    """Factory for raw vaults as produced by ingestion."""

    def _make_vault(**overrides):
        fields = {
            "chain_id": 1,
            "address": VAULT_ADDRESS,
            "name": "USDC yVault",
            "symbol": "yvUSDC",
            "version": "0.4.3",
            "decimals": 6,
            "token": usdc_token,
        }
        fields.update(overrides)
        return VaultRecord(**fields)

    return _make_vault
