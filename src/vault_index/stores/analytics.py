"""Precomputed vault analytics, keyed by chain ID and vault address."""

import threading

from pydantic import BaseModel, Field

from vault_index.core.models import Address, APYSnapshot


class AggregatedVault(BaseModel):
    """Analytics computed for one vault outside of this service."""

    address: Address
    legacy_apy: APYSnapshot = Field(default_factory=APYSnapshot)


class AnalyticsStore:
    """
    Thread-safe in-memory store of aggregated vault analytics.

    Filled by :func:`vault_index.integrations.yearn_api.refresh_analytics` or
    directly with :meth:`set_vault`.

    """

    def __init__(self) -> None:
        self._vaults: dict[int, dict[str, AggregatedVault]] = {}
        self._lock = threading.Lock()

    def set_vault(self, chain_id: int, aggregated: AggregatedVault) -> None:
        """Add or replace the analytics of one vault."""
        with self._lock:
            self._vaults.setdefault(chain_id, {})[aggregated.address] = aggregated

    def get_vault(self, chain_id: int, address: str) -> AggregatedVault | None:
        """
        Get the analytics of one vault.

        Parameters
        ----------
        chain_id : int
            Chain ID
        address : str
            Vault address, any case

        Returns
        -------
        AggregatedVault | None
            Analytics if computed, None otherwise

        """
        with self._lock:
            return self._vaults.get(chain_id, {}).get(address.lower())

    def count(self, chain_id: int) -> int:
        """Number of vaults with analytics on a chain."""
        with self._lock:
            return len(self._vaults.get(chain_id, {}))

    def clear(self) -> None:
        """Remove all analytics."""
        with self._lock:
            self._vaults.clear()
