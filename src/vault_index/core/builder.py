"""Vault builder orchestrating ingestion, naming and enrichment."""

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed

from vault_index.core.enrichment import AnalyticsSource, MetaSource, merge_apy, merge_details, merge_migration
from vault_index.core.models import VaultRecord
from vault_index.core.naming import build_names, build_symbol
from vault_index.core.registry import VaultRegistry

logger = logging.getLogger(__name__)


class VaultBuilder:
    """
    Populates the derived fields of the vaults held in :class:`VaultRegistry`.

    Workflow:
    1. Insert the raw vaults supplied by ingestion
    2. Derive names and symbols, preferring curated values
    3. Merge migration status and curated details from the metadata store
    4. Merge APY from the analytics store

    Every step is idempotent, so a vault can be refreshed any number of times
    as upstream data changes.

    Parameters
    ----------
    meta_store : MetaSource
        Curated metadata store
    analytics_store : AnalyticsSource
        Analytics store
    max_workers : int
        Maximum number of chains refreshed in parallel

    """

    def __init__(
        self,
        meta_store: MetaSource,
        analytics_store: AnalyticsSource,
        max_workers: int = 4,
    ) -> None:
        self.meta_store = meta_store
        self.analytics_store = analytics_store
        self.max_workers = max_workers

    def build(self, chain_id: int, vault: VaultRecord) -> VaultRecord:
        """
        Fill every derived field of a vault in place.

        Parameters
        ----------
        chain_id : int
            Chain the vault lives on
        vault : VaultRecord
            Vault to update

        Returns
        -------
        VaultRecord
            The same vault

        """
        vault_meta = self.meta_store.get_vault(chain_id, vault.address)
        meta_name = vault_meta.display_name if vault_meta is not None else ""
        meta_symbol = vault_meta.display_symbol if vault_meta is not None else ""

        build_names(vault, meta_name)
        build_symbol(vault, meta_symbol)
        merge_migration(vault, chain_id, self.meta_store)
        merge_details(vault, chain_id, self.meta_store)
        merge_apy(vault, chain_id, self.analytics_store)
        return vault

    def ingest(self, chain_id: int, vaults: Iterable[VaultRecord]) -> int:
        """
        Insert raw vaults and build their derived fields.

        Parameters
        ----------
        chain_id : int
            Chain the vaults live on
        vaults : Iterable[VaultRecord]
            Vaults as discovered on chain

        Returns
        -------
        int
            Number of distinct vaults ingested

        Raises
        ------
        ValueError
            If a vault belongs to another chain

        """
        addresses = set()
        for vault in vaults:
            self.build(chain_id, vault)
            VaultRegistry.insert(chain_id, vault)
            addresses.add(vault.address)
        logger.info("Ingested %d vaults on chain %d", len(addresses), chain_id)
        return len(addresses)

    def refresh_vault(self, chain_id: int, address: str) -> VaultRecord | None:
        """
        Rebuild one stored vault from the current store contents.

        Parameters
        ----------
        chain_id : int
            Chain ID
        address : str
            Vault address

        Returns
        -------
        VaultRecord | None
            The rebuilt vault, or None if it is not in the registry

        """
        vault = VaultRegistry.replace(chain_id, address, lambda v: self.build(chain_id, v))
        if vault is None:
            logger.debug("Vault %s not found on chain %d, skipping refresh", address, chain_id)
        else:
            logger.debug("Refreshed vault %s (%s) on chain %d", vault.address, vault.symbol, chain_id)
        return vault

    def refresh_chain(self, chain_id: int) -> int:
        """
        Rebuild every stored vault of a chain.

        Parameters
        ----------
        chain_id : int
            Chain ID

        Returns
        -------
        int
            Number of vaults refreshed

        """
        refreshed = 0
        for address in VaultRegistry.list_addresses(chain_id):
            if self.refresh_vault(chain_id, address) is not None:
                refreshed += 1
        logger.info("Refreshed %d vaults on chain %d", refreshed, chain_id)
        return refreshed

    def refresh_all(self, chain_ids: Iterable[int] | None = None) -> dict[int, int]:
        """
        Rebuild the vaults of several chains in parallel.

        Parameters
        ----------
        chain_ids : Iterable[int] | None
            Chains to refresh. Every chain in the registry if None.

        Returns
        -------
        dict[int, int]
            Number of vaults refreshed per chain

        """
        chains = list(chain_ids) if chain_ids is not None else VaultRegistry.list_chains()
        if not chains:
            return {}

        results: dict[int, int] = {}
        with ThreadPoolExecutor(max_workers=min(len(chains), self.max_workers)) as executor:
            future_to_chain = {executor.submit(self.refresh_chain, chain_id): chain_id for chain_id in chains}
            for future in as_completed(future_to_chain):
                results[future_to_chain[future]] = future.result()
        return results
