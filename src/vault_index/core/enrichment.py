"""Merge of curated metadata and analytics into vault records."""

from typing import Protocol

from vault_index.core.models import (
    APYComposite,
    APYFees,
    APYPoints,
    APYSnapshot,
    MigrationStatus,
    VaultRecord,
)


class MetaSource(Protocol):
    """
    Interface of the curated metadata store.

    Methods
    -------
    get_vault(chain_id, address)
        Curated entry for a vault, or None. Entries expose ``display_name``,
        ``display_symbol``, ``migration_available``, ``migration_target_vault``
        and ``details``.

    """

    def get_vault(self, chain_id: int, address: str) -> object | None: ...


class AnalyticsSource(Protocol):
    """
    Interface of the analytics store.

    Methods
    -------
    get_vault(chain_id, address)
        Aggregated entry for a vault, or None. Entries expose ``legacy_apy``.

    """

    def get_vault(self, chain_id: int, address: str) -> object | None: ...


def merge_migration(vault: VaultRecord, chain_id: int, meta_store: MetaSource) -> VaultRecord:
    """
    Set the migration status of a vault from curated metadata.

    Parameters
    ----------
    vault : VaultRecord
        Vault to update in place
    chain_id : int
        Chain the vault lives on
    meta_store : MetaSource
        Curated metadata store

    Returns
    -------
    VaultRecord
        The same vault. Without a curated entry the status is unavailable with
        the zero address; a curated entry without migration points at the
        vault itself.

    """
    migration = MigrationStatus()
    vault_meta = meta_store.get_vault(chain_id, vault.address)

    if vault_meta is not None:
        migration_address = vault.address
        if vault_meta.migration_available:
            migration_address = vault_meta.migration_target_vault
        migration = MigrationStatus(
            available=vault_meta.migration_available,
            address=migration_address,
        )

    vault.migration = migration
    return vault


def merge_apy(vault: VaultRecord, chain_id: int, analytics_store: AnalyticsSource) -> VaultRecord:
    """
    Copy the precomputed APY of a vault from the analytics store.

    A vault without analytics gets a zero-valued snapshot.

    Parameters
    ----------
    vault : VaultRecord
        Vault to update in place
    chain_id : int
        Chain the vault lives on
    analytics_store : AnalyticsSource
        Analytics store

    Returns
    -------
    VaultRecord
        The same vault

    """
    apy = APYSnapshot()
    aggregated = analytics_store.get_vault(chain_id, vault.address)

    if aggregated is not None:
        legacy = aggregated.legacy_apy
        apy = APYSnapshot(
            type=legacy.type,
            gross_apr=legacy.gross_apr,
            net_apy=legacy.net_apy,
            points=APYPoints(
                week_ago=legacy.points.week_ago,
                month_ago=legacy.points.month_ago,
                inception=legacy.points.inception,
            ),
            composite=APYComposite(
                boost=legacy.composite.boost,
                pool_apy=legacy.composite.pool_apy,
                boosted_apr=legacy.composite.boosted_apr,
                base_apr=legacy.composite.base_apr,
                cvx_apr=legacy.composite.cvx_apr,
                rewards_apr=legacy.composite.rewards_apr,
            ),
            fees=APYFees(
                performance=legacy.fees.performance,
                withdrawal=legacy.fees.withdrawal,
                management=legacy.fees.management,
                keep_crv=legacy.fees.keep_crv,
                cvx_keep_crv=legacy.fees.cvx_keep_crv,
            ),
        )

    vault.apy = apy
    return vault


def merge_details(vault: VaultRecord, chain_id: int, meta_store: MetaSource) -> VaultRecord:
    """Copy curated details onto a vault. Vaults without curated details get None."""
    details = None
    vault_meta = meta_store.get_vault(chain_id, vault.address)

    if vault_meta is not None and vault_meta.details is not None:
        details = vault_meta.details.model_copy(deep=True)

    vault.details = details
    return vault
