"""External stores read by the enrichment step."""

from vault_index.stores.analytics import AggregatedVault, AnalyticsStore
from vault_index.stores.meta import MetaStore, MetaStoreError, VaultMeta, load_meta_file

__all__ = [
    "AggregatedVault",
    "AnalyticsStore",
    "MetaStore",
    "MetaStoreError",
    "VaultMeta",
    "load_meta_file",
]
