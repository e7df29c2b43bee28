"""Data loading and configuration management."""

from vault_index.data.loader import (
    API_URL_ENV,
    META_PATH_ENV,
    SnapshotError,
    get_all_supported_chains,
    get_api_base_url,
    get_chain_config,
    get_chain_id,
    get_chain_name,
    get_default_meta_path,
    get_registry_addresses,
    load_chains,
    load_vault_snapshot,
)

__all__ = [
    "API_URL_ENV",
    "META_PATH_ENV",
    "SnapshotError",
    "get_all_supported_chains",
    "get_api_base_url",
    "get_chain_config",
    "get_chain_id",
    "get_chain_name",
    "get_default_meta_path",
    "get_registry_addresses",
    "load_chains",
    "load_vault_snapshot",
]
