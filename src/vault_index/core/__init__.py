"""Core functionality including models, naming, enrichment, and the vault registry."""

from vault_index.core.builder import VaultBuilder
from vault_index.core.enrichment import merge_apy, merge_details, merge_migration
from vault_index.core.models import (
    ZERO_ADDRESS,
    APYComposite,
    APYFees,
    APYPoints,
    APYSnapshot,
    MigrationStatus,
    Strategy,
    Token,
    TVLSnapshot,
    VaultDetails,
    VaultRecord,
)
from vault_index.core.naming import build_names, build_symbol
from vault_index.core.registry import VaultRegistry

__all__ = [
    "ZERO_ADDRESS",
    "APYComposite",
    "APYFees",
    "APYPoints",
    "APYSnapshot",
    "MigrationStatus",
    "Strategy",
    "TVLSnapshot",
    "Token",
    "VaultBuilder",
    "VaultDetails",
    "VaultRecord",
    "VaultRegistry",
    "build_names",
    "build_symbol",
    "merge_apy",
    "merge_details",
    "merge_migration",
]
