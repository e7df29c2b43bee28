"""Curated vault metadata, keyed by chain ID and vault address."""

import logging
import threading
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from vault_index.core.models import ZERO_ADDRESS, Address, VaultDetails

logger = logging.getLogger(__name__)


class MetaStoreError(Exception):
    """Exception raised when curated metadata cannot be loaded."""


class VaultMeta(BaseModel):
    """
    Hand-maintained information about a vault.

    Attributes
    ----------
    address : str
        Vault address
    display_name : str
        Name shown instead of the contract name
    display_symbol : str
        Symbol shown instead of the contract symbol
    migration_available : bool
        Whether users should migrate out of this vault
    migration_target_vault : str
        Vault to migrate to
    hide_always : bool
        Leave this vault out of listings
    order : float
        Sort order in listings, lowest first
    details : VaultDetails | None
        Administrative overrides copied onto the vault record

    """

    address: Address
    display_name: str = ""
    display_symbol: str = ""
    migration_available: bool = False
    migration_target_vault: Address = ZERO_ADDRESS
    hide_always: bool = False
    order: float = 0.0
    details: VaultDetails | None = None


class MetaStore:
    """
    Thread-safe in-memory store of curated vault metadata.

    A miss is a normal outcome: :meth:`get_vault` returns None.

    """

    def __init__(self) -> None:
        self._vaults: dict[int, dict[str, VaultMeta]] = {}
        self._lock = threading.Lock()

    def set_vault(self, chain_id: int, meta: VaultMeta) -> None:
        """Add or replace the metadata of one vault."""
        with self._lock:
            self._vaults.setdefault(chain_id, {})[meta.address] = meta

    def get_vault(self, chain_id: int, address: str) -> VaultMeta | None:
        """
        Get the metadata of one vault.

        Parameters
        ----------
        chain_id : int
            Chain ID
        address : str
            Vault address, any case

        Returns
        -------
        VaultMeta | None
            Metadata if curated, None otherwise

        """
        with self._lock:
            return self._vaults.get(chain_id, {}).get(address.lower())

    def list_vaults(self, chain_id: int) -> list[VaultMeta]:
        """List the metadata of every curated vault on a chain."""
        with self._lock:
            return list(self._vaults.get(chain_id, {}).values())

    def clear(self) -> None:
        """Remove all metadata."""
        with self._lock:
            self._vaults.clear()


def load_meta_file(path: str | Path, store: MetaStore | None = None) -> MetaStore:
    """
    Load curated metadata from a YAML file.

    The file maps chain IDs to lists of vault entries::

        chains:
          1:
            - address: "0x..."
              display_name: "USDC"
              migration_available: true
              migration_target_vault: "0x..."

    Parameters
    ----------
    path : str | Path
        YAML file to read
    store : MetaStore | None
        Store to fill. A new store is created if None.

    Returns
    -------
    MetaStore
        The filled store

    Raises
    ------
    MetaStoreError
        If the file is missing, is not valid YAML, or holds an invalid entry

    """
    store = store or MetaStore()

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        msg = f"Cannot read metadata file {path}: {e}"
        raise MetaStoreError(msg) from e
    except yaml.YAMLError as e:
        msg = f"Invalid YAML in metadata file {path}: {e}"
        raise MetaStoreError(msg) from e

    chains = data.get("chains") or {}
    if not isinstance(chains, dict):
        msg = f"'chains' must be a mapping in {path}"
        raise MetaStoreError(msg)

    loaded = 0
    for chain_id, entries in chains.items():
        for index, entry in enumerate(entries or []):
            try:
                meta = VaultMeta.model_validate(entry)
            except ValidationError as e:
                msg = f"Invalid metadata entry #{index} for chain {chain_id}: {e}"
                raise MetaStoreError(msg) from e
            store.set_vault(int(chain_id), meta)
            loaded += 1

    logger.info("Loaded metadata for %d vaults from %s", loaded, path)
    return store
