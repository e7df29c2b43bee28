"""Process-wide index of vault records, keyed by chain ID and address."""

import threading
from collections.abc import Callable

from vault_index.core.models import VaultRecord


class VaultRegistry:
    """
    Registry of vault records per chain.

    Every operation holds a re-entrant lock while it touches the index, so readers
    and the refresh pipeline can run in different threads. Records handed out
    are the stored instances; writers that need to rebuild a record go through
    :meth:`replace`, which swaps in a finished copy so readers never see a
    partially updated vault.

    Listing order is unspecified.

    """

    _vaults: dict[int, dict[str, VaultRecord]] = {}
    _lock = threading.RLock()

    @classmethod
    def insert(cls, chain_id: int, vault: VaultRecord) -> None:
        """
        Add or replace a vault.

        Parameters
        ----------
        chain_id : int
            Chain ID
        vault : VaultRecord
            Vault, stored under its own address

        Raises
        ------
        ValueError
            If the vault belongs to another chain

        """
        if vault.chain_id != chain_id:
            msg = f"Vault {vault.address} is on chain {vault.chain_id}, not {chain_id}"
            raise ValueError(msg)

        with cls._lock:
            cls._vaults.setdefault(chain_id, {})[vault.address] = vault

    @classmethod
    def list_vaults(cls, chain_id: int) -> list[VaultRecord]:
        """
        Get every vault on a chain.

        Parameters
        ----------
        chain_id : int
            Chain ID

        Returns
        -------
        list[VaultRecord]
            Stored vaults, empty for an unknown chain

        """
        with cls._lock:
            return list(cls._vaults.get(chain_id, {}).values())

    @classmethod
    def list_addresses(cls, chain_id: int) -> list[str]:
        """
        Get the address of every vault on a chain.

        Parameters
        ----------
        chain_id : int
            Chain ID

        Returns
        -------
        list[str]
            Lowercase vault addresses

        """
        with cls._lock:
            return list(cls._vaults.get(chain_id, {}).keys())

    @classmethod
    def find(cls, chain_id: int, address: str) -> tuple[VaultRecord | None, bool]:
        """
        Find one vault.

        Parameters
        ----------
        chain_id : int
            Chain ID
        address : str
            Vault address, any case

        Returns
        -------
        tuple[VaultRecord | None, bool]
            The stored vault and True, or None and False if not found

        """
        with cls._lock:
            vault = cls._vaults.get(chain_id, {}).get(address.lower())
        if vault is None:
            return None, False
        return vault, True

    @classmethod
    def replace(
        cls,
        chain_id: int,
        address: str,
        update: Callable[[VaultRecord], VaultRecord | None],
    ) -> VaultRecord | None:
        """
        Rebuild a vault on a copy and store the copy.

        The lock is only held to take the copy and to swap it in, so
        ``update`` can run in parallel for different vaults.

        Parameters
        ----------
        chain_id : int
            Chain ID
        address : str
            Vault address, any case
        update : Callable[[VaultRecord], VaultRecord | None]
            Mutates the copy it is given

        Returns
        -------
        VaultRecord | None
            The new stored vault, or None if no vault has this address

        """
        address = address.lower()
        while True:
            with cls._lock:
                current = cls._vaults.get(chain_id, {}).get(address)
                if current is None:
                    return None
                updated = current.model_copy(deep=True)

            update(updated)

            with cls._lock:
                # Rebuild if another writer swapped the vault in the meantime
                if cls._vaults.get(chain_id, {}).get(address) is current:
                    cls._vaults[chain_id][address] = updated
                    return updated

    @classmethod
    def list_chains(cls) -> list[int]:
        """Get the IDs of every chain holding at least one vault."""
        with cls._lock:
            return [chain_id for chain_id, vaults in cls._vaults.items() if vaults]

    @classmethod
    def count(cls, chain_id: int) -> int:
        """Number of vaults on a chain."""
        with cls._lock:
            return len(cls._vaults.get(chain_id, {}))

    @classmethod
    def clear(cls) -> None:
        """Remove all vaults (useful for testing)."""
        with cls._lock:
            cls._vaults.clear()
