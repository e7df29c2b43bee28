"""Chain configuration and ingestion snapshot loader."""

import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from vault_index.core.models import VaultRecord

logger = logging.getLogger(__name__)

API_URL_ENV = "YEARN_API_URL"
META_PATH_ENV = "VAULT_INDEX_META_PATH"


class SnapshotError(Exception):
    """Exception raised when an ingestion snapshot cannot be loaded."""


@lru_cache(maxsize=1)
def load_chains() -> dict[str, Any]:
    """
    Load the packaged chain configuration from chains.yaml.

    Returns
    -------
    dict[str, Any]
        Configuration including API settings and chains

    """
    path = Path(__file__).parent / "chains.yaml"
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def get_chain_config(chain: str) -> dict[str, Any]:
    """
    Get configuration for a specific chain.

    Parameters
    ----------
    chain : str
        Chain name (e.g., 'ethereum', 'fantom')

    Returns
    -------
    dict[str, Any]
        Chain configuration including chain ID and registries

    Raises
    ------
    KeyError
        If chain is not found in configuration

    """
    return load_chains()["chains"][chain]


def get_all_supported_chains() -> list[str]:
    """
    Get list of all supported chain names.

    Returns
    -------
    list[str]
        List of chain names

    """
    return list(load_chains()["chains"].keys())


def get_chain_id(chain: str) -> int:
    """
    Get numeric chain ID.

    Parameters
    ----------
    chain : str
        Chain name

    Returns
    -------
    int
        Chain ID

    """
    return get_chain_config(chain)["chain_id"]


def get_chain_name(chain_id: int) -> str | None:
    """
    Get the chain name for a numeric chain ID.

    Parameters
    ----------
    chain_id : int
        Chain ID

    Returns
    -------
    str | None
        Chain name, or None for an unconfigured chain

    """
    for name, config in load_chains()["chains"].items():
        if config["chain_id"] == chain_id:
            return name
    return None


def get_registry_addresses(chain: str) -> list[str]:
    """Get the vault registry addresses of a chain."""
    return list(get_chain_config(chain).get("registries", []))


def get_api_base_url() -> str:
    """Get the analytics API base URL, honouring the YEARN_API_URL override."""
    return os.environ.get(API_URL_ENV) or load_chains()["api"]["base_url"]


def get_default_meta_path() -> Path | None:
    """Get the curated metadata file set through VAULT_INDEX_META_PATH, if any."""
    value = os.environ.get(META_PATH_ENV)
    return Path(value) if value else None


def load_vault_snapshot(path: str | Path) -> dict[int, list[VaultRecord]]:
    """
    Load raw vaults from an ingestion snapshot.

    JSON files are read as JSON, anything else as YAML. The snapshot maps chain
    IDs to lists of raw vaults::

        chains:
          1:
            - address: "0x..."
              name: "USDC yVault"
              symbol: "yvUSDC"
              token: {address: "0x...", symbol: "USDC", name: "USD Coin", decimals: 6}

    Parameters
    ----------
    path : str | Path
        Snapshot file

    Returns
    -------
    dict[int, list[VaultRecord]]
        Raw vaults per chain ID

    Raises
    ------
    SnapshotError
        If the file cannot be read or holds an invalid vault

    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f) if path.suffix == ".json" else yaml.safe_load(f)
    except OSError as e:
        msg = f"Cannot read snapshot {path}: {e}"
        raise SnapshotError(msg) from e
    except (ValueError, yaml.YAMLError) as e:
        msg = f"Cannot parse snapshot {path}: {e}"
        raise SnapshotError(msg) from e

    chains = (data or {}).get("chains") or {}
    if not isinstance(chains, dict):
        msg = f"'chains' must be a mapping in {path}"
        raise SnapshotError(msg)

    snapshot: dict[int, list[VaultRecord]] = {}
    for chain_key, entries in chains.items():
        chain_id = int(chain_key)
        vaults = []
        for index, entry in enumerate(entries or []):
            try:
                vaults.append(VaultRecord.model_validate({**entry, "chain_id": chain_id}))
            except (TypeError, ValidationError) as e:
                msg = f"Invalid vault #{index} for chain {chain_id} in {path}: {e}"
                raise SnapshotError(msg) from e
        snapshot[chain_id] = vaults
        logger.debug("Loaded %d raw vaults for chain %d", len(vaults), chain_id)

    return snapshot
