"""Derivation of display and formatted names for vault records."""

from vault_index.core.models import VaultRecord

NAME_SUFFIX = "yVault"
SYMBOL_PREFIX = "yv"


def strip_quotes(value: str) -> str:
    """Remove every double quote character from a contract-reported string."""
    return value.replace('"', "")


def safe_string(value: str, fallback: str) -> str:
    """
    Return ``value`` unless it is empty, in which case return ``fallback``.

    Parameters
    ----------
    value : str
        Preferred value
    fallback : str
        Value used when ``value`` is empty

    Returns
    -------
    str
        First non-empty of the two, or an empty string

    """
    return value if value else fallback


def build_names(vault: VaultRecord, meta_name: str = "") -> VaultRecord:
    """
    Fill ``name``, ``display_name`` and ``formatted_name`` of a vault.

    The curated name wins over the contract name for display and formatting.
    Only the final ``name`` has quotes stripped; ``display_name`` keeps the
    contract value verbatim when there is no curated name.

    Parameters
    ----------
    vault : VaultRecord
        Vault to update in place
    meta_name : str
        Curated display name, empty when none

    Returns
    -------
    VaultRecord
        The same vault, for chaining

    """
    name = strip_quotes(vault.raw_name)
    display_name = vault.raw_name
    formatted_name = vault.token.name

    if meta_name:
        display_name = meta_name
    if not formatted_name.endswith(NAME_SUFFIX):
        formatted_name = f"{formatted_name} {NAME_SUFFIX}"
    if display_name and not display_name.endswith(NAME_SUFFIX):
        formatted_name = f"{display_name} {NAME_SUFFIX}"

    name = safe_string(name, display_name)
    name = safe_string(name, formatted_name)

    vault.name = name
    vault.display_name = display_name
    vault.formatted_name = formatted_name
    return vault


def build_symbol(vault: VaultRecord, meta_symbol: str = "") -> VaultRecord:
    """
    Fill ``symbol``, ``display_symbol`` and ``formatted_symbol`` of a vault.

    Parameters
    ----------
    vault : VaultRecord
        Vault to update in place
    meta_symbol : str
        Curated display symbol, empty when none

    Returns
    -------
    VaultRecord
        The same vault, for chaining

    """
    symbol = strip_quotes(vault.raw_symbol)
    formatted_symbol = vault.token.symbol
    display_symbol = meta_symbol

    if not formatted_symbol.startswith(SYMBOL_PREFIX):
        formatted_symbol = SYMBOL_PREFIX + formatted_symbol
    if display_symbol and not display_symbol.startswith(SYMBOL_PREFIX):
        formatted_symbol = SYMBOL_PREFIX + display_symbol

    symbol = safe_string(symbol, display_symbol)
    symbol = safe_string(symbol, formatted_symbol)
    display_symbol = safe_string(display_symbol, symbol)

    vault.symbol = symbol
    vault.display_symbol = display_symbol
    vault.formatted_symbol = formatted_symbol
    return vault
