"""Data models for vault records and their derived snapshots."""

import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, PlainSerializer, model_validator

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_address(value: str) -> str:
    """
    Validate the format of an address and return its lowercase form.

    Parameters
    ----------
    value : str
        Hex encoded address, any case

    Returns
    -------
    str
        Lowercase address

    Raises
    ------
    ValueError
        If the value is not a 0x-prefixed 20 byte hex string

    """
    if not isinstance(value, str) or not _ADDRESS_RE.match(value):
        msg = f"Invalid address: {value!r}"
        raise ValueError(msg)
    return value.lower()


Address = Annotated[str, AfterValidator(normalize_address)]

# Serialized as a decimal string in JSON so API clients keep full precision
BigInt = Annotated[int, PlainSerializer(str, return_type=str, when_used="json")]


class Token(BaseModel):
    """
    Underlying token of a vault.

    Attributes
    ----------
    address : str
        Token contract address
    symbol : str
        Token symbol (e.g., 'USDC')
    decimals : int
        Number of decimal places
    name : str
        Full token name

    """

    address: Address = ZERO_ADDRESS
    symbol: str = ""
    decimals: int = 18
    name: str = ""


class Strategy(BaseModel):
    """Strategy attached to a vault. Fields beyond address and name are kept as-is."""

    model_config = ConfigDict(extra="allow")

    address: Address
    name: str = ""


class TVLSnapshot(BaseModel):
    """
    Value locked in a vault.

    Attributes
    ----------
    total_assets : int
        Total assets held, in token base units
    total_delegated_assets : int
        Assets delegated to other vaults, in token base units
    tvl_deposited : float
        USD value of deposited assets
    tvl_delegated : float
        USD value of delegated assets
    tvl : float
        Total USD value
    price : float
        USD price of one underlying token

    """

    total_assets: BigInt = 0
    total_delegated_assets: BigInt = 0
    tvl_deposited: float = 0.0
    tvl_delegated: float = 0.0
    tvl: float = 0.0
    price: float = 0.0


class APYFees(BaseModel):
    """Fees applied to the vault yield."""

    performance: float = 0.0
    withdrawal: float = 0.0
    management: float = 0.0
    keep_crv: float = 0.0
    cvx_keep_crv: float = 0.0


class APYPoints(BaseModel):
    """Yield measured over past windows."""

    week_ago: float = 0.0
    month_ago: float = 0.0
    inception: float = 0.0


class APYComposite(BaseModel):
    """Breakdown of a composite (boosted) yield."""

    boost: float = 0.0
    pool_apy: float = 0.0
    boosted_apr: float = 0.0
    base_apr: float = 0.0
    cvx_apr: float = 0.0
    rewards_apr: float = 0.0


class APYSnapshot(BaseModel):
    """
    Precomputed yield of a vault, as supplied by the analytics store.

    Attributes
    ----------
    type : str
        How the yield was computed (e.g., 'v2:averaged', 'crv')
    gross_apr : float
        Yield before fees
    net_apy : float
        Yield after fees, compounded
    fees : APYFees
        Fee breakdown
    points : APYPoints
        Historical yield points
    composite : APYComposite
        Composite breakdown for boosted vaults

    """

    type: str = ""
    gross_apr: float = 0.0
    net_apy: float = 0.0
    fees: APYFees = Field(default_factory=APYFees)
    points: APYPoints = Field(default_factory=APYPoints)
    composite: APYComposite = Field(default_factory=APYComposite)


class MigrationStatus(BaseModel):
    """Whether a vault can be migrated, and to which vault."""

    available: bool = False
    address: Address = ZERO_ADDRESS


class VaultDetails(BaseModel):
    """
    Curated administrative overrides for a vault.

    Attributes
    ----------
    management, governance, guardian, rewards : str
        Role addresses
    deposit_limit : int
        Maximum total deposits, in token base units
    available_deposit_limit : int | None
        Remaining deposit room, if known
    comment : str
        Free-text note shown to users
    apy_type_override, apy_override
        Replace the computed APY type and value
    order : float
        Sort order in listings
    performance_fee, management_fee : int
        Fee overrides in basis points

    """

    management: Address = ZERO_ADDRESS
    governance: Address = ZERO_ADDRESS
    guardian: Address = ZERO_ADDRESS
    rewards: Address = ZERO_ADDRESS
    deposit_limit: BigInt = 0
    available_deposit_limit: BigInt | None = None
    comment: str = ""
    apy_type_override: str = ""
    apy_override: float = 0.0
    order: float = Field(default=0.0, exclude=True)
    performance_fee: int = 0
    management_fee: int = 0
    deposits_disabled: bool = False
    withdrawals_disabled: bool = False
    allow_zap_in: bool = False
    allow_zap_out: bool = False
    retired: bool = False


class VaultRecord(BaseModel):
    """
    One vault on one chain, as served by the API.

    Raw fields come from the chain; ``display_*`` and ``formatted_*`` names are
    filled by :mod:`vault_index.core.naming`; ``migration`` and ``apy`` by
    :mod:`vault_index.core.enrichment`.

    Attributes
    ----------
    chain_id : int
        Numeric chain ID
    address : str
        Vault contract address
    registry : str
        Registry the vault was discovered from
    symbol, name : str
        Final symbol and name
    display_symbol, display_name : str
        Curated names, falling back to the contract values
    formatted_symbol, formatted_name : str
        Canonical names, always ``yv``-prefixed / ``yVault``-suffixed
    raw_symbol, raw_name : str
        Values reported by the contract; normalization reads from these
    price_per_share : int
        Share to underlying exchange rate, in token base units
    token : Token
        Underlying token
    strategies : list[Strategy]
        Attached strategies, in withdrawal queue order
    details : VaultDetails | None
        Curated overrides, None unless curated

    """

    chain_id: int
    address: Address
    registry: Address = ZERO_ADDRESS
    symbol: str = ""
    display_symbol: str = ""
    formatted_symbol: str = ""
    name: str = ""
    display_name: str = ""
    formatted_name: str = ""
    raw_symbol: str = Field(default="", exclude=True)
    raw_name: str = Field(default="", exclude=True)
    icon: str = ""
    version: str = ""
    type: str = ""
    inception: int = 0
    decimals: int = 18
    endorsed: bool = False
    emergency_shutdown: bool = False
    price_per_share: BigInt = 0
    token: Token = Field(default_factory=Token)
    tvl: TVLSnapshot = Field(default_factory=TVLSnapshot)
    apy: APYSnapshot = Field(default_factory=APYSnapshot)
    strategies: list[Strategy] = Field(default_factory=list)
    migration: MigrationStatus = Field(default_factory=MigrationStatus)
    details: VaultDetails | None = None

    @model_validator(mode="after")
    def capture_raw_names(self) -> "VaultRecord":
        if not self.raw_name:
            self.raw_name = self.name
        if not self.raw_symbol:
            self.raw_symbol = self.symbol
        return self
