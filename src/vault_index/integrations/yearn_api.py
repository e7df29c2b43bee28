"""Yearn REST API client for precomputed vault APY."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from vault_index.core.models import APYSnapshot
from vault_index.data import get_api_base_url
from vault_index.integrations.retry import RetryConfig, with_retry
from vault_index.stores.analytics import AggregatedVault, AnalyticsStore

logger = logging.getLogger(__name__)

_APY_SECTIONS = ("fees", "points", "composite")


class YearnAPIError(Exception):
    """Exception raised for Yearn API errors."""


def _is_transient(error: Exception) -> bool:
    """Timeouts, connection failures and 5xx responses are worth retrying."""
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code >= 500
    return isinstance(error, httpx.TransportError)


def _without_nulls(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


def parse_apy(data: dict[str, Any] | None) -> APYSnapshot:
    """
    Convert the ``apy`` object of an API vault into an APY snapshot.

    Missing or null values become zero.

    Parameters
    ----------
    data : dict[str, Any] | None
        ``apy`` object as returned by the API

    Returns
    -------
    APYSnapshot
        Parsed snapshot

    """
    if not data:
        return APYSnapshot()

    cleaned = _without_nulls(data)
    for section in _APY_SECTIONS:
        cleaned[section] = _without_nulls(cleaned.get(section) or {})
    return APYSnapshot.model_validate(cleaned)


class YearnAPIClient:
    """
    Client for the Yearn vaults API.

    Parameters
    ----------
    base_url : str | None
        API base URL. Uses ``YEARN_API_URL`` or the packaged default if None.
    timeout : float
        Request timeout in seconds
    retry_config : RetryConfig | None
        Backoff for transient failures
    client : httpx.Client | None
        HTTP client to use instead of creating one

    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.base_url = (base_url or get_api_base_url()).rstrip("/")
        self.retry_config = retry_config or RetryConfig()
        self.client = client or httpx.Client(timeout=timeout)

    def _get_json(self, url: str) -> Any:
        response = self.client.get(url)
        response.raise_for_status()
        return response.json()

    def get_vaults(self, chain_id: int) -> list[dict[str, Any]]:
        """
        Fetch every vault known to the API on a chain.

        Parameters
        ----------
        chain_id : int
            Chain ID

        Returns
        -------
        list[dict[str, Any]]
            Raw vault objects

        Raises
        ------
        YearnAPIError
            If the API request fails after retries or returns an unexpected payload

        """
        url = f"{self.base_url}/chains/{chain_id}/vaults/all"
        fetch = with_retry(self.retry_config, should_retry=_is_transient)(self._get_json)

        try:
            vaults = fetch(url)
        except httpx.TimeoutException as e:
            msg = f"Request timeout: {e}"
            raise YearnAPIError(msg) from e
        except httpx.HTTPStatusError as e:
            msg = f"HTTP error {e.response.status_code}: {e}"
            raise YearnAPIError(msg) from e
        except httpx.HTTPError as e:
            msg = f"HTTP request failed: {e}"
            raise YearnAPIError(msg) from e
        except ValueError as e:
            msg = f"Invalid JSON from {url}: {e}"
            raise YearnAPIError(msg) from e

        if not isinstance(vaults, list):
            msg = f"Expected a list of vaults from {url}, got {type(vaults).__name__}"
            raise YearnAPIError(msg)
        return vaults

    def get_aggregated_vaults(self, chain_id: int) -> list[AggregatedVault]:
        """
        Fetch and convert the APY of every vault on a chain.

        Entries without an address or with malformed values are skipped.

        Parameters
        ----------
        chain_id : int
            Chain ID

        Returns
        -------
        list[AggregatedVault]
            Analytics per vault

        """
        aggregated = []
        for raw in self.get_vaults(chain_id):
            address = raw.get("address")
            if not address:
                logger.warning("Skipping API vault without address on chain %d", chain_id)
                continue
            try:
                aggregated.append(AggregatedVault(address=address, legacy_apy=parse_apy(raw.get("apy"))))
            except ValidationError as e:
                logger.warning("Skipping API vault %s on chain %d: %s", address, chain_id, e)
        return aggregated

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self) -> "YearnAPIClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()


def refresh_analytics(store: AnalyticsStore, chain_id: int, client: YearnAPIClient | None = None) -> int:
    """
    Load the current APY of every vault on a chain into an analytics store.

    Parameters
    ----------
    store : AnalyticsStore
        Store to fill
    chain_id : int
        Chain ID
    client : YearnAPIClient | None
        API client. A default client is created and closed if None.

    Returns
    -------
    int
        Number of vaults stored

    Raises
    ------
    YearnAPIError
        If the API request fails

    """
    owned = client is None
    client = client or YearnAPIClient()
    try:
        aggregated = client.get_aggregated_vaults(chain_id)
    finally:
        if owned:
            client.close()

    for entry in aggregated:
        store.set_vault(chain_id, entry)
    logger.info("Stored APY for %d vaults on chain %d", len(aggregated), chain_id)
    return len(aggregated)
