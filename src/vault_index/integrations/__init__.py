"""Clients for upstream data providers."""

from vault_index.integrations.retry import RetryConfig, with_retry
from vault_index.integrations.yearn_api import YearnAPIClient, YearnAPIError, parse_apy, refresh_analytics

__all__ = [
    "RetryConfig",
    "YearnAPIClient",
    "YearnAPIError",
    "parse_apy",
    "refresh_analytics",
    "with_retry",
]
